from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.components.base.config import get_settings
from app.components.base.logging import configure_logging, get_logger
from app.components.orchestrator.router import router as orchestrator_router
from app.components.projects.router import router as projects_router
from app.utils.ollama_client import OllamaClient


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    settings = get_settings()
    configure_logging(settings.environment)
    logger = get_logger("main")

    logger.info("Starting Presales Cost Estimation API", version=settings.app_version)

    # Verify Ollama connection (non-blocking)
    ollama_ok = await OllamaClient(settings).verify_connection()
    if ollama_ok:
        logger.info("Ollama connection verified", model=settings.ollama_gen_model)
    else:
        logger.warning("Ollama not available - estimation runs will fail")

    yield

    logger.info("Shutting down Presales Cost Estimation API")


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount component routers
app.include_router(projects_router, prefix="/api/v1")
app.include_router(orchestrator_router, prefix="/api/v1")


@app.get("/api/v1/health")
async def health_check():
    """Health check endpoint."""
    ollama_ok = await OllamaClient(settings).verify_connection()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "ollama": "connected" if ollama_ok else "unavailable",
    }


@app.get("/api/v1/config")
async def get_config():
    """Get current configuration (non-sensitive)."""
    return {
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "ollama_gen_model": settings.ollama_gen_model,
        "workflow_timeout_seconds": settings.workflow_timeout_seconds,
        "cost_parameters": settings.cost_parameters().model_dump(),
    }
