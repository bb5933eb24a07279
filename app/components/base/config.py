from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache


class CostParameters(BaseModel):
    """Rates and thresholds consumed by the cost calculation stage."""

    labor_cost_per_day: float = Field(1500, ge=0)
    working_hours_per_day: float = 8
    risk_buffer_percentage: float = 15
    currency: str = "CNY"

    # Third-party service heuristic
    dev_env_monthly_rate: float = Field(2000, ge=0)
    ci_cd_monthly_rate: float = Field(500, ge=0)
    team_size_threshold: int = 3
    total_hours_threshold: float = 200


class Settings(BaseSettings):
    """Centralized configuration for all components."""

    # Application
    app_name: str = "Presales Cost Estimation API"
    app_version: str = "1.0.0"
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    ollama_gen_model: str = "llama3.1:latest"
    ollama_timeout_seconds: int = 120
    ollama_temperature: float = 0.3
    ollama_max_tokens: int = 4096

    # Workflow
    workflow_timeout_seconds: float = 300

    # Cost calculation
    labor_cost_per_day: float = 1500
    working_hours_per_day: float = 8
    risk_buffer_percentage: float = 15
    currency: str = "CNY"
    dev_env_monthly_rate: float = 2000
    ci_cd_monthly_rate: float = 500
    team_size_threshold: int = 3
    total_hours_threshold: float = 200

    # Paths
    templates_path: str = "./data/templates"
    projects_path: str = "./data/projects"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def cost_parameters(self) -> CostParameters:
        """Cost stage parameters taken from this configuration."""
        return CostParameters(
            labor_cost_per_day=self.labor_cost_per_day,
            working_hours_per_day=self.working_hours_per_day,
            risk_buffer_percentage=self.risk_buffer_percentage,
            currency=self.currency,
            dev_env_monthly_rate=self.dev_env_monthly_rate,
            ci_cd_monthly_rate=self.ci_cd_monthly_rate,
            team_size_threshold=self.team_size_threshold,
            total_hours_threshold=self.total_hours_threshold,
        )


@lru_cache()
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
