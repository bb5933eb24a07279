from fastapi import APIRouter, Depends, HTTPException
from app.components.base.exceptions import ComponentError
from .models import (
    Project,
    ProjectCreateRequest,
    ProjectEstimateResponse,
    Requirement,
    RequirementCreateRequest,
)
from .service import ProjectService

router = APIRouter(prefix="/projects", tags=["Projects"])

_service: ProjectService | None = None


def get_project_service() -> ProjectService:
    global _service
    if _service is None:
        _service = ProjectService()
    return _service


@router.post("", response_model=Project)
async def create_project(
    request: ProjectCreateRequest,
    service: ProjectService = Depends(get_project_service),
) -> Project:
    """Create a new estimation project."""
    return await service.process(request)


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> Project:
    try:
        return await service.get_project(project_id)
    except ComponentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.post("/{project_id}/requirements", response_model=Requirement)
async def create_requirement(
    project_id: str,
    request: RequirementCreateRequest,
    service: ProjectService = Depends(get_project_service),
) -> Requirement:
    """Attach requirement text to a project."""
    try:
        return await service.create_requirement(project_id, request)
    except ComponentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/{project_id}/estimate", response_model=ProjectEstimateResponse)
async def get_project_estimate(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectEstimateResponse:
    """Persisted function list and cost estimate for a project."""
    try:
        project = await service.get_project(project_id)
    except ComponentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
    return ProjectEstimateResponse(
        project=project,
        functions=await service.get_functions(project_id),
        cost=await service.get_cost(project_id),
    )
