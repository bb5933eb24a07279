from .service import ProjectService
from .models import Project, ProjectCreateRequest, Requirement, RequirementCreateRequest
from .router import router, get_project_service

__all__ = [
    "ProjectService",
    "Project",
    "ProjectCreateRequest",
    "Requirement",
    "RequirementCreateRequest",
    "router",
    "get_project_service",
]
