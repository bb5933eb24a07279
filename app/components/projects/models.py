from pydantic import Field
from typing import List, Literal, Optional
from datetime import datetime
from shared.schemas.analysis import AnalysisResult
from shared.schemas.base import CamelModel
from shared.schemas.cost import CostEstimate
from shared.schemas.function_module import FunctionModule

ProjectStatus = Literal["draft", "analyzing", "completed", "archived"]


class ProjectCreateRequest(CamelModel):
    """Request to create a new estimation project."""
    name: str = Field(..., min_length=1)
    industry: Optional[str] = None
    client_name: Optional[str] = None


class Project(CamelModel):
    """Project record."""
    project_id: str
    name: str
    industry: Optional[str] = None
    client_name: Optional[str] = None
    status: ProjectStatus = "draft"
    created_at: datetime
    updated_at: datetime


class RequirementCreateRequest(CamelModel):
    """Request to attach requirement text to a project."""
    raw_content: str


class Requirement(CamelModel):
    """Requirement record; parsed_content is filled by a successful analysis."""
    requirement_id: str
    project_id: str
    raw_content: str
    parsed_content: Optional[AnalysisResult] = None
    created_at: datetime
    updated_at: datetime


class StoredCostEstimate(CamelModel):
    """Cost estimate as persisted for a project."""
    project_id: str
    estimate: CostEstimate
    created_at: datetime


class ProjectEstimateResponse(CamelModel):
    """Everything persisted for a project's latest estimation."""
    project: Project
    functions: List[FunctionModule] = []
    cost: Optional[CostEstimate] = None
