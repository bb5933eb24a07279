import json
import secrets
import aiofiles
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional
from pydantic import TypeAdapter
from app.components.base.component import BaseComponent
from app.components.base.config import get_settings
from app.components.base.exceptions import ProjectNotFoundError, RequirementNotFoundError
from shared.schemas.analysis import AnalysisResult
from shared.schemas.cost import CostEstimate
from shared.schemas.function_module import FunctionModule
from .models import (
    Project,
    ProjectCreateRequest,
    ProjectStatus,
    Requirement,
    RequirementCreateRequest,
    StoredCostEstimate,
)

_FUNCTION_LIST = TypeAdapter(List[FunctionModule])


class ProjectService(BaseComponent[ProjectCreateRequest, Project]):
    """File-backed project store.

    Layout under ``projects_path``::

        <project_id>/project.json
        <project_id>/requirements/<requirement_id>.json
        <project_id>/functions.json      (replaced as a whole)
        <project_id>/cost_estimate.json  (replaced as a whole)
    """

    def __init__(self, projects_path: Optional[str] = None):
        self.projects_path = Path(projects_path or get_settings().projects_path)

    @property
    def component_name(self) -> str:
        return "projects"

    async def process(self, request: ProjectCreateRequest) -> Project:
        """Create a new project in draft status."""
        now = datetime.now()
        project = Project(
            project_id=f"proj_{now.strftime('%Y%m%d')}_{secrets.token_hex(4)}",
            name=request.name,
            industry=request.industry,
            client_name=request.client_name,
            status="draft",
            created_at=now,
            updated_at=now,
        )
        await self._save_json(self._project_dir(project.project_id) / "project.json", project.model_dump(mode="json"))
        return project

    async def get_project(self, project_id: str) -> Project:
        data = await self._load_json(self._project_dir(project_id) / "project.json")
        if data is None:
            raise ProjectNotFoundError(f"Project {project_id} not found", component=self.component_name)
        return Project.model_validate(data)

    async def update_status(self, project_id: str, status: ProjectStatus) -> Project:
        project = await self.get_project(project_id)
        project.status = status
        project.updated_at = datetime.now()
        await self._save_json(self._project_dir(project_id) / "project.json", project.model_dump(mode="json"))
        return project

    async def create_requirement(self, project_id: str, request: RequirementCreateRequest) -> Requirement:
        await self.get_project(project_id)
        now = datetime.now()
        requirement = Requirement(
            requirement_id=f"req_{secrets.token_hex(6)}",
            project_id=project_id,
            raw_content=request.raw_content,
            created_at=now,
            updated_at=now,
        )
        await self._save_requirement(requirement)
        return requirement

    async def get_requirement(self, project_id: str, requirement_id: str) -> Requirement:
        data = await self._load_json(self._requirement_path(project_id, requirement_id))
        if data is None:
            raise RequirementNotFoundError(
                f"Requirement {requirement_id} not found for project {project_id}",
                component=self.component_name,
            )
        return Requirement.model_validate(data)

    async def save_requirement_analysis(
        self, project_id: str, requirement_id: str, analysis: AnalysisResult
    ) -> Requirement:
        requirement = await self.get_requirement(project_id, requirement_id)
        requirement.parsed_content = analysis
        requirement.updated_at = datetime.now()
        await self._save_requirement(requirement)
        return requirement

    async def replace_functions(self, project_id: str, functions: List[FunctionModule]) -> None:
        await self.get_project(project_id)
        await self._save_json(
            self._project_dir(project_id) / "functions.json",
            [fn.model_dump(mode="json") for fn in functions],
        )

    async def get_functions(self, project_id: str) -> List[FunctionModule]:
        data = await self._load_json(self._project_dir(project_id) / "functions.json")
        return _FUNCTION_LIST.validate_python(data or [])

    async def replace_cost(self, project_id: str, cost: CostEstimate) -> None:
        await self.get_project(project_id)
        stored = StoredCostEstimate(project_id=project_id, estimate=cost, created_at=datetime.now())
        await self._save_json(self._project_dir(project_id) / "cost_estimate.json", stored.model_dump(mode="json"))

    async def get_cost(self, project_id: str) -> Optional[CostEstimate]:
        data = await self._load_json(self._project_dir(project_id) / "cost_estimate.json")
        if data is None:
            return None
        return StoredCostEstimate.model_validate(data).estimate

    def _project_dir(self, project_id: str) -> Path:
        # Ids come from request bodies; keep them inside projects_path
        if not project_id or Path(project_id).name != project_id:
            raise ProjectNotFoundError(f"Project {project_id} not found", component=self.component_name)
        return self.projects_path / project_id

    def _requirement_path(self, project_id: str, requirement_id: str) -> Path:
        if not requirement_id or Path(requirement_id).name != requirement_id:
            raise RequirementNotFoundError(
                f"Requirement {requirement_id} not found", component=self.component_name
            )
        return self._project_dir(project_id) / "requirements" / f"{requirement_id}.json"

    async def _save_requirement(self, requirement: Requirement) -> None:
        await self._save_json(
            self._requirement_path(requirement.project_id, requirement.requirement_id),
            requirement.model_dump(mode="json"),
        )

    async def _save_json(self, filepath: Path, data: Any) -> Path:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(filepath, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        return filepath

    async def _load_json(self, filepath: Path) -> Optional[Any]:
        if not filepath.exists():
            return None
        async with aiofiles.open(filepath, "r", encoding="utf-8") as f:
            return json.loads(await f.read())
