from typing import Optional
from app.components.base.component import BaseComponent
from app.components.base.exceptions import EmptyInputError
from app.components.base.logging import get_logger
from app.components.templates.service import TemplateSource, resolve_template
from app.utils.structured_generation import StructuredGenerator
from shared.schemas.analysis import AnalysisResult
from .models import AnalysisRequest
from .prompts import DEFAULT_ANALYSIS_PROMPT, REQUIREMENT_PLACEHOLDER

logger = get_logger(__name__)


class AnalysisService(BaseComponent[AnalysisRequest, AnalysisResult]):
    """Extract project type, goals, features, stack and risks from raw text."""

    TEMPLATE_KIND = "requirement_analysis"

    def __init__(
        self,
        generator: StructuredGenerator,
        templates: Optional[TemplateSource] = None,
    ):
        self.generator = generator
        self.templates = templates

    @property
    def component_name(self) -> str:
        return "analysis"

    async def process(self, request: AnalysisRequest) -> AnalysisResult:
        if not request.raw_requirement or not request.raw_requirement.strip():
            raise EmptyInputError("requirement text is empty", component=self.component_name)

        template = await resolve_template(
            self.templates, self.TEMPLATE_KIND, DEFAULT_ANALYSIS_PROMPT, request.industry
        )
        prompt = self.build_prompt(template, request.raw_requirement)

        analysis = await self.generator.generate(prompt, AnalysisResult)

        logger.info(
            "Requirement analysis finished",
            project_type=analysis.project_type,
            features=len(analysis.key_features),
            risks=len(analysis.risks),
        )
        return analysis

    @staticmethod
    def build_prompt(template: str, raw_requirement: str) -> str:
        """Substitute the requirement text into a template.

        Stored templates may contain literal braces (JSON examples), so this
        is a plain replace rather than str.format.
        """
        return template.replace(REQUIREMENT_PLACEHOLDER, raw_requirement)
