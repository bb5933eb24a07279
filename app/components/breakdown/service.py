from typing import List, Optional
from app.components.base.component import BaseComponent
from app.components.base.exceptions import EmptyResultError, MissingPreconditionError
from app.components.base.logging import get_logger
from app.components.templates.service import TemplateSource, resolve_template
from app.utils.structured_generation import StructuredGenerator
from shared.schemas.analysis import AnalysisResult
from shared.schemas.function_module import FunctionBreakdown
from .models import BreakdownRequest
from .prompts import DEFAULT_BREAKDOWN_PROMPT

logger = get_logger(__name__)


class BreakdownService(BaseComponent[BreakdownRequest, FunctionBreakdown]):
    """Decompose an analysed requirement into function modules."""

    TEMPLATE_KIND = "function_breakdown"

    def __init__(
        self,
        generator: StructuredGenerator,
        templates: Optional[TemplateSource] = None,
    ):
        self.generator = generator
        self.templates = templates

    @property
    def component_name(self) -> str:
        return "breakdown"

    async def process(self, request: BreakdownRequest) -> FunctionBreakdown:
        if request.analysis is None:
            raise MissingPreconditionError(
                "requirement analysis is missing", component=self.component_name
            )

        template = await resolve_template(
            self.templates, self.TEMPLATE_KIND, DEFAULT_BREAKDOWN_PROMPT, request.industry
        )
        prompt = self.build_prompt(template, request.analysis)

        breakdown = await self.generator.generate(prompt, FunctionBreakdown)
        if not breakdown.modules:
            raise EmptyResultError(
                "function breakdown returned no modules", component=self.component_name
            )

        logger.info(
            "Function breakdown finished",
            modules=len(breakdown.modules),
            total_hours=sum(m.estimated_hours for m in breakdown.modules),
        )
        return breakdown

    @staticmethod
    def build_prompt(template: str, analysis: AnalysisResult) -> str:
        return (
            template
            .replace("{projectType}", analysis.project_type)
            .replace("{businessGoals}", _bullets(analysis.business_goals))
            .replace("{keyFeatures}", _bullets(analysis.key_features))
            .replace("{techStack}", ", ".join(analysis.tech_stack))
        )


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items)
