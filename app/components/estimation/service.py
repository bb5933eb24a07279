from typing import List, Optional
from app.components.base.component import BaseComponent
from app.components.base.exceptions import MissingPreconditionError
from app.components.base.logging import get_logger
from app.components.templates.service import TemplateSource, resolve_template
from app.services.estimation_math import HoursSummary, round_half_up, summarize_hours
from app.utils.structured_generation import StructuredGenerator
from shared.schemas.analysis import AnalysisResult
from shared.schemas.estimation import EffortEstimation
from shared.schemas.function_module import FunctionModule
from .models import EstimationRequest
from .prompts import DEFAULT_ESTIMATION_PROMPT

logger = get_logger(__name__)

# Allowed gap between total_hours and the sum of the phase hours before we warn
PHASE_SUM_TOLERANCE_HOURS = 1.0


class EstimationService(BaseComponent[EstimationRequest, EffortEstimation]):
    """Estimate total effort and staffing from the function list."""

    TEMPLATE_KIND = "effort_estimation"

    def __init__(
        self,
        generator: StructuredGenerator,
        templates: Optional[TemplateSource] = None,
    ):
        self.generator = generator
        self.templates = templates

    @property
    def component_name(self) -> str:
        return "estimation"

    async def process(self, request: EstimationRequest) -> EffortEstimation:
        if not request.functions:
            raise MissingPreconditionError(
                "function module list is empty", component=self.component_name
            )
        if request.analysis is None:
            raise MissingPreconditionError(
                "requirement analysis is missing", component=self.component_name
            )

        hours = summarize_hours(request.functions)

        template = await resolve_template(
            self.templates, self.TEMPLATE_KIND, DEFAULT_ESTIMATION_PROMPT, request.industry
        )
        prompt = self.build_prompt(template, request.functions, hours, request.analysis)

        estimation = await self.generator.generate(prompt, EffortEstimation)

        phase_sum = (
            estimation.breakdown.development
            + estimation.breakdown.testing
            + estimation.breakdown.integration
        )
        if abs(phase_sum - estimation.total_hours) > PHASE_SUM_TOLERANCE_HOURS:
            logger.warning(
                "Phase hours do not add up to total hours",
                total_hours=estimation.total_hours,
                phase_sum=phase_sum,
            )

        logger.info(
            "Effort estimation finished",
            base_hours=hours.base_hours,
            weighted_hours=hours.weighted_hours,
            total_hours=estimation.total_hours,
            team_size=sum(m.count for m in estimation.team_composition),
        )
        return estimation

    @staticmethod
    def build_prompt(
        template: str,
        functions: List[FunctionModule],
        hours: HoursSummary,
        analysis: AnalysisResult,
    ) -> str:
        modules = "\n\n".join(
            f"{index}. {fn.module_name} - {fn.function_name}\n"
            f"   Difficulty: {fn.difficulty_level}, base hours: {fn.estimated_hours:g}h\n"
            f"   Description: {fn.description}"
            for index, fn in enumerate(functions, start=1)
        )
        return (
            template
            .replace("{moduleCount}", str(len(functions)))
            .replace("{baseHours}", f"{hours.base_hours:g}")
            .replace("{weightedHours}", str(round_half_up(hours.weighted_hours)))
            .replace("{modules}", modules)
            .replace("{projectType}", analysis.project_type)
            .replace("{techStack}", ", ".join(analysis.tech_stack))
        )
