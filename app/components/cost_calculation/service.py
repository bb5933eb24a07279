import math
from typing import List, Optional
from pydantic import ValidationError
from app.components.base.component import BaseComponent
from app.components.base.config import CostParameters, get_settings
from app.components.base.exceptions import InvalidStateError, MissingPreconditionError
from app.components.base.logging import get_logger
from app.services.estimation_math import compose_cost, hours_to_work_days
from app.utils.structured_generation import describe_validation_error
from shared.schemas.cost import CostBreakdown, CostEstimate, ThirdPartyService
from shared.schemas.estimation import EffortEstimation
from .models import CostCalculationRequest

logger = get_logger(__name__)

DEV_ENV_SERVICE_NAME = "Cloud servers (dev/test environment)"
CI_CD_SERVICE_NAME = "CI/CD tooling"
DAYS_PER_BILLING_MONTH = 30


class CostCalculationService(BaseComponent[CostCalculationRequest, CostEstimate]):
    """Turn an effort estimate into a priced quote.

    Pure arithmetic over the estimation and the configured rates; no model call.
    """

    def __init__(self, parameters: Optional[CostParameters] = None):
        self.parameters = parameters or get_settings().cost_parameters()

    @property
    def component_name(self) -> str:
        return "cost_calculation"

    async def process(self, request: CostCalculationRequest) -> CostEstimate:
        if request.estimation is None:
            raise MissingPreconditionError(
                "effort estimation is missing", component=self.component_name
            )
        estimation = self._validate_estimation(request.estimation)
        return self.calculate(estimation)

    def calculate(self, estimation: EffortEstimation) -> CostEstimate:
        params = self.parameters
        per_day = params.labor_cost_per_day

        work_days = hours_to_work_days(estimation.total_hours, params.working_hours_per_day)
        labor_cost = work_days * per_day

        phases = estimation.breakdown
        development_cost = hours_to_work_days(phases.development, params.working_hours_per_day) * per_day
        testing_cost = hours_to_work_days(phases.testing, params.working_hours_per_day) * per_day
        integration_cost = hours_to_work_days(phases.integration, params.working_hours_per_day) * per_day

        services = self.estimate_third_party_services(estimation)
        service_cost = sum(s.cost for s in services)
        infrastructure_cost = 0

        composition = compose_cost(
            labor_cost, service_cost, infrastructure_cost, params.risk_buffer_percentage
        )

        logger.info(
            "Cost calculation finished",
            work_days=work_days,
            labor_cost=labor_cost,
            service_cost=service_cost,
            buffer_amount=composition.buffer_amount,
            total_cost=composition.total_cost,
        )

        return CostEstimate(
            labor_cost=labor_cost,
            service_cost=service_cost,
            infrastructure_cost=infrastructure_cost,
            buffer_percentage=params.risk_buffer_percentage,
            total_cost=composition.total_cost,
            breakdown=CostBreakdown(
                development=development_cost,
                testing=testing_cost,
                # Integration effort is quoted as deployment
                deployment=integration_cost,
                maintenance=0,
                third_party_services=services,
            ),
        )

    def estimate_third_party_services(self, estimation: EffortEstimation) -> List[ThirdPartyService]:
        """Heuristic line items for environments and tooling.

        A dev/test environment once the team reaches ``team_size_threshold``
        people, CI/CD tooling once the effort exceeds ``total_hours_threshold``.
        Both are billed per started month of the average engagement.
        """
        team = estimation.team_composition
        if not team:
            raise InvalidStateError("team composition is empty", component=self.component_name)

        params = self.parameters
        team_size = sum(member.count for member in team)
        avg_duration = sum(member.duration for member in team) / len(team)
        months = math.ceil(avg_duration / DAYS_PER_BILLING_MONTH)

        services: List[ThirdPartyService] = []
        if team_size >= params.team_size_threshold:
            services.append(ThirdPartyService(
                name=DEV_ENV_SERVICE_NAME,
                cost=months * params.dev_env_monthly_rate,
            ))
        if estimation.total_hours > params.total_hours_threshold:
            services.append(ThirdPartyService(
                name=CI_CD_SERVICE_NAME,
                cost=months * params.ci_cd_monthly_rate,
            ))
        return services

    def _validate_estimation(self, raw: dict) -> EffortEstimation:
        team = raw.get("team_composition", raw.get("teamComposition"))
        if not team:
            raise InvalidStateError("team composition is empty", component=self.component_name)
        try:
            return EffortEstimation.model_validate(raw)
        except ValidationError as e:
            raise InvalidStateError(
                f"effort estimation is malformed: {describe_validation_error(e)}",
                component=self.component_name,
            )
