"""Cost estimate schema produced by the calculate stage."""

from typing import List

from pydantic import Field

from shared.schemas.base import CamelModel


class ThirdPartyService(CamelModel):
    """A priced external service line item."""

    name: str
    cost: float = Field(..., ge=0)


class CostBreakdown(CamelModel):
    """Cost per delivery phase plus third-party services."""

    development: float = Field(..., ge=0)
    testing: float = Field(..., ge=0)
    deployment: float = Field(..., ge=0)
    maintenance: float = Field(default=0, ge=0)
    third_party_services: List[ThirdPartyService] = Field(default_factory=list)


class CostEstimate(CamelModel):
    """Final quote.

    total_cost == labor + service + infrastructure + buffer, with the buffer
    rounded half up from (labor + service + infrastructure) * buffer_percentage / 100.
    """

    labor_cost: float = Field(..., ge=0)
    service_cost: float = Field(..., ge=0)
    infrastructure_cost: float = Field(..., ge=0)
    buffer_percentage: float = Field(..., ge=0, le=100)
    total_cost: float = Field(..., ge=0)
    breakdown: CostBreakdown
