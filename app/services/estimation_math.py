"""
Deterministic numeric derivations for effort and cost estimation.

Everything here is a pure function of its arguments: difficulty weighting,
hour to work-day conversion and cost composition with a risk buffer. The
stages call into this module so that the numbers in a quote can be
reproduced without any model output.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from app.components.base.exceptions import InvalidConfigError, InvalidStateError

# Hour multiplier per difficulty level, strictly increasing with complexity
DIFFICULTY_MULTIPLIERS = {
    "simple": 1.0,
    "medium": 1.5,
    "complex": 2.5,
    "very_complex": 4.0,
}

DEFAULT_MULTIPLIER = 1.0


@dataclass(frozen=True)
class HoursSummary:
    """Raw and difficulty-weighted hour totals for a set of functions."""
    base_hours: float
    weighted_hours: float


@dataclass(frozen=True)
class CostComposition:
    """Risk buffer and final total derived from the three cost components."""
    buffer_amount: int
    total_cost: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero.

    The built-in round() uses banker's rounding, which would make a
    buffer of 0.5 round to 0.
    """
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def _field(fn: Union[Mapping[str, Any], Any], snake: str, camel: str) -> Any:
    if isinstance(fn, Mapping):
        return fn.get(snake, fn.get(camel))
    return getattr(fn, snake)


def weighted_hours(fn: Union[Mapping[str, Any], Any]) -> float:
    """Estimated hours of one function scaled by its difficulty multiplier.

    Accepts a FunctionModule model or a plain mapping with either snake_case
    or camelCase keys. Unknown difficulty levels weigh 1.0.
    """
    hours = _field(fn, "estimated_hours", "estimatedHours") or 0
    level = _field(fn, "difficulty_level", "difficultyLevel")
    level = getattr(level, "value", level)
    return hours * DIFFICULTY_MULTIPLIERS.get(level, DEFAULT_MULTIPLIER)


def summarize_hours(functions: Iterable[Union[Mapping[str, Any], Any]]) -> HoursSummary:
    """Sum raw and weighted hours over a function list."""
    base = 0.0
    weighted = 0.0
    for fn in functions:
        base += _field(fn, "estimated_hours", "estimatedHours") or 0
        weighted += weighted_hours(fn)
    return HoursSummary(base_hours=base, weighted_hours=weighted)


def hours_to_work_days(hours: float, hours_per_day: float) -> int:
    """Convert hours to whole work days, rounding partial days up."""
    if not hours_per_day or hours_per_day <= 0 or not math.isfinite(hours_per_day):
        raise InvalidConfigError(
            f"hours_per_day must be a positive number, got {hours_per_day!r}",
            component="estimation_math",
        )
    if hours < 0 or not math.isfinite(hours):
        raise InvalidStateError(
            f"hours must be a finite non-negative number, got {hours!r}",
            component="estimation_math",
        )
    return math.ceil(hours / hours_per_day)


def compose_cost(
    labor_cost: float,
    service_cost: float,
    infrastructure_cost: float,
    buffer_percentage: float,
) -> CostComposition:
    """Apply the risk buffer to the base cost.

    base = labor + service + infrastructure
    buffer_amount = round_half_up(base * buffer_percentage / 100)
    total_cost = base + buffer_amount
    """
    if not 0 <= buffer_percentage <= 100:
        raise InvalidConfigError(
            f"buffer_percentage must be within [0, 100], got {buffer_percentage!r}",
            component="estimation_math",
        )
    components = {
        "labor_cost": labor_cost,
        "service_cost": service_cost,
        "infrastructure_cost": infrastructure_cost,
    }
    for name, value in components.items():
        if value < 0 or not math.isfinite(value):
            raise InvalidStateError(
                f"{name} must be a finite non-negative number, got {value!r}",
                component="estimation_math",
            )

    base = labor_cost + service_cost + infrastructure_cost
    buffer_amount = round_half_up(base * buffer_percentage / 100)
    return CostComposition(buffer_amount=buffer_amount, total_cost=base + buffer_amount)


def format_currency(amount: float, currency: str = "CNY") -> str:
    """Display an amount with its currency symbol and thousands separators."""
    symbol = "¥" if currency == "CNY" else "$"
    if float(amount).is_integer():
        return f"{symbol}{int(amount):,}"
    return f"{symbol}{amount:,.2f}"
