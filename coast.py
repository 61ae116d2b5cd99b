"""Coast FI: when compounding alone, with no further saving, reaches FI."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from calculations import calculate_fi_target, calculate_runway_years
from config import COAST_FI_SEARCH_YEARS
from inflation import inflation_multiplier

logger = logging.getLogger(__name__)

TargetSchedule = Callable[[int], float]


@dataclass(frozen=True)
class RunwayAndCoastInfo:
    runway_years: float
    coast_fi_percent: float
    fi_target: float
    projected_value_at_retirement: float
    fi_target_at_retirement: float
    years_to_retirement: int


def fi_target_schedule(
    monthly_spend: float, swr: float, inflation_rate: float, years_offset: int = 0
) -> TargetSchedule:
    """Return ``target(y)``, the FI target ``y`` years after ``years_offset``.

    ``monthly_spend`` is in today's money and is inflated over
    ``years_offset + y`` years before the target is computed.
    """

    def target(years_elapsed: int) -> float:
        spend = monthly_spend * inflation_multiplier(years_offset + years_elapsed, inflation_rate)
        return calculate_fi_target(spend, swr)

    return target


def solve_coast_year(
    present_value: float,
    annual_rate: float,
    target: TargetSchedule,
    horizon: int = COAST_FI_SEARCH_YEARS,
) -> Optional[int]:
    """Smallest ``y`` in ``0..horizon`` with ``present_value * (1+r)**y >= target(y)``.

    Returns ``None`` when no year inside the horizon qualifies.
    """

    growth = 1 + annual_rate / 100
    for y in range(horizon + 1):
        if present_value * growth ** y >= target(y):
            return y
    return None


def find_coast_fi_years(
    present_value: float,
    monthly_spend: float,
    annual_rate: float,
    inflation_rate: float,
    swr: float,
    years_offset: int = 0,
) -> Optional[int]:
    """Years until ``present_value`` coasts to the inflation-grown FI target."""

    if annual_rate <= 0 or monthly_spend <= 0 or swr <= 0:
        logger.debug(
            "Skipping coast FI search: rate=%s spend=%s swr=%s",
            annual_rate,
            monthly_spend,
            swr,
        )
        return None
    schedule = fi_target_schedule(monthly_spend, swr, inflation_rate, years_offset)
    return solve_coast_year(present_value, annual_rate, schedule)


def calculate_coast_fi_percent(
    current_net_worth: float,
    monthly_spend: float,
    years_to_retirement: float,
    annual_rate: float,
    inflation_rate: float,
    swr: float,
    years_offset: int = 0,
) -> float:
    """Percent of the FI target at retirement reached by compounding alone.

    With ``years_to_retirement == 0`` this is the current FI progress.
    """

    years = max(0, years_to_retirement)
    target = fi_target_schedule(monthly_spend, swr, inflation_rate, years_offset)(years)
    if target <= 0:
        return 0.0
    future_value = current_net_worth * (1 + annual_rate / 100) ** years
    return future_value / target * 100


def calculate_runway_and_coast_info(
    current_net_worth: float,
    monthly_spend: float,
    years_to_retirement: int,
    annual_rate: float,
    inflation_rate: float,
    swr: float,
) -> RunwayAndCoastInfo:
    years = max(0, years_to_retirement)
    future_target = fi_target_schedule(monthly_spend, swr, inflation_rate)(years)
    return RunwayAndCoastInfo(
        runway_years=calculate_runway_years(current_net_worth, monthly_spend),
        coast_fi_percent=calculate_coast_fi_percent(
            current_net_worth, monthly_spend, years, annual_rate, inflation_rate, swr
        ),
        fi_target=calculate_fi_target(monthly_spend, swr),
        projected_value_at_retirement=current_net_worth * (1 + annual_rate / 100) ** years,
        fi_target_at_retirement=future_target,
        years_to_retirement=years,
    )
