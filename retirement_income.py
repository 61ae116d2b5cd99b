"""Safe-withdrawal income at retirement if saving stopped today."""

import math
from dataclasses import dataclass

from calculations import calculate_dollar_multiplier
from inflation import inflation_multiplier, nominal_to_real


@dataclass(frozen=True)
class RetirementIncomeInfo:
    years_to_retirement: int
    net_worth_at_retirement: float
    nominal_annual_income: float
    real_annual_income: float
    real_monthly_income: float


def calculate_projected_retirement_income(
    net_worth: float,
    years_to_retirement: float,
    annual_return_rate: float,
    inflation_rate: float,
    swr: float,
) -> float:
    """Annual income in today's money that ``net_worth`` supports at retirement.

    >>> calculate_projected_retirement_income(1_000_000, 0, 7, 3, 4)
    40000.0
    """

    future_net_worth = net_worth * calculate_dollar_multiplier(years_to_retirement, annual_return_rate)
    nominal_income = future_net_worth * (swr / 100)
    return nominal_to_real(nominal_income, years_to_retirement, inflation_rate)


def calculate_net_worth_for_retirement_income(
    target_real_income: float,
    years_to_retirement: float,
    annual_return_rate: float,
    inflation_rate: float,
    swr: float,
) -> float:
    """Net worth needed today for ``target_real_income`` at retirement.

    Inverse of :func:`calculate_projected_retirement_income`.
    """

    if target_real_income <= 0:
        return 0.0
    if swr <= 0:
        return math.inf
    nominal_income = target_real_income * inflation_multiplier(years_to_retirement, inflation_rate)
    required_future = nominal_income / (swr / 100)
    return required_future / calculate_dollar_multiplier(years_to_retirement, annual_return_rate)


def calculate_retirement_income_info(
    net_worth: float,
    years_to_retirement: int,
    annual_return_rate: float,
    inflation_rate: float,
    swr: float,
) -> RetirementIncomeInfo:
    years = max(0, years_to_retirement)
    future_net_worth = net_worth * calculate_dollar_multiplier(years, annual_return_rate)
    real_income = calculate_projected_retirement_income(
        net_worth, years, annual_return_rate, inflation_rate, swr
    )
    return RetirementIncomeInfo(
        years_to_retirement=years,
        net_worth_at_retirement=future_net_worth,
        nominal_annual_income=future_net_worth * (swr / 100),
        real_annual_income=real_income,
        real_monthly_income=real_income / 12,
    )
