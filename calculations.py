"""Core financial formulas for the FI tracker.

Every percentage is stored as a whole number (``7`` means 7%) and divided by
100 at the point of use. Degenerate inputs resolve to a safe value (``0``,
``math.inf`` or ``None``) instead of raising.
"""

import math
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Iterable, Mapping, Optional

from config import (
    DEFAULT_RETIREMENT_AGE,
    DEFAULT_SETTINGS,
    DEFAULT_YEARS_TO_RETIREMENT,
    MS_PER_YEAR,
    SECONDS_PER_YEAR,
)
from inflation import InflatedValue, calculate_inflated_spending, inflation_multiplier


@dataclass(frozen=True)
class UserSettings:
    """Assumptions driving every calculation."""

    current_rate: float = DEFAULT_SETTINGS["current_rate"]
    swr: float = DEFAULT_SETTINGS["swr"]
    yearly_contribution: float = DEFAULT_SETTINGS["yearly_contribution"]
    birth_date: Optional[date] = None
    monthly_spend: float = DEFAULT_SETTINGS["monthly_spend"]
    inflation_rate: float = DEFAULT_SETTINGS["inflation_rate"]
    base_monthly_budget: float = DEFAULT_SETTINGS["base_monthly_budget"]
    spending_growth_rate: float = DEFAULT_SETTINGS["spending_growth_rate"]


@dataclass(frozen=True)
class NetWorthEntry:
    """A recorded net-worth snapshot."""

    id: str
    amount: float
    timestamp: datetime


@dataclass(frozen=True)
class SwrAmounts:
    annual: float
    monthly: float
    weekly: float
    daily: float


@dataclass(frozen=True)
class FutureValue:
    """Results returned from :func:`calculate_future_value`."""

    total: float
    compounded_principal: float
    contribution_growth: float
    total_contributed: float
    total_interest: float


@dataclass(frozen=True)
class RealTimeNetWorth:
    total: float
    base_amount: float
    appreciation: float
    contributions: float


@dataclass(frozen=True)
class GrowthRates:
    per_second: float
    per_minute: float
    per_hour: float
    per_day: float
    per_year: float
    yearly_appreciation: float
    yearly_contributions: float


def _coerce_birth_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def merge_with_defaults(partial: Optional[Mapping] = None) -> UserSettings:
    """Build :class:`UserSettings` from a partial mapping.

    Keys that are missing or ``None`` take their value from
    :data:`config.DEFAULT_SETTINGS`. Unknown keys are ignored. ``birth_date``
    may be a :class:`date` or an ISO ``YYYY-MM-DD`` string.
    """

    values = dict(DEFAULT_SETTINGS)
    for f in fields(UserSettings):
        if partial and partial.get(f.name) is not None:
            values[f.name] = partial[f.name]
    values["birth_date"] = _coerce_birth_date(values.get("birth_date"))
    return UserSettings(**{f.name: values[f.name] for f in fields(UserSettings)})


def calculate_fi_target(monthly_spend: float, swr: float) -> float:
    """Return the net worth needed for ``monthly_spend`` at ``swr`` percent.

    >>> calculate_fi_target(4000, 4)
    1200000.0
    """

    if monthly_spend <= 0 or swr <= 0:
        return 0.0
    return monthly_spend * 12 / (swr / 100)


def calculate_swr_amounts(net_worth: float, swr: float) -> SwrAmounts:
    annual = net_worth * (swr / 100)
    return SwrAmounts(
        annual=annual,
        monthly=annual / 12,
        weekly=annual / 52,
        daily=annual / 365,
    )


def calculate_runway_years(net_worth: float, monthly_spend: float) -> float:
    """Years of spending covered by ``net_worth``; infinite without spending."""

    if monthly_spend <= 0:
        return math.inf
    return net_worth / (monthly_spend * 12)


def calculate_dollar_multiplier(years: float, annual_rate: float) -> float:
    """Growth of one dollar left invested for ``years`` at ``annual_rate``."""

    if years <= 0:
        return 1.0
    return (1 + annual_rate / 100) ** years


def calculate_future_value(
    principal: float,
    yearly_rate: float,
    years: float,
    yearly_contribution: float = 0.0,
) -> FutureValue:
    """Compound ``principal`` and yearly contributions over fractional years.

    Contributions are modelled in two parts: whole years use the end-of-year
    annuity formula, and the fractional first year contributes
    ``partial * yearly_contribution`` which then compounds over the full years
    that follow.

    Args:
        principal: Starting amount.
        yearly_rate: Annual return in percent.
        years: Elapsed years, may be fractional.
        yearly_contribution: Amount contributed per year.

    Returns:
        A :class:`FutureValue` with the total and its components.

    Raises:
        ValueError: If ``years`` is negative.
    """

    if years < 0:
        raise ValueError("years must be non-negative")

    r = yearly_rate / 100
    full_years = math.floor(years)
    partial_year = years - full_years

    compounded_principal = principal * (1 + r) ** years

    # Stable handling near zero interest to avoid catastrophic cancellation
    if abs(r) < 1e-12:
        annuity = yearly_contribution * full_years
    else:
        annuity = yearly_contribution * (((1 + r) ** full_years - 1) / r)
    partial_seed = partial_year * yearly_contribution * (1 + r) ** full_years
    contribution_growth = annuity + partial_seed

    total = compounded_principal + contribution_growth
    total_contributed = years * yearly_contribution
    return FutureValue(
        total=total,
        compounded_principal=compounded_principal,
        contribution_growth=contribution_growth,
        total_contributed=total_contributed,
        total_interest=total - principal - total_contributed,
    )


def calculate_unlocked_spending(
    net_worth: float,
    base_budget: float,
    spending_rate: float,
    years_elapsed: float = 0,
    inflation_rate: float = 0,
) -> float:
    """Monthly budget unlocked at ``net_worth`` under the spending-level policy."""

    inflated_base = base_budget * inflation_multiplier(years_elapsed, inflation_rate)
    return inflated_base + net_worth * (spending_rate / 100) / 12


def calculate_level_based_spending(
    net_worth: float, settings: UserSettings, years_from_now: float = 0
) -> InflatedValue:
    """Level-based monthly spend for a projected year, in both value views."""

    return calculate_inflated_spending(
        settings.base_monthly_budget,
        net_worth,
        settings.spending_growth_rate,
        years_from_now,
        settings.inflation_rate,
    )


def birth_year(settings: UserSettings) -> Optional[int]:
    return settings.birth_date.year if settings.birth_date else None


def years_to_retirement(birth_year: Optional[int], current_year: int) -> int:
    """Years left until the notional retirement age.

    Without a birth year a fixed horizon is assumed.
    """

    if birth_year is None:
        return DEFAULT_YEARS_TO_RETIREMENT
    return max(0, DEFAULT_RETIREMENT_AGE - (current_year - birth_year))


def latest_entry(entries: Iterable[NetWorthEntry]) -> Optional[NetWorthEntry]:
    """Return the most recent entry by timestamp, or ``None``."""

    entries = list(entries)
    if not entries:
        return None
    return max(entries, key=lambda e: e.timestamp)


def _now_for(timestamp: datetime, now: Optional[datetime]) -> datetime:
    if now is None:
        now = datetime.now(timestamp.tzinfo)
    return now


def elapsed_years(since: datetime, now: datetime) -> float:
    """Fractional years between two instants, clamped at zero."""

    elapsed_ms = (now - since).total_seconds() * 1000
    return max(0.0, elapsed_ms) / MS_PER_YEAR


def calculate_real_time_net_worth(
    entry: Optional[NetWorthEntry],
    settings: UserSettings,
    include_contributions: bool = False,
    now: Optional[datetime] = None,
) -> RealTimeNetWorth:
    """Extrapolate the anchor entry linearly to ``now``.

    Linear (simple interest) growth keeps the live figure smooth between
    refreshes; the yearly projection rows compound exactly instead.
    """

    if entry is None:
        return RealTimeNetWorth(total=0.0, base_amount=0.0, appreciation=0.0, contributions=0.0)

    now = _now_for(entry.timestamp, now)
    elapsed_ms = max(0.0, (now - entry.timestamp).total_seconds() * 1000)
    years_elapsed = elapsed_ms / MS_PER_YEAR
    ms_rate = settings.current_rate / 100 / MS_PER_YEAR

    appreciation = entry.amount * ms_rate * elapsed_ms

    contributions = 0.0
    if include_contributions and settings.yearly_contribution > 0:
        contributions = settings.yearly_contribution * years_elapsed
        # Contributions arrive evenly, so on average they grew for half the interval
        contributions += contributions * ms_rate * (elapsed_ms / 2)

    return RealTimeNetWorth(
        total=entry.amount + appreciation + contributions,
        base_amount=entry.amount,
        appreciation=appreciation,
        contributions=contributions,
    )


def calculate_growth_rates(
    current_net_worth: float, settings: UserSettings, include_contributions: bool = False
) -> GrowthRates:
    yearly_appreciation = current_net_worth * (settings.current_rate / 100)
    yearly_contributions = settings.yearly_contribution if include_contributions else 0.0
    yearly_total = yearly_appreciation + yearly_contributions
    return GrowthRates(
        per_second=yearly_total / SECONDS_PER_YEAR,
        per_minute=yearly_total / (SECONDS_PER_YEAR / 60),
        per_hour=yearly_total / (SECONDS_PER_YEAR / 3600),
        per_day=yearly_total / 365.25,
        per_year=yearly_total,
        yearly_appreciation=yearly_appreciation,
        yearly_contributions=yearly_contributions,
    )
