"""Nominal and real (today's purchasing power) value conversions.

``nominal`` is the actual future currency amount, ``real`` is what that amount
is worth in today's money. At zero elapsed years both are equal.
"""

import math
from dataclasses import dataclass
from typing import Literal

InflationDisplayMode = Literal["nominal", "real"]


def inflation_multiplier(years_from_now: float, inflation_rate: float) -> float:
    """Return ``(1 + inflation_rate/100) ** years_from_now``.

    Non-positive ``years_from_now`` returns exactly ``1``; inflation is never
    extrapolated backward.
    """

    if years_from_now <= 0:
        return 1.0
    return (1 + inflation_rate / 100) ** years_from_now


def nominal_to_real(nominal: float, years_from_now: float, inflation_rate: float) -> float:
    """Deflate a future amount to today's purchasing power.

    >>> round(nominal_to_real(1344, 10, 3))
    1000
    """
    if years_from_now <= 0:
        return nominal
    return nominal / inflation_multiplier(years_from_now, inflation_rate)


def real_to_nominal(real: float, years_from_now: float, inflation_rate: float) -> float:
    """Inflate a today's-money amount to its future equivalent.

    >>> round(real_to_nominal(1000, 10, 3))
    1344
    """
    if years_from_now <= 0:
        return real
    return real * inflation_multiplier(years_from_now, inflation_rate)


@dataclass(frozen=True)
class InflatedValue:
    """A monetary value carried in both its nominal and real form."""

    nominal: float
    real: float

    @classmethod
    def from_nominal(cls, nominal: float, years_from_now: float, inflation_rate: float) -> "InflatedValue":
        return cls(nominal, nominal_to_real(nominal, years_from_now, inflation_rate))

    @classmethod
    def from_real(cls, real: float, years_from_now: float, inflation_rate: float) -> "InflatedValue":
        return cls(real_to_nominal(real, years_from_now, inflation_rate), real)

    @classmethod
    def current(cls, value: float) -> "InflatedValue":
        """Year-0 value, where nominal and real coincide."""
        return cls(value, value)

    @classmethod
    def zero(cls) -> "InflatedValue":
        return cls(0.0, 0.0)

    def __add__(self, other: "InflatedValue") -> "InflatedValue":
        return InflatedValue(self.nominal + other.nominal, self.real + other.real)

    def __sub__(self, other: "InflatedValue") -> "InflatedValue":
        return InflatedValue(self.nominal - other.nominal, self.real - other.real)

    def __mul__(self, scalar: float) -> "InflatedValue":
        return InflatedValue(self.nominal * scalar, self.real * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "InflatedValue":
        # Division by zero yields the zero value rather than raising
        if scalar == 0:
            return InflatedValue.zero()
        return InflatedValue(self.nominal / scalar, self.real / scalar)

    def is_valid(self) -> bool:
        """Return ``False`` if either component is NaN or infinite."""
        return math.isfinite(self.nominal) and math.isfinite(self.real)

    def display(self, mode: InflationDisplayMode) -> float:
        return get_display_value(self, mode)


def get_display_value(value: InflatedValue, mode: InflationDisplayMode) -> float:
    return value.nominal if mode == "nominal" else value.real


def display_mode_suffix(mode: InflationDisplayMode, short: bool = False) -> str:
    """Label suffix describing which side of an ``InflatedValue`` is shown."""
    if mode == "real":
        return "(today's $)" if short else "(in today's dollars)"
    return "(future $)" if short else "(in future dollars)"


def calculate_inflated_spending(
    base_monthly_budget: float,
    net_worth: float,
    spending_growth_rate: float,
    years_from_now: float,
    inflation_rate: float,
) -> InflatedValue:
    """Monthly spending for a future year under the spending-level policy.

    The base budget is a today's-money lifestyle floor and is inflated to keep
    its purchasing power. The net-worth portion (``spending_growth_rate`` percent
    of net worth per year, spread over 12 months) is taken from the projected
    nominal net worth as-is: that net worth already grows in nominal terms, so
    inflating the portion again would count inflation twice.

    Args:
        base_monthly_budget: Budget floor in today's money.
        net_worth: Projected nominal net worth for the year.
        spending_growth_rate: Percent of net worth added to yearly spending.
        years_from_now: Years from the base year.
        inflation_rate: Annual inflation rate in percent.

    Returns:
        The monthly spend as an :class:`InflatedValue`.
    """

    multiplier = inflation_multiplier(years_from_now, inflation_rate)
    nominal = base_monthly_budget * multiplier + net_worth * (spending_growth_rate / 100) / 12
    return InflatedValue(nominal, nominal / multiplier)


def verify_spending_calculation(
    base_monthly_budget: float,
    net_worth_nominal: float,
    spending_growth_rate: float,
    years_from_now: float,
    inflation_rate: float,
    tolerance: float = 0.01,
) -> tuple[bool, float, float]:
    """Re-derive the real monthly spend from first principles.

    The real spend must equal ``base + real_net_worth * rate / 12`` where
    ``real_net_worth`` is the nominal net worth deflated to today's money.

    Returns:
        ``(is_correct, expected_real, actual_real)``.
    """

    spending = calculate_inflated_spending(
        base_monthly_budget,
        net_worth_nominal,
        spending_growth_rate,
        years_from_now,
        inflation_rate,
    )
    net_worth_real = net_worth_nominal / inflation_multiplier(years_from_now, inflation_rate)
    expected = base_monthly_budget + net_worth_real * (spending_growth_rate / 100) / 12
    return abs(spending.real - expected) < tolerance, expected, spending.real
