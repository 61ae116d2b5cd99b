"""Year-by-year net worth trajectory and the master financial evaluation."""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Sequence, Union

import numpy as np

from calculations import (
    GrowthRates,
    NetWorthEntry,
    RealTimeNetWorth,
    UserSettings,
    birth_year,
    calculate_fi_target,
    calculate_future_value,
    calculate_growth_rates,
    calculate_level_based_spending,
    calculate_real_time_net_worth,
    calculate_swr_amounts,
    elapsed_years,
    latest_entry,
)
from coast import find_coast_fi_years
from config import NOW_LABEL, PROJECTION_YEARS
from inflation import InflatedValue
from levels import LevelInfo, calculate_level_info
from milestones import FiMilestonesInfo, calculate_fi_milestones

logger = logging.getLogger(__name__)

Year = Union[int, str]


@dataclass(frozen=True)
class ProjectionRow:
    """One modelled year. ``year`` is ``"Now"`` for the live row."""

    year: Year
    year_offset: int
    age: Optional[int]
    years_from_entry: float
    net_worth: float
    interest: float
    contributed: float
    annual_swr: float
    monthly_swr: float
    weekly_swr: float
    daily_swr: float
    monthly_spend: float
    monthly_spend_today: float
    fi_target: float
    fi_progress: float
    coast_fi_year: Optional[int]
    coast_fi_age: Optional[int]
    is_fi_year: bool
    is_crossover: bool
    swr_covers_spend: bool

    @property
    def is_now(self) -> bool:
        return self.year == NOW_LABEL


@dataclass(frozen=True)
class InflatedRow:
    """A projection row with every monetary column in both value views."""

    year: Year
    age: Optional[int]
    net_worth: InflatedValue
    interest: InflatedValue
    contributed: InflatedValue
    annual_swr: InflatedValue
    monthly_swr: InflatedValue
    monthly_spend: InflatedValue
    fi_target: InflatedValue


_MONEY_COLUMNS = (
    "net_worth",
    "interest",
    "contributed",
    "annual_swr",
    "monthly_swr",
    "monthly_spend",
    "fi_target",
)


def _end_of_year(year: int, tzinfo) -> datetime:
    return datetime(year, 12, 31, 23, 59, 59, 999000, tzinfo=tzinfo)


def generate_projections(
    anchor_entry: Optional[NetWorthEntry],
    current_net_worth: float,
    current_appreciation: float,
    settings: UserSettings,
    apply_inflation: bool = False,
    use_spending_levels: bool = False,
    now: Optional[datetime] = None,
) -> list[ProjectionRow]:
    """Build the "Now" row plus one row per future calendar year.

    Args:
        anchor_entry: Most recent net-worth entry; extrapolation starts here.
        current_net_worth: Live net worth for the "Now" row.
        current_appreciation: Growth since the anchor, shown as the "Now"
            row's interest.
        settings: Calculation assumptions.
        apply_inflation: Express spending and FI targets in future dollars
            rather than today's dollars.
        use_spending_levels: Derive spending from the level policy instead of
            the static ``monthly_spend`` setting.
        now: Evaluation instant; defaults to the current time.

    Returns:
        A list of :class:`ProjectionRow`, empty when there is no anchor.
    """

    if anchor_entry is None:
        logger.debug("No anchor entry; returning empty projection")
        return []

    tzinfo = anchor_entry.timestamp.tzinfo
    if now is None:
        now = datetime.now(tzinfo)
    current_year = now.year
    born = birth_year(settings)

    def spend_for(net_worth: float, year_offset: int) -> tuple[float, float]:
        # (displayed spend, spend in today's dollars)
        if use_spending_levels:
            spend = calculate_level_based_spending(net_worth, settings, year_offset)
        else:
            spend = InflatedValue.from_real(settings.monthly_spend, year_offset, settings.inflation_rate)
        return (spend.nominal if apply_inflation else spend.real), spend.real

    def build_row(
        year: Year,
        calendar_year: int,
        year_offset: int,
        years_from_entry: float,
        net_worth: float,
        interest: float,
        contributed: float,
    ) -> ProjectionRow:
        monthly_spend, spend_today = spend_for(net_worth, year_offset)
        fi_target = calculate_fi_target(monthly_spend, settings.swr)
        swr = calculate_swr_amounts(net_worth, settings.swr)
        coast_years = find_coast_fi_years(
            net_worth,
            spend_today,
            settings.current_rate,
            settings.inflation_rate,
            settings.swr,
            years_offset=year_offset,
        )
        coast_fi_year = calendar_year + coast_years if coast_years is not None else None
        return ProjectionRow(
            year=year,
            year_offset=year_offset,
            age=calendar_year - born if born is not None else None,
            years_from_entry=years_from_entry,
            net_worth=net_worth,
            interest=interest,
            contributed=contributed,
            annual_swr=swr.annual,
            monthly_swr=swr.monthly,
            weekly_swr=swr.weekly,
            daily_swr=swr.daily,
            monthly_spend=monthly_spend,
            monthly_spend_today=spend_today,
            fi_target=fi_target,
            fi_progress=net_worth / fi_target * 100 if fi_target > 0 else 0.0,
            coast_fi_year=coast_fi_year,
            coast_fi_age=coast_fi_year - born if coast_fi_year is not None and born is not None else None,
            is_fi_year=False,
            is_crossover=False,
            swr_covers_spend=monthly_spend > 0 and swr.monthly >= monthly_spend,
        )

    rows = [
        build_row(
            NOW_LABEL,
            current_year,
            0,
            0.0,
            current_net_worth,
            current_appreciation,
            0.0,
        )
    ]

    calendar_years = current_year + np.arange(PROJECTION_YEARS)
    for offset, year in enumerate(calendar_years.tolist()):
        years_from_entry = elapsed_years(anchor_entry.timestamp, _end_of_year(year, tzinfo))
        fv = calculate_future_value(
            anchor_entry.amount,
            settings.current_rate,
            years_from_entry,
            settings.yearly_contribution,
        )
        rows.append(
            build_row(
                year,
                year,
                offset,
                years_from_entry,
                float(fv.total),
                float(fv.total_interest),
                float(fv.total_contributed),
            )
        )

    return _mark_first_occurrences(rows)


def _mark_first_occurrences(rows: list[ProjectionRow]) -> list[ProjectionRow]:
    """Flag the first FI year and the first crossover year."""

    fi_index = next((i for i, r in enumerate(rows) if r.swr_covers_spend), None)
    crossover_index = next(
        (i for i, r in enumerate(rows) if r.contributed > 0 and r.interest > r.contributed),
        None,
    )
    return [
        replace(row, is_fi_year=i == fi_index, is_crossover=i == crossover_index)
        for i, row in enumerate(rows)
    ]


def to_inflated_rows(projections: Sequence[ProjectionRow], inflation_rate: float) -> list[InflatedRow]:
    """Pair each monetary column with its today's-dollar equivalent.

    The projection is expected to carry future-dollar spending (generated with
    ``apply_inflation=True``), so every column is treated as nominal.
    """

    inflated = []
    for row in projections:
        values = {
            name: InflatedValue.from_nominal(getattr(row, name), row.year_offset, inflation_rate)
            for name in _MONEY_COLUMNS
        }
        for name, value in values.items():
            if not value.is_valid():
                logger.warning("Invalid %s for year %s: %s", name, row.year, value)
        inflated.append(InflatedRow(year=row.year, age=row.age, **values))
    return inflated


@dataclass
class CalculatedFinancials:
    """Everything derived from settings and entries in one evaluation."""

    evaluated_at: datetime
    current_net_worth: RealTimeNetWorth
    growth_rates: GrowthRates
    projections: list[ProjectionRow]
    level_info: LevelInfo
    fi_year: Optional[int]
    fi_age: Optional[int]
    crossover_year: Optional[int]
    current_fi_progress: float
    current_monthly_swr: float
    current_annual_swr: float
    fi_milestones: FiMilestonesInfo


def calculate_all_financials(
    settings: UserSettings,
    entries: Sequence[NetWorthEntry],
    include_contributions: bool = False,
    apply_inflation: bool = False,
    use_spending_levels: bool = False,
    now: Optional[datetime] = None,
) -> CalculatedFinancials:
    """Evaluate live valuation, projections, levels and milestones together."""

    anchor = latest_entry(entries)
    if now is None:
        now = datetime.now(anchor.timestamp.tzinfo if anchor else None)

    current = calculate_real_time_net_worth(anchor, settings, include_contributions, now=now)
    growth_rates = calculate_growth_rates(current.total, settings, include_contributions)
    projections = generate_projections(
        anchor,
        current.total,
        current.appreciation,
        settings,
        apply_inflation=apply_inflation,
        use_spending_levels=use_spending_levels,
        now=now,
    )
    level_info = calculate_level_info(current.total, settings, entries, now=now)

    fi_row = next((r for r in projections if r.is_fi_year), None)
    crossover_row = next((r for r in projections if r.is_crossover), None)

    if projections:
        current_fi_progress = projections[0].fi_progress
    else:
        target = calculate_fi_target(settings.monthly_spend, settings.swr)
        current_fi_progress = current.total / target * 100 if target > 0 else 0.0
    swr = calculate_swr_amounts(current.total, settings.swr)

    def calendar_year(row: Optional[ProjectionRow]) -> Optional[int]:
        if row is None:
            return None
        return now.year if row.is_now else row.year

    return CalculatedFinancials(
        evaluated_at=now,
        current_net_worth=current,
        growth_rates=growth_rates,
        projections=projections,
        level_info=level_info,
        fi_year=calendar_year(fi_row),
        fi_age=fi_row.age if fi_row else None,
        crossover_year=calendar_year(crossover_row),
        current_fi_progress=current_fi_progress,
        current_monthly_swr=swr.monthly,
        current_annual_swr=swr.annual,
        fi_milestones=calculate_fi_milestones(
            projections, settings, birth_year(settings), current_year=now.year
        ),
    )
