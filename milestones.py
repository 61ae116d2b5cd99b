"""FI milestone catalog and its evaluation against a projected trajectory.

The catalog is data: each :class:`MilestoneDefinition` carries a type and a
target value, and the type selects the row predicate used to locate it. A
milestone is located at the first trajectory row where its predicate holds
and counts as achieved when that row falls in the current calendar year.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Literal, Optional, Sequence

from calculations import UserSettings, calculate_fi_target, calculate_runway_years, years_to_retirement
from coast import calculate_coast_fi_percent
from config import NOW_LABEL
from inflation import inflation_multiplier
from retirement_income import calculate_projected_retirement_income

logger = logging.getLogger(__name__)

MilestoneType = Literal["percentage", "lifestyle", "runway", "coast", "special", "retirement_income"]


@dataclass(frozen=True)
class RowContext:
    """A projection row together with the derived values predicates need."""

    row: object
    year_offset: int
    calendar_year: int
    age: Optional[int]
    years_to_retirement: int
    settings: UserSettings


@dataclass(frozen=True)
class Location:
    year: Optional[int]
    age: Optional[int]
    net_worth: Optional[float]
    is_achieved: bool


NOT_FOUND = Location(year=None, age=None, net_worth=None, is_achieved=False)

RowPredicate = Callable[[RowContext, float], bool]
Locator = Callable[[Sequence[RowContext], float], Location]


@dataclass(frozen=True)
class MilestoneDefinition:
    id: str
    type: MilestoneType
    name: str
    short_name: str
    description: str
    target_value: float
    locate: Optional[Locator] = None
    alias_of: Optional[str] = None


@dataclass(frozen=True)
class FiMilestone:
    id: str
    type: MilestoneType
    name: str
    short_name: str
    description: str
    target_value: float
    is_achieved: bool
    year: Optional[int]
    age: Optional[int]
    net_worth_at_milestone: Optional[float]


@dataclass(frozen=True)
class FiMilestonesInfo:
    milestones: list[FiMilestone]
    current_milestone: Optional[FiMilestone]
    next_milestone: Optional[FiMilestone]
    progress_to_next: float
    amount_to_next: float


def _percentage(ctx: RowContext, target: float) -> bool:
    return ctx.row.fi_progress >= target


def _lifestyle(ctx: RowContext, multiplier: float) -> bool:
    scaled_target = calculate_fi_target(ctx.row.monthly_spend * multiplier, ctx.settings.swr)
    return ctx.row.net_worth >= scaled_target


def _runway(ctx: RowContext, years: float) -> bool:
    return calculate_runway_years(ctx.row.net_worth, ctx.row.monthly_spend) >= years


def _coast(ctx: RowContext, percent: float) -> bool:
    s = ctx.settings
    coast_percent = calculate_coast_fi_percent(
        ctx.row.net_worth,
        ctx.row.monthly_spend_today,
        ctx.years_to_retirement,
        s.current_rate,
        s.inflation_rate,
        s.swr,
        years_offset=ctx.year_offset,
    )
    return coast_percent >= percent


def _retirement_income(ctx: RowContext, income: float) -> bool:
    s = ctx.settings
    real_income = calculate_projected_retirement_income(
        ctx.row.net_worth,
        ctx.years_to_retirement,
        s.current_rate,
        s.inflation_rate,
        s.swr,
    )
    # Later rows are in future dollars; bring them back to today's
    return real_income / inflation_multiplier(ctx.year_offset, s.inflation_rate) >= income


def _crossover(ctx: RowContext, _target: float) -> bool:
    return ctx.row.is_crossover


_TYPE_PREDICATES: dict[str, RowPredicate] = {
    "percentage": _percentage,
    "lifestyle": _lifestyle,
    "runway": _runway,
    "coast": _coast,
    "retirement_income": _retirement_income,
}


def _first_matching(predicate: RowPredicate) -> Locator:
    def locate(contexts: Sequence[RowContext], target: float) -> Location:
        for ctx in contexts:
            if predicate(ctx, target):
                return Location(
                    year=ctx.calendar_year,
                    age=ctx.age,
                    net_worth=ctx.row.net_worth,
                    # Only the live row counts; later rows are still projections
                    is_achieved=ctx.row.is_now,
                )
        return NOT_FOUND

    return locate


def _locate_coast_fi(contexts: Sequence[RowContext], _target: float) -> Location:
    now = contexts[0]
    year = now.row.coast_fi_year
    if year is None:
        return Location(year=None, age=None, net_worth=now.row.net_worth, is_achieved=False)
    born = now.calendar_year - now.age if now.age is not None else None
    return Location(
        year=year,
        age=year - born if born is not None else None,
        net_worth=now.row.net_worth,
        is_achieved=year <= now.calendar_year + now.years_to_retirement,
    )


def _income_label(amount: int) -> str:
    if amount >= 1_000_000:
        millions = amount / 1_000_000
        return f"{millions:g}".replace(".", "_") + "m"
    return f"{amount // 1000}k"


def _build_catalog() -> list[MilestoneDefinition]:
    catalog = []

    for pct in (10, 25, 50, 75, 100):
        catalog.append(
            MilestoneDefinition(
                id=f"fi_{pct}",
                type="percentage",
                name=f"{pct}% FI",
                short_name=f"{pct}%",
                description=f"Net worth reaches {pct}% of the FI target",
                target_value=pct,
            )
        )

    for key, name, multiplier in (
        ("lean_fi", "Lean FI", 0.7),
        ("barista_fi", "Barista FI", 0.85),
        ("regular_fi", "Regular FI", 1.0),
        ("fat_fi", "Fat FI", 1.5),
    ):
        catalog.append(
            MilestoneDefinition(
                id=key,
                type="lifestyle",
                name=name,
                short_name=name.split()[0],
                description=f"FI at {multiplier:.0%} of current spending",
                target_value=multiplier,
            )
        )

    for key, label, years in (
        ("runway_6mo", "6 Months", 0.5),
        ("runway_1yr", "1 Year", 1),
        ("runway_2yr", "2 Years", 2),
        ("runway_3yr", "3 Years", 3),
        ("runway_5yr", "5 Years", 5),
        ("runway_10yr", "10 Years", 10),
    ):
        catalog.append(
            MilestoneDefinition(
                id=key,
                type="runway",
                name=f"{label} Runway",
                short_name=label,
                description=f"Savings cover {label.lower()} of expenses",
                target_value=years,
            )
        )

    for pct in (25, 50, 75):
        catalog.append(
            MilestoneDefinition(
                id=f"coast_{pct}",
                type="coast",
                name=f"Coast to {pct}% FI",
                short_name=f"Coast {pct}%",
                description=f"Growth alone reaches {pct}% of FI by retirement",
                target_value=pct,
            )
        )

    catalog += [
        MilestoneDefinition(
            id="crossover",
            type="special",
            name="Crossover Point",
            short_name="Crossover",
            description="Cumulative investment growth exceeds contributions",
            target_value=0,
            locate=_first_matching(_crossover),
        ),
        MilestoneDefinition(
            id="coast_fi",
            type="special",
            name="Coast FI",
            short_name="Coast FI",
            description="Stop saving today and still reach FI by retirement",
            target_value=100,
            locate=_locate_coast_fi,
        ),
        MilestoneDefinition(
            id="flamingo_fi",
            type="special",
            name="Flamingo FI",
            short_name="Flamingo",
            description="Halfway to FI, the point to consider downshifting",
            target_value=50,
            alias_of="fi_50",
        ),
    ]

    for amount in (
        10_000, 15_000, 20_000, 25_000, 30_000, 35_000, 40_000, 50_000,
        60_000, 75_000, 100_000, 125_000, 150_000, 200_000, 250_000,
        300_000, 400_000, 500_000, 750_000, 1_000_000, 1_500_000, 2_000_000,
    ):
        label = _income_label(amount)
        catalog.append(
            MilestoneDefinition(
                id=f"retirement_income_{label}",
                type="retirement_income",
                name=f"${amount:,}/yr Retirement Income",
                short_name=f"${label.replace('_', '.').upper()}/yr",
                description=f"Stop saving today and retire on ${amount:,} a year in today's dollars",
                target_value=amount,
            )
        )

    return catalog


FI_MILESTONE_DEFINITIONS: list[MilestoneDefinition] = _build_catalog()


def _row_contexts(
    projections: Sequence, settings: UserSettings, birth_year: Optional[int], current_year: int
) -> list[RowContext]:
    base_years = years_to_retirement(birth_year, current_year)
    contexts = []
    for row in projections:
        calendar_year = current_year if row.year == NOW_LABEL else row.year
        contexts.append(
            RowContext(
                row=row,
                year_offset=row.year_offset,
                calendar_year=calendar_year,
                age=calendar_year - birth_year if birth_year is not None else None,
                years_to_retirement=max(0, base_years - row.year_offset),
                settings=settings,
            )
        )
    return contexts


def _evaluate(definition: MilestoneDefinition, contexts: Sequence[RowContext]) -> FiMilestone:
    locate = definition.locate or _first_matching(_TYPE_PREDICATES[definition.type])
    location = locate(contexts, definition.target_value)
    return FiMilestone(
        id=definition.id,
        type=definition.type,
        name=definition.name,
        short_name=definition.short_name,
        description=definition.description,
        target_value=definition.target_value,
        is_achieved=location.is_achieved,
        year=location.year,
        age=location.age,
        net_worth_at_milestone=location.net_worth,
    )


def calculate_fi_milestones(
    projections: Sequence,
    settings: UserSettings,
    birth_year: Optional[int],
    current_year: Optional[int] = None,
) -> FiMilestonesInfo:
    """Evaluate every catalog milestone against ``projections``.

    Args:
        projections: Trajectory rows, "Now" row first.
        settings: Assumptions the trajectory was built with.
        birth_year: Used for ages and years to retirement; may be ``None``.
        current_year: Calendar year of the "Now" row; defaults to this year.

    Returns:
        A :class:`FiMilestonesInfo` with achieved milestones first.
    """

    if not projections:
        logger.debug("Empty trajectory; no milestones evaluated")
        return FiMilestonesInfo(
            milestones=[],
            current_milestone=None,
            next_milestone=None,
            progress_to_next=0.0,
            amount_to_next=0.0,
        )

    if current_year is None:
        current_year = datetime.now().year
    contexts = _row_contexts(projections, settings, birth_year, current_year)

    evaluated: dict[str, FiMilestone] = {}
    for definition in FI_MILESTONE_DEFINITIONS:
        if definition.alias_of:
            source = evaluated[definition.alias_of]
            evaluated[definition.id] = replace(
                source,
                id=definition.id,
                type=definition.type,
                name=definition.name,
                short_name=definition.short_name,
                description=definition.description,
                target_value=definition.target_value,
            )
        else:
            evaluated[definition.id] = _evaluate(definition, contexts)

    ordered = list(evaluated.values())
    # Stable sort keeps catalog order within each group
    milestones = sorted(ordered, key=lambda m: not m.is_achieved)

    percentage = [m for m in ordered if m.type == "percentage"]
    achieved = [m for m in percentage if m.is_achieved]
    current = achieved[-1] if achieved else None
    nxt = next((m for m in percentage if not m.is_achieved), None)

    first = projections[0]
    if nxt is None:
        progress_to_next = 100.0
        amount_to_next = 0.0
    else:
        floor = current.target_value if current else 0.0
        span = nxt.target_value - floor
        progress_to_next = max(0.0, min(100.0, (first.fi_progress - floor) / span * 100))
        amount_to_next = max(0.0, first.fi_target * (nxt.target_value / 100) - first.net_worth)

    return FiMilestonesInfo(
        milestones=milestones,
        current_milestone=current,
        next_milestone=nxt,
        progress_to_next=progress_to_next,
        amount_to_next=amount_to_next,
    )
