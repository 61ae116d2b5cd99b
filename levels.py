"""Spending-level ladder: monthly budget unlocked as net worth grows."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Sequence

from calculations import NetWorthEntry, UserSettings, calculate_unlocked_spending, elapsed_years
from config import LEVEL_THRESHOLDS, SLIGHTLY_OVER_BUDGET_FACTOR
from inflation import inflation_multiplier

SpendingStatus = Literal["within_budget", "slightly_over", "over_budget"]


@dataclass(frozen=True)
class Level:
    level: int
    name: str
    threshold: float
    monthly_budget: float
    is_unlocked: bool = False
    is_current: bool = False
    is_next: bool = False


@dataclass(frozen=True)
class LevelInfo:
    current_level: Level
    current_level_index: int
    next_level: Optional[Level]
    progress_to_next: float
    amount_to_next: float
    unlocked_at_level: float
    unlocked_at_net_worth: float
    next_level_spending_increase: float
    current_spend: float
    spending_status: SpendingStatus
    levels: list[Level]
    net_worth: float
    base_budget_original: float
    base_budget_inflation_adjusted: float
    net_worth_portion: float
    years_elapsed: float


def spending_status(monthly_spend: float, budget: float) -> SpendingStatus:
    if monthly_spend <= budget:
        return "within_budget"
    if monthly_spend <= budget * SLIGHTLY_OVER_BUDGET_FACTOR:
        return "slightly_over"
    return "over_budget"


def calculate_level_info(
    current_net_worth: float,
    settings: UserSettings,
    entries: Sequence[NetWorthEntry],
    now: Optional[datetime] = None,
) -> LevelInfo:
    """Place ``current_net_worth`` on the level ladder.

    The base budget keeps pace with inflation from the date of the oldest
    entry, so a level unlocked years ago still buys the same lifestyle.
    """

    oldest = min(entries, key=lambda e: e.timestamp) if entries else None
    if oldest is None:
        years = 0.0
    else:
        if now is None:
            now = datetime.now(oldest.timestamp.tzinfo)
        years = elapsed_years(oldest.timestamp, now)

    def budget_at(net_worth: float) -> float:
        return calculate_unlocked_spending(
            net_worth,
            settings.base_monthly_budget,
            settings.spending_growth_rate,
            years,
            settings.inflation_rate,
        )

    index = 0
    for i in range(len(LEVEL_THRESHOLDS) - 1, -1, -1):
        if current_net_worth >= LEVEL_THRESHOLDS[i][2]:
            index = i
            break

    levels = [
        Level(
            level=number,
            name=name,
            threshold=threshold,
            monthly_budget=budget_at(threshold),
            is_unlocked=i <= index,
            is_current=i == index,
            is_next=i == index + 1,
        )
        for i, (number, name, threshold) in enumerate(LEVEL_THRESHOLDS)
    ]
    current = levels[index]
    nxt = levels[index + 1] if index + 1 < len(levels) else None

    if nxt is None:
        progress, amount = 100.0, 0.0
    else:
        span = nxt.threshold - current.threshold
        progress = min((current_net_worth - current.threshold) / span * 100, 100.0)
        amount = nxt.threshold - current_net_worth

    unlocked_at_level = current.monthly_budget
    return LevelInfo(
        current_level=current,
        current_level_index=index,
        next_level=nxt,
        progress_to_next=progress,
        amount_to_next=amount,
        unlocked_at_level=unlocked_at_level,
        unlocked_at_net_worth=budget_at(current_net_worth),
        next_level_spending_increase=nxt.monthly_budget - unlocked_at_level if nxt else 0.0,
        current_spend=settings.monthly_spend,
        spending_status=spending_status(settings.monthly_spend, unlocked_at_level),
        levels=levels,
        net_worth=current_net_worth,
        base_budget_original=settings.base_monthly_budget,
        base_budget_inflation_adjusted=settings.base_monthly_budget
        * inflation_multiplier(years, settings.inflation_rate),
        net_worth_portion=current_net_worth * (settings.spending_growth_rate / 100) / 12,
        years_elapsed=years,
    )
