"""Side-by-side evaluation of alternative assumption sets.

A :class:`Scenario` bundles the investment and spending assumptions that vary
between plans. Every scenario is evaluated against the same newest net worth
entry and the same birth date, with spending always taken from the level
policy.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from calculations import NetWorthEntry, UserSettings, latest_entry
from config import SCENARIO_COLORS, SCENARIO_TEMPLATES
from projections import CalculatedFinancials, calculate_all_financials

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    name: str
    color: str
    current_rate: float
    swr: float
    yearly_contribution: float
    inflation_rate: float
    base_monthly_budget: float
    spending_growth_rate: float
    description: str = ""

    def to_settings(self, birth_date: Optional[date]) -> UserSettings:
        """Settings for this scenario; monthly spend is unused under level spending."""
        return UserSettings(
            current_rate=self.current_rate,
            swr=self.swr,
            yearly_contribution=self.yearly_contribution,
            birth_date=birth_date,
            monthly_spend=0.0,
            inflation_rate=self.inflation_rate,
            base_monthly_budget=self.base_monthly_budget,
            spending_growth_rate=self.spending_growth_rate,
        )


def scenario_from_template(name: str, settings: UserSettings, index: int = 0) -> Scenario:
    """Build a scenario from a named template on top of ``settings``.

    Args:
        name: Key into ``SCENARIO_TEMPLATES``.
        settings: Supplies every value the template does not set.
        index: Position among compared scenarios; picks the line color.

    Raises:
        KeyError: If ``name`` is not a known template.
    """

    template = SCENARIO_TEMPLATES[name]
    return Scenario(
        name=name,
        color=SCENARIO_COLORS[index % len(SCENARIO_COLORS)],
        current_rate=template.get("current_rate", settings.current_rate),
        swr=template.get("swr", settings.swr),
        yearly_contribution=template.get("yearly_contribution", settings.yearly_contribution),
        inflation_rate=template.get("inflation_rate", settings.inflation_rate),
        base_monthly_budget=template.get("base_monthly_budget", settings.base_monthly_budget),
        spending_growth_rate=template.get("spending_growth_rate", settings.spending_growth_rate),
    )


def calculate_scenario_projections(
    scenarios: Sequence[Scenario],
    entries: Sequence[NetWorthEntry],
    birth_date: Optional[date],
    now: Optional[datetime] = None,
) -> list[CalculatedFinancials]:
    """Evaluate each scenario against the newest entry at one shared instant.

    Returns:
        One :class:`CalculatedFinancials` per scenario, in the order given;
        empty when there are no entries or no scenarios.
    """

    anchor = latest_entry(entries)
    if anchor is None or not scenarios:
        logger.debug("Nothing to compare: %d entries, %d scenarios", len(entries), len(scenarios))
        return []

    if now is None:
        now = datetime.now(anchor.timestamp.tzinfo)

    return [
        calculate_all_financials(
            scenario.to_settings(birth_date),
            entries,
            include_contributions=False,
            apply_inflation=False,
            use_spending_levels=True,
            now=now,
        )
        for scenario in scenarios
    ]
