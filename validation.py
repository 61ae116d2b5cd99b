# validation.py
from datetime import date
from typing import Optional

from calculations import UserSettings
from config import AGE_RANGE, RATE_MAX, RATE_MIN, SWR_MAX


def validate_settings(settings: UserSettings, today: Optional[date] = None):
    """Validate settings and return any errors found.

    Errors are advisory: every calculation still runs on invalid settings.
    """
    errors = []

    if not RATE_MIN <= settings.current_rate <= RATE_MAX:
        errors.append(f"Expected return rate must be between {RATE_MIN:g}% and {RATE_MAX:g}%")

    if settings.swr <= RATE_MIN or settings.swr > SWR_MAX:
        errors.append(f"Safe withdrawal rate must be greater than 0% and at most {SWR_MAX:g}%")

    if not RATE_MIN <= settings.inflation_rate <= RATE_MAX:
        errors.append(f"Inflation rate must be between {RATE_MIN:g}% and {RATE_MAX:g}%")

    if settings.yearly_contribution < 0:
        errors.append("Yearly contribution cannot be negative")

    if settings.monthly_spend < 0:
        errors.append("Monthly spending cannot be negative")

    if settings.base_monthly_budget < 0:
        errors.append("Base monthly budget cannot be negative")

    if not RATE_MIN <= settings.spending_growth_rate <= RATE_MAX:
        errors.append(f"Spending growth rate must be between {RATE_MIN:g}% and {RATE_MAX:g}%")

    if settings.birth_date is not None:
        today = today or date.today()
        age = today.year - settings.birth_date.year
        if settings.birth_date > today or not AGE_RANGE[0] <= age <= AGE_RANGE[1]:
            errors.append(f"Birth date must give an age between {AGE_RANGE[0]} and {AGE_RANGE[1]}")

    return errors
