# utils.py
import logging
import uuid
from datetime import datetime
from typing import Optional

import streamlit as st

from calculations import NetWorthEntry, UserSettings, merge_with_defaults
from config import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

# Settings persisted in the URL, with the type each value is parsed back to
QUERY_PARAM_DEFAULTS = {
    "current_rate": DEFAULT_SETTINGS["current_rate"],
    "swr": DEFAULT_SETTINGS["swr"],
    "yearly_contribution": DEFAULT_SETTINGS["yearly_contribution"],
    "birth_date": "",
    "monthly_spend": DEFAULT_SETTINGS["monthly_spend"],
    "inflation_rate": DEFAULT_SETTINGS["inflation_rate"],
    "base_monthly_budget": DEFAULT_SETTINGS["base_monthly_budget"],
    "spending_growth_rate": DEFAULT_SETTINGS["spending_growth_rate"],
}


def initialize_session_state():
    """Initialize the Streamlit session state variables.

    Examples
    --------
    >>> initialize_session_state()
    >>> st.session_state.setdefault("extra_key", "default")
    """
    st.session_state.setdefault("entries", [])
    st.session_state.setdefault("display_mode", "real")
    st.session_state.setdefault("include_contributions", False)
    st.session_state.setdefault("use_spending_levels", False)
    st.session_state.setdefault("settings_loaded", False)


def update_query_params():
    """Mirror the settings held in session state into the page URL."""
    params = {
        key: str(st.session_state[key])
        for key in QUERY_PARAM_DEFAULTS
        if key in st.session_state
    }
    st.query_params.update(params)


def _parse(raw: str, default):
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, int):
        return int(raw)
    return str(raw)


def load_from_query_params():
    """Load settings from the page URL into session state.

    Missing or unparseable values fall back to their defaults.

    Returns:
        tuple: (loaded, all_present) where loaded maps every settings key to
            its value and all_present is ``True`` when the URL supplied every
            key.
    """
    params = st.query_params.to_dict()
    loaded = {}
    all_present = True
    for key, default in QUERY_PARAM_DEFAULTS.items():
        raw = params.get(key)
        if raw is None:
            all_present = False
            value = default
        else:
            try:
                value = _parse(raw, default)
            except ValueError:
                logger.warning("Ignoring invalid query parameter %s=%r", key, raw)
                all_present = False
                value = default
        loaded[key] = value
        st.session_state[key] = value
    return loaded, all_present


def settings_from_session_state() -> UserSettings:
    """Build settings from whatever settings keys session state holds.

    An unparseable birth date is treated as unset.
    """
    values = {key: st.session_state[key] for key in QUERY_PARAM_DEFAULTS if key in st.session_state}
    try:
        return merge_with_defaults(values)
    except ValueError:
        logger.warning("Ignoring invalid birth date %r", values.get("birth_date"))
        values["birth_date"] = None
        return merge_with_defaults(values)


def add_entry(amount: float, timestamp: Optional[datetime] = None) -> NetWorthEntry:
    """Record a net worth snapshot in session state, keeping newest first."""
    entry = NetWorthEntry(
        id=uuid.uuid4().hex,
        amount=float(amount),
        timestamp=timestamp or datetime.now().astimezone(),
    )
    entries = list(st.session_state.get("entries", [])) + [entry]
    st.session_state["entries"] = sorted(entries, key=lambda e: e.timestamp, reverse=True)
    return entry


def delete_entry(entry_id: str) -> None:
    st.session_state["entries"] = [
        e for e in st.session_state.get("entries", []) if e.id != entry_id
    ]


def format_currency(value: float, decimals: int = 2) -> str:
    """Format ``value`` as US dollars, e.g. ``-$1,234.50``."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_percent(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def format_date(timestamp: datetime) -> str:
    return timestamp.strftime("%b %d, %Y, %I:%M %p")


def get_time_since_entry(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """Describe how long ago ``timestamp`` was, e.g. ``"2d 3h ago"``."""
    now = now or datetime.now(timestamp.tzinfo)
    seconds = max(0, int((now - timestamp).total_seconds()))
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400

    if days > 0:
        return f"{days}d {hours % 24}h ago"
    if hours > 0:
        return f"{hours}h {minutes % 60}m ago"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s ago"
    return f"{seconds}s ago"
