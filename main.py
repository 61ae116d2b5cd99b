# main.py
from datetime import datetime

import streamlit as st

from calculations import birth_year, calculate_real_time_net_worth, latest_entry, years_to_retirement
from coast import calculate_runway_and_coast_info
from config import (
    CONTRIBUTION_STEP,
    DEFAULT_COMPARED_SCENARIOS,
    ENTRY_STEP,
    RATE_MAX,
    RATE_MIN,
    RATE_STEP,
    REALTIME_REFRESH_SECONDS,
    SCENARIO_TEMPLATES,
    SPEND_STEP,
    SWR_MAX,
    SWR_STEP,
)
from inflation import display_mode_suffix
from projections import calculate_all_financials
from retirement_income import calculate_retirement_income_info
from scenarios import calculate_scenario_projections, scenario_from_template
from utils import (
    add_entry,
    delete_entry,
    format_currency,
    format_date,
    format_percent,
    get_time_since_entry,
    initialize_session_state,
    load_from_query_params,
    settings_from_session_state,
    update_query_params,
)
from validation import validate_settings
from visualization import (
    milestones_to_dataframe,
    projections_to_dataframe,
    scenario_comparison_dataframe,
    show_level_ladder,
    show_milestone_summary,
    show_projection_chart,
    show_scenario_comparison,
)


def _fmt_money(x: float, decimals: int = 0) -> str:
    """Format currency for markdown without triggering LaTeX parsing."""
    return format_currency(x, decimals).replace("$", "\\$")


def _apply_template():
    template = SCENARIO_TEMPLATES.get(st.session_state.get("scenario_template"))
    if template:
        st.session_state.update(template)
        update_query_params()


def render_settings():
    with st.sidebar:
        st.header("Assumptions")
        st.selectbox(
            "Scenario template",
            ["Custom", *SCENARIO_TEMPLATES],
            key="scenario_template",
            on_change=_apply_template,
        )
        st.number_input(
            "Expected return (%)", min_value=RATE_MIN, max_value=RATE_MAX,
            step=RATE_STEP, key="current_rate", on_change=update_query_params,
        )
        st.number_input(
            "Safe withdrawal rate (%)", min_value=RATE_MIN, max_value=SWR_MAX,
            step=SWR_STEP, key="swr", on_change=update_query_params,
        )
        st.number_input(
            "Inflation rate (%)", min_value=RATE_MIN, max_value=RATE_MAX,
            step=RATE_STEP, key="inflation_rate", on_change=update_query_params,
        )
        st.number_input(
            "Yearly contribution", min_value=0.0, step=CONTRIBUTION_STEP,
            key="yearly_contribution", on_change=update_query_params,
        )
        st.number_input(
            "Monthly spend", min_value=0.0, step=SPEND_STEP,
            key="monthly_spend", on_change=update_query_params,
        )
        st.number_input(
            "Base monthly budget", min_value=0.0, step=SPEND_STEP,
            key="base_monthly_budget", on_change=update_query_params,
        )
        st.number_input(
            "Spending growth rate (%)", min_value=RATE_MIN, max_value=RATE_MAX,
            step=SWR_STEP, key="spending_growth_rate", on_change=update_query_params,
        )
        st.text_input(
            "Birth date (YYYY-MM-DD)", key="birth_date", on_change=update_query_params,
        )
        st.divider()
        st.toggle("Include contributions in live value", key="include_contributions")
        st.toggle("Use spending levels", key="use_spending_levels")
        st.radio(
            "Show values",
            ["real", "nominal"],
            format_func=lambda mode: "Today's dollars" if mode == "real" else "Future dollars",
            key="display_mode",
            horizontal=True,
        )


def render_entries():
    with st.expander("Net worth entries", expanded=not st.session_state.entries):
        with st.form("entry_form", clear_on_submit=True):
            amount = st.number_input("Net worth", min_value=0.0, step=ENTRY_STEP)
            if st.form_submit_button("Add entry") and amount > 0:
                add_entry(amount)
        for entry in st.session_state.entries:
            col1, col2, col3 = st.columns([3, 3, 1])
            col1.write(_fmt_money(entry.amount, 2))
            col2.caption(f"{format_date(entry.timestamp)} ({get_time_since_entry(entry.timestamp)})")
            if col3.button("Delete", key=f"delete_{entry.id}"):
                delete_entry(entry.id)
                st.rerun()


@st.fragment(run_every=REALTIME_REFRESH_SECONDS)
def render_live_net_worth():
    settings = settings_from_session_state()
    entry = latest_entry(st.session_state.entries)
    current = calculate_real_time_net_worth(
        entry, settings, st.session_state.include_contributions, now=datetime.now().astimezone()
    )
    st.metric(
        "Net worth right now",
        format_currency(current.total, 4),
        delta=format_currency(current.appreciation + current.contributions, 4),
    )


def render_summary(financials, settings):
    col1, col2, col3 = st.columns(3)
    col1.metric("FI progress", format_percent(financials.current_fi_progress))
    col2.metric("FI year", financials.fi_year or "Not within 60 years")
    col3.metric("Crossover year", financials.crossover_year or "None")

    rates = financials.growth_rates
    st.caption(
        f"Growing {_fmt_money(rates.per_day, 2)}/day, {_fmt_money(rates.per_hour, 2)}/hour, "
        f"{_fmt_money(rates.per_second, 4)}/second. Safe withdrawal today: "
        f"{_fmt_money(financials.current_monthly_swr)}/month."
    )

    remaining = years_to_retirement(birth_year(settings), financials.evaluated_at.year)
    net_worth = financials.current_net_worth.total
    coast = calculate_runway_and_coast_info(
        net_worth, settings.monthly_spend, remaining,
        settings.current_rate, settings.inflation_rate, settings.swr,
    )
    income = calculate_retirement_income_info(
        net_worth, remaining, settings.current_rate, settings.inflation_rate, settings.swr
    )
    st.write(
        f"Runway: {coast.runway_years:.1f} years of spending. "
        f"Coasting for {remaining} years reaches {format_percent(coast.coast_fi_percent)} of FI. "
        f"Stopping today would fund {_fmt_money(income.real_annual_income)}/year in today's dollars."
    )


def render_projections(financials, settings):
    mode = st.session_state.display_mode
    st.subheader(f"Projections {display_mode_suffix(mode)}")
    show_projection_chart(financials.projections, mode, settings.inflation_rate)
    df = projections_to_dataframe(financials.projections, mode, settings.inflation_rate)
    st.dataframe(df, hide_index=True, use_container_width=True)


def render_levels(level_info):
    current, nxt = level_info.current_level, level_info.next_level
    st.write(
        f"Level {current.level}: **{current.name}**, unlocking {_fmt_money(level_info.unlocked_at_level)}/month."
    )
    if nxt:
        st.progress(min(1.0, max(0.0, level_info.progress_to_next / 100)))
        st.caption(
            f"{_fmt_money(level_info.amount_to_next)} to {nxt.name}, "
            f"which adds {_fmt_money(level_info.next_level_spending_increase)}/month."
        )
    status = level_info.spending_status
    if status == "within_budget":
        st.success("Spending is within your unlocked budget.")
    elif status == "slightly_over":
        st.warning("Spending is slightly over your unlocked budget.")
    else:
        st.error("Spending is over your unlocked budget.")
    show_level_ladder(level_info)


def render_milestones(info):
    if info.next_milestone:
        st.write(
            f"Next: **{info.next_milestone.name}**, {format_percent(info.progress_to_next)} of the way, "
            f"{_fmt_money(info.amount_to_next)} to go."
        )
    show_milestone_summary(info)
    st.dataframe(milestones_to_dataframe(info), hide_index=True, use_container_width=True)


def render_scenarios(settings, now):
    names = st.multiselect(
        "Compare scenarios",
        list(SCENARIO_TEMPLATES),
        default=list(DEFAULT_COMPARED_SCENARIOS),
        key="compared_scenarios",
    )
    scenarios = [scenario_from_template(name, settings, i) for i, name in enumerate(names)]
    results = calculate_scenario_projections(
        scenarios, st.session_state.entries, settings.birth_date, now=now
    )
    if not results:
        st.caption("Pick at least one scenario to compare.")
        return
    st.caption("Each scenario spends by the level policy from your base budget.")
    show_scenario_comparison(scenarios, results, st.session_state.display_mode)
    st.dataframe(scenario_comparison_dataframe(scenarios, results), hide_index=True, use_container_width=True)


def main():
    st.set_page_config(page_title="FI Tracker", page_icon="📈")
    st.title("📈 FI Tracker")
    initialize_session_state()
    if not st.session_state.settings_loaded:
        load_from_query_params()
        st.session_state.settings_loaded = True

    render_settings()
    settings = settings_from_session_state()
    for err in validate_settings(settings):
        st.error(err)

    render_entries()
    if not st.session_state.entries:
        st.info("Add your first net worth entry to start projecting.")
        return

    render_live_net_worth()
    now = datetime.now().astimezone()
    financials = calculate_all_financials(
        settings,
        st.session_state.entries,
        include_contributions=st.session_state.include_contributions,
        apply_inflation=True,
        use_spending_levels=st.session_state.use_spending_levels,
        now=now,
    )
    render_summary(financials, settings)
    with st.expander("Projections", expanded=True):
        render_projections(financials, settings)
    with st.expander("Spending level"):
        render_levels(financials.level_info)
    with st.expander("Milestones", expanded=True):
        render_milestones(financials.fi_milestones)
    with st.expander("Scenario comparison"):
        render_scenarios(settings, now)


if __name__ == "__main__":
    main()
