# visualization.py
from collections.abc import Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import streamlit as st

from inflation import InflationDisplayMode, get_display_value
from levels import LevelInfo
from milestones import FiMilestonesInfo
from projections import CalculatedFinancials, ProjectionRow, to_inflated_rows
from scenarios import Scenario

NET_WORTH_COLOR = (253, 150, 68)
FI_TARGET_COLOR = (99, 110, 250)
CONTRIBUTED_COLOR = (138, 201, 38)

MILESTONE_TYPE_LABELS = {
    "percentage": "FI Progress",
    "lifestyle": "Lifestyle",
    "runway": "Runway",
    "coast": "Coast",
    "special": "Special",
    "retirement_income": "Retirement Income",
}


def projections_to_dataframe(
    projections: Sequence[ProjectionRow],
    display_mode: InflationDisplayMode = "real",
    inflation_rate: float = 0.0,
) -> pd.DataFrame:
    """Tabulate projection rows with money columns in the chosen value view.

    ``projections`` should be generated with future-dollar spending so both
    views can be derived from it.
    """

    inflated = to_inflated_rows(projections, inflation_rate)
    records = []
    for row, values in zip(projections, inflated):
        records.append(
            {
                "Year": str(row.year),
                "Age": row.age,
                "Net Worth": get_display_value(values.net_worth, display_mode),
                "Interest": get_display_value(values.interest, display_mode),
                "Contributed": get_display_value(values.contributed, display_mode),
                "Monthly SWR": get_display_value(values.monthly_swr, display_mode),
                "Monthly Spend": get_display_value(values.monthly_spend, display_mode),
                "FI Target": get_display_value(values.fi_target, display_mode),
                "FI Progress (%)": row.fi_progress,
                "Coast FI Year": row.coast_fi_year,
                "FI Year": row.is_fi_year,
                "Crossover": row.is_crossover,
            }
        )
    return pd.DataFrame.from_records(records)


def _rgba(color: tuple[int, int, int], alpha: float) -> str:
    r, g, b = color
    return f"rgba({r}, {g}, {b}, {alpha})"


def show_projection_chart(
    projections: Sequence[ProjectionRow],
    display_mode: InflationDisplayMode = "real",
    inflation_rate: float = 0.0,
) -> None:
    """Plot projected net worth against the FI target by calendar year."""

    if not projections:
        return

    df = projections_to_dataframe(projections, display_mode, inflation_rate)
    # The "Now" row shares its calendar year with the first yearly row
    df = df[df["Year"] != projections[0].year].copy()
    df["Year"] = df["Year"].astype(int)

    fig = px.line(df, x="Year", y=["Net Worth", "FI Target", "Contributed"])
    colors = {
        "Net Worth": NET_WORTH_COLOR,
        "FI Target": FI_TARGET_COLOR,
        "Contributed": CONTRIBUTED_COLOR,
    }
    for trace in fig.data:
        color = colors[trace.name]
        trace.line.color = _rgba(color, 1)
        if trace.name == "Net Worth":
            trace.fill = "tozeroy"
            trace.fillcolor = _rgba(color, 0.2)

    fi_rows = df[df["FI Year"]]
    if not fi_rows.empty:
        fig.add_vline(x=int(fi_rows["Year"].iloc[0]), line_dash="dash", line_color=_rgba(FI_TARGET_COLOR, 0.6))

    fig.update_layout(
        margin=dict(t=0, b=0, l=0, r=0), showlegend=False, yaxis_title="Value (USD)"
    )
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def milestones_to_dataframe(info: FiMilestonesInfo) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "id": m.id,
                "type": m.type,
                "name": m.name,
                "is_achieved": m.is_achieved,
                "year": m.year,
                "age": m.age,
                "net_worth_at_milestone": m.net_worth_at_milestone,
            }
            for m in info.milestones
        ],
        columns=["id", "type", "name", "is_achieved", "year", "age", "net_worth_at_milestone"],
    )
    df["type"] = df["type"].map(MILESTONE_TYPE_LABELS)
    return df.rename(
        columns={
            "name": "Milestone",
            "type": "Category",
            "is_achieved": "Achieved",
            "year": "Year",
            "age": "Age",
            "net_worth_at_milestone": "Net Worth",
        }
    ).drop(columns=["id"])


def show_milestone_summary(info: FiMilestonesInfo) -> None:
    """Bar chart of achieved versus upcoming milestones per category."""

    if not info.milestones:
        st.info("Add a net worth entry to see milestones.")
        return

    df = milestones_to_dataframe(info)
    counts = (
        df.assign(Status=np.where(df["Achieved"], "Achieved", "Upcoming"))
        .groupby(["Category", "Status"])
        .size()
        .reset_index(name="Count")
    )
    fig = px.bar(
        counts,
        x="Category",
        y="Count",
        color="Status",
        barmode="stack",
        color_discrete_map={
            "Achieved": _rgba(CONTRIBUTED_COLOR, 1),
            "Upcoming": _rgba(FI_TARGET_COLOR, 0.4),
        },
    )
    fig.update_layout(margin=dict(t=0, b=0, l=0, r=0))
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def show_level_ladder(level_info: LevelInfo, window: int = 5) -> None:
    """Plot the monthly budget of levels around the current one."""

    start = max(0, level_info.current_level_index - window)
    levels = level_info.levels[start : level_info.current_level_index + window + 1]
    df = pd.DataFrame(
        {
            "Level": [f"{lvl.level}. {lvl.name}" for lvl in levels],
            "Monthly Budget": [lvl.monthly_budget for lvl in levels],
            "Unlocked": [lvl.is_unlocked for lvl in levels],
        }
    )
    fig = px.bar(df, x="Level", y="Monthly Budget")
    fig.update_traces(
        marker_color=[
            _rgba(NET_WORTH_COLOR, 1.0 if unlocked else 0.3) for unlocked in df["Unlocked"]
        ]
    )
    fig.update_layout(margin=dict(t=0, b=0, l=0, r=0), showlegend=False)
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def scenario_comparison_dataframe(
    scenarios: Sequence[Scenario], results: Sequence[CalculatedFinancials]
) -> pd.DataFrame:
    """One row per scenario with its assumptions and headline outcomes."""

    return pd.DataFrame.from_records(
        [
            {
                "Scenario": scenario.name,
                "Return (%)": scenario.current_rate,
                "SWR (%)": scenario.swr,
                "Inflation (%)": scenario.inflation_rate,
                "FI Year": result.fi_year,
                "FI Age": result.fi_age,
                "Crossover Year": result.crossover_year,
                "FI Progress (%)": result.current_fi_progress,
                "Milestones Achieved": sum(m.is_achieved for m in result.fi_milestones.milestones),
            }
            for scenario, result in zip(scenarios, results)
        ],
        columns=[
            "Scenario",
            "Return (%)",
            "SWR (%)",
            "Inflation (%)",
            "FI Year",
            "FI Age",
            "Crossover Year",
            "FI Progress (%)",
            "Milestones Achieved",
        ],
    )


def show_scenario_comparison(
    scenarios: Sequence[Scenario],
    results: Sequence[CalculatedFinancials],
    display_mode: InflationDisplayMode = "real",
) -> None:
    """Plot projected net worth of every scenario on one chart."""

    frames = []
    for scenario, result in zip(scenarios, results):
        if not result.projections:
            continue
        df = projections_to_dataframe(result.projections, display_mode, scenario.inflation_rate)
        df = df[df["Year"] != result.projections[0].year].copy()
        df["Year"] = df["Year"].astype(int)
        df["Scenario"] = scenario.name
        frames.append(df[["Year", "Scenario", "Net Worth", "FI Year"]])
    if not frames:
        return

    df = pd.concat(frames, ignore_index=True)
    fig = px.line(
        df,
        x="Year",
        y="Net Worth",
        color="Scenario",
        color_discrete_map={s.name: s.color for s in scenarios},
    )
    fi_points = df[df["FI Year"]]
    for _, point in fi_points.iterrows():
        color = next(s.color for s in scenarios if s.name == point["Scenario"])
        fig.add_vline(x=int(point["Year"]), line_dash="dot", line_color=color)

    fig.update_layout(margin=dict(t=0, b=0, l=0, r=0), yaxis_title="Net Worth (USD)")
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})
