import importlib
import os
import sys
import types
from datetime import date, datetime, timezone

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from calculations import NetWorthEntry, UserSettings
from levels import calculate_level_info
from milestones import calculate_fi_milestones
from projections import generate_projections
from scenarios import calculate_scenario_projections, scenario_from_template

viz = importlib.import_module("visualization")

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)
SETTINGS = UserSettings(
    yearly_contribution=20_000, birth_date=date(1990, 1, 1), monthly_spend=4000
)


def _projections():
    entry = NetWorthEntry("entry-1", 200_000, NOW)
    return generate_projections(entry, 200_000, 0, SETTINGS, apply_inflation=True, now=NOW)


def _capture(monkeypatch):
    captured = []
    fake_st = types.SimpleNamespace(
        plotly_chart=lambda fig, *a, **k: captured.append(fig),
        info=lambda *a, **k: None,
    )
    monkeypatch.setattr(viz, "st", fake_st)
    return captured


def test_projections_dataframe_modes():
    rows = _projections()
    nominal = viz.projections_to_dataframe(rows, "nominal", 3)
    real = viz.projections_to_dataframe(rows, "real", 3)
    assert len(nominal) == len(rows)
    assert nominal["Year"].iloc[0] == "Now"
    assert nominal["Net Worth"].iloc[0] == real["Net Worth"].iloc[0]
    assert nominal["Net Worth"].iloc[11] == pytest.approx(rows[11].net_worth)
    assert real["Net Worth"].iloc[11] == pytest.approx(rows[11].net_worth / 1.03 ** 10)
    assert real["Monthly Spend"].iloc[11] == pytest.approx(4000)
    assert nominal["FI Year"].sum() <= 1


def test_projection_chart(monkeypatch):
    captured = _capture(monkeypatch)
    assert viz.show_projection_chart(_projections(), "real", 3) is None

    fig = captured.pop()
    names = [trace.name for trace in fig.data]
    assert names == ["Net Worth", "FI Target", "Contributed"]
    net_worth = fig.data[0]
    assert net_worth.line.color == "rgba(253, 150, 68, 1)"
    assert net_worth.fill == "tozeroy"
    assert net_worth.fillcolor == "rgba(253, 150, 68, 0.2)"
    assert "Now" not in list(net_worth.x)


def test_projection_chart_empty(monkeypatch):
    captured = _capture(monkeypatch)
    assert viz.show_projection_chart([], "real", 3) is None
    assert captured == []


def test_milestone_table_and_summary(monkeypatch):
    info = calculate_fi_milestones(_projections(), SETTINGS, 1990, current_year=2026)
    df = viz.milestones_to_dataframe(info)
    assert len(df) == 43
    assert list(df.columns) == ["Category", "Milestone", "Achieved", "Year", "Age", "Net Worth"]
    assert set(df["Category"]) == set(viz.MILESTONE_TYPE_LABELS.values())

    captured = _capture(monkeypatch)
    viz.show_milestone_summary(info)
    assert len(captured) == 1


def test_milestone_summary_without_milestones(monkeypatch):
    captured = _capture(monkeypatch)
    empty = calculate_fi_milestones([], SETTINGS, 1990)
    assert viz.show_milestone_summary(empty) is None
    assert captured == []


def test_level_ladder(monkeypatch):
    captured = _capture(monkeypatch)
    info = calculate_level_info(120_000, SETTINGS, [], now=NOW)
    viz.show_level_ladder(info, window=2)
    fig = captured.pop()
    assert len(fig.data[0].x) == 5


def _compared():
    scenarios = [
        scenario_from_template(name, SETTINGS, i)
        for i, name in enumerate(["Conservative", "Moderate", "Aggressive"])
    ]
    entry = NetWorthEntry("entry-1", 300_000, NOW)
    return scenarios, calculate_scenario_projections(scenarios, [entry], SETTINGS.birth_date, now=NOW)


def test_scenario_comparison_table():
    scenarios, results = _compared()
    df = viz.scenario_comparison_dataframe(scenarios, results)
    assert list(df["Scenario"]) == ["Conservative", "Moderate", "Aggressive"]
    assert list(df["Return (%)"]) == [5.0, 7.0, 9.0]
    assert df["FI Progress (%)"].iloc[0] == pytest.approx(results[0].current_fi_progress)
    assert df["FI Year"].iloc[2] == results[2].fi_year


def test_scenario_comparison_chart(monkeypatch):
    captured = _capture(monkeypatch)
    scenarios, results = _compared()
    viz.show_scenario_comparison(scenarios, results, "nominal")

    fig = captured.pop()
    assert [trace.name for trace in fig.data] == [s.name for s in scenarios]
    assert [trace.line.color for trace in fig.data] == [s.color for s in scenarios]
    assert all("Now" not in [str(x) for x in trace.x] for trace in fig.data)


def test_scenario_comparison_chart_empty(monkeypatch):
    captured = _capture(monkeypatch)
    viz.show_scenario_comparison([], [], "real")
    assert captured == []
