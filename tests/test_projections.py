import logging
import math
import os
import sys
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from calculations import NetWorthEntry, UserSettings, calculate_future_value, calculate_level_based_spending
from coast import find_coast_fi_years
from config import PROJECTION_YEARS
from projections import calculate_all_financials, generate_projections, to_inflated_rows

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)

SETTINGS = UserSettings(
    current_rate=7,
    swr=4,
    yearly_contribution=20_000,
    birth_date=date(1990, 1, 1),
    monthly_spend=4000,
    inflation_rate=3,
    base_monthly_budget=3000,
    spending_growth_rate=2,
)


def project(net_worth, settings=SETTINGS, days_ago=0, **kwargs):
    entry = NetWorthEntry("entry-1", net_worth, NOW - timedelta(days=days_ago))
    return generate_projections(entry, net_worth, 0, settings, now=NOW, **kwargs)


def test_no_anchor_gives_empty_projection():
    assert generate_projections(None, 0, 0, SETTINGS, now=NOW) == []


def test_row_layout():
    rows = project(200_000)
    assert len(rows) == PROJECTION_YEARS + 1
    assert rows[0].year == "Now"
    assert rows[0].is_now
    assert [r.year for r in rows[1:4]] == [2026, 2027, 2028]
    assert rows[-1].year == 2026 + PROJECTION_YEARS - 1
    assert [r.year_offset for r in rows[:3]] == [0, 0, 1]
    assert rows[0].age == 36
    assert rows[2].age == 37


def test_now_row_uses_supplied_values():
    entry = NetWorthEntry("entry-1", 100_000, NOW - timedelta(days=30))
    rows = generate_projections(entry, 100_575.0, 575.0, SETTINGS, now=NOW)
    now_row = rows[0]
    assert now_row.net_worth == 100_575.0
    assert now_row.interest == 575.0
    assert now_row.contributed == 0
    assert now_row.years_from_entry == 0
    assert now_row.monthly_spend == 4000
    assert now_row.fi_target == pytest.approx(1_200_000)
    assert now_row.fi_progress == pytest.approx(100_575 / 1_200_000 * 100)


def test_yearly_rows_compound_to_end_of_year():
    rows = project(200_000)
    end_of_year = datetime(2027, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)
    expected_years = (end_of_year - NOW).total_seconds() / (365.25 * 24 * 3600)
    row = rows[2]
    assert row.years_from_entry == pytest.approx(expected_years)
    fv = calculate_future_value(200_000, 7, expected_years, 20_000)
    assert row.net_worth == pytest.approx(fv.total)
    assert row.contributed == pytest.approx(fv.total_contributed)
    assert row.interest == pytest.approx(row.net_worth - 200_000 - row.contributed)


def test_net_worth_is_monotonic():
    rows = project(200_000)
    values = [r.net_worth for r in rows[1:]]
    assert values == sorted(values)


def test_first_occurrence_markers():
    rows = project(200_000)
    assert sum(r.is_fi_year for r in rows) <= 1
    assert sum(r.is_crossover for r in rows) == 1

    crossover = next(i for i, r in enumerate(rows) if r.is_crossover)
    assert rows[crossover].interest > rows[crossover].contributed > 0
    for row in rows[:crossover]:
        assert not (row.contributed > 0 and row.interest > row.contributed)

    fi_index = next(i for i, r in enumerate(rows) if r.is_fi_year)
    assert rows[fi_index].monthly_swr >= rows[fi_index].monthly_spend
    assert not any(r.swr_covers_spend for r in rows[:fi_index])


def test_now_row_can_be_fi_year():
    rows = project(5_000_000)
    assert rows[0].is_fi_year
    assert not any(r.is_fi_year for r in rows[1:])


def test_no_crossover_without_contributions():
    rows = project(200_000, replace(SETTINGS, yearly_contribution=0))
    assert not any(r.is_crossover for r in rows)


def test_static_spend_with_and_without_inflation():
    real = project(200_000)
    nominal = project(200_000, apply_inflation=True)
    assert real[11].monthly_spend == pytest.approx(4000)
    assert nominal[11].year_offset == 10
    assert nominal[11].monthly_spend == pytest.approx(4000 * 1.03 ** 10)
    assert nominal[11].monthly_spend_today == pytest.approx(4000)
    assert nominal[0].monthly_spend == 4000


def test_spending_levels():
    real = project(500_000, use_spending_levels=True)
    nominal = project(500_000, use_spending_levels=True, apply_inflation=True)
    row = real[6]
    spend = calculate_level_based_spending(row.net_worth, SETTINGS, row.year_offset)
    assert row.monthly_spend == pytest.approx(spend.real)
    assert nominal[6].monthly_spend == pytest.approx(spend.nominal)
    assert real[0].monthly_spend == pytest.approx(3000 + 500_000 * 0.02 / 12)


def test_coast_fi_year_uses_shared_solver():
    rows = project(300_000)
    years = find_coast_fi_years(300_000, 4000, 7, 3, 4)
    assert rows[0].coast_fi_year == 2026 + years
    assert rows[0].coast_fi_age == 2026 + years - 1990

    row = rows[5]
    years = find_coast_fi_years(row.net_worth, 4000, 7, 3, 4, years_offset=row.year_offset)
    assert row.coast_fi_year == row.year + years


def test_zero_spend_is_degenerate_not_fatal():
    rows = project(200_000, replace(SETTINGS, monthly_spend=0))
    assert all(r.fi_target == 0 and r.fi_progress == 0 for r in rows)
    assert not any(r.swr_covers_spend or r.is_fi_year for r in rows)
    assert all(r.coast_fi_year is None for r in rows)


def test_no_birth_date_gives_no_ages():
    rows = project(300_000, replace(SETTINGS, birth_date=None))
    assert all(r.age is None and r.coast_fi_age is None for r in rows)


def test_inflated_rows():
    rows = project(200_000, apply_inflation=True)
    inflated = to_inflated_rows(rows, 3)
    assert inflated[0].net_worth.nominal == inflated[0].net_worth.real
    assert inflated[11].net_worth.real == pytest.approx(rows[11].net_worth / 1.03 ** 10)
    assert inflated[11].monthly_spend.real == pytest.approx(4000)


def test_inflated_rows_log_invalid_values(caplog):
    rows = project(200_000)
    rows[3] = replace(rows[3], net_worth=math.nan)
    with caplog.at_level(logging.WARNING, logger="projections"):
        to_inflated_rows(rows, 3)
    assert "net_worth" in caplog.text


def test_calculate_all_financials():
    entries = [
        NetWorthEntry("old", 150_000, NOW - timedelta(days=400)),
        NetWorthEntry("new", 200_000, NOW - timedelta(days=10)),
    ]
    result = calculate_all_financials(SETTINGS, entries, now=NOW)
    assert result.current_net_worth.base_amount == 200_000
    assert result.current_net_worth.total > 200_000
    assert len(result.projections) == PROJECTION_YEARS + 1
    assert result.current_fi_progress == pytest.approx(result.projections[0].fi_progress)
    assert result.current_annual_swr == pytest.approx(result.current_net_worth.total * 0.04)
    assert result.crossover_year == next(r.year for r in result.projections if r.is_crossover)
    assert result.fi_age == result.fi_year - 1990
    assert len(result.fi_milestones.milestones) == 43
    assert result.level_info.years_elapsed > 1


def test_calculate_all_financials_without_entries():
    result = calculate_all_financials(SETTINGS, [], now=NOW)
    assert result.current_net_worth.total == 0
    assert result.projections == []
    assert result.fi_year is None
    assert result.crossover_year is None
    assert result.current_fi_progress == 0
    assert result.fi_milestones.milestones == []
