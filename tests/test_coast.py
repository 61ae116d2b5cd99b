import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from calculations import calculate_fi_target
from coast import (
    calculate_coast_fi_percent,
    calculate_runway_and_coast_info,
    fi_target_schedule,
    find_coast_fi_years,
    solve_coast_year,
)


def test_coast_percent_in_expected_range():
    percent = calculate_coast_fi_percent(100_000, 4000, 30, 7, 3, 4)
    assert 20 < percent < 35


def test_coast_percent_equals_fi_progress_at_retirement():
    percent = calculate_coast_fi_percent(600_000, 4000, 0, 7, 3, 4)
    assert percent == pytest.approx(600_000 / calculate_fi_target(4000, 4) * 100)


def test_coast_percent_scales_linearly_with_net_worth():
    one = calculate_coast_fi_percent(100_000, 4000, 30, 7, 3, 4)
    two = calculate_coast_fi_percent(200_000, 4000, 30, 7, 3, 4)
    three = calculate_coast_fi_percent(300_000, 4000, 30, 7, 3, 4)
    assert two == pytest.approx(one * 2)
    assert three > two > one


def test_coast_percent_zero_target():
    assert calculate_coast_fi_percent(100_000, 0, 30, 7, 3, 4) == 0
    assert calculate_coast_fi_percent(100_000, 4000, 30, 7, 3, 0) == 0


def test_target_schedule_inflates_from_offset():
    schedule = fi_target_schedule(4000, 4, 3, years_offset=5)
    assert schedule(0) == pytest.approx(calculate_fi_target(4000 * 1.03 ** 5, 4))
    assert schedule(2) == pytest.approx(calculate_fi_target(4000 * 1.03 ** 7, 4))


def test_solver_returns_zero_when_already_there():
    assert solve_coast_year(2_000_000, 7, lambda y: 1_200_000) == 0


def test_solver_finds_first_year():
    # 100k doubles at 100% per year: 100k, 200k, 400k, 800k
    assert solve_coast_year(100_000, 100, lambda y: 500_000) == 3


def test_solver_respects_horizon():
    assert solve_coast_year(1, 1, lambda y: 1e12, horizon=10) is None


@pytest.mark.parametrize(
    "rate,spend,swr",
    [(0, 4000, 4), (-2, 4000, 4), (7, 0, 4), (7, 4000, 0)],
)
def test_degenerate_inputs_short_circuit(rate, spend, swr):
    assert find_coast_fi_years(1_000_000, spend, rate, 3, swr) is None


def test_coast_years_against_growing_target():
    years = find_coast_fi_years(300_000, 4000, 7, 3, 4)
    schedule = fi_target_schedule(4000, 4, 3)
    assert years is not None
    assert 300_000 * 1.07 ** years >= schedule(years)
    assert 300_000 * 1.07 ** (years - 1) < schedule(years - 1)


def test_no_coast_year_when_inflation_outpaces_returns():
    assert find_coast_fi_years(100_000, 4000, 2, 5, 4) is None


def test_runway_and_coast_info():
    info = calculate_runway_and_coast_info(120_000, 4000, 30, 7, 3, 4)
    assert info.runway_years == pytest.approx(2.5)
    assert info.fi_target == pytest.approx(1_200_000)
    assert info.projected_value_at_retirement == pytest.approx(120_000 * 1.07 ** 30)
    assert info.coast_fi_percent == pytest.approx(
        info.projected_value_at_retirement / info.fi_target_at_retirement * 100
    )
