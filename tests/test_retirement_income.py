import math
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from retirement_income import (
    calculate_net_worth_for_retirement_income,
    calculate_projected_retirement_income,
    calculate_retirement_income_info,
)


def test_income_at_retirement_is_plain_swr():
    assert calculate_projected_retirement_income(1_000_000, 0, 7, 3, 4) == 40_000


def test_required_net_worth_at_retirement():
    assert calculate_net_worth_for_retirement_income(50_000, 0, 7, 3, 4) == pytest.approx(1_250_000)


def test_income_grows_with_real_return():
    income = calculate_projected_retirement_income(100_000, 29, 7, 3, 4)
    assert income == pytest.approx(100_000 * (1.07 / 1.03) ** 29 * 0.04)
    assert income > 10_000


@pytest.mark.parametrize("net_worth", [10_000, 250_000, 3_000_000])
@pytest.mark.parametrize("years", [0, 5, 29, 44])
def test_income_and_net_worth_are_inverse(net_worth, years):
    income = calculate_projected_retirement_income(net_worth, years, 7, 3, 4)
    assert calculate_net_worth_for_retirement_income(income, years, 7, 3, 4) == pytest.approx(net_worth)


def test_younger_savers_need_less():
    young = calculate_net_worth_for_retirement_income(50_000, 40, 7, 3, 4)
    old = calculate_net_worth_for_retirement_income(50_000, 10, 7, 3, 4)
    assert young < old


def test_degenerate_targets():
    assert calculate_net_worth_for_retirement_income(0, 10, 7, 3, 4) == 0
    assert calculate_net_worth_for_retirement_income(50_000, 10, 7, 3, 0) == math.inf
    assert calculate_projected_retirement_income(1_000_000, 10, 7, 3, 0) == 0


def test_retirement_income_info():
    info = calculate_retirement_income_info(500_000, 20, 7, 3, 4)
    assert info.net_worth_at_retirement == pytest.approx(500_000 * 1.07 ** 20)
    assert info.nominal_annual_income == pytest.approx(info.net_worth_at_retirement * 0.04)
    assert info.real_annual_income == pytest.approx(info.nominal_annual_income / 1.03 ** 20)
    assert info.real_monthly_income == pytest.approx(info.real_annual_income / 12)
