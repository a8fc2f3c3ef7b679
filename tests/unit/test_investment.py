"""
Unit tests for investment.py module.

Tests the mid-year growth rule, contribution sources and balance chaining.
"""

import pytest

from finplan.config import IncomeSettings, InvestmentSettings
from finplan.financials import YearlyFinancial
from finplan.investment import (
    YearlyInvestment,
    allocation_breakdown,
    project_investments,
    roll_balance,
)


def _financial(year=2025, total_net=40_000.0, net_rsu=5_000.0, expenses=20_000.0, rate=0.30):
    return YearlyFinancial(
        year=year, gross_income=59_000, rsu_gross_value=net_rsu / 0.5,
        total_gross_income=59_000 + net_rsu / 0.5, net_income=total_net - net_rsu,
        net_rsu_value=net_rsu, total_net_income=total_net,
        employer_pension_contribution=4_000, total_expenses=expenses,
        net_savings=total_net - expenses + 4_000, savings_rate=0.5, effective_tax_rate=rate,
    )


@pytest.fixture
def income() -> IncomeSettings:
    """50k base, 10% bonus, 8% holiday allowance, no growth."""
    return IncomeSettings(
        base_salary=50_000, bonus_rate=0.10, holiday_allowance_rate=0.08, salary_growth_rate=0.0
    )


@pytest.fixture
def investment() -> InvestmentSettings:
    """Full bonus invested, half the holiday allowance invested."""
    return InvestmentSettings(bonus_invested_rate=1.0, holiday_allowance_invested_rate=0.5)


class TestRollBalance:
    """Tests for one year of mid-year accrual."""

    def test_contributions_earn_half_a_year(self):
        growth, closing = roll_balance(0, 10_000, 0.10)
        assert growth == pytest.approx(500)
        assert closing == pytest.approx(10_500)

    def test_opening_balance_earns_full_year(self):
        growth, closing = roll_balance(10_000, 0, 0.10)
        assert growth == pytest.approx(1_000)
        assert closing == pytest.approx(11_000)

    def test_negative_return(self):
        growth, closing = roll_balance(10_000, 2_000, -0.10)
        assert growth == pytest.approx(-1_100)
        assert closing == pytest.approx(10_900)


class TestProjectInvestments:
    """Tests for contribution sources and the rolling balance."""

    def test_contribution_sources(self, income, investment):
        year = project_investments(10_000, 0.10, [_financial()], income, investment)[0]
        assert isinstance(year, YearlyInvestment)
        # bonus 5,000 and holiday 4,000 gross at 30% -> 3,500 and 2,800 net
        assert year.bonus_contributions == pytest.approx(3_500)
        assert year.holiday_allowance_contributions == pytest.approx(1_400)
        # 40,000 - 5,000 - 3,500 - 2,800 - 20,000
        assert year.monthly_savings_contributions == pytest.approx(8_700)
        assert year.rsu_contributions == pytest.approx(5_000)
        assert year.cash_contributions == pytest.approx(13_600)
        assert year.contributions == pytest.approx(18_600)

    def test_balance(self, income, investment):
        year = project_investments(10_000, 0.10, [_financial()], income, investment)[0]
        assert year.opening_balance == pytest.approx(10_000)
        assert year.investment_growth == pytest.approx(1_930)
        assert year.closing_balance == pytest.approx(30_530)
        assert year.cumulative_roi == pytest.approx(2.053)

    def test_monthly_savings_floored_at_zero(self, income, investment):
        year = project_investments(
            10_000, 0.10, [_financial(expenses=50_000)], income, investment
        )[0]
        assert year.monthly_savings_contributions == 0.0
        assert year.contributions == pytest.approx(3_500 + 1_400 + 5_000)

    def test_balances_chain(self, income, investment):
        financials = [_financial(year=2025 + i) for i in range(4)]
        years = project_investments(10_000, 0.07, financials, income, investment)
        assert [y.year for y in years] == [2025, 2026, 2027, 2028]
        for prev, nxt in zip(years, years[1:]):
            assert nxt.opening_balance == pytest.approx(prev.closing_balance)

    def test_roi_zero_without_starting_capital(self, income, investment):
        year = project_investments(0, 0.10, [_financial()], income, investment)[0]
        assert year.cumulative_roi == 0.0

    def test_negative_starting_net_worth(self, income, investment):
        year = project_investments(-5_000, 0.10, [_financial()], income, investment)[0]
        assert year.opening_balance == -5_000
        assert year.cumulative_roi == 0.0

    def test_empty(self, income, investment):
        assert project_investments(10_000, 0.10, [], income, investment) == []


class TestAllocationBreakdown:
    """Tests for splitting a value by fractions."""

    def test_split(self):
        assert allocation_breakdown(100_000, {"stocks": 0.8, "bonds": 0.2}) == {
            "stocks": pytest.approx(80_000),
            "bonds": pytest.approx(20_000),
        }

    def test_empty(self):
        assert allocation_breakdown(100_000, {}) == {}
