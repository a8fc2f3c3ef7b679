"""
Unit tests for financials.py module.

Tests the yearly aggregation of salary, tax, RSU and expenses.
"""

import pytest

from finplan.config import IncomeSettings, PlanningSettings
from finplan.financials import YearlyFinancial, aggregate_financials
from finplan.rsu import RSUVestingYear
from finplan.tax import compute_tax


def _rsu(year, gross, tax):
    return RSUVestingYear(
        year=year, shares_vested=gross / 100, grant_price_avg=100, vesting_price=100,
        gross_value=gross, stock_appreciation=0, appreciation_pct=0,
        marginal_tax_rate=tax / gross if gross else 0, tax_paid=tax,
        net_value=gross - tax, tax_mode="exact",
    )


class TestAggregateFinancials:
    """Tests for one-year aggregation."""

    def test_salary_only_year(self, plain_income, one_year, rent, tax_50k):
        row = aggregate_financials(plain_income, one_year, rent, [tax_50k], [])[0]
        assert isinstance(row, YearlyFinancial)
        assert row.year == 2025
        assert row.gross_income == pytest.approx(50_000)
        assert row.rsu_gross_value == 0.0
        assert row.total_gross_income == pytest.approx(50_000)
        assert row.net_income == pytest.approx(35_145.7636, abs=1e-3)
        assert row.employer_pension_contribution == pytest.approx(4_000)
        assert row.total_expenses == pytest.approx(12_000)
        assert row.net_savings == pytest.approx(27_145.7636, abs=1e-3)
        assert row.savings_rate == pytest.approx(27_145.7636 / 39_145.7636, abs=1e-6)
        assert row.effective_tax_rate == pytest.approx(tax_50k.effective_tax_rate)

    def test_gross_includes_bonus_and_allowance(self, one_year):
        income = IncomeSettings(base_salary=78_500, bonus_rate=0.10, holiday_allowance_rate=0.08)
        tax = compute_tax(92_630, 0.0338, True, 2025, pension_override=78_500 * 0.0338)
        row = aggregate_financials(income, one_year, [], [tax], [])[0]
        assert row.gross_income == pytest.approx(92_630)

    def test_healthcare_benefit_added_to_net(self, plain_income, one_year, tax_50k):
        income = plain_income.model_copy(update={"healthcare_benefit_monthly": 200})
        base = aggregate_financials(plain_income, one_year, [], [tax_50k], [])[0]
        with_benefit = aggregate_financials(income, one_year, [], [tax_50k], [])[0]
        assert with_benefit.net_income - base.net_income == pytest.approx(2_400)

    def test_salary_only_tax_result_preferred(self, plain_income, one_year, rent):
        combined = compute_tax(60_000, 0.0338, False, 2025, pension_override=1_690)
        salary_only = compute_tax(50_000, 0.0338, False, 2025, pension_override=1_690)
        rsu = _rsu(2025, 10_000, combined.total_tax - salary_only.total_tax)
        row = aggregate_financials(
            plain_income, one_year, rent, [combined], [rsu], tax_without_rsu=[salary_only]
        )[0]
        assert row.net_income == pytest.approx(salary_only.net_income)
        assert row.net_rsu_value == pytest.approx(rsu.net_value)
        assert row.total_net_income == pytest.approx(salary_only.net_income + rsu.net_value)
        assert row.total_gross_income == pytest.approx(60_000)
        assert row.effective_tax_rate == pytest.approx(combined.effective_tax_rate)

    def test_proportional_split_without_salary_only_result(self, plain_income, one_year):
        combined = compute_tax(60_000, 0.0338, False, 2025, pension_override=1_690)
        rsu = _rsu(2025, 10_000, 4_000)
        row = aggregate_financials(plain_income, one_year, [], [combined], [rsu])[0]
        assert row.net_income == pytest.approx(combined.net_income * 50_000 / 60_000)

    def test_employer_pension_counts_as_savings(self, plain_income, one_year, rent, tax_50k):
        no_employer = plain_income.model_copy(update={"employer_pension_rate": 0.0})
        with_employer = aggregate_financials(plain_income, one_year, rent, [tax_50k], [])[0]
        without = aggregate_financials(no_employer, one_year, rent, [tax_50k], [])[0]
        assert with_employer.net_savings - without.net_savings == pytest.approx(4_000)


class TestAggregateFinancialsEdgeCases:
    """Tests for horizon length and degenerate inputs."""

    def test_one_row_per_projection_year(self, plain_income, rent):
        planning = PlanningSettings(start_year=2025, projection_years=3, expense_inflation_rate=0.02)
        taxes = [compute_tax(50_000, 0.0338, False, 2025 + i) for i in range(3)]
        rows = aggregate_financials(plain_income, planning, rent, taxes, [])
        assert [r.year for r in rows] == [2025, 2026, 2027]
        assert rows[2].total_expenses == pytest.approx(12_000 * 1.02 ** 2)

    def test_missing_tax_results_degrade_to_zero(self, plain_income, one_year):
        row = aggregate_financials(plain_income, one_year, [], [], [])[0]
        assert row.net_income == 0.0
        assert row.effective_tax_rate == 0.0
        assert row.savings_rate == 0.0

    def test_empty_horizon(self, plain_income, rent):
        planning = PlanningSettings(start_year=2025, projection_years=0)
        assert aggregate_financials(plain_income, planning, rent, [], []) == []
