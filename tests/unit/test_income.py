"""
Unit tests for income.py module.

Tests SalaryModel projections and the components derived from base salary.
"""

from dataclasses import FrozenInstanceError

import numpy as np
import pandas as pd
import pytest

from finplan.config import IncomeSettings
from finplan.income import SalaryModel


@pytest.fixture
def salary() -> SalaryModel:
    return SalaryModel(
        base=78_500,
        annual_growth=0.05,
        bonus_rate=0.10,
        holiday_allowance_rate=0.08,
        employee_pension_rate=0.0338,
        employer_pension_rate=0.08,
    )


class TestSalaryModelInit:
    """Tests for SalaryModel construction."""

    def test_defaults(self):
        sm = SalaryModel(base=50_000)
        assert sm.annual_growth == 0.0
        assert sm.bonus_rate == 0.0
        assert sm.name == "base_salary"

    def test_negative_base_raises(self):
        with pytest.raises(ValueError, match="base"):
            SalaryModel(base=-1)

    def test_growth_of_minus_one_raises(self):
        with pytest.raises(ValueError, match="annual_growth"):
            SalaryModel(base=50_000, annual_growth=-1.0)

    def test_from_settings(self):
        income = IncomeSettings(base_salary=60_000, salary_growth_rate=0.03, bonus_rate=0.15)
        sm = SalaryModel.from_settings(income)
        assert sm.base == 60_000
        assert sm.annual_growth == 0.03
        assert sm.bonus_rate == 0.15
        assert sm.holiday_allowance_rate == income.holiday_allowance_rate

    def test_frozen(self, salary):
        with pytest.raises(FrozenInstanceError):
            salary.base = 1


class TestSalaryModelProject:
    """Tests for base salary projection."""

    def test_compounded_growth(self, salary):
        np.testing.assert_allclose(salary.project(3), [78_500, 82_425, 86_546.25])

    def test_no_growth(self):
        np.testing.assert_allclose(SalaryModel(base=50_000).project(4), [50_000] * 4)

    def test_zero_years(self, salary):
        assert len(salary.project(0)) == 0

    def test_series_output(self, salary):
        series = salary.project(3, start_year=2025, output="series")
        assert isinstance(series, pd.Series)
        assert list(series.index) == [2025, 2026, 2027]
        assert series.index.name == "year"
        assert series.name == "base_salary"

    def test_invalid_output(self, salary):
        with pytest.raises(ValueError, match="output"):
            salary.project(3, output="list")

    def test_salary_by_year(self, salary):
        by_year = salary.salary_by_year(2025, 2)
        assert list(by_year) == [2025, 2026]
        assert by_year[2026] == pytest.approx(82_425)


class TestSalaryComponents:
    """Tests for bonus, allowance and pension components."""

    def test_gross_income_includes_bonus_and_allowance(self, salary):
        np.testing.assert_allclose(salary.gross_income(1), [92_630])

    def test_gross_income_series_name(self, salary):
        assert salary.gross_income(2, start_year=2025, output="series").name == "gross_income"

    def test_bonus(self, salary):
        np.testing.assert_allclose(salary.bonus(2), [7_850, 8_242.5])

    def test_holiday_allowance(self, salary):
        np.testing.assert_allclose(salary.holiday_allowance(1), [6_280])

    def test_pensions_on_base_only(self, salary):
        np.testing.assert_allclose(salary.employee_pension(1), [78_500 * 0.0338])
        np.testing.assert_allclose(salary.employer_pension(1), [6_280])

    def test_component_series(self, salary):
        series = salary.bonus(2, start_year=2030, output="series")
        assert list(series.index) == [2030, 2031]
        assert series.name == "bonus"
