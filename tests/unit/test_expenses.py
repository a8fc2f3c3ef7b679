"""
Unit tests for expenses.py module.

Tests the yearly expense projection from monthly categories.
"""

import numpy as np
import pandas as pd
import pytest

from finplan.config import ExpenseCategory
from finplan.expenses import ExpenseModel


class TestExpenseModel:
    """Tests for ExpenseModel totals and projection."""

    def test_default_budget_totals(self, settings):
        em = ExpenseModel.from_settings(settings)
        assert em.monthly_total == pytest.approx(3_400)
        assert em.annual_total == pytest.approx(40_800)
        assert em.annual_inflation == settings.planning.expense_inflation_rate

    def test_categories_stored_as_tuple(self, rent):
        em = ExpenseModel(categories=rent)
        assert isinstance(em.categories, tuple)

    def test_empty(self):
        em = ExpenseModel()
        assert em.monthly_total == 0.0
        np.testing.assert_allclose(em.project(3), [0, 0, 0])

    def test_inflation(self, rent):
        em = ExpenseModel(categories=rent, annual_inflation=0.02)
        np.testing.assert_allclose(em.project(3), [12_000, 12_240, 12_484.8])

    def test_series_output(self, rent):
        series = ExpenseModel(categories=rent).project(2, start_year=2025, output="series")
        assert isinstance(series, pd.Series)
        assert list(series.index) == [2025, 2026]
        assert series.name == "expenses"

    def test_invalid_output(self, rent):
        with pytest.raises(ValueError):
            ExpenseModel(categories=rent).project(2, output="frame")

    def test_invalid_inflation(self):
        with pytest.raises(ValueError, match="annual_inflation"):
            ExpenseModel(annual_inflation=-1.0)


class TestExpenseBreakdown:
    """Tests for the per-category breakdown."""

    def test_breakdown_inflates(self, rent):
        em = ExpenseModel(categories=rent, annual_inflation=0.10)
        assert em.breakdown(2027, 2025) == {"Rent": pytest.approx(14_520)}

    def test_breakdown_sums_shared_names(self):
        em = ExpenseModel(categories=[
            ExpenseCategory(id="a", name="Food", monthly_amount=300),
            ExpenseCategory(id="b", name="Food", monthly_amount=200),
            ExpenseCategory(id="c", name="Rent", monthly_amount=1_000),
        ])
        assert em.breakdown(2025, 2025) == {
            "Food": pytest.approx(6_000),
            "Rent": pytest.approx(12_000),
        }
