"""
Unit tests for utils.py module.
"""

import math

import numpy as np
import pandas as pd
import pytest

from finplan.utils import (
    check_non_negative,
    compute_cagr,
    format_currency,
    format_pct,
    growth_factors,
    safe_div,
    year_index,
)


class TestValidation:
    """Tests for validation helpers."""

    def test_check_non_negative_accepts_zero(self):
        check_non_negative("x", 0)

    def test_check_non_negative_rejects_negative(self):
        with pytest.raises(ValueError, match="x must be non-negative"):
            check_non_negative("x", -0.01)


class TestGrowthAndIndex:
    """Tests for growth factors and year indexes."""

    def test_growth_factors(self):
        np.testing.assert_allclose(growth_factors(0.10, 3), [1.0, 1.1, 1.21])

    def test_growth_factors_empty(self):
        assert len(growth_factors(0.10, 0)) == 0
        assert len(growth_factors(0.10, -2)) == 0

    def test_year_index(self):
        idx = year_index(2025, 3)
        assert list(idx) == [2025, 2026, 2027]
        assert idx.name == "year"

    def test_year_index_offsets(self):
        assert list(year_index(None, 2)) == [0, 1]

    def test_year_index_empty(self):
        idx = year_index(2025, 0)
        assert isinstance(idx, pd.Index)
        assert len(idx) == 0


class TestFinanceHelpers:
    """Tests for safe division and CAGR."""

    def test_safe_div(self):
        assert safe_div(1, 4) == 0.25
        assert safe_div(1, 0) == 0.0
        assert safe_div(1, 0, default=-1.0) == -1.0

    def test_cagr(self):
        assert compute_cagr(100, 121, 2) == pytest.approx(0.10)

    def test_cagr_zero_start_is_zero(self):
        result = compute_cagr(0, 10_000, 5)
        assert result == 0.0
        assert math.isfinite(result)

    def test_cagr_negative_start_is_zero(self):
        assert compute_cagr(-100, 100, 5) == 0.0

    def test_cagr_zero_years_is_zero(self):
        assert compute_cagr(100, 200, 0) == 0.0

    def test_cagr_loss(self):
        assert compute_cagr(100, 81, 2) == pytest.approx(-0.10)


class TestFormatting:
    """Tests for CLI formatting helpers."""

    def test_currency(self):
        assert format_currency(78_500) == "€78,500"
        assert format_currency(1234.5, decimals=2) == "€1,234.50"

    def test_negative_currency(self):
        assert format_currency(-1234.5, decimals=2) == "-€1,234.50"

    def test_pct(self):
        assert format_pct(0.0942) == "9.4%"
        assert format_pct(0.0942, decimals=2) == "9.42%"
