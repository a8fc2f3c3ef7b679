"""
Pytest configuration and fixtures for FinPlan test suite.

This module provides reusable fixtures for testing all FinPlan components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

from typing import List

import pytest

from finplan.config import (
    ExpenseCategory,
    IncomeSettings,
    InvestmentSettings,
    PlanningSettings,
    RSUGrant,
    Settings,
    default_settings,
)
from finplan.rsu import default_grant
from finplan.tax import NETHERLANDS_2025, TaxResult, compute_tax


# ---------------------------------------------------------------------------
# Settings Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    """Default plan: 78.5k salary, 30% ruling, seven categories, one 2024 grant."""
    return default_settings()


@pytest.fixture
def plain_income() -> IncomeSettings:
    """
    50k salary without extras.

    No bonus, no holiday allowance, no healthcare benefit, no 30% ruling,
    no growth. Pension 3.38% employee, 8% employer.
    """
    return IncomeSettings(
        base_salary=50_000,
        bonus_rate=0.0,
        holiday_allowance_rate=0.0,
        employee_pension_rate=0.0338,
        employer_pension_rate=0.08,
        healthcare_benefit_monthly=0.0,
        has_30_percent_ruling=False,
        salary_growth_rate=0.0,
    )


@pytest.fixture
def one_year() -> PlanningSettings:
    """Single projection year 2025 without inflation."""
    return PlanningSettings(start_year=2025, projection_years=1, expense_inflation_rate=0.0)


@pytest.fixture
def rent() -> List[ExpenseCategory]:
    """1,000 EUR monthly rent."""
    return [ExpenseCategory(id="rent", name="Rent", monthly_amount=1_000)]


@pytest.fixture
def plain_settings(plain_income, rent) -> Settings:
    """
    Plan without RSU built on `plain_income`.

    Four years from 2025, 10k starting net worth, 7% return, no pension
    balance, no expense inflation.
    """
    return Settings(
        income=plain_income,
        investment=InvestmentSettings(
            starting_net_worth=10_000,
            starting_pension_balance=0.0,
            annual_return_rate=0.07,
            pension_return_rate=0.05,
        ),
        planning=PlanningSettings(start_year=2025, projection_years=4, expense_inflation_rate=0.0),
        expenses=rent,
        rsu_grants=[],
    )


# ---------------------------------------------------------------------------
# RSU Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def main_grant() -> RSUGrant:
    """100k EUR at 100 EUR/share granted 2024: 1,000 shares, 250 per year."""
    return default_grant(2024)


# ---------------------------------------------------------------------------
# Tax Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tax_config():
    """The 2025 Dutch tax table."""
    return NETHERLANDS_2025


@pytest.fixture
def tax_50k() -> TaxResult:
    """Tax on 50k gross, no ruling, 3.38% pension (1,690)."""
    return compute_tax(50_000, 0.0338, False, 2025)
