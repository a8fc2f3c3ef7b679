"""
Global constants for FinPlan.

Purpose
-------
Centralizes default values used throughout the FinPlan codebase: the
defaults of a fresh plan, calendar constants, and the column layout of the
flat yearly export.

Usage
-----
>>> from finplan.constants import DEFAULT_START_YEAR, MONTHS_PER_YEAR
>>> annual = monthly_amount * MONTHS_PER_YEAR

Categories
----------
- Time: calendar constants and planning horizon
- Income: salary, bonus, allowance and pension defaults
- Investment: balances, returns and invested fractions
- RSU: grant defaults
- Export: CSV header and schema version
"""

from typing import Tuple

__all__ = [
    # Time
    "MONTHS_PER_YEAR",
    "DEFAULT_START_YEAR",
    "DEFAULT_PROJECTION_YEARS",
    "DEFAULT_EXPENSE_INFLATION",
    # Income
    "DEFAULT_BASE_SALARY",
    "DEFAULT_BONUS_RATE",
    "DEFAULT_HOLIDAY_ALLOWANCE_RATE",
    "DEFAULT_EMPLOYEE_PENSION_RATE",
    "DEFAULT_EMPLOYER_PENSION_RATE",
    "DEFAULT_HEALTHCARE_BENEFIT_MONTHLY",
    "DEFAULT_SALARY_GROWTH",
    # Investment
    "DEFAULT_STARTING_NET_WORTH",
    "DEFAULT_ANNUAL_RETURN",
    "DEFAULT_PENSION_RETURN",
    "DEFAULT_SHARE_PRICE_GROWTH",
    "DEFAULT_SHARE_PRICE",
    "DEFAULT_INVESTED_RATE",
    # RSU
    "DEFAULT_VESTING_YEARS",
    "DEFAULT_GRANT_VALUE",
    "DEFAULT_GRANT_SHARE_PRICE",
    "DEFAULT_REFRESHER_VALUE",
    "DEFAULT_REFRESHER_SHARE_PRICE",
    # Export
    "SCHEMA_VERSION",
    "CSV_HEADERS",
]


# =============================================================================
# Time
# =============================================================================

MONTHS_PER_YEAR: int = 12
"""Number of months in a year (monthly amounts to annual)."""

DEFAULT_START_YEAR: int = 2025
"""First projection year of a fresh plan."""

DEFAULT_PROJECTION_YEARS: int = 6
"""Number of projected years of a fresh plan."""

DEFAULT_EXPENSE_INFLATION: float = 0.02
"""Annual expense inflation (2%)."""


# =============================================================================
# Income Defaults
# =============================================================================

DEFAULT_BASE_SALARY: float = 78_500.0
"""Annual gross base salary in EUR."""

DEFAULT_BONUS_RATE: float = 0.10
"""Bonus as a fraction of base salary (paid once a year)."""

DEFAULT_HOLIDAY_ALLOWANCE_RATE: float = 0.08
"""Holiday allowance (vakantiegeld) as a fraction of base salary."""

DEFAULT_EMPLOYEE_PENSION_RATE: float = 0.0338
"""Employee pension contribution as a fraction of base salary."""

DEFAULT_EMPLOYER_PENSION_RATE: float = 0.08
"""Employer pension contribution as a fraction of base salary."""

DEFAULT_HEALTHCARE_BENEFIT_MONTHLY: float = 200.0
"""Tax-free monthly healthcare benefit in EUR."""

DEFAULT_SALARY_GROWTH: float = 0.05
"""Annual base salary growth (5%)."""


# =============================================================================
# Investment Defaults
# =============================================================================

DEFAULT_STARTING_NET_WORTH: float = 71_000.0
"""Liquid investments at the start of the plan."""

DEFAULT_ANNUAL_RETURN: float = 0.10
"""Expected annual return of the liquid portfolio."""

DEFAULT_PENSION_RETURN: float = 0.07
"""Expected annual return of the pension fund."""

DEFAULT_SHARE_PRICE_GROWTH: float = 0.05
"""Annual employer share price growth."""

DEFAULT_SHARE_PRICE: float = 150.0
"""Employer share price at the start of the plan."""

DEFAULT_INVESTED_RATE: float = 1.0
"""Fraction of bonus and holiday allowance that is invested."""


# =============================================================================
# RSU Defaults
# =============================================================================

DEFAULT_VESTING_YEARS: int = 4
"""Vesting period of a standard grant."""

DEFAULT_GRANT_VALUE: float = 100_000.0
"""Value of the default main grant in EUR."""

DEFAULT_GRANT_SHARE_PRICE: float = 100.0
"""Share price of the default main grant."""

DEFAULT_REFRESHER_VALUE: float = 40_000.0
"""Value of a default refresher grant in EUR."""

DEFAULT_REFRESHER_SHARE_PRICE: float = 150.0
"""Share price of a default refresher grant."""


# =============================================================================
# Export
# =============================================================================

SCHEMA_VERSION: str = "0.1.0"
"""Version of the settings/export JSON document."""

CSV_HEADERS: Tuple[str, ...] = (
    "Year",
    "Gross Income",
    "Net Income",
    "Total Expenses",
    "Net Savings",
    "Savings Rate",
    "Effective Tax Rate",
    "Investment Balance",
    "Pension Balance",
)
"""Column order of the flat yearly export."""
