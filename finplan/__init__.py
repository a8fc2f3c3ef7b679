"""
FinPlan — Personal Finance Projections for the Netherlands

Projects salary, Dutch income tax, RSU vesting, expenses, savings,
investments and pension fund balance year by year.

Modules
-------
- config        : Plan settings, tax tables and application settings
- tax           : Dutch Box 1 tax engine (brackets, premies, credits, 30% ruling)
- income        : Salary projection and its derived components
- expenses      : Inflated yearly expenses from monthly categories
- rsu           : RSU vesting schedule, valuation and tax
- financials    : Yearly aggregation of income, expenses and savings
- investment    : Investment portfolio balance
- pension       : Pension fund balance
- metrics       : Dashboard summary figures
- projection    : The projection pipeline
- serialization : Settings persistence, JSON and CSV exports
"""

from .config import Settings, default_settings, validate_settings
from .projection import FinancialProjections, project, run
from .tax import TaxResult, compute_tax
from . import utils

__all__ = [
    "Settings",
    "default_settings",
    "validate_settings",
    "FinancialProjections",
    "project",
    "run",
    "TaxResult",
    "compute_tax",
    "utils",
]
