"""
Pension fund projection for FinPlan.

The pension fund is kept apart from liquid investments. It receives the
employee contribution deducted in the tax calculation and the employer
contribution paid on top of salary, and grows with the same mid-year
accrual rule as the investment portfolio (see `finplan.investment.roll_balance`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from .financials import YearlyFinancial
from .investment import roll_balance
from .tax import TaxResult

__all__ = [
    "YearlyPension",
    "project_pension",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearlyPension:
    """Pension fund balance of one projection year."""

    year: int
    opening_balance: float
    employee_contributions: float
    employer_contributions: float
    pension_growth: float
    closing_balance: float


def project_pension(
    starting_balance: float,
    return_rate: float,
    financials: Sequence[YearlyFinancial],
    tax_results: Sequence[TaxResult],
) -> List[YearlyPension]:
    """
    Project the pension balance over the years of *financials*.

    Employee contributions are the `pension_contributions` of the tax result
    of the same year (0 when missing); employer contributions come from the
    aggregated financials.
    """
    results: List[YearlyPension] = []
    balance = starting_balance
    for i, fin in enumerate(financials):
        employee = tax_results[i].pension_contributions if i < len(tax_results) else 0.0
        employer = fin.employer_pension_contribution
        growth, closing = roll_balance(balance, employee + employer, return_rate)
        results.append(YearlyPension(
            year=fin.year,
            opening_balance=balance,
            employee_contributions=employee,
            employer_contributions=employer,
            pension_growth=growth,
            closing_balance=closing,
        ))
        balance = closing

    logger.debug("Projected pension over %d years, closing %.2f", len(results), balance)
    return results
