"""
Investment portfolio projection module for FinPlan.

Purpose
-------
Rolls the liquid investment balance forward year by year. Each year's
contributions come from four sources, kept apart so they can be reported:

- monthly savings: net salary income (without RSU, bonus and holiday
  allowance) minus expenses, floored at 0
- holiday allowance: the invested share of the net holiday allowance
- bonus: the invested share of the net bonus
- RSU: the full net value of the vesting shares

Key Mathematical Framework
--------------------------
Contributions arrive spread over the year, so they earn half a year of
return on average (uniform mid-year accrual):

    growth_t  = (W_t + C_t / 2) * r
    W_{t+1}   = W_t + C_t + growth_t

Bonus and holiday allowance nets are estimated with the year's effective
tax rate: net = gross * (1 - effective_tax_rate).

Example
-------
>>> from finplan.investment import roll_balance
>>> roll_balance(10_000, 2_000, 0.10)
(1100.0, 13100.0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from .config import IncomeSettings, InvestmentSettings
from .financials import YearlyFinancial
from .income import SalaryModel

__all__ = [
    "YearlyInvestment",
    "roll_balance",
    "project_investments",
    "allocation_breakdown",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearlyInvestment:
    """
    Liquid investment balance of one projection year.

    Attributes
    ----------
    year : int
        Calendar year.
    opening_balance : float
        Previous year's closing balance (starting net worth in year one).
    contributions : float
        cash_contributions + rsu_contributions.
    monthly_savings_contributions : float
        max(0, net salary only - expenses).
    holiday_allowance_contributions : float
        Invested share of the net holiday allowance.
    bonus_contributions : float
        Invested share of the net bonus.
    cash_contributions : float
        Monthly savings + holiday allowance + bonus contributions.
    rsu_contributions : float
        Net RSU value, invested in full.
    investment_growth : float
        Return earned this year.
    closing_balance : float
        opening_balance + contributions + investment_growth.
    cumulative_roi : float
        (closing - starting net worth) / starting net worth; 0 when the
        starting net worth is not positive.
    """

    year: int
    opening_balance: float
    contributions: float
    monthly_savings_contributions: float
    holiday_allowance_contributions: float
    bonus_contributions: float
    cash_contributions: float
    rsu_contributions: float
    investment_growth: float
    closing_balance: float
    cumulative_roi: float


def roll_balance(opening: float, contributions: float, rate: float) -> Tuple[float, float]:
    """
    One year of growth with contributions accruing mid-year.

    Returns
    -------
    tuple of float
        (growth, closing_balance)
    """
    growth = (opening + contributions / 2.0) * rate
    return growth, opening + contributions + growth


def project_investments(
    starting_net_worth: float,
    annual_return_rate: float,
    financials: Sequence[YearlyFinancial],
    income: IncomeSettings,
    investment: InvestmentSettings,
) -> List[YearlyInvestment]:
    """
    Project the investment balance over the years of *financials*.

    Parameters
    ----------
    starting_net_worth : float
        Opening balance of the first year. May be negative.
    annual_return_rate : float
        Portfolio return applied through `roll_balance`.
    financials : Sequence[YearlyFinancial]
        Aggregated yearly rows; one YearlyInvestment is produced per row.
    income : IncomeSettings
        Used to recompute the gross bonus and holiday allowance of each year.
    investment : InvestmentSettings
        Invested fractions of the net bonus and holiday allowance.

    Returns
    -------
    list of YearlyInvestment
        Chained: each opening balance equals the previous closing balance.
    """
    salary = SalaryModel.from_settings(income)
    n = len(financials)
    bonus_gross = salary.bonus(n)
    holiday_gross = salary.holiday_allowance(n)

    results: List[YearlyInvestment] = []
    balance = starting_net_worth
    for i, fin in enumerate(financials):
        keep = 1.0 - fin.effective_tax_rate
        bonus_net = float(bonus_gross[i]) * keep
        holiday_net = float(holiday_gross[i]) * keep

        bonus_contrib = bonus_net * investment.bonus_invested_rate
        holiday_contrib = holiday_net * investment.holiday_allowance_invested_rate

        net_salary_only = fin.total_net_income - fin.net_rsu_value - bonus_net - holiday_net
        monthly = max(0.0, net_salary_only - fin.total_expenses)
        rsu_contrib = fin.net_rsu_value

        cash = monthly + holiday_contrib + bonus_contrib
        contributions = cash + rsu_contrib
        growth, closing = roll_balance(balance, contributions, annual_return_rate)

        roi = (
            (closing - starting_net_worth) / starting_net_worth
            if starting_net_worth > 0 else 0.0
        )

        results.append(YearlyInvestment(
            year=fin.year,
            opening_balance=balance,
            contributions=contributions,
            monthly_savings_contributions=monthly,
            holiday_allowance_contributions=holiday_contrib,
            bonus_contributions=bonus_contrib,
            cash_contributions=cash,
            rsu_contributions=rsu_contrib,
            investment_growth=growth,
            closing_balance=closing,
            cumulative_roi=roi,
        ))
        balance = closing

    logger.debug("Projected investments over %d years, closing %.2f", n, balance)
    return results


def allocation_breakdown(total: float, allocations: Mapping[str, float]) -> Dict[str, float]:
    """
    Split *total* by named fractions.

    Fractions are applied as given; they need not sum to 1.

    >>> allocation_breakdown(100_000, {"stocks": 0.8, "bonds": 0.2})
    {'stocks': 80000.0, 'bonds': 20000.0}
    """
    return {name: total * fraction for name, fraction in allocations.items()}
