"""
Yearly financial aggregation for FinPlan.

Purpose
-------
Joins the salary projection, the tax results and the RSU vesting into one
row per year: what was earned (gross and net), what was spent, and what was
saved. The employer pension contribution counts as savings because it goes
straight into the pension fund.

Per year i (calendar year start_year + i):

    gross        = base_i * (1 + holiday_rate + bonus_rate)
    employer     = base_i * employer_pension_rate
    net salary   = net income of the salary-only tax result
                   (or the salary share of the combined net income)
                   + healthcare_benefit_monthly * 12
    total net    = net salary + net RSU
    net savings  = total net - expenses + employer
    savings rate = net savings / (total net + employer), 0 if total net <= 0

Example
-------
>>> from finplan.financials import aggregate_financials
>>> rows = aggregate_financials(settings.income, settings.planning,
...                             settings.expenses, tax_results, vesting)
>>> rows[0].net_savings
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import ExpenseCategory, IncomeSettings, PlanningSettings
from .constants import MONTHS_PER_YEAR
from .expenses import ExpenseModel
from .income import SalaryModel
from .rsu import RSUVestingYear
from .tax import TaxResult

__all__ = [
    "YearlyFinancial",
    "aggregate_financials",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearlyFinancial:
    """
    Income, expenses and savings of one projection year.

    Attributes
    ----------
    year : int
        Calendar year.
    gross_income : float
        Salary + bonus + holiday allowance.
    rsu_gross_value : float
        Gross value of the shares vesting this year.
    total_gross_income : float
        gross_income + rsu_gross_value.
    net_income : float
        Net salary income, healthcare benefit included.
    net_rsu_value : float
        RSU value after tax.
    total_net_income : float
        net_income + net_rsu_value.
    employer_pension_contribution : float
        Paid by the employer on top of salary.
    total_expenses : float
        Inflated yearly expenses.
    net_savings : float
        total_net_income - total_expenses + employer_pension_contribution.
    savings_rate : float
        Share of (total net + employer pension) that is saved.
    effective_tax_rate : float
        Effective rate of the combined (salary + RSU) tax result.
    """

    year: int
    gross_income: float
    rsu_gross_value: float
    total_gross_income: float
    net_income: float
    net_rsu_value: float
    total_net_income: float
    employer_pension_contribution: float
    total_expenses: float
    net_savings: float
    savings_rate: float
    effective_tax_rate: float


def aggregate_financials(
    income: IncomeSettings,
    planning: PlanningSettings,
    expenses: Sequence[ExpenseCategory],
    tax_results: Sequence[TaxResult],
    rsu_vesting: Sequence[RSUVestingYear],
    tax_without_rsu: Optional[Sequence[TaxResult]] = None,
) -> List[YearlyFinancial]:
    """
    Build one YearlyFinancial per projection year.

    Parameters
    ----------
    income : IncomeSettings
        Salary, allowance, pension and healthcare parameters.
    planning : PlanningSettings
        Start year, horizon and expense inflation.
    expenses : Sequence[ExpenseCategory]
        Monthly budget categories.
    tax_results : Sequence[TaxResult]
        Tax on salary + RSU, one per year.
    rsu_vesting : Sequence[RSUVestingYear]
        RSU vesting, one per year. Missing years count as no vesting.
    tax_without_rsu : Sequence[TaxResult], optional
        Tax on salary alone. When absent for a year, the net salary is the
        salary share (gross / total gross) of the combined net income.

    Returns
    -------
    list of YearlyFinancial
        Exactly `planning.projection_years` rows.
    """
    n = max(planning.projection_years, 0)
    salary = SalaryModel.from_settings(income)
    gross = salary.gross_income(n)
    employer = salary.employer_pension(n)
    spend = ExpenseModel(
        categories=expenses, annual_inflation=planning.expense_inflation_rate
    ).project(n)
    healthcare = income.healthcare_benefit_monthly * MONTHS_PER_YEAR

    rows: List[YearlyFinancial] = []
    for i in range(n):
        year = planning.start_year + i
        rsu = rsu_vesting[i] if i < len(rsu_vesting) else None
        rsu_gross = rsu.gross_value if rsu is not None else 0.0
        rsu_net = rsu.net_value if rsu is not None else 0.0
        combined = tax_results[i] if i < len(tax_results) else None
        gross_i = float(gross[i])

        if tax_without_rsu is not None and i < len(tax_without_rsu):
            net_salary = tax_without_rsu[i].net_income
        else:
            total_net = combined.net_income if combined is not None else 0.0
            total_gross = gross_i + rsu_gross
            share = gross_i / total_gross if total_gross > 0 else 1.0
            net_salary = total_net * share
            logger.debug("Net salary for %d split proportionally from combined tax", year)

        net_income = net_salary + healthcare
        total_net_income = net_income + rsu_net
        total_expenses = float(spend[i])
        employer_i = float(employer[i])
        net_savings = total_net_income - total_expenses + employer_i
        savings_rate = (
            net_savings / (total_net_income + employer_i) if total_net_income > 0 else 0.0
        )

        rows.append(YearlyFinancial(
            year=year,
            gross_income=gross_i,
            rsu_gross_value=rsu_gross,
            total_gross_income=gross_i + rsu_gross,
            net_income=net_income,
            net_rsu_value=rsu_net,
            total_net_income=total_net_income,
            employer_pension_contribution=employer_i,
            total_expenses=total_expenses,
            net_savings=net_savings,
            savings_rate=savings_rate,
            effective_tax_rate=combined.effective_tax_rate if combined is not None else 0.0,
        ))

    logger.debug("Aggregated %d years starting %d", n, planning.start_year)
    return rows
