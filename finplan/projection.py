"""
Projection pipeline for FinPlan.

Purpose
-------
Runs the full yearly projection of a plan. The stages have a fixed order:

1. base salary per year
2. RSU vesting, pass 1 (no tax results yet: marginal-rate fallback)
3. two tax results per year, on salary + RSU and on salary alone, both
   with the pension due on base salary only
4. RSU vesting, pass 2 (exact mode: with-RSU tax minus without-RSU tax)
5. yearly aggregation, then the investment and pension balances

Dutch brackets are progressive, so RSU income stacked on salary is taxed
differently than the same amount on its own. Step 3 isolates the extra tax
caused by the RSU. The two passes are a fixed structure, not an iteration
to convergence.

Key components
--------------
- FinancialProjections:
    The five per-year result lists of one run.
- project:
    Settings in, projections out. Pure; nothing is cached between runs.
- run:
    project() followed by the dashboard metrics.

Example
-------
>>> from finplan.config import default_settings
>>> from finplan.projection import run
>>> projections, metrics = run(default_settings())
>>> len(projections)
6
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from .config import Settings, TaxConfig
from .financials import YearlyFinancial, aggregate_financials
from .income import SalaryModel
from .investment import YearlyInvestment, project_investments
from .metrics import DashboardMetrics, summarize
from .pension import YearlyPension, project_pension
from .rsu import RSUVestingYear, compute_vesting
from .tax import TaxResult, compute_tax

__all__ = [
    "FinancialProjections",
    "project",
    "run",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinancialProjections:
    """
    Per-year results of one projection run.

    All lists have one entry per projection year, in year order, so entry i
    of every list belongs to calendar year start_year + i.
    """

    tax_results: List[TaxResult] = field(default_factory=list)
    rsu_vesting: List[RSUVestingYear] = field(default_factory=list)
    yearly_financials: List[YearlyFinancial] = field(default_factory=list)
    yearly_investments: List[YearlyInvestment] = field(default_factory=list)
    yearly_pension: List[YearlyPension] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.yearly_financials)

    @property
    def years(self) -> List[int]:
        return [f.year for f in self.yearly_financials]

    def to_dataframe(self) -> pd.DataFrame:
        """
        One row per year, indexed by year.

        Columns are the YearlyFinancial fields, followed by the RSU, investment
        and pension fields prefixed with `rsu_`, `inv_` and `pension_`, and the
        tax result fields prefixed with `tax_`.
        """
        rows = []
        for i, fin in enumerate(self.yearly_financials):
            row = asdict(fin)
            for prefix, items in (
                ("tax_", self.tax_results),
                ("rsu_", self.rsu_vesting),
                ("inv_", self.yearly_investments),
                ("pension_", self.yearly_pension),
            ):
                if i < len(items):
                    for key, value in asdict(items[i]).items():
                        if key != "year":
                            row[prefix + key] = value
            rows.append(row)
        if not rows:
            return pd.DataFrame()
        return pd.DataFrame(rows).set_index("year")


def project(settings: Settings, tax_config: Optional[TaxConfig] = None) -> FinancialProjections:
    """
    Project a plan over its planning horizon.

    Parameters
    ----------
    settings : Settings
        Complete input snapshot. Not validated here; see
        `finplan.config.validate_settings`.
    tax_config : TaxConfig, optional
        Tax table used for every year. Defaults to the registry table of
        each year.

    Returns
    -------
    FinancialProjections
        Exactly `settings.planning.projection_years` entries per list.
    """
    income = settings.income
    inv = settings.investment
    start = settings.planning.start_year
    n = max(settings.planning.projection_years, 0)

    # 1. salary
    salary = SalaryModel.from_settings(income)
    salary_by_year = salary.salary_by_year(start, n)
    base = salary.project(n)
    salary_gross = salary.gross_income(n)

    vesting_args = dict(
        grants=settings.rsu_grants,
        start_year=start,
        num_years=n,
        salary_by_year=salary_by_year,
        price_growth_rate=inv.share_price_growth_rate,
        current_price=inv.current_share_price,
        pension_rate=income.employee_pension_rate,
        has_30_percent_ruling=income.has_30_percent_ruling,
        tax_config=tax_config,
    )

    # 2. RSU pass 1
    initial = compute_vesting(**vesting_args)

    # 3. tax with and without RSU
    with_rsu: List[TaxResult] = []
    without_rsu: List[TaxResult] = []
    for i in range(n):
        year = start + i
        pension = float(base[i]) * income.employee_pension_rate
        gross = float(salary_gross[i])
        with_rsu.append(compute_tax(
            gross + initial[i].gross_value,
            income.employee_pension_rate,
            income.has_30_percent_ruling,
            year,
            tax_config=tax_config,
            pension_override=pension,
        ))
        without_rsu.append(compute_tax(
            gross,
            income.employee_pension_rate,
            income.has_30_percent_ruling,
            year,
            tax_config=tax_config,
            pension_override=pension,
        ))

    # 4. RSU pass 2
    vesting = compute_vesting(
        **vesting_args, tax_with_rsu=with_rsu, tax_without_rsu=without_rsu
    )

    # 5. aggregation and balances
    financials = aggregate_financials(
        income, settings.planning, settings.expenses, with_rsu, vesting, without_rsu
    )
    investments = project_investments(
        inv.starting_net_worth, inv.annual_return_rate, financials, income, inv
    )
    pension_years = project_pension(
        inv.starting_pension_balance, inv.pension_return_rate, financials, with_rsu
    )

    logger.debug("Projected %d years from %d", n, start)
    return FinancialProjections(
        tax_results=with_rsu,
        rsu_vesting=vesting,
        yearly_financials=financials,
        yearly_investments=investments,
        yearly_pension=pension_years,
    )


def run(
    settings: Settings, tax_config: Optional[TaxConfig] = None
) -> Tuple[FinancialProjections, DashboardMetrics]:
    """Project a plan and compute its dashboard metrics."""
    projections = project(settings, tax_config=tax_config)
    return projections, summarize(projections)
