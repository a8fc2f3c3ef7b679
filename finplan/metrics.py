"""
Dashboard metrics for FinPlan.

Reduces a full projection to the handful of figures shown on the summary
panel: averages over the years, totals of the RSU vesting, and the end
state of both balances.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, Sequence

from .financials import YearlyFinancial
from .investment import YearlyInvestment
from .utils import compute_cagr

if TYPE_CHECKING:
    from .projection import FinancialProjections

__all__ = [
    "DashboardMetrics",
    "average_metrics",
    "net_worth_metrics",
    "summarize",
]


@dataclass(frozen=True)
class DashboardMetrics:
    """
    Summary figures of one projection.

    Attributes
    ----------
    average_savings_rate : float
        Mean of the yearly savings rates.
    total_savings : float
        Sum of the yearly net savings.
    final_net_worth : float
        Closing investment balance of the last year.
    net_worth_cagr : float
        CAGR from the first opening balance to the final net worth.
    total_rsu_gross_value, total_rsu_tax_paid, total_rsu_net_value : float
        Sums over the RSU vesting years.
    average_effective_tax_rate : float
        Mean of the yearly effective tax rates.
    final_pension_balance : float
        Closing pension balance of the last year.
    total_wealth : float
        final_net_worth + final_pension_balance.
    """

    average_savings_rate: float
    total_savings: float
    final_net_worth: float
    net_worth_cagr: float
    total_rsu_gross_value: float
    total_rsu_tax_paid: float
    total_rsu_net_value: float
    average_effective_tax_rate: float
    final_pension_balance: float
    total_wealth: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def average_metrics(financials: Sequence[YearlyFinancial]) -> Dict[str, float]:
    """
    Averages and totals over the yearly financials.

    Returns
    -------
    dict
        average_savings_rate, average_effective_tax_rate, total_savings;
        all 0 for an empty sequence.
    """
    if not financials:
        return {
            "average_savings_rate": 0.0,
            "average_effective_tax_rate": 0.0,
            "total_savings": 0.0,
        }
    n = len(financials)
    return {
        "average_savings_rate": sum(f.savings_rate for f in financials) / n,
        "average_effective_tax_rate": sum(f.effective_tax_rate for f in financials) / n,
        "total_savings": sum(f.net_savings for f in financials),
    }


def net_worth_metrics(investments: Sequence[YearlyInvestment]) -> Dict[str, float]:
    """Final net worth and its CAGR over `len(investments)` years."""
    if not investments:
        return {"final_net_worth": 0.0, "net_worth_cagr": 0.0}
    final = investments[-1].closing_balance
    return {
        "final_net_worth": final,
        "net_worth_cagr": compute_cagr(
            investments[0].opening_balance, final, len(investments)
        ),
    }


def summarize(projections: "FinancialProjections") -> DashboardMetrics:
    """Compute the dashboard metrics of a projection."""
    avg = average_metrics(projections.yearly_financials)
    worth = net_worth_metrics(projections.yearly_investments)
    vesting = projections.rsu_vesting
    pension = projections.yearly_pension
    final_pension = pension[-1].closing_balance if pension else 0.0

    return DashboardMetrics(
        average_savings_rate=avg["average_savings_rate"],
        total_savings=avg["total_savings"],
        final_net_worth=worth["final_net_worth"],
        net_worth_cagr=worth["net_worth_cagr"],
        total_rsu_gross_value=sum(v.gross_value for v in vesting),
        total_rsu_tax_paid=sum(v.tax_paid for v in vesting),
        total_rsu_net_value=sum(v.net_value for v in vesting),
        average_effective_tax_rate=avg["average_effective_tax_rate"],
        final_pension_balance=final_pension,
        total_wealth=worth["final_net_worth"] + final_pension,
    )
