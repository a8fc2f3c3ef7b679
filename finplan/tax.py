"""
Dutch income tax engine for FinPlan.

Purpose
-------
Computes the yearly tax burden on employment income under the Dutch Box 1
rules: progressive income tax brackets, social contributions (premies
volksverzekeringen) capped at a ceiling, the general and labour tax
credits, the employee pension deduction, and the 30% expatriate ruling.
Also reports the marginal rate on the next euro, used to approximate the
tax on RSU income when exact with/without results are not available.

Key components
--------------
- TaxResult:
    Frozen per-year result with every intermediate amount.
- NETHERLANDS_2025 / TAX_CONFIGS / get_tax_config:
    Versioned tax tables. A new year is one more TaxConfig entry.
- compute_tax:
    The full calculation (pension -> taxable -> tax -> credits -> totals).
- income_tax, social_contributions, general_tax_credit, labour_tax_credit,
  marginal_tax_rate:
    The individual steps, usable on their own.
- rsu_tax_fallback:
    Marginal-rate approximation of the tax on an RSU amount.

Order of operations
-------------------
    pension   = override or gross * pension_rate
    taxable   = (gross - pension) * (0.70 if ruling else 1.0)
    tax       = brackets(taxable) + social(taxable)
    credits   = general(taxable) + labour(gross)
    after     = max(pension, tax - credits)
    total     = after + pension
    net       = gross - total

Example
-------
>>> from finplan.tax import compute_tax
>>> result = compute_tax(50_000, 0.0338, False, 2025)
>>> round(result.taxable_income, 2)
48310.0
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from .config import (
    GeneralCreditRule,
    LabourCreditRule,
    LabourCreditSegment,
    SocialContribution,
    TaxBracket,
    TaxConfig,
)
from .exceptions import ConfigurationError
from .utils import safe_div

__all__ = [
    "TaxResult",
    "NETHERLANDS_2025",
    "TAX_CONFIGS",
    "get_tax_config",
    "compute_tax",
    "income_tax",
    "social_contributions",
    "general_tax_credit",
    "labour_tax_credit",
    "marginal_tax_rate",
    "rsu_tax_fallback",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tax tables
# ---------------------------------------------------------------------------

NETHERLANDS_2025 = TaxConfig(
    year=2025,
    brackets=[
        TaxBracket(lower_bound=0, upper_bound=35_472, rate=0.0942),
        TaxBracket(lower_bound=35_472, upper_bound=69_399, rate=0.3707),
        TaxBracket(lower_bound=69_399, upper_bound=None, rate=0.495),
    ],
    social_contributions=[
        # AOW + ANW + WLZ combined, first bracket only
        SocialContribution(name="Social Security", rate=0.2765, max_income=35_472),
    ],
    general_credit=GeneralCreditRule(
        max_amount=2_888,
        phaseout_start=21_318,
        phaseout_end=69_399,
        phaseout_rate=0.06007,
    ),
    labour_credit=LabourCreditRule(
        segments=[
            LabourCreditSegment(lower_bound=0, upper_bound=10_351, base_amount=0, rate=0.04541),
            LabourCreditSegment(lower_bound=10_351, upper_bound=22_357, base_amount=470, rate=0.28461),
            LabourCreditSegment(lower_bound=22_357, upper_bound=36_650, base_amount=3_887, rate=0.02610),
            LabourCreditSegment(lower_bound=36_650, upper_bound=109_347, base_amount=4_260, rate=-0.05860),
        ],
        max_amount=4_260,
    ),
    ruling_taxable_fraction=0.70,
)
"""Box 1 table for 2025: three brackets, 27.65% premies, 2025 credits."""

TAX_CONFIGS: Dict[int, TaxConfig] = {
    2025: NETHERLANDS_2025,
}
"""Registry of tax tables keyed by year."""


def get_tax_config(year: int) -> TaxConfig:
    """
    Tax table for *year*.

    Returns the table of that exact year if present, otherwise the latest
    table not after *year*; years before the earliest table use the earliest.

    Raises
    ------
    ConfigurationError
        If the registry is empty.
    """
    if not TAX_CONFIGS:
        raise ConfigurationError("No tax tables registered")
    if year in TAX_CONFIGS:
        return TAX_CONFIGS[year]
    earlier = [y for y in TAX_CONFIGS if y <= year]
    chosen = max(earlier) if earlier else min(TAX_CONFIGS)
    logger.debug("No tax table for %d, using %d", year, chosen)
    return TAX_CONFIGS[chosen]


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaxResult:
    """
    Tax computation for one year.

    Attributes
    ----------
    year : int
        Tax year.
    gross_income : float
        Income submitted to the calculation (salary, allowances, RSU).
    taxable_income : float
        Gross minus pension, times 0.70 under the 30% ruling.
    income_tax : float
        Bracket tax on taxable income.
    social_contributions : float
        Premies on taxable income up to their ceilings.
    pension_contributions : float
        Employee pension deducted before tax.
    general_tax_credit : float
        Algemene heffingskorting, in [0, max].
    labour_tax_credit : float
        Arbeidskorting, in [0, max].
    total_tax_before_credits : float
        income_tax + social_contributions + pension_contributions.
    tax_after_credits : float
        max(pension, income_tax + social - credits).
    total_tax : float
        tax_after_credits + pension_contributions.
    net_income : float
        gross_income - total_tax.
    effective_tax_rate : float
        total_tax / gross_income, 0 for zero gross income.
    marginal_tax_rate : float
        Bracket rate plus uncapped social rates at the taxable income.
    """

    year: int
    gross_income: float
    taxable_income: float
    income_tax: float
    social_contributions: float
    pension_contributions: float
    general_tax_credit: float
    labour_tax_credit: float
    total_tax_before_credits: float
    tax_after_credits: float
    total_tax: float
    net_income: float
    effective_tax_rate: float
    marginal_tax_rate: float


# ---------------------------------------------------------------------------
# Calculation steps
# ---------------------------------------------------------------------------

def income_tax(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    """Progressive bracket tax; each bracket taxes the slice of income it covers."""
    tax = 0.0
    for b in brackets:
        upper = math.inf if b.upper_bound is None else b.upper_bound
        if taxable_income > b.lower_bound:
            in_bracket = min(taxable_income, upper) - b.lower_bound
            tax += max(0.0, in_bracket) * b.rate
    return tax


def social_contributions(
    taxable_income: float, contributions: Sequence[SocialContribution]
) -> float:
    """Premies on taxable income, each capped at its `max_income`."""
    total = 0.0
    for c in contributions:
        subject = max(0.0, min(taxable_income, c.max_income))
        total += subject * c.rate
    return total


def general_tax_credit(taxable_income: float, rule: GeneralCreditRule) -> float:
    """
    General tax credit on taxable income.

    Full amount up to the phase-out start, linearly reduced above it and
    zero from the phase-out end. Never negative.
    """
    if taxable_income <= rule.phaseout_start:
        return rule.max_amount
    if taxable_income <= rule.phaseout_end:
        reduction = (taxable_income - rule.phaseout_start) * rule.phaseout_rate
        return max(0.0, rule.max_amount - reduction)
    return 0.0


def labour_tax_credit(gross_income: float, rule: LabourCreditRule) -> float:
    """
    Labour tax credit on gross income (not taxable income).

    Evaluates the first segment whose upper bound is not below the income;
    zero above the last segment. Clamped to [0, max_amount].
    """
    for seg in rule.segments:
        if gross_income <= seg.upper_bound:
            credit = seg.base_amount + seg.rate * (gross_income - seg.lower_bound)
            return min(rule.max_amount, max(0.0, credit))
    return 0.0


def marginal_tax_rate(
    taxable_income: float,
    brackets: Sequence[TaxBracket],
    contributions: Sequence[SocialContribution],
) -> float:
    """Rate on the next euro: containing bracket rate + social rates below their ceiling."""
    bracket_rate = 0.0
    for b in brackets:
        upper = math.inf if b.upper_bound is None else b.upper_bound
        if b.lower_bound <= taxable_income < upper:
            bracket_rate = b.rate
            break
        if b.upper_bound is None:
            bracket_rate = b.rate

    social_rate = sum(c.rate for c in contributions if taxable_income < c.max_income)
    return bracket_rate + social_rate


# ---------------------------------------------------------------------------
# Full calculation
# ---------------------------------------------------------------------------

def compute_tax(
    gross_income: float,
    employee_pension_rate: float,
    has_30_percent_ruling: bool,
    year: int,
    tax_config: Optional[TaxConfig] = None,
    pension_override: Optional[float] = None,
) -> TaxResult:
    """
    Compute the full tax result for one year of employment income.

    Parameters
    ----------
    gross_income : float
        Total gross income (salary, bonus, holiday allowance, RSU).
    employee_pension_rate : float
        Pension rate applied to gross income when no override is given.
    has_30_percent_ruling : bool
        Whether only 70% of income (after pension) is taxable.
    year : int
        Tax year; also selects the table when `tax_config` is None.
    tax_config : TaxConfig, optional
        Table to use instead of the registry.
    pension_override : float, optional
        Explicit pension amount. Pension is due on base salary only, so
        callers submitting bonus, allowance or RSU in `gross_income` pass
        base_salary * rate here.

    Returns
    -------
    TaxResult
        All intermediate amounts, totals and rates.

    Notes
    -----
    Negative inputs are not validated. A zero gross income yields an
    effective rate of 0 instead of a division error.
    """
    config = tax_config if tax_config is not None else get_tax_config(year)

    pension = pension_override if pension_override is not None else gross_income * employee_pension_rate
    after_pension = gross_income - pension
    taxable = after_pension * config.ruling_taxable_fraction if has_30_percent_ruling else after_pension

    bracket_tax = income_tax(taxable, config.brackets)
    social = social_contributions(taxable, config.social_contributions)
    general = general_tax_credit(taxable, config.general_credit)
    labour = labour_tax_credit(gross_income, config.labour_credit)

    before_credits = bracket_tax + social + pension
    # credits cannot push total deductions below the mandatory pension
    after_credits = max(pension, bracket_tax + social - general - labour)

    total = after_credits + pension
    return TaxResult(
        year=year,
        gross_income=gross_income,
        taxable_income=taxable,
        income_tax=bracket_tax,
        social_contributions=social,
        pension_contributions=pension,
        general_tax_credit=general,
        labour_tax_credit=labour,
        total_tax_before_credits=before_credits,
        tax_after_credits=after_credits,
        total_tax=total,
        net_income=gross_income - total,
        effective_tax_rate=safe_div(total, gross_income),
        marginal_tax_rate=marginal_tax_rate(
            taxable, config.brackets, config.social_contributions
        ),
    )


def rsu_tax_fallback(
    salary_gross: float,
    rsu_gross: float,
    employee_pension_rate: float,
    has_30_percent_ruling: bool,
    year: int,
    tax_config: Optional[TaxConfig] = None,
) -> Tuple[float, float, float]:
    """
    Approximate RSU tax at the marginal rate of the combined income.

    Runs `compute_tax` on salary + RSU and applies only the reported
    marginal rate to the RSU amount. Bracket crossings inside the RSU slice
    are ignored; `compute_vesting` uses this only when the exact
    with/without tax results are missing.

    Returns
    -------
    tuple of float
        (marginal_rate, tax_on_rsu, net_rsu_value)
    """
    combined = compute_tax(
        salary_gross + rsu_gross,
        employee_pension_rate,
        has_30_percent_ruling,
        year,
        tax_config=tax_config,
    )
    rate = combined.marginal_tax_rate
    tax = rsu_gross * rate
    return rate, tax, rsu_gross - tax
