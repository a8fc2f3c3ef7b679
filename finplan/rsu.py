"""
RSU vesting and taxation module for FinPlan.

Purpose
-------
Computes, per projection year, how many shares vest across all grants,
what they are worth at the projected share price, how much they appreciated
since grant, and how much tax the vesting costs.

Key components
--------------
- RSUVestingYear:
    Frozen per-year result.
- shares_vesting_in_year / vesting_schedule:
    Share counts from the grants' vesting windows.
- compute_vesting:
    Values and taxes the vesting shares. Two tax modes:

    exact     tax = with_rsu.total_tax - without_rsu.total_tax
              (captures bracket crossings; needs both tax series)
    fallback  tax = rsu_gross * marginal rate of (salary + rsu)
              (approximation, used for years without both tax results)

- make_grant, default_grant, refresher_grant, update_grant:
    Grant factories keeping grant_shares == grant_value / share_price.

Vesting model
-------------
A grant vests `grant_shares * vesting_fraction` shares in every year y with
    0 <= y - grant_year < vesting_years
Cliff grants vest all their shares in the last year of that window. The
share price of year y grows from the plan's start year, not from the grant
year:
    price_y = current_price * (1 + growth) ** (y - start_year)

Example
-------
>>> from finplan.rsu import make_grant, compute_vesting
>>> grant = make_grant(2024, 100_000, 100)
>>> years = compute_vesting([grant], 2025, 1, {2025: 80_000}, 0.05, 100, 0.0338, False)
>>> years[0].shares_vested, years[0].gross_value
(250.0, 25000.0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Literal, Mapping, Optional, Sequence, cast

import pandas as pd

from .config import RSUGrant, TaxConfig
from .constants import (
    DEFAULT_GRANT_SHARE_PRICE,
    DEFAULT_GRANT_VALUE,
    DEFAULT_REFRESHER_SHARE_PRICE,
    DEFAULT_REFRESHER_VALUE,
    DEFAULT_VESTING_YEARS,
)
from .tax import TaxResult, rsu_tax_fallback
from .types import RSUGrantDict
from .utils import safe_div, year_index

__all__ = [
    "RSUVestingYear",
    "shares_vesting_in_year",
    "vesting_schedule",
    "compute_vesting",
    "make_grant",
    "default_grant",
    "refresher_grant",
    "update_grant",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RSUVestingYear:
    """
    RSU vesting of one projection year, across all grants.

    Attributes
    ----------
    year : int
        Calendar year.
    shares_vested : float
        Shares vesting this year.
    grant_price_avg : float
        Share-weighted average grant price of the vesting shares; the
        current price when nothing vests.
    vesting_price : float
        Projected share price this year.
    gross_value : float
        shares_vested * vesting_price.
    stock_appreciation : float
        shares_vested * (vesting_price - grant_price_avg).
    appreciation_pct : float
        (vesting_price - grant_price_avg) / grant_price_avg.
    marginal_tax_rate : float
        Effective rate on the RSU income (tax_paid / gross_value in exact mode).
    tax_paid : float
        Tax attributable to the vesting.
    net_value : float
        gross_value - tax_paid.
    tax_mode : {"exact", "fallback"}
        How tax_paid was computed.
    """

    year: int
    shares_vested: float
    grant_price_avg: float
    vesting_price: float
    gross_value: float
    stock_appreciation: float
    appreciation_pct: float
    marginal_tax_rate: float
    tax_paid: float
    net_value: float
    tax_mode: Literal["exact", "fallback"] = "fallback"


# ---------------------------------------------------------------------------
# Vesting schedule
# ---------------------------------------------------------------------------

def shares_vesting_in_year(grant: RSUGrant, year: int) -> float:
    """
    Shares of *grant* vesting in calendar *year*.

    Zero outside the window grant_year .. grant_year + vesting_years - 1.
    Cliff grants vest all shares in the last year of the window and ignore
    vesting_fraction, so a cliff grant stored with a fraction of 0 still
    vests in full instead of never vesting.
    """
    offset = year - grant.grant_year
    if offset < 0 or offset >= grant.vesting_years:
        return 0.0
    if grant.vesting_type == "cliff":
        return grant.grant_shares if offset == grant.vesting_years - 1 else 0.0
    return grant.grant_shares * grant.vesting_fraction


def vesting_schedule(
    grants: Sequence[RSUGrant], start_year: int, num_years: int
) -> pd.Series:
    """Total shares vesting per year, as a Series indexed by calendar year."""
    idx = year_index(start_year, max(num_years, 0))
    totals = [sum(shares_vesting_in_year(g, int(y)) for g in grants) for y in idx]
    return pd.Series(totals, index=idx, name="shares_vested", dtype=float)


# ---------------------------------------------------------------------------
# Valuation and tax
# ---------------------------------------------------------------------------

def compute_vesting(
    grants: Sequence[RSUGrant],
    start_year: int,
    num_years: int,
    salary_by_year: Mapping[int, float],
    price_growth_rate: float,
    current_price: float,
    pension_rate: float,
    has_30_percent_ruling: bool,
    tax_with_rsu: Optional[Sequence[TaxResult]] = None,
    tax_without_rsu: Optional[Sequence[TaxResult]] = None,
    tax_config: Optional[TaxConfig] = None,
) -> List[RSUVestingYear]:
    """
    Value and tax the RSU vesting of every projection year.

    Parameters
    ----------
    grants : Sequence[RSUGrant]
        All grants of the plan.
    start_year : int
        First projection year; anchor of the share price growth.
    num_years : int
        Number of projection years.
    salary_by_year : Mapping[int, float]
        Gross salary per calendar year, used by the fallback tax mode.
    price_growth_rate : float
        Annual share price growth.
    current_price : float
        Share price in `start_year`.
    pension_rate : float
        Employee pension rate (fallback mode).
    has_30_percent_ruling : bool
        30% ruling flag (fallback mode).
    tax_with_rsu, tax_without_rsu : Sequence[TaxResult], optional
        Per-year tax results on salary + RSU and on salary alone, aligned
        with the projection years. Years covered by both use the exact mode.
    tax_config : TaxConfig, optional
        Table for the fallback mode; defaults to the registry.

    Returns
    -------
    list of RSUVestingYear
        Exactly `num_years` entries, in year order.
    """
    results: List[RSUVestingYear] = []
    n_with = len(tax_with_rsu) if tax_with_rsu is not None else 0
    n_without = len(tax_without_rsu) if tax_without_rsu is not None else 0

    for i in range(max(num_years, 0)):
        year = start_year + i

        shares = 0.0
        weighted_price = 0.0
        for grant in grants:
            vesting = shares_vesting_in_year(grant, year)
            if vesting > 0:
                shares += vesting
                weighted_price += vesting * grant.share_price

        avg_grant_price = weighted_price / shares if shares > 0 else current_price
        vesting_price = current_price * (1.0 + price_growth_rate) ** i
        gross = shares * vesting_price
        appreciation = shares * (vesting_price - avg_grant_price)
        appreciation_pct = (
            (vesting_price - avg_grant_price) / avg_grant_price if avg_grant_price > 0 else 0.0
        )

        if i < n_with and i < n_without:
            tax_paid = tax_with_rsu[i].total_tax - tax_without_rsu[i].total_tax
            rate = safe_div(tax_paid, gross)
            mode = "exact"
        else:
            rate, tax_paid, _ = rsu_tax_fallback(
                salary_by_year.get(year, 0.0),
                gross,
                pension_rate,
                has_30_percent_ruling,
                year,
                tax_config=tax_config,
            )
            mode = "fallback"
            if gross > 0:
                logger.debug("RSU tax for %d uses marginal-rate fallback", year)

        results.append(RSUVestingYear(
            year=year,
            shares_vested=shares,
            grant_price_avg=avg_grant_price,
            vesting_price=vesting_price,
            gross_value=gross,
            stock_appreciation=appreciation,
            appreciation_pct=appreciation_pct,
            marginal_tax_rate=rate,
            tax_paid=tax_paid,
            net_value=gross - tax_paid,
            tax_mode=mode,
        ))

    return results


# ---------------------------------------------------------------------------
# Grant factories
# ---------------------------------------------------------------------------

def make_grant(
    grant_year: int,
    grant_value: float,
    share_price: float,
    *,
    grant_type: str = "Main",
    vesting_years: int = DEFAULT_VESTING_YEARS,
    vesting_type: Literal["equal_annual", "cliff", "custom"] = "equal_annual",
    vesting_fraction: Optional[float] = None,
    grant_id: Optional[str] = None,
) -> RSUGrant:
    """
    Create a grant with a consistent share count and vesting fraction.

    Equal annual and custom grants default to 1 / vesting_years per year;
    cliff grants carry a fraction of 0 and vest everything in the last year.
    """
    if vesting_fraction is None:
        if vesting_type == "cliff" or vesting_years <= 0:
            vesting_fraction = 0.0
        else:
            vesting_fraction = 1.0 / vesting_years
    return RSUGrant(
        id=grant_id or f"grant-{grant_year}-{grant_type.lower()}",
        grant_year=grant_year,
        grant_type=grant_type,
        grant_value=grant_value,
        share_price=share_price,
        vesting_years=vesting_years,
        vesting_fraction=vesting_fraction,
        vesting_type=vesting_type,
    )


def default_grant(grant_year: int = 2024) -> RSUGrant:
    """Main grant of 100,000 EUR at 100 EUR per share, four equal years."""
    return make_grant(grant_year, DEFAULT_GRANT_VALUE, DEFAULT_GRANT_SHARE_PRICE)


def refresher_grant(grant_year: int, grant_value: float = DEFAULT_REFRESHER_VALUE) -> RSUGrant:
    """Refresher grant at 150 EUR per share, four equal years."""
    return make_grant(
        grant_year, grant_value, DEFAULT_REFRESHER_SHARE_PRICE, grant_type="Refresher"
    )


def update_grant(grant: RSUGrant, **changes: Any) -> RSUGrant:
    """
    Return a copy of *grant* with *changes* applied and shares re-derived.

    `model_copy(update=...)` skips validation; this goes through
    `model_validate` so grant_shares always equals grant_value / share_price.
    """
    data = cast(RSUGrantDict, grant.model_dump())
    data.update(changes)  # type: ignore[typeddict-item]
    return RSUGrant.model_validate(data)
