"""General utilities for FinPlan

Contents
--------
- Validation helpers
- Growth factors and year index builders
- Finance helpers (safe division, CAGR)
- Formatting helpers for CLI output
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

__all__ = [
    # Validation
    "check_non_negative",
    # Growth / Index
    "growth_factors",
    "year_index",
    # Finance
    "safe_div",
    "compute_cagr",
    # Formatting
    "format_currency",
    "format_pct",
]

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValueError(f"{name} must be non-negative (got {value}).")


# ---------------------------------------------------------------------------
# Growth factors / Index helpers
# ---------------------------------------------------------------------------

def growth_factors(rate: float, years: int) -> np.ndarray:
    """Return compounded growth factors (1 + rate) ** i for i in 0..years-1.

    Returns an empty array for non-positive *years*.
    """
    if years <= 0:
        return np.zeros(0, dtype=float)
    t = np.arange(int(years), dtype=float)
    return np.power(1.0 + float(rate), t)


def year_index(start_year: Optional[int], years: int) -> pd.Index:
    """Construct an integer year Index for *years* periods.

    If *start_year* is None, the index is the offset 0..years-1.
    """
    if years <= 0:
        return pd.Index([], dtype="int64", name="year")
    first = 0 if start_year is None else int(start_year)
    return pd.RangeIndex(first, first + int(years), name="year")


# ---------------------------------------------------------------------------
# Finance helpers
# ---------------------------------------------------------------------------

def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Return numerator / denominator, or *default* when the denominator is 0."""
    if denominator == 0:
        return default
    return numerator / denominator


def compute_cagr(start_value: float, end_value: float, years: float) -> float:
    """Compound annual growth rate between two values.

    Returns 0 when *start_value* <= 0 or *years* <= 0, never NaN or inf
    from a zero base.
    """
    if start_value <= 0 or years <= 0:
        return 0.0
    return float((end_value / start_value) ** (1.0 / years) - 1.0)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_currency(value, decimals=0, symbol='€'):
    """
    Format a monetary value for tables and panels.

    Parameters
    ----------
    value : float
        Amount in EUR.
    decimals : int, default 0
        Number of decimal places to display.
    symbol : str, default '€'
        Currency symbol prefix.

    Returns
    -------
    str
        Formatted currency string with thousands separators.

    Examples
    --------
    >>> format_currency(78_500)
    '€78,500'
    >>> format_currency(-1234.5, decimals=2)
    '-€1,234.50'
    """
    sign = '-' if value < 0 else ''
    return f'{sign}{symbol}{abs(value):,.{decimals}f}'


def format_pct(value, decimals=1):
    """Format a fraction as a percentage string (0.0942 -> '9.4%')."""
    return f'{value * 100:.{decimals}f}%'
