"""
Expense projection module for FinPlan.

Purpose
-------
Models the yearly cost of living that reduces disposable income before
savings. A plan holds an unordered set of monthly budget categories; the
projection sums them, annualizes, and inflates year over year:

    E_i = sum(monthly_amount) * 12 * (1 + inflation) ** i

Design principles
-----------------
- Mirrors income.py structure for consistency
- Frozen dataclass for immutability
- Year-aware outputs with pandas Series on request

Example
-------
>>> from finplan.config import ExpenseCategory
>>> from finplan.expenses import ExpenseModel
>>> em = ExpenseModel(
...     categories=(ExpenseCategory(id="rent", name="Rent", monthly_amount=1_000),),
...     annual_inflation=0.02,
... )
>>> em.project(2)
array([12000., 12240.])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional, Sequence

import numpy as np
import pandas as pd

from .config import ExpenseCategory, Settings
from .constants import MONTHS_PER_YEAR
from .utils import growth_factors, year_index

__all__ = [
    "ExpenseModel",
]


@dataclass(frozen=True)
class ExpenseModel:
    """
    Yearly expenses from monthly categories with annual inflation.

    Parameters
    ----------
    categories : Sequence[ExpenseCategory]
        Budget items; order is irrelevant.
    annual_inflation : float, default 0.0
        Annual inflation applied to every category.
    name : str, default "expenses"
        Identifier for labeling outputs.
    """

    categories: Sequence[ExpenseCategory] = ()
    annual_inflation: float = 0.0
    name: str = "expenses"

    def __post_init__(self) -> None:
        if self.annual_inflation <= -1.0:
            raise ValueError("annual_inflation must be > -1.0")
        object.__setattr__(self, "categories", tuple(self.categories))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExpenseModel":
        """Build the model from a plan's categories and inflation rate."""
        return cls(
            categories=settings.expenses,
            annual_inflation=settings.planning.expense_inflation_rate,
        )

    @property
    def monthly_total(self) -> float:
        """Sum of all monthly category amounts."""
        return float(sum(c.monthly_amount for c in self.categories))

    @property
    def annual_total(self) -> float:
        """Annual expenses in year offset 0."""
        return self.monthly_total * MONTHS_PER_YEAR

    def project(
        self,
        years: int,
        *,
        start_year: Optional[int] = None,
        output: Literal["array", "series"] = "array",
    ) -> np.ndarray | pd.Series:
        """
        Project total yearly expenses.

        Parameters
        ----------
        years : int
            Number of years. Returns an empty result when `years <= 0`.
        start_year : int, optional
            Calendar year of offset 0; used for the Series index.
        output : {"array", "series"}, default "array"
            Return an np.ndarray or a pd.Series indexed by year.
        """
        arr = self.annual_total * growth_factors(self.annual_inflation, years)
        if output == "array":
            return arr
        elif output == "series":
            return pd.Series(arr, index=year_index(start_year, max(years, 0)), name=self.name)
        else:
            raise ValueError(f"output must be 'array' or 'series', got: {output}")

    def breakdown(self, year: int, start_year: int) -> Dict[str, float]:
        """
        Annual amount per category name for a calendar year.

        Categories sharing a name are summed.
        """
        factor = (1.0 + self.annual_inflation) ** (year - start_year)
        out: Dict[str, float] = {}
        for c in self.categories:
            out[c.name] = out.get(c.name, 0.0) + c.monthly_amount * MONTHS_PER_YEAR * factor
        return out
