"""
Salary projection module for FinPlan.

Purpose
-------
Entry point of the projection pipeline. Captures where the money comes from
(base salary and the components paid on top of it) and how it evolves over
the projection years. Produces yearly series that the tax engine, the RSU
calculator and the yearly aggregator consume.

Key components
--------------
- SalaryModel:
    Deterministic yearly base salary with compounded annual growth, plus
    the components derived from it: bonus, holiday allowance, and the
    employee and employer pension contributions. All components are
    fractions of the base salary of the same year.

Design principles
-----------------
- Deterministic and stateless: every call recomputes from the parameters.
- Year-aware outputs: arrays by default, pandas Series indexed by calendar
  year on request.
- Pension is computed on base salary only, never on bonus, allowance or RSU.

Example
-------
>>> from finplan.income import SalaryModel
>>> sm = SalaryModel(base=78_500, annual_growth=0.05, bonus_rate=0.10,
...                  holiday_allowance_rate=0.08)
>>> sm.project(3)
array([78500.  , 82425.  , 86546.25])
>>> sm.gross_income(1)
array([92630.])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional

import numpy as np
import pandas as pd

from .config import IncomeSettings
from .utils import check_non_negative, growth_factors, year_index

__all__ = [
    "SalaryModel",
]


@dataclass(frozen=True)
class SalaryModel:
    """
    Deterministic yearly base salary with growth and derived components.

    Parameters
    ----------
    base : float
        Annual gross base salary in year offset 0. Must be non-negative.
    annual_growth : float, default 0.0
        Annual growth rate. The base salary of year offset i is
            base * (1 + annual_growth) ** i
    bonus_rate : float, default 0.0
        Bonus as a fraction of the base salary of the same year.
    holiday_allowance_rate : float, default 0.0
        Holiday allowance as a fraction of the base salary of the same year.
    employee_pension_rate : float, default 0.0
        Employee pension contribution on base salary.
    employer_pension_rate : float, default 0.0
        Employer pension contribution on base salary.
    name : str, default "base_salary"
        Identifier for labeling outputs.

    Methods
    -------
    project(years, start_year=None, output="array")
        Base salary per year.
    gross_income(years, start_year=None, output="array")
        Base salary + bonus + holiday allowance per year.
    salary_by_year(start_year, years)
        Mapping of calendar year to base salary.
    """

    base: float
    annual_growth: float = 0.0
    bonus_rate: float = 0.0
    holiday_allowance_rate: float = 0.0
    employee_pension_rate: float = 0.0
    employer_pension_rate: float = 0.0
    name: str = "base_salary"

    def __post_init__(self) -> None:
        check_non_negative("base", self.base)
        if self.annual_growth <= -1.0:
            raise ValueError(f"annual_growth must be > -1, got {self.annual_growth}")

    @classmethod
    def from_settings(cls, income: IncomeSettings) -> "SalaryModel":
        """Build the model from the income settings of a plan."""
        return cls(
            base=income.base_salary,
            annual_growth=income.salary_growth_rate,
            bonus_rate=income.bonus_rate,
            holiday_allowance_rate=income.holiday_allowance_rate,
            employee_pension_rate=income.employee_pension_rate,
            employer_pension_rate=income.employer_pension_rate,
        )

    def project(
        self,
        years: int,
        *,
        start_year: Optional[int] = None,
        output: Literal["array", "series"] = "array",
    ) -> np.ndarray | pd.Series:
        """
        Project the base salary for *years* years.

        Parameters
        ----------
        years : int
            Number of years. Returns an empty result when `years <= 0`.
        start_year : int, optional
            Calendar year of offset 0; used for the Series index.
        output : {"array", "series"}, default "array"
            Return an np.ndarray or a pd.Series indexed by year.

        Raises
        ------
        ValueError
            If `output` is not 'array' or 'series'.
        """
        arr = self.base * growth_factors(self.annual_growth, years)
        return self._format(arr, years, start_year, output, self.name)

    def gross_income(
        self,
        years: int,
        *,
        start_year: Optional[int] = None,
        output: Literal["array", "series"] = "array",
    ) -> np.ndarray | pd.Series:
        """Salary income submitted to tax: base * (1 + holiday + bonus)."""
        arr = self.project(years) * (1.0 + self.holiday_allowance_rate + self.bonus_rate)
        return self._format(arr, years, start_year, output, "gross_income")

    def bonus(self, years: int, **kwargs) -> np.ndarray | pd.Series:
        """Gross bonus per year."""
        return self._component(self.bonus_rate, years, "bonus", **kwargs)

    def holiday_allowance(self, years: int, **kwargs) -> np.ndarray | pd.Series:
        """Gross holiday allowance per year."""
        return self._component(self.holiday_allowance_rate, years, "holiday_allowance", **kwargs)

    def employee_pension(self, years: int, **kwargs) -> np.ndarray | pd.Series:
        """Employee pension contribution per year (on base salary only)."""
        return self._component(self.employee_pension_rate, years, "employee_pension", **kwargs)

    def employer_pension(self, years: int, **kwargs) -> np.ndarray | pd.Series:
        """Employer pension contribution per year (on base salary only)."""
        return self._component(self.employer_pension_rate, years, "employer_pension", **kwargs)

    def salary_by_year(self, start_year: int, years: int) -> Dict[int, float]:
        """Mapping of calendar year to base salary."""
        arr = self.project(years)
        return {start_year + i: float(arr[i]) for i in range(len(arr))}

    def _component(
        self,
        rate: float,
        years: int,
        name: str,
        *,
        start_year: Optional[int] = None,
        output: Literal["array", "series"] = "array",
    ) -> np.ndarray | pd.Series:
        arr = self.project(years) * rate
        return self._format(arr, years, start_year, output, name)

    @staticmethod
    def _format(arr, years, start_year, output, name):
        if output == "array":
            return arr
        elif output == "series":
            idx = year_index(start_year, max(years, 0))
            return pd.Series(arr, index=idx, name=name)
        else:
            raise ValueError(f"output must be 'array' or 'series', got: {output}")
