"""
Type definitions for FinPlan.

Purpose
-------
Provides TypedDict definitions for the flat dictionary shapes that leave
the engine: the CSV row of the yearly table and the JSON export document.
Using TypedDicts documents the export contract and enables IDE completion.

Usage
-----
>>> from finplan.types import YearlyRowDict
>>> row: YearlyRowDict = yearly_rows(projections)[0]
>>> row["Net Savings"]
'31250.40'

Type Definitions
----------------
YearlyRowDict
    One flat row of the yearly financials table (CSV export).

RSUGrantDict
    Serialized RSU grant as stored in the settings document.

ExportDocumentDict
    Full JSON export: settings snapshot, projections and metrics.
"""

from typing import Any, Dict, List

from typing_extensions import TypedDict, NotRequired

__all__ = [
    "YearlyRowDict",
    "RSUGrantDict",
    "ExportDocumentDict",
]


# Column names contain spaces, so the functional form is required.
YearlyRowDict = TypedDict(
    "YearlyRowDict",
    {
        "Year": int,
        "Gross Income": str,
        "Net Income": str,
        "Total Expenses": str,
        "Net Savings": str,
        "Savings Rate": str,
        "Effective Tax Rate": str,
        "Investment Balance": str,
        "Pension Balance": str,
    },
)
"""
Flat row of the yearly financials table.

Money columns are strings with two decimals; rate columns are percentage
strings with two decimals (e.g. "41.27%"). No nested values.
"""


class RSUGrantDict(TypedDict):
    """
    Serialized RSU grant.

    Attributes
    ----------
    id : str
        Unique grant identifier, e.g. "grant-2024-main".
    grant_year : int
        Calendar year of the grant.
    grant_type : str
        Free-form label ("Main", "Refresher", ...).
    grant_value : float
        Grant value in EUR.
    share_price : float
        Share price at grant.
    grant_shares : float
        Derived: grant_value / share_price.
    vesting_years : int
        Length of the vesting window in years.
    vesting_fraction : float
        Fraction of the grant vesting each year of the window.
    vesting_type : str
        "equal_annual", "cliff" or "custom".
    """

    id: str
    grant_year: int
    grant_type: str
    grant_value: float
    share_price: float
    grant_shares: float
    vesting_years: int
    vesting_fraction: float
    vesting_type: str


class ExportDocumentDict(TypedDict):
    """
    JSON export of a plan.

    Attributes
    ----------
    export_date : str
        ISO-8601 timestamp of the export.
    schema_version : str
        Version of the document layout.
    settings : dict
        Full settings snapshot (see `settings_to_dict`).
    projections : dict
        Parallel per-year lists (see `projections_to_dict`).
    metrics : dict, optional
        Dashboard metrics, when supplied.
    """

    export_date: str
    schema_version: str
    settings: Dict[str, Any]
    projections: Dict[str, List[Dict[str, Any]]]
    metrics: NotRequired[Dict[str, float]]
