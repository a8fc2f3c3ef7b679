"""
Serialization module for FinPlan persistence and exports.

Purpose
-------
Reads and writes plan settings as JSON, and exports projection results as a
JSON document or a flat CSV table.

Supports:
- Settings documents (save_settings / load_settings), with the data
  migrations older documents need
- Full JSON exports: settings snapshot + per-year projections + metrics
- CSV exports: one row per year, fixed column layout

Design Principles
-----------------
- Type-safe: Settings are validated through the Pydantic models on load
- Human-readable: indented JSON, plain CSV
- Lossless: projections are dumped field by field as JSON-native floats
- Backward compatible: schema versions are checked, missing fields migrated

Example
-------
>>> from pathlib import Path
>>> from finplan.config import default_settings
>>> from finplan.serialization import save_settings, load_settings
>>>
>>> save_settings(default_settings(), Path("plan.json"))
>>> settings = load_settings(Path("plan.json"))
"""

from __future__ import annotations

import json
import logging
import warnings
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from .config import Settings
from .constants import (
    CSV_HEADERS,
    DEFAULT_HEALTHCARE_BENEFIT_MONTHLY,
    DEFAULT_INVESTED_RATE,
    SCHEMA_VERSION,
)
from .exceptions import ConfigurationError, ExportError
from .types import ExportDocumentDict, YearlyRowDict

if TYPE_CHECKING:
    from .metrics import DashboardMetrics
    from .projection import FinancialProjections

__all__ = [
    "settings_to_dict",
    "settings_from_dict",
    "save_settings",
    "load_settings",
    "projections_to_dict",
    "export_json",
    "yearly_rows",
    "export_csv",
    "default_export_name",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

# (section, field) -> value used when an older document lacks the field
_MIGRATION_DEFAULTS = (
    ("income", "healthcare_benefit_monthly", DEFAULT_HEALTHCARE_BENEFIT_MONTHLY),
    ("investment", "bonus_invested_rate", DEFAULT_INVESTED_RATE),
    ("investment", "holiday_allowance_invested_rate", DEFAULT_INVESTED_RATE),
)


def settings_to_dict(settings: Settings) -> Dict[str, Any]:
    """Convert Settings to a JSON-native dictionary."""
    return settings.model_dump(mode="json")


def settings_from_dict(data: Dict[str, Any]) -> Settings:
    """
    Create Settings from a dictionary, migrating older layouts.

    Missing (or null) `healthcare_benefit_monthly` becomes 200 EUR; missing
    `bonus_invested_rate` and `holiday_allowance_invested_rate` become 1.0.

    Raises
    ------
    ConfigurationError
        If the data does not validate against the Settings schema.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings must be a JSON object, got {type(data).__name__}")

    migrated = dict(data)
    for section, key, default in _MIGRATION_DEFAULTS:
        block = migrated.get(section)
        if isinstance(block, dict) and block.get(key) is None:
            migrated[section] = {**block, key: default}
            logger.debug("Migrated missing %s.%s to %s", section, key, default)

    try:
        return Settings.model_validate(migrated)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def save_settings(settings: Settings, path: Path) -> None:
    """
    Save settings to a JSON file.

    The document holds `schema_version` and `settings`. Parent
    directories are created as needed.
    """
    doc = {
        "schema_version": SCHEMA_VERSION,
        "settings": settings_to_dict(settings),
    }
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(doc, f, indent=2)


def load_settings(path: Path) -> Settings:
    """
    Load settings from a JSON file.

    Accepts a settings document, a full JSON export (its `settings` block is
    used), or a bare settings object.

    Raises
    ------
    ConfigurationError
        If the file is not valid JSON or the settings do not validate.

    Warns
    -----
    UserWarning
        If the document's schema version differs from the current one.
    """
    with open(path, "r") as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(doc, dict):
        raise ConfigurationError(f"Settings file {path} must contain a JSON object")

    if "settings" in doc:
        schema_version = doc.get("schema_version", "0.0.0")
        if schema_version != SCHEMA_VERSION:
            warnings.warn(
                f"Settings schema version {schema_version} differs from current "
                f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
                UserWarning,
            )
        return settings_from_dict(doc["settings"])

    return settings_from_dict(doc)


# ---------------------------------------------------------------------------
# Projection exports
# ---------------------------------------------------------------------------

def projections_to_dict(projections: FinancialProjections) -> Dict[str, List[Dict[str, Any]]]:
    """Per-year lists of every result, field by field."""
    return {
        "tax_results": [asdict(t) for t in projections.tax_results],
        "rsu_vesting": [asdict(r) for r in projections.rsu_vesting],
        "yearly_financials": [asdict(f) for f in projections.yearly_financials],
        "yearly_investments": [asdict(i) for i in projections.yearly_investments],
        "yearly_pension": [asdict(p) for p in projections.yearly_pension],
    }


def default_export_name(kind: str, today: Optional[date] = None) -> str:
    """
    Dated file name of an export.

    >>> default_export_name("json", date(2025, 3, 1))
    'financial-plan-2025-03-01.json'
    >>> default_export_name("csv", date(2025, 3, 1))
    'financial-projections-2025-03-01.csv'
    """
    stamp = (today or date.today()).isoformat()
    if kind == "json":
        return f"financial-plan-{stamp}.json"
    elif kind == "csv":
        return f"financial-projections-{stamp}.csv"
    else:
        raise ValueError(f"kind must be 'json' or 'csv', got: {kind}")


def export_json(
    settings: Settings,
    projections: FinancialProjections,
    path: Path,
    metrics: Optional[DashboardMetrics] = None,
) -> Path:
    """
    Write the full JSON export of a run.

    Raises
    ------
    ExportError
        If the file cannot be written.
    """
    doc: ExportDocumentDict = {
        "export_date": datetime.now().isoformat(),
        "schema_version": SCHEMA_VERSION,
        "settings": settings_to_dict(settings),
        "projections": projections_to_dict(projections),
    }
    if metrics is not None:
        doc["metrics"] = metrics.to_dict()

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(doc, f, indent=2)
    except OSError as e:
        raise ExportError(f"Cannot write JSON export to {path}: {e}") from e
    logger.debug("Wrote JSON export to %s", path)
    return path


def yearly_rows(projections: FinancialProjections) -> List[YearlyRowDict]:
    """
    Flat rows of the yearly table.

    Money with two decimals; savings and effective tax rates as percentages
    with two decimals. Missing balances are written as "0".
    """
    rows: List[YearlyRowDict] = []
    investments = projections.yearly_investments
    pension = projections.yearly_pension
    for i, fin in enumerate(projections.yearly_financials):
        values = [
            fin.year,
            f"{fin.total_gross_income:.2f}",
            f"{fin.total_net_income:.2f}",
            f"{fin.total_expenses:.2f}",
            f"{fin.net_savings:.2f}",
            f"{fin.savings_rate * 100:.2f}%",
            f"{fin.effective_tax_rate * 100:.2f}%",
            f"{investments[i].closing_balance:.2f}" if i < len(investments) else "0",
            f"{pension[i].closing_balance:.2f}" if i < len(pension) else "0",
        ]
        rows.append(dict(zip(CSV_HEADERS, values)))
    return rows


def export_csv(projections: FinancialProjections, path: Path) -> Path:
    """
    Write the yearly table as CSV.

    Raises
    ------
    ExportError
        If the file cannot be written.
    """
    df = pd.DataFrame(yearly_rows(projections), columns=list(CSV_HEADERS))
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)
    except OSError as e:
        raise ExportError(f"Cannot write CSV export to {path}: {e}") from e
    logger.debug("Wrote CSV export with %d rows to %s", len(df), path)
    return path
