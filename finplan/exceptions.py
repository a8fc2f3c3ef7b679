"""
Custom exceptions for FinPlan.

Purpose
-------
Provides a unified exception hierarchy for the boundaries of FinPlan:
settings files, tax tables and exports. The projection engine itself does
not raise for degenerate numbers (it degrades to 0), so these exceptions
are raised by the layers that load, validate and write data.

Exception Hierarchy
-------------------
FinPlanError (base)
├── ConfigurationError - Invalid settings file or reference data
│   └── TaxTableError - Tax bracket table with gaps, overlaps or bad bounds
├── ValidationError - Settings that cannot be projected meaningfully
└── ExportError - Failures writing JSON/CSV exports

Usage
-----
>>> from finplan.exceptions import ValidationError, FinPlanError
>>>
>>> try:
...     validate_settings(settings)
... except FinPlanError as e:
...     print(f"FinPlan error: {e}")
"""

__all__ = [
    "FinPlanError",
    "ConfigurationError",
    "TaxTableError",
    "ValidationError",
    "ExportError",
]


class FinPlanError(Exception):
    """
    Base exception for all FinPlan errors.

    All FinPlan-specific exceptions inherit from this class,
    enabling unified error handling when needed.
    """
    pass


class ConfigurationError(FinPlanError):
    """
    Invalid configuration or reference data.

    Raised when configuration cannot be loaded, such as:
    - Settings file that is not valid JSON
    - Settings document that does not match the schema
    - Tax year requested from an empty registry

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Invalid settings file settings.json: field 'planning' is required"
    ... )
    """
    pass


class TaxTableError(ConfigurationError):
    """
    Inconsistent tax bracket table.

    Raised when a TaxConfig is built from brackets that do not cover the
    income line exactly once:
    - First bracket does not start at 0
    - Gap or overlap between consecutive brackets
    - Unbounded bracket that is not the last one

    Examples
    --------
    >>> raise TaxTableError(
    ...     "Bracket 2 starts at 36000.0 but bracket 1 ends at 35472.0"
    ... )
    """
    pass


class ValidationError(FinPlanError):
    """
    Settings that the engine would only project as nonsense.

    The engine is total and never raises on these values; callers use
    `validate_settings` before a run to surface them:
    - Zero or negative grant share price
    - Zero vesting years
    - Negative base salary

    Examples
    --------
    >>> raise ValidationError(
    ...     "rsu_grants[0].share_price must be positive, got 0.0"
    ... )
    """
    pass


class ExportError(FinPlanError):
    """
    Export could not be written.

    Raised when the JSON or CSV export fails at the filesystem level.
    """
    pass
