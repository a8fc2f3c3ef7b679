"""
Configuration management module for FinPlan.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter
management, validation, and serialization. Holds the user's plan settings
(income, investments, planning horizon, expenses, RSU grants), the static
tax reference data, and the application settings read from the environment.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models; a run works on one snapshot
- Serializable: model_dump()/model_validate() round-trip through JSON
- Environment-aware: AppSettings reads FINPLAN_* variables and .env files
- Derived values are re-derived on validation (RSU grant shares)

Example
-------
>>> from finplan.config import Settings, IncomeSettings, default_settings
>>> settings = default_settings()
>>> settings.income.base_salary
78500.0
>>>
>>> # Serialize to dict/JSON and back
>>> data = settings.model_dump()
>>> restored = Settings.model_validate(data)
"""

from __future__ import annotations
from typing import Any, List, Literal, Optional
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_ANNUAL_RETURN,
    DEFAULT_BASE_SALARY,
    DEFAULT_BONUS_RATE,
    DEFAULT_EMPLOYEE_PENSION_RATE,
    DEFAULT_EMPLOYER_PENSION_RATE,
    DEFAULT_EXPENSE_INFLATION,
    DEFAULT_GRANT_SHARE_PRICE,
    DEFAULT_GRANT_VALUE,
    DEFAULT_HEALTHCARE_BENEFIT_MONTHLY,
    DEFAULT_HOLIDAY_ALLOWANCE_RATE,
    DEFAULT_INVESTED_RATE,
    DEFAULT_PENSION_RETURN,
    DEFAULT_PROJECTION_YEARS,
    DEFAULT_SALARY_GROWTH,
    DEFAULT_SHARE_PRICE,
    DEFAULT_SHARE_PRICE_GROWTH,
    DEFAULT_START_YEAR,
    DEFAULT_STARTING_NET_WORTH,
    DEFAULT_VESTING_YEARS,
)
from .exceptions import TaxTableError, ValidationError

__all__ = [
    "IncomeSettings",
    "InvestmentSettings",
    "PlanningSettings",
    "ExpenseCategory",
    "RSUGrant",
    "Settings",
    "TaxBracket",
    "SocialContribution",
    "GeneralCreditRule",
    "LabourCreditSegment",
    "LabourCreditRule",
    "TaxConfig",
    "AppSettings",
    "default_settings",
    "validate_settings",
]


# ---------------------------------------------------------------------------
# Income Configuration
# ---------------------------------------------------------------------------

class IncomeSettings(BaseModel):
    """
    Salary, allowances and pension parameters.

    All rates are fractions (0.08 for 8%). Bonus, holiday allowance and both
    pension contributions are computed on the base salary of each year.

    Attributes
    ----------
    base_salary : float
        Annual gross base salary in the first projection year.
    bonus_rate : float
        Yearly bonus as a fraction of base salary.
    holiday_allowance_rate : float
        Holiday allowance (vakantiegeld) as a fraction of base salary.
    employee_pension_rate : float
        Employee pension contribution, deducted before tax.
    employer_pension_rate : float
        Employer pension contribution, paid on top of salary.
    healthcare_benefit_monthly : float
        Tax-free monthly healthcare benefit.
    has_30_percent_ruling : bool
        Whether the 30% expatriate ruling applies.
    salary_growth_rate : float
        Annual growth of the base salary.

    Examples
    --------
    >>> income = IncomeSettings(base_salary=60_000, has_30_percent_ruling=False)
    >>> income.holiday_allowance_rate
    0.08
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_salary: float = Field(
        default=DEFAULT_BASE_SALARY,
        ge=0,
        description="Annual gross base salary"
    )
    bonus_rate: float = Field(
        default=DEFAULT_BONUS_RATE,
        ge=0,
        le=10.0,
        description="Bonus as a fraction of base salary"
    )
    holiday_allowance_rate: float = Field(
        default=DEFAULT_HOLIDAY_ALLOWANCE_RATE,
        ge=0,
        le=1.0,
        description="Holiday allowance as a fraction of base salary"
    )
    employee_pension_rate: float = Field(
        default=DEFAULT_EMPLOYEE_PENSION_RATE,
        ge=0,
        le=1.0,
        description="Employee pension contribution rate"
    )
    employer_pension_rate: float = Field(
        default=DEFAULT_EMPLOYER_PENSION_RATE,
        ge=0,
        le=1.0,
        description="Employer pension contribution rate"
    )
    healthcare_benefit_monthly: float = Field(
        default=DEFAULT_HEALTHCARE_BENEFIT_MONTHLY,
        ge=0,
        description="Tax-free monthly healthcare benefit"
    )
    has_30_percent_ruling: bool = Field(
        default=True,
        description="Whether the 30% ruling applies"
    )
    salary_growth_rate: float = Field(
        default=DEFAULT_SALARY_GROWTH,
        gt=-1.0,
        le=1.0,
        description="Annual salary growth rate"
    )


# ---------------------------------------------------------------------------
# Investment Configuration
# ---------------------------------------------------------------------------

class InvestmentSettings(BaseModel):
    """Starting balances, return assumptions and invested fractions."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    starting_net_worth: float = Field(
        default=DEFAULT_STARTING_NET_WORTH,
        description="Liquid investments at the start of the plan"
    )
    starting_pension_balance: float = Field(
        default=0.0,
        ge=0,
        description="Pension balance at the start of the plan"
    )
    annual_return_rate: float = Field(
        default=DEFAULT_ANNUAL_RETURN,
        gt=-1.0,
        le=1.0,
        description="Expected annual portfolio return"
    )
    pension_return_rate: float = Field(
        default=DEFAULT_PENSION_RETURN,
        gt=-1.0,
        le=1.0,
        description="Expected annual pension fund return"
    )
    share_price_growth_rate: float = Field(
        default=DEFAULT_SHARE_PRICE_GROWTH,
        gt=-1.0,
        le=2.0,
        description="Annual employer share price growth"
    )
    current_share_price: float = Field(
        default=DEFAULT_SHARE_PRICE,
        ge=0,
        description="Employer share price in the start year"
    )
    bonus_invested_rate: float = Field(
        default=DEFAULT_INVESTED_RATE,
        ge=0,
        le=1.0,
        description="Fraction of net bonus that is invested"
    )
    holiday_allowance_invested_rate: float = Field(
        default=DEFAULT_INVESTED_RATE,
        ge=0,
        le=1.0,
        description="Fraction of net holiday allowance that is invested"
    )


# ---------------------------------------------------------------------------
# Planning Configuration
# ---------------------------------------------------------------------------

class PlanningSettings(BaseModel):
    """Projection horizon and expense inflation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    start_year: int = Field(
        default=DEFAULT_START_YEAR,
        ge=1900,
        le=2200,
        description="First projection year"
    )
    projection_years: int = Field(
        default=DEFAULT_PROJECTION_YEARS,
        ge=0,
        le=100,
        description="Number of projected years"
    )
    expense_inflation_rate: float = Field(
        default=DEFAULT_EXPENSE_INFLATION,
        gt=-1.0,
        le=1.0,
        description="Annual expense inflation"
    )


class ExpenseCategory(BaseModel):
    """A named monthly budget item."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=100)
    monthly_amount: float = Field(ge=0, description="Monthly amount in EUR")


# ---------------------------------------------------------------------------
# RSU Grant Configuration
# ---------------------------------------------------------------------------

class RSUGrant(BaseModel):
    """
    A single restricted stock unit grant.

    `grant_shares` is derived from `grant_value / share_price` every time the
    model is validated, so a value supplied by the caller is ignored. Use
    `finplan.rsu.update_grant` to change a grant; it re-validates and keeps
    the share count consistent.

    Attributes
    ----------
    id : str
        Unique identifier, e.g. "grant-2024-main".
    grant_year : int
        Calendar year of the grant; vesting starts in this year.
    grant_type : str
        Free-form label ("Main", "Refresher", "Promo", ...).
    grant_value : float
        Grant value in EUR.
    share_price : float
        Share price at grant. A price of 0 yields 0 shares.
    grant_shares : float
        Derived share count.
    vesting_years : int
        Length of the vesting window.
    vesting_fraction : float
        Fraction of the shares vesting in each year of the window.
    vesting_type : {"equal_annual", "cliff", "custom"}
        Cliff grants vest all shares in the last year of the window.

    Examples
    --------
    >>> grant = RSUGrant(id="g1", grant_year=2024, grant_value=100_000,
    ...                  share_price=100, vesting_years=4, vesting_fraction=0.25)
    >>> grant.grant_shares
    1000.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, max_length=100)
    grant_year: int = Field(ge=1900, le=2200)
    grant_type: str = Field(default="Main", max_length=50)
    grant_value: float = Field(ge=0, description="Grant value in EUR")
    share_price: float = Field(ge=0, description="Share price at grant")
    grant_shares: float = Field(default=0.0, ge=0, description="Derived share count")
    vesting_years: int = Field(default=DEFAULT_VESTING_YEARS, ge=0, le=50)
    vesting_fraction: float = Field(
        default=1.0 / DEFAULT_VESTING_YEARS,
        ge=0,
        le=1.0,
        description="Fraction vesting per year"
    )
    vesting_type: Literal["equal_annual", "cliff", "custom"] = Field(
        default="equal_annual",
        description="Vesting pattern"
    )

    @model_validator(mode="before")
    @classmethod
    def derive_shares(cls, data: Any) -> Any:
        """Re-derive grant_shares from grant_value and share_price."""
        if isinstance(data, dict) and "grant_value" in data and "share_price" in data:
            data = dict(data)
            value = float(data["grant_value"])
            price = float(data["share_price"])
            data["grant_shares"] = value / price if price > 0 else 0.0
        return data


# ---------------------------------------------------------------------------
# Full Settings Snapshot
# ---------------------------------------------------------------------------

class Settings(BaseModel):
    """
    Complete input snapshot of one projection run.

    Examples
    --------
    >>> settings = Settings(
    ...     income=IncomeSettings(base_salary=50_000),
    ...     planning=PlanningSettings(start_year=2025, projection_years=10),
    ... )
    >>> len(settings.expenses)
    0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    income: IncomeSettings = Field(default_factory=IncomeSettings)
    investment: InvestmentSettings = Field(default_factory=InvestmentSettings)
    planning: PlanningSettings = Field(default_factory=PlanningSettings)
    expenses: List[ExpenseCategory] = Field(default_factory=list)
    rsu_grants: List[RSUGrant] = Field(default_factory=list)

    @field_validator("expenses", "rsu_grants")
    @classmethod
    def validate_unique_ids(cls, v, info):
        """Ensure ids are unique within each collection."""
        ids = [item.id for item in v]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"{info.field_name} ids must be unique, duplicated: {duplicates}")
        return v


# ---------------------------------------------------------------------------
# Tax Reference Data
# ---------------------------------------------------------------------------

class TaxBracket(BaseModel):
    """Income tax bracket; `upper_bound=None` marks the open top bracket."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lower_bound: float = Field(ge=0)
    upper_bound: Optional[float] = Field(default=None)
    rate: float = Field(ge=0, le=1.0)


class SocialContribution(BaseModel):
    """Social contribution (premies) levied on taxable income up to a ceiling."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, max_length=50)
    rate: float = Field(ge=0, le=1.0)
    max_income: float = Field(ge=0)


class GeneralCreditRule(BaseModel):
    """
    General tax credit (algemene heffingskorting).

    Full `max_amount` up to `phaseout_start`, reduced by `phaseout_rate` per
    euro of taxable income above it, and zero from `phaseout_end`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_amount: float = Field(ge=0)
    phaseout_start: float = Field(ge=0)
    phaseout_end: float = Field(ge=0)
    phaseout_rate: float = Field(ge=0, le=1.0)


class LabourCreditSegment(BaseModel):
    """Linear piece of the labour credit: base_amount + rate * (income - lower_bound)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lower_bound: float = Field(ge=0)
    upper_bound: float = Field(ge=0)
    base_amount: float
    rate: float = Field(ge=-1.0, le=1.0)


class LabourCreditRule(BaseModel):
    """Labour tax credit (arbeidskorting) as consecutive linear segments; 0 above the last."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    segments: List[LabourCreditSegment] = Field(min_length=1)
    max_amount: float = Field(ge=0)


class TaxConfig(BaseModel):
    """
    Tax table for one year.

    Brackets must cover [0, inf) exactly once: the first starts at 0, each
    starts where the previous ends, and only the last is unbounded.

    Attributes
    ----------
    year : int
        Tax year the table belongs to.
    brackets : list of TaxBracket
        Progressive income tax brackets, in order.
    social_contributions : list of SocialContribution
        Contributions levied on taxable income up to their ceiling.
    general_credit : GeneralCreditRule
        Phase-out rule of the general credit.
    labour_credit : LabourCreditRule
        Segments of the labour credit.
    ruling_taxable_fraction : float
        Share of income that stays taxable under the 30% ruling.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    year: int = Field(ge=1900, le=2200)
    brackets: List[TaxBracket] = Field(min_length=1)
    social_contributions: List[SocialContribution] = Field(default_factory=list)
    general_credit: GeneralCreditRule
    labour_credit: LabourCreditRule
    ruling_taxable_fraction: float = Field(default=0.70, gt=0, le=1.0)

    @model_validator(mode="after")
    def validate_brackets(self) -> "TaxConfig":
        """Reject bracket tables with gaps, overlaps or misplaced open brackets."""
        brackets = self.brackets
        if brackets[0].lower_bound != 0:
            raise TaxTableError(
                f"First bracket must start at 0, got {brackets[0].lower_bound}"
            )
        for i, b in enumerate(brackets):
            is_last = i == len(brackets) - 1
            if b.upper_bound is None:
                if not is_last:
                    raise TaxTableError(
                        f"Bracket {i + 1} is unbounded but is not the last bracket"
                    )
                continue
            if b.upper_bound <= b.lower_bound:
                raise TaxTableError(
                    f"Bracket {i + 1} upper bound {b.upper_bound} must exceed "
                    f"lower bound {b.lower_bound}"
                )
            if is_last:
                raise TaxTableError("Last bracket must be unbounded (upper_bound=None)")
            nxt = brackets[i + 1]
            if nxt.lower_bound != b.upper_bound:
                raise TaxTableError(
                    f"Bracket {i + 2} starts at {nxt.lower_bound} but bracket "
                    f"{i + 1} ends at {b.upper_bound}"
                )
        return self


# ---------------------------------------------------------------------------
# Defaults & Validation
# ---------------------------------------------------------------------------

def default_settings() -> Settings:
    """
    Settings of a fresh plan.

    Returns
    -------
    Settings
        Default income, investment and planning settings, seven expense
        categories and a single 2024 main grant.
    """
    expenses = [
        ExpenseCategory(id="rent", name="Rent", monthly_amount=1450),
        ExpenseCategory(id="utilities", name="Utilities", monthly_amount=150),
        ExpenseCategory(id="food", name="Food", monthly_amount=500),
        ExpenseCategory(id="holiday", name="Holiday", monthly_amount=200),
        ExpenseCategory(id="clothing", name="Clothing", monthly_amount=200),
        ExpenseCategory(id="family", name="Helping family", monthly_amount=400),
        ExpenseCategory(id="fun", name="Fun / entertainment", monthly_amount=500),
    ]
    grant = RSUGrant(
        id="grant-2024-main",
        grant_year=2024,
        grant_type="Main",
        grant_value=DEFAULT_GRANT_VALUE,
        share_price=DEFAULT_GRANT_SHARE_PRICE,
        vesting_years=DEFAULT_VESTING_YEARS,
        vesting_fraction=1.0 / DEFAULT_VESTING_YEARS,
    )
    return Settings(
        income=IncomeSettings(),
        investment=InvestmentSettings(),
        planning=PlanningSettings(),
        expenses=expenses,
        rsu_grants=[grant],
    )


def validate_settings(settings: Settings) -> None:
    """
    Check a snapshot for values the engine would only project as nonsense.

    The engine never raises on these (it degrades to zeros); this is the
    caller-side gate before a run. All problems are reported at once.

    Raises
    ------
    ValidationError
        If the base salary is zero, the projection horizon is empty, or an
        RSU grant has a non-positive share price, no vesting years, or vests
        more than 100% of its shares.
    """
    problems = []
    if settings.income.base_salary <= 0:
        problems.append(
            f"income.base_salary must be positive, got {settings.income.base_salary}"
        )
    if settings.planning.projection_years < 1:
        problems.append("planning.projection_years must be at least 1")
    for i, grant in enumerate(settings.rsu_grants):
        if grant.share_price <= 0:
            problems.append(
                f"rsu_grants[{i}].share_price must be positive, got {grant.share_price}"
            )
        if grant.vesting_years < 1:
            problems.append(f"rsu_grants[{i}].vesting_years must be at least 1")
        if grant.vesting_type != "cliff" and grant.vesting_fraction * grant.vesting_years > 1.0 + 1e-9:
            problems.append(
                f"rsu_grants[{i}] vests {grant.vesting_fraction * grant.vesting_years:.0%} "
                f"of its shares (vesting_fraction * vesting_years > 1)"
            )
    if problems:
        raise ValidationError("Invalid settings: " + "; ".join(problems))


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    are prefixed with FINPLAN_ (e.g., FINPLAN_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    debug : bool
        Enable debug mode (DEBUG logging)
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    settings_file : Path
        Where the CLI reads and writes the plan settings
    output_dir : Path
        Export directory of `finplan project --export`

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'
    """

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    settings_file: Path = Field(
        default=Path.home() / ".config" / "finplan" / "settings.json",
        description="Plan settings document"
    )
    output_dir: Path = Field(
        default=Path("results"),
        description="Export directory used by `finplan project --export`"
    )
