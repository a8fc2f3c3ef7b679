"""
Command-Line Interface for FinPlan.

Purpose
-------
Runs projections, one-off tax computations and settings management from the
shell, without writing Python code.

Commands
--------
- project: Run the yearly projection of a plan and export the results
- tax: Compute the Dutch income tax for a single income
- config: Validate, display and create settings files
- info: Show version and dependency information

Example Usage
-------------
    # Project the default plan
    $ finplan project

    # Project a saved plan and write JSON + CSV exports
    $ finplan project --config plan.json --output results/

    # Export to FINPLAN_OUTPUT_DIR
    $ finplan project --export

    # Tax on 80k with the 30% ruling
    $ finplan tax --income 80000 --ruling

    # Create and validate a settings file
    $ finplan config create plan.json
    $ finplan config validate plan.json
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import pandas as pd
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import AppSettings, Settings, default_settings, validate_settings
from .constants import DEFAULT_EMPLOYEE_PENSION_RATE, DEFAULT_START_YEAR
from .exceptions import FinPlanError
from .utils import format_currency, format_pct

# Version
__version__ = "0.1.0"

logger = logging.getLogger("finplan")


def _configure_logging(app: AppSettings, verbose: bool) -> None:
    level = logging.DEBUG if (verbose or app.debug) else getattr(logging, app.log_level)
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logger.setLevel(level)


def _load_plan(config: Optional[Path], app: AppSettings) -> Settings:
    """Settings from --config, else the configured settings file, else defaults."""
    from .serialization import load_settings

    if config is not None:
        return load_settings(config)
    if app.settings_file.exists():
        logger.debug("Loading settings from %s", app.settings_file)
        return load_settings(app.settings_file)
    return default_settings()


@click.group()
@click.version_option(version=__version__, prog_name="finplan")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, quiet: bool, verbose: bool) -> None:
    """
    FinPlan - Personal finance projections for the Netherlands.

    Projects salary, Dutch income tax, RSU vesting, expenses, savings,
    investments and pension year by year.

    Use 'finplan COMMAND --help' for command-specific help.
    """
    app = AppSettings()
    _configure_logging(app, verbose)
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = Console()
    ctx.obj["app"] = app


@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to settings file (JSON); defaults to the configured settings file"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory for JSON and CSV exports"
)
@click.option(
    "--export", "-e", "export",
    is_flag=True,
    help="Write JSON and CSV exports to the configured output directory"
)
@click.option(
    "--format", "-f", "fmt",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    help="Output format on stdout (default: table)"
)
@click.option(
    "--years", "-n",
    type=click.IntRange(1, 100),
    default=None,
    help="Override the number of projection years"
)
@click.pass_context
def project(
    ctx: click.Context,
    config: Optional[Path],
    output: Optional[Path],
    export: bool,
    fmt: str,
    years: Optional[int],
) -> None:
    """
    Run the yearly projection of a plan.

    Example:
        finplan project -c plan.json -o results/
        finplan project --export
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)
    app = ctx.obj["app"]
    if output is None and export:
        output = app.output_dir

    from .projection import run
    from .serialization import (
        default_export_name,
        export_csv,
        export_json,
        projections_to_dict,
        yearly_rows,
    )

    try:
        settings = _load_plan(config, app)
        if years is not None:
            settings = settings.model_copy(
                update={"planning": settings.planning.model_copy(update={"projection_years": years})}
            )
        validate_settings(settings)
    except (FinPlanError, OSError) as e:
        click.echo(f"Error loading settings: {e}", err=True)
        sys.exit(1)

    projections, metrics = run(settings)

    if fmt == "json":
        click.echo(json.dumps(
            {"projections": projections_to_dict(projections), "metrics": metrics.to_dict()},
            indent=2,
        ))
    elif fmt == "csv":
        click.echo(pd.DataFrame(yearly_rows(projections)).to_csv(index=False), nl=False)
    elif not quiet:
        table = Table(title="Yearly Projection", show_header=True)
        table.add_column("Year", style="cyan")
        table.add_column("Gross", justify="right")
        table.add_column("RSU", justify="right")
        table.add_column("Net", justify="right")
        table.add_column("Expenses", justify="right")
        table.add_column("Savings", justify="right", style="green")
        table.add_column("Rate", justify="right")
        table.add_column("Tax", justify="right")
        table.add_column("Investments", justify="right")
        table.add_column("Pension", justify="right")

        for fin, inv, pen in zip(
            projections.yearly_financials,
            projections.yearly_investments,
            projections.yearly_pension,
        ):
            table.add_row(
                str(fin.year),
                format_currency(fin.gross_income),
                format_currency(fin.rsu_gross_value),
                format_currency(fin.total_net_income),
                format_currency(fin.total_expenses),
                format_currency(fin.net_savings),
                format_pct(fin.savings_rate),
                format_pct(fin.effective_tax_rate),
                format_currency(inv.closing_balance),
                format_currency(pen.closing_balance),
            )
        console.print(table)

        summary = "\n".join([
            f"Final net worth:     {format_currency(metrics.final_net_worth)}",
            f"Final pension:       {format_currency(metrics.final_pension_balance)}",
            f"Total wealth:        {format_currency(metrics.total_wealth)}",
            f"Net worth CAGR:      {format_pct(metrics.net_worth_cagr)}",
            f"Total savings:       {format_currency(metrics.total_savings)}",
            f"Avg savings rate:    {format_pct(metrics.average_savings_rate)}",
            f"Avg effective tax:   {format_pct(metrics.average_effective_tax_rate)}",
            f"RSU gross / net:     {format_currency(metrics.total_rsu_gross_value)}"
            f" / {format_currency(metrics.total_rsu_net_value)}",
        ])
        console.print(Panel(summary, title="Summary", border_style="green"))

    if output:
        try:
            json_path = export_json(
                settings, projections, output / default_export_name("json"), metrics=metrics
            )
            csv_path = export_csv(projections, output / default_export_name("csv"))
        except FinPlanError as e:
            click.echo(f"Error writing exports: {e}", err=True)
            sys.exit(1)
        if not quiet:
            click.echo(f"Results saved to {json_path} and {csv_path}", err=fmt != "table")


@main.command()
@click.option("--income", "-i", type=float, required=True, help="Gross yearly income in EUR")
@click.option("--ruling/--no-ruling", default=False, help="Apply the 30% ruling")
@click.option(
    "--pension-rate",
    type=click.FloatRange(0.0, 1.0),
    default=DEFAULT_EMPLOYEE_PENSION_RATE,
    show_default=True,
    help="Employee pension rate on gross income"
)
@click.option("--year", type=int, default=DEFAULT_START_YEAR, show_default=True, help="Tax year")
@click.pass_context
def tax(ctx: click.Context, income: float, ruling: bool, pension_rate: float, year: int) -> None:
    """
    Compute the income tax for one gross income.

    Example:
        finplan tax --income 80000 --ruling
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .tax import compute_tax

    try:
        result = compute_tax(income, pension_rate, ruling, year)
    except FinPlanError as e:
        click.echo(f"Error computing tax: {e}", err=True)
        sys.exit(1)

    if quiet:
        click.echo(f"{result.net_income:.2f}")
        return

    table = Table(title=f"Income Tax {year}", show_header=True)
    table.add_column("Item", style="cyan")
    table.add_column("Amount", justify="right")

    table.add_row("Gross income", format_currency(result.gross_income, 2))
    table.add_row("Pension contributions", format_currency(result.pension_contributions, 2))
    table.add_row("Taxable income", format_currency(result.taxable_income, 2))
    table.add_row("Income tax", format_currency(result.income_tax, 2))
    table.add_row("Social contributions", format_currency(result.social_contributions, 2))
    table.add_row("General tax credit", format_currency(-result.general_tax_credit, 2))
    table.add_row("Labour tax credit", format_currency(-result.labour_tax_credit, 2))
    table.add_row("Total tax", format_currency(result.total_tax, 2))
    table.add_row("Net income", format_currency(result.net_income, 2), style="green")
    table.add_row("", "")
    table.add_row("Effective rate", format_pct(result.effective_tax_rate, 2))
    table.add_row("Marginal rate", format_pct(result.marginal_tax_rate, 2))

    console.print(table)


@main.group()
def config() -> None:
    """
    Settings file management commands.

    Validate, display, and create plan settings files.
    """
    pass


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def config_validate(ctx: click.Context, config_file: Path) -> None:
    """
    Validate a settings file.

    Checks that the file is valid JSON, conforms to the settings schema and
    describes a plan that can be projected.

    Example:
        finplan config validate plan.json
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .serialization import load_settings

    try:
        settings = load_settings(config_file)
        validate_settings(settings)
    except (FinPlanError, OSError) as e:
        click.echo(f"Configuration validation failed: {e}", err=True)
        sys.exit(1)

    if quiet:
        return

    income = settings.income
    planning = settings.planning
    info = f"""
[bold]Settings Valid[/bold]

[cyan]Income:[/cyan]
  Base salary: {format_currency(income.base_salary)}
  30% ruling: {'Yes' if income.has_30_percent_ruling else 'No'}

[cyan]Planning:[/cyan]
  {planning.start_year} - {planning.start_year + planning.projection_years - 1}

[cyan]Expenses ({len(settings.expenses)}):[/cyan] {format_currency(sum(e.monthly_amount for e in settings.expenses))} / month
[cyan]RSU grants ({len(settings.rsu_grants)}):[/cyan]
"""
    for grant in settings.rsu_grants:
        info += (
            f"  - {grant.id}: {format_currency(grant.grant_value)} "
            f"({grant.grant_shares:,.0f} shares, {grant.vesting_type})\n"
        )
    console.print(Panel(info, title="Configuration Summary", border_style="green"))


@config.command("show")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.option("--format", "-f", "fmt", type=click.Choice(["json", "table"]), default="table")
@click.pass_context
def config_show(ctx: click.Context, config_file: Path, fmt: str) -> None:
    """
    Display a settings file.

    Example:
        finplan config show plan.json --format table
    """
    console = ctx.obj.get("console")

    from .serialization import load_settings, settings_to_dict

    try:
        settings = load_settings(config_file)
    except (FinPlanError, OSError) as e:
        click.echo(f"Error loading settings: {e}", err=True)
        sys.exit(1)

    if fmt == "json":
        click.echo(json.dumps(settings_to_dict(settings), indent=2))
        return

    params = Table(title="Parameters")
    params.add_column("Setting", style="cyan")
    params.add_column("Value", justify="right")
    for section in ("income", "investment", "planning"):
        for key, value in getattr(settings, section).model_dump().items():
            params.add_row(f"{section}.{key}", str(value))
    console.print(params)

    expenses = Table(title="Expenses")
    expenses.add_column("Category", style="cyan")
    expenses.add_column("Monthly", justify="right")
    for category in settings.expenses:
        expenses.add_row(category.name, format_currency(category.monthly_amount))
    console.print(expenses)

    grants = Table(title="RSU Grants")
    grants.add_column("Id", style="cyan")
    grants.add_column("Year", justify="right")
    grants.add_column("Type")
    grants.add_column("Value", justify="right")
    grants.add_column("Price", justify="right")
    grants.add_column("Shares", justify="right")
    grants.add_column("Vesting")
    for g in settings.rsu_grants:
        grants.add_row(
            g.id,
            str(g.grant_year),
            g.grant_type,
            format_currency(g.grant_value),
            format_currency(g.share_price, 2),
            f"{g.grant_shares:,.1f}",
            f"{g.vesting_type}, {g.vesting_years}y",
        )
    console.print(grants)


@config.command("create")
@click.argument("output_file", type=click.Path(path_type=Path))
@click.option(
    "--template", "-t",
    type=click.Choice(["default", "empty"]),
    default="default",
    help="'default' has the sample budget and a grant; 'empty' has neither"
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def config_create(ctx: click.Context, output_file: Path, template: str, force: bool) -> None:
    """
    Create a new settings file from a template.

    Example:
        finplan config create plan.json --template default
    """
    quiet = ctx.obj.get("quiet", False)

    from .serialization import save_settings

    if output_file.exists() and not force:
        click.echo(f"Error: {output_file} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    settings = default_settings()
    if template == "empty":
        settings = settings.model_copy(update={"expenses": [], "rsu_grants": []})

    try:
        save_settings(settings, output_file)
    except OSError as e:
        click.echo(f"Error writing settings: {e}", err=True)
        sys.exit(1)

    if not quiet:
        click.echo(f"Created {template} settings in {output_file}")


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display system and package information.

    Shows version numbers, installed dependencies, and the active
    application settings.
    """
    console = ctx.obj.get("console")
    app = ctx.obj["app"]

    from .tax import TAX_CONFIGS

    info_lines = [
        f"FinPlan Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
        f"Tax tables: {', '.join(str(y) for y in sorted(TAX_CONFIGS))}",
        f"Settings file: {app.settings_file}",
        f"Output dir: {app.output_dir}",
        f"Log level: {app.log_level}",
    ]

    from importlib.metadata import PackageNotFoundError, version

    for name in ("numpy", "pandas", "pydantic", "pydantic-settings", "click", "rich"):
        try:
            info_lines.append(f"{name}: {version(name)}")
        except PackageNotFoundError:
            info_lines.append(f"{name}: not installed")

    console.print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
