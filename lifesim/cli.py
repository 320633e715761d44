"""
Command-Line Interface for LifeSim.

Purpose
-------
Runs the yearly simulation engine and the tax calculator from the shell
without writing Python code.

Commands
--------
- run: Simulate a profile year by year until retirement (or N years)
- taxes: Print the tax breakdown for a salary
- config: Validate and create profile files
- info: Show version and dependency information

Example Usage
-------------
    # Simulate a profile with a fixed seed
    $ lifesim run --profile profile.json --seed 42

    # Ten years under the business-cycle model, history saved to CSV
    $ lifesim run -p profile.json --model cycle --years 10 -o history.csv

    # Tax breakdown
    $ lifesim taxes 100000 --state California --trad 6000

    # Starter profile
    $ lifesim config create profile.json

    # Show version
    $ lifesim --version
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import AppSettings, EngineConfig
from .exceptions import ConfigurationError
from .utils import configure_logging, format_currency, format_percent

# Version
__version__ = "0.1.0"


@click.group()
@click.version_option(version=__version__, prog_name="lifesim")
@click.option("--quiet", "-q", is_flag=True, help="Plain output without tables")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, quiet: bool, verbose: bool) -> None:
    """
    LifeSim - Yearly personal-finance simulation.

    Advances a financial profile one simulated year at a time through a
    career and retirement timeline: taxes, inflation, investment growth,
    cash flow, debt and net worth.

    Use 'lifesim COMMAND --help' for command-specific help.
    """
    settings = AppSettings()
    level = "DEBUG" if verbose else settings.effective_log_level
    configure_logging(level)

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["settings"] = settings
    ctx.obj["console"] = Console()


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--profile", "-p",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to profile file (JSON)"
)
@click.option(
    "--seed", "-s",
    type=int,
    default=None,
    help="Random seed for reproducibility"
)
@click.option(
    "--model", "-m",
    type=click.Choice(["simple", "cycle"]),
    default="simple",
    help="Economic model (default: simple)"
)
@click.option(
    "--years", "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many simulated years"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the yearly history to this CSV file"
)
@click.pass_context
def run(
    ctx: click.Context,
    profile: Path,
    seed: Optional[int],
    model: str,
    years: Optional[int],
    output: Optional[Path],
) -> None:
    """
    Simulate a profile year by year.

    Runs until the retirement age is reached, or for --years simulated
    years, then prints the yearly history and the last year's summary.

    Example:
        lifesim run -p profile.json --seed 42 --years 5
    """
    console: Console = ctx.obj["console"]
    quiet = ctx.obj["quiet"]
    settings: AppSettings = ctx.obj["settings"]

    from .engine import SimulationStepper, SimulationState
    from .host import InMemoryHost
    from .scheduler import ManualScheduler
    from .serialization import history_to_frame, load_profile

    try:
        person = load_profile(profile)
    except ConfigurationError as e:
        click.echo(f"Error loading profile: {e}", err=True)
        sys.exit(1)

    config = EngineConfig(
        tick_interval=settings.tick_interval,
        economic_model=model,
        seed=seed if seed is not None else settings.seed,
    )
    host = InMemoryHost(person)
    scheduler = ManualScheduler()
    stepper = SimulationStepper(host, config, scheduler=scheduler)

    stepper.start()
    scheduler.run_until_idle(max_ticks=years)
    if stepper.state is SimulationState.RUNNING:
        stepper.pause()

    history = stepper.history
    summary = stepper.yearly_summaries[-1] if stepper.yearly_summaries else None

    if quiet:
        for point in history:
            click.echo(
                f"age={point.age} salary={point.salary:.2f} cash={point.cash:.2f} "
                f"investments={point.investments:.2f} debt={point.debt:.2f} "
                f"net_worth={point.net_worth:.2f}"
            )
        click.echo(f"state={stepper.state.value}")
    else:
        table = Table(title="Simulation History", show_header=True)
        table.add_column("Age", justify="right", style="cyan")
        table.add_column("Salary", justify="right")
        table.add_column("Cash", justify="right")
        table.add_column("Investments", justify="right")
        table.add_column("Debt", justify="right")
        table.add_column("Net Worth", justify="right", style="green")
        table.add_column("Inflation", justify="right")
        for point in history:
            table.add_row(
                str(point.age),
                format_currency(point.salary),
                format_currency(point.cash),
                format_currency(point.investments),
                format_currency(point.debt),
                format_currency(point.net_worth),
                format_percent(point.inflation),
            )
        console.print(table)
        console.print(f"[bold]State:[/bold] {stepper.state.value}")

        if summary is not None:
            lines = [
                f"[bold]Year {summary.year} (age {summary.age})[/bold]",
                f"Net worth change: {format_currency(summary.net_worth_change)} "
                f"({summary.net_worth_change_percentage:.1f}%)",
                f"Take-home pay: {format_currency(summary.take_home_pay)}",
                f"Cash flow to savings: {format_currency(summary.cash_flow_to_savings)}",
                "",
                "[cyan]Achievements:[/cyan]",
            ]
            lines += [f"  - {a.title}: {a.description}" for a in summary.achievements] or ["  (none)"]
            lines.append("[cyan]Recommendations:[/cyan]")
            lines += [
                f"  - ({r.priority}) {r.title}: {r.description}"
                for r in summary.recommendations
            ] or ["  (none)"]
            console.print(Panel("\n".join(lines), title="Year-End Summary", border_style="green"))

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        history_to_frame(history).to_csv(output)
        if not quiet:
            console.print(f"History saved to {output}")


# ---------------------------------------------------------------------------
# taxes
# ---------------------------------------------------------------------------

@main.command()
@click.argument("salary", type=float)
@click.option("--state", default="", help="Full state name (e.g. 'California')")
@click.option("--trad", type=float, default=0.0, help="Traditional 401k contribution ($)")
@click.option("--roth", type=float, default=0.0, help="Roth 401k contribution ($)")
@click.option("--ira-trad", type=float, default=0.0, help="Traditional IRA contribution ($)")
@click.option("--ira-roth", type=float, default=0.0, help="Roth IRA contribution ($)")
@click.option("--year", type=int, default=None, help="Tax year for the 401k limit")
@click.pass_context
def taxes(
    ctx: click.Context,
    salary: float,
    state: str,
    trad: float,
    roth: float,
    ira_trad: float,
    ira_roth: float,
    year: Optional[int],
) -> None:
    """
    Print the tax breakdown for SALARY.

    Example:
        lifesim taxes 100000 --state Texas --trad 5000
    """
    from .tax import calculate_taxes

    result = calculate_taxes(salary, state, trad, roth, ira_trad, ira_roth, year=year)
    rows = [
        ("Taxable income", format_currency(result.taxable_income)),
        ("Federal tax", format_currency(result.federal_tax)),
        ("State tax", format_currency(result.state_tax)),
        ("Social Security", format_currency(result.social_security)),
        ("Medicare", format_currency(result.medicare)),
        ("Misc deductions", format_currency(result.misc_deductions)),
        ("Total tax", format_currency(result.total_tax)),
        ("401k contributions", format_currency(result.total_contribution_401k)),
        ("After-tax income", format_currency(result.after_tax_income)),
        ("Effective rate", f"{result.effective_rate:.2f}%"),
    ]

    if ctx.obj["quiet"]:
        for label, value in rows:
            click.echo(f"{label}: {value}")
        return

    table = Table(title=f"Taxes on {format_currency(salary)}", show_header=True)
    table.add_column("Item", style="cyan")
    table.add_column("Amount", style="green", justify="right")
    for label, value in rows:
        table.add_row(label, value)
    ctx.obj["console"].print(table)


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

@main.group()
def config() -> None:
    """
    Profile file commands.

    Validate and create profile files.
    """
    pass


@config.command("validate")
@click.argument("profile_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def config_validate(ctx: click.Context, profile_file: Path) -> None:
    """
    Validate a profile file.

    Example:
        lifesim config validate profile.json
    """
    from .serialization import load_profile

    try:
        person = load_profile(profile_file)
    except ConfigurationError as e:
        click.echo(f"Profile validation failed: {e}", err=True)
        sys.exit(1)

    if ctx.obj["quiet"]:
        click.echo("Profile is valid")
        return

    info = (
        "[bold]Profile Valid[/bold]\n\n"
        f"Age: {person.age} (retires at {person.retirement_age})\n"
        f"Salary: {format_currency(person.current_salary)}\n"
        f"State: {person.state or '-'}\n"
        f"Cash: {format_currency(person.total_cash)}\n"
        f"Investments: {format_currency(person.total_investment_holdings)}\n"
        f"Debt: {format_currency(person.debt_amount)}"
    )
    ctx.obj["console"].print(Panel(info, title="Profile Summary", border_style="green"))


@config.command("create")
@click.argument("output_file", type=click.Path(path_type=Path))
@click.pass_context
def config_create(ctx: click.Context, output_file: Path) -> None:
    """
    Create a starter profile file.

    Example:
        lifesim config create profile.json
    """
    from .profile import PersonalFinancialData
    from .serialization import save_profile

    person = PersonalFinancialData(
        age=30,
        current_salary=85_000.0,
        state="Texas",
        match_401k=4.0,
        contributions_401k_traditional=6.0,
        ira_roth_contribution=3_000.0,
        monthly_investment=250.0,
        savings=5_000.0,
        checking_account=2_000.0,
        hysa_account=10_000.0,
        investments=15_000.0,
        retirement_age=65,
    )
    save_profile(person, output_file)

    if not ctx.obj["quiet"]:
        ctx.obj["console"].print(f"[green]Created profile file: {output_file}[/green]")


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------

@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display version and dependency information.
    """
    import importlib.metadata

    info_lines = [
        f"LifeSim Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
    ]
    for name in ("numpy", "pandas", "pydantic", "pydantic-settings", "click", "rich"):
        try:
            version = importlib.metadata.version(name)
        except importlib.metadata.PackageNotFoundError:
            version = "not installed"
        info_lines.append(f"{name}: {version}")

    if ctx.obj["quiet"]:
        for line in info_lines:
            click.echo(line)
    else:
        ctx.obj["console"].print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
