"""Command-line interface for the fund rebalancer."""

from __future__ import annotations

import json
from decimal import Decimal, localcontext
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from rebalancer.config.fund_file import (
    FundFileError,
    create_sample_fund,
    load_fund,
    save_fund,
)
from rebalancer.config.settings import get_settings, setup_logging
from rebalancer.core.exceptions import RebalanceError
from rebalancer.core.models import Fund, OrderAction
from rebalancer.portfolio.constraints import CashShortfallPolicy, ConstraintSummary
from rebalancer.portfolio.rebalance import RebalanceEngine, RebalanceResult

app = typer.Typer(
    name="rebalancer",
    help="Order-independent fund rebalancing",
    add_completion=False,
)
console = Console()

ACTION_STYLES = {
    OrderAction.SELL: "red",
    OrderAction.BUY: "green",
    OrderAction.BUY_SCALED: "yellow",
    OrderAction.SKIP: "dim",
}


@app.callback()
def main_callback() -> None:
    """Initialize logging on startup."""
    settings = get_settings()
    setup_logging(settings)


def _resolve_policy(policy: str | None) -> CashShortfallPolicy:
    value = policy or get_settings().cash_shortfall_policy
    try:
        return CashShortfallPolicy(value.lower())
    except ValueError:
        console.print(f"[red]Error: unknown cash policy '{value}' (clamp, raise)[/red]")
        raise typer.Exit(1) from None


def _load(path: Path) -> Fund:
    try:
        return load_fund(path)
    except FundFileError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


@app.command("run")
def run_rebalance(
    fund_file: Path = typer.Argument(..., help="Path to a fund YAML file"),
    policy: str | None = typer.Option(
        None, "--policy", "-p", help="Negative cash handling: clamp or raise"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print result as JSON"),
) -> None:
    """Rebalance a fund and show the constrained orders."""
    fund = _load(fund_file)
    engine = RebalanceEngine(policy=_resolve_policy(policy))

    with localcontext() as ctx:
        ctx.prec = get_settings().decimal_precision
        result = engine.rebalance(fund)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)

    if not result.succeeded:
        raise typer.Exit(1)


def _print_result(result: RebalanceResult) -> None:
    console.print(f"\n[bold blue]Rebalance: {result.fund_id}[/bold blue]\n")

    if not result.succeeded:
        for error in result.errors:
            console.print(f"[red]Error: {error}[/red]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Security")
    table.add_column("Current", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Drift", justify="right")
    table.add_column("Required", justify="right")
    table.add_column("Adjusted", justify="right")
    table.add_column("Action")

    for order in result.orders:
        drift = order.sized_trade.drift_result
        style = ACTION_STYLES[order.action]
        table.add_row(
            order.security_id,
            f"{drift.current_weight:.2%}",
            f"{drift.holding.target_weight:.2%}",
            f"{drift.drift:+.2%}",
            _money(order.required_trade_value),
            _money(order.adjusted_trade_value),
            f"[{style}]{order.action.value.upper()}[/{style}]",
        )

    console.print(table)

    if result.summary is not None:
        _print_summary(result.summary)

    console.print(f"\n  Total sells: {_money(result.total_sells)}")
    console.print(f"  Total buys: {_money(result.total_buys)}")
    console.print(f"  Net cash change: {_money(result.net_cash_change)}")

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    if not result.needs_rebalance:
        console.print("\n[green]No rebalancing needed[/green]")

    console.print()


def _print_summary(summary: ConstraintSummary) -> None:
    console.print("\n[bold]Cash:[/bold]")
    console.print(f"  Available after reserve: {_money(summary.available_cash)}")
    console.print(f"  Sell proceeds: {_money(summary.total_sell_proceeds)}")
    console.print(f"  Cash for buys: {_money(summary.total_available_cash)}")
    console.print(f"  Buy demand: {_money(summary.total_buy_demand)}")
    if summary.is_scaled:
        console.print(f"  Scale factor: {summary.scale_factor:.4f}")


@app.command("explain")
def explain_holding(
    fund_file: Path = typer.Argument(..., help="Path to a fund YAML file"),
    security_id: str = typer.Argument(..., help="Security to trace"),
    policy: str | None = typer.Option(
        None, "--policy", "-p", help="Negative cash handling: clamp or raise"
    ),
) -> None:
    """Show every pipeline stage for one holding."""
    fund = _load(fund_file)
    engine = RebalanceEngine(policy=_resolve_policy(policy))

    try:
        with localcontext() as ctx:
            ctx.prec = get_settings().decimal_precision
            trace = engine.explain(fund, security_id)
    except KeyError:
        console.print(f"[red]Error: {security_id} is not held by {fund.fund_id}[/red]")
        raise typer.Exit(1) from None
    except RebalanceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    holding = trace.drift.holding
    console.print(f"\n[bold blue]{holding.security_id} in {fund.fund_id}[/bold blue]\n")

    console.print("[bold]Drift:[/bold]")
    console.print(f"  Market value: {_money(holding.market_value)}")
    console.print(f"  Current weight: {trace.drift.current_weight:.4%}")
    console.print(f"  Target weight: {holding.target_weight:.4%}")
    console.print(f"  Drift: {trace.drift.drift:+.4%}")

    console.print("\n[bold]Sizing:[/bold]")
    console.print(f"  Required trade: {_money(trace.sized_trade.required_trade_value)}")

    console.print("\n[bold]Constraints:[/bold]")
    console.print(f"  Action: {trace.order.action.value.upper()}")
    console.print(f"  Adjusted trade: {_money(trace.order.adjusted_trade_value)}")
    if trace.order.note:
        console.print(f"  Note: {trace.order.note}")

    _print_summary(trace.summary)
    console.print()


@app.command("sample")
def write_sample(
    output: Path = typer.Argument(Path("fund.yaml"), help="Output file path"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing file"),
) -> None:
    """Write a sample fund file."""
    if output.exists() and not force:
        console.print(f"[yellow]{output} already exists[/yellow]")
        console.print("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(1)

    save_fund(create_sample_fund(), output)
    console.print(f"[green]Wrote sample fund to {output}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from rebalancer import __version__

    console.print(f"Rebalancer version {__version__}")


if __name__ == "__main__":
    app()
