"""Escalation calculation CLI commands."""

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from whenever import Date

from price_escalation.clients import McpIndexClient
from price_escalation.errors import InvalidInput
from price_escalation.formulas.escalation import escalate, format_pim
from price_escalation.formulas.periods import base_month, current_month, format_month_display
from price_escalation.models import EscalationConfig, EscalationResult, IndexPair, MonthIndices
from price_escalation.resolver import IndexResolver
from price_escalation.store import open_store

app = typer.Typer(no_args_is_help=True)
console = Console()


def _render_result(result: EscalationResult) -> None:
    table = Table(show_header=False, box=None)
    table.add_column(style="cyan")
    table.add_column(justify="right")

    b = result.breakdown
    table.add_row("0.70 x WPI base", f"{b.primary_base_weighted:,.2f}")
    table.add_row("0.30 x CPI-IW base", f"{b.secondary_base_weighted:,.2f}")
    table.add_row("0.70 x WPI current", f"{b.primary_current_weighted:,.2f}")
    table.add_row("0.30 x CPI-IW current", f"{b.secondary_current_weighted:,.2f}")
    table.add_row("P0", f"{result.p0:,.2f}")
    table.add_row("Pc", f"{result.pc:,.2f}")
    table.add_row("PIM", f"{result.pim:.4f} ({format_pim(result.pim)})")
    table.add_row("Work done", f"₹{result.work_done:,.2f}")
    label = "De-escalation" if result.is_de_escalation else "Escalation"
    style = "red" if result.is_de_escalation else "green"
    table.add_row(label, f"[{style}]₹{result.escalation_amount:,.2f}[/{style}]")
    table.add_row("Total", f"[bold]₹{result.total_amount:,.2f}[/bold]")
    console.print(table)


@app.command()
def values(
    work_value: Annotated[float, typer.Option("--work-value", "-w", help="Work done (₹)")],
    wpi_base: Annotated[float, typer.Option("--wpi-base", help="WPI, base month")],
    cpi_base: Annotated[float, typer.Option("--cpi-base", help="CPI-IW, base month")],
    wpi_current: Annotated[float, typer.Option("--wpi-current", help="WPI, current month")],
    cpi_current: Annotated[float, typer.Option("--cpi-current", help="CPI-IW, current month")],
) -> None:
    """Calculate escalation from explicit index values."""
    console.print(Panel.fit("HAM Price Escalation", style="bold blue"))
    try:
        result = escalate(
            work_value,
            IndexPair(wpi_base, cpi_base),
            IndexPair(wpi_current, cpi_current),
        )
    except InvalidInput as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    _render_result(result)


async def _resolve_periods(
    config: EscalationConfig, base: tuple[int, int], current: tuple[int, int]
) -> tuple[MonthIndices, MonthIndices]:
    async with (
        McpIndexClient(config.mcp_url, timeout=config.http_timeout_sec) as mcp,
        open_store(config) as store,
    ):
        resolver = IndexResolver(store, mcp, remote_timeout=config.remote_timeout_sec)
        return await asyncio.gather(resolver.resolve_month(*base), resolver.resolve_month(*current))


def _describe(label: str, indices: MonthIndices) -> None:
    for name, resolved in (("WPI", indices.wpi), ("CPI-IW", indices.cpi)):
        if resolved is None:
            console.print(f"  {label} {name}: [red]data unavailable[/red]")
        elif resolved.is_estimate:
            console.print(
                f"  {label} {name}: [yellow]{resolved.value}[/yellow]"
                f" (estimate from {resolved.estimate_label})"
            )
        else:
            console.print(f"  {label} {name}: [cyan]{resolved.value}[/cyan] ({resolved.origin})")


@app.command()
def contract(
    work_value: Annotated[float, typer.Option("--work-value", "-w", help="Work done (₹)")],
    bid_due_date: Annotated[
        str, typer.Option("--bid-due-date", help="Bid due date, YYYY-MM-DD")
    ],
    report_date: Annotated[
        str, typer.Option("--report-date", help="IE report / invoice date, YYYY-MM-DD")
    ],
) -> None:
    """Resolve base and current month indices from contract dates, then calculate.

    Base month is the month before the bid due date; current month is the
    month before the IE report date.
    """
    console.print(Panel.fit("HAM Price Escalation", style="bold blue"))

    try:
        base = base_month(Date.parse_iso(bid_due_date))
        current = current_month(Date.parse_iso(report_date))
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    console.print(f"  Base month:    [cyan]{format_month_display(*base)}[/cyan]")
    console.print(f"  Current month: [cyan]{format_month_display(*current)}[/cyan]")
    console.print()

    config = EscalationConfig()
    with console.status("[bold green]Resolving indices..."):
        base_indices, current_indices = asyncio.run(_resolve_periods(config, base, current))

    _describe("Base", base_indices)
    _describe("Current", current_indices)
    console.print()

    resolved = (base_indices.wpi, base_indices.cpi, current_indices.wpi, current_indices.cpi)
    if any(i is None for i in resolved):
        console.print("[red]Error:[/red] index data unavailable, cannot calculate")
        raise typer.Exit(1)

    try:
        result = escalate(
            work_value,
            IndexPair(base_indices.wpi.value, base_indices.cpi.value),
            IndexPair(current_indices.wpi.value, current_indices.cpi.value),
        )
    except InvalidInput as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    _render_result(result)
