"""Index lookup and refresh CLI commands."""

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from whenever import Instant, TimeDelta

from price_escalation.clients import McpIndexClient
from price_escalation.formulas.periods import trailing_periods
from price_escalation.metrics import metrics
from price_escalation.models import EscalationConfig, MonthIndices, RefreshSummary
from price_escalation.refresh import refresh_window
from price_escalation.resolver import IndexResolver
from price_escalation.store import open_store

app = typer.Typer(no_args_is_help=True)
console = Console()


async def _resolve(config: EscalationConfig, year: int, month: int) -> MonthIndices:
    async with (
        McpIndexClient(config.mcp_url, timeout=config.http_timeout_sec) as mcp,
        open_store(config) as store,
    ):
        resolver = IndexResolver(store, mcp, remote_timeout=config.remote_timeout_sec)
        return await resolver.resolve_month(year, month)


@app.command()
def resolve(
    year: Annotated[int, typer.Option("--year", "-y", help="Year, e.g. 2024")],
    month: Annotated[int, typer.Option("--month", "-m", min=1, max=12, help="Month 1-12")],
    show_metrics: Annotated[
        bool, typer.Option("--metrics", help="Print cache / MCP counters afterwards")
    ] = False,
) -> None:
    """Resolve WPI and CPI-IW for a month through store, MCP and estimate tiers."""
    console.print(Panel.fit(f"Indices for {year}-{month:02d}", style="bold blue"))

    config = EscalationConfig()
    with console.status("[bold green]Resolving..."):
        indices = asyncio.run(_resolve(config, year, month))

    table = Table()
    table.add_column("Index", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Origin")
    table.add_column("Estimate from")
    for name, resolved in (("WPI", indices.wpi), ("CPI-IW", indices.cpi)):
        if resolved is None:
            table.add_row(name, "[red]unavailable[/red]", "-", "-")
        else:
            table.add_row(
                name,
                f"{resolved.value}",
                resolved.origin.value,
                resolved.estimate_label or "-",
            )
    console.print(table)

    if show_metrics:
        snapshot = metrics.snapshot()
        console.print(
            f"  Cache: {snapshot.cache_hits} hits / {snapshot.cache_misses} misses"
            f" ({snapshot.cache_hit_rate}%)"
        )
        console.print(
            f"  MCP:   {snapshot.remote_calls} calls, {snapshot.remote_success_rate}% success,"
            f" avg {snapshot.avg_remote_latency_ms}ms"
        )
        console.print(
            f"  Fallbacks: {snapshot.stale_serves} stale, {snapshot.estimate_serves} estimates"
        )


async def _refresh(config: EscalationConfig, years_back: int) -> RefreshSummary:
    today = Instant.now().to_stdlib().date()
    periods = trailing_periods(today, years_back)
    async with (
        McpIndexClient(config.mcp_url, timeout=config.http_timeout_sec) as mcp,
        open_store(config) as store,
    ):
        return await refresh_window(
            store,
            mcp,
            periods,
            freshness=TimeDelta(hours=config.refresh_freshness_hours),
            delay_sec=config.refresh_delay_sec,
            remote_timeout=config.remote_timeout_sec,
        )


@app.command()
def refresh(
    years_back: Annotated[
        int, typer.Option("--years-back", help="Whole years before the current one")
    ] = 1,
) -> None:
    """Refresh WPI over the trailing window once (manual trigger)."""
    console.print(Panel.fit("Refreshing WPI Cache", style="bold blue"))

    config = EscalationConfig()
    if not config.database_url:
        console.print(
            "[yellow]Warning:[/yellow] ESCALATION_DATABASE_URL not set,"
            " refreshed values will not be kept"
        )

    with console.status("[bold green]Fetching from MCP..."):
        summary = asyncio.run(_refresh(config, years_back))

    for detail in summary.details:
        if detail.status == "error":
            console.print(f"  [red]✗[/red] {detail.month}: {detail.error}")
        elif detail.status == "updated":
            console.print(f"  [green]✓[/green] {detail.month}")
        else:
            console.print(f"  [dim]-[/dim] {detail.month}: {detail.status}")

    console.print()
    console.print(
        f"  Total: {summary.total}  Updated: [green]{summary.updated}[/green]"
        f"  Skipped: {summary.skipped}  Errors: [red]{summary.errors}[/red]"
        f"  ({summary.duration_ms}ms)"
    )
