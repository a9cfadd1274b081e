"""Typer-based CLI for collection and lookups."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .models import ChainStatus, Snapshot
from .orchestrator import SnapshotPersistError
from .query import exchange_counts, find_token, list_tokens

if TYPE_CHECKING:
    from .di import AppContainer
    from .settings import Settings


# Import with local function to avoid circular imports
def _load_settings(config_path: Optional[Path] = None) -> "Settings":
    from .config import load_settings
    return load_settings(config_path)

def _build_container(settings: "Settings") -> "AppContainer":
    from .di import build_container
    return build_container(settings)

def _load_snapshot(config_path: Optional[Path] = None) -> Snapshot | None:
    from .store import JsonSnapshotStore
    settings = _load_settings(config_path)
    return JsonSnapshotStore(settings.snapshot_path).load()

app = typer.Typer(help="Deposit/withdraw status across exchanges")
console = Console()
logger = logging.getLogger(__name__)


def run_cli(argv: list[str] | None = None) -> None:
    """Run CLI with optional argv parameter."""
    app(argv)


def _status_cell(status: ChainStatus) -> str:
    if status == ChainStatus.OPEN:
        return "[green]open[/green]"
    return "[red]closed[/red]"


def _require_snapshot(config: Optional[Path]) -> Snapshot:
    snapshot = _load_snapshot(config)
    if snapshot is None:
        console.print("[yellow]No data collected yet. Run `chainstat collect` first.[/yellow]")
        raise typer.Exit(1)
    return snapshot


@app.command()
def collect(
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Run one collection cycle now and persist the result."""
    settings = _load_settings(config)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Collecting from exchanges...", total=None)
            snapshot = asyncio.run(_collect_async(settings))
    except SnapshotPersistError as e:
        logger.error("Manual refresh could not persist data: %s", e)
        _print_summary(e.snapshot)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _print_summary(snapshot)


async def _collect_async(settings: "Settings") -> Snapshot:
    container = _build_container(settings)
    try:
        return await container.orchestrator.run_cycle()
    finally:
        await container.aclose()


def _print_summary(snapshot: Snapshot) -> None:
    table = Table(title="Collection Summary")
    table.add_column("Exchange", style="cyan")
    table.add_column("Tokens", justify="right", style="magenta")

    for name, count in exchange_counts(snapshot).items():
        table.add_row(name, str(count))

    console.print(table)
    console.print(
        f"\n[bold]Tokens:[/bold] {len(snapshot.tokens)}  "
        f"[bold]Last update:[/bold] {snapshot.last_update.isoformat()}"
    )
    if snapshot.error:
        console.print(f"[yellow]⚠ Serving previous data:[/yellow] {snapshot.error}")


@app.command()
def status(
    symbol: str = typer.Argument(..., help="Token symbol, case-insensitive"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show deposit/withdraw status and contracts for one token."""
    snapshot = _require_snapshot(config)

    token = find_token(snapshot, symbol)
    if token is None:
        console.print(f"[red]Error:[/red] Token '{symbol}' not found")
        raise typer.Exit(1)

    if as_json:
        data = token.model_dump(mode="json")
        data["last_update"] = snapshot.last_update.isoformat()
        console.print_json(json.dumps(data))
        return

    table = Table(title=f"{token.symbol} ({token.name})")
    table.add_column("Exchange", style="cyan")
    table.add_column("Chain", style="blue")
    table.add_column("Deposit")
    table.add_column("Withdraw")
    table.add_column("Min Withdraw", style="magenta")
    table.add_column("Fee", style="yellow")
    table.add_column("Contract", style="dim")

    for entry in token.exchanges:
        for chain in entry.chains:
            table.add_row(
                entry.name,
                chain.chain,
                _status_cell(chain.deposit_status),
                _status_cell(chain.withdraw_status),
                chain.min_withdraw,
                chain.withdraw_fee,
                chain.contract_address,
            )

    console.print(table)
    console.print(f"\n[bold]Last update:[/bold] {snapshot.last_update.isoformat()}")


@app.command()
def tokens(
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """List every collected token."""
    snapshot = _require_snapshot(config)

    table = Table(title="Tokens")
    table.add_column("Symbol", style="green")
    table.add_column("Name")
    for symbol, name in list_tokens(snapshot):
        table.add_row(symbol, name)

    console.print(table)
    console.print(f"\n[bold]Total tokens:[/bold] {len(snapshot.tokens)}")


@app.command()
def last_update(
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Print when the persisted data was collected."""
    snapshot = _require_snapshot(config)
    console.print(snapshot.last_update.isoformat())


@app.command()
def config_show(
    config: Optional[Path] = typer.Option(None, help="Path to config file"),
) -> None:
    """Show effective configuration with secrets redacted."""
    try:
        settings = _load_settings(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(Panel.fit(json.dumps(settings.redacted(), indent=2), title="Configuration"))


def main():
    """CLI main entry point."""
    app()


if __name__ == "__main__":
    main()
