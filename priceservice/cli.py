"""Pricing service CLI.

Commands:
- init: Initialize database schema
- seed: Load the sample articles and prices
- serve: Run the HTTP API with uvicorn
- show: Print reconciled prices for a store/article from the database
- reconcile: Reconcile intervals read from a JSON file
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from priceservice.config import get_config
from priceservice.db.connection import close_db, get_engine, get_session, get_session_factory
from priceservice.db.models import Base
from priceservice.db.seed import seed_sample_data
from priceservice.models import PricedInterval
from priceservice.reconcile import reconcile
from priceservice.service import PriceNotFoundError, PriceService

app = typer.Typer(
    name="priceservice",
    help="Pricing service - reconciles overlapping price validity intervals",
    no_args_is_help=True,
)

console = Console()


def _interval_table(title: str, intervals: list[PricedInterval]) -> Table:
    table = Table(title=title)
    table.add_column("Type")
    table.add_column("Subtype")
    table.add_column("Currency")
    table.add_column("Amount", justify="right")
    table.add_column("Valid From")
    table.add_column("Valid To")
    table.add_column("Overlapped")

    for interval in intervals:
        table.add_row(
            interval.kind,
            interval.subkind,
            interval.currency,
            str(interval.amount),
            interval.valid_from.isoformat(),
            interval.valid_to.isoformat(),
            "[red]yes[/red]" if interval.conflicted else "no",
        )
    return table


@app.command()
def init(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables"),
):
    """Initialize database schema."""
    config = get_config()
    console.print(f"[bold]Initializing database:[/bold] {config.db.url}")

    async def _init():
        engine = get_engine()
        async with engine.begin() as conn:
            if drop:
                console.print("[yellow]Dropping existing tables...[/yellow]")
                await conn.run_sync(Base.metadata.drop_all)
            console.print("[green]Creating tables...[/green]")
            await conn.run_sync(Base.metadata.create_all)
        await close_db()

    asyncio.run(_init())
    console.print("[bold green]✓[/bold green] Database initialized")


@app.command()
def seed():
    """Load sample articles and prices (skipped when articles exist)."""

    async def _seed() -> int:
        engine = get_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with get_session() as session:
            inserted = await seed_sample_data(session)
        await close_db()
        return inserted

    inserted = asyncio.run(_seed())
    if inserted:
        console.print(f"[bold green]✓[/bold green] {inserted} sample articles loaded")
    else:
        console.print("[yellow]Articles already present, nothing loaded[/yellow]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "priceservice.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def show(
    store_id: str = typer.Argument(..., help="Store ID"),
    article_id: str = typer.Argument(..., help="Article ID"),
    page: int = typer.Option(1, "--page", min=1),
    page_size: int = typer.Option(10, "--page-size", min=1),
):
    """Print reconciled prices for a store/article."""
    config = get_config()

    async def _show():
        service = PriceService(get_session_factory(), strategy=config.reconcile.strategy)
        try:
            return await service.get_prices(store_id, article_id, page, page_size)
        finally:
            await close_db()

    try:
        response = asyncio.run(_show())
    except PriceNotFoundError as exc:
        console.print(f"[red]✗[/red] {exc.detail}")
        raise typer.Exit(code=1)

    props = response.properties
    console.print(
        f"[bold]{response.article}[/bold] @ store {response.store}: "
        f"{props.description or ''} ({props.brand or '-'} {props.model or '-'}, {props.uom or '-'})"
    )
    intervals = [
        PricedInterval(
            kind=price.type,
            subkind=price.subtype,
            currency=price.currency,
            amount=price.amount,
            valid_from=price.valid_from,
            valid_to=price.valid_to,
            conflicted=price.overlapped,
        )
        for price in response.prices
    ]
    console.print(_interval_table(f"Page {page} (size {page_size})", intervals))


@app.command(name="reconcile")
def reconcile_cmd(
    file: Path = typer.Argument(..., exists=True, help="JSON list of intervals"),
    strategy: str = typer.Option("pairwise", "--strategy", help="pairwise or sweep"),
):
    """Reconcile intervals from a JSON file.

    Each entry needs kind, subkind, currency, amount, valid_from and valid_to.
    """
    raw = json.loads(file.read_text())
    intervals = []
    for idx, entry in enumerate(raw):
        try:
            intervals.append(PricedInterval.model_validate(entry))
        except ValidationError as exc:
            for error in exc.errors():
                field = ".".join(str(part) for part in error["loc"])
                console.print(f"[red]✗[/red] entry {idx} {field}: {error['msg']}")
            raise typer.Exit(code=2)

    invalid = [idx for idx, iv in enumerate(intervals) if iv.valid_from >= iv.valid_to]
    if invalid:
        console.print(f"[red]✗[/red] valid_from must precede valid_to (entries {invalid})")
        raise typer.Exit(code=2)

    try:
        result = reconcile(intervals, strategy=strategy)
    except ValueError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(code=2)

    console.print(_interval_table(f"{len(intervals)} in, {len(result)} out", result))


if __name__ == "__main__":
    app()
