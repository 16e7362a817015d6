"""Typer CLI entry point for WhiteHatLink operators.

- whitehatlink serve
- whitehatlink import-inventory scraper/active-sites.json
- whitehatlink inventory --niche tech --min-dr 50
- whitehatlink csp --dev
- whitehatlink version
"""

import asyncio
import json
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file before anything else
load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel

from whitehatlink import __version__
from whitehatlink.api.csp import CSPConfig, build_csp, build_csp_report_only, build_directives, generate_nonce
from whitehatlink.cli.formatters import format_directives_table, format_inventory_table
from whitehatlink.inventory import InventoryItem, InventoryQuery, transform_records
from whitehatlink.monitoring import configure_logging

cli = typer.Typer(
    name="whitehatlink",
    help="""WhiteHatLink backend operations.

QUICK START:
  whitehatlink serve --reload
  whitehatlink import-inventory scraper/active-sites.json --dry-run
  whitehatlink inventory --niche tech --min-dr 50 --sort price
""",
    add_completion=False,
)

# Disable colors if NO_COLOR env var is set (standard convention)
console = Console(no_color=os.getenv("NO_COLOR") is not None)


@cli.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default: WHL_HOST or 127.0.0.1)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default: WHL_PORT or 8000)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API server with uvicorn."""
    from whitehatlink.api.server import main as run_server

    run_server(host=host, port=port, reload=reload or None)


def _load_records(path: Path) -> list:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return raw if isinstance(raw, list) else []


async def _import_items(items: list[InventoryItem]) -> int:
    from whitehatlink.db import InventoryRepository, get_session, init_database

    await init_database()
    async with get_session() as session:
        return await InventoryRepository(session).bulk_upsert(items)


@cli.command("import-inventory")
def import_inventory(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Scraper JSON export (array of records)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Transform and report without writing"),
):
    """Transform a scraper export and upsert it into the database."""
    try:
        records = _load_records(path)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] could not read {path}: {e}")
        raise typer.Exit(code=1)

    items = transform_records(records)
    skipped = len(records) - len(items)

    console.print(Panel.fit(
        f"[bold cyan]Records:[/bold cyan] {len(records)}\n"
        f"[bold cyan]Transformed:[/bold cyan] {len(items)}\n"
        f"[bold cyan]Skipped:[/bold cyan] {skipped}",
        title="Inventory Import",
        border_style="cyan",
    ))

    if dry_run:
        console.print(format_inventory_table(items[:10], total=len(items)))
        console.print("[yellow]Dry run: nothing written.[/yellow]")
        return

    written = asyncio.run(_import_items(items))
    console.print(f"[green]Imported {written} items.[/green]")


async def _fetch_inventory(query: InventoryQuery) -> tuple[list[InventoryItem], int]:
    from whitehatlink.db import InventoryRepository, get_session

    async with get_session() as session:
        repo = InventoryRepository(session)
        return await repo.list_items(query), await repo.count_items(query)


@cli.command()
def inventory(
    niche: str = typer.Option(None, "--niche", help="Niche (exact or substring, case-insensitive)"),
    min_dr: int = typer.Option(None, "--min-dr", help="Minimum domain rating"),
    max_price: int = typer.Option(None, "--max-price", help="Maximum price in USD"),
    region: str = typer.Option(None, "--region", help="Region, e.g. USA"),
    sort: str = typer.Option("dr", "--sort", "-s", help="dr, traffic, price or recent"),
    limit: int = typer.Option(20, "--limit", "-n", help="Rows to show"),
):
    """Show available inventory matching the filters."""
    try:
        query = InventoryQuery(
            niche=niche, min_dr=min_dr, max_price=max_price, region=region, sort=sort, limit=limit,
        )
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=2)

    items, total = asyncio.run(_fetch_inventory(query))
    console.print(format_inventory_table(items, total=total))


@cli.command()
def csp(
    dev: bool = typer.Option(False, "--dev", help="Development policy (eval, websockets, no upgrade)"),
    admin: bool = typer.Option(False, "--admin", help="Admin panel policy"),
    report_only: bool = typer.Option(False, "--report-only", help="Report-only variant with report-uri"),
    nonce: str = typer.Option(None, "--nonce", help="Nonce to embed (default: freshly generated)"),
    table: bool = typer.Option(False, "--table", help="Show directives as a table"),
):
    """Print the Content-Security-Policy for the given flags."""
    config = CSPConfig(nonce=nonce or generate_nonce(), is_development=dev, is_payload_admin=admin)
    if table:
        console.print(format_directives_table(build_directives(config)))
        return
    policy = build_csp_report_only(config) if report_only else build_csp(config)
    # Plain print so the policy can be piped
    typer.echo(policy)


@cli.command()
def version():
    """Show version and configuration info."""
    from whitehatlink.api.config import get_settings
    from whitehatlink.db import get_database_url

    settings = get_settings()
    console.print(f"[bold cyan]WhiteHatLink[/bold cyan] v{__version__}")
    console.print()
    console.print("[bold]Configuration:[/bold]")
    console.print(f"  Environment: {settings.environment}")
    console.print(f"  Site: {settings.site_url}")
    console.print(f"  Database: {get_database_url().split('://', 1)[0]}")
    console.print(f"  Email: {'✓ configured' if settings.resend_api_key else '✗ missing RESEND_API_KEY'}")
    console.print(f"  Revalidation: {'✓ configured' if settings.revalidate_secret else '✗ missing REVALIDATE_SECRET'}")


def main():
    """Entry point for CLI."""
    log_mode = os.getenv("ENVIRONMENT", "development")
    configure_logging(log_mode)

    cli()


if __name__ == "__main__":
    main()
