"""Rich table formatters for inventory and CSP output."""

from rich.table import Table

from whitehatlink.inventory.models import InventoryItem


def format_traffic(traffic: int) -> str:
    """Compact traffic figure, e.g. 1.2M, 45K."""
    if traffic >= 1_000_000:
        return f"{traffic / 1_000_000:.1f}M"
    if traffic >= 1_000:
        return f"{traffic // 1_000}K"
    return str(traffic)


def format_inventory_table(items: list[InventoryItem], total: int | None = None) -> Table:
    """Format inventory items as a Rich table, in the order given.

    Args:
        items: Items to display
        total: Total matching items, shown in the caption when larger than the page
    """
    caption = None
    if total is not None and total > len(items):
        caption = f"Showing {len(items)} of {total}"

    table = Table(
        title="Inventory",
        caption=caption,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Domain", justify="left", style="white", no_wrap=True)
    table.add_column("Niche", justify="left", style="yellow")
    table.add_column("DR", justify="right", style="bold green")
    table.add_column("Traffic", justify="right", style="cyan")
    table.add_column("Price", justify="right", style="magenta")
    table.add_column("Region", justify="center")
    table.add_column("Link", justify="center", style="dim")

    if not items:
        table.add_row("[dim]No inventory found[/dim]", "", "", "", "", "", "")
        return table

    for item in items:
        table.add_row(
            item.domain,
            item.niche,
            str(item.dr),
            format_traffic(item.traffic),
            f"${item.price:,}",
            item.region or "-",
            item.link_type,
        )
    return table


def format_directives_table(directives: dict[str, list[str]]) -> Table:
    table = Table(title="Content-Security-Policy", show_header=True, header_style="bold cyan")
    table.add_column("Directive", style="bold", no_wrap=True)
    table.add_column("Sources")
    for name, sources in directives.items():
        table.add_row(name, " ".join(sources) or "[dim](flag)[/dim]")
    return table
