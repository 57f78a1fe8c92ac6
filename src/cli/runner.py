# src/cli/runner.py

"""Headless CLI commands: catalog listing and backend health check."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.filters.product_search import ProductSearch
from src.models.product import Product
from src.services.catalog import CatalogService
from src.storage.backend import BackendError, MarketplaceBackend
from src.ui.formatting import format_discount, format_price

logger = logging.getLogger("vendor_market.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [
        {
            "id": p.id,
            "name": p.name,
            "category": p.category,
            "mrp": p.mrp,
            "discount": p.discount,
            "manufactured_by": p.manufactured_by,
            "created_at": p.created_at,
            "photos": [photo.photo_url for photo in p.photos],
        }
        for p in products
    ]


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Catalog",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=50)
    table.add_column("Category", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Discount", justify="right")
    table.add_column("Photos", justify="right", style="dim")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.name[:50],
            p.category or "—",
            format_price(p.mrp),
            format_discount(p.discount) or "—",
            str(len(p.photos)),
        )

    Console().print(table)


async def cli_list(
    backend: MarketplaceBackend,
    output_format: str,
    search: str | None,
) -> int:
    """Print the public catalog and return an exit code (0=ok, 1=fail)."""
    catalog = CatalogService(backend)
    try:
        products = await catalog.fetch_catalog()
    except BackendError as exc:
        logger.error("Catalog listing failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    if search:
        products = ProductSearch.filter(products, search)
        _err.print(f"[dim]Search: {search}[/dim]")

    if not products:
        _err.print("[yellow]No products found.[/yellow]")
        return 0

    _err.print(f"[green]✓ {len(products)} products[/green]")

    if output_format == "table":
        _print_table(products)
    else:
        json.dump(
            _products_to_dicts(products),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


async def run_health_check() -> int:
    """Run a connectivity check against the backend services."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running backend health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Backend Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Service", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(
            r.service, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0
