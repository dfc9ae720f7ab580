"""CLI commands for inventory management."""

from __future__ import annotations

import click

from rentals.application.refresh_inventory import RefreshInventoryHandler
from rentals.application.set_inventory import SetInventoryHandler
from rentals.application.show_inventory import ShowInventoryHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import clock, unit_of_work_factory


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Total units owned.")
def inventory_set(product_id: str, quantity: int) -> None:
    """Set the number of units owned for a product."""
    handler = SetInventoryHandler(unit_of_work_factory(), clock)

    try:
        dto = handler.handle(product_id=product_id, total_quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Inventory for '{dto.name}' set to {dto.total_quantity} "
        f"({dto.available_quantity} free now)"
    )


@click.command("show")
def inventory_show() -> None:
    """Show stock levels, cached and recomputed."""
    lines = ShowInventoryHandler(unit_of_work_factory(), clock).handle()

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'Product':<24} {'Total':>7} {'Cached':>8} {'Ledger':>8} {'Sync':>6}")
    click.echo("-" * 57)
    for line in lines:
        click.echo(
            f"{line.product_name:<24} {line.total:>7} {line.cached_available:>8} "
            f"{line.computed_available:>8} {'yes' if line.in_sync else 'NO':>6}"
        )


@click.command("refresh")
def inventory_refresh() -> None:
    """Recompute every product's cached free-unit count."""
    try:
        refreshed = RefreshInventoryHandler(unit_of_work_factory(), clock).handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Refreshed {len(refreshed)} product(s).")
