"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from rentals.application.add_product import AddProductHandler
from rentals.application.list_products import ListProductsHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import unit_of_work_factory


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--daily-rate", required=True, help="Daily rate (e.g. 45.00).")
@click.option("--quantity", required=True, type=int, help="Units owned.")
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--id", "product_id", default=None, help="Explicit product ID.")
def product_add(
    name: str,
    daily_rate: str,
    quantity: int,
    category_id: str | None,
    product_id: str | None,
) -> None:
    """Add a new rentable product to the catalog."""
    handler = AddProductHandler(unit_of_work_factory())

    try:
        dto = handler.handle(
            name=name,
            daily_rate=daily_rate,
            total_quantity=quantity,
            category_id=category_id,
            product_id=product_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{dto.id} '{dto.name}' added at {dto.daily_rate}/day "
        f"({dto.total_quantity} units)"
    )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    products = ListProductsHandler(unit_of_work_factory()).handle()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Daily':>10} {'Total':>7} {'Free now':>9}")
    click.echo("-" * 60)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.name:<24} {p.daily_rate:>10} "
            f"{p.total_quantity:>7} {p.available_quantity:>9}"
        )
