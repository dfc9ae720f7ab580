"""CLI commands for order-level reservation transitions."""

from __future__ import annotations

import click

from rentals.application.cancel_order import CancelOrderHandler
from rentals.application.complete_order import CompleteOrderHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import clock, unit_of_work_factory


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order reference.")
def order_cancel(order_id: str) -> None:
    """Cancel an order (releases its active reservations)."""
    handler = CancelOrderHandler(unit_of_work_factory(), clock)

    try:
        released = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} cancelled, {len(released)} reservation(s) released.")


@click.command("complete")
@click.option("--id", "order_id", required=True, help="Order reference.")
def order_complete(order_id: str) -> None:
    """Complete an order (equipment returned)."""
    handler = CompleteOrderHandler(unit_of_work_factory(), clock)

    try:
        completed = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} completed, {len(completed)} reservation(s) closed.")
