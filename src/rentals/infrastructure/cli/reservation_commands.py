"""CLI commands for the reservation ledger."""

from __future__ import annotations

import click

from rentals.application.complete_reservation import CompleteReservationHandler
from rentals.application.dto import ReservationDTO
from rentals.application.list_reservations import ListReservationsHandler
from rentals.application.release_reservation import ReleaseReservationHandler
from rentals.application.reserve import ReserveHandler
from rentals.application.show_reservation import ShowReservationHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import clock, unit_of_work_factory


def _display_reservation(dto: ReservationDTO) -> None:
    """Shared formatting for displaying a reservation."""
    click.echo(f"Reservation {dto.id}  (status={dto.status})")
    click.echo(f"Product:  {dto.product_id}")
    click.echo(f"Order:    {dto.order_id}")
    click.echo(f"Quantity: {dto.quantity}")
    click.echo(f"Period:   [{dto.start_date}, {dto.end_date})")


@click.command("reserve")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--order", "order_id", required=True, help="Order reference.")
@click.option("--start", required=True, help="Start (ISO-8601).")
@click.option("--end", required=True, help="End, exclusive (ISO-8601).")
@click.option("--quantity", required=True, type=int, help="Units to hold.")
def reservation_reserve(
    product_id: str, order_id: str, start: str, end: str, quantity: int
) -> None:
    """Hold units of a product for an order."""
    handler = ReserveHandler(unit_of_work_factory(), clock)

    try:
        dto = handler.handle(product_id, order_id, start, end, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation {dto.id} created.")
    _display_reservation(dto)


@click.command("release")
@click.option("--id", "reservation_id", required=True, help="Reservation ID.")
def reservation_release(reservation_id: str) -> None:
    """Cancel an active reservation."""
    handler = ReleaseReservationHandler(unit_of_work_factory(), clock)

    try:
        handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation {reservation_id} cancelled.")


@click.command("complete")
@click.option("--id", "reservation_id", required=True, help="Reservation ID.")
def reservation_complete(reservation_id: str) -> None:
    """Complete an active reservation (equipment returned)."""
    handler = CompleteReservationHandler(unit_of_work_factory(), clock)

    try:
        handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation {reservation_id} completed.")


@click.command("show")
@click.option("--id", "reservation_id", required=True, help="Reservation ID.")
def reservation_show(reservation_id: str) -> None:
    """Show details of a reservation."""
    handler = ShowReservationHandler(unit_of_work_factory())

    try:
        dto = handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_reservation(dto)


@click.command("list")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option(
    "--status",
    default=None,
    type=click.Choice(["active", "completed", "cancelled"]),
    help="Only show reservations in this status.",
)
def reservation_list(product_id: str, status: str | None) -> None:
    """List a product's reservations."""
    handler = ListReservationsHandler(unit_of_work_factory())

    try:
        dtos = handler.handle(product_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dtos:
        click.echo("No reservations found.")
        return

    click.echo(f"{'ID':<34} {'Order':<12} {'Qty':>4} {'Status':<10} Period")
    click.echo("-" * 100)
    for dto in dtos:
        click.echo(
            f"{dto.id:<34} {dto.order_id:<12} {dto.quantity:>4} {dto.status:<10} "
            f"[{dto.start_date}, {dto.end_date})"
        )
