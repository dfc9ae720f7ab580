"""CLI commands for availability queries."""

from __future__ import annotations

import click

from rentals.application.availability_calendar import AvailabilityCalendarHandler
from rentals.application.check_availability import CheckAvailabilityHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import unit_of_work_factory


@click.command("check")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--start", required=True, help="Start (ISO-8601).")
@click.option("--end", required=True, help="End, exclusive (ISO-8601).")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units wanted.")
def availability_check(product_id: str, start: str, end: str, quantity: int) -> None:
    """Check whether units are free over a period."""
    handler = CheckAvailabilityHandler(unit_of_work_factory())

    try:
        dto = handler.handle(product_id, start, end, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    verdict = "AVAILABLE" if dto.available else "UNAVAILABLE"
    click.echo(f"{verdict}: {dto.available_quantity} of {dto.total_quantity} free")
    click.echo(f"  period:    [{dto.start_date}, {dto.end_date})")
    click.echo(f"  requested: {dto.requested_quantity}")
    click.echo(f"  reserved:  {dto.reserved_quantity}")


@click.command("calendar")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--start", required=True, help="First day (ISO-8601).")
@click.option("--end", required=True, help="End, exclusive (ISO-8601).")
def availability_calendar(product_id: str, start: str, end: str) -> None:
    """Show day-by-day availability for a product."""
    handler = AvailabilityCalendarHandler(unit_of_work_factory())

    try:
        days = handler.handle(product_id, start, end)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Date':<12} {'Total':>6} {'Reserved':>9} {'Free':>6}  Status")
    click.echo("-" * 50)
    for day in days:
        click.echo(
            f"{day.date:<12} {day.total_quantity:>6} {day.reserved_quantity:>9} "
            f"{day.available_quantity:>6}  {day.status}"
        )
