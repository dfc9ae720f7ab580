import click

from rentals.infrastructure.cli.availability_commands import (
    availability_calendar,
    availability_check,
)
from rentals.infrastructure.cli.inventory_commands import (
    inventory_refresh,
    inventory_set,
    inventory_show,
)
from rentals.infrastructure.cli.order_commands import order_cancel, order_complete
from rentals.infrastructure.cli.product_commands import product_add, product_list
from rentals.infrastructure.cli.reservation_commands import (
    reservation_complete,
    reservation_list,
    reservation_release,
    reservation_reserve,
    reservation_show,
)
from rentals.infrastructure.config import get_settings
from rentals.infrastructure.logging import setup_logging


@click.group()
def cli() -> None:
    """Rental availability and reservation ledger."""
    setup_logging()


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def availability() -> None:
    """Query availability."""


@cli.group()
def reservation() -> None:
    """Manage reservations."""


@cli.group()
def order() -> None:
    """Order-level reservation transitions."""


@cli.command("init-db")
def init_db() -> None:
    """Create the database schema."""
    from rentals.infrastructure.bootstrap import unit_of_work_factory

    unit_of_work_factory()
    click.echo(f"Database ready at {get_settings().database_url}")


@cli.command("serve")
@click.option("--host", default=None, help="Bind address (default from settings).")
@click.option("--port", default=None, type=int, help="Port (default from settings).")
@click.option(
    "--refresh-interval",
    default=None,
    type=float,
    help="Seconds between cached-availability refreshes (0 disables; default from settings).",
)
def serve(host: str | None, port: int | None, refresh_interval: float | None) -> None:
    """Run the HTTP API."""
    import uvicorn

    from rentals.infrastructure.api.app import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(
            refresh_interval=(
                settings.inventory_refresh_interval
                if refresh_interval is None
                else refresh_interval
            ),
        ),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_config=None,
    )


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
inventory.add_command(inventory_refresh)
availability.add_command(availability_check)
availability.add_command(availability_calendar)
reservation.add_command(reservation_reserve)
reservation.add_command(reservation_release)
reservation.add_command(reservation_complete)
reservation.add_command(reservation_show)
reservation.add_command(reservation_list)
order.add_command(order_cancel)
order.add_command(order_complete)
