"""FastAPI application factory."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rentals.application.refresh_inventory import RefreshInventoryHandler
from rentals.domain.exceptions import (
    ConcurrencyConflictError,
    DomainException,
    EntityNotFoundError,
    InvalidStateError,
    UnavailableError,
)
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.infrastructure import bootstrap
from rentals.infrastructure.api.routes import router
from rentals.infrastructure.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_ERROR: list[tuple[type[DomainException], int]] = [
    (EntityNotFoundError, 404),
    (UnavailableError, 409),
    (InvalidStateError, 409),
    (ConcurrencyConflictError, 409),
]


def status_for(exc: DomainException) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    # InvalidRange, InvalidQuantity and any other validation failure.
    return 400


def domain_error_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(
        "request_rejected",
        method=request.method,
        path=request.url.path,
        error=exc.kind,
        status=status_code,
    )
    body = {"error": exc.kind, "detail": str(exc)}
    if isinstance(exc, UnavailableError):
        body["availableQuantity"] = exc.available_quantity
    return JSONResponse(status_code=status_code, content=body)


async def _refresh_periodically(app: FastAPI, interval: float) -> None:
    handler = RefreshInventoryHandler(app.state.uow_factory, app.state.clock)
    while True:
        await asyncio.sleep(interval)
        try:
            refreshed = await asyncio.to_thread(handler.handle)
        except DomainException as exc:
            logger.warning("inventory_refresh_failed", error=exc.kind, detail=str(exc))
        else:
            logger.info("inventory_refreshed", products=len(refreshed))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Run the cached-availability refresh loop while the app is up."""
    interval = app.state.refresh_interval
    task = None
    if interval:
        task = asyncio.create_task(_refresh_periodically(app, interval))
        logger.info("inventory_refresh_scheduled", interval=interval)

    yield

    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


def create_app(
    uow_factory: Callable[[], UnitOfWork] | None = None,
    clock: Callable | None = None,
    refresh_interval: float | None = None,
) -> FastAPI:
    app = FastAPI(title="Rental Reservation Ledger", lifespan=lifespan)
    app.state.uow_factory = uow_factory or bootstrap.unit_of_work_factory()
    app.state.clock = clock or bootstrap.clock
    app.state.refresh_interval = refresh_interval
    app.add_exception_handler(DomainException, domain_error_handler)
    app.include_router(router)
    return app
