"""HTTP routes exposing the reservation ledger.

Handlers are plain ``def`` endpoints: FastAPI runs them on its worker
thread pool, which is where the per-product locks are taken.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from rentals.application.add_product import AddProductHandler
from rentals.application.availability_calendar import AvailabilityCalendarHandler
from rentals.application.cancel_order import CancelOrderHandler
from rentals.application.check_availability import CheckAvailabilityHandler
from rentals.application.complete_order import CompleteOrderHandler
from rentals.application.complete_reservation import CompleteReservationHandler
from rentals.application.list_products import ListProductsHandler
from rentals.application.list_reservations import ListReservationsHandler
from rentals.application.release_reservation import ReleaseReservationHandler
from rentals.application.reserve import ReserveHandler
from rentals.application.set_inventory import SetInventoryHandler
from rentals.application.show_inventory import ShowInventoryHandler
from rentals.application.show_reservation import ShowReservationHandler
from rentals.domain.service.availability_calculator import AvailabilityQuery
from rentals.infrastructure.api.schemas import (
    AvailabilityResponse,
    BulkAvailabilityEntry,
    BulkAvailabilityRequest,
    CalendarDayResponse,
    CreateProductRequest,
    InventoryLineResponse,
    ProductResponse,
    ReservationResponse,
    ReserveRequest,
    SetInventoryRequest,
)

router = APIRouter(prefix="/api")


def get_uow_factory(request: Request):
    return request.app.state.uow_factory


def get_clock(request: Request):
    return request.app.state.clock


@router.get("/health")
def health():
    return {"status": "ok"}


# --- Catalogue & inventory ----------------------------------------------------


@router.get("/products", response_model=list[ProductResponse])
def list_products(uow_factory=Depends(get_uow_factory)):
    return [ProductResponse.of(dto) for dto in ListProductsHandler(uow_factory).handle()]


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(payload: CreateProductRequest, uow_factory=Depends(get_uow_factory)):
    dto = AddProductHandler(uow_factory).handle(
        name=payload.name,
        daily_rate=payload.dailyRate,
        total_quantity=payload.totalQuantity,
        category_id=payload.categoryId,
        product_id=payload.productId,
    )
    return ProductResponse.of(dto)


@router.put("/products/{product_id}/inventory", response_model=ProductResponse)
def set_inventory(
    product_id: str,
    payload: SetInventoryRequest,
    uow_factory=Depends(get_uow_factory),
    clock=Depends(get_clock),
):
    dto = SetInventoryHandler(uow_factory, clock).handle(product_id, payload.totalQuantity)
    return ProductResponse.of(dto)


@router.get("/inventory", response_model=list[InventoryLineResponse])
def show_inventory(uow_factory=Depends(get_uow_factory), clock=Depends(get_clock)):
    lines = ShowInventoryHandler(uow_factory, clock).handle()
    return [InventoryLineResponse.of(line) for line in lines]


# --- Availability -------------------------------------------------------------


@router.get("/products/{product_id}/availability", response_model=AvailabilityResponse)
def check_availability(
    product_id: str,
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    quantity: int = Query(1, alias="quantity"),
    uow_factory=Depends(get_uow_factory),
):
    dto = CheckAvailabilityHandler(uow_factory).handle(product_id, start_date, end_date, quantity)
    return AvailabilityResponse.of(dto)


@router.post("/availability/bulk", response_model=list[BulkAvailabilityEntry])
def check_bulk_availability(
    payload: BulkAvailabilityRequest, uow_factory=Depends(get_uow_factory)
):
    queries = [
        AvailabilityQuery(
            product_id=item.productId,
            start=item.startDate,
            end=item.endDate,
            quantity=item.quantity,
        )
        for item in payload.items
    ]
    results = CheckAvailabilityHandler(uow_factory).handle_bulk(queries)
    return [BulkAvailabilityEntry.of(item) for item in results]


@router.get("/products/{product_id}/calendar", response_model=list[CalendarDayResponse])
def availability_calendar(
    product_id: str,
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    uow_factory=Depends(get_uow_factory),
):
    days = AvailabilityCalendarHandler(uow_factory).handle(product_id, start_date, end_date)
    return [CalendarDayResponse.of(day) for day in days]


# --- Reservations -------------------------------------------------------------


@router.get("/products/{product_id}/reservations", response_model=list[ReservationResponse])
def list_reservations(
    product_id: str,
    reservation_status: Optional[str] = Query(None, alias="status"),
    uow_factory=Depends(get_uow_factory),
):
    dtos = ListReservationsHandler(uow_factory).handle(product_id, reservation_status)
    return [ReservationResponse.of(dto) for dto in dtos]


@router.post("/reservations", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def reserve(
    payload: ReserveRequest,
    uow_factory=Depends(get_uow_factory),
    clock=Depends(get_clock),
):
    dto = ReserveHandler(uow_factory, clock).handle(
        product_id=payload.productId,
        order_id=payload.orderId,
        start=payload.startDate,
        end=payload.endDate,
        quantity=payload.quantity,
    )
    return ReservationResponse.of(dto)


@router.get("/reservations/{reservation_id}", response_model=ReservationResponse)
def show_reservation(reservation_id: str, uow_factory=Depends(get_uow_factory)):
    return ReservationResponse.of(ShowReservationHandler(uow_factory).handle(reservation_id))


@router.post("/reservations/{reservation_id}/release", response_model=ReservationResponse)
def release_reservation(
    reservation_id: str,
    uow_factory=Depends(get_uow_factory),
    clock=Depends(get_clock),
):
    dto = ReleaseReservationHandler(uow_factory, clock).handle(reservation_id)
    return ReservationResponse.of(dto)


@router.post("/reservations/{reservation_id}/complete", response_model=ReservationResponse)
def complete_reservation(
    reservation_id: str,
    uow_factory=Depends(get_uow_factory),
    clock=Depends(get_clock),
):
    dto = CompleteReservationHandler(uow_factory, clock).handle(reservation_id)
    return ReservationResponse.of(dto)


# --- Order workflow -------------------------------------------------------------


@router.post("/orders/{order_id}/cancel", response_model=list[ReservationResponse])
def cancel_order(
    order_id: str,
    uow_factory=Depends(get_uow_factory),
    clock=Depends(get_clock),
):
    dtos = CancelOrderHandler(uow_factory, clock).handle(order_id)
    return [ReservationResponse.of(dto) for dto in dtos]


@router.post("/orders/{order_id}/complete", response_model=list[ReservationResponse])
def complete_order(
    order_id: str,
    uow_factory=Depends(get_uow_factory),
    clock=Depends(get_clock),
):
    dtos = CompleteOrderHandler(uow_factory, clock).handle(order_id)
    return [ReservationResponse.of(dto) for dto in dtos]
