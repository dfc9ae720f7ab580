"""Request/response bodies for the HTTP layer.

Identifiers are opaque strings; instants travel as ISO-8601 strings and
are parsed by the domain so malformed values surface as range errors.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from rentals.application.dto import (
    AvailabilityDTO,
    BulkAvailabilityDTO,
    CalendarDayDTO,
    InventoryLineDTO,
    ProductDTO,
    ReservationDTO,
)


class CreateProductRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    dailyRate: str
    totalQuantity: int
    categoryId: Optional[str] = None
    productId: Optional[str] = None


class SetInventoryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    totalQuantity: int


class ReserveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    productId: str
    orderId: str
    startDate: str
    endDate: str
    quantity: int


class AvailabilityItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    productId: str
    startDate: str
    endDate: str
    quantity: int = 1


class BulkAvailabilityRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    items: List[AvailabilityItem] = []


class ProductResponse(BaseModel):
    productId: str
    name: str
    categoryId: Optional[str]
    dailyRate: str
    totalQuantity: int
    availableQuantity: int

    @staticmethod
    def of(dto: ProductDTO) -> "ProductResponse":
        return ProductResponse(
            productId=dto.id,
            name=dto.name,
            categoryId=dto.category_id,
            dailyRate=dto.daily_rate,
            totalQuantity=dto.total_quantity,
            availableQuantity=dto.available_quantity,
        )


class ReservationResponse(BaseModel):
    reservationId: str
    productId: str
    orderId: str
    quantity: int
    startDate: str
    endDate: str
    status: str
    createdAt: str
    updatedAt: str

    @staticmethod
    def of(dto: ReservationDTO) -> "ReservationResponse":
        return ReservationResponse(
            reservationId=dto.id,
            productId=dto.product_id,
            orderId=dto.order_id,
            quantity=dto.quantity,
            startDate=dto.start_date,
            endDate=dto.end_date,
            status=dto.status,
            createdAt=dto.created_at,
            updatedAt=dto.updated_at,
        )


class AvailabilityResponse(BaseModel):
    productId: str
    startDate: str
    endDate: str
    requestedQuantity: int
    totalQuantity: int
    reservedQuantity: int
    available: bool
    availableQuantity: int

    @staticmethod
    def of(dto: AvailabilityDTO) -> "AvailabilityResponse":
        return AvailabilityResponse(
            productId=dto.product_id,
            startDate=dto.start_date,
            endDate=dto.end_date,
            requestedQuantity=dto.requested_quantity,
            totalQuantity=dto.total_quantity,
            reservedQuantity=dto.reserved_quantity,
            available=dto.available,
            availableQuantity=dto.available_quantity,
        )


class BulkAvailabilityEntry(BaseModel):
    productId: str
    result: Optional[AvailabilityResponse] = None
    error: Optional[str] = None
    detail: Optional[str] = None

    @staticmethod
    def of(dto: BulkAvailabilityDTO) -> "BulkAvailabilityEntry":
        return BulkAvailabilityEntry(
            productId=dto.product_id,
            result=AvailabilityResponse.of(dto.result) if dto.result else None,
            error=dto.error_kind,
            detail=dto.error,
        )


class CalendarDayResponse(BaseModel):
    date: str
    totalQuantity: int
    reservedQuantity: int
    availableQuantity: int
    status: str

    @staticmethod
    def of(dto: CalendarDayDTO) -> "CalendarDayResponse":
        return CalendarDayResponse(
            date=dto.date,
            totalQuantity=dto.total_quantity,
            reservedQuantity=dto.reserved_quantity,
            availableQuantity=dto.available_quantity,
            status=dto.status,
        )


class InventoryLineResponse(BaseModel):
    productId: str
    name: str
    totalQuantity: int
    cachedAvailable: int
    computedAvailable: int
    inSync: bool

    @staticmethod
    def of(dto: InventoryLineDTO) -> "InventoryLineResponse":
        return InventoryLineResponse(
            productId=dto.product_id,
            name=dto.product_name,
            totalQuantity=dto.total,
            cachedAvailable=dto.cached_available,
            computedAvailable=dto.computed_available,
            inSync=dto.in_sync,
        )
