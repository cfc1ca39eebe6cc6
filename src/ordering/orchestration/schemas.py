"""Pydantic request/response schemas for the order lifecycle use cases.

These are the external contracts of the orchestration service, kept separate
from the Protean aggregates they are built from.
"""

import math
from datetime import datetime

from pydantic import BaseModel, Field

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    """One line of a new order. Quantity and price are validated by the domain."""

    product_id: str
    product_name: str = ""
    quantity: int
    unit_price: float
    currency: str = "USD"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "product_name": "Espresso Beans 1kg",
                    "quantity": 2,
                    "unit_price": 19.99,
                    "currency": "USD",
                }
            ]
        }
    }


class AddressRequest(BaseModel):
    street: str = ""
    city: str = ""
    state: str | None = None
    postal_code: str | None = None
    country: str = ""


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class MoneyDTO(BaseModel):
    amount: float
    currency: str

    @classmethod
    def from_domain(cls, money) -> "MoneyDTO":
        return cls(amount=money.amount, currency=money.currency)


class OrderItemDTO(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: MoneyDTO
    subtotal: MoneyDTO

    @classmethod
    def from_domain(cls, item) -> "OrderItemDTO":
        return cls(
            id=str(item.id),
            product_id=str(item.product_id),
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=MoneyDTO.from_domain(item.unit_price),
            subtotal=MoneyDTO.from_domain(item.subtotal),
        )


class OrderDTO(BaseModel):
    id: str
    user_id: str
    order_number: str
    status: str
    items: list[OrderItemDTO] = Field(default_factory=list)
    total_amount: MoneyDTO
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order) -> "OrderDTO":
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            order_number=order.order_number,
            status=order.status,
            items=[OrderItemDTO.from_domain(item) for item in order.items or []],
            total_amount=MoneyDTO.from_domain(order.total_amount),
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class PaymentDTO(BaseModel):
    id: str
    order_id: str
    amount: MoneyDTO
    method: str
    status: str
    transaction_id: str | None = None
    gateway_response: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, payment) -> "PaymentDTO":
        return cls(
            id=str(payment.id),
            order_id=str(payment.order_id),
            amount=MoneyDTO.from_domain(payment.amount),
            method=payment.method,
            status=payment.status,
            transaction_id=payment.transaction_id,
            gateway_response=payment.gateway_response,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )


class AddressDTO(BaseModel):
    street: str
    city: str
    state: str | None = None
    postal_code: str | None = None
    country: str
    full_address: str

    @classmethod
    def from_domain(cls, address) -> "AddressDTO":
        return cls(
            street=address.street,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
            full_address=address.full_address,
        )


class ShipmentDTO(BaseModel):
    id: str
    order_id: str
    tracking_number: str | None = None
    carrier: str | None = None
    shipping_method: str | None = None
    address: AddressDTO
    status: str
    estimated_date: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, shipment) -> "ShipmentDTO":
        return cls(
            id=str(shipment.id),
            order_id=str(shipment.order_id),
            tracking_number=shipment.tracking_number,
            carrier=shipment.carrier,
            shipping_method=shipment.shipping_method,
            address=AddressDTO.from_domain(shipment.address),
            status=shipment.status,
            estimated_date=shipment.estimated_date,
            shipped_at=shipment.shipped_at,
            delivered_at=shipment.delivered_at,
            created_at=shipment.created_at,
            updated_at=shipment.updated_at,
        )


class ListOrdersResponse(BaseModel):
    orders: list[OrderDTO]
    total: int
    page: int
    page_size: int
    total_pages: int


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------
def normalize_pagination(page: int | None, page_size: int | None) -> tuple[int, int]:
    """Clamp page to >= 1 and page_size to 1..MAX_PAGE_SIZE."""
    page = page if page and page > 0 else DEFAULT_PAGE
    if not page_size or page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    return page, min(page_size, MAX_PAGE_SIZE)


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size else 0
