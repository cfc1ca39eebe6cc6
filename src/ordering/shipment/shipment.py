"""Shipment aggregate (CQRS): the physical delivery of a paid order.

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    {PENDING, PROCESSING, SHIPPED} → CANCELLED
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.fields import DateTime, Identifier, String, ValueObject

from ordering.domain import ordering
from ordering.errors import InvalidArgumentError, InvalidTransitionError
from ordering.shared.identity import generate_identity
from ordering.shipment.events import (
    ShipmentCancelled,
    ShipmentCreated,
    ShipmentDelivered,
    ShipmentProcessingStarted,
    ShipmentShipped,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ShipmentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ShippingMethod(Enum):
    EXPRESS = "express"
    STANDARD = "standard"
    ECONOMY = "economy"


# Lead time in days per shipping method
DELIVERY_DAYS = {
    ShippingMethod.EXPRESS.value: 2,
    ShippingMethod.STANDARD.value: 5,
    ShippingMethod.ECONOMY.value: 10,
}
DEFAULT_DELIVERY_DAYS = 7

_VALID_TRANSITIONS = {
    ShipmentStatus.PENDING: {ShipmentStatus.PROCESSING, ShipmentStatus.CANCELLED},
    ShipmentStatus.PROCESSING: {ShipmentStatus.SHIPPED, ShipmentStatus.CANCELLED},
    ShipmentStatus.SHIPPED: {ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED},
    ShipmentStatus.DELIVERED: set(),  # Terminal
    ShipmentStatus.CANCELLED: {ShipmentStatus.CANCELLED},
}


def estimate_delivery(shipping_method: str, start: datetime | None = None) -> datetime:
    """Return the expected delivery time for a shipment leaving at ``start``."""
    start = start or datetime.now(UTC)
    return start + timedelta(days=DELIVERY_DAYS.get(shipping_method, DEFAULT_DELIVERY_DAYS))


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Shipment")
class Address:
    """Destination address for a shipment."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(required=True, max_length=100)

    @classmethod
    def build(
        cls,
        street: str,
        city: str,
        country: str,
        state: str | None = None,
        postal_code: str | None = None,
    ) -> "Address":
        """Validate and build an address. Street, city and country are required."""
        errors = {
            field: [f"{field.replace('_', ' ').capitalize()} is required"]
            for field, value in (("street", street), ("city", city), ("country", country))
            if not value
        }
        if errors:
            raise InvalidArgumentError(errors)
        return cls(street=street, city=city, state=state or "", postal_code=postal_code or "", country=country)

    @property
    def full_address(self) -> str:
        return f"{self.street}, {self.city}, {self.state or ''} {self.postal_code or ''}, {self.country}"


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Shipment:
    order_id = Identifier(required=True)
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)
    shipping_method = String(max_length=50)
    address = ValueObject(Address)
    status = String(
        choices=ShipmentStatus,
        default=ShipmentStatus.PENDING.value,
    )
    estimated_date = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_id: str,
        address: Address,
        shipping_method: str,
        identity: str | None = None,
    ) -> "Shipment":
        """Create a pending shipment for an order."""
        if not order_id:
            raise InvalidArgumentError({"order_id": ["Order ID is required"]})
        if address is None:
            raise InvalidArgumentError({"address": ["Shipping address is required"]})

        now = datetime.now(UTC)
        shipment = cls(
            id=identity or generate_identity(),
            order_id=order_id,
            address=address,
            shipping_method=shipping_method,
            status=ShipmentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        shipment.raise_(
            ShipmentCreated(
                shipment_id=str(shipment.id),
                order_id=order_id,
                shipping_method=shipping_method,
                address=address.full_address,
                created_at=now,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: ShipmentStatus) -> None:
        current = ShipmentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def start_processing(self) -> None:
        self._assert_can_transition(ShipmentStatus.PROCESSING)
        now = datetime.now(UTC)
        self.status = ShipmentStatus.PROCESSING.value
        self.updated_at = now
        self.raise_(
            ShipmentProcessingStarted(
                shipment_id=str(self.id),
                order_id=str(self.order_id),
                started_at=now,
            )
        )

    def ship(self, tracking_number: str, carrier: str | None = None) -> None:
        """Hand the shipment to a carrier."""
        self._assert_can_transition(ShipmentStatus.SHIPPED)
        if not tracking_number:
            raise InvalidArgumentError({"tracking_number": ["Tracking number is required"]})

        now = datetime.now(UTC)
        self.status = ShipmentStatus.SHIPPED.value
        self.tracking_number = tracking_number
        self.carrier = carrier
        self.shipped_at = now
        self.updated_at = now
        self.raise_(
            ShipmentShipped(
                shipment_id=str(self.id),
                order_id=str(self.order_id),
                tracking_number=tracking_number,
                carrier=carrier,
                shipped_at=now,
            )
        )

    def deliver(self) -> None:
        self._assert_can_transition(ShipmentStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = ShipmentStatus.DELIVERED.value
        self.delivered_at = now
        self.updated_at = now
        self.raise_(
            ShipmentDelivered(
                shipment_id=str(self.id),
                order_id=str(self.order_id),
                delivered_at=now,
            )
        )

    def cancel(self) -> None:
        """Cancel the shipment. Refused once delivered."""
        self._assert_can_transition(ShipmentStatus.CANCELLED)
        previous_status = self.status
        now = datetime.now(UTC)
        self.status = ShipmentStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            ShipmentCancelled(
                shipment_id=str(self.id),
                order_id=str(self.order_id),
                previous_status=previous_status,
                cancelled_at=now,
            )
        )

    def set_estimated_delivery_date(self, estimated_date: datetime) -> None:
        self.estimated_date = estimated_date
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_delivered(self) -> bool:
        return ShipmentStatus(self.status) == ShipmentStatus.DELIVERED

    def is_active(self) -> bool:
        return ShipmentStatus(self.status) not in (ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED)

    def can_be_cancelled(self) -> bool:
        return ShipmentStatus.CANCELLED in _VALID_TRANSITIONS[ShipmentStatus(self.status)]
