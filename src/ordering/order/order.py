"""Order aggregate (CQRS): the core of the ordering domain.

The Order owns its line items and keeps ``total_amount`` equal to the sum of
the item subtotals at all times. Payment and Shipment are separate aggregates
that refer back to the order by identity only.

State Machine:
    PENDING → PAID → COMPLETED → REFUNDED
    PAID → REFUNDED
    {PENDING, PAID} → CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.errors import (
    CurrencyMismatchError,
    InvalidArgumentError,
    InvalidQuantityError,
    InvalidTransitionError,
    OrderItemNotFoundError,
)
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderItemAdded,
    OrderItemQuantityUpdated,
    OrderItemRemoved,
    OrderPaid,
    OrderRefunded,
)
from ordering.shared.identity import generate_identity
from ordering.shared.money import Money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REFUNDED = "refunded"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.COMPLETED, OrderStatus.REFUNDED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}

# Statuses from which cancellation is refused
_NON_CANCELLABLE_STATES = {
    OrderStatus.COMPLETED,
    OrderStatus.REFUNDED,
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item in an order: a product, a quantity and the price paid for it.

    ``subtotal`` is always ``unit_price × quantity`` and is refreshed whenever
    the quantity changes.
    """

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = ValueObject(Money)
    subtotal = ValueObject(Money)

    @classmethod
    def build(
        cls,
        product_id: str,
        product_name: str,
        quantity: int,
        unit_price: Money,
        identity: str | None = None,
    ) -> "OrderItem":
        """Validate one order line and build the item."""
        if not product_id:
            raise InvalidArgumentError({"product_id": ["Product ID is required"]})
        if quantity is None or quantity <= 0:
            raise InvalidQuantityError({"quantity": ["Quantity must be greater than zero"]})
        if unit_price is None:
            raise InvalidArgumentError({"unit_price": ["Unit price is required"]})
        if unit_price.amount < 0:
            raise InvalidArgumentError({"unit_price": ["Unit price cannot be negative"]})

        return cls(
            id=identity or generate_identity(),
            product_id=product_id,
            product_name=product_name or "",
            quantity=quantity,
            unit_price=unit_price,
            subtotal=unit_price.multiply(quantity),
        )

    def change_quantity(self, quantity: int) -> None:
        if quantity is None or quantity <= 0:
            raise InvalidQuantityError({"quantity": ["Quantity must be greater than zero"]})
        self.quantity = quantity
        self.subtotal = self.unit_price.multiply(quantity)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    order_number = String(required=True, max_length=50, unique=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    total_amount = ValueObject(Money)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id: str, order_number: str, identity: str | None = None) -> "Order":
        """Create an empty, pending order with a zero total."""
        if not user_id:
            raise InvalidArgumentError({"user_id": ["User ID is required"]})
        if not order_number:
            raise InvalidArgumentError({"order_number": ["Order number is required"]})

        now = datetime.now(UTC)
        order = cls(
            id=identity or generate_identity(),
            user_id=user_id,
            order_number=order_number,
            status=OrderStatus.PENDING.value,
            total_amount=Money.zero(),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                user_id=user_id,
                order_number=order_number,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def _recalculate_total(self) -> None:
        """Recompute the order total from the item subtotals."""
        total = Money.zero(self.total_amount.currency)
        for item in self.items or []:
            total = total.add(item.subtotal)
        self.total_amount = total

    def _find_item(self, item_id: str) -> OrderItem:
        item = next((i for i in (self.items or []) if str(i.id) == str(item_id)), None)
        if item is None:
            raise OrderItemNotFoundError({"item_id": [f"Item {item_id} not found in order"]})
        return item

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------
    def add_item(self, item: OrderItem | None) -> None:
        """Append a line item and refresh the order total."""
        if item is None:
            raise InvalidArgumentError({"item": ["Order item is required"]})
        if self.items and item.unit_price.currency != self.total_amount.currency:
            raise CurrencyMismatchError(
                {"currency": [f"Order is priced in {self.total_amount.currency}, item is in {item.unit_price.currency}"]}
            )

        if not self.items:
            self.total_amount = Money.zero(item.unit_price.currency)
        self.add_items(item)
        self._recalculate_total()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderItemAdded(
                order_id=str(self.id),
                item_id=str(item.id),
                product_id=str(item.product_id),
                quantity=item.quantity,
                unit_price=item.unit_price.amount,
                currency=item.unit_price.currency,
                total_amount=self.total_amount.amount,
            )
        )

    def remove_item(self, item_id: str) -> None:
        """Remove a line item by identity and refresh the order total.

        Removing the last item leaves a zero total in the order's currency.
        """
        item = self._find_item(item_id)

        self.remove_items(item)
        self._recalculate_total()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderItemRemoved(
                order_id=str(self.id),
                item_id=str(item_id),
                total_amount=self.total_amount.amount,
            )
        )

    def update_item_quantity(self, item_id: str, quantity: int) -> None:
        """Change the quantity of a line item and refresh the order total."""
        item = self._find_item(item_id)

        previous_quantity = item.quantity
        item.change_quantity(quantity)
        self._recalculate_total()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderItemQuantityUpdated(
                order_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
                total_amount=self.total_amount.amount,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def mark_as_paid(self) -> None:
        self._assert_can_transition(OrderStatus.PAID)
        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                amount=self.total_amount.amount,
                currency=self.total_amount.currency,
                paid_at=now,
            )
        )

    def can_be_cancelled(self) -> bool:
        return OrderStatus(self.status) not in _NON_CANCELLABLE_STATES

    def cancel(self) -> None:
        """Cancel the order. Allowed from any status except completed or refunded.

        Cancelling a paid order does not reverse the payment.
        """
        if not self.can_be_cancelled():
            raise InvalidTransitionError({"status": [f"Order cannot be cancelled in {self.status} status"]})

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous_status,
                cancelled_at=now,
            )
        )

    def complete(self) -> None:
        self._assert_can_transition(OrderStatus.COMPLETED)
        now = datetime.now(UTC)
        self.status = OrderStatus.COMPLETED.value
        self.updated_at = now
        self.raise_(OrderCompleted(order_id=str(self.id), completed_at=now))

    def refund(self) -> None:
        self._assert_can_transition(OrderStatus.REFUNDED)
        now = datetime.now(UTC)
        self.status = OrderStatus.REFUNDED.value
        self.updated_at = now
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                amount=self.total_amount.amount,
                currency=self.total_amount.currency,
                refunded_at=now,
            )
        )
