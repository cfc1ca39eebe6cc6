"""Order domain events: immutable facts about order state changes.

All events are past tense and versioned. Monetary values are carried as a
plain amount plus currency code.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A new order was placed."""

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_number = String(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderItemAdded:
    """A line item was added to an order."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)
    currency = String(required=True)
    total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderItemRemoved:
    """A line item was removed from an order."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderItemQuantityUpdated:
    """The quantity of a line item changed."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    total_amount = Float(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment for the order was captured."""

    order_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled."""

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCompleted:
    """The order was handed to a carrier and is considered fulfilled."""

    order_id = Identifier(required=True)
    completed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderRefunded:
    """The order's payment was returned to the customer."""

    order_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(required=True)
    refunded_at = DateTime(required=True)
