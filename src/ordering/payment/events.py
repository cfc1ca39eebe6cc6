"""Payment domain events."""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Payment")
class PaymentInitiated:
    """A payment attempt was started for an order."""

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(required=True)
    method = String(required=True)
    initiated_at = DateTime(required=True)


@ordering.event(part_of="Payment")
class PaymentCompleted:
    """The gateway captured the payment."""

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    transaction_id = String(required=True)
    completed_at = DateTime(required=True)


@ordering.event(part_of="Payment")
class PaymentFailed:
    """The gateway declined or failed the payment."""

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = Text()
    failed_at = DateTime(required=True)


@ordering.event(part_of="Payment")
class PaymentRefunded:
    """A captured payment was returned."""

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(required=True)
    refunded_at = DateTime(required=True)
