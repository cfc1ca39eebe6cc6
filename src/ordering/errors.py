"""Error taxonomy for the ordering context.

Every error is a Protean exception so callers can catch ``ValidationError``
or ``ObjectNotFoundError`` broadly, or the specific subclass when the
distinction matters. Errors carry a ``messages`` dict keyed by field.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InvalidArgumentError(ValidationError):
    """A required input was missing or malformed."""


class InvalidQuantityError(InvalidArgumentError):
    """An order line quantity was zero or negative."""


class InvalidTransitionError(ValidationError):
    """A state machine transition was attempted from an illegal status."""


class InvalidOrderStatusError(InvalidTransitionError):
    """An order was not in the status a use case requires."""


class EmptyOrderError(ValidationError):
    """An order had no items, or a non-positive total."""


class CurrencyMismatchError(ValidationError):
    """Two monetary amounts with different currencies were combined."""


class PaymentFailedError(ValidationError):
    """The payment gateway declined or failed a charge."""


class CannotRefundError(ValidationError):
    """The payment is not in a refundable status."""


class NotFoundError(ObjectNotFoundError):
    """A record lookup found nothing."""


class OrderNotFoundError(NotFoundError):
    pass


class OrderItemNotFoundError(NotFoundError):
    pass


class PaymentNotFoundError(NotFoundError):
    pass


class ShipmentNotFoundError(NotFoundError):
    pass
