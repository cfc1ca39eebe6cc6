"""Payment aggregate (CQRS): one attempt to pay for an order.

A fresh Payment is created for every attempt; the most recent one is the
order's current payment.

State Machine:
    PENDING → COMPLETED → REFUNDED
    PENDING → FAILED
    FAILED → FAILED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text, ValueObject

from ordering.domain import ordering
from ordering.errors import InvalidArgumentError, InvalidTransitionError
from ordering.payment.events import (
    PaymentCompleted,
    PaymentFailed,
    PaymentInitiated,
    PaymentRefunded,
)
from ordering.shared.identity import generate_identity
from ordering.shared.money import Money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    CASH = "cash"


_VALID_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.COMPLETED: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: {PaymentStatus.FAILED},  # Re-failing only records the latest response
    PaymentStatus.REFUNDED: set(),  # Terminal
}

_PAYMENT_METHODS = {m.value for m in PaymentMethod}


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Payment:
    order_id = Identifier(required=True)
    amount = ValueObject(Money)
    method = String(max_length=50, choices=PaymentMethod)
    status = String(
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    transaction_id = String(max_length=255)
    gateway_response = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_id: str,
        amount: Money,
        method: str | PaymentMethod,
        identity: str | None = None,
    ) -> "Payment":
        """Start a pending payment attempt for an order."""
        if not order_id:
            raise InvalidArgumentError({"order_id": ["Order ID is required"]})
        if amount is None or not amount.is_positive():
            raise InvalidArgumentError({"amount": ["Payment amount must be positive"]})
        method_value = method.value if isinstance(method, PaymentMethod) else method
        if method_value not in _PAYMENT_METHODS:
            raise InvalidArgumentError({"method": [f"Unsupported payment method: {method_value}"]})

        now = datetime.now(UTC)
        payment = cls(
            id=identity or generate_identity(),
            order_id=order_id,
            amount=amount,
            method=method_value,
            status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        payment.raise_(
            PaymentInitiated(
                payment_id=str(payment.id),
                order_id=order_id,
                amount=amount.amount,
                currency=amount.currency,
                method=method_value,
                initiated_at=now,
            )
        )
        return payment

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: PaymentStatus) -> None:
        current = PaymentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def mark_as_completed(self, transaction_id: str, gateway_response: str | None = None) -> None:
        self._assert_can_transition(PaymentStatus.COMPLETED)
        now = datetime.now(UTC)
        self.status = PaymentStatus.COMPLETED.value
        self.transaction_id = transaction_id
        self.gateway_response = gateway_response
        self.updated_at = now
        self.raise_(
            PaymentCompleted(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                transaction_id=transaction_id,
                completed_at=now,
            )
        )

    def mark_as_failed(self, gateway_response: str | None = None) -> None:
        self._assert_can_transition(PaymentStatus.FAILED)
        now = datetime.now(UTC)
        self.status = PaymentStatus.FAILED.value
        self.gateway_response = gateway_response
        self.updated_at = now
        self.raise_(
            PaymentFailed(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                reason=gateway_response,
                failed_at=now,
            )
        )

    def refund(self) -> None:
        self._assert_can_transition(PaymentStatus.REFUNDED)
        now = datetime.now(UTC)
        self.status = PaymentStatus.REFUNDED.value
        self.updated_at = now
        self.raise_(
            PaymentRefunded(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                amount=self.amount.amount,
                currency=self.amount.currency,
                refunded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def can_be_refunded(self) -> bool:
        return PaymentStatus(self.status) == PaymentStatus.COMPLETED

    def is_completed(self) -> bool:
        return PaymentStatus(self.status) == PaymentStatus.COMPLETED
