"""Payment gateway port (abstract interface).

Defines the contract that payment gateway adapters implement, so the
orchestration service never depends on a specific payment provider.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class GatewayError(Exception):
    """The gateway could not be reached or returned an unusable response."""


@dataclass(frozen=True)
class ChargeResult:
    """Result of a payment charge attempt."""

    success: bool
    gateway_transaction_id: str | None = None
    gateway_status: str | None = None
    gateway_response: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class RefundResult:
    """Result of a refund attempt."""

    success: bool
    gateway_refund_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface.

    Adapters return a result with ``success=False`` when the provider declines,
    and raise ``GatewayError`` when the call itself fails.
    """

    @abstractmethod
    def create_charge(
        self,
        amount: float,
        currency: str,
        payment_method_type: str,
        idempotency_key: str,
    ) -> ChargeResult:
        """Create a charge via the payment gateway."""
        ...

    @abstractmethod
    def create_refund(
        self,
        gateway_transaction_id: str,
        amount: float,
        currency: str,
        reason: str,
    ) -> RefundResult:
        """Refund a previous charge."""
        ...
