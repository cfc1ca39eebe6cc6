"""Configurable fake payment gateway for development and testing.

Simulates a payment provider without any external calls. It can be told to
approve, decline, or be unreachable, and it records every call it receives.
"""

from uuid import uuid4

from ordering.gateway.port import ChargeResult, GatewayError, PaymentGateway, RefundResult


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.unavailable: bool = False
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Card declined",
        unavailable: bool = False,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.unavailable = unavailable

    def create_charge(
        self,
        amount: float,
        currency: str,
        payment_method_type: str,
        idempotency_key: str,
    ) -> ChargeResult:
        self.calls.append(
            {
                "method": "create_charge",
                "amount": amount,
                "currency": currency,
                "payment_method_type": payment_method_type,
                "idempotency_key": idempotency_key,
            }
        )

        if self.unavailable:
            raise GatewayError("Payment gateway unavailable")
        if self.should_succeed:
            return ChargeResult(
                success=True,
                gateway_transaction_id=f"fake_txn_{uuid4().hex[:12]}",
                gateway_status="succeeded",
                gateway_response="Charge successful",
            )
        return ChargeResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )

    def create_refund(
        self,
        gateway_transaction_id: str,
        amount: float,
        currency: str,
        reason: str,
    ) -> RefundResult:
        self.calls.append(
            {
                "method": "create_refund",
                "gateway_transaction_id": gateway_transaction_id,
                "amount": amount,
                "currency": currency,
                "reason": reason,
            }
        )

        if self.unavailable:
            raise GatewayError("Payment gateway unavailable")
        if self.should_succeed:
            return RefundResult(
                success=True,
                gateway_refund_id=f"fake_ref_{uuid4().hex[:12]}",
                gateway_status="succeeded",
            )
        return RefundResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )
