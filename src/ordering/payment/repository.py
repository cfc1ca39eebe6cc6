"""Repository for the Payment aggregate."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.errors import PaymentNotFoundError
from ordering.payment.payment import Payment


@ordering.repository(part_of=Payment)
class PaymentRepository:
    def find_by_id(self, payment_id: str) -> Payment:
        try:
            return self.get(payment_id)
        except ObjectNotFoundError as exc:
            raise PaymentNotFoundError({"payment_id": [f"Payment {payment_id} not found"]}) from exc

    def find_by_order_id(self, order_id: str) -> Payment:
        """Return the most recent payment attempt for an order."""
        result = self._dao.query.filter(order_id=order_id).order_by("-created_at").all()
        if not result.items:
            raise PaymentNotFoundError({"order_id": [f"No payment found for order {order_id}"]})
        return result.first

    def find_by_transaction_id(self, transaction_id: str) -> Payment:
        result = self._dao.query.filter(transaction_id=transaction_id).all()
        if not result.items:
            raise PaymentNotFoundError({"transaction_id": [f"Payment with transaction {transaction_id} not found"]})
        return result.first

    def list_by_status(self, status: str) -> list[Payment]:
        return self._dao.query.filter(status=status).all().items
