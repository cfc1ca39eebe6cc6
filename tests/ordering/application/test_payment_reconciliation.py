"""Application tests for repairing orders left pending after a captured payment."""

import pytest
from ordering.errors import PaymentFailedError
from ordering.order.order import Order, OrderStatus
from ordering.payment.payment import Payment
from protean import current_domain


def _capture_without_marking_order(order_id, amount):
    """Persist a completed payment while leaving the order pending."""
    payment = Payment.create(order_id=order_id, amount=amount, method="credit_card")
    payment.mark_as_completed("fake_txn_recovered", "Charge successful")
    current_domain.repository_for(Payment).add(payment)
    return payment


class TestReconcilePayments:
    def test_pending_order_with_completed_payment_is_marked_paid(self, service, pending_order):
        order = current_domain.repository_for(Order).get(pending_order.id)
        _capture_without_marking_order(pending_order.id, order.total_amount)

        reconciled = service.reconcile_payments()

        assert reconciled == [pending_order.id]
        assert service.get_order(pending_order.id).status == OrderStatus.PAID.value

    def test_already_paid_orders_are_left_alone(self, service, paid_order):
        assert service.reconcile_payments() == []
        assert service.get_order(paid_order.id).status == OrderStatus.PAID.value

    def test_failed_payments_are_ignored(self, service, gateway, pending_order):
        gateway.configure(should_succeed=False)
        with pytest.raises(PaymentFailedError):
            service.process_payment(pending_order.id, "credit_card")

        assert service.reconcile_payments() == []
        assert service.get_order(pending_order.id).status == OrderStatus.PENDING.value

    def test_payment_for_missing_order_is_skipped(self, service, pending_order):
        order = current_domain.repository_for(Order).get(pending_order.id)
        _capture_without_marking_order("missing-order", order.total_amount)

        assert service.reconcile_payments() == []
