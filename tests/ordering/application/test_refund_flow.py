"""Application tests for refunding an order's payment."""

import pytest
from ordering.errors import CannotRefundError, InvalidOrderStatusError, PaymentNotFoundError
from ordering.gateway.port import GatewayError
from ordering.order.order import Order, OrderStatus
from ordering.payment.payment import Payment, PaymentStatus
from protean import current_domain


class TestRefundPayment:
    def test_refund_paid_order(self, service, gateway, paid_order):
        dto = service.refund_payment(paid_order.id)

        assert dto.status == PaymentStatus.REFUNDED.value
        assert service.get_order(paid_order.id).status == OrderStatus.REFUNDED.value

        refund = gateway.calls[-1]
        assert refund["method"] == "create_refund"
        assert refund["gateway_transaction_id"] == dto.transaction_id
        assert refund["amount"] == 85.48

    def test_refund_completed_order(self, service, paid_order, address):
        shipment = service.create_shipment(paid_order.id, address, "express")
        service.update_shipment(shipment.id, "TRACK-001", "UPS")

        service.refund_payment(paid_order.id)

        assert service.get_order(paid_order.id).status == OrderStatus.REFUNDED.value
        assert service.get_payment(paid_order.id).status == PaymentStatus.REFUNDED.value

    def test_pending_order_cannot_be_refunded(self, service, pending_order):
        with pytest.raises(InvalidOrderStatusError):
            service.refund_payment(pending_order.id)

    def test_refunded_order_cannot_be_refunded_again(self, service, paid_order):
        service.refund_payment(paid_order.id)
        with pytest.raises(InvalidOrderStatusError):
            service.refund_payment(paid_order.id)

    def test_paid_order_without_payment(self, service):
        order = Order.create(user_id="user-001", order_number="ORD-NOPAY-0001")
        order.mark_as_paid()
        current_domain.repository_for(Order).add(order)

        with pytest.raises(PaymentNotFoundError):
            service.refund_payment(str(order.id))

    def test_payment_not_refundable(self, service, paid_order):
        payment = current_domain.repository_for(Payment).find_by_order_id(paid_order.id)
        payment.refund()
        current_domain.repository_for(Payment).add(payment)

        with pytest.raises(CannotRefundError):
            service.refund_payment(paid_order.id)
        assert service.get_order(paid_order.id).status == OrderStatus.PAID.value


class TestRefundGatewayFailure:
    def test_declined_refund_leaves_records_untouched(self, service, gateway, paid_order):
        gateway.configure(should_succeed=False, failure_reason="Refund window closed")

        with pytest.raises(GatewayError, match="Refund window closed"):
            service.refund_payment(paid_order.id)

        assert service.get_payment(paid_order.id).status == PaymentStatus.COMPLETED.value
        assert service.get_order(paid_order.id).status == OrderStatus.PAID.value

    def test_unreachable_gateway_propagates(self, service, gateway, paid_order):
        gateway.configure(should_succeed=True, unavailable=True)

        with pytest.raises(GatewayError):
            service.refund_payment(paid_order.id)

        assert service.get_payment(paid_order.id).status == PaymentStatus.COMPLETED.value
