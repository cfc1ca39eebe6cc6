"""Tests for Order state machine: valid transitions and invalid transition guards."""

import pytest
from ordering.errors import InvalidTransitionError
from ordering.order.events import OrderCancelled, OrderCompleted, OrderPaid, OrderRefunded
from ordering.order.order import Order, OrderItem, OrderStatus
from ordering.shared.money import Money
from protean.exceptions import ValidationError


def _make_order():
    order = Order.create(user_id="user-001", order_number="ORD-20260119-ABCDEFGH")
    order.add_item(
        OrderItem.build(
            product_id="prod-001",
            product_name="Test Product",
            quantity=1,
            unit_price=Money.of(50),
        )
    )
    return order


def _order_at_state(target_status):
    """Create an order and advance it to the desired state."""
    order = _make_order()
    order._events.clear()

    if target_status == OrderStatus.PENDING:
        return order

    if target_status == OrderStatus.CANCELLED:
        order.cancel()
        order._events.clear()
        return order

    order.mark_as_paid()
    order._events.clear()
    if target_status == OrderStatus.PAID:
        return order

    order.complete()
    order._events.clear()
    if target_status == OrderStatus.COMPLETED:
        return order

    order.refund()
    order._events.clear()
    return order


class TestMarkAsPaid:
    def test_pending_to_paid(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.mark_as_paid()
        assert order.status == OrderStatus.PAID.value
        event = order._events[-1]
        assert isinstance(event, OrderPaid)
        assert event.amount == 50.0
        assert event.currency == "USD"

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PAID, OrderStatus.CANCELLED, OrderStatus.COMPLETED, OrderStatus.REFUNDED],
    )
    def test_rejected_outside_pending(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidTransitionError):
            order.mark_as_paid()
        assert order.status == status.value


class TestComplete:
    def test_paid_to_completed(self):
        order = _order_at_state(OrderStatus.PAID)
        order.complete()
        assert order.status == OrderStatus.COMPLETED.value
        assert isinstance(order._events[-1], OrderCompleted)

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PENDING, OrderStatus.CANCELLED, OrderStatus.COMPLETED, OrderStatus.REFUNDED],
    )
    def test_rejected_outside_paid(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidTransitionError):
            order.complete()
        assert order.status == status.value


class TestRefund:
    @pytest.mark.parametrize("status", [OrderStatus.PAID, OrderStatus.COMPLETED])
    def test_paid_or_completed_to_refunded(self, status):
        order = _order_at_state(status)
        order.refund()
        assert order.status == OrderStatus.REFUNDED.value
        assert isinstance(order._events[-1], OrderRefunded)

    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CANCELLED, OrderStatus.REFUNDED])
    def test_rejected_from_other_statuses(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidTransitionError):
            order.refund()
        assert order.status == status.value


class TestCancel:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.PAID, OrderStatus.CANCELLED])
    def test_cancellable_statuses(self, status):
        order = _order_at_state(status)
        assert order.can_be_cancelled()
        order.cancel()
        assert order.status == OrderStatus.CANCELLED.value
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.previous_status == status.value

    @pytest.mark.parametrize("status", [OrderStatus.COMPLETED, OrderStatus.REFUNDED])
    def test_completed_and_refunded_cannot_be_cancelled(self, status):
        order = _order_at_state(status)
        assert not order.can_be_cancelled()
        with pytest.raises(InvalidTransitionError):
            order.cancel()
        assert order.status == status.value

    def test_transition_errors_are_validation_errors(self):
        order = _order_at_state(OrderStatus.REFUNDED)
        with pytest.raises(ValidationError) as exc:
            order.cancel()
        assert "status" in exc.value.messages
