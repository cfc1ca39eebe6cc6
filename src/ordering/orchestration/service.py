"""Order orchestration, the use cases that drive an order through its lifecycle.

Each use case loads aggregates through their repositories, applies domain
methods, calls the payment gateway when money has to move, and persists the
results. Repository writes are not wrapped in a single transaction: every
``add`` commits on its own, so the order of writes below is what keeps the
three aggregates consistent. When a payment is captured, the Payment is
always written before the Order, and ``reconcile_payments`` repairs orders
left behind by a crash between the two writes.
"""

from collections.abc import Callable, Iterable

import structlog
from protean.utils.globals import current_domain

from ordering.errors import (
    CannotRefundError,
    EmptyOrderError,
    InvalidArgumentError,
    InvalidOrderStatusError,
    InvalidTransitionError,
    OrderNotFoundError,
    PaymentFailedError,
)
from ordering.gateway import get_gateway
from ordering.gateway.port import ChargeResult, GatewayError, PaymentGateway
from ordering.orchestration.schemas import (
    AddressRequest,
    ListOrdersResponse,
    OrderDTO,
    OrderLineRequest,
    PaymentDTO,
    ShipmentDTO,
    normalize_pagination,
    total_pages,
)
from ordering.order.order import Order, OrderItem, OrderStatus
from ordering.payment.payment import Payment, PaymentMethod, PaymentStatus
from ordering.shared.identity import generate_identity, generate_order_number
from ordering.shared.money import Money
from ordering.shipment.shipment import Address, Shipment, ShipmentStatus, ShippingMethod, estimate_delivery

logger = structlog.get_logger(__name__)


class OrderOrchestrationService:
    """Application service for the order lifecycle.

    Collaborators default to the ones registered with the active domain and
    can be replaced through the constructor.
    """

    def __init__(
        self,
        order_repository=None,
        payment_repository=None,
        shipment_repository=None,
        gateway: PaymentGateway | None = None,
        id_generator: Callable[[], str] | None = None,
        order_number_generator: Callable[[], str] | None = None,
    ) -> None:
        self.orders = order_repository or current_domain.repository_for(Order)
        self.payments = payment_repository or current_domain.repository_for(Payment)
        self.shipments = shipment_repository or current_domain.repository_for(Shipment)
        self.gateway = gateway or get_gateway()
        self.next_id = id_generator or generate_identity
        self.next_order_number = order_number_generator or generate_order_number

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def create_order(self, user_id: str, items: Iterable[OrderLineRequest]) -> OrderDTO:
        """Build a pending order from request lines and persist it once.

        The first invalid line aborts the whole order; nothing is persisted.
        """
        items = list(items or [])
        if not items:
            raise EmptyOrderError({"items": ["Order must contain at least one item"]})

        order = Order.create(user_id, self.next_order_number(), identity=self.next_id())
        for line in items:
            order.add_item(
                OrderItem.build(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=Money.of(line.unit_price, line.currency),
                    identity=self.next_id(),
                )
            )

        self.orders.add(order)
        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=user_id,
            item_count=len(items),
            total=str(order.total_amount),
        )
        return OrderDTO.from_domain(order)

    def cancel_order(self, order_id: str) -> OrderDTO:
        order = self.orders.find_by_id(order_id)
        was_paid = order.status == OrderStatus.PAID.value

        order.cancel()
        self.orders.add(order)

        if was_paid:
            logger.warning(
                "Paid order cancelled without a refund",
                order_id=order_id,
                total=str(order.total_amount),
            )
        else:
            logger.info("Order cancelled", order_id=order_id)
        return OrderDTO.from_domain(order)

    # -------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------
    def process_payment(self, order_id: str, method: str | PaymentMethod) -> PaymentDTO:
        """Charge the order total through the gateway and mark the order paid.

        A declined or failed charge is recorded as a failed Payment and
        reported as ``PaymentFailedError``; the order stays pending so the
        caller may retry with a fresh attempt.
        """
        order = self.orders.find_by_id(order_id)
        if order.status != OrderStatus.PENDING.value:
            raise InvalidOrderStatusError(
                {"status": [f"Order must be pending to accept payment, current status is {order.status}"]}
            )
        if not order.items or not order.total_amount.is_positive():
            raise EmptyOrderError({"items": ["Cannot pay for an order without items"]})

        payment = Payment.create(
            order_id=str(order.id),
            amount=order.total_amount,
            method=method,
            identity=self.next_id(),
        )

        try:
            result = self.gateway.create_charge(
                amount=payment.amount.amount,
                currency=payment.amount.currency,
                payment_method_type=payment.method,
                idempotency_key=str(payment.id),
            )
        except GatewayError as exc:
            result = ChargeResult(success=False, gateway_status="error", failure_reason=str(exc))

        if not result.success:
            reason = result.failure_reason or "Payment declined"
            payment.mark_as_failed(reason)
            self.payments.add(payment)
            logger.warning(
                "Payment failed",
                order_id=order_id,
                payment_id=str(payment.id),
                reason=reason,
            )
            raise PaymentFailedError({"payment": [reason]})

        payment.mark_as_completed(result.gateway_transaction_id, result.gateway_response)
        self.payments.add(payment)

        order.mark_as_paid()
        self.orders.add(order)

        logger.info(
            "Payment completed",
            order_id=order_id,
            payment_id=str(payment.id),
            transaction_id=payment.transaction_id,
            amount=str(payment.amount),
        )
        return PaymentDTO.from_domain(payment)

    def refund_payment(self, order_id: str) -> PaymentDTO:
        """Return the order's current payment through the gateway."""
        order = self.orders.find_by_id(order_id)
        if order.status not in (OrderStatus.PAID.value, OrderStatus.COMPLETED.value):
            raise InvalidOrderStatusError(
                {"status": [f"Only paid or completed orders can be refunded, current status is {order.status}"]}
            )

        payment = self.payments.find_by_order_id(order_id)
        if not payment.can_be_refunded():
            raise CannotRefundError({"payment": [f"Payment in {payment.status} status cannot be refunded"]})

        try:
            result = self.gateway.create_refund(
                gateway_transaction_id=payment.transaction_id,
                amount=payment.amount.amount,
                currency=payment.amount.currency,
                reason=f"Refund for order {order.order_number}",
            )
        except GatewayError:
            logger.error("Refund failed at gateway", order_id=order_id, payment_id=str(payment.id))
            raise
        if not result.success:
            logger.error(
                "Refund declined by gateway",
                order_id=order_id,
                payment_id=str(payment.id),
                reason=result.failure_reason,
            )
            raise GatewayError(result.failure_reason or "Refund declined")

        payment.refund()
        self.payments.add(payment)

        order.refund()
        self.orders.add(order)

        logger.info("Payment refunded", order_id=order_id, payment_id=str(payment.id), amount=str(payment.amount))
        return PaymentDTO.from_domain(payment)

    def reconcile_payments(self) -> list[str]:
        """Mark pending orders paid when a completed payment exists for them.

        Returns the identifiers of the orders that were repaired.
        """
        reconciled = []
        for payment in self.payments.list_by_status(PaymentStatus.COMPLETED.value):
            try:
                order = self.orders.find_by_id(str(payment.order_id))
            except OrderNotFoundError:
                logger.warning(
                    "Completed payment references a missing order",
                    payment_id=str(payment.id),
                    order_id=str(payment.order_id),
                )
                continue

            if order.status != OrderStatus.PENDING.value:
                continue

            order.mark_as_paid()
            self.orders.add(order)
            reconciled.append(str(order.id))
            logger.info("Order reconciled with completed payment", order_id=str(order.id), payment_id=str(payment.id))

        logger.info("Payment reconciliation complete", reconciled_count=len(reconciled))
        return reconciled

    # -------------------------------------------------------------------
    # Shipments
    # -------------------------------------------------------------------
    def create_shipment(
        self,
        order_id: str,
        address: AddressRequest,
        shipping_method: str = ShippingMethod.STANDARD.value,
    ) -> ShipmentDTO:
        """Create a shipment for a paid order, with an estimated delivery date."""
        order = self.orders.find_by_id(order_id)
        if order.status != OrderStatus.PAID.value:
            raise InvalidOrderStatusError(
                {"status": [f"Only paid orders can be shipped, current status is {order.status}"]}
            )
        if any(s.is_active() for s in self.shipments.list_by_order_id(order_id)):
            raise InvalidTransitionError({"order_id": [f"Order {order_id} already has an active shipment"]})
        if address is None:
            raise InvalidArgumentError({"address": ["Shipping address is required"]})

        shipment = Shipment.create(
            order_id=order_id,
            address=Address.build(
                street=address.street,
                city=address.city,
                country=address.country,
                state=address.state,
                postal_code=address.postal_code,
            ),
            shipping_method=shipping_method,
            identity=self.next_id(),
        )
        shipment.set_estimated_delivery_date(estimate_delivery(shipping_method, shipment.created_at))
        self.shipments.add(shipment)

        logger.info(
            "Shipment created",
            order_id=order_id,
            shipment_id=str(shipment.id),
            shipping_method=shipping_method,
            estimated_date=shipment.estimated_date.isoformat(),
        )
        return ShipmentDTO.from_domain(shipment)

    def update_shipment(self, shipment_id: str, tracking_number: str, carrier: str | None = None) -> ShipmentDTO:
        """Hand the shipment to a carrier and complete the order."""
        shipment = self.shipments.find_by_id(shipment_id)
        order = self.orders.find_by_id(str(shipment.order_id))
        if order.status != OrderStatus.PAID.value:
            raise InvalidOrderStatusError(
                {"status": [f"Order must be paid to ship, current status is {order.status}"]}
            )

        if shipment.status == ShipmentStatus.PENDING.value:
            shipment.start_processing()
        shipment.ship(tracking_number, carrier)
        self.shipments.add(shipment)

        order.complete()
        self.orders.add(order)

        logger.info(
            "Shipment shipped",
            order_id=str(order.id),
            shipment_id=shipment_id,
            tracking_number=tracking_number,
            carrier=carrier,
        )
        return ShipmentDTO.from_domain(shipment)

    def deliver_shipment(self, shipment_id: str) -> ShipmentDTO:
        shipment = self.shipments.find_by_id(shipment_id)
        shipment.deliver()
        self.shipments.add(shipment)
        logger.info("Shipment delivered", shipment_id=shipment_id, order_id=str(shipment.order_id))
        return ShipmentDTO.from_domain(shipment)

    def cancel_shipment(self, shipment_id: str) -> ShipmentDTO:
        shipment = self.shipments.find_by_id(shipment_id)
        shipment.cancel()
        self.shipments.add(shipment)
        logger.info("Shipment cancelled", shipment_id=shipment_id, order_id=str(shipment.order_id))
        return ShipmentDTO.from_domain(shipment)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_order(self, order_id: str) -> OrderDTO:
        return OrderDTO.from_domain(self.orders.find_by_id(order_id))

    def get_order_by_number(self, order_number: str) -> OrderDTO:
        return OrderDTO.from_domain(self.orders.find_by_order_number(order_number))

    def list_orders(self, user_id: str, page: int = 1, page_size: int = 10) -> ListOrdersResponse:
        page, page_size = normalize_pagination(page, page_size)
        orders, total = self.orders.list_by_user_id(user_id, offset=(page - 1) * page_size, limit=page_size)
        return ListOrdersResponse(
            orders=[OrderDTO.from_domain(order) for order in orders],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages(total, page_size),
        )

    def get_payment(self, order_id: str) -> PaymentDTO:
        return PaymentDTO.from_domain(self.payments.find_by_order_id(order_id))

    def get_shipment(self, order_id: str) -> ShipmentDTO:
        return ShipmentDTO.from_domain(self.shipments.find_by_order_id(order_id))

    def get_shipment_by_tracking_number(self, tracking_number: str) -> ShipmentDTO:
        return ShipmentDTO.from_domain(self.shipments.find_by_tracking_number(tracking_number))
