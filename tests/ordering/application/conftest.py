import pytest
from ordering.gateway import reset_gateway, set_gateway
from ordering.gateway.fake_adapter import FakeGateway
from ordering.orchestration.schemas import AddressRequest, OrderLineRequest
from ordering.orchestration.service import OrderOrchestrationService


@pytest.fixture
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture
def service(gateway):
    return OrderOrchestrationService()


@pytest.fixture
def lines():
    return [
        OrderLineRequest(product_id="prod-001", product_name="Espresso Beans", quantity=2, unit_price=19.99),
        OrderLineRequest(product_id="prod-002", product_name="Pour-over Kettle", quantity=1, unit_price=45.50),
    ]


@pytest.fixture
def address():
    return AddressRequest(
        street="1 Main St",
        city="Springfield",
        state="IL",
        postal_code="62701",
        country="US",
    )


@pytest.fixture
def pending_order(service, lines):
    return service.create_order("user-001", lines)


@pytest.fixture
def paid_order(service, pending_order):
    service.process_payment(pending_order.id, "credit_card")
    return service.get_order(pending_order.id)
