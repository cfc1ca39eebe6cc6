"""Tests for the fake payment gateway and the gateway factory."""

import pytest
from ordering.gateway import get_gateway, reset_gateway, set_gateway
from ordering.gateway.fake_adapter import FakeGateway
from ordering.gateway.port import GatewayError


@pytest.fixture(autouse=True)
def _reset_gateway():
    reset_gateway()
    yield
    reset_gateway()


class TestGatewayFactory:
    def test_defaults_to_fake_gateway(self):
        assert isinstance(get_gateway(), FakeGateway)

    def test_returns_same_instance(self):
        assert get_gateway() is get_gateway()

    def test_set_gateway_overrides(self):
        custom = FakeGateway()
        set_gateway(custom)
        assert get_gateway() is custom

    def test_unknown_adapter_rejected(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "acme-pay")
        with pytest.raises(ValueError, match="acme-pay"):
            get_gateway()


class TestFakeGatewayCharges:
    def setup_method(self):
        self.gateway = FakeGateway()

    def test_successful_charge(self):
        result = self.gateway.create_charge(85.48, "USD", "credit_card", "pay-001")
        assert result.success
        assert result.gateway_transaction_id.startswith("fake_txn_")
        assert self.gateway.calls[0]["idempotency_key"] == "pay-001"

    def test_declined_charge(self):
        self.gateway.configure(should_succeed=False, failure_reason="Insufficient funds")
        result = self.gateway.create_charge(85.48, "USD", "credit_card", "pay-001")
        assert not result.success
        assert result.failure_reason == "Insufficient funds"
        assert result.gateway_transaction_id is None

    def test_unavailable_gateway_raises(self):
        self.gateway.configure(should_succeed=True, unavailable=True)
        with pytest.raises(GatewayError):
            self.gateway.create_charge(10.0, "USD", "cash", "pay-001")
        assert len(self.gateway.calls) == 1


class TestFakeGatewayRefunds:
    def setup_method(self):
        self.gateway = FakeGateway()

    def test_successful_refund(self):
        result = self.gateway.create_refund("fake_txn_1", 10.0, "USD", "Customer request")
        assert result.success
        assert result.gateway_refund_id.startswith("fake_ref_")
        assert self.gateway.calls[-1]["method"] == "create_refund"

    def test_declined_refund(self):
        self.gateway.configure(should_succeed=False, failure_reason="Charge already refunded")
        result = self.gateway.create_refund("fake_txn_1", 10.0, "USD", "Customer request")
        assert not result.success
        assert result.failure_reason == "Charge already refunded"
