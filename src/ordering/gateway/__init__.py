"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations. The adapter
is chosen with the PAYMENT_GATEWAY environment variable; only ``fake`` ships
with this package.
"""

import os

from ordering.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        adapter = os.environ.get("PAYMENT_GATEWAY", "fake")
        if adapter == "fake":
            from ordering.gateway.fake_adapter import FakeGateway

            _current_gateway = FakeGateway()
        else:
            raise ValueError(f"Unknown payment gateway adapter: {adapter}")
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
