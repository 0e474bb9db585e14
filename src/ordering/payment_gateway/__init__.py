"""Payment gateway abstraction — pluggable payment initiation after an order commits."""

import os

_gateway_instance = None


def get_payment_gateway():
    """Return the configured payment gateway adapter (singleton).

    Uses FakePaymentGateway by default. In production, configure via
    PAYMENT_GATEWAY_ADAPTER environment variable.
    """
    global _gateway_instance
    if _gateway_instance is None:
        adapter = os.environ.get("PAYMENT_GATEWAY_ADAPTER", "fake")
        if adapter == "fake":
            from ordering.payment_gateway.fake_gateway import FakePaymentGateway

            _gateway_instance = FakePaymentGateway()
        else:
            raise ValueError(f"Unknown payment gateway adapter: {adapter}")
    return _gateway_instance


def reset_payment_gateway():
    """Reset the gateway singleton (useful for testing)."""
    global _gateway_instance
    _gateway_instance = None
