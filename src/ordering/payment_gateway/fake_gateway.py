"""Fake payment gateway — records initiations in memory for tests and development."""

from uuid import uuid4

from ordering.payment_gateway.port import PaymentGatewayPort


class PaymentGatewayUnavailable(Exception):
    pass


class FakePaymentGateway(PaymentGatewayPort):
    """Fake gateway that always succeeds by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Payment gateway unavailable"
        self.initiated = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Payment gateway unavailable"):
        """Configure the fake gateway behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def initiate_payment(self, summary: dict) -> dict:
        if not self.should_succeed:
            raise PaymentGatewayUnavailable(self.failure_reason)

        self.initiated.append(summary)
        return {
            "payment_id": f"pay-{uuid4().hex[:12]}",
            "status": "initiated",
        }
