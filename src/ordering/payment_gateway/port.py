"""Payment gateway port — the interface payment providers are adapted to."""

from abc import ABC, abstractmethod


class PaymentGatewayPort(ABC):
    @abstractmethod
    def initiate_payment(self, summary: dict) -> dict:
        """Start collecting payment for a committed order.

        Args:
            summary: Order summary with order_id, order_number, total_amount,
                status, buyer_id, items, shipping_address and created_at.

        Returns:
            dict with keys: payment_id, status
        """
        ...
