"""Invoice port — renders and delivers the invoice of a paid order."""

from abc import ABC, abstractmethod


class InvoicePort(ABC):
    @abstractmethod
    def generate_invoice(self, summary: dict) -> dict:
        """Produce the invoice for a paid order.

        Returns:
            dict with keys: invoice_number, order_number
        """
        ...
