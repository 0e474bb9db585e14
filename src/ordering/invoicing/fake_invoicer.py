"""Fake invoicer — numbers invoices sequentially and keeps them in memory."""

from ordering.invoicing.port import InvoicePort


class InvoiceGenerationFailed(Exception):
    pass


class FakeInvoicer(InvoicePort):
    def __init__(self):
        self.should_succeed = True
        self.invoices = []

    def configure(self, should_succeed: bool = True):
        self.should_succeed = should_succeed

    def generate_invoice(self, summary: dict) -> dict:
        if not self.should_succeed:
            raise InvoiceGenerationFailed(f"Could not render invoice for {summary['order_number']}")

        invoice = {
            "invoice_number": f"INV-{len(self.invoices) + 1:06d}",
            "order_number": summary["order_number"],
        }
        self.invoices.append(invoice)
        return invoice
