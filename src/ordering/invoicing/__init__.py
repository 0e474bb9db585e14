"""Invoice generation abstraction — invoked once an order is paid."""

import os

_invoicer_instance = None


def get_invoicer():
    """Return the configured invoice adapter (singleton).

    Uses FakeInvoicer by default; configure via INVOICE_ADAPTER.
    """
    global _invoicer_instance
    if _invoicer_instance is None:
        adapter = os.environ.get("INVOICE_ADAPTER", "fake")
        if adapter == "fake":
            from ordering.invoicing.fake_invoicer import FakeInvoicer

            _invoicer_instance = FakeInvoicer()
        else:
            raise ValueError(f"Unknown invoice adapter: {adapter}")
    return _invoicer_instance


def reset_invoicer():
    global _invoicer_instance
    _invoicer_instance = None
