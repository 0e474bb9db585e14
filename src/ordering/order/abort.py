"""Abort signal for in-flight order placement.

The caller of ``create_order`` may pass a ``threading.Event`` that is set
when the client goes away. The placement handler checks it at its
checkpoints; a set signal raises ORDER_ABORTED inside the unit of work,
which rolls everything back.
"""

from contextlib import contextmanager
from contextvars import ContextVar

from ordering.errors import OrderAbortedError

_abort_signal: ContextVar = ContextVar("order_abort_signal", default=None)


@contextmanager
def abort_scope(signal):
    token = _abort_signal.set(signal)
    try:
        yield
    finally:
        _abort_signal.reset(token)


def raise_if_aborted():
    signal = _abort_signal.get()
    if signal is not None and signal.is_set():
        raise OrderAbortedError()
