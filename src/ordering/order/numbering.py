"""Order number generation.

Format: ``ORD-<epoch milliseconds>-<6 upper-case hex characters>``. The time
prefix keeps numbers roughly sortable; the random suffix separates orders
placed in the same millisecond. The ``unique`` constraint on
``Order.order_number`` rejects the rare collision.
"""

import secrets
import time


def generate_order_number(now_ms=None):
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"ORD-{now_ms}-{secrets.token_hex(3).upper()}"
