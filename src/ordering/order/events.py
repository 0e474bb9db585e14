"""Domain events for the Order aggregate.

All events are versioned, immutable facts representing state changes.
They are published when the unit of work that raised them commits, so a
rolled-back placement or cancellation never emits anything.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """An order was created and its inventory reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier()
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along the status state machine."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled and its reserved inventory restored."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = Text()
    items = Text(required=True)  # JSON: list of {product_id, quantity} restored
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentStatusRecorded:
    """The payment collaborator reported a new payment status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_payment_status = String()
    payment_status = String(required=True)
    recorded_at = DateTime(required=True)
