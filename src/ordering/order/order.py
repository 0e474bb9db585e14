"""Order aggregate — the core of the ordering domain.

An Order is created once, atomically, together with its line items, and is
never deleted. After creation it changes only through status transitions,
payment status updates recorded by the payment collaborator, or
cancellation.

State Machine (7 states):
    pending → confirmed → processing → shipped → delivered → returned
    cancelled (from pending, confirmed, processing)

Line items snapshot the product name and unit price at creation time, so
later catalogue edits never change a historical order.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.errors import (
    CannotCancelError,
    InvalidPaymentStatusError,
    InvalidStatusTransitionError,
)
from ordering.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusRecorded,
)

# Monetary rounding tolerance for the arithmetic invariants
AMOUNT_TOLERANCE = 0.01


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class FulfillmentStatus(Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    RETURNED = "returned"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.RETURNED: set(),  # Terminal
}

# States from which cancellation (with stock restoration) is forbidden
_NON_CANCELLABLE_STATES = {
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
    OrderStatus.RETURNED,
}


def allowed_transitions(status):
    """Return the statuses reachable from `status` in one step."""
    return {s.value for s in _VALID_TRANSITIONS.get(OrderStatus(status), set())}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Address:
    """A delivery or billing address captured at checkout time.

    Once recorded on an Order, the address is immutable — it represents where
    the order was shipped, regardless of later changes to the buyer's address book.
    """

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item: a product snapshot and the quantity bought.

    `product_name` and `unit_price` are copied from the product when the
    order is placed. The fulfillment status is tracked per line, independent
    of the order's own state machine.
    """

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)
    tax_per_unit = Float(default=0.0)
    fulfillment_status = String(
        choices=FulfillmentStatus,
        default=FulfillmentStatus.PENDING.value,
    )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier()
    subtotal = Float(default=0.0)
    tax_amount = Float(default=0.0)
    discount_amount = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    total_amount = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(Address)
    billing_address = ValueObject(Address)
    customer_notes = Text()
    admin_notes = Text()
    tracking_number = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_components(self):
        expected = (
            (self.subtotal or 0.0)
            + (self.tax_amount or 0.0)
            + (self.shipping_cost or 0.0)
            - (self.discount_amount or 0.0)
        )
        if abs((self.total_amount or 0.0) - expected) > AMOUNT_TOLERANCE:
            raise ValidationError(
                {"total_amount": [f"Total {self.total_amount} does not match its components ({expected:.2f})"]}
            )

    @invariant.post
    def line_subtotals_must_add_up(self):
        if not self.items:
            return
        lines_total = sum(item.subtotal for item in self.items)
        if abs(lines_total - (self.subtotal or 0.0)) > AMOUNT_TOLERANCE:
            raise ValidationError({"subtotal": [f"Line items add up to {lines_total:.2f}, not {self.subtotal}"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        buyer_id,
        seller_id,
        pricing,
        shipping_address,
        billing_address=None,
        customer_notes=None,
    ):
        """Create a pending order from priced line items.

        Args:
            order_number: Unique, human-facing order number.
            buyer_id: The buyer placing the order.
            seller_id: The seller fulfilling the order.
            pricing: An ``OrderPricing`` with the priced lines and totals.
            shipping_address: Dict with street, city, state, postal_code, country.
            billing_address: Same shape; defaults to the shipping address.
            customer_notes: Free text from the buyer.
        """
        now = datetime.now(UTC)
        billing_address = billing_address or shipping_address

        order = cls(
            order_number=order_number,
            buyer_id=buyer_id,
            seller_id=seller_id,
            subtotal=pricing.subtotal,
            tax_amount=pricing.tax_amount,
            discount_amount=pricing.discount_amount,
            shipping_cost=pricing.shipping_cost,
            total_amount=pricing.total_amount,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            shipping_address=Address(**shipping_address),
            billing_address=Address(**billing_address),
            customer_notes=customer_notes,
            created_at=now,
            updated_at=now,
        )

        with atomic_change(order):
            for line in pricing.lines:
                order.add_items(
                    OrderItem(
                        product_id=line.product_id,
                        product_name=line.product_name,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        subtotal=line.subtotal,
                        tax_per_unit=line.tax_per_unit,
                    )
                )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                buyer_id=str(buyer_id),
                seller_id=str(seller_id) if seller_id else None,
                items=json.dumps(
                    [{"product_id": str(line.product_id), "quantity": line.quantity} for line in pricing.lines]
                ),
                total_amount=pricing.total_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def transition_to(self, new_status, admin_notes=None, tracking_number=None):
        """Move the order to `new_status` if the state machine allows it.

        No inventory side effects: stock is only restored by `cancel()`
        through the cancellation handler.
        """
        current = OrderStatus(self.status)
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidStatusTransitionError(current.value, str(new_status)) from None

        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStatusTransitionError(current.value, target.value)

        self.status = target.value
        if admin_notes:
            self.admin_notes = admin_notes
        if tracking_number and target == OrderStatus.SHIPPED:
            self.tracking_number = tracking_number
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, reason):
        """Cancel the order. The caller is responsible for restoring stock."""
        current = OrderStatus(self.status)
        if current in _NON_CANCELLABLE_STATES:
            raise CannotCancelError(current.value)

        self.status = OrderStatus.CANCELLED.value
        self.admin_notes = f"Cancelled: {reason}" if reason else "Cancelled"
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                reason=reason,
                items=json.dumps(
                    [{"product_id": str(item.product_id), "quantity": item.quantity} for item in self.items]
                ),
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment_status(self, payment_status):
        """Record the payment status reported by the payment collaborator."""
        try:
            target = PaymentStatus(payment_status)
        except ValueError:
            raise InvalidPaymentStatusError(str(payment_status)) from None

        previous = self.payment_status
        self.payment_status = target.value
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            PaymentStatusRecorded(
                order_id=str(self.id),
                previous_payment_status=previous,
                payment_status=target.value,
                recorded_at=now,
            )
        )
