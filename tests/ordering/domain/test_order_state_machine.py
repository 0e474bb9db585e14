"""Tests for Order status transitions, cancellation rules and payment status."""

import pytest
from ordering.errors import CannotCancelError, InvalidPaymentStatusError, InvalidStatusTransitionError
from ordering.inventory.product import Product
from ordering.order.events import OrderCancelled, OrderStatusChanged, PaymentStatusRecorded
from ordering.order.order import Order, OrderStatus, allowed_transitions
from ordering.order.pricing import price_line, total_order

ADDRESS = {"street": "1 St", "city": "C", "state": "S", "postal_code": "00000", "country": "US"}

# Shortest path from pending to each status
_PATHS = {
    "pending": [],
    "confirmed": ["confirmed"],
    "processing": ["confirmed", "processing"],
    "shipped": ["confirmed", "processing", "shipped"],
    "delivered": ["confirmed", "processing", "shipped", "delivered"],
    "returned": ["confirmed", "processing", "shipped", "delivered", "returned"],
    "cancelled": ["cancelled"],
}


def _order_at(status):
    product = Product.create(name="Lamp", selling_price=25.0, quantity_available=5)
    order = Order.place(
        order_number="ORD-1-000001",
        buyer_id="buyer-001",
        seller_id="seller-001",
        pricing=total_order([price_line(product, 1)]),
        shipping_address=ADDRESS,
    )
    for step in _PATHS[status]:
        order.transition_to(step)
    order._events.clear()
    return order


class TestValidTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            ("pending", "confirmed"),
            ("pending", "cancelled"),
            ("confirmed", "processing"),
            ("confirmed", "cancelled"),
            ("processing", "shipped"),
            ("processing", "cancelled"),
            ("shipped", "delivered"),
            ("delivered", "returned"),
        ],
    )
    def test_transition(self, current, target):
        order = _order_at(current)
        order.transition_to(target)
        assert order.status == target

    def test_transition_raises_event(self):
        order = _order_at("pending")
        order.transition_to("confirmed")
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "pending"
        assert event.new_status == "confirmed"

    def test_admin_notes_recorded(self):
        order = _order_at("pending")
        order.transition_to("confirmed", admin_notes="Verified by phone")
        assert order.admin_notes == "Verified by phone"

    def test_tracking_number_recorded_when_shipped(self):
        order = _order_at("processing")
        order.transition_to("shipped", tracking_number="1Z999")
        assert order.tracking_number == "1Z999"

    def test_tracking_number_ignored_for_other_states(self):
        order = _order_at("pending")
        order.transition_to("confirmed", tracking_number="1Z999")
        assert order.tracking_number is None


class TestInvalidTransitions:
    @pytest.mark.parametrize(
        "current, target",
        [
            ("pending", "shipped"),
            ("pending", "delivered"),
            ("confirmed", "pending"),
            ("shipped", "cancelled"),
            ("delivered", "cancelled"),
            ("cancelled", "confirmed"),
            ("returned", "delivered"),
        ],
    )
    def test_rejected_and_status_unchanged(self, current, target):
        order = _order_at(current)
        with pytest.raises(InvalidStatusTransitionError) as exc:
            order.transition_to(target)
        assert exc.value.details == {"current_status": current, "requested_status": target}
        assert order.status == current
        assert order._events == []

    def test_unknown_status(self):
        order = _order_at("pending")
        with pytest.raises(InvalidStatusTransitionError) as exc:
            order.transition_to("teleported")
        assert exc.value.requested == "teleported"
        assert order.status == "pending"

    def test_terminal_states_allow_nothing(self):
        assert allowed_transitions(OrderStatus.CANCELLED.value) == set()
        assert allowed_transitions(OrderStatus.RETURNED.value) == set()


class TestCancel:
    @pytest.mark.parametrize("status", ["pending", "confirmed", "processing"])
    def test_cancellable_states(self, status):
        order = _order_at(status)
        order.cancel("Changed my mind")
        assert order.status == "cancelled"
        assert order.admin_notes == "Cancelled: Changed my mind"

    @pytest.mark.parametrize("status", ["shipped", "delivered", "cancelled", "returned"])
    def test_non_cancellable_states(self, status):
        order = _order_at(status)
        with pytest.raises(CannotCancelError) as exc:
            order.cancel("Too late")
        assert exc.value.details == {"current_status": status}
        assert order.status == status

    def test_cancel_without_reason(self):
        order = _order_at("pending")
        order.cancel(None)
        assert order.admin_notes == "Cancelled"

    def test_cancel_raises_event_with_items(self):
        order = _order_at("confirmed")
        order.cancel("Duplicate")
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.previous_status == "confirmed"
        assert event.reason == "Duplicate"


class TestPaymentStatus:
    @pytest.mark.parametrize("payment_status", ["pending", "paid", "failed", "refunded"])
    def test_known_values(self, payment_status):
        order = _order_at("pending")
        order.record_payment_status(payment_status)
        assert order.payment_status == payment_status

    def test_does_not_move_order_status(self):
        order = _order_at("confirmed")
        order.record_payment_status("paid")
        assert order.status == "confirmed"

    def test_raises_event(self):
        order = _order_at("pending")
        order.record_payment_status("paid")
        event = order._events[-1]
        assert isinstance(event, PaymentStatusRecorded)
        assert event.previous_payment_status == "pending"
        assert event.payment_status == "paid"

    def test_unknown_value(self):
        order = _order_at("pending")
        with pytest.raises(InvalidPaymentStatusError):
            order.record_payment_status("bounced")
        assert order.payment_status == "pending"
