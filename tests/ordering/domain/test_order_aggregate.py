"""Tests for Order placement and its arithmetic invariants."""

import json

import pytest
from ordering.inventory.product import Product
from ordering.order.events import OrderPlaced
from ordering.order.order import FulfillmentStatus, Order, OrderStatus, PaymentStatus
from ordering.order.pricing import price_line, total_order
from protean.exceptions import ValidationError

ADDRESS = {"street": "1 St", "city": "C", "state": "S", "postal_code": "00000", "country": "US"}


def _pricing(shipping_cost=0.0, discount_amount=0.0):
    mug = Product.create(name="Mug", selling_price=10.0, quantity_available=10, tax_rate=10.0)
    plate = Product.create(name="Plate", selling_price=20.0, quantity_available=10)
    return total_order(
        [price_line(mug, 2), price_line(plate, 1)],
        shipping_cost=shipping_cost,
        discount_amount=discount_amount,
    )


def _place(**overrides):
    kwargs = {
        "order_number": "ORD-1-ABCDEF",
        "buyer_id": "buyer-001",
        "seller_id": "seller-001",
        "pricing": _pricing(),
        "shipping_address": ADDRESS,
    }
    kwargs.update(overrides)
    return Order.place(**kwargs)


class TestOrderPlace:
    def test_new_order_is_pending(self):
        order = _place()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value

    def test_carries_pricing(self):
        order = _place(pricing=_pricing(shipping_cost=4.0, discount_amount=1.0))
        assert order.subtotal == 40.0
        assert order.tax_amount == 2.0
        assert order.shipping_cost == 4.0
        assert order.discount_amount == 1.0
        assert order.total_amount == 45.0

    def test_one_item_per_line(self):
        order = _place()
        assert len(order.items) == 2
        names = sorted(item.product_name for item in order.items)
        assert names == ["Mug", "Plate"]

    def test_items_snapshot_price_and_tax(self):
        order = _place()
        mug = next(item for item in order.items if item.product_name == "Mug")
        assert mug.unit_price == 10.0
        assert mug.subtotal == 20.0
        assert mug.tax_per_unit == 1.0
        assert mug.fulfillment_status == FulfillmentStatus.PENDING.value

    def test_billing_defaults_to_shipping(self):
        order = _place()
        assert order.billing_address.street == ADDRESS["street"]
        assert order.billing_address.postal_code == ADDRESS["postal_code"]

    def test_explicit_billing_address(self):
        billing = dict(ADDRESS, street="9 Other Rd")
        order = _place(billing_address=billing)
        assert order.billing_address.street == "9 Other Rd"
        assert order.shipping_address.street == "1 St"

    def test_raises_order_placed(self):
        order = _place()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_number == "ORD-1-ABCDEF"
        assert event.total_amount == 42.0
        assert len(json.loads(event.items)) == 2


class TestOrderInvariants:
    def test_total_must_match_components(self):
        with pytest.raises(ValidationError) as exc:
            Order(
                order_number="ORD-2-ABCDEF",
                buyer_id="buyer-001",
                subtotal=10.0,
                tax_amount=1.0,
                total_amount=50.0,
            )
        assert "total_amount" in exc.value.messages

    def test_total_within_tolerance_is_accepted(self):
        order = Order(
            order_number="ORD-3-ABCDEF",
            buyer_id="buyer-001",
            subtotal=10.0,
            tax_amount=1.0,
            total_amount=11.005,
        )
        assert order.total_amount == 11.005

    def test_address_requires_street(self):
        with pytest.raises(ValidationError):
            _place(shipping_address={k: v for k, v in ADDRESS.items() if k != "street"})
