"""Application tests for order retrieval, tracking and buyer order history."""

import pytest
from ordering.errors import InvalidRequestError, OrderNotFoundError, UnauthorizedError


@pytest.fixture()
def order(make_product, place_order):
    product_id = make_product(name="Teapot", price=24.0, stock=10, tax_rate=5.0)
    return place_order([(product_id, 2)], notes="Gift wrap please")


class TestGetOrder:
    def test_view_contains_order_and_items(self, service, order):
        view = service.get_order(order["order_id"])

        assert view["order_number"] == order["order_number"]
        assert view["buyer_id"] == "buyer-001"
        assert view["subtotal"] == 48.0
        assert view["tax_amount"] == 2.4
        assert view["total_amount"] == 50.4
        assert view["customer_notes"] == "Gift wrap please"
        assert view["shipping_address"]["city"] == "Springfield"
        assert view["billing_address"] == view["shipping_address"]
        assert len(view["items"]) == 1
        assert view["items"][0]["product_name"] == "Teapot"
        assert view["items"][0]["tax_per_unit"] == 1.2

    def test_owner_may_read(self, service, order):
        view = service.get_order(order["order_id"], requester_id="buyer-001")
        assert view["order_id"] == order["order_id"]

    def test_other_buyer_is_unauthorized(self, service, order):
        with pytest.raises(UnauthorizedError):
            service.get_order(order["order_id"], requester_id="buyer-999")

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFoundError):
            service.get_order("no-such-order")


class TestTrackOrder:
    def test_tracking_view(self, service, order):
        service.update_order_status(order["order_id"], "confirmed")
        service.update_order_status(order["order_id"], "processing")
        service.update_order_status(order["order_id"], "shipped", tracking_number="TRK-42")

        tracking = service.track_order(order["order_id"], requester_id="buyer-001")

        assert tracking["order_number"] == order["order_number"]
        assert tracking["status"] == "shipped"
        assert tracking["tracking_number"] == "TRK-42"
        assert tracking["timeline"]["ordered_at"] == order["created_at"]
        assert tracking["timeline"]["last_update"] >= tracking["timeline"]["ordered_at"]

    def test_other_buyer_is_unauthorized(self, service, order):
        with pytest.raises(UnauthorizedError):
            service.track_order(order["order_id"], requester_id="buyer-999")


class TestListBuyerOrders:
    def test_pagination(self, service, make_product, place_order):
        product_id = make_product(stock=10)
        placed = [place_order([(product_id, 1)])["order_id"] for _ in range(3)]
        place_order([(product_id, 1)], buyer_id="buyer-002")

        first_page = service.list_buyer_orders("buyer-001", page=1, limit=2)
        second_page = service.list_buyer_orders("buyer-001", page=2, limit=2)

        assert first_page["pagination"] == {"total": 3, "page": 1, "limit": 2, "pages": 2}
        assert len(first_page["orders"]) == 2
        assert len(second_page["orders"]) == 1
        listed = [o["order_id"] for o in first_page["orders"] + second_page["orders"]]
        assert listed == list(reversed(placed))

    def test_buyer_without_orders(self, service):
        result = service.list_buyer_orders("nobody")
        assert result["orders"] == []
        assert result["pagination"] == {"total": 0, "page": 1, "limit": 20, "pages": 0}

    def test_page_must_be_positive(self, service):
        with pytest.raises(InvalidRequestError):
            service.list_buyer_orders("buyer-001", page=0)

    def test_limit_must_be_a_whole_number(self, service):
        with pytest.raises(InvalidRequestError) as exc:
            service.list_buyer_orders("buyer-001", limit="10")
        assert exc.value.details["field"] == "limit"
