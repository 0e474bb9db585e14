"""Tests for Product stock reservation and restoration."""

import pytest
from ordering.errors import InsufficientInventoryError, InvalidRequestError
from ordering.inventory.product import Product


def _product(stock=5):
    return Product.create(name="Kettle", selling_price=30.0, quantity_available=stock)


class TestReserve:
    def test_moves_units_from_available_to_sold(self):
        product = _product(stock=5)
        product.reserve(3)
        assert product.quantity_available == 2
        assert product.quantity_sold == 3

    def test_whole_stock_can_be_reserved(self):
        product = _product(stock=2)
        product.reserve(2)
        assert product.quantity_available == 0

    def test_insufficient_stock(self):
        product = _product(stock=2)
        with pytest.raises(InsufficientInventoryError) as exc:
            product.reserve(3)
        assert exc.value.details == {
            "product_id": str(product.id),
            "product_name": "Kettle",
            "available": 2,
            "requested": 3,
        }
        assert product.quantity_available == 2
        assert product.quantity_sold == 0

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(InvalidRequestError):
            _product().reserve(quantity)


class TestRestore:
    def test_inverse_of_reserve(self):
        product = _product(stock=5)
        product.reserve(4)
        product.restore(4)
        assert product.quantity_available == 5
        assert product.quantity_sold == 0

    def test_sold_is_floored_at_zero(self):
        product = _product(stock=5)
        product.reserve(1)
        product.restore(3)
        assert product.quantity_available == 7
        assert product.quantity_sold == 0
