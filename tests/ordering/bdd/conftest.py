"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.errors import OrderingError
from ordering.inventory.product import Product
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# State containers
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Product ids keyed by product name."""
    return {}


@pytest.fixture()
def placed():
    """The most recently placed order id, if any."""
    return {"order_id": None}


@pytest.fixture()
def error():
    """Container for the error raised by the last When step."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {tax_rate:d}% tax and {stock:d} in stock'))
def _(make_product, products, name, price, tax_rate, stock):
    products[name] = make_product(name=name, price=price, stock=stock, tax_rate=float(tax_rate))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request fails with "{code}"'))
def _(error, code):
    assert isinstance(error["exc"], OrderingError)
    assert error["exc"].code == code


@then(parsers.cfparse('the order is "{status}"'))
def _(service, placed, status):
    assert service.get_order(placed["order_id"])["status"] == status


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).quantity_available == stock


@then("no order exists")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().items == []
