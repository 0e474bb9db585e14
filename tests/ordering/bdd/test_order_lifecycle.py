"""BDD tests for the order lifecycle."""

from ordering.errors import OrderingError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/order_lifecycle.feature")


def _order(place_order, products, first_qty, first, second_qty, second):
    return place_order([(products[first], first_qty), (products[second], second_qty)])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the buyer has ordered {first_qty:d} "{first}" and {second_qty:d} "{second}"'))
def _(place_order, products, placed, first_qty, first, second_qty, second):
    placed["order_id"] = _order(place_order, products, first_qty, first, second_qty, second)["order_id"]


@given(parsers.cfparse('the order has moved through "{statuses}"'))
def _(service, placed, statuses):
    for status in statuses.split(","):
        service.update_order_status(placed["order_id"], status.strip())


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the buyer orders {first_qty:d} "{first}" and {second_qty:d} "{second}"'))
def _(place_order, products, placed, error, first_qty, first, second_qty, second):
    try:
        placed["order_id"] = _order(place_order, products, first_qty, first, second_qty, second)["order_id"]
    except OrderingError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the order is moved to "{status}"'))
def _(service, placed, error, status):
    try:
        service.update_order_status(placed["order_id"], status)
    except OrderingError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the order is cancelled because "{reason}"'))
def _(service, placed, error, reason):
    try:
        service.cancel_order(placed["order_id"], reason)
    except OrderingError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order subtotal is {subtotal:f}, tax {tax:f} and total {total:f}"))
def _(service, placed, subtotal, tax, total):
    view = service.get_order(placed["order_id"])
    assert view["subtotal"] == subtotal
    assert view["tax_amount"] == tax
    assert view["total_amount"] == total
