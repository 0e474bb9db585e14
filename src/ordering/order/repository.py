"""Repository for the Order aggregate — lookups used by the read side and handlers."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.errors import OrderNotFoundError
from ordering.order.order import Order
from ordering.utils.query import iter_all


@ordering.repository(part_of=Order)
class OrderRepository:
    def get_order(self, order_id) -> Order:
        """Load an order, translating a miss into ORDER_NOT_FOUND."""
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise OrderNotFoundError(str(order_id)) from None

    def page_for_buyer(self, buyer_id, page=1, limit=20):
        """Return one page of a buyer's orders, newest first, and the total count."""
        result = (
            self._dao.query.filter(buyer_id=str(buyer_id))
            .order_by("-created_at")
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return result.items, result.total

    def created_between(self, start=None, end=None):
        """Yield every order created inside the inclusive [start, end] window."""
        criteria = {}
        if start is not None:
            criteria["created_at__gte"] = start
        if end is not None:
            criteria["created_at__lte"] = end
        yield from iter_all(self._dao.query.filter(**criteria))
