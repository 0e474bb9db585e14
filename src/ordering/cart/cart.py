"""Cart rows — one row per product a buyer intends to purchase.

The cart is keyed by buyer id. Placing an order consumes the buyer's rows:
the orchestrator deletes them in the same unit of work that persists the
order, so a committed order never leaves a stale cart behind.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer

from ordering.domain import ordering
from ordering.utils.query import iter_all


@ordering.aggregate
class CartItem:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, buyer_id, product_id, quantity):
        now = datetime.now(UTC)
        return cls(
            buyer_id=buyer_id,
            product_id=product_id,
            quantity=quantity,
            added_at=now,
            updated_at=now,
        )

    def increase(self, quantity):
        self.quantity += quantity
        self.updated_at = datetime.now(UTC)


@ordering.repository(part_of=CartItem)
class CartItemRepository:
    def for_buyer(self, buyer_id) -> list[CartItem]:
        rows = list(iter_all(self._dao.query.filter(buyer_id=str(buyer_id))))
        return sorted(rows, key=lambda row: row.added_at)

    def find_row(self, buyer_id, product_id) -> CartItem | None:
        rows = self._dao.query.filter(buyer_id=str(buyer_id), product_id=str(product_id)).all().items
        return rows[0] if rows else None

    def clear_for_buyer(self, buyer_id) -> int:
        """Delete every cart row of the buyer. Returns the number of rows removed."""
        rows = self.for_buyer(buyer_id)
        for row in rows:
            self._dao.delete(row)
        return len(rows)
