"""Product aggregate — the inventory-relevant subset of a catalogue product.

The catalogue owns products; the ordering domain keeps the fields it needs
to price a purchase and protect stock:

    quantity_available: Units that can still be sold (never negative)
    quantity_sold:      Units sold; only compensation decrements it

Concurrent stock writes are guarded by the aggregate's own version (see
ProductRepository.save_stock).
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering
from ordering.errors import InsufficientInventoryError, InvalidRequestError


@ordering.aggregate
class Product:
    name = String(required=True, max_length=255)
    seller_id = Identifier()
    selling_price = Float(required=True, min_value=0.0)
    tax_rate = Float(default=0.0, min_value=0.0)  # Percent, e.g. 18.0
    quantity_available = Integer(default=0, min_value=0)
    quantity_sold = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, selling_price, quantity_available=0, tax_rate=0.0, seller_id=None):
        now = datetime.now(UTC)
        return cls(
            name=name,
            seller_id=seller_id,
            selling_price=selling_price,
            tax_rate=tax_rate or 0.0,
            quantity_available=quantity_available,
            quantity_sold=0,
            created_at=now,
            updated_at=now,
        )

    def reserve(self, quantity):
        """Take `quantity` units out of available stock for an order."""
        if quantity is None or quantity < 1:
            raise InvalidRequestError("quantity", "must be at least 1")

        if self.quantity_available < quantity:
            raise InsufficientInventoryError(
                product_id=str(self.id),
                product_name=self.name,
                available=self.quantity_available,
                requested=quantity,
            )

        self.quantity_available -= quantity
        self.quantity_sold += quantity
        self.updated_at = datetime.now(UTC)

    def restore(self, quantity):
        """Return `quantity` units to available stock (inverse of reserve)."""
        self.quantity_available += quantity
        self.quantity_sold = max(0, self.quantity_sold - quantity)
        self.updated_at = datetime.now(UTC)
