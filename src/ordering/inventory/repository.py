"""Repository for the Product aggregate.

Two units of work could both read the same ``quantity_available`` and
jointly oversell. Every stock write goes through ``save_stock``, which
persists the aggregate under Protean's version check: the write only lands
if the stored version is still the one this unit of work loaded.
"""

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError

from ordering.domain import ordering
from ordering.errors import ProductNotFoundError, StockConflict
from ordering.inventory.product import Product

logger = structlog.get_logger(__name__)


@ordering.repository(part_of=Product)
class ProductRepository:
    def get_product(self, product_id) -> Product:
        """Load a product, translating a miss into PRODUCT_NOT_FOUND."""
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            raise ProductNotFoundError(str(product_id)) from None

    def find_product(self, product_id) -> Product | None:
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            return None

    def save_stock(self, product: Product) -> None:
        """Persist the product's stock counters if nobody wrote them since it was loaded.

        Raises StockConflict when the stored version already moved on. Inside a
        unit of work the same conflict may only surface at commit, as Protean's
        ExpectedVersionError.
        """
        expected_version = product._version
        try:
            self.add(product)
        except ExpectedVersionError:
            logger.warning(
                "Stale stock write rejected",
                product_id=str(product.id),
                expected_version=expected_version,
            )
            raise StockConflict(str(product.id), expected_version) from None
