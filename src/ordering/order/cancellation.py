"""Order cancellation — command and handler.

Cancelling marks the order and puts every reserved unit back on the shelf
in the same unit of work. Products that have since disappeared from the
catalogue are skipped; the cancellation itself still goes through.
"""

from collections import Counter

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.inventory.product import Product
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = Text()


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.cancel(command.reason)

        # Several lines may share a product; restore each product once
        quantities = Counter()
        for item in order.items:
            quantities[str(item.product_id)] += item.quantity

        product_repo = current_domain.repository_for(Product)
        for product_id, quantity in quantities.items():
            product = product_repo.find_product(product_id)
            if product is None:
                logger.warning(
                    "Skipping stock restore for missing product",
                    order_id=str(order.id),
                    product_id=product_id,
                    quantity=quantity,
                )
                continue

            product.restore(quantity)
            product_repo.save_stock(product)

        repo.add(order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            reason=command.reason,
            products_restored=len(quantities),
        )
        return order
