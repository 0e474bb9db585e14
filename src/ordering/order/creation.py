"""Order placement — command and handler.

Placement is one unit of work: price and reserve every line, create the
order with its items, write each product's stock back under its version, then
clear the buyer's cart. Any failure before commit leaves products, orders
and cart exactly as they were.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import CartItem
from ordering.domain import ordering
from ordering.errors import InvalidRequestError, NoAddressError, NoItemsError
from ordering.inventory.product import Product
from ordering.order.abort import raise_if_aborted
from ordering.order.numbering import generate_order_number
from ordering.order.order import Order
from ordering.order.pricing import price_line, total_order

logger = structlog.get_logger(__name__)


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


@ordering.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping_address = Text(required=True)  # JSON: address dict
    billing_address = Text()  # JSON: address dict, defaults to shipping
    notes = Text()
    discount_amount = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    seller_id = Identifier()


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items = _loads(command.items) or []
        shipping_address = _loads(command.shipping_address)
        billing_address = _loads(command.billing_address) if command.billing_address else None

        if not items:
            raise NoItemsError()
        if not shipping_address:
            raise NoAddressError()

        raise_if_aborted()

        product_repo = current_domain.repository_for(Product)

        # Repeated product ids reserve cumulatively against a single read
        reserved = {}
        lines = []
        for item in items:
            product_id = str(item["product_id"])
            if product_id not in reserved:
                reserved[product_id] = product_repo.get_product(product_id)
            product = reserved[product_id]

            product.reserve(item["quantity"])
            lines.append(price_line(product, item["quantity"]))

        pricing = total_order(
            lines,
            shipping_cost=command.shipping_cost,
            discount_amount=command.discount_amount,
        )
        if pricing.total_amount < 0:
            raise InvalidRequestError("discount_amount", "exceeds the order amount")

        first_product = next(iter(reserved.values()))
        seller_id = command.seller_id or first_product.seller_id

        order = Order.place(
            order_number=generate_order_number(),
            buyer_id=command.buyer_id,
            seller_id=seller_id,
            pricing=pricing,
            shipping_address=shipping_address,
            billing_address=billing_address,
            customer_notes=command.notes,
        )

        raise_if_aborted()

        for product in reserved.values():
            product_repo.save_stock(product)

        current_domain.repository_for(Order).add(order)
        cleared = current_domain.repository_for(CartItem).clear_for_buyer(command.buyer_id)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            buyer_id=str(command.buyer_id),
            items=len(lines),
            total_amount=order.total_amount,
            cart_rows_cleared=cleared,
        )

        return {
            "order_id": str(order.id),
            "order_number": order.order_number,
            "total_amount": order.total_amount,
            "status": order.status,
            "created_at": order.created_at.isoformat(),
        }
