"""Read-side views of orders.

Views are plain dicts composed from the aggregate; queries never write.
"""

import math

from protean.utils.globals import current_domain

from ordering.errors import UnauthorizedError
from ordering.order.order import Order


def _iso(value):
    return value.isoformat() if value else None


def _address(address):
    return address.to_dict() if address else None


def item_view(item) -> dict:
    return {
        "id": str(item.id),
        "product_id": str(item.product_id),
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "subtotal": item.subtotal,
        "tax_per_unit": item.tax_per_unit,
        "fulfillment_status": item.fulfillment_status,
    }


def order_view(order: Order) -> dict:
    """Full order view with line items."""
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "buyer_id": str(order.buyer_id),
        "seller_id": str(order.seller_id) if order.seller_id else None,
        "subtotal": order.subtotal,
        "tax_amount": order.tax_amount,
        "discount_amount": order.discount_amount,
        "shipping_cost": order.shipping_cost,
        "total_amount": order.total_amount,
        "status": order.status,
        "payment_status": order.payment_status,
        "items": [item_view(item) for item in order.items],
        "shipping_address": _address(order.shipping_address),
        "billing_address": _address(order.billing_address),
        "customer_notes": order.customer_notes,
        "admin_notes": order.admin_notes,
        "tracking_number": order.tracking_number,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }


def summary_view(order: Order) -> dict:
    """The order summary handed to the payment and invoice collaborators."""
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "total_amount": order.total_amount,
        "status": order.status,
        "buyer_id": str(order.buyer_id),
        "items": [
            {
                "product_id": str(item.product_id),
                "product_name": item.product_name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "subtotal": item.subtotal,
            }
            for item in order.items
        ],
        "shipping_address": _address(order.shipping_address),
        "created_at": _iso(order.created_at),
    }


def _load_for(order_id, requester_id=None) -> Order:
    order = current_domain.repository_for(Order).get_order(order_id)
    if requester_id is not None and str(requester_id) != str(order.buyer_id):
        raise UnauthorizedError(str(order_id))
    return order


def get_order(order_id, requester_id=None) -> dict:
    return order_view(_load_for(order_id, requester_id))


def track_order(order_id, requester_id=None) -> dict:
    order = _load_for(order_id, requester_id)
    return {
        "order_number": order.order_number,
        "status": order.status,
        "tracking_number": order.tracking_number,
        "shipping_address": _address(order.shipping_address),
        "timeline": {
            "ordered_at": _iso(order.created_at),
            "last_update": _iso(order.updated_at),
        },
    }


def list_buyer_orders(buyer_id, page=1, limit=20) -> dict:
    """A buyer's orders, newest first, one page at a time."""
    orders, total = current_domain.repository_for(Order).page_for_buyer(buyer_id, page=page, limit=limit)
    return {
        "orders": [order_view(order) for order in orders],
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit) if total else 0,
        },
    }
