"""Order service — the entry point upstream request handlers call.

The service is a thin layer over the domain:

    1. Fast-fail checks on the raw request (no unit of work is opened)
    2. Synchronous command dispatch; each handler runs in its own unit of work
    3. Bounded retry of placement and cancellation when a versioned write loses
    4. Post-commit collaborators (payment initiation, invoicing), whose
       failures are logged and never undo the committed order
    5. Translation of unexpected failures into INTERNAL_ERROR

Usage:
    service = OrderService()
    result = service.create_order(buyer_id, {"items": [...], "shipping_address": {...}})
"""

import json
import os
from contextlib import contextmanager

import structlog
from protean.exceptions import ExpectedVersionError, ValidationError
from protean.utils.globals import current_domain

from ordering.cart.cart import CartItem
from ordering.cart.items import AddToCart
from ordering.errors import (
    ConcurrentModificationError,
    InternalError,
    InvalidRequestError,
    NoAddressError,
    NoItemsError,
    OrderingError,
    StockConflict,
)
from ordering.inventory.product import Product
from ordering.inventory.registration import RegisterProduct
from ordering.invoicing import get_invoicer
from ordering.order import stats, views
from ordering.order.abort import abort_scope
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order, PaymentStatus
from ordering.order.payment import RecordPaymentStatus
from ordering.order.status import UpdateOrderStatus
from ordering.payment_gateway import get_payment_gateway

logger = structlog.get_logger(__name__)

DEFAULT_STOCK_RETRY_ATTEMPTS = 3

_ADDRESS_FIELDS = ("street", "city", "state", "postal_code", "country")
_REQUIRED_ADDRESS_FIELDS = ("street", "city", "postal_code", "country")


def _invalid_request(exc: ValidationError) -> InvalidRequestError:
    messages = getattr(exc, "messages", None) or {}
    if isinstance(messages, dict) and messages:
        field, reasons = next(iter(messages.items()))
        reason = reasons[0] if isinstance(reasons, list) and reasons else str(reasons)
        return InvalidRequestError(field, str(reason))
    return InvalidRequestError("request", str(exc))


def _normalize_address(field, address):
    if not isinstance(address, dict):
        raise InvalidRequestError(field, "must be an object")
    missing = [name for name in _REQUIRED_ADDRESS_FIELDS if not address.get(name)]
    if missing:
        raise InvalidRequestError(field, f"missing {', '.join(missing)}")
    return {name: address.get(name) for name in _ADDRESS_FIELDS}


def _is_whole(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _normalize_items(items):
    normalized = []
    for position, item in enumerate(items):
        if not isinstance(item, dict) or not item.get("product_id"):
            raise InvalidRequestError(f"items[{position}].product_id", "is required")
        quantity = item.get("quantity")
        if not _is_whole(quantity) or quantity < 1:
            raise InvalidRequestError(f"items[{position}].quantity", "must be a whole number of at least 1")
        normalized.append({"product_id": str(item["product_id"]), "quantity": quantity})
    return normalized


def _non_negative(field, value):
    if value is None:
        return 0.0
    if not _is_number(value):
        raise InvalidRequestError(field, "must be a number")
    if value < 0:
        raise InvalidRequestError(field, "must not be negative")
    return float(value)


class OrderService:
    def __init__(self, retry_attempts: int | None = None):
        if retry_attempts is None:
            retry_attempts = int(os.environ.get("ORDERING_STOCK_RETRY_ATTEMPTS", DEFAULT_STOCK_RETRY_ATTEMPTS))
        self.retry_attempts = max(1, retry_attempts)

    # -------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------
    def _dispatch(self, command):
        return current_domain.process(command, asynchronous=False)

    @contextmanager
    def _guard(self, operation, **context):
        """Let domain errors through; translate everything else."""
        try:
            yield
        except OrderingError:
            raise
        except ValidationError as exc:
            raise _invalid_request(exc) from exc
        except ExpectedVersionError as exc:
            logger.warning("Stale order write rejected", operation=operation, **context)
            raise ConcurrentModificationError("Order") from exc
        except Exception as exc:
            logger.exception("Unexpected failure", operation=operation, **context)
            raise InternalError(operation) from exc

    # -------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------
    def create_order(self, buyer_id, request: dict, abort_signal=None) -> dict:
        """Place an order from a purchase request.

        Args:
            buyer_id: The buyer placing the order.
            request: Dict with ``items`` (list of {product_id, quantity}),
                ``shipping_address``, and optionally ``billing_address``,
                ``notes``, ``discount_amount``, ``shipping_cost``, ``seller_id``.
            abort_signal: Optional ``threading.Event``; when set before the
                order commits, placement fails with ORDER_ABORTED and
                nothing is persisted.

        Returns:
            dict with order_id, order_number, total_amount, status, created_at
        """
        items = request.get("items") or []
        if not items:
            raise NoItemsError()
        if not request.get("shipping_address"):
            raise NoAddressError()

        items = _normalize_items(items)
        shipping_address = _normalize_address("shipping_address", request["shipping_address"])
        billing_address = request.get("billing_address")
        if billing_address:
            billing_address = _normalize_address("billing_address", billing_address)

        command_kwargs = {
            "buyer_id": str(buyer_id),
            "items": json.dumps(items),
            "shipping_address": json.dumps(shipping_address),
            "billing_address": json.dumps(billing_address) if billing_address else None,
            "notes": request.get("notes"),
            "discount_amount": _non_negative("discount_amount", request.get("discount_amount")),
            "shipping_cost": _non_negative("shipping_cost", request.get("shipping_cost")),
        }
        if request.get("seller_id"):
            command_kwargs["seller_id"] = str(request["seller_id"])

        with self._guard("create order", buyer_id=str(buyer_id), items=len(items)):
            command = PlaceOrder(**command_kwargs)
            result = self._dispatch_with_retry(
                command,
                resource="Product stock",
                abort_signal=abort_signal,
                buyer_id=command.buyer_id,
            )

        self._initiate_payment(result["order_id"])
        return result

    def _dispatch_with_retry(self, command, resource, abort_signal=None, **context):
        """Re-run `command` in a fresh unit of work each time a versioned write loses."""
        for attempt in range(1, self.retry_attempts + 1):
            try:
                with abort_scope(abort_signal):
                    return self._dispatch(command)
            except (StockConflict, ExpectedVersionError) as exc:
                logger.warning(
                    "Concurrent write lost, retrying",
                    command=command.__class__.__name__,
                    product_id=getattr(exc, "product_id", None),
                    attempt=attempt,
                    max_attempts=self.retry_attempts,
                    **context,
                )

        logger.error(
            "Gave up after repeated concurrent writes",
            command=command.__class__.__name__,
            attempts=self.retry_attempts,
            **context,
        )
        raise ConcurrentModificationError(resource, attempts=self.retry_attempts)

    # -------------------------------------------------------------------
    # Post-commit collaborators
    # -------------------------------------------------------------------
    def _initiate_payment(self, order_id):
        try:
            order = current_domain.repository_for(Order).get_order(order_id)
            response = get_payment_gateway().initiate_payment(views.summary_view(order))
        except Exception:
            logger.exception("Payment initiation failed", order_id=order_id)
            return None

        logger.info(
            "Payment initiated",
            order_id=order_id,
            payment_id=response.get("payment_id"),
            status=response.get("status"),
        )
        return response

    def _generate_invoice(self, order):
        try:
            invoice = get_invoicer().generate_invoice(views.summary_view(order))
        except Exception:
            logger.exception("Invoice generation failed", order_id=str(order.id))
            return None

        logger.info(
            "Invoice generated",
            order_id=str(order.id),
            invoice_number=invoice.get("invoice_number"),
        )
        return invoice

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_order(self, order_id, requester_id=None) -> dict:
        with self._guard("fetch order", order_id=str(order_id)):
            return views.get_order(order_id, requester_id=requester_id)

    def track_order(self, order_id, requester_id=None) -> dict:
        with self._guard("track order", order_id=str(order_id)):
            return views.track_order(order_id, requester_id=requester_id)

    def list_buyer_orders(self, buyer_id, page=1, limit=20) -> dict:
        for field, value in (("page", page), ("limit", limit)):
            if not _is_whole(value) or value < 1:
                raise InvalidRequestError(field, "must be a whole number of at least 1")
        with self._guard("list orders", buyer_id=str(buyer_id)):
            return views.list_buyer_orders(buyer_id, page=page, limit=limit)

    def get_order_stats(self, start_date=None, end_date=None) -> dict:
        with self._guard("compute order statistics"):
            return stats.get_order_stats(start_date=start_date, end_date=end_date)

    # -------------------------------------------------------------------
    # State changes
    # -------------------------------------------------------------------
    def update_order_status(self, order_id, new_status, admin_notes=None, tracking_number=None) -> dict:
        with self._guard("update order status", order_id=str(order_id), new_status=new_status):
            order = self._dispatch(
                UpdateOrderStatus(
                    order_id=str(order_id),
                    new_status=new_status,
                    admin_notes=admin_notes,
                    tracking_number=tracking_number,
                )
            )
        return views.order_view(order)

    def cancel_order(self, order_id, reason=None) -> dict:
        with self._guard("cancel order", order_id=str(order_id)):
            order = self._dispatch_with_retry(
                CancelOrder(order_id=str(order_id), reason=reason),
                resource="Order",
                order_id=str(order_id),
            )
        return views.order_view(order)

    def record_payment_status(self, order_id, payment_status) -> dict:
        with self._guard("record payment status", order_id=str(order_id), payment_status=payment_status):
            previous = current_domain.repository_for(Order).get_order(order_id).payment_status
            order = self._dispatch(RecordPaymentStatus(order_id=str(order_id), payment_status=payment_status))

        if order.payment_status == PaymentStatus.PAID.value and previous != PaymentStatus.PAID.value:
            self._generate_invoice(order)
        return views.order_view(order)

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def add_to_cart(self, buyer_id, product_id, quantity) -> dict:
        if not _is_whole(quantity) or quantity < 1:
            raise InvalidRequestError("quantity", "must be a whole number of at least 1")
        with self._guard("add to cart", buyer_id=str(buyer_id), product_id=str(product_id)):
            current_domain.repository_for(Product).get_product(product_id)
            self._dispatch(AddToCart(buyer_id=str(buyer_id), product_id=str(product_id), quantity=quantity))
            return self._cart_view(buyer_id)

    def get_cart(self, buyer_id) -> dict:
        with self._guard("fetch cart", buyer_id=str(buyer_id)):
            return self._cart_view(buyer_id)

    def _cart_view(self, buyer_id):
        rows = current_domain.repository_for(CartItem).for_buyer(buyer_id)
        return {
            "buyer_id": str(buyer_id),
            "items": [
                {
                    "product_id": str(row.product_id),
                    "quantity": row.quantity,
                    "added_at": row.added_at.isoformat() if row.added_at else None,
                }
                for row in rows
            ],
            "item_count": sum(row.quantity for row in rows),
        }

    # -------------------------------------------------------------------
    # Catalogue sync
    # -------------------------------------------------------------------
    def register_product(
        self,
        name,
        selling_price,
        quantity_available=0,
        tax_rate=0.0,
        seller_id=None,
    ) -> dict:
        with self._guard("register product", name=name):
            product_id = self._dispatch(
                RegisterProduct(
                    name=name,
                    seller_id=seller_id,
                    selling_price=selling_price,
                    tax_rate=tax_rate,
                    quantity_available=quantity_available,
                )
            )
            return self.get_product(product_id)

    def get_product(self, product_id) -> dict:
        with self._guard("fetch product", product_id=str(product_id)):
            product = current_domain.repository_for(Product).get_product(product_id)
        return {
            "product_id": str(product.id),
            "name": product.name,
            "seller_id": str(product.seller_id) if product.seller_id else None,
            "selling_price": product.selling_price,
            "tax_rate": product.tax_rate,
            "quantity_available": product.quantity_available,
            "quantity_sold": product.quantity_sold,
        }
