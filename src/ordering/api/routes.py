"""FastAPI routes for the Ordering domain — orders, buyers, carts and products."""

import asyncio
import threading
from datetime import date

from fastapi import APIRouter, Query, Request
from fastapi.concurrency import run_in_threadpool

from ordering.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CreateOrderRequest,
    CreateOrderResponse,
    ErrorResponse,
    RecordPaymentStatusRequest,
    RegisterProductRequest,
    UpdateOrderStatusRequest,
)
from ordering.domain import ordering
from ordering.service import OrderService

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}

DISCONNECT_POLL_SECONDS = 0.05


async def _watch_for_disconnect(request: Request, abort_signal: threading.Event):
    while not abort_signal.is_set():
        if await request.is_disconnected():
            abort_signal.set()
            return
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


def _place_order(buyer_id, payload, abort_signal):
    # Runs on a worker thread; push the domain context there explicitly
    with ordering.domain_context():
        return OrderService().create_order(buyer_id, payload, abort_signal=abort_signal)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=CreateOrderResponse, responses=_ERRORS)
async def create_order(body: CreateOrderRequest, request: Request) -> CreateOrderResponse:
    """Place an order. Placement is abandoned if the client disconnects before commit."""
    payload = body.model_dump(exclude={"buyer_id"})
    abort_signal = threading.Event()
    watcher = asyncio.create_task(_watch_for_disconnect(request, abort_signal))
    try:
        result = await run_in_threadpool(_place_order, body.buyer_id, payload, abort_signal)
    finally:
        watcher.cancel()
    return CreateOrderResponse(**result)


# Declared before /{order_id} so "stats" is not taken for an order id
@order_router.get("/stats")
async def get_order_stats(start_date: date | None = None, end_date: date | None = None) -> dict:
    return OrderService().get_order_stats(start_date=start_date, end_date=end_date)


@order_router.get("/{order_id}", responses=_ERRORS)
async def get_order(order_id: str, requester_id: str | None = None) -> dict:
    return OrderService().get_order(order_id, requester_id=requester_id)


@order_router.get("/{order_id}/tracking", responses=_ERRORS)
async def track_order(order_id: str, requester_id: str | None = None) -> dict:
    return OrderService().track_order(order_id, requester_id=requester_id)


@order_router.put("/{order_id}/status", responses=_ERRORS)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> dict:
    return OrderService().update_order_status(
        order_id,
        body.status,
        admin_notes=body.admin_notes,
        tracking_number=body.tracking_number,
    )


@order_router.put("/{order_id}/cancel", responses=_ERRORS)
async def cancel_order(order_id: str, body: CancelOrderRequest | None = None) -> dict:
    return OrderService().cancel_order(order_id, reason=body.reason if body else None)


@order_router.put("/{order_id}/payment-status", responses=_ERRORS)
async def record_payment_status(order_id: str, body: RecordPaymentStatusRequest) -> dict:
    return OrderService().record_payment_status(order_id, body.payment_status)


# ---------------------------------------------------------------------------
# Buyer Router
# ---------------------------------------------------------------------------
buyer_router = APIRouter(prefix="/buyers", tags=["orders"])


@buyer_router.get("/{buyer_id}/orders")
async def list_buyer_orders(
    buyer_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> dict:
    return OrderService().list_buyer_orders(buyer_id, page=page, limit=limit)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("/{buyer_id}/items", status_code=201, responses=_ERRORS)
async def add_to_cart(buyer_id: str, body: AddToCartRequest) -> dict:
    return OrderService().add_to_cart(buyer_id, body.product_id, body.quantity)


@cart_router.get("/{buyer_id}")
async def get_cart(buyer_id: str) -> dict:
    return OrderService().get_cart(buyer_id)


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, responses=_ERRORS)
async def register_product(body: RegisterProductRequest) -> dict:
    return OrderService().register_product(
        name=body.name,
        selling_price=body.selling_price,
        quantity_available=body.quantity_available,
        tax_rate=body.tax_rate,
        seller_id=body.seller_id,
    )


@product_router.get("/{product_id}", responses=_ERRORS)
async def get_product(product_id: str) -> dict:
    return OrderService().get_product(product_id)
