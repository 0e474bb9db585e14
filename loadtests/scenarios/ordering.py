"""Ordering load test scenarios.

Three stateful SequentialTaskSet journeys: placing an order and walking it
to delivery, placing and cancelling an order, and filling a cart before
checking out. A separate user class hammers a single scarce product to
exercise the versioned stock writes under contention.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    buyer_id,
    cancellation_reason,
    order_data,
    product_data,
)
from loadtests.helpers.response import error_code, extract_error_detail
from loadtests.helpers.state import CatalogueState, OrderState

# Placement failures that are expected outcomes under load, not errors
_EXPECTED_PLACEMENT_CODES = {"INSUFFICIENT_INVENTORY", "CONCURRENT_MODIFICATION"}


def _register_products(client, state: CatalogueState, count: int, stock: int | None = None):
    for _ in range(count):
        payload = product_data(stock=stock)
        with client.post("/products", json=payload, catch_response=True, name="POST /products") as resp:
            if resp.status_code == 201:
                product_id = resp.json()["product_id"]
                state.product_ids.append(product_id)
                state.initial_stock[product_id] = payload["quantity_available"]
            else:
                resp.failure(f"Register product failed: {resp.status_code} — {extract_error_detail(resp)}")


class _OrderJourney(SequentialTaskSet):
    """Shared setup: a fresh buyer and a handful of products."""

    def on_start(self):
        self.catalogue = CatalogueState()
        self.state = OrderState(buyer_id=buyer_id())
        _register_products(self.client, self.catalogue, count=3)
        if not self.catalogue.product_ids:
            self.interrupt()

    def _place_order(self):
        payload = order_data(self.state.buyer_id, self.catalogue.product_ids)
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.order_number = body["order_number"]
                self.state.quantities = {item["product_id"]: item["quantity"] for item in payload["items"]}
                return True
            if error_code(resp) in _EXPECTED_PLACEMENT_CODES:
                resp.success()
            else:
                resp.failure(f"Place order failed: {resp.status_code} — {extract_error_detail(resp)}")
            return False

    def _move_to(self, status, **extra):
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": status, **extra},
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"Move to {status} failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()


class OrderFulfillmentJourney(_OrderJourney):
    """Place -> Confirm -> Pay -> Process -> Ship -> Deliver -> Track."""

    @task
    def place_order(self):
        if not self._place_order():
            self.interrupt()

    @task
    def confirm(self):
        self._move_to("confirmed")

    @task
    def record_payment(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/payment-status",
            json={"payment_status": "paid"},
            catch_response=True,
            name="PUT /orders/{id}/payment-status",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Record payment failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def process(self):
        self._move_to("processing")

    @task
    def ship(self):
        self._move_to("shipped", tracking_number=f"LT-{random.randint(100000, 999999)}")

    @task
    def deliver(self):
        self._move_to("delivered")

    @task
    def track(self):
        self.client.get(f"/orders/{self.state.order_id}/tracking", name="GET /orders/{id}/tracking")

    @task
    def done(self):
        self.interrupt()


class OrderCancellationJourney(_OrderJourney):
    """Place -> Confirm -> Cancel -> verify stock came back."""

    @task
    def place_order(self):
        if not self._place_order():
            self.interrupt()

    @task
    def confirm(self):
        self._move_to("confirmed")

    @task
    def cancel(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/cancel",
            json={"reason": cancellation_reason()},
            catch_response=True,
            name="PUT /orders/{id}/cancel",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "cancelled"
            else:
                resp.failure(f"Cancel failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def verify_stock_restored(self):
        # Only this user orders its own products, so stock must be back to where it started
        for product_id in self.state.quantities:
            with self.client.get(
                f"/products/{product_id}",
                catch_response=True,
                name="GET /products/{id}",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Fetch product failed: {resp.status_code} — {extract_error_detail(resp)}")
                elif resp.json()["quantity_available"] != self.catalogue.initial_stock[product_id]:
                    resp.failure(f"Stock of {product_id} not restored after cancellation")

    @task
    def done(self):
        self.interrupt()


class CartCheckoutJourney(_OrderJourney):
    """Add to cart (x2) -> Read cart -> Place order -> Cart is empty -> List orders."""

    @task
    def add_items(self):
        for product_id in self.catalogue.product_ids[:2]:
            with self.client.post(
                f"/carts/{self.state.buyer_id}/items",
                json={"product_id": product_id, "quantity": random.randint(1, 2)},
                catch_response=True,
                name="POST /carts/{buyer_id}/items",
            ) as resp:
                if resp.status_code != 201:
                    resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def read_cart(self):
        self.client.get(f"/carts/{self.state.buyer_id}", name="GET /carts/{buyer_id}")

    @task
    def checkout(self):
        if not self._place_order():
            self.interrupt()

    @task
    def cart_is_empty(self):
        with self.client.get(
            f"/carts/{self.state.buyer_id}",
            catch_response=True,
            name="GET /carts/{buyer_id}",
        ) as resp:
            if resp.status_code == 200 and resp.json()["items"]:
                resp.failure("Cart not cleared after checkout")

    @task
    def list_orders(self):
        self.client.get(f"/buyers/{self.state.buyer_id}/orders", name="GET /buyers/{buyer_id}/orders")

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Locust user simulating ordering interactions.

    Weighted distribution:
    - 50% Full fulfillment lifecycle (happy path)
    - 25% Cancellation with stock restoration
    - 25% Cart to checkout
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        OrderFulfillmentJourney: 2,
        OrderCancellationJourney: 1,
        CartCheckoutJourney: 1,
    }


class StockContentionUser(HttpUser):
    """Many buyers racing for the same scarce product.

    The first user to start registers the product; everyone then orders
    one unit at a time. INSUFFICIENT_INVENTORY and CONCURRENT_MODIFICATION
    are expected once stock runs low; anything else is a failure. At the
    end, quantity_sold + quantity_available must equal the opening stock.
    """

    wait_time = between(0.05, 0.2)
    opening_stock = 200
    product_id = None

    def on_start(self):
        if StockContentionUser.product_id is None:
            resp = self.client.post("/products", json=product_data(stock=self.opening_stock), name="POST /products")
            if resp.status_code == 201:
                StockContentionUser.product_id = resp.json()["product_id"]
        self.buyer = buyer_id()

    @task(5)
    def grab_one(self):
        if StockContentionUser.product_id is None:
            return
        payload = order_data(self.buyer, [StockContentionUser.product_id], max_quantity=1)
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders [contended]") as resp:
            if resp.status_code == 201 or error_code(resp) in {"INSUFFICIENT_INVENTORY", "CONCURRENT_MODIFICATION"}:
                resp.success()
            else:
                resp.failure(f"Contended order failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(1)
    def check_ledger(self):
        if StockContentionUser.product_id is None:
            return
        with self.client.get(
            f"/products/{StockContentionUser.product_id}",
            catch_response=True,
            name="GET /products/{id} [contended]",
        ) as resp:
            if resp.status_code != 200:
                return
            product = resp.json()
            if product["quantity_available"] < 0:
                resp.failure("Stock went negative")
            elif product["quantity_available"] + product["quantity_sold"] != self.opening_stock:
                resp.failure("Sold plus available drifted from the opening stock")
