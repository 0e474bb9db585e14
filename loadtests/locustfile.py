"""Order orchestration load testing — Locust entry point.

Discovers the user classes of the ordering scenarios.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Contention on a single scarce product only:
    locust -f loadtests/locustfile.py StockContentionUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py OrderingUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.ordering import OrderingUser, StockContentionUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Fires globally for all scenarios — no per-task wiring needed.
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the order statistics the service reports when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    runner_host = environment.host
    if not runner_host:
        return
    try:
        stats = requests.get(f"{runner_host}/orders/stats", timeout=5).json()
    except Exception as e:
        print(f"[LOADTEST] Could not fetch order stats: {e}")
        return

    print("[LOADTEST] Order statistics:")
    print(f"  total_orders: {stats.get('total_orders')}")
    print(f"  total_revenue: {stats.get('total_revenue')}")
    print(f"  by_status: {stats.get('by_status')}")
    print()
