"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CatalogueState:
    """Products this user registered, with the stock each started with."""

    product_ids: list[str] = field(default_factory=list)
    initial_stock: dict[str, int] = field(default_factory=dict)


@dataclass
class OrderState:
    """Tracks state for a single order lifecycle."""

    buyer_id: str | None = None
    order_id: str | None = None
    order_number: str | None = None
    current_status: str = "pending"
    quantities: dict[str, int] = field(default_factory=dict)
