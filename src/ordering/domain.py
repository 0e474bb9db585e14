"""Ordering bounded context — Order Orchestration.

Handles transactional order creation with inventory reservation, the
order status state machine, compensating cancellation, and the read side
(order views and statistics) over persisted orders.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
