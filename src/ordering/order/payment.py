"""Order payment status — command and handler.

The payment collaborator reports status changes (pending, paid, failed,
refunded). Payment status is independent of the order's own state machine.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class RecordPaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=50)


@ordering.command_handler(part_of=Order)
class RecordPaymentStatusHandler:
    @handle(RecordPaymentStatus)
    def record_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        order.record_payment_status(command.payment_status)
        repo.add(order)

        logger.info(
            "Payment status recorded",
            order_id=str(order.id),
            payment_status=order.payment_status,
        )
        return order
