"""Order status updates — command and handler.

Status updates only move the order along its state machine. Stock is never
touched here, including for a transition to ``cancelled``; restoring stock
is the job of the cancellation handler.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    new_status = String(required=True, max_length=50)
    admin_notes = Text()
    tracking_number = String(max_length=255)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)
        previous = order.status

        order.transition_to(
            command.new_status,
            admin_notes=command.admin_notes,
            tracking_number=command.tracking_number,
        )
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )
        return order
