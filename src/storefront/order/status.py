"""Admin status changes: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(max_length=20)
    tracking_number = String(max_length=255)
    estimated_delivery = String(max_length=50)  # ISO 8601


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        order.update_status(
            command.status,
            tracking_number=command.tracking_number,
            estimated_delivery=command.estimated_delivery,
        )
        repo.add(order)

        logger.info("Order status updated", order_number=order.order_number, status=order.status)
