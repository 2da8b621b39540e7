"""Admin order edits: command and handler."""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: partial order fields


@storefront.command_handler(part_of=Order)
class UpdateOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find(command.order_id)
        order.apply_changes(json.loads(command.changes))
        repo.add(order)
