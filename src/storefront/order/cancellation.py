"""Order cancellation: command and handler.

Cancelling gives every line item's units back to its product variant. Lines
whose product was deleted, or whose variant no longer exists, are skipped and
reported in the handler's result rather than failing the cancellation.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCT_MISSING = "product_missing"
VARIANT_MISSING = "variant_missing"


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    cancel_reason = String(max_length=500)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        """Cancel the order and restore stock.

        Returns:
            dict with ``restored`` and ``skipped`` lists, one entry per line item.
        """
        order_repo = current_domain.repository_for(Order)
        product_repo = current_domain.repository_for(Product)

        order = order_repo.find(command.order_id)
        order.cancel(reason=command.cancel_reason)

        products = {}
        restored, skipped = [], []
        for item in order.items:
            product_id = str(item.product_id)
            line = {
                "product_id": product_id,
                "dial_color": item.dial_color,
                "strap_color": item.strap_color,
                "quantity": item.quantity,
            }

            if product_id not in products:
                products[product_id] = product_repo.find_or_none(product_id)
            product = products[product_id]

            if product is None:
                skipped.append({**line, "reason": PRODUCT_MISSING})
            elif product.restore_stock(item.dial_color, item.strap_color, item.quantity):
                restored.append(line)
            else:
                skipped.append({**line, "reason": VARIANT_MISSING})

        for product in products.values():
            if product is not None:
                product_repo.add(product)
        order_repo.add(order)

        if skipped:
            logger.warning(
                "Stock not restored for some items of cancelled order",
                order_number=order.order_number,
                skipped=len(skipped),
            )
        logger.info(
            "Order cancelled",
            order_number=order.order_number,
            restored=len(restored),
            reason=order.cancel_reason,
        )
        return {"restored": restored, "skipped": skipped}
