"""Order placement: command and handler.

Placement is all-or-nothing. Every cart line is checked against the product
aggregate before anything is written; a product referenced by several lines
is loaded once, so each line sees the stock already taken by earlier ones.
Products and the order are persisted together when the handler's Unit of
Work commits. A concurrent placement that changed the same product first
makes the commit fail with `ExpectedVersionError` rather than oversell.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.numbering import allocate_order_number
from storefront.order.order import Address, Order, OrderItem
from storefront.product.product import Product
from storefront.shared.money import to_amount
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    items = Text()  # JSON: list of {product_id, quantity, dial_color, strap_color, size}
    shipping_address = Text()  # JSON: address dict
    billing_address = Text()  # JSON: address dict
    payment_method = String(max_length=20)
    shipping_cost = Float(default=0.0)
    tax = Float(default=0.0)
    discount = Float(default=0.0)
    notes = Text()


def _is_valid_quantity(quantity):
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity >= 1


def _validate_cart(lines):
    if not isinstance(lines, list) or not lines:
        raise ValidationError({"items": ["Order must contain at least one item"]})

    for line in lines:
        if not isinstance(line, dict) or not line.get("product_id") or not _is_valid_quantity(line.get("quantity")):
            raise ValidationError({"items": ["Each item must have a valid product ID and quantity"]})


def _priced_line(product, line):
    """Take the line's units off the matching variant and price the line."""
    dial_color = line.get("dial_color")
    strap_color = line.get("strap_color")
    if not dial_color or not strap_color:
        raise ValidationError(
            {"items": [f'Both dialColor and strapColor are required for product "{product.title}"']}
        )

    quantity = line["quantity"]
    product.reserve_stock(dial_color, strap_color, quantity)

    size = line.get("size")
    if size and size not in product.size_list:
        raise ValidationError({"size": [f'Size "{size}" is not available for product "{product.title}"']})

    return OrderItem.for_product(product, quantity, dial_color, strap_color, size=size or None)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = json.loads(command.items) if command.items else []
        _validate_cart(lines)

        if not command.shipping_address or not command.billing_address or not command.payment_method:
            raise ValidationError(
                {"_entity": ["Shipping address, billing address, and payment method are required"]}
            )

        product_repo = current_domain.repository_for(Product)
        order_repo = current_domain.repository_for(Order)

        # One instance per product so that repeated lines accumulate
        products = {}
        items = []
        for line in lines:
            product_id = str(line["product_id"])
            if product_id not in products:
                products[product_id] = product_repo.find(
                    product_id, message=f"Product with ID {product_id} not found"
                )
            items.append(_priced_line(products[product_id], line))

        charges = [command.shipping_cost or 0.0, command.tax or 0.0, command.discount or 0.0]
        if any(charge < 0 for charge in charges):
            raise ValidationError({"_entity": ["Shipping cost, tax, and discount must be non-negative values"]})
        shipping_cost, tax, discount = (to_amount(charge) for charge in charges)

        order = Order.place(
            order_number=allocate_order_number(order_repo),
            items=items,
            shipping_address=Address.from_dict(json.loads(command.shipping_address), field="shipping_address"),
            billing_address=Address.from_dict(json.loads(command.billing_address), field="billing_address"),
            payment_method=command.payment_method,
            shipping_cost=shipping_cost,
            tax=tax,
            discount=discount,
            notes=command.notes,
        )

        for product in products.values():
            product_repo.add(product)
        order_repo.add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_email=order.customer_email,
            item_count=len(items),
            total_amount=order.total_amount,
        )
        return str(order.id)
