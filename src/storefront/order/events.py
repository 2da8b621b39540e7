"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order and its stock was reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_email = String(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    total_amount = Float(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    reason = String(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An admin moved the order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    updated_fields = Text(required=True)  # JSON list of field names
    updated_at = DateTime(required=True)
