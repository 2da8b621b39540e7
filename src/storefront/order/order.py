"""Order aggregate: the customer's purchase with its line items and addresses.

Line items carry a snapshot of the product as it was when the order was
placed; the live product is only referenced by id.

Status values:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    PENDING/CONFIRMED/PROCESSING/SHIPPED → CANCELLED
    any → REFUNDED (admin)

Admins may set any status; the only guarded transition is cancellation,
which is refused once an order is DELIVERED, CANCELLED or REFUNDED.
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged, OrderUpdated
from storefront.product.product import Size
from storefront.shared.money import to_amount


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"


class PaymentMethod(Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    PAYPAL = "PAYPAL"
    BANK_TRANSFER = "BANK_TRANSFER"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"


ORDER_STATUSES = frozenset(status.value for status in OrderStatus)

# States from which an order can no longer be cancelled
_NON_CANCELLABLE_STATES = frozenset(
    {
        OrderStatus.DELIVERED.value,
        OrderStatus.CANCELLED.value,
        OrderStatus.REFUNDED.value,
    }
)

DEFAULT_CANCEL_REASON = "Cancelled by customer"

_EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
_MOBILE_PATTERN = re.compile(r"^\+?[0-9]\d{0,15}$")
_POSTAL_CODE_PATTERN = re.compile(r"^[0-9A-Z\s-]{3,10}$", re.IGNORECASE)

_ADDRESS_FIELDS = (
    "email",
    "mobile_number",
    "first_name",
    "last_name",
    "country",
    "state",
    "city",
    "postal_code",
    "address",
)

# Fields an admin may patch directly. Totals, item snapshots, the order
# number and timestamps are derived or immutable.
PATCHABLE_FIELDS = frozenset(
    {
        "customer_email",
        "status",
        "payment_status",
        "payment_method",
        "payment_id",
        "shipping_cost",
        "tax",
        "discount",
        "shipping_address",
        "billing_address",
        "tracking_number",
        "estimated_delivery",
        "delivered_at",
        "cancelled_at",
        "cancel_reason",
        "notes",
    }
)
PROTECTED_FIELDS = frozenset({"id", "_id", "order_number", "created_at", "updated_at"})

_ADDRESS_PATCH_FIELDS = ("shipping_address", "billing_address")
_AMOUNT_PATCH_FIELDS = ("shipping_cost", "tax", "discount")
_DATETIME_PATCH_FIELDS = ("estimated_delivery", "delivered_at", "cancelled_at")


def _parse_datetime(value, field):
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError({field: [f"Invalid date: {value!r}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class Address:
    """Contact and postal address used for shipping and billing."""

    email = String(required=True, max_length=254)
    mobile_number = String(required=True, max_length=17)
    first_name = String(required=True, min_length=2, max_length=50)
    last_name = String(required=True, min_length=2, max_length=50)
    country = String(required=True, min_length=2, max_length=100)
    state = String(required=True, min_length=2, max_length=100)
    city = String(required=True, min_length=2, max_length=100)
    postal_code = String(required=True, max_length=10)
    address = String(required=True, min_length=10, max_length=200)

    @invariant.post
    def email_must_be_valid(self):
        if not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Please enter a valid email"]})

    @invariant.post
    def mobile_number_must_be_valid(self):
        if not _MOBILE_PATTERN.match(self.mobile_number):
            raise ValidationError({"mobile_number": ["Please enter a valid phone number"]})

    @invariant.post
    def postal_code_must_be_valid(self):
        if not _POSTAL_CODE_PATTERN.match(self.postal_code):
            raise ValidationError({"postal_code": ["Please enter a valid postal code"]})

    @classmethod
    def from_dict(cls, data, field="address"):
        """Build an address from client data: trims values, lowercases the email.

        Validation errors are reported under `<field>.<attribute>` so that a
        shipping problem is distinguishable from a billing one.
        """
        if not isinstance(data, dict):
            raise ValidationError({field: ["Address must be an object"]})

        values = {}
        for name in _ADDRESS_FIELDS:
            value = data.get(name)
            if isinstance(value, str):
                value = value.strip()
            values[name] = value or None
        if values["email"]:
            values["email"] = values["email"].lower()

        try:
            return cls(**values)
        except ValidationError as exc:
            messages = exc.messages if isinstance(exc.messages, dict) else {"_entity": [str(exc.messages)]}
            raise ValidationError({f"{field}.{name}": errors for name, errors in messages.items()}) from exc


@storefront.value_object(part_of="Order")
class ProductSnapshot:
    """Product attributes frozen at the time the order was placed."""

    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    cover_image = String(max_length=500)
    category = String(max_length=100)
    sub_category = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A line item: one product variant, a quantity and the price charged."""

    product_id = Identifier(required=True)
    snapshot = ValueObject(ProductSnapshot, required=True)
    quantity = Integer(required=True, min_value=1)
    size = String(choices=Size)
    dial_color = String(required=True, max_length=50)
    strap_color = String(required=True, max_length=50)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)

    @classmethod
    def for_product(cls, product, quantity, dial_color, strap_color, size=None):
        unit_price = to_amount(product.price.retail)
        return cls(
            product_id=str(product.id),
            snapshot=ProductSnapshot(
                title=product.title,
                price=unit_price,
                cover_image=product.cover_image,
                category=product.category,
                sub_category=product.sub_category,
            ),
            quantity=quantity,
            size=size,
            dial_color=dial_color,
            strap_color=strap_color,
            unit_price=unit_price,
            total_price=to_amount(unit_price * quantity),
        )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(max_length=20, unique=True)
    customer_email = String(required=True, max_length=254)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(Address, required=True)
    billing_address = ValueObject(Address, required=True)
    subtotal = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total_amount = Float(default=0.0, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_id = String(max_length=255)
    tracking_number = String(max_length=255)
    estimated_delivery = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    cancel_reason = String(max_length=500)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_amount_must_match_components(self):
        expected = to_amount(self.subtotal + self.shipping_cost + self.tax - self.discount)
        if abs(self.total_amount - expected) > 0.005:
            raise ValidationError(
                {"total_amount": [f"Total amount {self.total_amount} does not equal computed total {expected}"]}
            )

    @invariant.post
    def customer_email_must_be_valid(self):
        if self.customer_email and not _EMAIL_PATTERN.match(self.customer_email):
            raise ValidationError({"customer_email": ["Please enter a valid email"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        items,
        shipping_address,
        billing_address,
        payment_method,
        shipping_cost=0.0,
        tax=0.0,
        discount=0.0,
        notes=None,
    ):
        """Create a PENDING order from already-priced line items.

        The customer is identified by the shipping address email. Totals are
        derived from the items and charges passed in.
        """
        if not items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        now = datetime.now(UTC)
        subtotal = to_amount(sum(item.total_price for item in items))
        shipping_cost, tax, discount = to_amount(shipping_cost), to_amount(tax), to_amount(discount)

        order = cls(
            order_number=order_number,
            customer_email=shipping_address.email,
            items=items,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payment_method,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            tax=tax,
            discount=discount,
            total_amount=to_amount(subtotal + shipping_cost + tax - discount),
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_email=order.customer_email,
                item_count=len(items),
                subtotal=order.subtotal,
                total_amount=order.total_amount,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def is_cancellable(self):
        return self.status not in _NON_CANCELLABLE_STATES

    def _recalculate_totals(self):
        self.subtotal = to_amount(sum(item.total_price for item in self.items))
        self.total_amount = to_amount(self.subtotal + self.shipping_cost + self.tax - self.discount)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def cancel(self, reason=None):
        """Cancel the order. Stock restoration is the caller's concern."""
        if not self.is_cancellable:
            raise ValidationError({"status": [f"Order cannot be cancelled. Current status: {self.status}"]})

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.cancel_reason = reason or DEFAULT_CANCEL_REASON
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous_status,
                reason=self.cancel_reason,
                cancelled_at=now,
            )
        )

    def update_status(self, status, tracking_number=None, estimated_delivery=None):
        """Set any status (admin). Moving to DELIVERED stamps `delivered_at`."""
        if status not in ORDER_STATUSES:
            raise ValidationError({"status": ["Invalid status value"]})

        previous_status = self.status
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = status
            if tracking_number:
                self.tracking_number = tracking_number
            if estimated_delivery:
                self.estimated_delivery = _parse_datetime(estimated_delivery, "estimated_delivery")
            if status == OrderStatus.DELIVERED.value:
                self.delivered_at = now
            self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous_status,
                new_status=status,
                tracking_number=self.tracking_number,
                changed_at=now,
            )
        )

    def apply_changes(self, changes):
        """Patch order fields (admin).

        Protected fields are dropped silently; anything else outside
        PATCHABLE_FIELDS is rejected. Totals are recomputed afterwards.
        """
        changes = {field: value for field, value in changes.items() if field not in PROTECTED_FIELDS}

        unknown = sorted(set(changes) - PATCHABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in unknown})

        charges = {
            field: to_amount(changes[field] or 0.0) if field in changes else getattr(self, field)
            for field in _AMOUNT_PATCH_FIELDS
        }
        ceiling = to_amount(self.subtotal + charges["shipping_cost"] + charges["tax"])
        if charges["discount"] > ceiling:
            raise ValidationError({"discount": [f"Discount cannot exceed the order total of {ceiling}"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            for field, value in changes.items():
                if field in _ADDRESS_PATCH_FIELDS:
                    value = value if isinstance(value, Address) else Address.from_dict(value, field=field)
                elif field in _AMOUNT_PATCH_FIELDS:
                    value = to_amount(value or 0.0)
                elif field in _DATETIME_PATCH_FIELDS:
                    value = _parse_datetime(value, field)
                elif field == "customer_email" and isinstance(value, str):
                    value = value.strip().lower()
                setattr(self, field, value)

            self._recalculate_totals()
            self.updated_at = now

        self.raise_(
            OrderUpdated(
                order_id=str(self.id),
                order_number=self.order_number,
                updated_fields=json.dumps(sorted(changes)),
                updated_at=now,
            )
        )
