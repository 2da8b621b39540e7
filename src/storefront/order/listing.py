"""Read side of orders: lookups, paginated listings and product resolution."""

import math
from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.order.order import ORDER_STATUSES, Order
from storefront.product.product import Product
from storefront.shared.identifiers import is_valid_identifier

USER_DEFAULT_LIMIT = 10
USER_MAX_LIMIT = 100
ADMIN_DEFAULT_LIMIT = 20

# Wire name -> aggregate attribute
SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "totalAmount": "total_amount",
    "subtotal": "subtotal",
    "orderNumber": "order_number",
    "status": "status",
}
DEFAULT_SORT = "createdAt"


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int
    status: str | None = None
    sort_by: str = SORTABLE_FIELDS[DEFAULT_SORT]
    descending: bool = True

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _to_int(value, default):
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def _sorting(status, sort_by, sort_order):
    return {
        "status": status if status in ORDER_STATUSES else None,
        "sort_by": SORTABLE_FIELDS.get(sort_by, SORTABLE_FIELDS[DEFAULT_SORT]),
        "descending": sort_order != "asc",
    }


def user_page_request(page=None, limit=None, status=None, sort_by=None, sort_order=None) -> PageRequest:
    """Paging for a customer's own orders. Out-of-range values are rejected."""
    page = _to_int(page, 1)
    limit = _to_int(limit, USER_DEFAULT_LIMIT)

    if page < 1 or limit < 1 or limit > USER_MAX_LIMIT:
        raise ValidationError(
            {
                "_entity": [
                    "Invalid pagination parameters. "
                    f"Page must be >= 1, limit must be between 1 and {USER_MAX_LIMIT}"
                ]
            }
        )

    return PageRequest(page=page, limit=limit, **_sorting(status, sort_by, sort_order))


def admin_page_request(page=None, limit=None, status=None, sort_by=None, sort_order=None) -> PageRequest:
    """Paging for the admin listing. Missing, zero or unparseable values fall back to defaults."""
    page = _to_int(page, 1)
    limit = _to_int(limit, ADMIN_DEFAULT_LIMIT)

    return PageRequest(
        page=page if page >= 1 else 1,
        limit=limit if limit >= 1 else ADMIN_DEFAULT_LIMIT,
        **_sorting(status, sort_by, sort_order),
    )


def pagination(page_request: PageRequest, total: int) -> dict:
    total_pages = math.ceil(total / page_request.limit)
    return {
        "current_page": page_request.page,
        "total_pages": total_pages,
        "total_count": total,
        "has_next_page": page_request.page < total_pages,
        "has_prev_page": page_request.page > 1,
    }


def list_orders(page_request: PageRequest, customer_email=None):
    """One page of orders, optionally limited to a customer.

    Returns:
        (orders, pagination metadata)
    """
    filters = {}
    if customer_email:
        filters["customer_email"] = customer_email.strip().lower()
    if page_request.status:
        filters["status"] = page_request.status

    orders, total = current_domain.repository_for(Order).page(
        page_request.offset,
        page_request.limit,
        sort_by=page_request.sort_by,
        descending=page_request.descending,
        **filters,
    )
    return orders, pagination(page_request, total)


def ensure_valid_order_id(order_id):
    if not is_valid_identifier(order_id):
        raise ValidationError({"order_id": ["Invalid order ID format"]})


def find_order(order_id) -> Order:
    ensure_valid_order_id(order_id)
    return current_domain.repository_for(Order).find(order_id)


def find_order_by_number(order_number) -> Order:
    order_number = (order_number or "").strip()
    if not order_number:
        raise ValidationError({"order_number": ["Order number is required"]})

    order = current_domain.repository_for(Order).find_by_order_number(order_number)
    if order is None:
        raise ObjectNotFoundError({"order": ["Order not found"]})
    return order


def resolve_products(*orders) -> dict:
    """Live products referenced by the orders' line items, keyed by product id.

    Products that have since been deleted are absent from the result.
    """
    repo = current_domain.repository_for(Product)
    resolved = {}
    for order in orders:
        for item in order.items:
            product_id = str(item.product_id)
            if product_id not in resolved:
                resolved[product_id] = repo.find_or_none(product_id)
    return {product_id: product for product_id, product in resolved.items() if product is not None}
