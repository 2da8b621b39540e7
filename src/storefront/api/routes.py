"""FastAPI routes for the storefront: products and orders.

Every response uses the envelope ``{success, message?, data?}``. Errors are
rendered by the handlers in `storefront.api.errors`.
"""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    CancelOrderRequest,
    CreateProductRequest,
    PlaceOrderRequest,
    UpdateOrderRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
)
from storefront.api.serializers import order_to_dict, pagination_to_dict, product_to_dict
from storefront.order.cancellation import CancelOrder
from storefront.order.listing import (
    admin_page_request,
    ensure_valid_order_id,
    find_order,
    find_order_by_number,
    list_orders,
    resolve_products,
    user_page_request,
)
from storefront.order.modification import UpdateOrder
from storefront.order.placement import PlaceOrder
from storefront.order.status import UpdateOrderStatus
from storefront.product.creation import CreateProduct
from storefront.product.listing import get_product, list_products
from storefront.product.management import DeleteProduct, UpdateProduct
from storefront.shared.money import coerce_amount


def _order_payload(order) -> dict:
    return order_to_dict(order, resolve_products(order))


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/api/products", tags=["products"])


@product_router.post("", status_code=201)
async def create_product(body: CreateProductRequest) -> dict:
    command = CreateProduct(
        title=body.title,
        sub_title=body.sub_title,
        description=body.description,
        brand=body.brand,
        strap_type=body.strap_type,
        retail_price=body.price.retail,
        display_price=body.price.display,
        category=body.category,
        sub_category=body.sub_category,
        gender=body.gender,
        sizes=json.dumps(body.sizes),
        variants=json.dumps([variant.model_dump() for variant in body.variants]),
        cover_image=body.cover_image,
        images=json.dumps(body.images),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return {"success": True, "data": product_to_dict(get_product(product_id))}


@product_router.get("")
async def get_products() -> dict:
    return {"success": True, "data": [product_to_dict(product) for product in list_products()]}


@product_router.get("/{product_id}")
async def get_product_by_id(product_id: str) -> dict:
    return {"success": True, "data": product_to_dict(get_product(product_id))}


@product_router.patch("/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest) -> dict:
    changes = body.model_dump(exclude_unset=True)

    # Price is nested on the wire, flat on the aggregate
    price = changes.pop("price", None) or {}
    for key in ("retail", "display"):
        if price.get(key) is not None:
            changes[f"{key}_price"] = price[key]

    # Get the product first so an unknown id is reported before an empty patch
    get_product(product_id)
    current_domain.process(
        UpdateProduct(product_id=product_id, changes=json.dumps(changes)),
        asynchronous=False,
    )
    return {"success": True, "data": product_to_dict(get_product(product_id))}


@product_router.delete("/{product_id}")
async def delete_product(product_id: str) -> dict:
    get_product(product_id)
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return {"success": True, "message": "Product deleted successfully."}


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api/orders", tags=["orders"])


@order_router.post("", status_code=201)
async def place_order(body: PlaceOrderRequest) -> dict:
    command = PlaceOrder(
        items=json.dumps([line.model_dump() for line in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
        payment_method=body.payment_method,
        shipping_cost=coerce_amount(body.shipping_cost),
        tax=coerce_amount(body.tax),
        discount=coerce_amount(body.discount),
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = find_order(order_id)
    return {
        "success": True,
        "message": "Order created successfully",
        "data": {"order": _order_payload(order), "orderNumber": order.order_number},
    }


@order_router.get("/email/{email}")
async def get_user_orders(
    email: str,
    page: str | None = None,
    limit: str | None = None,
    status: str | None = None,
    sortBy: str | None = None,  # noqa: N803
    sortOrder: str | None = None,  # noqa: N803
) -> dict:
    page_request = user_page_request(page, limit, status, sortBy, sortOrder)
    orders, pagination = list_orders(page_request, customer_email=email)
    products = resolve_products(*orders)
    return {
        "success": True,
        "data": {
            "orders": [order_to_dict(order, products) for order in orders],
            "pagination": pagination_to_dict(pagination),
        },
    }


@order_router.get("/admin/all")
async def get_all_orders(
    page: str | None = None,
    limit: str | None = None,
    status: str | None = None,
    sortBy: str | None = None,  # noqa: N803
    sortOrder: str | None = None,  # noqa: N803
) -> dict:
    page_request = admin_page_request(page, limit, status, sortBy, sortOrder)
    orders, pagination = list_orders(page_request)
    products = resolve_products(*orders)
    return {
        "success": True,
        "data": {
            "orders": [order_to_dict(order, products) for order in orders],
            "pagination": pagination_to_dict(pagination),
        },
    }


@order_router.get("/number/{order_number}")
async def get_order_by_number(order_number: str) -> dict:
    order = find_order_by_number(order_number)
    return {"success": True, "data": {"order": _order_payload(order)}}


@order_router.get("/{order_id}")
async def get_order_by_id(order_id: str) -> dict:
    order = find_order(order_id)
    return {"success": True, "data": {"order": _order_payload(order)}}


@order_router.patch("/{order_id}/cancel")
async def cancel_order(order_id: str, body: CancelOrderRequest | None = None) -> dict:
    ensure_valid_order_id(order_id)
    outcome = current_domain.process(
        CancelOrder(order_id=order_id, cancel_reason=body.cancel_reason if body else None),
        asynchronous=False,
    )
    return {
        "success": True,
        "message": "Order cancelled successfully",
        "data": {"order": _order_payload(find_order(order_id)), "stockRestoration": outcome},
    }


@order_router.patch("/admin/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> dict:
    ensure_valid_order_id(order_id)
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        tracking_number=body.tracking_number,
        estimated_delivery=body.estimated_delivery,
    )
    current_domain.process(command, asynchronous=False)
    return {
        "success": True,
        "message": "Order status updated successfully",
        "data": {"order": _order_payload(find_order(order_id))},
    }


@order_router.patch("/admin/{order_id}")
async def update_order(order_id: str, body: UpdateOrderRequest) -> dict:
    ensure_valid_order_id(order_id)
    changes = body.model_dump(exclude_unset=True)
    current_domain.process(UpdateOrder(order_id=order_id, changes=json.dumps(changes)), asynchronous=False)
    return {
        "success": True,
        "message": "Order updated successfully",
        "data": {"order": _order_payload(find_order(order_id))},
    }
