"""Aggregate → JSON-ready dict conversion for API responses (camelCase keys)."""

from datetime import datetime


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _address_to_dict(address) -> dict | None:
    if address is None:
        return None
    return {
        "email": address.email,
        "mobileNumber": address.mobile_number,
        "firstName": address.first_name,
        "lastName": address.last_name,
        "country": address.country,
        "state": address.state,
        "city": address.city,
        "postalCode": address.postal_code,
        "address": address.address,
    }


def product_to_dict(product) -> dict:
    return {
        "id": str(product.id),
        "title": product.title,
        "subTitle": product.sub_title,
        "description": product.description,
        "brand": product.brand,
        "strapType": product.strap_type,
        "price": {"retail": product.price.retail, "display": product.price.display},
        "category": product.category,
        "subCategory": product.sub_category,
        "gender": product.gender,
        "sizes": product.size_list,
        "sales": product.sales,
        "coverImage": product.cover_image,
        "images": [image.url for image in sorted(product.images, key=lambda image: image.display_order)],
        "variants": [
            {
                "dialColor": variant.dial_color,
                "strapColor": variant.strap_color,
                "stock": variant.stock,
                "images": variant.image_urls,
            }
            for variant in product.variants
        ],
        "createdAt": _timestamp(product.created_at),
        "updatedAt": _timestamp(product.updated_at),
    }


def _product_reference(product_id: str, products: dict) -> dict:
    """Populated product reference of a line item, or just its id if the product is gone."""
    product = products.get(product_id)
    if product is None:
        return {"id": product_id}
    return {
        "id": product_id,
        "title": product.title,
        "price": {"retail": product.price.retail, "display": product.price.display},
        "coverImage": product.cover_image,
        "category": product.category,
        "subCategory": product.sub_category,
    }


def order_to_dict(order, products: dict | None = None) -> dict:
    """Serialize an order.

    Args:
        products: Live products keyed by id, used to populate `items[].product`.
    """
    products = products or {}
    return {
        "id": str(order.id),
        "orderNumber": order.order_number,
        "customerEmail": order.customer_email,
        "items": [
            {
                "id": str(item.id),
                "product": _product_reference(str(item.product_id), products),
                "productSnapshot": {
                    "title": item.snapshot.title,
                    "price": item.snapshot.price,
                    "coverImage": item.snapshot.cover_image,
                    "category": item.snapshot.category,
                    "subCategory": item.snapshot.sub_category,
                },
                "quantity": item.quantity,
                "size": item.size,
                "dialColor": item.dial_color,
                "strapColor": item.strap_color,
                "unitPrice": item.unit_price,
                "totalPrice": item.total_price,
            }
            for item in order.items
        ],
        "shippingAddress": _address_to_dict(order.shipping_address),
        "billingAddress": _address_to_dict(order.billing_address),
        "subtotal": order.subtotal,
        "shippingCost": order.shipping_cost,
        "tax": order.tax,
        "discount": order.discount,
        "totalAmount": order.total_amount,
        "status": order.status,
        "paymentStatus": order.payment_status,
        "paymentMethod": order.payment_method,
        "paymentId": order.payment_id,
        "trackingNumber": order.tracking_number,
        "estimatedDelivery": _timestamp(order.estimated_delivery),
        "deliveredAt": _timestamp(order.delivered_at),
        "cancelledAt": _timestamp(order.cancelled_at),
        "cancelReason": order.cancel_reason,
        "notes": order.notes,
        "createdAt": _timestamp(order.created_at),
        "updatedAt": _timestamp(order.updated_at),
    }


def pagination_to_dict(pagination: dict) -> dict:
    return {
        "currentPage": pagination["current_page"],
        "totalPages": pagination["total_pages"],
        "totalCount": pagination["total_count"],
        "hasNextPage": pagination["has_next_page"],
        "hasPrevPage": pagination["has_prev_page"],
    }
