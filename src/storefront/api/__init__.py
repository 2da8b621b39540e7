"""Storefront API package."""

from storefront.api.errors import register_exception_handlers
from storefront.api.routes import order_router, product_router

__all__ = ["product_router", "order_router", "register_exception_handlers"]
