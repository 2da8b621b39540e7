"""Read side of the catalogue."""

from protean.utils.globals import current_domain

from storefront.product.product import Product


def list_products():
    return current_domain.repository_for(Product).newest_first()


def get_product(product_id):
    return current_domain.repository_for(Product).find(product_id)
