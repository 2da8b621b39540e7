"""Product creation: command and handler."""

import json

from protean import handle
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    title = String(required=True, max_length=255)
    sub_title = String(max_length=255)
    description = Text(required=True)
    brand = String(required=True, max_length=100)
    strap_type = String(required=True, max_length=10)
    retail_price = Float(required=True)
    display_price = Float()
    category = String(max_length=100)
    sub_category = String(max_length=100)
    gender = String(max_length=10)
    sizes = Text()  # JSON: list of sizes
    variants = Text(required=True)  # JSON: list of variant dicts
    cover_image = String(max_length=500)
    images = Text()  # JSON: list of image URLs


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            title=command.title,
            sub_title=command.sub_title,
            description=command.description,
            brand=command.brand,
            strap_type=command.strap_type,
            retail_price=command.retail_price,
            display_price=command.display_price,
            category=command.category,
            sub_category=command.sub_category,
            gender=command.gender,
            sizes=json.loads(command.sizes) if command.sizes else None,
            variants=json.loads(command.variants),
            cover_image=command.cover_image,
            images=json.loads(command.images) if command.images else None,
        )
        current_domain.repository_for(Product).add(product)

        logger.info(
            "Product created",
            product_id=str(product.id),
            title=product.title,
            variant_count=len(product.variants),
        )
        return str(product.id)
