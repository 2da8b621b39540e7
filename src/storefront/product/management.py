"""Product updates and removal: commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: partial product fields


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.find(command.product_id)
        product.update(**json.loads(command.changes))
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.find(command.product_id)
        repo.remove(product)
        logger.info("Product deleted", product_id=str(command.product_id))
