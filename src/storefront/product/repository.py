"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.identifiers import is_valid_identifier


@storefront.repository(part_of=Product)
class ProductRepository:
    def find(self, product_id, message="Product not found") -> Product:
        """Load a product, raising ObjectNotFoundError with `message` when it is absent."""
        if not is_valid_identifier(product_id):
            raise ObjectNotFoundError({"product": [message]})
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"product": [message]}) from None

    def find_or_none(self, product_id) -> Product | None:
        try:
            return self.find(product_id)
        except ObjectNotFoundError:
            return None

    def newest_first(self) -> list[Product]:
        """All products, most recently created first."""
        query = self._dao.query.order_by("-created_at")
        total = query.all().total
        if not total:
            return []
        return query.limit(total).all().items

    def remove(self, product: Product) -> None:
        self._dao.delete(product)
