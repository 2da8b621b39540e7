"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    title = String(required=True)
    brand = String(required=True)
    variant_count = Integer(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    """Catalogue attributes of a product were changed by an admin."""

    __version__ = 1

    product_id = Identifier(required=True)
    updated_fields = Text(required=True)  # JSON list of field names
    updated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class VariantStockReserved:
    """Units of a variant were taken for an order."""

    __version__ = 1

    product_id = Identifier(required=True)
    dial_color = String(required=True)
    strap_color = String(required=True)
    quantity = Integer(required=True)
    remaining_stock = Integer(required=True)


@storefront.event(part_of="Product")
class VariantStockRestored:
    """Units of a variant were returned to stock after an order was cancelled."""

    __version__ = 1

    product_id = Identifier(required=True)
    dial_color = String(required=True)
    strap_color = String(required=True)
    quantity = Integer(required=True)
    restored_stock = Integer(required=True)
