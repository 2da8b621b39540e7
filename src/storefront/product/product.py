"""Product aggregate root with Variant and Image entities.

A product is a watch model. Each purchasable configuration of it is a Variant,
identified by its (dial_color, strap_color) pair and carrying its own stock
counter. Orders decrement variant stock through `reserve_stock` and give it
back through `restore_stock`.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String, Text, ValueObject

from storefront.domain import storefront


class StrapType(Enum):
    CHAIN = "CHAIN"
    BELT = "BELT"


class Gender(Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    KIDS = "KIDS"
    UNISEX = "UNISEX"


class Size(Enum):
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"


_SIZE_VALUES = [size.value for size in Size]

# Scalar attributes that `Product.update` copies over as-is
_PLAIN_FIELDS = (
    "title",
    "sub_title",
    "description",
    "brand",
    "strap_type",
    "category",
    "sub_category",
    "gender",
    "cover_image",
)


def _encode_sizes(sizes):
    if not sizes:
        return json.dumps([])

    unknown = [size for size in sizes if size not in _SIZE_VALUES]
    if unknown:
        raise ValidationError({"sizes": [f"Unknown sizes: {', '.join(map(str, unknown))}. Allowed: {_SIZE_VALUES}"]})

    # Keep submission order, drop duplicates
    return json.dumps(list(dict.fromkeys(sizes)))


@storefront.value_object(part_of="Product")
class Price:
    """Retail price charged at checkout, with an optional display (list) price."""

    retail = Float(required=True, min_value=0.0)
    display = Float(min_value=0.0)


@storefront.entity(part_of="Product")
class Variant:
    """A purchasable dial/strap colour combination with its own stock."""

    dial_color = String(required=True, max_length=50)
    strap_color = String(required=True, max_length=50)
    stock = Integer(required=True, min_value=0)
    images = Text()  # JSON list of image URLs

    def matches(self, dial_color, strap_color):
        return self.dial_color == dial_color and self.strap_color == strap_color

    @property
    def image_urls(self):
        return json.loads(self.images) if self.images else []


@storefront.entity(part_of="Product")
class Image:
    """Gallery image of a product."""

    url = String(required=True, max_length=500)
    display_order = Integer(default=0)


@storefront.aggregate
class Product:
    """Product aggregate root."""

    title = String(required=True, max_length=255)
    sub_title = String(max_length=255)
    description = Text(required=True)
    brand = String(required=True, max_length=100)
    strap_type = String(required=True, choices=StrapType)
    price = ValueObject(Price, required=True)
    category = String(max_length=100)
    sub_category = String(max_length=100)
    gender = String(choices=Gender)
    sizes = Text()  # JSON list of Size values
    sales = Integer(default=0, min_value=0)
    cover_image = String(max_length=500)
    variants = HasMany(Variant)
    images = HasMany(Image)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def variant_colour_pairs_must_be_unique(self):
        seen = set()
        for variant in self.variants or []:
            key = (variant.dial_color, variant.strap_color)
            if key in seen:
                raise ValidationError(
                    {
                        "variants": [
                            f'Duplicate variant for dialColor "{variant.dial_color}" '
                            f'and strapColor "{variant.strap_color}"'
                        ]
                    }
                )
            seen.add(key)

    @property
    def size_list(self):
        return json.loads(self.sizes) if self.sizes else []

    @classmethod
    def create(
        cls,
        title,
        description,
        brand,
        strap_type,
        retail_price,
        variants,
        display_price=None,
        sub_title=None,
        category=None,
        sub_category=None,
        gender=None,
        sizes=None,
        cover_image=None,
        images=None,
    ):
        """Create a product with its variants and gallery.

        Args:
            variants: List of dicts with dial_color, strap_color, stock and
                optionally images (list of URLs).
            sizes: List of Size values.
            images: List of gallery image URLs, in display order.
        """
        from storefront.product.events import ProductCreated

        if not variants:
            raise ValidationError({"variants": ["Product must have at least one variant"]})

        now = datetime.now(UTC)
        product = cls(
            title=title,
            sub_title=sub_title,
            description=description,
            brand=brand,
            strap_type=strap_type,
            price=Price(retail=retail_price, display=display_price),
            category=category,
            sub_category=sub_category,
            gender=gender,
            sizes=_encode_sizes(sizes),
            cover_image=cover_image,
            created_at=now,
            updated_at=now,
        )

        with atomic_change(product):
            for variant_data in variants:
                product.add_variants(_build_variant(variant_data))
            for position, url in enumerate(images or []):
                product.add_images(Image(url=url, display_order=position))

        product.raise_(
            ProductCreated(
                product_id=product.id,
                title=product.title,
                brand=product.brand,
                variant_count=len(product.variants),
                created_at=now,
            )
        )
        return product

    def update(self, **changes):
        """Apply a partial update.

        Accepts any of the plain attributes plus retail_price, display_price,
        sizes, images (URL list) and variants (replaces all variants).
        """
        from storefront.product.events import ProductUpdated

        if not changes:
            raise ValidationError({"_entity": ["At least one field must be provided to update."]})

        now = datetime.now(UTC)
        with atomic_change(self):
            for field in _PLAIN_FIELDS:
                if field in changes:
                    setattr(self, field, changes[field])

            if "retail_price" in changes or "display_price" in changes:
                self.price = Price(
                    retail=changes.get("retail_price", self.price.retail),
                    display=changes.get("display_price", self.price.display),
                )

            if "sizes" in changes:
                self.sizes = _encode_sizes(changes["sizes"])

            if "images" in changes:
                for image in list(self.images):
                    self.remove_images(image)
                for position, url in enumerate(changes["images"] or []):
                    self.add_images(Image(url=url, display_order=position))

            if "variants" in changes:
                if not changes["variants"]:
                    raise ValidationError({"variants": ["Product must have at least one variant"]})
                for variant in list(self.variants):
                    self.remove_variants(variant)
                for variant_data in changes["variants"]:
                    self.add_variants(_build_variant(variant_data))

            self.updated_at = now

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                updated_fields=json.dumps(sorted(changes)),
                updated_at=now,
            )
        )

    def find_variant(self, dial_color, strap_color):
        return next((v for v in self.variants if v.matches(dial_color, strap_color)), None)

    def reserve_stock(self, dial_color, strap_color, quantity):
        """Take `quantity` units of a variant off the shelf and count them as sold."""
        from storefront.product.events import VariantStockReserved

        variant = self.find_variant(dial_color, strap_color)
        if variant is None:
            raise ValidationError(
                {
                    "variants": [
                        f'No matching variant found for dialColor "{dial_color}" and '
                        f'strapColor "{strap_color}" in product "{self.title}"'
                    ]
                }
            )

        if variant.stock < quantity:
            raise ValidationError(
                {
                    "stock": [
                        f'Insufficient stock for variant of product "{self.title}". '
                        f"Available: {variant.stock}, Requested: {quantity}"
                    ]
                }
            )

        variant.stock -= quantity
        self.sales += quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            VariantStockReserved(
                product_id=self.id,
                dial_color=dial_color,
                strap_color=strap_color,
                quantity=quantity,
                remaining_stock=variant.stock,
            )
        )
        return variant

    def restore_stock(self, dial_color, strap_color, quantity):
        """Put `quantity` units back on a variant and reverse the sale.

        Returns False, changing nothing, when the variant no longer exists.
        """
        from storefront.product.events import VariantStockRestored

        variant = self.find_variant(dial_color, strap_color)
        if variant is None:
            return False

        variant.stock += quantity
        self.sales = max(0, self.sales - quantity)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            VariantStockRestored(
                product_id=self.id,
                dial_color=dial_color,
                strap_color=strap_color,
                quantity=quantity,
                restored_stock=variant.stock,
            )
        )
        return True


def _build_variant(data):
    images = data.get("images") or []
    return Variant(
        dial_color=data.get("dial_color"),
        strap_color=data.get("strap_color"),
        stock=data.get("stock"),
        images=json.dumps(list(images)),
    )
