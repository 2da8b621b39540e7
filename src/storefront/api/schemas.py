"""Pydantic request schemas for the storefront API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Field names are camelCase on the wire.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class PriceSchema(CamelModel):
    retail: float = Field(ge=0)
    display: float | None = Field(default=None, ge=0)


class PriceUpdateSchema(CamelModel):
    retail: float | None = Field(default=None, ge=0)
    display: float | None = Field(default=None, ge=0)


class VariantSchema(CamelModel):
    dial_color: str
    strap_color: str
    stock: int = Field(ge=0)
    images: list[str] = []


class CreateProductRequest(CamelModel):
    title: str
    sub_title: str | None = None
    description: str
    brand: str = Field(validation_alias=AliasChoices("brand", "brandName"))
    strap_type: str
    price: PriceSchema
    category: str | None = None
    sub_category: str | None = None
    gender: str | None = None
    sizes: list[str] = []
    variants: list[VariantSchema]
    cover_image: str | None = None
    images: list[str] = []

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "title": "Seamaster Diver",
                    "description": "300m automatic diver with ceramic bezel",
                    "brand": "Omega",
                    "strapType": "CHAIN",
                    "price": {"retail": 4999.0, "display": 5499.0},
                    "gender": "UNISEX",
                    "sizes": ["M", "L"],
                    "variants": [{"dialColor": "blue", "strapColor": "steel", "stock": 5}],
                }
            ]
        }
    )


class UpdateProductRequest(CamelModel):
    title: str | None = None
    sub_title: str | None = None
    description: str | None = None
    brand: str | None = Field(default=None, validation_alias=AliasChoices("brand", "brandName"))
    strap_type: str | None = None
    price: PriceUpdateSchema | None = None
    category: str | None = None
    sub_category: str | None = None
    gender: str | None = None
    sizes: list[str] | None = None
    variants: list[VariantSchema] | None = None
    cover_image: str | None = None
    images: list[str] | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CartLineSchema(CamelModel):
    product_id: str | None = Field(default=None, validation_alias=AliasChoices("product", "productId", "product_id"))
    quantity: int | None = None
    dial_color: str | None = None
    strap_color: str | None = None
    size: str | None = None


class AddressSchema(CamelModel):
    email: str | None = None
    mobile_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    postal_code: str | None = None
    address: str | None = None


_EXAMPLE_ADDRESS = {
    "email": "jane@example.com",
    "mobileNumber": "+15551234567",
    "firstName": "Jane",
    "lastName": "Doe",
    "country": "US",
    "state": "IL",
    "city": "Springfield",
    "postalCode": "62701",
    "address": "742 Evergreen Terrace",
}


class PlaceOrderRequest(CamelModel):
    items: list[CartLineSchema] = []
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    payment_method: str | None = None
    # Charges are coerced leniently; non-numeric values count as 0
    shipping_cost: Any = 0
    tax: Any = 0
    discount: Any = 0
    notes: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "items": [{"product": "<product id>", "quantity": 1, "dialColor": "blue", "strapColor": "steel"}],
                    "shippingAddress": _EXAMPLE_ADDRESS,
                    "billingAddress": _EXAMPLE_ADDRESS,
                    "paymentMethod": "CREDIT_CARD",
                    "shippingCost": 10,
                }
            ]
        }
    )


class CancelOrderRequest(CamelModel):
    cancel_reason: str | None = None


class UpdateOrderStatusRequest(CamelModel):
    status: str | None = None
    tracking_number: str | None = None
    estimated_delivery: str | None = None


class UpdateOrderRequest(CamelModel):
    """Admin patch.

    Identity, numbering and timestamps are ignored. Derived fields are passed
    through so the domain can reject them by name.
    """

    model_config = ConfigDict(extra="ignore")

    customer_email: str | None = None
    status: str | None = None
    payment_status: str | None = None
    payment_method: str | None = None
    payment_id: str | None = None
    shipping_cost: float | None = None
    tax: float | None = None
    discount: float | None = None
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    tracking_number: str | None = None
    estimated_delivery: str | None = None
    delivered_at: str | None = None
    cancelled_at: str | None = None
    cancel_reason: str | None = None
    notes: str | None = None
    # Not patchable
    subtotal: Any = None
    total_amount: Any = None
    items: Any = None
