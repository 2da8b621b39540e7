"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
(address patterns, enum values, variant uniqueness) and use the camelCase
field names the API expects.
"""

import random
import uuid

from faker import Faker

fake = Faker()

STRAP_TYPES = ["CHAIN", "BELT"]
GENDERS = ["MALE", "FEMALE", "KIDS", "UNISEX"]
SIZES = ["XS", "S", "M", "L", "XL", "XXL"]
PAYMENT_METHODS = ["CREDIT_CARD", "DEBIT_CARD", "PAYPAL", "BANK_TRANSFER", "CASH_ON_DELIVERY"]
DIAL_COLORS = ["black", "white", "blue", "green", "silver", "champagne"]
STRAP_COLORS = ["brown", "black", "steel", "gold", "tan", "navy"]


def valid_email() -> str:
    """Generate emails that pass the address email pattern: word chars, one @, 2-3 letter TLD."""
    local = fake.user_name().replace("_", "")[:20] or "buyer"
    return f"{local}.{uuid.uuid4().hex[:6]}@example.com"


def valid_mobile() -> str:
    """Generate numbers matching ^\\+?[0-9]\\d{0,15}$."""
    return f"+1{random.randint(2000000000, 9999999999)}"


def address_data(email: str | None = None) -> dict:
    """Generate an address payload with every field inside its length limits."""
    return {
        "email": email or valid_email(),
        "mobileNumber": valid_mobile(),
        "firstName": fake.first_name()[:50].ljust(2, "x"),
        "lastName": fake.last_name()[:50].ljust(2, "x"),
        "country": "United States",
        "state": fake.state()[:100],
        "city": fake.city()[:100],
        "postalCode": fake.zipcode()[:10],
        "address": f"{fake.building_number()} {fake.street_name()} Street"[:200],
    }


def variant_data(count: int = 2, stock: int | None = None) -> list[dict]:
    """Generate `count` variants with distinct (dialColor, strapColor) pairs."""
    pairs = random.sample([(d, s) for d in DIAL_COLORS for s in STRAP_COLORS], count)
    return [
        {
            "dialColor": dial,
            "strapColor": strap,
            "stock": stock if stock is not None else random.randint(50, 500),
        }
        for dial, strap in pairs
    ]


def product_data(variant_count: int = 2, stock: int | None = None) -> dict:
    """Generate a CreateProductRequest payload."""
    word = fake.word().capitalize()
    retail = round(random.uniform(50.0, 2000.0), 2)
    return {
        "title": f"{word} {random.choice(['Chronograph', 'Diver', 'Dress', 'Pilot', 'Field'])}",
        "subTitle": fake.sentence(nb_words=4)[:255],
        "description": fake.paragraph(nb_sentences=3),
        "brand": fake.company()[:100],
        "strapType": random.choice(STRAP_TYPES),
        "price": {"retail": retail, "display": round(retail * 1.2, 2)},
        "category": "Watches",
        "subCategory": random.choice(["Luxury", "Sport", "Casual"]),
        "gender": random.choice(GENDERS),
        "sizes": random.sample(SIZES, 3),
        "variants": variant_data(variant_count, stock),
        "coverImage": f"https://cdn.example.com/products/{uuid.uuid4().hex[:12]}.jpg",
    }


def product_update_data() -> dict:
    """Generate a partial product update."""
    return random.choice(
        [
            {"subTitle": fake.sentence(nb_words=4)[:255]},
            {"price": {"display": round(random.uniform(100.0, 3000.0), 2)}},
            {"category": random.choice(["Watches", "Accessories"])},
        ]
    )


def order_data(product_id: str, variant: dict, quantity: int = 1, email: str | None = None) -> dict:
    """Generate a PlaceOrderRequest payload for one variant of one product."""
    shipping = address_data(email)
    return {
        "items": [
            {
                "product": product_id,
                "quantity": quantity,
                "dialColor": variant["dialColor"],
                "strapColor": variant["strapColor"],
            }
        ],
        "shippingAddress": shipping,
        "billingAddress": shipping if random.random() < 0.8 else address_data(shipping["email"]),
        "paymentMethod": random.choice(PAYMENT_METHODS),
        "shippingCost": random.choice([0, 5.99, 12.5]),
        "tax": round(random.uniform(0, 40), 2),
        "discount": random.choice([0, 0, 5]),
    }


def tracking_number() -> str:
    return f"1Z{uuid.uuid4().hex[:16].upper()}"
