import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.api import order_router, product_router, register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(product_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    return TestClient(app)


PRODUCT = {
    "title": "Seamaster Diver",
    "subTitle": "Professional 300M",
    "description": "300m automatic diver with ceramic bezel",
    "brandName": "Omega",
    "strapType": "CHAIN",
    "price": {"retail": 250.0, "display": 300.0},
    "category": "Watches",
    "subCategory": "Diver",
    "gender": "UNISEX",
    "sizes": ["M", "L"],
    "variants": [
        {"dialColor": "black", "strapColor": "brown", "stock": 5},
        {"dialColor": "blue", "strapColor": "steel", "stock": 2},
    ],
    "coverImage": "https://cdn.example.com/seamaster.jpg",
}

ADDRESS = {
    "email": "Jane.Doe@Example.com",
    "mobileNumber": "+15551234567",
    "firstName": "Jane",
    "lastName": "Doe",
    "country": "United States",
    "state": "Illinois",
    "city": "Springfield",
    "postalCode": "62701",
    "address": "742 Evergreen Terrace",
}


@pytest.fixture()
def product_payload():
    return dict(PRODUCT)


@pytest.fixture()
def create_product(client):
    def _create(**overrides):
        response = client.post("/api/products", json={**PRODUCT, **overrides})
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture()
def order_body():
    def _body(product_id, quantity=1, dial_color="black", strap_color="brown", **overrides):
        body = {
            "items": [
                {"product": product_id, "quantity": quantity, "dialColor": dial_color, "strapColor": strap_color}
            ],
            "shippingAddress": ADDRESS,
            "billingAddress": ADDRESS,
            "paymentMethod": "CREDIT_CARD",
        }
        body.update(overrides)
        return body

    return _body


@pytest.fixture()
def create_order(client, order_body):
    def _create(product_id, **kwargs):
        response = client.post("/api/orders", json=order_body(product_id, **kwargs))
        assert response.status_code == 201, response.text
        return response.json()["data"]["order"]

    return _create
