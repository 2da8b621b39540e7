"""Shared BDD fixtures and step definitions for placement and cancellation."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.status import UpdateOrderStatus
from storefront.product.creation import CreateProduct
from storefront.product.product import Product


@pytest.fixture()
def catalogue():
    """Product under test, filled in by the Given steps."""
    return {"title": None, "price": None, "variants": [], "product_id": None}


@pytest.fixture()
def outcome():
    """Result of the When step: the placed order or the captured error."""
    return {"order": None, "error": None}


def _product_id(catalogue):
    if catalogue["product_id"] is None:
        catalogue["product_id"] = current_domain.process(
            CreateProduct(
                title=catalogue["title"],
                description="Automatic diver",
                brand="Omega",
                strap_type="CHAIN",
                retail_price=catalogue["price"],
                variants=json.dumps(catalogue["variants"]),
            ),
            asynchronous=False,
        )
    return catalogue["product_id"]


def _place(catalogue, outcome, quantity, dial_color, strap_color, **charges):
    address = {
        "email": "jane.doe@example.com",
        "mobile_number": "+15551234567",
        "first_name": "Jane",
        "last_name": "Doe",
        "country": "United States",
        "state": "Illinois",
        "city": "Springfield",
        "postal_code": "62701",
        "address": "742 Evergreen Terrace",
    }
    command = PlaceOrder(
        items=json.dumps(
            [
                {
                    "product_id": _product_id(catalogue),
                    "quantity": quantity,
                    "dial_color": dial_color,
                    "strap_color": strap_color,
                }
            ]
        ),
        shipping_address=json.dumps(address),
        billing_address=json.dumps(address),
        payment_method="CREDIT_CARD",
        **charges,
    )
    try:
        order_id = current_domain.process(command, asynchronous=False)
        outcome["order"] = current_domain.repository_for(Order).get(order_id)
    except ValidationError as exc:
        outcome["error"] = exc


@pytest.fixture()
def order_product(catalogue, outcome):
    """Place an order for the product under test, capturing any rejection in `outcome`."""

    def _order(quantity, dial_color, strap_color, **charges):
        _place(catalogue, outcome, quantity, dial_color, strap_color, **charges)

    return _order


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{title}" priced at {price:f}'))
def _(catalogue, title, price):
    catalogue["title"] = title
    catalogue["price"] = price


@given(parsers.cfparse('the product has a "{dial_color}"/"{strap_color}" variant with {stock:d} in stock'))
def _(catalogue, dial_color, strap_color, stock):
    catalogue["variants"].append({"dial_color": dial_color, "strap_color": strap_color, "stock": stock})


@given(parsers.cfparse('the customer has ordered {quantity:d} of the "{dial_color}"/"{strap_color}" variant'))
def _(catalogue, outcome, quantity, dial_color, strap_color):
    _place(catalogue, outcome, quantity, dial_color, strap_color)
    assert outcome["error"] is None


@given(parsers.cfparse('the order status is set to "{status}"'))
def _(outcome, status):
    current_domain.process(UpdateOrderStatus(order_id=outcome["order"].id, status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the "{dial_color}"/"{strap_color}" variant has {stock:d} in stock'))
def _(catalogue, dial_color, strap_color, stock):
    product = current_domain.repository_for(Product).get(_product_id(catalogue))
    assert product.find_variant(dial_color, strap_color).stock == stock


@then(parsers.cfparse("the product has {sales:d} sales"))
def _(catalogue, sales):
    assert current_domain.repository_for(Product).get(_product_id(catalogue)).sales == sales
