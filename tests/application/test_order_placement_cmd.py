"""Application tests for order placement."""

import json
import re

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.product.product import Product
from storefront.product.repository import ProductRepository


def _reload(product):
    return current_domain.repository_for(Product).get(product.id)


def _order_count():
    return current_domain.repository_for(Order)._dao.query.all().total


class TestPlaceOrder:
    def test_order_is_persisted(self, make_product, place_order, cart_line):
        product = make_product()
        order = place_order([cart_line(product, quantity=3)])

        assert order.status == "PENDING"
        assert len(order.items) == 1
        assert order.items[0].total_price == 750.0
        assert order.subtotal == 750.0
        assert order.total_amount == 750.0

    def test_stock_and_sales_updated(self, make_product, place_order, cart_line):
        product = make_product()
        place_order([cart_line(product, quantity=3)])

        product = _reload(product)
        assert product.find_variant("black", "brown").stock == 2
        assert product.find_variant("blue", "steel").stock == 2
        assert product.sales == 3

    def test_order_number_format(self, make_product, place_order, cart_line):
        order = place_order([cart_line(make_product())])
        assert re.match(r"^ORD-\d{8}-\d{3}$", order.order_number)

    def test_charges_included_in_total(self, make_product, place_order, cart_line):
        order = place_order([cart_line(make_product())], shipping_cost=10.0, tax=20.0, discount=5.0)
        assert order.total_amount == 275.0

    def test_customer_email_lowercased(self, make_product, place_order, cart_line):
        order = place_order([cart_line(make_product())])
        assert order.customer_email == "jane.doe@example.com"

    def test_snapshot_survives_product_edit(self, make_product, place_order, cart_line):
        product = make_product()
        order = place_order([cart_line(product)])

        product = _reload(product)
        product.update(title="Renamed", retail_price=999.0)
        current_domain.repository_for(Product).add(product)

        order = current_domain.repository_for(Order).get(order.id)
        assert order.items[0].snapshot.title == "Seamaster Diver"
        assert order.items[0].unit_price == 250.0

    def test_same_variant_on_several_lines_accumulates(self, make_product, place_order, cart_line):
        product = make_product()
        place_order([cart_line(product, quantity=2), cart_line(product, quantity=3)])
        assert _reload(product).find_variant("black", "brown").stock == 0

    def test_size_accepted_when_offered(self, make_product, place_order, cart_line):
        order = place_order([cart_line(make_product(), size="M")])
        assert order.items[0].size == "M"


class TestPlaceOrderRejections:
    def test_empty_cart(self, place_order):
        with pytest.raises(ValidationError) as exc:
            place_order([])
        assert exc.value.messages["items"] == ["Order must contain at least one item"]

    def test_line_without_quantity(self, make_product, place_order, cart_line):
        with pytest.raises(ValidationError) as exc:
            place_order([cart_line(make_product(), quantity=0)])
        assert exc.value.messages["items"] == ["Each item must have a valid product ID and quantity"]

    def test_missing_payment_method(self, make_product, place_order, cart_line):
        with pytest.raises(ValidationError) as exc:
            place_order([cart_line(make_product())], payment_method=None)
        assert exc.value.messages["_entity"] == [
            "Shipping address, billing address, and payment method are required"
        ]

    def test_unknown_product(self, place_order):
        product_id = "6f1c1f4e-2b7a-4f7e-9d65-0d7c3c0f9a11"
        with pytest.raises(ObjectNotFoundError) as exc:
            place_order([{"product_id": product_id, "quantity": 1, "dial_color": "black", "strap_color": "brown"}])
        assert exc.value.messages == {"product": [f"Product with ID {product_id} not found"]}

    def test_missing_colours(self, make_product, place_order, cart_line):
        with pytest.raises(ValidationError) as exc:
            place_order([cart_line(make_product(), strap_color=None)])
        assert exc.value.messages["items"] == [
            'Both dialColor and strapColor are required for product "Seamaster Diver"'
        ]

    def test_no_matching_variant(self, make_product, place_order, cart_line):
        with pytest.raises(ValidationError):
            place_order([cart_line(make_product(), dial_color="green")])

    def test_insufficient_stock(self, make_product, place_order, cart_line):
        with pytest.raises(ValidationError) as exc:
            place_order([cart_line(make_product(), quantity=6)])
        assert "Available: 5, Requested: 6" in exc.value.messages["stock"][0]
        assert _order_count() == 0

    def test_size_not_offered(self, make_product, place_order, cart_line):
        with pytest.raises(ValidationError) as exc:
            place_order([cart_line(make_product(), size="XS")])
        assert exc.value.messages["size"] == ['Size "XS" is not available for product "Seamaster Diver"']

    def test_negative_charge(self, make_product, place_order, cart_line):
        with pytest.raises(ValidationError) as exc:
            place_order([cart_line(make_product())], discount=-1.0)
        assert exc.value.messages["_entity"] == ["Shipping cost, tax, and discount must be non-negative values"]

    def test_invalid_shipping_address(self, make_product, place_order, cart_line, address):
        with pytest.raises(ValidationError) as exc:
            place_order(
                [cart_line(make_product())],
                shipping_address=json.dumps({**address, "email": "nope"}),
            )
        assert "shipping_address.email" in exc.value.messages


class TestPlacementIsAllOrNothing:
    def test_failure_on_later_line_leaves_earlier_stock_untouched(self, make_product, place_order, cart_line):
        first = make_product(title="First")
        second = make_product(title="Second")

        with pytest.raises(ValidationError):
            place_order([cart_line(first, quantity=2), cart_line(second, quantity=50)])

        first = _reload(first)
        assert first.find_variant("black", "brown").stock == 5
        assert first.sales == 0
        assert _order_count() == 0

    def test_repeated_lines_cannot_oversell(self, make_product, place_order, cart_line):
        product = make_product()
        with pytest.raises(ValidationError):
            place_order([cart_line(product, quantity=3), cart_line(product, quantity=3)])
        assert _reload(product).find_variant("black", "brown").stock == 5

    def test_invalid_address_leaves_stock_untouched(self, make_product, place_order, cart_line, address):
        product = make_product()
        with pytest.raises(ValidationError):
            place_order([cart_line(product)], billing_address=json.dumps({**address, "postal_code": "#"}))
        assert _reload(product).find_variant("black", "brown").stock == 5


class TestConcurrentStockWrites:
    def test_second_write_from_stale_copy_is_rejected(self, make_product):
        repo = current_domain.repository_for(Product)
        product = make_product()

        first = repo.get(product.id)
        second = repo.get(product.id)
        first.reserve_stock("black", "brown", 3)
        second.reserve_stock("black", "brown", 3)

        repo.add(first)
        with pytest.raises(ExpectedVersionError):
            repo.add(second)

        stored = _reload(product)
        assert stored.find_variant("black", "brown").stock == 2
        assert stored.sales == 3

    def test_placement_against_stale_product_is_rejected(self, make_product, place_order, cart_line, monkeypatch):
        product = make_product()
        stale = _reload(product)

        # Another customer's order commits after `stale` was read
        place_order([cart_line(product, quantity=3)])
        monkeypatch.setattr(ProductRepository, "find", lambda self, product_id, message=None: stale)

        with pytest.raises(ExpectedVersionError):
            place_order([cart_line(product, quantity=2)])
        monkeypatch.undo()

        stored = _reload(product)
        assert stored.find_variant("black", "brown").stock == 2
        assert stored.sales == 3
        assert _order_count() == 1


class TestPlaceOrderCommand:
    def test_process_returns_order_id(self, make_product, address, cart_line):
        product = make_product()
        order_id = current_domain.process(
            PlaceOrder(
                items=json.dumps([cart_line(product)]),
                shipping_address=json.dumps(address),
                billing_address=json.dumps(address),
                payment_method="CASH_ON_DELIVERY",
            ),
            asynchronous=False,
        )
        assert current_domain.repository_for(Order).get(order_id).payment_method == "CASH_ON_DELIVERY"
