import json
import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
ADDRESS = {
    "email": "Jane.Doe@Example.com",
    "mobile_number": "+15551234567",
    "first_name": "Jane",
    "last_name": "Doe",
    "country": "United States",
    "state": "Illinois",
    "city": "Springfield",
    "postal_code": "62701",
    "address": "742 Evergreen Terrace",
}


@pytest.fixture()
def address():
    return dict(ADDRESS)


@pytest.fixture()
def make_product():
    """Create and persist a product through the CreateProduct command."""
    from protean import current_domain

    from storefront.product.creation import CreateProduct
    from storefront.product.product import Product

    def _make(**overrides):
        values = {
            "title": "Seamaster Diver",
            "description": "300m automatic diver",
            "brand": "Omega",
            "strap_type": "CHAIN",
            "retail_price": 250.0,
            "display_price": 300.0,
            "category": "Watches",
            "sub_category": "Diver",
            "gender": "UNISEX",
            "sizes": ["M", "L"],
            "variants": [
                {"dial_color": "black", "strap_color": "brown", "stock": 5},
                {"dial_color": "blue", "strap_color": "steel", "stock": 2},
            ],
            "cover_image": "https://cdn.example.com/seamaster.jpg",
        }
        values.update(overrides)
        for key in ("sizes", "variants", "images"):
            if key in values and not isinstance(values[key], str):
                values[key] = json.dumps(values[key])

        product_id = current_domain.process(CreateProduct(**values), asynchronous=False)
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture()
def place_order(address):
    """Place an order through the PlaceOrder command and return the stored order."""
    from protean import current_domain

    from storefront.order.order import Order
    from storefront.order.placement import PlaceOrder

    def _place(lines, **overrides):
        values = {
            "items": json.dumps(lines),
            "shipping_address": json.dumps(address),
            "billing_address": json.dumps(address),
            "payment_method": "CREDIT_CARD",
        }
        values.update(overrides)
        order_id = current_domain.process(PlaceOrder(**values), asynchronous=False)
        return current_domain.repository_for(Order).get(order_id)

    return _place


def line(product, quantity=1, dial_color="black", strap_color="brown", size=None):
    """A cart line for `product`."""
    return {
        "product_id": str(product.id),
        "quantity": quantity,
        "dial_color": dial_color,
        "strap_color": strap_color,
        "size": size,
    }


@pytest.fixture()
def cart_line():
    return line
