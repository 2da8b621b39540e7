"""Stress test scenarios for stock contention.

HotVariantUser makes every simulated customer order from the same small
variant at once. Placement must never sell more units than the variant
holds: once stock runs out, orders are rejected with 400 (insufficient
stock) or 409 (lost a concurrent update), never accepted.
"""

import requests
from locust import HttpUser, constant_pacing, events, task

from loadtests.data_generators import order_data, product_data

HOT_STOCK = 50

_hot_product = {"id": None, "variant": None}


@events.test_start.add_listener
def create_hot_product(environment, **_kwargs):
    """Create the single contended product before users start."""
    if environment.host is None:
        return

    resp = requests.post(
        f"{environment.host}/api/products",
        json=product_data(variant_count=1, stock=HOT_STOCK),
        timeout=10,
    )
    resp.raise_for_status()
    data = resp.json()["data"]
    _hot_product["id"] = data["id"]
    _hot_product["variant"] = data["variants"][0]


class HotVariantUser(HttpUser):
    """Stress test: many customers racing for the last units of one variant."""

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    @task(5)
    def order_hot_variant(self):
        if _hot_product["id"] is None:
            return
        with self.client.post(
            "/api/orders",
            json=order_data(_hot_product["id"], _hot_product["variant"], quantity=1),
            catch_response=True,
            name="[STRESS] POST /api/orders",
        ) as resp:
            # Running out of stock and losing a race are expected outcomes here
            if resp.status_code in (201, 400, 409):
                resp.success()

    @task(1)
    def check_stock(self):
        if _hot_product["id"] is None:
            return
        with self.client.get(
            f"/api/products/{_hot_product['id']}",
            catch_response=True,
            name="[STRESS] GET /api/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                return
            data = resp.json()["data"]
            if data["variants"][0]["stock"] < 0 or data["sales"] > HOT_STOCK:
                resp.failure(f"Oversold: stock={data['variants'][0]['stock']} sales={data['sales']}")
