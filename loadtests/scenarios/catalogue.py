"""Catalogue load test scenarios.

Browsing (list and detail reads) and an admin product lifecycle
(create -> update -> read -> delete).
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import product_data, product_update_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ProductState


class ProductLifecycleJourney(SequentialTaskSet):
    """Create Product -> Update -> Read -> Delete."""

    def on_start(self):
        self.state = ProductState()

    @task
    def create_product(self):
        with self.client.post(
            "/api/products",
            json=product_data(),
            catch_response=True,
            name="POST /api/products",
        ) as resp:
            if resp.status_code == 201:
                data = resp.json()["data"]
                self.state.product_id = data["id"]
                self.state.variants = data["variants"]
            else:
                resp.failure(f"Create product failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def update_product(self):
        with self.client.patch(
            f"/api/products/{self.state.product_id}",
            json=product_update_data(),
            catch_response=True,
            name="PATCH /api/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update product failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def get_product(self):
        with self.client.get(
            f"/api/products/{self.state.product_id}",
            catch_response=True,
            name="GET /api/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get product failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def delete_product(self):
        with self.client.delete(
            f"/api/products/{self.state.product_id}",
            catch_response=True,
            name="DELETE /api/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Delete product failed: {resp.status_code}: {extract_error_detail(resp)}")
        self.interrupt()


class CatalogueUser(HttpUser):
    """Locust user browsing the catalogue, with occasional admin edits.

    Weighted distribution:
    - 60% Browse full catalogue
    - 25% Product detail
    - 15% Product lifecycle (admin)
    """

    wait_time = between(0.5, 2.0)
    tasks = {ProductLifecycleJourney: 3}

    @task(12)
    def browse(self):
        self.client.get("/api/products", name="GET /api/products")

    @task(5)
    def product_detail(self):
        with self.client.get("/api/products", catch_response=True, name="GET /api/products") as resp:
            products = resp.json().get("data", []) if resp.status_code == 200 else []
        if products:
            product = random.choice(products)
            self.client.get(f"/api/products/{product['id']}", name="GET /api/products/{id}")
