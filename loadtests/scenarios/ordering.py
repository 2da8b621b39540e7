"""Ordering load test scenarios.

Stateful SequentialTaskSet journeys covering placement through delivery,
placement followed by customer cancellation, and order history reads.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import order_data, product_data, tracking_number
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import OrderState


class _OrderJourney(SequentialTaskSet):
    """Shared first steps: create a product, then order one of its variants."""

    def on_start(self):
        self.state = OrderState()

    def _create_product(self):
        with self.client.post(
            "/api/products",
            json=product_data(),
            catch_response=True,
            name="POST /api/products",
        ) as resp:
            if resp.status_code == 201:
                data = resp.json()["data"]
                self.state.product_id = data["id"]
                self.state.variant = random.choice(data["variants"])
            else:
                resp.failure(f"Create product failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    def _place_order(self):
        self.state.quantity = random.randint(1, 3)
        payload = order_data(self.state.product_id, self.state.variant, self.state.quantity)
        with self.client.post(
            "/api/orders",
            json=payload,
            catch_response=True,
            name="POST /api/orders",
        ) as resp:
            if resp.status_code == 201:
                order = resp.json()["data"]["order"]
                self.state.order_id = order["id"]
                self.state.order_number = order["orderNumber"]
                self.state.customer_email = order["customerEmail"]
            else:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    def _set_status(self, status, **extra):
        with self.client.patch(
            f"/api/orders/admin/{self.state.order_id}/status",
            json={"status": status, **extra},
            catch_response=True,
            name="PATCH /api/orders/admin/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"{status} failed: {resp.status_code}: {extract_error_detail(resp)}")


class OrderFulfilmentJourney(_OrderJourney):
    """Create Product -> Place Order -> Confirm -> Process -> Ship -> Deliver."""

    @task
    def create_product(self):
        self._create_product()

    @task
    def place_order(self):
        self._place_order()

    @task
    def confirm(self):
        self._set_status("CONFIRMED")

    @task
    def process(self):
        self._set_status("PROCESSING")

    @task
    def ship(self):
        self._set_status("SHIPPED", trackingNumber=tracking_number())

    @task
    def deliver(self):
        self._set_status("DELIVERED")

    @task
    def lookup_by_number(self):
        self.client.get(f"/api/orders/number/{self.state.order_number}", name="GET /api/orders/number/{number}")
        self.interrupt()


class OrderCancellationJourney(_OrderJourney):
    """Create Product -> Place Order -> Cancel -> verify stock came back."""

    @task
    def create_product(self):
        self._create_product()

    @task
    def place_order(self):
        self._place_order()

    @task
    def cancel(self):
        with self.client.patch(
            f"/api/orders/{self.state.order_id}/cancel",
            json={"cancelReason": "Changed my mind"},
            catch_response=True,
            name="PATCH /api/orders/{id}/cancel",
        ) as resp:
            if resp.status_code == 200:
                skipped = resp.json()["data"]["stockRestoration"]["skipped"]
                if skipped:
                    resp.failure(f"Stock not restored for {len(skipped)} item(s)")
            else:
                resp.failure(f"Cancel failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def verify_stock(self):
        with self.client.get(
            f"/api/products/{self.state.product_id}",
            catch_response=True,
            name="GET /api/products/{id}",
        ) as resp:
            if resp.status_code == 200 and resp.json()["data"]["sales"] != 0:
                resp.failure("Sales counter not reversed after cancellation")
        self.interrupt()


class OrderHistoryJourney(_OrderJourney):
    """Create Product -> Place Order -> list own orders -> admin listing."""

    @task
    def create_product(self):
        self._create_product()

    @task
    def place_order(self):
        self._place_order()

    @task
    def my_orders(self):
        self.client.get(
            f"/api/orders/email/{self.state.customer_email}",
            params={"page": 1, "limit": 10, "sortBy": "createdAt", "sortOrder": "desc"},
            name="GET /api/orders/email/{email}",
        )

    @task
    def admin_orders(self):
        self.client.get(
            "/api/orders/admin/all",
            params={"page": 1, "limit": 20, "status": random.choice(["PENDING", "SHIPPED", "CANCELLED"])},
            name="GET /api/orders/admin/all",
        )
        self.interrupt()


class OrderingUser(HttpUser):
    """Locust user simulating ordering interactions.

    Weighted distribution:
    - 45% Placement through delivery
    - 30% Placement then cancellation
    - 25% Order history reads
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        OrderFulfilmentJourney: 9,
        OrderCancellationJourney: 6,
        OrderHistoryJourney: 5,
    }
