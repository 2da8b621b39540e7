"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state, with no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ProductState:
    """Tracks state for a single simulated product lifecycle."""

    product_id: str | None = None
    variants: list[dict] = field(default_factory=list)


@dataclass
class OrderState:
    """Tracks state for a single order lifecycle."""

    product_id: str | None = None
    variant: dict | None = None
    order_id: str | None = None
    order_number: str | None = None
    customer_email: str | None = None
    quantity: int = 0
    current_status: str = "PENDING"
