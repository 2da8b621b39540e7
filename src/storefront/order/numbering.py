"""Human-readable order numbers.

Format: ``ORD-<last 8 digits of the epoch milliseconds>-<3 random digits>``.
"""

import random
import time

from protean.exceptions import ValidationError

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_NUMBER_PREFIX = "ORD"
MAX_ALLOCATION_ATTEMPTS = 5


def generate_order_number(now_ms=None) -> str:
    timestamp = str(now_ms if now_ms is not None else int(time.time() * 1000))
    suffix = f"{random.randint(0, 999):03d}"
    return f"{ORDER_NUMBER_PREFIX}-{timestamp[-8:]}-{suffix}"


def allocate_order_number(repository, attempts=MAX_ALLOCATION_ATTEMPTS) -> str:
    """Generate an order number not yet used by any stored order."""
    for _ in range(attempts):
        candidate = generate_order_number()
        if repository.find_by_order_number(candidate) is None:
            return candidate
        logger.warning("Order number collision", order_number=candidate)

    raise ValidationError({"order_number": ["Could not allocate a unique order number"]})
