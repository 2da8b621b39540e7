"""Tests for order number generation."""

import re
from unittest import mock

import pytest
from protean.exceptions import ValidationError

from storefront.order import numbering
from storefront.order.numbering import allocate_order_number, generate_order_number

ORDER_NUMBER = re.compile(r"^ORD-\d{8}-\d{3}$")


class _StubRepository:
    def __init__(self, taken):
        self.taken = set(taken)

    def find_by_order_number(self, order_number):
        return object() if order_number in self.taken else None


class TestGenerateOrderNumber:
    def test_format(self):
        assert ORDER_NUMBER.match(generate_order_number())

    def test_uses_trailing_eight_digits_of_timestamp(self):
        assert generate_order_number(now_ms=1729252800123).startswith("ORD-52800123-")

    def test_random_suffix_is_zero_padded(self):
        with mock.patch.object(numbering.random, "randint", return_value=7):
            assert generate_order_number(now_ms=1729252800123) == "ORD-52800123-007"


class TestAllocateOrderNumber:
    def test_returns_free_number(self):
        assert ORDER_NUMBER.match(allocate_order_number(_StubRepository([])))

    def test_retries_on_collision(self):
        numbers = iter(["ORD-11111111-001", "ORD-11111111-002"])
        with mock.patch.object(numbering, "generate_order_number", side_effect=lambda: next(numbers)):
            assert allocate_order_number(_StubRepository(["ORD-11111111-001"])) == "ORD-11111111-002"

    def test_gives_up_after_bounded_attempts(self):
        with mock.patch.object(numbering, "generate_order_number", return_value="ORD-11111111-001"):
            with pytest.raises(ValidationError):
                allocate_order_number(_StubRepository(["ORD-11111111-001"]), attempts=3)
