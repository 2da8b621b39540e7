"""Tests for the Address value object."""

import pytest
from protean.exceptions import ValidationError

from storefront.order.order import Address


class TestAddressFromDict:
    def test_builds_trimmed_address(self, address):
        built = Address.from_dict({**address, "city": "  Springfield  "})
        assert built.city == "Springfield"

    def test_email_is_lowercased(self, address):
        built = Address.from_dict(address)
        assert built.email == "jane.doe@example.com"

    def test_unknown_keys_are_ignored(self, address):
        built = Address.from_dict({**address, "landmark": "Opposite the park"})
        assert built.postal_code == "62701"

    def test_errors_are_prefixed_with_the_address_field(self, address):
        with pytest.raises(ValidationError) as exc:
            Address.from_dict({**address, "email": "not-an-email"}, field="shipping_address")
        assert "shipping_address.email" in exc.value.messages

    def test_non_dict_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Address.from_dict("742 Evergreen Terrace", field="billing_address")
        assert "billing_address" in exc.value.messages

    def test_missing_field_rejected(self, address):
        del address["city"]
        with pytest.raises(ValidationError) as exc:
            Address.from_dict(address, field="shipping_address")
        assert "shipping_address.city" in exc.value.messages


class TestAddressRules:
    @pytest.mark.parametrize("mobile", ["+15551234567", "5551234", "0"])
    def test_valid_mobile_numbers(self, address, mobile):
        assert Address.from_dict({**address, "mobile_number": mobile}).mobile_number == mobile

    @pytest.mark.parametrize("mobile", ["555-123", "+", "phone", "12345678901234567"])
    def test_invalid_mobile_numbers(self, address, mobile):
        with pytest.raises(ValidationError):
            Address.from_dict({**address, "mobile_number": mobile})

    @pytest.mark.parametrize("postal_code", ["62701", "SW1A 1AA", "k1a-0b1"])
    def test_valid_postal_codes(self, address, postal_code):
        assert Address.from_dict({**address, "postal_code": postal_code}).postal_code == postal_code

    @pytest.mark.parametrize("postal_code", ["12", "62701#", "12345678901"])
    def test_invalid_postal_codes(self, address, postal_code):
        with pytest.raises(ValidationError):
            Address.from_dict({**address, "postal_code": postal_code})

    def test_short_street_address_rejected(self, address):
        with pytest.raises(ValidationError):
            Address.from_dict({**address, "address": "Main St"})

    def test_single_letter_name_rejected(self, address):
        with pytest.raises(ValidationError):
            Address.from_dict({**address, "first_name": "J"})
