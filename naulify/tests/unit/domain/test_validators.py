from __future__ import annotations

import pytest

from naulify.domain.errors import ValidationError
from naulify.domain.validators import (
    require_email,
    require_mpesa_short_code,
    require_non_empty,
    require_phone_number,
    require_vehicle_registration,
    validate_email,
    validate_mpesa_short_code,
    validate_phone_number,
    validate_vehicle_registration,
)


@pytest.mark.parametrize("value", ["KAA123A", "KAA 123A", "KDJ 456Z"])
def test_registration_accepts_kenyan_plates(value: str) -> None:
    assert validate_vehicle_registration(value)


@pytest.mark.parametrize("value", ["KA123A", "kaa123a", "KAA  123A", "KAA123", "KAA123AB", ""])
def test_registration_rejects_malformed_plates(value: str) -> None:
    assert not validate_vehicle_registration(value)


def test_phone_number_needs_exactly_ten_digits() -> None:
    assert validate_phone_number("0712345678")
    assert not validate_phone_number("071234567")
    assert not validate_phone_number("07123456789")
    assert not validate_phone_number("07123 5678")
    assert not validate_phone_number("+254712345")


def test_short_code_is_five_or_six_digits() -> None:
    assert validate_mpesa_short_code("12345")
    assert validate_mpesa_short_code("123456")
    assert not validate_mpesa_short_code("1234")
    assert not validate_mpesa_short_code("1234567")
    assert not validate_mpesa_short_code("12a45")


def test_email_format() -> None:
    assert validate_email("operator@naulify.com")
    assert validate_email("first.last+tag@mail.example.co.ke")
    assert not validate_email("operator@")
    assert not validate_email("operator.naulify.com")
    assert not validate_email("a@b")


def test_non_string_input_is_invalid() -> None:
    assert not validate_email(None)
    assert not validate_phone_number(712345678)
    assert not validate_vehicle_registration(None)
    assert not validate_mpesa_short_code(12345)


def test_require_variants_raise_with_field_and_message() -> None:
    with pytest.raises(ValidationError) as excinfo:
        require_phone_number("123")
    assert excinfo.value.field == "phone_number"
    assert excinfo.value.message == "Invalid phone number"

    with pytest.raises(ValidationError, match="Invalid registration number"):
        require_vehicle_registration("kaa123a")
    with pytest.raises(ValidationError, match="Invalid M-Pesa short code"):
        require_mpesa_short_code("1")
    with pytest.raises(ValidationError, match="Invalid email address"):
        require_email("nope")


def test_require_variants_return_valid_input() -> None:
    assert require_email("a@b.co") == "a@b.co"
    assert require_vehicle_registration("KAA 123A") == "KAA 123A"


def test_require_non_empty_strips_and_rejects_blank() -> None:
    assert require_non_empty("name", "  Jane ", "Name is required") == "Jane"
    with pytest.raises(ValidationError, match="Name is required"):
        require_non_empty("name", "   ", "Name is required")
