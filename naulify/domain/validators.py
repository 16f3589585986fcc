"""Format checks for operator input.

The ``validate_*`` functions never raise; anything that is not a matching
string is simply invalid. The ``require_*`` variants raise ``ValidationError``
and are what view-model commands call before touching a repository.
"""

from __future__ import annotations

import re
from typing import Any

from .errors import ValidationError

_EMAIL_RE = re.compile(
    r"[a-zA-Z0-9+._%\-]{1,256}"
    r"@"
    r"[a-zA-Z0-9][a-zA-Z0-9\-]{0,64}"
    r"(\.[a-zA-Z0-9][a-zA-Z0-9\-]{0,25})+"
)
_PHONE_RE = re.compile(r"[0-9]{10}")
_REGISTRATION_RE = re.compile(r"[A-Z]{3} ?[0-9]{3}[A-Z]")
_SHORT_CODE_RE = re.compile(r"[0-9]{5,6}")


def _matches(pattern: re.Pattern[str], value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return pattern.fullmatch(value) is not None


def validate_email(email: Any) -> bool:
    return _matches(_EMAIL_RE, email)


def validate_phone_number(phone: Any) -> bool:
    """Exactly ten ASCII digits, e.g. ``0712345678``."""
    return _matches(_PHONE_RE, phone)


def validate_vehicle_registration(registration: Any) -> bool:
    """Kenyan plate: ``KAA123A`` or ``KAA 123A`` (uppercase only)."""
    return _matches(_REGISTRATION_RE, registration)


def validate_mpesa_short_code(short_code: Any) -> bool:
    """Merchant short code of five or six ASCII digits."""
    return _matches(_SHORT_CODE_RE, short_code)


def require_email(email: Any) -> str:
    if not validate_email(email):
        raise ValidationError("email", "Invalid email address")
    return email


def require_phone_number(phone: Any) -> str:
    if not validate_phone_number(phone):
        raise ValidationError("phone_number", "Invalid phone number")
    return phone


def require_vehicle_registration(registration: Any) -> str:
    if not validate_vehicle_registration(registration):
        raise ValidationError("registration", "Invalid registration number")
    return registration


def require_mpesa_short_code(short_code: Any) -> str:
    if not validate_mpesa_short_code(short_code):
        raise ValidationError("mpesa_short_code", "Invalid M-Pesa short code")
    return short_code


def require_non_empty(field: str, value: Any, message: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(field, message)
    return text


__all__ = [
    "require_email",
    "require_mpesa_short_code",
    "require_non_empty",
    "require_phone_number",
    "require_vehicle_registration",
    "validate_email",
    "validate_mpesa_short_code",
    "validate_phone_number",
    "validate_vehicle_registration",
]
