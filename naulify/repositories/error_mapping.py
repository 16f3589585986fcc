"""Translate identity-provider failures into user-presentable repository errors."""

from __future__ import annotations

from typing import Optional

from naulify.adapters.api_errors import ApiServerError, ApiTimeoutError
from naulify.domain.errors import RepositoryError

_AUTH_MESSAGES = {
    "EMAIL_NOT_FOUND": "Invalid email or password.",
    "INVALID_PASSWORD": "Invalid email or password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "USER_DISABLED": "This account has been disabled.",
    "EMAIL_EXISTS": "An account already exists for this email.",
    "INVALID_EMAIL": "Invalid email address.",
    "MISSING_PASSWORD": "Password is required.",
    "WEAK_PASSWORD": "Password should be at least 6 characters.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Try again later.",
    "OPERATION_NOT_ALLOWED": "This sign-in method is not enabled.",
}


def map_auth_error(exc: Exception, *, default_message: str) -> RepositoryError:
    """Map adapter exceptions to a ``RepositoryError`` with a stable message.

    Args:
        exc: Exception raised by the identity client.
        default_message: Message used when the failure has no known code.

    Returns:
        RepositoryError: carries the provider code (when known) and the message
        a view model shows in its ``Error`` state.
    """
    if isinstance(exc, ApiTimeoutError):
        return RepositoryError("Network error. Check your connection.", code=exc.code)
    if isinstance(exc, ApiServerError):
        return RepositoryError("Service unavailable, try again.", code=exc.code)
    if isinstance(exc, RepositoryError):
        code = exc.code
        message = _AUTH_MESSAGES.get(code or "")
        if message is None:
            return RepositoryError(default_message, code=code)
        return RepositoryError(_with_hint(message, getattr(exc, "hint", None), code), code=code)
    return RepositoryError(default_message)


def _with_hint(message: str, hint: Optional[str], code: Optional[str]) -> str:
    # Only WEAK_PASSWORD hints are shown verbatim.
    if code == "WEAK_PASSWORD" and hint:
        text = hint.strip()
        return text if text.endswith(".") else f"{text}."
    return message


__all__ = ["map_auth_error"]
