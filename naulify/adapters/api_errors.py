from __future__ import annotations

import re
from typing import Any, Optional

from naulify.domain.errors import RepositoryError

_CODE_TOKEN_RE = re.compile(r"^[A-Z][A-Z0-9_]+$")


class ApiError(RepositoryError):
    """Base class for REST adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, code=code)
        self.status = status
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from a backend service."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            code=code,
            hint=hint,
            payload=payload,
            context=context,
        )


class ApiServerError(ApiError):
    """HTTP 5xx from a backend service."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            code=extract_error_code(payload),
            payload=payload,
            context=context,
        )


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, code="NETWORK_ERROR", context=context)


def raise_for_response(resp: Any, ctx: str) -> None:
    """Raise the typed ``ApiError`` for a non-2xx response."""
    status = resp.status_code
    if 200 <= status < 300:
        return
    payload = parse_error_payload(resp)
    message = build_error_message(ctx, status, payload)
    if 400 <= status < 500:
        raise ApiClientError(
            message,
            status=status,
            code=extract_error_code(payload),
            hint=extract_error_hint(payload),
            payload=payload,
            context=ctx,
        )
    if 500 <= status < 600:
        raise ApiServerError(message, status=status, payload=payload, context=ctx)
    raise ApiError(message, status=status, payload=payload, context=ctx)


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of error payload without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = first_string(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def extract_error_code(payload: Any) -> Optional[str]:
    """Return the provider error token, e.g. ``EMAIL_EXISTS`` or ``NOT_FOUND``.

    Google APIs wrap errors as ``{"error": {"message": ..., "status": ...}}``;
    identity errors put the token in ``message``, optionally followed by
    ``" : <detail>"``.
    """
    inner = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(inner, dict):
        return None
    message = inner.get("message")
    if isinstance(message, str):
        token = message.split(" : ", 1)[0].strip()
        if _CODE_TOKEN_RE.match(token):
            return token
    status = inner.get("status")
    if isinstance(status, str) and status.strip():
        return status.strip()
    return None


def extract_error_hint(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        inner = payload.get("error")
        if isinstance(inner, dict):
            message = inner.get("message")
            if isinstance(message, str) and " : " in message:
                return message.split(" : ", 1)[1].strip() or None
        return None
    if isinstance(payload, str):
        return payload.strip() or None
    return None


def first_string(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        text = payload.strip()
        return text or None
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, (list, dict)):
                candidate = first_string(value)
                if candidate:
                    return candidate
    if isinstance(payload, list):
        for item in payload:
            candidate = first_string(item)
            if candidate:
                return candidate
    return None
