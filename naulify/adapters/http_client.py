"""Shared HTTP transport utilities for REST adapters.

This module provides a thin wrapper around ``requests.Session`` so the
identity and document-store adapters share timeout policy, query-key and
bearer-token header construction.

Dependencies:
    - ``requests`` for network I/O.
    - ``naulify.adapters.api_errors`` for typed transport failures.

Call context:
    - Constructed by ``IdentityRestClient`` and ``FirestoreRestClient``.
    - Used only inside adapter methods; repositories interact through ports.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from requests import exceptions as req_exc

from naulify.adapters.api_errors import ApiError, ApiTimeoutError

TokenProvider = Callable[[], Optional[str]]

log = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for every JSON API call.
    """

    request_timeout_s: int = 10


class RestSession:
    """Shared requests wrapper that adds API-key query params and auth headers.

    This class is transport-only. Callers decide how to map non-2xx responses
    into domain errors. Requests are never retried; a failed call surfaces as
    ``ApiTimeoutError`` (connectivity) or ``ApiError`` (other transport faults).
    """

    def __init__(
        self,
        cfg: HttpConfig,
        *,
        api_key: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
    ) -> None:
        """Create a session.

        Args:
            cfg: Shared timeout settings.
            api_key: Project API key sent as the ``key`` query parameter.
            token_provider: Callable returning a bearer token or ``None``.
        """
        self.session = requests.Session()
        self.cfg = cfg
        self.api_key = api_key
        self.token_provider = token_provider

    def _headers(self, *, json_body: bool = False) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _params(self, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        merged = dict(params or {})
        if self.api_key:
            merged.setdefault("key", self.api_key)
        return merged

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send one request and return the raw response.

        Raises:
            ApiTimeoutError: On timeout or connection failure.
            ApiError: On any other ``requests`` failure.
        """
        context = f"{method} {url}"
        data = None if json_body is None else json.dumps(json_body)
        log.debug("HTTP %s", context)
        try:
            return self.session.request(
                method,
                url,
                params=self._params(params),
                data=data,
                headers=self._headers(json_body=json_body is not None),
                timeout=timeout or self.cfg.request_timeout_s,
            )
        except (req_exc.Timeout, req_exc.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=context) from exc
        except req_exc.RequestException as exc:
            raise ApiError(str(exc), context=context) from exc

    def get(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        return self.request("GET", url, params=params)

    def post(
        self,
        url: str,
        *,
        json_body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        return self.request("POST", url, params=params, json_body=json_body)

    def patch(self, url: str, *, json_body: Any) -> requests.Response:
        return self.request("PATCH", url, json_body=json_body)

    def delete(self, url: str) -> requests.Response:
        return self.request("DELETE", url)


def json_object(resp: Any, ctx: str) -> Dict[str, Any]:
    """Decode a JSON object body or raise ``ApiError``."""
    try:
        data = resp.json()
    except Exception as exc:
        snippet = getattr(resp, "text", "")[:400]
        raise ApiError(f"{ctx}: invalid JSON response: {snippet}", context=ctx) from exc
    if not isinstance(data, dict):
        raise ApiError(f"{ctx}: expected object response", context=ctx)
    return data


__all__ = ["HttpConfig", "RestSession", "TokenProvider", "json_object"]
