"""Identity provider client over the Identity Toolkit REST API.

The signed-in session (principal, id token, refresh token) lives on the client
instance. The composition root creates one client and hands it to the auth
repository and, as a bearer-token provider, to the document-store client.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from naulify.domain.entities import Principal
from naulify.domain.ports import IdentityPort

from .api_errors import ApiError, raise_for_response
from .http_client import HttpConfig, RestSession, json_object

DEFAULT_AUTH_URL = "https://identitytoolkit.googleapis.com/v1"
DEFAULT_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"
# Tokens are treated as expired this many seconds early.
_EXPIRY_SKEW_S = 60

log = logging.getLogger(__name__)


@dataclass
class _SignedInSession:
    principal: Principal
    id_token: str
    refresh_token: str
    expires_at: float


class IdentityRestClient(IdentityPort):
    """Email/password and Google sign-in against the identity provider."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_AUTH_URL,
        token_url: str = DEFAULT_TOKEN_URL,
        request_timeout_s: int = 10,
    ) -> None:
        if not api_key:
            raise ValueError("IdentityRestClient requires an API key")
        self.base_url = base_url.rstrip("/")
        self.token_url = token_url
        self.http = RestSession(HttpConfig(request_timeout_s=request_timeout_s), api_key=api_key)
        self._lock = threading.Lock()
        self._session: Optional[_SignedInSession] = None

    # ---------- IdentityPort ----------

    def sign_in_with_password(self, email: str, password: str) -> Principal:
        data = self._call(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
            ctx="sign_in",
        )
        self._store_session(data)
        # The password endpoint does not report verification status.
        try:
            principal = self.reload()
            if principal is None:
                raise ApiError("sign_in: session lost after sign-in", context="sign_in")
        except Exception:
            with self._lock:
                self._session = None
            raise
        return principal

    def sign_up(self, email: str, password: str) -> Principal:
        data = self._call(
            "accounts:signUp",
            {"email": email, "password": password, "returnSecureToken": True},
            ctx="sign_up",
        )
        return self._store_session(data)

    def sign_in_with_id_token(self, id_token: str, provider_id: str = "google.com") -> Principal:
        data = self._call(
            "accounts:signInWithIdp",
            {
                "postBody": f"id_token={id_token}&providerId={provider_id}",
                "requestUri": "http://localhost",
                "returnSecureToken": True,
                "returnIdpCredential": True,
            },
            ctx="sign_in_idp",
        )
        return self._store_session(data)

    def send_email_verification(self) -> None:
        token = self.id_token()
        if token is None:
            log.debug("send_email_verification skipped: no signed-in user")
            return
        self._call(
            "accounts:sendOobCode",
            {"requestType": "VERIFY_EMAIL", "idToken": token},
            ctx="send_verification",
        )

    def reload(self) -> Optional[Principal]:
        token = self.id_token()
        if token is None:
            return None
        data = self._call("accounts:lookup", {"idToken": token}, ctx="lookup")
        users = data.get("users")
        if not isinstance(users, list) or not users or not isinstance(users[0], dict):
            raise ApiError("lookup: no user record in response", context="lookup")
        record = users[0]
        with self._lock:
            if self._session is None:
                return None
            current = self._session.principal
            principal = Principal(
                id=str(record.get("localId") or current.id),
                email=str(record.get("email") or current.email),
                is_email_verified=bool(record.get("emailVerified", False)),
            )
            self._session.principal = principal
        return principal

    def current_principal(self) -> Optional[Principal]:
        with self._lock:
            return self._session.principal if self._session else None

    def sign_out(self) -> None:
        with self._lock:
            self._session = None

    # ---------- Token provider ----------

    def id_token(self) -> Optional[str]:
        """Return a valid id token for the signed-in user, refreshing if needed."""
        with self._lock:
            session = self._session
        if session is None:
            return None
        if time.time() < session.expires_at:
            return session.id_token
        return self._refresh(session)

    # ---------- Helpers ----------

    def _call(self, endpoint: str, body: Dict[str, Any], *, ctx: str) -> Dict[str, Any]:
        resp = self.http.post(f"{self.base_url}/{endpoint}", json_body=body)
        raise_for_response(resp, ctx)
        return json_object(resp, ctx)

    def _refresh(self, session: _SignedInSession) -> str:
        resp = self.http.post(
            self.token_url,
            json_body={"grant_type": "refresh_token", "refresh_token": session.refresh_token},
        )
        raise_for_response(resp, "refresh_token")
        data = json_object(resp, "refresh_token")
        id_token = str(data.get("id_token") or "")
        if not id_token:
            raise ApiError("refresh_token: response missing id_token", context="refresh_token")
        with self._lock:
            if self._session is session:
                session.id_token = id_token
                session.refresh_token = str(data.get("refresh_token") or session.refresh_token)
                session.expires_at = _expiry(data.get("expires_in"))
        log.debug("Refreshed id token for %s", session.principal.id)
        return id_token

    def _store_session(self, data: Dict[str, Any]) -> Principal:
        local_id = str(data.get("localId") or "")
        id_token = str(data.get("idToken") or "")
        if not local_id or not id_token:
            raise ApiError("sign-in response missing localId/idToken")
        principal = Principal(
            id=local_id,
            email=str(data.get("email") or ""),
            is_email_verified=bool(data.get("emailVerified", False)),
        )
        with self._lock:
            self._session = _SignedInSession(
                principal=principal,
                id_token=id_token,
                refresh_token=str(data.get("refreshToken") or ""),
                expires_at=_expiry(data.get("expiresIn")),
            )
        return principal


def _expiry(raw: Any) -> float:
    try:
        seconds = int(raw)
    except (TypeError, ValueError):
        seconds = 3600
    return time.time() + max(0, seconds - _EXPIRY_SKEW_S)


__all__ = ["DEFAULT_AUTH_URL", "DEFAULT_TOKEN_URL", "IdentityRestClient"]
