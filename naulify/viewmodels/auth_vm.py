"""Sign-in, sign-up and email-verification state for the auth screens.

Call context:
    The login, sign-up and verification screens subscribe to ``auth_state``
    and ``is_email_verified`` and invoke the command methods. Each command
    returns the ``asyncio.Task`` it launched so callers may await it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from naulify.domain.entities import Principal
from naulify.domain.ports import AuthRepository
from naulify.domain.validators import require_email, require_non_empty

from .observable import Observable
from .scope import TaskScope
from .states import (
    AuthError,
    AuthInitial,
    AuthLoading,
    AuthState,
    Authenticated,
    Unauthenticated,
    VerificationEmailSent,
    VerificationRequired,
)

log = logging.getLogger(__name__)


def _message(exc: Exception, default: str) -> str:
    text = str(getattr(exc, "message", "") or exc).strip()
    return text or default


class AuthVM:
    def __init__(self, auth_repository: AuthRepository) -> None:
        self._auth = auth_repository
        self._scope = TaskScope("AuthVM")
        self.auth_state: Observable[AuthState] = Observable(AuthInitial())
        self.is_email_verified: Observable[bool] = Observable(False)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def check_auth_state(self) -> "asyncio.Task[None]":
        """Startup check: resolve ``Initial`` from the cached principal."""
        return self._scope.launch(self._check_auth_state())

    def sign_in_with_email(self, email: str, password: str) -> "asyncio.Task[None]":
        return self._scope.launch(self._sign_in_with_email(email, password))

    def sign_up_with_email(self, email: str, password: str) -> "asyncio.Task[None]":
        return self._scope.launch(self._sign_up_with_email(email, password))

    def sign_in_with_google(self, id_token: str) -> "asyncio.Task[None]":
        return self._scope.launch(self._sign_in_with_google(id_token))

    def send_verification_email(self) -> "asyncio.Task[None]":
        return self._scope.launch(self._send_verification_email())

    def check_email_verification(self) -> "asyncio.Task[None]":
        return self._scope.launch(self._check_email_verification())

    def sign_out(self) -> "asyncio.Task[None]":
        return self._scope.launch(self._sign_out())

    def close(self) -> None:
        self._scope.close()

    # ------------------------------------------------------------------
    # Command bodies
    # ------------------------------------------------------------------
    async def _check_auth_state(self) -> None:
        principal = self._auth.get_current_user()
        if principal is None:
            self.auth_state.set(Unauthenticated())
            return
        self.is_email_verified.set(await self._auth.is_email_verified())
        self.auth_state.set(Authenticated(principal.id))

    async def _sign_in_with_email(self, email: str, password: str) -> None:
        self.auth_state.set(AuthLoading())
        try:
            address = require_email((email or "").strip())
            require_non_empty("password", password, "Password is required")
            principal = await self._auth.sign_in_with_email(address, password)
        except Exception as exc:
            self.auth_state.set(AuthError(_message(exc, "Authentication failed")))
            return
        self._authenticated(principal, "Authentication failed")

    async def _sign_up_with_email(self, email: str, password: str) -> None:
        self.auth_state.set(AuthLoading())
        try:
            address = require_email((email or "").strip())
            require_non_empty("password", password, "Password is required")
            principal = await self._auth.sign_up_with_email(address, password)
            if principal is None:
                self.auth_state.set(AuthError("Sign up failed"))
                return
            await self._auth.send_email_verification()
        except Exception as exc:
            self.auth_state.set(AuthError(_message(exc, "Sign up failed")))
            return
        self.is_email_verified.set(principal.is_email_verified)
        self.auth_state.set(VerificationRequired(principal.id))

    async def _sign_in_with_google(self, id_token: str) -> None:
        self.auth_state.set(AuthLoading())
        try:
            token = require_non_empty("id_token", id_token, "Google sign in failed")
            principal = await self._auth.sign_in_with_google(token)
        except Exception as exc:
            self.auth_state.set(AuthError(_message(exc, "Google sign in failed")))
            return
        self._authenticated(principal, "Google sign in failed")

    async def _send_verification_email(self) -> None:
        self.auth_state.set(AuthLoading())
        try:
            await self._auth.send_email_verification()
        except Exception as exc:
            self.auth_state.set(AuthError(_message(exc, "Failed to send verification email")))
            return
        self.auth_state.set(VerificationEmailSent())

    async def _check_email_verification(self) -> None:
        self.is_email_verified.set(await self._auth.is_email_verified())

    async def _sign_out(self) -> None:
        try:
            await self._auth.sign_out()
        finally:
            self.is_email_verified.set(False)
            self.auth_state.set(Unauthenticated())

    def _authenticated(self, principal: Optional[Principal], failure: str) -> None:
        if principal is None:
            self.auth_state.set(AuthError(failure))
            return
        log.debug("AuthVM authenticated %s", principal.id)
        self.is_email_verified.set(principal.is_email_verified)
        self.auth_state.set(Authenticated(principal.id))


__all__ = ["AuthVM"]
