from __future__ import annotations

import asyncio
import logging
from typing import Optional

from naulify.domain.entities import Principal
from naulify.domain.ports import AuthRepository, IdentityPort

from .error_mapping import map_auth_error

log = logging.getLogger(__name__)


class IdentityAuthRepository(AuthRepository):
    """Auth repository over a blocking identity client.

    Sign-in, sign-up and verification sends raise ``RepositoryError`` with a
    user-facing message; the remaining operations never raise.
    """

    def __init__(self, identity: IdentityPort) -> None:
        self.identity = identity

    async def sign_in_with_email(self, email: str, password: str) -> Optional[Principal]:
        try:
            principal = await asyncio.to_thread(self.identity.sign_in_with_password, email, password)
        except Exception as exc:
            log.warning("Email sign-in failed: %s", exc)
            raise map_auth_error(exc, default_message="Authentication failed") from exc
        log.info("Signed in user %s", principal.id)
        return principal

    async def sign_up_with_email(self, email: str, password: str) -> Optional[Principal]:
        try:
            principal = await asyncio.to_thread(self.identity.sign_up, email, password)
        except Exception as exc:
            log.warning("Sign-up failed: %s", exc)
            raise map_auth_error(exc, default_message="Sign up failed") from exc
        log.info("Created account %s", principal.id)
        return principal

    async def sign_in_with_google(self, id_token: str) -> Optional[Principal]:
        try:
            principal = await asyncio.to_thread(self.identity.sign_in_with_id_token, id_token)
        except Exception as exc:
            log.warning("Google sign-in failed: %s", exc)
            raise map_auth_error(exc, default_message="Google sign in failed") from exc
        log.info("Signed in user %s via Google", principal.id)
        return principal

    async def send_email_verification(self) -> None:
        try:
            await asyncio.to_thread(self.identity.send_email_verification)
        except Exception as exc:
            log.warning("Sending verification email failed: %s", exc)
            raise map_auth_error(
                exc, default_message="Failed to send verification email"
            ) from exc

    async def sign_out(self) -> None:
        try:
            self.identity.sign_out()
        except Exception as exc:
            log.warning("Sign-out failed: %s", exc)
            return
        log.info("Signed out")

    def get_current_user(self) -> Optional[Principal]:
        return self.identity.current_principal()

    async def is_email_verified(self) -> bool:
        try:
            principal = await asyncio.to_thread(self.identity.reload)
        except Exception as exc:
            log.warning("Refreshing verification status failed: %s", exc)
            return False
        return bool(principal and principal.is_email_verified)


__all__ = ["IdentityAuthRepository"]
