from __future__ import annotations

import asyncio

import pytest

from naulify.adapters.api_errors import ApiTimeoutError
from naulify.adapters.memory_backend import InMemoryIdentity
from naulify.domain.errors import RepositoryError
from naulify.repositories.auth_repository import IdentityAuthRepository


def test_sign_in_returns_principal_and_caches_it() -> None:
    identity = InMemoryIdentity()
    created = identity.add_account("op@naulify.com", "secret1", verified=True)
    repo = IdentityAuthRepository(identity)

    principal = asyncio.run(repo.sign_in_with_email("op@naulify.com", "secret1"))

    assert principal == created
    assert repo.get_current_user() == created
    assert asyncio.run(repo.is_email_verified()) is True


def test_invalid_credentials_raise_mapped_error() -> None:
    identity = InMemoryIdentity()
    identity.add_account("op@naulify.com", "secret1")
    repo = IdentityAuthRepository(identity)

    with pytest.raises(RepositoryError) as excinfo:
        asyncio.run(repo.sign_in_with_email("op@naulify.com", "nope"))

    assert excinfo.value.message == "Invalid email or password."
    assert repo.get_current_user() is None


def test_sign_up_and_verification_email() -> None:
    identity = InMemoryIdentity()
    repo = IdentityAuthRepository(identity)

    async def _flow():
        principal = await repo.sign_up_with_email("new@naulify.com", "secret1")
        await repo.send_email_verification()
        return principal

    principal = asyncio.run(_flow())

    assert principal.is_email_verified is False
    assert identity.sent_verifications == ["new@naulify.com"]


def test_network_failure_on_verification_send_is_raised() -> None:
    identity = InMemoryIdentity()
    identity.fail_with(ApiTimeoutError("offline"))
    repo = IdentityAuthRepository(identity)

    with pytest.raises(RepositoryError, match="Network error"):
        asyncio.run(repo.send_email_verification())


def test_verification_check_and_sign_out_never_raise() -> None:
    identity = InMemoryIdentity()
    identity.add_account("op@naulify.com", "secret1")
    repo = IdentityAuthRepository(identity)
    asyncio.run(repo.sign_in_with_email("op@naulify.com", "secret1"))

    identity.fail_with(ApiTimeoutError("offline"))

    assert asyncio.run(repo.is_email_verified()) is False
    asyncio.run(repo.sign_out())
    assert repo.get_current_user() is None


def test_google_sign_in_with_unknown_token() -> None:
    repo = IdentityAuthRepository(InMemoryIdentity())

    with pytest.raises(RepositoryError) as excinfo:
        asyncio.run(repo.sign_in_with_google("bogus"))

    assert excinfo.value.message == "Google sign in failed"
    assert excinfo.value.code == "INVALID_IDP_RESPONSE"
