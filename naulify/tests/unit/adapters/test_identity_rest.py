from __future__ import annotations

import pytest
from requests import exceptions as req_exc

from naulify.adapters.api_errors import ApiClientError, ApiServerError, ApiTimeoutError
from naulify.adapters.identity_rest import IdentityRestClient

from rest_stubs import ResponseStub, SessionStub

SIGN_IN = {
    "localId": "uid-1",
    "email": "op@naulify.com",
    "idToken": "id-token-1",
    "refreshToken": "refresh-1",
    "expiresIn": "3600",
}


def _client(responses) -> tuple[IdentityRestClient, SessionStub]:
    client = IdentityRestClient("api-key", base_url="https://auth.test/v1", token_url="https://token.test")
    stub = SessionStub(responses)
    client.http.session = stub  # type: ignore[assignment]
    return client, stub


def test_password_sign_in_reloads_verification_status() -> None:
    client, stub = _client(
        [
            ResponseStub(SIGN_IN),
            ResponseStub({"users": [{"localId": "uid-1", "email": "op@naulify.com", "emailVerified": True}]}),
        ]
    )

    principal = client.sign_in_with_password("op@naulify.com", "secret1")

    assert principal.id == "uid-1"
    assert principal.is_email_verified is True
    assert client.current_principal() == principal
    first, second = stub.calls
    assert first["url"] == "https://auth.test/v1/accounts:signInWithPassword"
    assert first["params"] == {"key": "api-key"}
    assert first["json"]["returnSecureToken"] is True
    assert second["url"] == "https://auth.test/v1/accounts:lookup"
    assert second["json"] == {"idToken": "id-token-1"}


def test_invalid_credentials_raise_client_error_with_code() -> None:
    client, _ = _client([ResponseStub({"error": {"code": 400, "message": "INVALID_PASSWORD"}}, 400)])

    with pytest.raises(ApiClientError) as excinfo:
        client.sign_in_with_password("op@naulify.com", "wrong")

    assert excinfo.value.code == "INVALID_PASSWORD"
    assert client.current_principal() is None


def test_failed_lookup_after_password_sign_in_discards_session() -> None:
    client, _ = _client(
        [
            ResponseStub(SIGN_IN),
            ResponseStub({"error": {"code": 503, "message": "backend", "status": "UNAVAILABLE"}}, 503),
        ]
    )

    with pytest.raises(ApiServerError):
        client.sign_in_with_password("op@naulify.com", "secret1")

    assert client.current_principal() is None
    assert client.id_token() is None


def test_timeout_maps_to_api_timeout_error() -> None:
    client, stub = _client([req_exc.ConnectTimeout("slow")])

    with pytest.raises(ApiTimeoutError):
        client.sign_up("op@naulify.com", "secret1")
    assert stub.calls[0]["timeout"] == 10


def test_google_sign_in_posts_id_token() -> None:
    client, stub = _client([ResponseStub({**SIGN_IN, "emailVerified": True})])

    principal = client.sign_in_with_id_token("google-token")

    assert principal.is_email_verified is True
    body = stub.calls[0]["json"]
    assert stub.calls[0]["url"].endswith("accounts:signInWithIdp")
    assert body["postBody"] == "id_token=google-token&providerId=google.com"


def test_send_verification_uses_current_token_and_skips_when_signed_out() -> None:
    client, stub = _client([ResponseStub(SIGN_IN), ResponseStub({"email": "op@naulify.com"})])
    client.sign_up("op@naulify.com", "secret1")

    client.send_email_verification()

    assert stub.calls[1]["json"] == {"requestType": "VERIFY_EMAIL", "idToken": "id-token-1"}
    client.sign_out()
    client.send_email_verification()
    assert len(stub.calls) == 2
    assert client.id_token() is None


def test_expired_token_is_refreshed() -> None:
    client, stub = _client(
        [
            ResponseStub({**SIGN_IN, "expiresIn": "0"}),
            ResponseStub({"id_token": "id-token-2", "refresh_token": "refresh-2", "expires_in": "3600"}),
        ]
    )
    client.sign_up("op@naulify.com", "secret1")

    assert client.id_token() == "id-token-2"
    assert stub.calls[1]["url"] == "https://token.test"
    assert stub.calls[1]["json"] == {"grant_type": "refresh_token", "refresh_token": "refresh-1"}
    assert client.id_token() == "id-token-2"
    assert len(stub.calls) == 2


def test_api_key_is_required() -> None:
    with pytest.raises(ValueError):
        IdentityRestClient("")
