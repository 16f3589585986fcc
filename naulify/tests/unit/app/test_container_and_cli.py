from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from naulify.adapters.firestore_rest import FirestoreRestClient
from naulify.adapters.identity_rest import IdentityRestClient
from naulify.adapters.memory_backend import InMemoryDocumentStore, InMemoryIdentity
from naulify.app import main as cli
from naulify.app.config import AppConfig
from naulify.app.container import build_container
from naulify.domain.entities import FareCollection, TransactionStatus
from naulify.domain.reports import ReportPeriod
from naulify.viewmodels.states import AuthInitial, Authenticated, Unauthenticated


def test_offline_container_uses_in_memory_backends() -> None:
    container = build_container(AppConfig(offline=True))

    assert isinstance(container.identity, InMemoryIdentity)
    assert isinstance(container.store, InMemoryDocumentStore)
    container.close()


def test_online_container_shares_identity_token_with_store() -> None:
    container = build_container(AppConfig(api_key="k", project_id="demo", request_timeout_s=3))

    assert isinstance(container.identity, IdentityRestClient)
    assert isinstance(container.store, FirestoreRestClient)
    assert container.store.http.token_provider == container.identity.id_token
    assert container.store.http.cfg.request_timeout_s == 3


def test_online_container_requires_credentials() -> None:
    with pytest.raises(ValueError):
        build_container(AppConfig())


def test_start_resolves_initial_auth_state() -> None:
    signed_out = build_container(AppConfig(offline=True))
    assert isinstance(signed_out.auth_vm.auth_state.value, AuthInitial)

    async def _start(container) -> None:
        await container.start()

    asyncio.run(_start(signed_out))
    assert isinstance(signed_out.auth_vm.auth_state.value, Unauthenticated)

    identity = InMemoryIdentity()
    identity.add_account("op@naulify.com", "secret1", verified=True)
    identity.sign_in_with_password("op@naulify.com", "secret1")
    signed_in = build_container(AppConfig(offline=True), identity=identity, store=InMemoryDocumentStore())

    asyncio.run(_start(signed_in))
    assert signed_in.auth_vm.auth_state.value == Authenticated(signed_in.identity.current_principal().id)
    assert signed_in.auth_vm.is_email_verified.value is True


def _seeded_container(offline: bool = False):
    identity = InMemoryIdentity()
    identity.add_account("op@naulify.com", "secret1", verified=True)
    store = InMemoryDocumentStore()
    now_ms = int(datetime.now().astimezone().timestamp() * 1000)
    store.set(
        "fare_collections",
        "fc-1",
        FareCollection(
            id="fc-1", amount=1250.0, vehicle_id="veh-1", timestamp=now_ms, status=TransactionStatus.COMPLETED
        ).to_document(),
    )
    return build_container(AppConfig(offline=offline), identity=identity, store=store)


def test_report_prints_rows_and_total() -> None:
    container = _seeded_container()
    lines = []

    code = asyncio.run(
        cli.run_report(
            container,
            "veh-1",
            ReportPeriod.TODAY,
            email="op@naulify.com",
            password="secret1",
            echo=lines.append,
        )
    )

    assert code == 0
    assert lines[0] == "Today - 1 fare collection"
    assert "KES 1,250.00" in lines[1]
    assert lines[-1] == "Total: KES 1,250.00 (completed KES 1,250.00)"


def test_report_stops_on_failed_sign_in() -> None:
    container = _seeded_container()
    lines = []

    code = asyncio.run(
        cli.run_report(container, "veh-1", ReportPeriod.TODAY, email="op@naulify.com", password="bad", echo=lines.append)
    )

    assert code == 1
    assert lines == ["Error: Invalid email or password."]


def test_qr_command_writes_png(tmp_path) -> None:
    out = tmp_path / "veh-1.png"

    assert cli.main(["qr", "veh-1", "--out", str(out), "--size", "64"]) == 0
    assert out.exists()


def test_qr_command_rejects_blank_vehicle(tmp_path) -> None:
    lines = []

    assert cli.run_qr(" ", str(tmp_path / "x.png"), 64, echo=lines.append) == 2
    assert lines[0].startswith("error:")


def test_offline_report_via_main(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.setenv("NAULIFY_SETTINGS_DIR", str(tmp_path))

    assert cli.main(["--offline", "report", "veh-1", "--period", "this_week"]) == 0
    out = capsys.readouterr().out
    assert "This Week - 0 fare collections" in out
    assert "Total: KES 0.00" in out
