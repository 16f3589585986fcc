from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from naulify.adapters.api_errors import ApiServerError
from naulify.adapters.memory_backend import InMemoryDocumentStore
from naulify.domain.entities import FareCollection, Route, TransactionStatus
from naulify.domain.reports import FareSummary, ReportPeriod
from naulify.repositories.route_repository import DocumentRouteRepository
from naulify.viewmodels.route_vm import RouteVM
from naulify.viewmodels.states import (
    FareCollectionsLoaded,
    RouteCreated,
    RouteDeleted,
    RouteError,
    RouteLoading,
    RoutesLoaded,
)

from vm_helpers import GatedRouteRepository, record, wait_until


def _vm(store: InMemoryDocumentStore) -> RouteVM:
    return RouteVM(DocumentRouteRepository(store))


async def _await(command, *args, **kwargs):
    await command(*args, **kwargs)


def _ms(*args: int) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def _collection(idx: int, amount: float, ts: int, vehicle_id: str = "veh-1") -> FareCollection:
    return FareCollection(
        id=f"fc-{idx}",
        amount=amount,
        vehicle_id=vehicle_id,
        timestamp=ts,
        status=TransactionStatus.COMPLETED,
    )


def test_created_route_appears_exactly_once_after_reload() -> None:
    vm = _vm(InMemoryDocumentStore())
    states = record(vm.route_state)

    async def _run():
        await vm.create_route("CBD - Westlands", "80", "veh-1")
        await vm.load_routes("veh-1")

    asyncio.run(_run())

    created = states[1]
    assert states[0] == RouteLoading()
    assert isinstance(created, RouteCreated)
    assert created.route.id
    assert created.route.fare == 80.0
    assert [r.id for r in vm.routes.value] == [created.route.id]
    assert vm.route_state.value == RoutesLoaded((created.route,))


def test_invalid_route_input() -> None:
    store = InMemoryDocumentStore()
    vm = _vm(store)

    asyncio.run(_await(vm.create_route, "CBD", -5, "veh-1"))
    assert vm.route_state.value == RouteError("Invalid fare amount")

    asyncio.run(_await(vm.create_route, "CBD", "abc", "veh-1"))
    assert vm.route_state.value == RouteError("Invalid fare amount")

    asyncio.run(_await(vm.create_route, "  ", 50, "veh-1"))
    assert vm.route_state.value == RouteError("Description is required")
    assert store.documents("routes") == {}


def test_create_route_store_failure() -> None:
    store = InMemoryDocumentStore()
    store.fail_with(ApiServerError("down", status=503))
    vm = _vm(store)

    asyncio.run(_await(vm.create_route, "CBD - Westlands", 80, "veh-1"))

    assert vm.route_state.value == RouteError("Failed to create route")


def test_delete_route_reloads_list() -> None:
    store = InMemoryDocumentStore()
    store.set("routes", "rte-1", Route(id="rte-1", description="A", fare=50, vehicle_id="veh-1", created_at=1).to_document())
    store.set("routes", "rte-2", Route(id="rte-2", description="B", fare=60, vehicle_id="veh-1", created_at=2).to_document())
    vm = _vm(store)

    async def _run():
        await vm.load_routes("veh-1")
        assert [r.id for r in vm.routes.value] == ["rte-2", "rte-1"]
        await vm.delete_route("rte-2", "veh-1")

    asyncio.run(_run())

    assert vm.route_state.value == RouteDeleted()
    assert [r.id for r in vm.routes.value] == ["rte-1"]


def test_update_route_publishes_reloaded_routes() -> None:
    store = InMemoryDocumentStore()
    route = Route(id="rte-1", description="A", fare=50, vehicle_id="veh-1", created_at=1)
    store.set("routes", "rte-1", route.to_document())
    vm = _vm(store)

    edited = Route(id="rte-1", description="A", fare=70, vehicle_id="veh-1", created_at=1)
    asyncio.run(_await(vm.update_route, edited))

    assert vm.route_state.value == RoutesLoaded((edited,))


def test_load_fare_collections_with_limit_and_summary() -> None:
    store = InMemoryDocumentStore()
    for idx, (amount, ts) in enumerate(((100.0, 100), (300.0, 300), (200.0, 200)), start=1):
        store.set("fare_collections", f"fc-{idx}", _collection(idx, amount, ts).to_document())
    vm = _vm(store)

    asyncio.run(_await(vm.load_fare_collections, "veh-1", limit=2))

    state = vm.route_state.value
    assert isinstance(state, FareCollectionsLoaded)
    assert [c.amount for c in state.collections] == [300.0, 200.0]
    assert vm.fare_summary.value == FareSummary(count=2, total=500.0, completed_total=500.0)


def test_load_report_uses_period_window() -> None:
    store = InMemoryDocumentStore()
    store.set("fare_collections", "fc-1", _collection(1, 50.0, _ms(2024, 2, 20)).to_document())
    store.set("fare_collections", "fc-2", _collection(2, 80.0, _ms(2024, 3, 2)).to_document())
    store.set("fare_collections", "fc-3", _collection(3, 90.0, _ms(2024, 3, 14, 9)).to_document())
    vm = _vm(store)
    now = datetime(2024, 3, 14, 15, 30, tzinfo=timezone.utc)

    asyncio.run(_await(vm.load_report, "veh-1", ReportPeriod.LAST_MONTH, now))
    assert [c.id for c in vm.fare_collections.value] == ["fc-1"]

    asyncio.run(_await(vm.load_report, "veh-1", "this_month", now))
    assert [c.id for c in vm.fare_collections.value] == ["fc-3", "fc-2"]

    asyncio.run(_await(vm.load_report, "veh-1", "today", now))
    assert vm.fare_summary.value.total == 90.0


def test_stale_fare_collections_never_overwrite_newer() -> None:
    repo = GatedRouteRepository()
    vm = RouteVM(repo)  # type: ignore[arg-type]
    older = [_collection(1, 100.0, 1, "veh-1")]
    newer = [_collection(2, 200.0, 2, "veh-2")]

    async def _run():
        first = vm.load_fare_collections("veh-1")
        second = vm.load_fare_collections("veh-2")
        await wait_until(lambda: len(repo.pending) == 2)
        repo.pending[1][1].set_result(newer)
        await second
        repo.pending[0][1].set_result(older)
        await first

    asyncio.run(_run())

    assert vm.fare_collections.value == newer
    assert vm.route_state.value == FareCollectionsLoaded(tuple(newer))


def test_stale_route_load_does_not_publish() -> None:
    repo = GatedRouteRepository()
    vm = RouteVM(repo)  # type: ignore[arg-type]
    newer = [Route(id="rte-2", description="B", vehicle_id="veh-2", created_at=2)]

    async def _run():
        first = vm.load_routes("veh-1")
        second = vm.load_routes("veh-2")
        await wait_until(lambda: len(repo.pending) == 2)
        repo.pending[1][1].set_result(newer)
        await second
        repo.pending[0][1].set_result([Route(id="rte-1", vehicle_id="veh-1", created_at=1)])
        await first

    asyncio.run(_run())

    assert vm.routes.value == newer
    assert vm.route_state.value == RoutesLoaded(tuple(newer))


def test_load_error_uses_default_message() -> None:
    class _Broken:
        async def get_routes_for_vehicle(self, vehicle_id):
            raise RuntimeError()

    vm = RouteVM(_Broken())  # type: ignore[arg-type]

    asyncio.run(_await(vm.load_routes, "veh-1"))

    assert vm.route_state.value == RouteError("Failed to load routes")


def test_close_cancels_pending_loads() -> None:
    repo = GatedRouteRepository()
    vm = RouteVM(repo)  # type: ignore[arg-type]

    async def _run():
        task = vm.load_fare_collections("veh-1")
        await wait_until(lambda: len(repo.pending) == 1)
        vm.close()
        with pytest.raises(asyncio.CancelledError):
            await task
        with pytest.raises(RuntimeError):
            vm.load_routes("veh-1")

    asyncio.run(_run())

    assert vm.fare_collections.value == []
