"""Routes of a vehicle and the fare collections received for it.

Call context:
    The vehicle dashboard, route editor and collections report subscribe to
    ``route_state`` plus the ``routes``, ``fare_collections`` and
    ``fare_summary`` projections.

Ordering:
    Mutations are written first and the full route list is reloaded before
    the terminal ``RouteCreated``/``RouteDeleted`` state is published. Loads
    of one projection are sequenced; only the newest request may publish its
    result, so a slow response for an earlier vehicle is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Union

from naulify.domain.entities import FareCollection, Route
from naulify.domain.errors import ValidationError
from naulify.domain.ports import RouteRepository
from naulify.domain.reports import (
    FareSummary,
    ReportPeriod,
    summarize_collections,
    time_range_for_period,
)
from naulify.domain.validators import require_non_empty

from .observable import Observable
from .scope import RequestSequencer, TaskScope
from .states import (
    FareCollectionsLoaded,
    RouteCreated,
    RouteDeleted,
    RouteError,
    RouteInitial,
    RouteLoading,
    RoutesLoaded,
    RouteState,
)

log = logging.getLogger(__name__)

DEFAULT_FARE_LIMIT = 50

_ROUTES = "routes"
_COLLECTIONS = "fare_collections"


def _message(exc: Exception, default: str) -> str:
    text = str(getattr(exc, "message", "") or exc).strip()
    return text or default


def _fare(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError("fare", "Invalid fare amount")
    try:
        fare = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("fare", "Invalid fare amount") from None
    if fare != fare or fare < 0:
        raise ValidationError("fare", "Invalid fare amount")
    return fare


class RouteVM:
    def __init__(self, route_repository: RouteRepository) -> None:
        self._routes = route_repository
        self._scope = TaskScope("RouteVM")
        self._sequencer = RequestSequencer()
        self.route_state: Observable[RouteState] = Observable(RouteInitial())
        self.routes: Observable[List[Route]] = Observable([])
        self.fare_collections: Observable[List[FareCollection]] = Observable([])
        self.fare_summary: Observable[FareSummary] = Observable(FareSummary())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def create_route(
        self, description: str, fare: Union[float, str], vehicle_id: str
    ) -> "asyncio.Task[None]":
        return self._scope.launch(self._create_route(description, fare, vehicle_id))

    def update_route(self, route: Route) -> "asyncio.Task[None]":
        return self._scope.launch(self._update_route(route))

    def delete_route(self, route_id: str, vehicle_id: str) -> "asyncio.Task[None]":
        return self._scope.launch(self._delete_route(route_id, vehicle_id))

    def load_routes(self, vehicle_id: str) -> "asyncio.Task[None]":
        return self._scope.launch(self._load_routes(vehicle_id))

    def load_fare_collections(
        self, vehicle_id: str, limit: int = DEFAULT_FARE_LIMIT
    ) -> "asyncio.Task[None]":
        return self._scope.launch(
            self._load_collections(
                vehicle_id, lambda: self._routes.get_fare_collections(vehicle_id, limit)
            )
        )

    def load_fare_collections_by_date_range(
        self, vehicle_id: str, start_time: int, end_time: int
    ) -> "asyncio.Task[None]":
        return self._scope.launch(
            self._load_collections(
                vehicle_id,
                lambda: self._routes.get_fare_collections_by_date_range(
                    vehicle_id, start_time, end_time
                ),
            )
        )

    def load_report(
        self,
        vehicle_id: str,
        period: Union[ReportPeriod, str],
        now: Optional[datetime] = None,
    ) -> "asyncio.Task[None]":
        """Load the collections that fall inside ``period``.

        ``period`` may be a :class:`ReportPeriod` or a token accepted by
        :meth:`ReportPeriod.parse`.
        """
        if not isinstance(period, ReportPeriod):
            period = ReportPeriod.parse(period)
        start, end = time_range_for_period(period, now)
        log.debug("RouteVM report %s for %s: %d..%d", period.name, vehicle_id, start, end)
        return self.load_fare_collections_by_date_range(vehicle_id, start, end)

    def close(self) -> None:
        self._scope.close()

    # ------------------------------------------------------------------
    # Command bodies
    # ------------------------------------------------------------------
    async def _create_route(self, description: str, fare: Union[float, str], vehicle_id: str) -> None:
        self.route_state.set(RouteLoading())
        try:
            route = Route(
                description=require_non_empty("description", description, "Description is required"),
                fare=_fare(fare),
                vehicle_id=require_non_empty("vehicle_id", vehicle_id, "Select a vehicle first"),
            )
            stored = await self._routes.create_route_record(route)
            if stored is None:
                self.route_state.set(RouteError("Failed to create route"))
                return
            await self._refresh_routes(stored.vehicle_id)
        except Exception as exc:
            self.route_state.set(RouteError(_message(exc, "Failed to create route")))
            return
        self.route_state.set(RouteCreated(stored))

    async def _update_route(self, route: Route) -> None:
        self.route_state.set(RouteLoading())
        try:
            require_non_empty("route_id", route.id, "Failed to update route")
            require_non_empty("description", route.description, "Description is required")
            success = await self._routes.update_route(route)
            if not success:
                self.route_state.set(RouteError("Failed to update route"))
                return
            routes = await self._refresh_routes(route.vehicle_id)
        except Exception as exc:
            self.route_state.set(RouteError(_message(exc, "Failed to update route")))
            return
        if routes is not None:
            self.route_state.set(RoutesLoaded(tuple(routes)))

    async def _delete_route(self, route_id: str, vehicle_id: str) -> None:
        self.route_state.set(RouteLoading())
        try:
            require_non_empty("route_id", route_id, "Failed to delete route")
            success = await self._routes.delete_route(route_id)
            if not success:
                self.route_state.set(RouteError("Failed to delete route"))
                return
            await self._refresh_routes(vehicle_id)
        except Exception as exc:
            self.route_state.set(RouteError(_message(exc, "Failed to delete route")))
            return
        self.route_state.set(RouteDeleted())

    async def _load_routes(self, vehicle_id: str) -> None:
        self.route_state.set(RouteLoading())
        try:
            routes = await self._refresh_routes(vehicle_id)
        except Exception as exc:
            self.route_state.set(RouteError(_message(exc, "Failed to load routes")))
            return
        if routes is not None:
            self.route_state.set(RoutesLoaded(tuple(routes)))

    async def _load_collections(
        self, vehicle_id: str, fetch: Callable[[], Awaitable[List[FareCollection]]]
    ) -> None:
        ticket = self._sequencer.begin(_COLLECTIONS)
        self.route_state.set(RouteLoading())
        try:
            collections = await fetch()
        except Exception as exc:
            if self._sequencer.is_current(_COLLECTIONS, ticket):
                self.route_state.set(RouteError(_message(exc, "Failed to load fare collections")))
            return
        if not self._sequencer.is_current(_COLLECTIONS, ticket):
            log.debug("RouteVM dropped stale fare collections for %s", vehicle_id)
            return
        items = list(collections)
        self.fare_collections.set(items)
        self.fare_summary.set(summarize_collections(items))
        self.route_state.set(FareCollectionsLoaded(tuple(items)))

    async def _refresh_routes(self, vehicle_id: str) -> Optional[List[Route]]:
        """Reload ``routes``; returns ``None`` when a newer load superseded this one."""
        ticket = self._sequencer.begin(_ROUTES)
        routes = await self._routes.get_routes_for_vehicle(vehicle_id)
        if not self._sequencer.is_current(_ROUTES, ticket):
            log.debug("RouteVM dropped stale routes for %s", vehicle_id)
            return None
        items = list(routes)
        self.routes.set(items)
        return items


__all__ = ["DEFAULT_FARE_LIMIT", "RouteVM"]
