from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from naulify.domain.entities import FareCollection, Route
from naulify.domain.ports import FARE_COLLECTIONS, ROUTES, FieldFilter, RouteRepository

from .base import StoreRepository, require_id

DEFAULT_FARE_LIMIT = 50


class DocumentRouteRepository(StoreRepository, RouteRepository):
    """Routes per vehicle plus read-only access to fare collections.

    "Recent first" reads order strictly by the timestamp field, descending;
    equal timestamps come back in ascending document-id order.
    """

    async def create_route(self, route: Route) -> bool:
        return await self.create_route_record(route) is not None

    async def create_route_record(self, route: Route) -> Optional[Route]:
        return await self._attempt("create_route", None, self._insert_route, route)

    async def get_route(self, route_id: str) -> Optional[Route]:
        return await self._attempt("get_route", None, self._get_route, route_id)

    async def update_route(self, route: Route) -> bool:
        return await self._attempt("update_route", False, self._put_route, route)

    async def delete_route(self, route_id: str) -> bool:
        return await self._attempt("delete_route", False, self._delete_route, route_id)

    async def get_routes_for_vehicle(self, vehicle_id: str) -> List[Route]:
        return await self._attempt("get_routes_for_vehicle", [], self._query_routes, vehicle_id)

    async def get_fare_collections(
        self, vehicle_id: str, limit: int = DEFAULT_FARE_LIMIT
    ) -> List[FareCollection]:
        if limit < 1:
            return []
        return await self._attempt(
            "get_fare_collections", [], self._query_collections, vehicle_id, limit=limit
        )

    async def get_fare_collections_by_date_range(
        self, vehicle_id: str, start_time: int, end_time: int
    ) -> List[FareCollection]:
        if start_time > end_time:
            return []
        return await self._attempt(
            "get_fare_collections_by_date_range",
            [],
            self._query_collections,
            vehicle_id,
            start_time=start_time,
            end_time=end_time,
        )

    # ---- blocking helpers (run in a worker thread) ----

    def _insert_route(self, route: Route) -> Route:
        new_id = self.store.new_id(ROUTES)
        stored = replace(route, id=new_id)
        self.store.set(ROUTES, new_id, stored.to_document())
        return stored

    def _get_route(self, route_id: str) -> Optional[Route]:
        doc = self.store.get(ROUTES, require_id(route_id, "route"))
        return Route.from_document(doc, doc_id=route_id) if doc is not None else None

    def _put_route(self, route: Route) -> bool:
        self.store.set(ROUTES, require_id(route.id, "route"), route.to_document())
        return True

    def _delete_route(self, route_id: str) -> bool:
        self.store.delete(ROUTES, require_id(route_id, "route"))
        return True

    def _query_routes(self, vehicle_id: str) -> List[Route]:
        docs = self.store.query(
            ROUTES,
            [FieldFilter("vehicleId", "==", vehicle_id)],
            order_by="createdAt",
            descending=True,
        )
        return [Route.from_document(doc) for doc in docs]

    def _query_collections(
        self,
        vehicle_id: str,
        *,
        limit: Optional[int] = None,
        start_time: Optional[int] = None,
        end_time: Optional[int] = None,
    ) -> List[FareCollection]:
        filters = [FieldFilter("vehicleId", "==", vehicle_id)]
        if start_time is not None:
            filters.append(FieldFilter("timestamp", ">=", int(start_time)))
        if end_time is not None:
            filters.append(FieldFilter("timestamp", "<=", int(end_time)))
        docs = self.store.query(
            FARE_COLLECTIONS,
            filters,
            order_by="timestamp",
            descending=True,
            limit=limit,
        )
        return [FareCollection.from_document(doc) for doc in docs]


__all__ = ["DEFAULT_FARE_LIMIT", "DocumentRouteRepository"]
