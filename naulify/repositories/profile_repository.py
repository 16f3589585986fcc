from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from naulify.domain.entities import User, Vehicle
from naulify.domain.ports import USERS, VEHICLES, FieldFilter, ProfileRepository

from .base import StoreRepository, require_id


class DocumentProfileRepository(StoreRepository, ProfileRepository):
    """User profiles keyed by user id and vehicles keyed by store-assigned id."""

    async def create_user_profile(self, user: User) -> bool:
        return await self._attempt("create_user_profile", False, self._put_user, user)

    async def update_user_profile(self, user: User) -> bool:
        return await self._attempt("update_user_profile", False, self._put_user, user)

    async def get_user_profile(self, user_id: str) -> Optional[User]:
        return await self._attempt("get_user_profile", None, self._get_user, user_id)

    async def create_vehicle(self, vehicle: Vehicle) -> bool:
        return await self.create_vehicle_record(vehicle) is not None

    async def create_vehicle_record(self, vehicle: Vehicle) -> Optional[Vehicle]:
        """Store ``vehicle`` under a new id and return the stored record."""
        return await self._attempt("create_vehicle", None, self._insert_vehicle, vehicle)

    async def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        return await self._attempt("get_vehicle", None, self._get_vehicle, vehicle_id)

    async def update_vehicle(self, vehicle: Vehicle) -> bool:
        return await self._attempt("update_vehicle", False, self._put_vehicle, vehicle)

    async def get_vehicles_for_user(self, user_id: str) -> List[Vehicle]:
        return await self._attempt("get_vehicles_for_user", [], self._query_vehicles, user_id)

    # ---- blocking helpers (run in a worker thread) ----

    def _put_user(self, user: User) -> bool:
        self.store.set(USERS, require_id(user.id, "user"), user.to_document())
        return True

    def _get_user(self, user_id: str) -> Optional[User]:
        doc = self.store.get(USERS, require_id(user_id, "user"))
        return User.from_document(doc, doc_id=user_id) if doc is not None else None

    def _insert_vehicle(self, vehicle: Vehicle) -> Vehicle:
        new_id = self.store.new_id(VEHICLES)
        stored = replace(vehicle, id=new_id)
        self.store.set(VEHICLES, new_id, stored.to_document())
        return stored

    def _get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        doc = self.store.get(VEHICLES, require_id(vehicle_id, "vehicle"))
        return Vehicle.from_document(doc, doc_id=vehicle_id) if doc is not None else None

    def _put_vehicle(self, vehicle: Vehicle) -> bool:
        self.store.set(VEHICLES, require_id(vehicle.id, "vehicle"), vehicle.to_document())
        return True

    def _query_vehicles(self, user_id: str) -> List[Vehicle]:
        docs = self.store.query(VEHICLES, [FieldFilter("ownerId", "==", user_id)])
        return [Vehicle.from_document(doc) for doc in docs]


__all__ = ["DocumentProfileRepository"]
