from __future__ import annotations

import asyncio
from typing import List, Optional, Union

from naulify.domain.entities import User, Vehicle, VehicleType
from naulify.domain.ports import ProfileRepository
from naulify.domain.validators import (
    require_email,
    require_mpesa_short_code,
    require_non_empty,
    require_phone_number,
    require_vehicle_registration,
)

from .observable import Observable
from .scope import RequestSequencer, TaskScope
from .states import (
    ProfileCreated,
    ProfileError,
    ProfileInitial,
    ProfileLoaded,
    ProfileLoading,
    ProfileNotFound,
    ProfileState,
    VehicleCreated,
)


def _message(exc: Exception, default: str) -> str:
    text = str(getattr(exc, "message", "") or exc).strip()
    return text or default


def _vehicle_type(raw: Union[VehicleType, str]) -> VehicleType:
    if isinstance(raw, VehicleType):
        return raw
    try:
        return VehicleType(str(raw).strip().upper().replace(" ", "_").replace("-", "_"))
    except ValueError as exc:
        raise ValueError(f"Unknown vehicle type: {raw!r}") from exc


class ProfileVM:
    """Operator profile and the operator's vehicles.

    ``vehicles`` is replaced wholesale by each completed load; a load that was
    superseded by a newer one is discarded.
    """

    def __init__(self, profile_repository: ProfileRepository) -> None:
        self._profiles = profile_repository
        self._scope = TaskScope("ProfileVM")
        self._sequencer = RequestSequencer()
        self.profile_state: Observable[ProfileState] = Observable(ProfileInitial())
        self.vehicles: Observable[List[Vehicle]] = Observable([])

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def create_profile(
        self, user_id: str, name: str, phone_number: str, email: str
    ) -> "asyncio.Task[None]":
        return self._scope.launch(self._create_profile(user_id, name, phone_number, email))

    def update_profile(self, user: User) -> "asyncio.Task[None]":
        return self._scope.launch(self._update_profile(user))

    def load_profile(self, user_id: str) -> "asyncio.Task[None]":
        return self._scope.launch(self._load_profile(user_id))

    def create_vehicle(
        self,
        owner_id: str,
        registration: str,
        vehicle_type: Union[VehicleType, str],
        mpesa_short_code: str,
    ) -> "asyncio.Task[None]":
        return self._scope.launch(
            self._create_vehicle(owner_id, registration, vehicle_type, mpesa_short_code)
        )

    def load_vehicles(self, user_id: str) -> "asyncio.Task[None]":
        return self._scope.launch(self._refresh_vehicles(user_id))

    def close(self) -> None:
        self._scope.close()

    # ------------------------------------------------------------------
    # Command bodies
    # ------------------------------------------------------------------
    async def _create_profile(self, user_id: str, name: str, phone_number: str, email: str) -> None:
        self.profile_state.set(ProfileLoading())
        try:
            user = User(
                id=require_non_empty("user_id", user_id, "Not signed in"),
                name=require_non_empty("name", name, "Name is required"),
                phone_number=require_phone_number((phone_number or "").strip()),
                email=require_email((email or "").strip()),
            )
            success = await self._profiles.create_user_profile(user)
        except Exception as exc:
            self.profile_state.set(ProfileError(_message(exc, "Failed to create profile")))
            return
        if success:
            self.profile_state.set(ProfileCreated(user))
        else:
            self.profile_state.set(ProfileError("Failed to create profile"))

    async def _update_profile(self, user: User) -> None:
        self.profile_state.set(ProfileLoading())
        try:
            require_phone_number(user.phone_number)
            require_email(user.email)
            success = await self._profiles.update_user_profile(user)
        except Exception as exc:
            self.profile_state.set(ProfileError(_message(exc, "Failed to update profile")))
            return
        if success:
            self.profile_state.set(ProfileLoaded(user))
        else:
            self.profile_state.set(ProfileError("Failed to update profile"))

    async def _load_profile(self, user_id: str) -> None:
        self.profile_state.set(ProfileLoading())
        try:
            user = await self._profiles.get_user_profile(user_id)
        except Exception as exc:
            self.profile_state.set(ProfileError(_message(exc, "Failed to load profile")))
            return
        if user is None:
            self.profile_state.set(ProfileNotFound())
            return
        self.profile_state.set(ProfileLoaded(user))
        await self._refresh_vehicles(user_id)

    async def _create_vehicle(
        self,
        owner_id: str,
        registration: str,
        vehicle_type: Union[VehicleType, str],
        mpesa_short_code: str,
    ) -> None:
        self.profile_state.set(ProfileLoading())
        try:
            vehicle = Vehicle(
                owner_id=require_non_empty("owner_id", owner_id, "Not signed in"),
                registration=require_vehicle_registration((registration or "").strip().upper()),
                type=_vehicle_type(vehicle_type),
                mpesa_short_code=require_mpesa_short_code((mpesa_short_code or "").strip()),
            )
            stored = await self._profiles.create_vehicle_record(vehicle)
        except Exception as exc:
            self.profile_state.set(ProfileError(_message(exc, "Failed to create vehicle")))
            return
        if stored is None:
            self.profile_state.set(ProfileError("Failed to create vehicle"))
            return
        await self._refresh_vehicles(stored.owner_id)
        self.profile_state.set(VehicleCreated(stored))

    async def _refresh_vehicles(self, user_id: str) -> Optional[List[Vehicle]]:
        ticket = self._sequencer.begin("vehicles")
        vehicles = await self._profiles.get_vehicles_for_user(user_id)
        if not self._sequencer.is_current("vehicles", ticket):
            return None
        self.vehicles.set(list(vehicles))
        return vehicles


__all__ = ["ProfileVM"]
