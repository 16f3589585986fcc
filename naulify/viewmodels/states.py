"""Closed state unions published by the view models.

Each union is a fixed set of frozen dataclasses combined with ``Union``;
consumers match on the concrete classes and end with ``assert_never`` so a new
variant fails type checking at every consumption site.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from naulify.domain.entities import FareCollection, Route, User, Vehicle


# ---- Auth ----
@dataclass(frozen=True)
class AuthInitial:
    pass


@dataclass(frozen=True)
class AuthLoading:
    pass


@dataclass(frozen=True)
class Unauthenticated:
    pass


@dataclass(frozen=True)
class Authenticated:
    user_id: str


@dataclass(frozen=True)
class VerificationRequired:
    user_id: str


@dataclass(frozen=True)
class VerificationEmailSent:
    pass


@dataclass(frozen=True)
class AuthError:
    message: str


AuthState = Union[
    AuthInitial,
    AuthLoading,
    Unauthenticated,
    Authenticated,
    VerificationRequired,
    VerificationEmailSent,
    AuthError,
]


# ---- Profile ----
@dataclass(frozen=True)
class ProfileInitial:
    pass


@dataclass(frozen=True)
class ProfileLoading:
    pass


@dataclass(frozen=True)
class ProfileCreated:
    user: User


@dataclass(frozen=True)
class ProfileLoaded:
    user: User


@dataclass(frozen=True)
class ProfileNotFound:
    pass


@dataclass(frozen=True)
class VehicleCreated:
    vehicle: Vehicle


@dataclass(frozen=True)
class ProfileError:
    message: str


ProfileState = Union[
    ProfileInitial,
    ProfileLoading,
    ProfileCreated,
    ProfileLoaded,
    ProfileNotFound,
    VehicleCreated,
    ProfileError,
]


# ---- Routes & fare collections ----
@dataclass(frozen=True)
class RouteInitial:
    pass


@dataclass(frozen=True)
class RouteLoading:
    pass


@dataclass(frozen=True)
class RouteCreated:
    route: Route


@dataclass(frozen=True)
class RoutesLoaded:
    routes: Tuple[Route, ...]


@dataclass(frozen=True)
class RouteDeleted:
    pass


@dataclass(frozen=True)
class FareCollectionsLoaded:
    collections: Tuple[FareCollection, ...]


@dataclass(frozen=True)
class RouteError:
    message: str


RouteState = Union[
    RouteInitial,
    RouteLoading,
    RouteCreated,
    RoutesLoaded,
    RouteDeleted,
    FareCollectionsLoaded,
    RouteError,
]

AnyState = Union[AuthState, ProfileState, RouteState]


__all__ = [
    "AnyState",
    "AuthError",
    "AuthInitial",
    "AuthLoading",
    "AuthState",
    "Authenticated",
    "FareCollectionsLoaded",
    "ProfileCreated",
    "ProfileError",
    "ProfileInitial",
    "ProfileLoaded",
    "ProfileLoading",
    "ProfileNotFound",
    "ProfileState",
    "RouteCreated",
    "RouteDeleted",
    "RouteError",
    "RouteInitial",
    "RouteLoading",
    "RouteState",
    "RoutesLoaded",
    "Unauthenticated",
    "VehicleCreated",
    "VerificationEmailSent",
    "VerificationRequired",
]
