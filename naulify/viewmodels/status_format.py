"""Human-readable labels for the view-model states.

Every function matches the full state union and ends with ``assert_never`` so
adding a variant is a type error until each label is updated.
"""

from __future__ import annotations

from typing import Optional, assert_never

from .states import (
    AnyState,
    AuthError,
    AuthInitial,
    AuthLoading,
    AuthState,
    Authenticated,
    FareCollectionsLoaded,
    ProfileCreated,
    ProfileError,
    ProfileInitial,
    ProfileLoaded,
    ProfileLoading,
    ProfileNotFound,
    ProfileState,
    RouteCreated,
    RouteDeleted,
    RouteError,
    RouteInitial,
    RouteLoading,
    RoutesLoaded,
    RouteState,
    Unauthenticated,
    VehicleCreated,
    VerificationEmailSent,
    VerificationRequired,
)


def _count(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


def auth_status_label(state: AuthState) -> str:
    match state:
        case AuthInitial():
            return "Checking sign-in"
        case AuthLoading():
            return "Signing in..."
        case Unauthenticated():
            return "Signed out"
        case Authenticated(user_id=user_id):
            return f"Signed in ({user_id})"
        case VerificationRequired():
            return "Verify your email to continue"
        case VerificationEmailSent():
            return "Verification email sent"
        case AuthError(message=message):
            return f"Error: {message}"
        case _:
            assert_never(state)


def profile_status_label(state: ProfileState) -> str:
    match state:
        case ProfileInitial():
            return "No profile loaded"
        case ProfileLoading():
            return "Loading profile..."
        case ProfileCreated(user=user):
            return f"Profile created for {user.name}"
        case ProfileLoaded(user=user):
            return f"Profile: {user.name}"
        case ProfileNotFound():
            return "Profile not found"
        case VehicleCreated(vehicle=vehicle):
            return f"Vehicle {vehicle.registration} added"
        case ProfileError(message=message):
            return f"Error: {message}"
        case _:
            assert_never(state)


def route_status_label(state: RouteState) -> str:
    match state:
        case RouteInitial():
            return "No routes loaded"
        case RouteLoading():
            return "Loading..."
        case RouteCreated(route=route):
            return f"Route created: {route.description}"
        case RoutesLoaded(routes=routes):
            return _count(len(routes), "route")
        case RouteDeleted():
            return "Route deleted"
        case FareCollectionsLoaded(collections=collections):
            return _count(len(collections), "fare collection")
        case RouteError(message=message):
            return f"Error: {message}"
        case _:
            assert_never(state)


def is_loading(state: AnyState) -> bool:
    return isinstance(state, (AuthLoading, ProfileLoading, RouteLoading))


def error_message(state: AnyState) -> Optional[str]:
    """Message of an error state, ``None`` for every other state."""
    if isinstance(state, (AuthError, ProfileError, RouteError)):
        return state.message
    return None


__all__ = [
    "auth_status_label",
    "error_message",
    "is_loading",
    "profile_status_label",
    "route_status_label",
]
