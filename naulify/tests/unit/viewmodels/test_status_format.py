from __future__ import annotations

from naulify.domain.entities import FareCollection, Route, User, Vehicle
from naulify.viewmodels.states import (
    AuthError,
    AuthInitial,
    AuthLoading,
    Authenticated,
    FareCollectionsLoaded,
    ProfileError,
    ProfileLoaded,
    ProfileLoading,
    ProfileNotFound,
    RouteCreated,
    RouteError,
    RouteLoading,
    RoutesLoaded,
    Unauthenticated,
    VehicleCreated,
    VerificationRequired,
)
from naulify.viewmodels.status_format import (
    auth_status_label,
    error_message,
    is_loading,
    profile_status_label,
    route_status_label,
)


def test_auth_labels() -> None:
    assert auth_status_label(AuthInitial()) == "Checking sign-in"
    assert auth_status_label(Authenticated("uid-1")) == "Signed in (uid-1)"
    assert auth_status_label(Unauthenticated()) == "Signed out"
    assert auth_status_label(VerificationRequired("uid-1")) == "Verify your email to continue"
    assert auth_status_label(AuthError("Invalid email or password.")) == "Error: Invalid email or password."


def test_profile_labels() -> None:
    assert profile_status_label(ProfileLoaded(User(id="u", name="Jane"))) == "Profile: Jane"
    assert profile_status_label(ProfileNotFound()) == "Profile not found"
    assert profile_status_label(VehicleCreated(Vehicle(registration="KAA 123A"))) == "Vehicle KAA 123A added"


def test_route_labels_pluralize_counts() -> None:
    one = RoutesLoaded((Route(description="A"),))
    many = FareCollectionsLoaded((FareCollection(), FareCollection()))

    assert route_status_label(one) == "1 route"
    assert route_status_label(RoutesLoaded(())) == "0 routes"
    assert route_status_label(many) == "2 fare collections"
    assert route_status_label(RouteCreated(Route(description="CBD"))) == "Route created: CBD"


def test_loading_and_error_helpers_span_all_unions() -> None:
    assert all(is_loading(s) for s in (AuthLoading(), ProfileLoading(), RouteLoading()))
    assert not is_loading(Unauthenticated())
    assert error_message(ProfileError("Failed to create profile")) == "Failed to create profile"
    assert error_message(RouteError("x")) == "x"
    assert error_message(RoutesLoaded(())) is None
