from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence

from .entities import FareCollection, Principal, Route, User, Vehicle

Document = Dict[str, Any]
FilterOp = Literal["==", ">=", "<="]

USERS = "users"
VEHICLES = "vehicles"
ROUTES = "routes"
FARE_COLLECTIONS = "fare_collections"


@dataclass(frozen=True)
class FieldFilter:
    """Single-field predicate applied by the document store's query engine."""

    field: str
    op: FilterOp
    value: Any


# ---- External collaborators (blocking clients) ----
class IdentityPort(Protocol):
    """Email/password and federated sign-in against the identity provider.

    Implementations keep the signed-in session on the instance; failures are
    raised as ``RepositoryError`` subclasses carrying the provider error code.
    """

    def sign_in_with_password(self, email: str, password: str) -> Principal: ...
    def sign_up(self, email: str, password: str) -> Principal: ...
    def sign_in_with_id_token(self, id_token: str, provider_id: str = "google.com") -> Principal: ...
    def send_email_verification(self) -> None: ...
    def reload(self) -> Optional[Principal]: ...  # refreshes the cached principal
    def current_principal(self) -> Optional[Principal]: ...
    def sign_out(self) -> None: ...


class DocumentStorePort(Protocol):
    """Keyed documents with equality/range filters and ordered, limited reads."""

    def new_id(self, collection: str) -> str: ...
    def get(self, collection: str, doc_id: str) -> Optional[Document]: ...
    def set(self, collection: str, doc_id: str, data: Document) -> None: ...  # full overwrite
    def delete(self, collection: str, doc_id: str) -> None: ...
    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]: ...


# ---- Repository contracts (async, consumed by view models) ----
class AuthRepository(Protocol):
    async def sign_in_with_email(self, email: str, password: str) -> Optional[Principal]: ...
    async def sign_up_with_email(self, email: str, password: str) -> Optional[Principal]: ...
    async def sign_in_with_google(self, id_token: str) -> Optional[Principal]: ...
    async def send_email_verification(self) -> None: ...
    async def sign_out(self) -> None: ...
    def get_current_user(self) -> Optional[Principal]: ...
    async def is_email_verified(self) -> bool: ...


class ProfileRepository(Protocol):
    async def create_user_profile(self, user: User) -> bool: ...
    async def get_user_profile(self, user_id: str) -> Optional[User]: ...
    async def update_user_profile(self, user: User) -> bool: ...
    async def create_vehicle(self, vehicle: Vehicle) -> bool: ...
    async def create_vehicle_record(self, vehicle: Vehicle) -> Optional[Vehicle]: ...
    async def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]: ...
    async def update_vehicle(self, vehicle: Vehicle) -> bool: ...
    async def get_vehicles_for_user(self, user_id: str) -> List[Vehicle]: ...


class RouteRepository(Protocol):
    async def create_route(self, route: Route) -> bool: ...
    async def create_route_record(self, route: Route) -> Optional[Route]: ...
    async def get_route(self, route_id: str) -> Optional[Route]: ...
    async def update_route(self, route: Route) -> bool: ...
    async def delete_route(self, route_id: str) -> bool: ...
    async def get_routes_for_vehicle(self, vehicle_id: str) -> List[Route]: ...
    async def get_fare_collections(
        self, vehicle_id: str, limit: int = 50
    ) -> List[FareCollection]: ...
    async def get_fare_collections_by_date_range(
        self, vehicle_id: str, start_time: int, end_time: int
    ) -> List[FareCollection]: ...
