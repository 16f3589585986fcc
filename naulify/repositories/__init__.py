"""Repository layer between view models and the backend clients.

Auth operations raise ``RepositoryError`` with a user-facing message; profile
and route operations log failures and return a sentinel (``False``, ``None``
or an empty list) instead of raising.
"""

from .auth_repository import IdentityAuthRepository
from .profile_repository import DocumentProfileRepository
from .route_repository import DEFAULT_FARE_LIMIT, DocumentRouteRepository

__all__ = [
    "DEFAULT_FARE_LIMIT",
    "DocumentProfileRepository",
    "DocumentRouteRepository",
    "IdentityAuthRepository",
]
