"""Domain records for operators, their vehicles, routes and fare collections.

Records are immutable; edits produce new instances via ``dataclasses.replace``.
Each record maps to and from the camelCase document shape stored in the
document database (``to_document`` / ``from_document``). Missing document
fields fall back to the record defaults so partially written documents can
still be read.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

UserId = str
VehicleId = str
RouteId = str

E = TypeVar("E", bound=Enum)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class VehicleType(str, Enum):
    VAN = "VAN"
    BUS = "BUS"
    MINI_BUS = "MINI_BUS"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Principal:
    """Authenticated identity returned by the identity provider."""

    id: UserId
    email: str = ""
    is_email_verified: bool = False


@dataclass(frozen=True)
class User:
    id: UserId = ""
    email: str = ""
    name: str = ""
    phone_number: str = ""
    is_email_verified: bool = False
    created_at: int = field(default_factory=now_ms)

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "phoneNumber": self.phone_number,
            "isEmailVerified": self.is_email_verified,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any], *, doc_id: Optional[str] = None) -> "User":
        return cls(
            id=_text(doc.get("id")) or (doc_id or ""),
            email=_text(doc.get("email")),
            name=_text(doc.get("name")),
            phone_number=_text(doc.get("phoneNumber")),
            is_email_verified=bool(doc.get("isEmailVerified", False)),
            created_at=_millis(doc.get("createdAt")),
        )


@dataclass(frozen=True)
class Vehicle:
    id: VehicleId = ""
    registration: str = ""
    type: VehicleType = VehicleType.VAN
    mpesa_short_code: str = ""
    owner_id: UserId = ""

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "registration": self.registration,
            "type": self.type.value,
            "mpesaShortCode": self.mpesa_short_code,
            "ownerId": self.owner_id,
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any], *, doc_id: Optional[str] = None) -> "Vehicle":
        return cls(
            id=_text(doc.get("id")) or (doc_id or ""),
            registration=_text(doc.get("registration")),
            type=_enum(VehicleType, doc.get("type"), VehicleType.VAN),
            mpesa_short_code=_text(doc.get("mpesaShortCode")),
            owner_id=_text(doc.get("ownerId")),
        )


@dataclass(frozen=True)
class Route:
    id: RouteId = ""
    description: str = ""
    fare: float = 0.0
    vehicle_id: VehicleId = ""
    created_at: int = field(default_factory=now_ms)

    def __post_init__(self) -> None:
        if self.fare < 0:
            raise ValueError("Route fare cannot be negative.")
        object.__setattr__(self, "fare", float(self.fare))

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "fare": self.fare,
            "vehicleId": self.vehicle_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, doc: Mapping[str, Any], *, doc_id: Optional[str] = None) -> "Route":
        return cls(
            id=_text(doc.get("id")) or (doc_id or ""),
            description=_text(doc.get("description")),
            fare=max(0.0, _amount(doc.get("fare"))),
            vehicle_id=_text(doc.get("vehicleId")),
            created_at=_millis(doc.get("createdAt")),
        )


@dataclass(frozen=True)
class FareCollection:
    """A single passenger payment written by the external payment system."""

    id: str = ""
    amount: float = 0.0
    route_id: RouteId = ""
    vehicle_id: VehicleId = ""
    passenger_id: str = ""
    timestamp: int = field(default_factory=now_ms)
    transaction_id: str = ""
    status: TransactionStatus = TransactionStatus.PENDING

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "routeId": self.route_id,
            "vehicleId": self.vehicle_id,
            "passengerId": self.passenger_id,
            "timestamp": self.timestamp,
            "transactionId": self.transaction_id,
            "status": self.status.value,
        }

    @classmethod
    def from_document(
        cls, doc: Mapping[str, Any], *, doc_id: Optional[str] = None
    ) -> "FareCollection":
        return cls(
            id=_text(doc.get("id")) or (doc_id or ""),
            amount=_amount(doc.get("amount")),
            route_id=_text(doc.get("routeId")),
            vehicle_id=_text(doc.get("vehicleId")),
            passenger_id=_text(doc.get("passengerId")),
            timestamp=_millis(doc.get("timestamp")),
            transaction_id=_text(doc.get("transactionId")),
            status=_enum(TransactionStatus, doc.get("status"), TransactionStatus.PENDING),
        )


# ---------------------------------------------------------------------------
# Document coercion helpers
# ---------------------------------------------------------------------------
def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _amount(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _millis(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return now_ms()
    try:
        return int(value)
    except (TypeError, ValueError):
        return now_ms()


def _enum(enum_cls: Type[E], raw: Any, default: E) -> E:
    try:
        return enum_cls(str(raw).upper())
    except ValueError:
        return default


__all__ = [
    "FareCollection",
    "Principal",
    "Route",
    "RouteId",
    "TransactionStatus",
    "User",
    "UserId",
    "Vehicle",
    "VehicleId",
    "VehicleType",
    "now_ms",
]
