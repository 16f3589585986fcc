"""Domain package exports for records, ports and validation."""

from .entities import (
    FareCollection,
    Principal,
    Route,
    TransactionStatus,
    User,
    Vehicle,
    VehicleType,
)
from .errors import NaulifyError, RepositoryError, ValidationError
from .payment import payment_url
from .reports import FareSummary, ReportPeriod, summarize_collections, time_range_for_period

__all__ = [
    "FareCollection",
    "FareSummary",
    "NaulifyError",
    "Principal",
    "ReportPeriod",
    "RepositoryError",
    "Route",
    "TransactionStatus",
    "User",
    "ValidationError",
    "Vehicle",
    "VehicleType",
    "payment_url",
    "summarize_collections",
    "time_range_for_period",
]
