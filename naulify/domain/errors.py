"""Domain-level error types shared across adapters, repositories and view models.

Transport-specific failures are raised as subclasses of ``RepositoryError`` so
that repositories and view models can handle them without importing any
adapter module.
"""

from __future__ import annotations

from typing import Optional


class NaulifyError(Exception):
    """Base class for errors raised by this package."""


class ValidationError(NaulifyError):
    """Client-side format rejection. Never reaches a repository."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class RepositoryError(NaulifyError):
    """Network or backend failure surfaced at the repository boundary."""

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


__all__ = ["NaulifyError", "RepositoryError", "ValidationError"]
