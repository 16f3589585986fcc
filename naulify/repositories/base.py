from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, TypeVar

from naulify.domain.ports import DocumentStorePort

T = TypeVar("T")

log = logging.getLogger(__name__)


class StoreRepository:
    """Base for repositories backed by a blocking document-store client.

    Store calls run in a worker thread so view-model tasks stay cooperative.
    Any failure is logged and replaced by the caller's sentinel value.
    """

    def __init__(self, store: DocumentStorePort) -> None:
        self.store = store

    async def _attempt(
        self, ctx: str, fallback: T, fn: Callable[..., T], *args: Any, **kwargs: Any
    ) -> T:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except Exception as exc:
            log.warning("%s failed: %s", ctx, exc)
            return fallback


def require_id(value: str, label: str) -> str:
    cleaned = str(value or "").strip()
    if not cleaned:
        raise ValueError(f"{label} id is required")
    return cleaned


__all__ = ["StoreRepository", "require_id"]
