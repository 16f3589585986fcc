from __future__ import annotations

import copy
import itertools
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from naulify.domain.entities import Principal
from naulify.domain.ports import Document, DocumentStorePort, FieldFilter, IdentityPort

from .api_errors import ApiClientError


def _identity_error(code: str, ctx: str) -> ApiClientError:
    return ApiClientError(
        f"{ctx}: {code} (HTTP 400)",
        status=400,
        code=code,
        payload={"error": {"code": 400, "message": code}},
        context=ctx,
    )


@dataclass
class InMemoryDocumentStore(DocumentStorePort):
    """Offline substitute for ``FirestoreRestClient`` with the same query semantics."""

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._ids = itertools.count(1)
        self._failure: Optional[Exception] = None

    # ---------- DocumentStorePort ----------

    def new_id(self, collection: str) -> str:
        self._check()
        with self._lock:
            return f"{collection[:3]}-{next(self._ids):06d}"

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        self._check()
        with self._lock:
            stored = self._collections.get(collection, {}).get(doc_id)
            if stored is None:
                return None
            return self._with_id(doc_id, stored)

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        self._check()
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(dict(data))

    def delete(self, collection: str, doc_id: str) -> None:
        self._check()
        with self._lock:
            self._collections.get(collection, {}).pop(doc_id, None)

    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        self._check()
        with self._lock:
            items: List[Tuple[str, Document]] = sorted(self._collections.get(collection, {}).items())
        matched = [(doc_id, doc) for doc_id, doc in items if all(_matches(doc, f) for f in filters)]
        if order_by:
            # Documents missing the order field are excluded, as the real store does.
            matched = [(doc_id, doc) for doc_id, doc in matched if order_by in doc]
            # Stable sort keeps ascending id order among equal keys.
            matched.sort(key=lambda pair: pair[1][order_by], reverse=descending)
        if limit is not None:
            matched = matched[: max(0, int(limit))]
        return [self._with_id(doc_id, doc) for doc_id, doc in matched]

    # ---------- Test helpers ----------

    def fail_with(self, exc: Optional[Exception]) -> None:
        """Make every subsequent call raise ``exc`` (``None`` to recover)."""
        self._failure = exc

    def documents(self, collection: str) -> Dict[str, Document]:
        with self._lock:
            return copy.deepcopy(self._collections.get(collection, {}))

    # ---------- Helpers ----------

    def _check(self) -> None:
        if self._failure is not None:
            raise self._failure

    @staticmethod
    def _with_id(doc_id: str, stored: Document) -> Document:
        doc = copy.deepcopy(stored)
        if not doc.get("id"):
            doc["id"] = doc_id
        return doc


def _matches(doc: Document, flt: FieldFilter) -> bool:
    if flt.field not in doc:
        return False
    value = doc[flt.field]
    try:
        if flt.op == "==":
            return value == flt.value
        if flt.op == ">=":
            return value >= flt.value
        if flt.op == "<=":
            return value <= flt.value
    except TypeError:
        return False
    raise ValueError(f"Unsupported filter operator: {flt.op}")


@dataclass
class _Account:
    password: str
    principal: Principal


@dataclass
class InMemoryIdentity(IdentityPort):
    """Deterministic identity provider double using the provider's error codes."""

    min_password_length: int = 6
    sent_verifications: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: Dict[str, _Account] = {}
        self._google_tokens: Dict[str, str] = {}
        self._current: Optional[Principal] = None
        self._uids = itertools.count(1)
        self._failure: Optional[Exception] = None

    # ---------- IdentityPort ----------

    def sign_in_with_password(self, email: str, password: str) -> Principal:
        self._check()
        with self._lock:
            account = self._accounts.get(email.strip().lower())
            if account is None:
                raise _identity_error("EMAIL_NOT_FOUND", "sign_in")
            if account.password != password:
                raise _identity_error("INVALID_PASSWORD", "sign_in")
            self._current = account.principal
            return account.principal

    def sign_up(self, email: str, password: str) -> Principal:
        self._check()
        key = email.strip().lower()
        with self._lock:
            if key in self._accounts:
                raise _identity_error("EMAIL_EXISTS", "sign_up")
            if len(password) < self.min_password_length:
                raise _identity_error("WEAK_PASSWORD", "sign_up")
            principal = Principal(id=f"uid-{next(self._uids):04d}", email=key)
            self._accounts[key] = _Account(password=password, principal=principal)
            self._current = principal
            return principal

    def sign_in_with_id_token(self, id_token: str, provider_id: str = "google.com") -> Principal:
        self._check()
        with self._lock:
            email = self._google_tokens.get(id_token)
            if email is None:
                raise _identity_error("INVALID_IDP_RESPONSE", "sign_in_idp")
            account = self._accounts.get(email)
            if account is None:
                principal = Principal(
                    id=f"uid-{next(self._uids):04d}", email=email, is_email_verified=True
                )
                account = _Account(password="", principal=principal)
                self._accounts[email] = account
            self._current = account.principal
            return account.principal

    def send_email_verification(self) -> None:
        self._check()
        with self._lock:
            if self._current is not None:
                self.sent_verifications.append(self._current.email)

    def reload(self) -> Optional[Principal]:
        self._check()
        with self._lock:
            if self._current is None:
                return None
            account = self._accounts.get(self._current.email)
            if account is not None:
                self._current = account.principal
            return self._current

    def current_principal(self) -> Optional[Principal]:
        with self._lock:
            return self._current

    def sign_out(self) -> None:
        with self._lock:
            self._current = None

    # ---------- Test helpers ----------

    def add_account(self, email: str, password: str, *, verified: bool = False) -> Principal:
        key = email.strip().lower()
        with self._lock:
            principal = Principal(
                id=f"uid-{next(self._uids):04d}", email=key, is_email_verified=verified
            )
            self._accounts[key] = _Account(password=password, principal=principal)
            return principal

    def register_google_token(self, id_token: str, email: str) -> None:
        with self._lock:
            self._google_tokens[id_token] = email.strip().lower()

    def mark_verified(self, email: str) -> None:
        key = email.strip().lower()
        with self._lock:
            account = self._accounts[key]
            account.principal = Principal(
                id=account.principal.id, email=key, is_email_verified=True
            )

    def fail_with(self, exc: Optional[Exception]) -> None:
        self._failure = exc

    def _check(self) -> None:
        if self._failure is not None:
            raise self._failure


__all__ = ["InMemoryDocumentStore", "InMemoryIdentity"]
