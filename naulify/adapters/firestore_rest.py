"""Document-store client over the Firestore REST API (v1).

Documents are plain dicts on the Python side and typed ``Value`` maps on the
wire. Every document returned by ``get``/``query`` carries its key under
``"id"`` when the stored fields do not already contain one.
"""

from __future__ import annotations

import logging
import secrets
import string
from typing import Any, Dict, List, Optional, Sequence

from naulify.domain.ports import Document, DocumentStorePort, FieldFilter

from .api_errors import ApiError, raise_for_response
from .http_client import HttpConfig, RestSession, TokenProvider, json_object

DEFAULT_FIRESTORE_URL = "https://firestore.googleapis.com/v1"
_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 20
_OPS = {
    "==": "EQUAL",
    ">=": "GREATER_THAN_OR_EQUAL",
    "<=": "LESS_THAN_OR_EQUAL",
}

log = logging.getLogger(__name__)


class FirestoreRestClient(DocumentStorePort):
    """Keyed reads/writes and structured queries against one project database."""

    def __init__(
        self,
        project_id: str,
        *,
        base_url: str = DEFAULT_FIRESTORE_URL,
        database: str = "(default)",
        token_provider: Optional[TokenProvider] = None,
        api_key: Optional[str] = None,
        request_timeout_s: int = 10,
    ) -> None:
        if not project_id:
            raise ValueError("FirestoreRestClient requires a project id")
        root = base_url.rstrip("/")
        self.documents_url = f"{root}/projects/{project_id}/databases/{database}/documents"
        self.http = RestSession(
            HttpConfig(request_timeout_s=request_timeout_s),
            api_key=api_key,
            token_provider=token_provider,
        )

    # ---------- DocumentStorePort ----------

    def new_id(self, collection: str) -> str:
        return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ctx = f"get[{collection}/{doc_id}]"
        resp = self.http.get(self._doc_url(collection, doc_id))
        if resp.status_code == 404:
            return None
        raise_for_response(resp, ctx)
        return decode_document(json_object(resp, ctx))

    def set(self, collection: str, doc_id: str, data: Document) -> None:
        # PATCH without an update mask replaces the whole document (upsert).
        ctx = f"set[{collection}/{doc_id}]"
        resp = self.http.patch(
            self._doc_url(collection, doc_id),
            json_body={"fields": encode_fields(data)},
        )
        raise_for_response(resp, ctx)

    def delete(self, collection: str, doc_id: str) -> None:
        resp = self.http.delete(self._doc_url(collection, doc_id))
        raise_for_response(resp, f"delete[{collection}/{doc_id}]")

    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        ctx = f"query[{collection}]"
        body = {
            "structuredQuery": build_structured_query(
                collection, filters, order_by=order_by, descending=descending, limit=limit
            )
        }
        resp = self.http.post(f"{self.documents_url}:runQuery", json_body=body)
        raise_for_response(resp, ctx)
        try:
            rows = resp.json()
        except Exception as exc:
            raise ApiError(f"{ctx}: invalid JSON response", context=ctx) from exc
        if not isinstance(rows, list):
            raise ApiError(f"{ctx}: expected list response", context=ctx)
        docs: List[Document] = []
        for row in rows:
            # Rows without a document only carry read metadata.
            if isinstance(row, dict) and isinstance(row.get("document"), dict):
                docs.append(decode_document(row["document"]))
        log.debug("%s returned %d document(s)", ctx, len(docs))
        return docs

    # ---------- Helpers ----------

    def _doc_url(self, collection: str, doc_id: str) -> str:
        if not doc_id or "/" in doc_id:
            raise ValueError(f"Invalid document id: {doc_id!r}")
        return f"{self.documents_url}/{collection}/{doc_id}"


def build_structured_query(
    collection: str,
    filters: Sequence[FieldFilter] = (),
    *,
    order_by: Optional[str] = None,
    descending: bool = False,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    query: Dict[str, Any] = {"from": [{"collectionId": collection}]}
    field_filters = [
        {
            "fieldFilter": {
                "field": {"fieldPath": item.field},
                "op": _OPS[item.op],
                "value": encode_value(item.value),
            }
        }
        for item in filters
    ]
    if len(field_filters) == 1:
        query["where"] = field_filters[0]
    elif field_filters:
        query["where"] = {"compositeFilter": {"op": "AND", "filters": field_filters}}
    if order_by:
        query["orderBy"] = [
            {
                "field": {"fieldPath": order_by},
                "direction": "DESCENDING" if descending else "ASCENDING",
            },
            # Ties fall back to document id, ascending.
            {"field": {"fieldPath": "__name__"}, "direction": "ASCENDING"},
        ]
    if limit is not None:
        query["limit"] = int(limit)
    return query


def encode_value(value: Any) -> Dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    raise TypeError(f"Unsupported document value type: {type(value).__name__}")


def encode_fields(data: Document) -> Dict[str, Any]:
    return {str(key): encode_value(value) for key, value in data.items()}


def decode_value(raw: Dict[str, Any]) -> Any:
    if "nullValue" in raw:
        return None
    if "booleanValue" in raw:
        return bool(raw["booleanValue"])
    if "integerValue" in raw:
        return int(raw["integerValue"])
    if "doubleValue" in raw:
        return float(raw["doubleValue"])
    if "mapValue" in raw:
        return decode_fields(raw["mapValue"].get("fields") or {})
    if "arrayValue" in raw:
        return [decode_value(item) for item in raw["arrayValue"].get("values") or []]
    for key in ("stringValue", "timestampValue", "referenceValue", "bytesValue"):
        if key in raw:
            return raw[key]
    if "geoPointValue" in raw:
        return dict(raw["geoPointValue"])
    raise ValueError(f"Unsupported Firestore value: {sorted(raw)}")


def decode_fields(fields: Dict[str, Any]) -> Document:
    return {key: decode_value(value) for key, value in fields.items()}


def decode_document(raw: Dict[str, Any]) -> Document:
    data = decode_fields(raw.get("fields") or {})
    name = str(raw.get("name") or "")
    if name:
        data.setdefault("id", name.rsplit("/", 1)[-1])
    return data


__all__ = [
    "DEFAULT_FIRESTORE_URL",
    "FirestoreRestClient",
    "build_structured_query",
    "decode_document",
    "encode_fields",
    "encode_value",
]
