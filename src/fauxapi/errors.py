"""Exceptions raised by fauxapi.

Everything derives from `FauxApiError`, so test code can catch the whole
family with one clause.
"""

from __future__ import annotations

from typing import Any


class FauxApiError(Exception):
    """Base exception for fauxapi errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class SchemaError(FauxApiError):
    """Raised on schema misuse: missing db, unregistered type, missing collection."""


class RecordNotFoundError(FauxApiError):
    """Raised when a lookup by several ids does not find every record."""

    def __init__(self, type_name: str, ids: list[Any], found: int) -> None:
        joined = ",".join(str(i) for i in ids)
        message = (
            f"Couldn't find all {type_name} with ids: ({joined}) "
            f"(found {found} results, but was looking for {len(ids)})"
        )
        super().__init__(message, details={"type": type_name, "ids": list(ids), "found": found})


class DuplicateIdError(FauxApiError):
    """Raised when inserting a record whose id already exists in a collection."""

    def __init__(self, collection: str, record_id: Any) -> None:
        super().__init__(
            f"Collection '{collection}' already has a record with id {record_id!r}",
            details={"collection": collection, "id": record_id},
        )


class FauxApiHTTPError(FauxApiError):
    """Raised by `FauxClient` when the mock server answers with an error status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = int(status_code)
        super().__init__(f"Mock server error {status_code}: {body}", details={"status_code": status_code})
