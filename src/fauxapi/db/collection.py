from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from ..errors import DuplicateIdError

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Query = Mapping[str, Any] | Callable[[Record], Any]


def _id_key(value: Any) -> str:
    # Ids arriving from URLs are strings; `1` and `"1"` address the same record.
    return str(value)


def _integer_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _matches(record: Record, query: Query) -> bool:
    if callable(query):
        return bool(query(copy.deepcopy(record)))
    for key, expected in query.items():
        if key not in record:
            return False
        if _id_key(record[key]) != _id_key(expected):
            return False
    return True


class DbCollection:
    """A named, ordered table of plain-dict records.

    Records handed out are deep copies; mutate them through `update` or
    `remove`, never in place.
    """

    def __init__(self, name: str, initial_data: Iterable[Mapping[str, Any]] | None = None) -> None:
        if not str(name).strip():
            raise ValueError("collection name cannot be empty")
        self.name = str(name)
        self._lock = threading.RLock()
        self._records: list[Record] = []
        self._next_id = 1
        if initial_data is not None:
            self.insert(list(initial_data))

    def __repr__(self) -> str:
        return f"DbCollection(name={self.name!r}, records={len(self)})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.all())

    # -- reads -----------------------------------------------------------

    def all(self) -> list[Record]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._records]

    def first(self) -> Record | None:
        with self._lock:
            return copy.deepcopy(self._records[0]) if self._records else None

    def find(self, ids: Any) -> Record | list[Record] | None:
        """Find one record by id, or several when `ids` is a list/tuple.

        Missing ids are skipped in the list form; the single form returns None.
        """
        with self._lock:
            if isinstance(ids, (list, tuple)):
                out: list[Record] = []
                for record_id in ids:
                    record = self._find_locked(record_id)
                    if record is not None:
                        out.append(copy.deepcopy(record))
                return out
            record = self._find_locked(ids)
            return copy.deepcopy(record) if record is not None else None

    def where(self, query: Query) -> list[Record]:
        if not callable(query) and not isinstance(query, Mapping):
            raise TypeError("where() expects a mapping of attribute values or a predicate")
        with self._lock:
            return [copy.deepcopy(r) for r in self._records if _matches(r, query)]

    # -- writes ----------------------------------------------------------

    def insert(self, data: Mapping[str, Any] | Iterable[Mapping[str, Any]] | None = None) -> Record | list[Record]:
        """Insert one record (mapping) or several (list of mappings).

        Records without an `id` get the next integer identity. Returns copies
        of what was stored, ids included.
        """
        with self._lock:
            if data is None:
                return self._insert_locked({})
            if isinstance(data, Mapping):
                return self._insert_locked(data)
            return [self._insert_locked(item) for item in data]

    def update(self, target: Any, attrs: Mapping[str, Any] | None = None) -> Record | list[Record] | None:
        """Update records.

        - `update(attrs)`: every record.
        - `update(id, attrs)`: one record; returns it, or None if missing.
        - `update(query, attrs)`: records matching a mapping or predicate.

        The `id` attribute is never rewritten.
        """
        if attrs is None:
            if not isinstance(target, Mapping):
                raise TypeError("update() with a single argument expects a mapping of attributes")
            target, attrs = None, target
        changes = {k: copy.deepcopy(v) for k, v in attrs.items() if k != "id"}

        with self._lock:
            if target is None or isinstance(target, Mapping) or callable(target):
                updated: list[Record] = []
                for record in self._records:
                    if target is None or _matches(record, target):
                        record.update(changes)
                        updated.append(copy.deepcopy(record))
                logger.debug("Updated %d record(s) in %s", len(updated), self.name)
                return updated

            record = self._find_locked(target)
            if record is None:
                return None
            record.update(changes)
            logger.debug("Updated %s[%s]", self.name, record.get("id"))
            return copy.deepcopy(record)

    def remove(self, target: Any = None) -> int:
        """Remove every record, one id, or records matching a query. Returns the count removed."""
        with self._lock:
            before = len(self._records)
            if target is None:
                self._records = []
            elif isinstance(target, Mapping) or callable(target):
                self._records = [r for r in self._records if not _matches(r, target)]
            else:
                key = _id_key(target)
                self._records = [r for r in self._records if _id_key(r.get("id")) != key]
            removed = before - len(self._records)
        logger.debug("Removed %d record(s) from %s", removed, self.name)
        return removed

    def empty(self) -> None:
        with self._lock:
            self._records = []
            self._next_id = 1

    # -- internals -------------------------------------------------------

    def _find_locked(self, record_id: Any) -> Record | None:
        if record_id is None:
            return None
        key = _id_key(record_id)
        for record in self._records:
            if _id_key(record.get("id")) == key:
                return record
        return None

    def _insert_locked(self, data: Mapping[str, Any]) -> Record:
        if not isinstance(data, Mapping):
            raise TypeError(f"Records must be mappings, got {type(data).__name__}")
        record = copy.deepcopy(dict(data))

        record_id = record.get("id")
        if record_id is None:
            record["id"] = self._next_id
            self._next_id += 1
        else:
            if self._find_locked(record_id) is not None:
                raise DuplicateIdError(self.name, record_id)
            numeric = _integer_id(record_id)
            if numeric is not None and numeric >= self._next_id:
                self._next_id = numeric + 1

        self._records.append(record)
        logger.debug("Inserted %s[%s]", self.name, record["id"])
        return copy.deepcopy(record)
