"""In-memory database: a set of named `DbCollection` tables."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from .collection import DbCollection

logger = logging.getLogger(__name__)


class Db:
    def __init__(self, initial_data: Mapping[str, Iterable[Mapping[str, Any]]] | None = None) -> None:
        self._lock = threading.RLock()
        self._collections: dict[str, DbCollection] = {}
        if initial_data is not None:
            self.load_data(initial_data)

    def __repr__(self) -> str:
        return f"Db(collections={self.collection_names()!r})"

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._collections

    def __getitem__(self, name: str) -> DbCollection:
        with self._lock:
            try:
                return self._collections[name]
            except KeyError:
                raise KeyError(f"Unknown collection: {name}") from None

    def __getattr__(self, name: str) -> DbCollection:
        # Only reached when normal lookup fails: expose collections as attributes.
        if name.startswith("_"):
            raise AttributeError(name)
        collections = self.__dict__.get("_collections", {})
        if name in collections:
            return collections[name]
        raise AttributeError(f"Db has no collection named '{name}'")

    def collection_names(self) -> list[str]:
        with self._lock:
            return list(self._collections)

    def create_collection(self, name: str, initial_data: Iterable[Mapping[str, Any]] | None = None) -> DbCollection:
        """Create `name` unless it exists; fixtures are inserted either way."""
        with self._lock:
            collection = self._collections.get(name)
            if collection is None:
                if hasattr(type(self), name):
                    raise ValueError(f"'{name}' is reserved and cannot be used as a collection name")
                collection = DbCollection(name)
                self._collections[name] = collection
                logger.debug("Created collection %s", name)
            if initial_data is not None:
                collection.insert(list(initial_data))
            return collection

    def create_collections(self, *names: str) -> list[DbCollection]:
        return [self.create_collection(n) for n in names]

    def load_data(self, data: Mapping[str, Iterable[Mapping[str, Any]]]) -> None:
        for name, records in data.items():
            self.create_collection(name, records)

    def dump(self) -> dict[str, list[dict[str, Any]]]:
        with self._lock:
            return {name: c.all() for name, c in self._collections.items()}

    def empty_data(self) -> None:
        with self._lock:
            for collection in self._collections.values():
                collection.empty()


__all__ = ["Db", "DbCollection"]
