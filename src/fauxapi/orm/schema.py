"""Model registry over an in-memory `Db`.

The schema maps a type name (`"user"`) to its model class and to the
foreign keys other associations expect that type to carry, and turns raw
db records into hydrated models and collections.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

from ..errors import RecordNotFoundError, SchemaError
from ..utils.inflector import pluralize, singularize
from .collection import Collection
from .model import Model, _is_settable

if TYPE_CHECKING:
    from ..db import Db
    from ..db.collection import DbCollection, Query

logger = logging.getLogger(__name__)


@dataclass
class RegistryEntry:
    model_class: type[Model] | None = None
    foreign_keys: list[str] = field(default_factory=list)


class EntityAccessor:
    """Per-type shortcuts: `schema.user.create(name="Ann")`."""

    def __init__(self, schema: Schema, type_name: str) -> None:
        self._schema = schema
        self.type_name = type_name

    def __repr__(self) -> str:
        return f"EntityAccessor({self.type_name!r})"

    def new(self, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Model:
        return self._schema.new(self.type_name, attrs, **kwargs)

    def create(self, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Model:
        return self._schema.create(self.type_name, attrs, **kwargs)

    def all(self) -> Collection:
        return self._schema.all(self.type_name)

    def find(self, ids: Any) -> Model | Collection | None:
        return self._schema.find(self.type_name, ids)

    def where(self, query: Query) -> Collection:
        return self._schema.where(self.type_name, query)

    def first(self) -> Model | None:
        return self._schema.first(self.type_name)


class Schema:
    def __init__(self, db: Db) -> None:
        if db is None:
            raise SchemaError("A schema requires a db")
        self.db = db
        self._registry: dict[str, RegistryEntry] = {}

    def __repr__(self) -> str:
        return f"Schema(types={self.registered_types()!r})"

    def __contains__(self, type_name: object) -> bool:
        entry = self._registry.get(type_name) if isinstance(type_name, str) else None
        return entry is not None and entry.model_class is not None

    def __getitem__(self, type_name: str) -> EntityAccessor:
        if type_name not in self:
            raise KeyError(f"Unknown model type: {type_name}")
        return self.__dict__[type_name]

    def registered_types(self) -> list[str]:
        return [name for name, entry in self._registry.items() if entry.model_class is not None]

    # -- registration ----------------------------------------------------

    def register_models(self, models: Mapping[str, type[Model]]) -> Schema:
        for type_name, model_class in models.items():
            self.register_model(type_name, model_class)
        return self

    def register_model(self, type_name: str, model_class: type[Model]) -> Schema:
        if not isinstance(model_class, type) or not issubclass(model_class, Model):
            raise TypeError(f"register_model expects a Model subclass for '{type_name}', got {model_class!r}")
        self._check_type_name(type_name)

        # Another model may already have added foreign keys for this type.
        entry = self._registry.setdefault(type_name, RegistryEntry())
        entry.model_class = model_class

        for key, association in model_class.associations().items():
            association.owner = type_name
            association.target = association.type or singularize(key)
            fk_holder, fk = association.get_foreign_key_array()
            self._add_foreign_key_to_registry(fk_holder, fk)

        model_class.add_association_methods(self)

        collection_name = pluralize(type_name)
        if collection_name not in self.db:
            self.db.create_collection(collection_name)

        self.__dict__[type_name] = EntityAccessor(self, type_name)
        logger.debug(
            "Registered model %s (%s) with collection %s",
            type_name,
            model_class.__name__,
            collection_name,
        )
        return self

    # -- operations ------------------------------------------------------

    def new(self, type_name: str, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Model:
        return self._instantiate_model(type_name, {**dict(attrs or {}), **kwargs})

    def create(self, type_name: str, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Model:
        collection = self._collection_for_type(type_name)
        data = {**dict(attrs or {}), **kwargs}

        model_class = self._model_for(type_name)
        associations = model_class.associations()
        if any(key in associations or _is_settable(model_class, key) for key in data):
            # Association values (`author=<user>`, `post_ids=[1]`) resolve to foreign keys on save.
            return self.new(type_name, data).save()

        augmented = collection.insert(data)
        return self._instantiate_model(type_name, augmented)

    def all(self, type_name: str) -> Collection:
        collection = self._collection_for_type(type_name)
        return self._hydrate(collection.all(), type_name)

    def find(self, type_name: str, ids: Any) -> Model | Collection | None:
        collection = self._collection_for_type(type_name)
        records = collection.find(ids)

        if isinstance(ids, (list, tuple)):
            found = cast(list, records)
            if len(found) != len(ids):
                raise RecordNotFoundError(pluralize(type_name), list(ids), len(found))

        return self._hydrate(records, type_name)

    def where(self, type_name: str, query: Query) -> Collection:
        collection = self._collection_for_type(type_name)
        return self._hydrate(collection.where(query), type_name)

    def first(self, type_name: str) -> Model | None:
        collection = self._collection_for_type(type_name)
        return self._hydrate(collection.first(), type_name)

    # -- internals -------------------------------------------------------

    def _check_type_name(self, type_name: str) -> None:
        if not isinstance(type_name, str) or not type_name.isidentifier():
            raise SchemaError(f"Model type names must be identifiers, got {type_name!r}")
        existing = self.__dict__.get(type_name)
        if hasattr(type(self), type_name) or (existing is not None and not isinstance(existing, EntityAccessor)):
            raise SchemaError(f"'{type_name}' clashes with a Schema attribute and cannot be a model type")

    def _collection_for_type(self, type_name: str) -> DbCollection:
        collection_name = pluralize(type_name)
        if collection_name not in self.db:
            raise SchemaError(
                f"You're trying to find model(s) of type {type_name} but this collection doesn't exist in the database.",
                details={"type": type_name, "collection": collection_name},
            )
        return self.db[collection_name]

    def _add_foreign_key_to_registry(self, type_name: str, fk: str) -> None:
        entry = self._registry.setdefault(type_name, RegistryEntry())
        if fk not in entry.foreign_keys:
            entry.foreign_keys.append(fk)

    def _instantiate_model(self, type_name: str, attrs: Mapping[str, Any] | None) -> Model:
        model_class = self._model_for(type_name)
        fks = self._foreign_keys_for(type_name)
        return model_class(self, type_name, attrs, fks)

    def _model_for(self, type_name: str) -> type[Model]:
        entry = self._registry.get(type_name)
        if entry is None or entry.model_class is None:
            raise SchemaError(f"Model type '{type_name}' is not registered", details={"type": type_name})
        return entry.model_class

    def _foreign_keys_for(self, type_name: str) -> list[str]:
        entry = self._registry.get(type_name)
        return list(entry.foreign_keys) if entry is not None else []

    def _hydrate(self, records: Any, type_name: str) -> Model | Collection | None:
        """A list of records becomes a Collection; one record a Model; None stays None."""
        if isinstance(records, list):
            return Collection(type_name, [self._instantiate_model(type_name, r) for r in records])
        if not records:
            return None
        return self._instantiate_model(type_name, records)
