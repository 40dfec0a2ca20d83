from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from ..errors import SchemaError
from .associations.association import Association
from .associations.belongs_to import BelongsTo

if TYPE_CHECKING:
    from ..db.collection import DbCollection
    from .schema import Schema

logger = logging.getLogger(__name__)

_MISSING = object()


def _is_settable(cls: type, name: str) -> bool:
    member = getattr(cls, name, None)
    return isinstance(member, property) and member.fset is not None


class Model:
    """Base class for schema models.

    Subclasses declare associations as class attributes::

        class Post(Model):
            author = belongs_to("user")
            comments = has_many()

    Every other attribute read or written on an instance is backed by the
    `attrs` dict, which is what gets stored in the db.
    """

    _associations: ClassVar[dict[str, Association]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        merged: dict[str, Association] = {}
        for base in reversed(cls.__mro__[1:]):
            merged.update(getattr(base, "_associations", {}))
        for name, value in cls.__dict__.items():
            if isinstance(value, Association):
                merged[name] = value
        cls._associations = merged

    def __init__(
        self,
        schema: Schema,
        model_type: str,
        attrs: Mapping[str, Any] | None = None,
        fks: Iterable[str] | None = None,
    ) -> None:
        if schema is None:
            raise SchemaError("A model requires a schema")
        if not model_type:
            raise SchemaError("A model requires a type")

        object.__setattr__(self, "_schema", schema)
        object.__setattr__(self, "_type", str(model_type))
        object.__setattr__(self, "_pending_parents", {})
        object.__setattr__(self, "_pending_children", {})
        object.__setattr__(self, "fks", list(fks or []))

        data = dict(attrs or {})
        associated = {k: data.pop(k) for k in list(data) if k in self._associations or _is_settable(type(self), k)}
        for fk in self.fks:
            data.setdefault(fk, None)
        object.__setattr__(self, "attrs", data)

        for key, value in associated.items():
            setattr(self, key, value)

    @classmethod
    def associations(cls) -> dict[str, Association]:
        return dict(cls._associations)

    @classmethod
    def add_association_methods(cls, schema: Schema) -> None:  # noqa: ARG003
        for association in cls._associations.values():
            association.install(cls)

    # -- attribute access ------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        attrs = self.__dict__.get("attrs")
        if attrs is not None and name in attrs:
            return attrs[name]
        raise AttributeError(f"'{self.__dict__.get('_type', type(self).__name__)}' model has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or name in ("attrs", "fks") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
            return
        self.attrs[name] = value
        # Writing a belongs-to key directly wins over a pending parent.
        for key, association in self._associations.items():
            if isinstance(association, BelongsTo) and association.foreign_key == name:
                self._pending_parents.pop(key, None)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.attrs.items())
        return f"{type(self).__name__}<{self._type}>({fields})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        if self is other:
            return True
        if self.is_new() or other.is_new():
            return False
        return self._type == other._type and str(self.id) == str(other.id)

    __hash__ = None  # type: ignore[assignment]

    @property
    def model_type(self) -> str:
        return self._type

    # -- persistence -----------------------------------------------------

    def is_new(self) -> bool:
        return self.attrs.get("id") is None

    def is_saved(self) -> bool:
        return not self.is_new()

    def save(self) -> Model:
        collection = self._collection()
        for association in self._associations.values():
            association.before_save(self)

        if self.is_new():
            stored = collection.insert(self.attrs)
            self.attrs["id"] = stored["id"]
            logger.debug("Inserted %s %s", self._type, self.attrs["id"])
        elif collection.update(self.attrs["id"], self.attrs) is None:
            # The record was removed behind our back; store it again under the same id.
            collection.insert(self.attrs)

        for association in self._associations.values():
            association.after_save(self)
        return self

    def update(self, key: str | Mapping[str, Any], value: Any = _MISSING) -> Model:
        """Set one attribute (`update("name", "x")`) or several (`update({...})`) and save."""
        if isinstance(key, Mapping):
            changes = dict(key)
        else:
            if value is _MISSING:
                raise TypeError("update() needs a value when called with an attribute name")
            changes = {key: value}
        for name, new_value in changes.items():
            setattr(self, name, new_value)
        return self.save()

    def destroy(self) -> None:
        if self.is_new():
            return
        for association in self._associations.values():
            association.before_destroy(self)
        self._collection().remove(self.attrs["id"])
        logger.debug("Destroyed %s %s", self._type, self.attrs["id"])

    def reload(self) -> Model:
        if self.is_new():
            raise SchemaError(f"Cannot reload an unsaved {self._type}")
        record = self._collection().find(self.attrs["id"])
        if record is None:
            raise SchemaError(
                f"{self._type} {self.attrs['id']} no longer exists in the database",
                details={"type": self._type, "id": self.attrs["id"]},
            )
        object.__setattr__(self, "attrs", record)
        self._pending_parents.clear()
        self._pending_children.clear()
        return self

    def to_json(self) -> dict[str, Any]:
        return copy.deepcopy(self.attrs)

    def _collection(self) -> DbCollection:
        return self._schema._collection_for_type(self._type)
