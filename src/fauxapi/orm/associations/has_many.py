from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ...errors import SchemaError
from ...utils.inflector import singularize
from ..collection import Collection
from .association import Association

if TYPE_CHECKING:
    from ..model import Model


class HasMany(Association):
    """Each target record holds `<owner>_id` pointing back at the owner.

    Assigning children (or ids) replaces the set; the change is written when
    the owner is saved.
    """

    @property
    def singular_key(self) -> str:
        return singularize(str(self.key))

    def get_foreign_key_array(self) -> tuple[str, str]:
        owner, target = self._require_registered()
        return target, f"{owner}_id"

    def get_value(self, instance: Model) -> Collection:
        _, target = self._require_registered()
        pending = instance._pending_children.get(self.key)
        if pending is not None:
            return Collection(target, pending)
        if instance.is_new():
            return Collection(target)
        return self._schema_of(instance).where(target, {self.foreign_key: instance.id})

    def set_value(self, instance: Model, value: Any) -> None:
        from ..model import Model

        _, target = self._require_registered()
        children = [] if value is None else list(value)
        for child in children:
            if not isinstance(child, Model):
                raise TypeError(f"{self.key} must contain models, got {type(child).__name__}")
            if child.model_type != target:
                raise TypeError(f"{self.key} expects '{target}' models, got '{child.model_type}'")
        instance._pending_children[self.key] = children

    def set_ids(self, instance: Model, ids: Iterable[Any] | None) -> None:
        _, target = self._require_registered()
        id_list = list(ids or [])
        models = self._schema_of(instance).find(target, id_list) if id_list else []
        self.set_value(instance, models)

    def after_save(self, instance: Model) -> None:
        children = instance._pending_children.pop(self.key, None)
        if children is None:
            return
        fk = self.foreign_key
        keep = {str(c.id) for c in children if not c.is_new()}
        for previous in self.get_value(instance):
            if str(previous.id) not in keep:
                previous.attrs[fk] = None
                previous.save()
        for child in children:
            child.attrs[fk] = instance.id
            child.save()

    def before_destroy(self, instance: Model) -> None:
        if instance.is_new():
            return
        _, target = self._require_registered()
        fk = self.foreign_key
        self._schema_of(instance)._collection_for_type(target).update({fk: instance.id}, {fk: None})

    def install(self, model_class: type) -> None:
        association = self
        singular = self.singular_key

        def get_ids(self: Model) -> list[Any]:
            return association.get_value(self).ids

        def set_ids(self: Model, ids: Iterable[Any] | None) -> None:
            association.set_ids(self, ids)

        def new_child(self: Model, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Model:
            _, target = association._require_registered()
            data = {**dict(attrs or {}), **kwargs, association.foreign_key: None if self.is_new() else self.id}
            child = self._schema.new(target, data)
            if self.is_new():
                current = self._pending_children.setdefault(association.key, [])
                current.append(child)
            return child

        def create_child(self: Model, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Model:
            owner, target = association._require_registered()
            if self.is_new():
                raise SchemaError(f"Cannot create a {target} for an unsaved {owner}; save it first")
            data = {**dict(attrs or {}), **kwargs, association.foreign_key: self.id}
            return self._schema.create(target, data)

        new_child.__name__ = f"new_{singular}"
        new_child.__doc__ = f"Build an unsaved {singular} that belongs to this model."
        create_child.__name__ = f"create_{singular}"
        create_child.__doc__ = f"Create a {singular} in the db that belongs to this model."

        self._define(model_class, f"{singular}_ids", property(get_ids, set_ids))
        self._define(model_class, f"new_{singular}", new_child)
        self._define(model_class, f"create_{singular}", create_child)


def has_many(type_name: str | None = None) -> HasMany:
    """Declare a has-many association: `posts = has_many()`."""
    return HasMany(type_name)
