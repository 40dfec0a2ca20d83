from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .association import Association

if TYPE_CHECKING:
    from ..model import Model


class BelongsTo(Association):
    """The owner holds `<key>_id` pointing at one record of the target type.

    Assigning an unsaved parent keeps it pending; it is saved, and its id
    written to the foreign key, when the child is saved.
    """

    @property
    def foreign_key(self) -> str:
        return f"{self.key}_id"

    def get_foreign_key_array(self) -> tuple[str, str]:
        owner, _ = self._require_registered()
        return owner, self.foreign_key

    def get_value(self, instance: Model) -> Model | None:
        pending = instance._pending_parents.get(self.key)
        if pending is not None:
            return pending
        fk_value = instance.attrs.get(self.foreign_key)
        if fk_value is None:
            return None
        _, target = self._require_registered()
        return self._schema_of(instance).find(target, fk_value)

    def set_value(self, instance: Model, value: Any) -> None:
        from ..model import Model

        fk = self.foreign_key
        if value is None:
            instance._pending_parents.pop(self.key, None)
            instance.attrs[fk] = None
            return
        if not isinstance(value, Model):
            raise TypeError(f"{self.key} must be a model or None, got {type(value).__name__}")
        _, target = self._require_registered()
        if value.model_type != target:
            raise TypeError(f"{self.key} expects a '{target}' model, got '{value.model_type}'")

        if value.is_new():
            instance.attrs[fk] = None
            instance._pending_parents[self.key] = value
        else:
            instance._pending_parents.pop(self.key, None)
            instance.attrs[fk] = value.id

    def before_save(self, instance: Model) -> None:
        pending = instance._pending_parents.pop(self.key, None)
        if pending is None:
            return
        if pending.is_new():
            pending.save()
        instance.attrs[self.foreign_key] = pending.id

    def install(self, model_class: type) -> None:
        association = self
        key = str(self.key)

        def new_parent(self: Model, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Model:
            _, target = association._require_registered()
            parent = self._schema.new(target, {**dict(attrs or {}), **kwargs})
            association.set_value(self, parent)
            return parent

        def create_parent(self: Model, attrs: Mapping[str, Any] | None = None, **kwargs: Any) -> Model:
            _, target = association._require_registered()
            parent = self._schema.create(target, {**dict(attrs or {}), **kwargs})
            association.set_value(self, parent)
            return parent

        new_parent.__name__ = f"new_{key}"
        new_parent.__doc__ = f"Build an unsaved {key} and assign it; it is saved along with this model."
        create_parent.__name__ = f"create_{key}"
        create_parent.__doc__ = f"Create a {key} in the db and point `{key}_id` at it."

        self._define(model_class, f"new_{key}", new_parent)
        self._define(model_class, f"create_{key}", create_parent)


def belongs_to(type_name: str | None = None) -> BelongsTo:
    """Declare a belongs-to association: `author = belongs_to("user")`."""
    return BelongsTo(type_name)
