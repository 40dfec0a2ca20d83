from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...errors import SchemaError

if TYPE_CHECKING:
    from ..model import Model
    from ..schema import Schema


class Association:
    """Base descriptor for a relationship declared on a model class.

    `key` is the attribute name, known as soon as the class body runs.
    `owner` and `target` are type names filled in by `Schema.register_model`.
    """

    def __init__(self, type_name: str | None = None) -> None:
        self.type = type_name
        self.key: str | None = None
        self.owner: str | None = None
        self.target: str | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, owner={self.owner!r}, target={self.target!r})"

    def __set_name__(self, owner_cls: type, name: str) -> None:
        self.key = name

    def __get__(self, instance: Model | None, owner_cls: type | None = None) -> Any:
        if instance is None:
            return self
        return self.get_value(instance)

    def __set__(self, instance: Model, value: Any) -> None:
        self.set_value(instance, value)

    @property
    def foreign_key(self) -> str:
        return self.get_foreign_key_array()[1]

    def get_foreign_key_array(self) -> tuple[str, str]:
        """Return `(type holding the foreign key, foreign key attribute)`."""
        raise NotImplementedError

    def get_value(self, instance: Model) -> Any:
        raise NotImplementedError

    def set_value(self, instance: Model, value: Any) -> None:
        raise NotImplementedError

    def install(self, model_class: type) -> None:
        """Add helper methods (`new_<name>`, `create_<name>`, ...) to `model_class`."""

    # Save/destroy hooks, called by Model in declaration order.

    def before_save(self, instance: Model) -> None:
        pass

    def after_save(self, instance: Model) -> None:
        pass

    def before_destroy(self, instance: Model) -> None:
        pass

    # Shared helpers.

    def _require_registered(self) -> tuple[str, str]:
        if self.owner is None or self.target is None:
            raise SchemaError(
                f"Association '{self.key}' is not registered yet; register its model with a Schema first",
                details={"key": self.key},
            )
        return self.owner, self.target

    @staticmethod
    def _schema_of(instance: Model) -> Schema:
        return instance._schema

    @staticmethod
    def _define(model_class: type, name: str, value: Any) -> None:
        # Never clobber something the model author wrote themselves.
        if name not in model_class.__dict__:
            setattr(model_class, name, value)
