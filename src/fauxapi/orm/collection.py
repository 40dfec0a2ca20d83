from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, overload

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger(__name__)

_MISSING = object()


class Collection:
    """An ordered list of hydrated models of one type.

    Bulk operations (`update`, `save`, `destroy`, `reload`) apply to every
    model in order and return the collection so calls can be chained.
    """

    def __init__(self, model_name: str, models: Iterable[Model] | None = None) -> None:
        if not model_name:
            raise ValueError("A collection requires a model_name")
        self.model_name = str(model_name)
        self._models: list[Model] = list(models or [])

    def __repr__(self) -> str:
        return f"Collection({self.model_name!r}, {self._models!r})"

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[Model]:
        return iter(self._models)

    def __bool__(self) -> bool:
        return bool(self._models)

    @overload
    def __getitem__(self, index: int) -> Model: ...

    @overload
    def __getitem__(self, index: slice) -> Collection: ...

    def __getitem__(self, index: int | slice) -> Model | Collection:
        if isinstance(index, slice):
            return Collection(self.model_name, self._models[index])
        return self._models[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self.model_name == other.model_name and self._models == other._models

    @property
    def models(self) -> list[Model]:
        return list(self._models)

    @property
    def ids(self) -> list[Any]:
        return [m.attrs.get("id") for m in self._models]

    def update(self, key: str | Mapping[str, Any], value: Any = _MISSING) -> Collection:
        if isinstance(key, Mapping):
            changes = dict(key)
        else:
            if value is _MISSING:
                raise TypeError("update() needs a value when called with an attribute name")
            changes = {key: value}
        for model in self._models:
            model.update(changes)
        return self

    def save(self) -> Collection:
        for model in self._models:
            model.save()
        return self

    def reload(self) -> Collection:
        for model in self._models:
            model.reload()
        return self

    def destroy(self) -> Collection:
        for model in self._models:
            model.destroy()
        logger.debug("Destroyed %d %s model(s)", len(self._models), self.model_name)
        return self

    def filter(self, fn: Callable[[Model], Any]) -> Collection:
        return Collection(self.model_name, [m for m in self._models if fn(m)])

    def sort(self, key: Callable[[Model], Any] | None = None, *, reverse: bool = False) -> Collection:
        if key is None:
            key = lambda m: m.attrs.get("id")  # noqa: E731
        return Collection(self.model_name, sorted(self._models, key=key, reverse=reverse))

    def slice(self, start: int | None = None, end: int | None = None) -> Collection:
        return Collection(self.model_name, self._models[start:end])

    def merge(self, other: Collection | Iterable[Model]) -> Collection:
        """Append models from `other` in place and return self."""
        self._models.extend(list(other))
        return self

    def to_json(self) -> list[dict[str, Any]]:
        return [m.to_json() for m in self._models]
