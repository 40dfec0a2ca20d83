from __future__ import annotations

from .associations import Association, BelongsTo, HasMany, belongs_to, has_many
from .collection import Collection
from .model import Model
from .schema import EntityAccessor, RegistryEntry, Schema

__all__ = [
    "Schema",
    "EntityAccessor",
    "RegistryEntry",
    "Model",
    "Collection",
    "Association",
    "BelongsTo",
    "HasMany",
    "belongs_to",
    "has_many",
]
