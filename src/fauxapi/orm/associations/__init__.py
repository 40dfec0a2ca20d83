from __future__ import annotations

from .association import Association
from .belongs_to import BelongsTo, belongs_to
from .has_many import HasMany, has_many

__all__ = ["Association", "BelongsTo", "HasMany", "belongs_to", "has_many"]
