from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..orm.collection import Collection
from ..orm.model import Model
from ..utils.inflector import pluralize


def model_to_payload(model: Model) -> dict[str, Any]:
    return {model.model_type: model.to_json()}


def collection_to_payload(collection: Collection) -> dict[str, Any]:
    return {pluralize(collection.model_name): collection.to_json()}


def attrs_from_payload(type_name: str, body: Any) -> dict[str, Any]:
    """Accept `{"user": {...}}` or bare `{...}`; never let the client pick the id via the root."""
    if not isinstance(body, Mapping):
        raise ValueError("Request body must be a JSON object")
    root = body.get(type_name)
    if len(body) == 1 and isinstance(root, Mapping):
        return dict(root)
    return dict(body)


def coerce_id(raw: str) -> int | str:
    value = str(raw).strip()
    return int(value) if value.isdigit() else value
