"""Build a ready-to-serve schema straight from fixture data."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .db import Db
from .errors import SchemaError
from .orm.model import Model
from .orm.schema import Schema
from .utils.inflector import camelize, singularize

logger = logging.getLogger(__name__)


def plain_model(type_name: str) -> type[Model]:
    """Return a fresh Model subclass with no associations, named after `type_name`."""
    return type(camelize(type_name, uppercase_first_letter=True), (Model,), {})


def _check_fixture_records(schema: Schema, data: Mapping[str, Iterable[Mapping[str, Any]]]) -> None:
    """Fixture records store foreign keys; association names would break hydration."""
    for collection_name, records in data.items():
        associations = schema._model_for(singularize(collection_name)).associations()
        for record in records:
            for key in record:
                if key in associations:
                    raise SchemaError(
                        f"Fixture record in '{collection_name}' sets association '{key}'; "
                        "store its foreign key instead",
                        details={"collection": collection_name, "key": key},
                    )


def schema_from_fixtures(
    data: Mapping[str, Iterable[Mapping[str, Any]]],
    *,
    models: Mapping[str, type[Model]] | None = None,
) -> Schema:
    """Register one model per fixture collection and load the records.

    Records must carry foreign keys (`team_id`), not association names
    (`team`); the latter raise `SchemaError` before anything is loaded.

    `models` overrides the generated plain model for specific types, so
    associations can still be declared when serving fixtures.
    """
    schema = Schema(Db())
    overrides = dict(models or {})

    for type_name, model_class in overrides.items():
        schema.register_model(type_name, model_class)
    for collection_name in data:
        type_name = singularize(collection_name)
        if type_name not in schema:
            schema.register_model(type_name, plain_model(type_name))

    data = {name: list(records) for name, records in data.items()}
    _check_fixture_records(schema, data)
    schema.db.load_data(data)
    logger.info("Loaded fixtures for %d collection(s)", len(data))
    return schema
