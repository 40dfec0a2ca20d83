from __future__ import annotations

from .api import create_api_app
from .config import Settings, configure_logging
from .db import Db, DbCollection
from .errors import DuplicateIdError, FauxApiError, FauxApiHTTPError, RecordNotFoundError, SchemaError
from .fixtures import schema_from_fixtures
from .orm import Collection, Model, Schema, belongs_to, has_many
from .runtime.server import MockServer, run
from .sdk.client import FauxClient

__all__ = [
    "Db",
    "DbCollection",
    "Schema",
    "Model",
    "Collection",
    "belongs_to",
    "has_many",
    "schema_from_fixtures",
    "create_api_app",
    "run",
    "MockServer",
    "FauxClient",
    "Settings",
    "configure_logging",
    "FauxApiError",
    "SchemaError",
    "RecordNotFoundError",
    "DuplicateIdError",
    "FauxApiHTTPError",
]
