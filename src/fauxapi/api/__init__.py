from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from ..config import Settings, normalize_namespace
from ..errors import DuplicateIdError, RecordNotFoundError, SchemaError
from ..orm.model import _is_settable
from ..orm.schema import Schema
from ..utils.inflector import singularize, underscore
from .serializers import attrs_from_payload, coerce_id, collection_to_payload, model_to_payload

logger = logging.getLogger(__name__)


def resolve_type(schema: Schema, resource: str) -> str:
    """Map a URL segment (`users`, `blog-posts`) to a registered model type."""
    type_name = singularize(underscore(resource.replace("-", "_")))
    if type_name not in schema:
        raise HTTPException(status_code=404, detail=f"Unknown resource: {resource}")
    return type_name


def check_writable(schema: Schema, type_name: str, attrs: dict[str, Any]) -> None:
    """Reject keys that would shadow model methods or read-only properties.

    Association names and settable properties (`post_ids`) are allowed; their
    setters validate the value.
    """
    model_class = schema._model_for(type_name)
    associations = model_class.associations()
    for key in attrs:
        if key not in associations and hasattr(model_class, key) and not _is_settable(model_class, key):
            raise ValueError(f"'{key}' is not a writable attribute of {type_name}")


def create_api_app(
    schema: Schema,
    *,
    namespace: str | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Serve every model registered on `schema` through REST shorthand routes.

    Routes, with `ns` the namespace (default `/api`):
      - GET    {ns}/{resource}          all models, `?ids=` or attribute filters
      - GET    {ns}/{resource}/{id}
      - POST   {ns}/{resource}
      - PUT    {ns}/{resource}/{id}     (PATCH behaves the same)
      - DELETE {ns}/{resource}/{id}
      - GET    {ns}/_db, POST {ns}/_reset
    """
    settings = settings or Settings.from_env()
    ns = normalize_namespace(namespace if namespace is not None else settings.namespace)

    app = FastAPI(title="fauxapi", version="0.1.0")
    app.state.schema = schema
    app.state.namespace = ns

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get(f"{ns}/_db")
    def dump_db() -> dict[str, list[dict[str, Any]]]:
        return schema.db.dump()

    @app.post(f"{ns}/_reset")
    def reset_db() -> dict[str, bool]:
        schema.db.empty_data()
        logger.info("Mock database emptied")
        return {"ok": True}

    @app.get(f"{ns}/{{resource}}")
    def list_models(resource: str, request: Request) -> dict[str, Any]:
        type_name = resolve_type(schema, resource)

        ids = request.query_params.getlist("ids") or request.query_params.getlist("ids[]")
        filters = {k: v for k, v in request.query_params.items() if k not in {"ids", "ids[]"}}

        if ids:
            try:
                found = schema.find(type_name, [coerce_id(i) for i in ids])
            except RecordNotFoundError as e:
                raise HTTPException(status_code=404, detail=e.message)
            if filters:
                found = found.filter(lambda m: all(str(m.attrs.get(k)) == v for k, v in filters.items()))
            return collection_to_payload(found)

        if filters:
            return collection_to_payload(schema.where(type_name, filters))
        return collection_to_payload(schema.all(type_name))

    @app.get(f"{ns}/{{resource}}/{{model_id}}")
    def get_model(resource: str, model_id: str) -> dict[str, Any]:
        type_name = resolve_type(schema, resource)
        model = schema.find(type_name, coerce_id(model_id))
        if model is None:
            raise HTTPException(status_code=404, detail=f"Unknown {type_name}: {model_id}")
        return model_to_payload(model)

    @app.post(f"{ns}/{{resource}}", status_code=201)
    def create_model(resource: str, body: dict) -> dict[str, Any]:
        type_name = resolve_type(schema, resource)
        try:
            attrs = attrs_from_payload(type_name, body)
            check_writable(schema, type_name, attrs)
            model = schema.create(type_name, attrs)
        except DuplicateIdError as e:
            raise HTTPException(status_code=409, detail=e.message)
        except (RecordNotFoundError, SchemaError, TypeError, ValueError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        logger.debug("POST %s -> %s %s", resource, type_name, model.id)
        return model_to_payload(model)

    def _update(resource: str, model_id: str, body: dict) -> dict[str, Any]:
        type_name = resolve_type(schema, resource)
        model = schema.find(type_name, coerce_id(model_id))
        if model is None:
            raise HTTPException(status_code=404, detail=f"Unknown {type_name}: {model_id}")
        try:
            attrs = attrs_from_payload(type_name, body)
            attrs.pop("id", None)
            check_writable(schema, type_name, attrs)
            model.update(attrs)
        except (RecordNotFoundError, SchemaError, TypeError, ValueError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        return model_to_payload(model)

    @app.put(f"{ns}/{{resource}}/{{model_id}}")
    def replace_model(resource: str, model_id: str, body: dict) -> dict[str, Any]:
        return _update(resource, model_id, body)

    @app.patch(f"{ns}/{{resource}}/{{model_id}}")
    def patch_model(resource: str, model_id: str, body: dict) -> dict[str, Any]:
        return _update(resource, model_id, body)

    @app.delete(f"{ns}/{{resource}}/{{model_id}}", status_code=204)
    def delete_model(resource: str, model_id: str) -> Response:
        type_name = resolve_type(schema, resource)
        model = schema.find(type_name, coerce_id(model_id))
        if model is None:
            raise HTTPException(status_code=404, detail=f"Unknown {type_name}: {model_id}")
        model.destroy()
        return Response(status_code=204)

    return app


__all__ = ["create_api_app", "resolve_type", "check_writable"]
