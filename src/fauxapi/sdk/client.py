from __future__ import annotations

from typing import Any

import httpx

from ..errors import FauxApiHTTPError
from ..utils.inflector import dasherize, pluralize


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


class FauxClient:
    """HTTP client for a running fauxapi mock server.

    Resources are addressed by model type (`"user"`); the client builds the
    plural URL segment the server expects.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000", *, namespace: str = "/api", timeout_s: float = 10.0) -> None:
        self.base_url = _normalize_base_url(base_url)
        self.namespace = "/" + namespace.strip("/") if namespace.strip("/") else ""
        self.timeout_s = float(timeout_s)

    def __repr__(self) -> str:
        return f"FauxClient({self.base_url!r})"

    def _path(self, type_name: str, model_id: Any = None) -> str:
        path = f"{self.namespace}/{dasherize(pluralize(type_name))}"
        if model_id is not None:
            path += f"/{model_id}"
        return path

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        with httpx.Client(base_url=self.base_url, timeout=self.timeout_s) as client:
            res = client.request(method, path, **kwargs)
        if res.status_code >= 400:
            raise FauxApiHTTPError(res.status_code, res.text)
        return res

    def is_alive(self, *, timeout_s: float = 0.2) -> bool:
        """Best-effort check of `/healthz`."""
        try:
            with httpx.Client(base_url=self.base_url, timeout=timeout_s) as client:
                r = client.get("/healthz")
                return r.status_code == 200 and bool(r.json().get("ok"))
        except httpx.HTTPError:
            return False

    def list(self, type_name: str, **filters: Any) -> list[dict[str, Any]]:
        res = self._request("GET", self._path(type_name), params={k: str(v) for k, v in filters.items()})
        return list(res.json()[pluralize(type_name)])

    def find_many(self, type_name: str, ids: list[Any]) -> list[dict[str, Any]]:
        res = self._request("GET", self._path(type_name), params=[("ids", str(i)) for i in ids])
        return list(res.json()[pluralize(type_name)])

    def get(self, type_name: str, model_id: Any) -> dict[str, Any]:
        return dict(self._request("GET", self._path(type_name, model_id)).json()[type_name])

    def create(self, type_name: str, attrs: dict[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        body = {type_name: {**(attrs or {}), **kwargs}}
        return dict(self._request("POST", self._path(type_name), json=body).json()[type_name])

    def update(self, type_name: str, model_id: Any, attrs: dict[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        body = {type_name: {**(attrs or {}), **kwargs}}
        return dict(self._request("PATCH", self._path(type_name, model_id), json=body).json()[type_name])

    def delete(self, type_name: str, model_id: Any) -> None:
        self._request("DELETE", self._path(type_name, model_id))

    def dump(self) -> dict[str, list[dict[str, Any]]]:
        return dict(self._request("GET", f"{self.namespace}/_db").json())

    def reset(self) -> None:
        self._request("POST", f"{self.namespace}/_reset")
