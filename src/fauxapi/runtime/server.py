from __future__ import annotations

import contextlib
import logging
import socket
import threading
import time
from dataclasses import dataclass, field

import uvicorn

from ..api import create_api_app
from ..config import Settings
from ..orm.schema import Schema
from ..sdk.client import FauxClient

logger = logging.getLogger(__name__)


@dataclass
class MockServer:
    host: str
    port: int
    url: str
    namespace: str
    _server: uvicorn.Server | None = field(default=None, repr=False)
    _thread: threading.Thread | None = field(default=None, repr=False)

    def client(self) -> FauxClient:
        return FauxClient(self.url, namespace=self.namespace)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def stop(self, *, timeout_s: float = 5.0) -> None:
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout=timeout_s)
        logger.info("Mock server at %s stopped", self.url)


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def run(
    schema: Schema,
    *,
    host: str | None = None,
    port: int | None = None,
    namespace: str | None = None,
    log_level: str | None = None,
    access_log: bool = False,
    startup_timeout_s: float = 5.0,
) -> MockServer:
    """Serve `schema` over HTTP from a background thread.

    Unset arguments fall back to `Settings.from_env()`. `port=0` picks a free
    port. Returns once Uvicorn reports it has started.
    """
    settings = Settings.from_env()
    host = host or settings.host
    port = settings.port if port is None else int(port)
    namespace = settings.namespace if namespace is None else namespace
    log_level = log_level or settings.log_level

    if port == 0:
        port = _find_free_port(host)

    app = create_api_app(schema, namespace=namespace, settings=settings)

    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True, name=f"fauxapi-{port}")
    thread.start()

    deadline = time.monotonic() + startup_timeout_s
    while not server.started:
        if not thread.is_alive():
            raise RuntimeError(f"Mock server failed to start on {host}:{port}")
        if time.monotonic() > deadline:
            server.should_exit = True
            raise RuntimeError(f"Mock server did not start within {startup_timeout_s}s")
        time.sleep(0.01)

    url = f"http://{host}:{port}"
    logger.info("Mock server listening on %s", url)
    return MockServer(host=host, port=port, url=url, namespace=app.state.namespace, _server=server, _thread=thread)
