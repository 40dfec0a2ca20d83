from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def normalize_namespace(namespace: str | None) -> str:
    """Return a namespace of the form `/api` (leading slash, no trailing slash).

    An empty namespace means routes are mounted at the root.
    """
    ns = str(namespace or "").strip().strip("/")
    return f"/{ns}" if ns else ""


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the mock server.

    Values come from `FAUXAPI_*` environment variables; CLI flags and keyword
    arguments override them.
    """

    host: str = "127.0.0.1"
    port: int = 0
    namespace: str = "/api"
    log_level: str = "info"
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    @classmethod
    def from_env(cls) -> "Settings":
        port_raw = os.getenv("FAUXAPI_PORT", "0")
        try:
            port = int(port_raw)
        except ValueError:
            raise ValueError(f"FAUXAPI_PORT must be an integer, got {port_raw!r}")
        if port < 0:
            raise ValueError("FAUXAPI_PORT must be >= 0")

        origins_raw = os.getenv("FAUXAPI_CORS_ORIGINS")
        origins = _split_origins(origins_raw) if origins_raw is not None else DEFAULT_CORS_ORIGINS

        return cls(
            host=os.getenv("FAUXAPI_HOST", "127.0.0.1"),
            port=port,
            namespace=normalize_namespace(os.getenv("FAUXAPI_NAMESPACE", "/api")),
            log_level=os.getenv("FAUXAPI_LOG_LEVEL", "info").strip().lower() or "info",
            cors_origins=origins,
        )


def configure_logging(level: str | int = "info") -> None:
    """Install a basic stderr handler for the `fauxapi` loggers.

    Library code never calls this; it is meant for the CLI and for scripts.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("fauxapi").setLevel(level)
