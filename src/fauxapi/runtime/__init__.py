from __future__ import annotations

from .server import MockServer, run

__all__ = ["MockServer", "run"]
