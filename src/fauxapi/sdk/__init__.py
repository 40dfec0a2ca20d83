from __future__ import annotations

from .client import FauxClient

__all__ = ["FauxClient"]
