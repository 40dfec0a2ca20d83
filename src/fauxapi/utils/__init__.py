from __future__ import annotations

from .inflector import camelize, dasherize, irregular, pluralize, singularize, underscore

__all__ = ["pluralize", "singularize", "camelize", "underscore", "dasherize", "irregular"]
