"""Name inflection helpers.

Thin wrappers around `inflection` so the rest of the package has a single
place to go for collection and type names (`user` <-> `users`).
"""

from __future__ import annotations

import inflection


def pluralize(word: str) -> str:
    return inflection.pluralize(str(word))


def singularize(word: str) -> str:
    return inflection.singularize(str(word))


def camelize(word: str, *, uppercase_first_letter: bool = False) -> str:
    return inflection.camelize(str(word), uppercase_first_letter)


def underscore(word: str) -> str:
    return inflection.underscore(str(word))


def dasherize(word: str) -> str:
    return inflection.dasherize(underscore(word))


def irregular(singular: str, plural: str) -> None:
    """Register an irregular pair, e.g. `irregular("person", "people")`.

    The rule is global to the process, like the rest of `inflection`'s tables.
    """
    inflection._irregular(singular, plural)
