"""String case helpers used for name mangling."""

from __future__ import annotations

import re
from functools import lru_cache

import inflect

_inflect_engine = inflect.engine()

_UPPER_BOUNDARY = re.compile(r"(.)(?=[A-Z])")
_WHITESPACE = re.compile(r"\s+")


def snake_to_pascal(s: str) -> str:
    return "".join(p[:1].upper() + p[1:] for p in s.split("_") if p)


def camel_to_snake(s: str) -> str:
    if not s:
        return ""
    parts = [s[0].lower()]
    for c in s[1:]:
        if c.isupper():
            parts.append("_")
            parts.append(c.lower())
        else:
            parts.append(c)
    return "".join(parts)


def snake(value: str, delimiter: str = "_") -> str:
    """
    Convert free text, camelCase or PascalCase to snake_case.

    Already lower-case input is returned unchanged; otherwise words are
    capitalized, whitespace is removed and a delimiter is inserted before
    every upper-case letter, e.g. ``"In Progress"`` and ``"InProgress"``
    both become ``"in_progress"``.
    """
    if value.islower() or not any(c.isalpha() for c in value):
        return value
    words = _WHITESPACE.split(value.strip())
    joined = "".join(word[:1].upper() + word[1:] for word in words if word)
    return _UPPER_BOUNDARY.sub(rf"\1{delimiter}", joined).lower()


@lru_cache(maxsize=512)
def singularize(word: str) -> str:
    """Return the singular form of ``word``, or ``word`` when it is already singular."""
    if not word:
        return word
    singular = _inflect_engine.singular_noun(word)
    return singular if singular else word


def mangle_identifier(name: str) -> str:
    """
    Turn a snake_case, possibly plural identifier into a PascalCase class name.

    ``"order_items"`` becomes ``"OrderItem"``; every segment is singularized.
    """
    return "".join(
        snake_to_pascal(singularize(segment.lower()))
        for segment in name.strip().split("_")
        if segment
    )
