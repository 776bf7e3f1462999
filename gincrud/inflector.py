"""Naming-convention helpers for model names.

Every function here is pure: no I/O, no shared state.  They are used by the
DSL parser to derive the stored names on ``Model`` and are also registered
as Jinja2 filters so templates can derive names the same way.
"""

from __future__ import annotations


def snake_case(value: str) -> str:
    """Convert ``UserProfile`` to ``user_profile``.

    An underscore is inserted before every ASCII uppercase letter except the
    first character, then the whole result is lowercased.  Already-snake
    input passes through unchanged.
    """
    chars: list[str] = []
    for index, char in enumerate(value):
        if index > 0 and "A" <= char <= "Z":
            chars.append("_")
        chars.append(char)
    return "".join(chars).lower()


def pluralize(value: str) -> str:
    """Naive English plural: ``Category -> Categories``, ``Book -> Books``."""
    if value.endswith("y"):
        return value[:-1] + "ies"
    return value + "s"


def lower_initial(value: str) -> str:
    """Lowercase only the first character (``UserProfile -> userProfile``)."""
    if not value:
        return ""
    return value[0].lower() + value[1:]
