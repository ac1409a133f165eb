"""String inflection helpers used to derive synthesized names.

- underscore: "Admin::UserNotification" -> "admin/user_notification"
- pluralize: "status" -> "statuses", "record_type" -> "record_types"
"""

from __future__ import annotations

import re

_NAMESPACE_SEPARATOR = re.compile(r"::|\.")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z\d]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")

# Irregular plurals that don't follow standard rules
_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "datum": "data",
    "medium": "media",
    "criterion": "criteria",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
}

# Words whose plural is the word itself
_UNCOUNTABLE = frozenset({
    "equipment",
    "information",
    "metadata",
    "news",
    "series",
    "species",
})


def underscore(name: str) -> str:
    """Convert a CamelCase, possibly namespaced name to a lowercase path.

    Namespace separators ("::" or ".") become "/" and word boundaries
    become "_".

    Args:
        name: Class or qualified name (e.g., "Admin::User", "HTTPRequest")

    Returns:
        The underscored form (e.g., "admin/user", "http_request")
    """
    word = _NAMESPACE_SEPARATOR.sub("/", name)
    word = _ACRONYM_BOUNDARY.sub(r"\1_\2", word)
    word = _WORD_BOUNDARY.sub(r"\1_\2", word)
    return word.replace("-", "_").lower()


def pluralize(word: str) -> str:
    """Pluralize the last segment of a snake_case word.

    Args:
        word: Singular word (e.g., "status", "record_type", "category")

    Returns:
        Plural form (e.g., "statuses", "record_types", "categories")
    """
    if not word:
        return word

    head, sep, last = word.rpartition("_")
    if not last:
        return word

    lower_last = last.lower()

    if lower_last in _UNCOUNTABLE:
        return word

    if lower_last in _IRREGULAR_PLURALS:
        plural = _IRREGULAR_PLURALS[lower_last]
        if last[0].isupper():
            plural = plural.capitalize()
        return head + sep + plural

    if lower_last.endswith(("s", "x", "z", "ch", "sh")):
        # status -> statuses, box -> boxes, match -> matches
        plural = last + "es"
    elif lower_last.endswith("y") and len(last) > 1 and lower_last[-2] not in "aeiou":
        # category -> categories, but key -> keys
        plural = last[:-1] + "ies"
    elif lower_last.endswith("fe"):
        plural = last[:-2] + "ves"
    elif lower_last.endswith(("elf", "alf", "olf", "eaf", "oaf", "arf")):
        plural = last[:-1] + "ves"
    else:
        plural = last + "s"

    return head + sep + plural
