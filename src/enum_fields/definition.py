"""Enum definition normalization.

Turns the accepted input shapes into one canonical, immutable structure:

- Mapping form: {"active": {"value": "active", "label": "Active"}, ...}
- Sequence form: ["active", "inactive"] -> key = value = label = scalar

Every entry must carry a "value"; "label" defaults to "value". Keys and
property names are canonicalized to text so lookups are indifferent to
whether the caller passes a string or an Enum member.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator, Mapping, Sequence
from enum import Enum
from types import MappingProxyType
from typing import Any

from enum_fields.errors import InvalidDefinitionsError

logger = logging.getLogger(__name__)

Metadata = Mapping[str, Any]

# Properties every entry exposes, in the order accessors are generated
STANDARD_PROPERTIES = ("value", "label")


def normalize_key(key: Any) -> str:
    """Canonicalize a definition key or property name to text.

    Args:
        key: A string, Enum member, or other scalar

    Returns:
        The text form used for storage and lookup
    """
    if isinstance(key, Enum):
        key = key.value if isinstance(key.value, str) else key.name
    if isinstance(key, str):
        return key
    return str(key)


def _is_lookup_key(value: Any) -> bool:
    """Text-like column values are tried as definition keys.

    Other values only match keys that were given with that type, see
    EnumDefinition._typed_keys.
    """
    return isinstance(value, (str, Enum))


class EnumDefinition(Mapping[str, Metadata]):
    """Normalized, ordered key -> metadata mapping for one enum field.

    Built once and frozen. Synthesized accessors and the registry hold a
    reference to the same instance.
    """

    def __init__(self, raw: Any) -> None:
        entries = self._build(raw)
        self._validate(entries)

        self._entries: Mapping[str, Metadata] = MappingProxyType(entries)
        self._typed_keys = self._collect_typed_keys(raw)
        self._properties = self._collect_properties(entries)
        self._warn_on_duplicate_values(entries)

    # ── Normalization ─────────────────────────────────────────────

    @staticmethod
    def _build(raw: Any) -> dict[str, Metadata]:
        if isinstance(raw, EnumDefinition):
            return dict(raw.data)

        if isinstance(raw, Mapping):
            entries: dict[str, Metadata] = {}
            for key, metadata in raw.items():
                if not isinstance(metadata, Mapping):
                    raise InvalidDefinitionsError(
                        f"Definition for {key!r} must be a mapping, got {type(metadata).__name__}"
                    )
                normalized = {normalize_key(prop): val for prop, val in metadata.items()}
                if "label" not in normalized:
                    normalized["label"] = normalized.get("value")
                entries[normalize_key(key)] = MappingProxyType(normalized)
            return entries

        if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)):
            entries = {}
            for scalar in raw:
                if isinstance(scalar, (Mapping, list, set, tuple)):
                    raise InvalidDefinitionsError(
                        f"Sequence definitions must contain scalars, got {type(scalar).__name__}"
                    )
                entries[normalize_key(scalar)] = MappingProxyType({"value": scalar, "label": scalar})
            return entries

        raise InvalidDefinitionsError(f"Invalid definitions format: {type(raw).__name__}")

    @staticmethod
    def _collect_typed_keys(raw: Any) -> dict[Any, str]:
        """Original non-text keys (e.g. 1 in {1: {...}}) -> canonical key."""
        if isinstance(raw, EnumDefinition):
            return dict(raw._typed_keys)
        originals = raw.keys() if isinstance(raw, Mapping) else raw
        return {
            original: normalize_key(original)
            for original in originals
            if not _is_lookup_key(original) and isinstance(original, Hashable)
        }

    @staticmethod
    def _validate(entries: dict[str, Metadata]) -> None:
        missing = [key for key, metadata in entries.items() if "value" not in metadata]
        if missing:
            raise InvalidDefinitionsError(
                f"Definitions must include a 'value' property (missing for: {', '.join(missing)})"
            )

    @staticmethod
    def _collect_properties(entries: dict[str, Metadata]) -> tuple[str, ...]:
        properties = dict.fromkeys(STANDARD_PROPERTIES)
        for metadata in entries.values():
            properties.update(dict.fromkeys(metadata))
        return tuple(properties)

    @staticmethod
    def _warn_on_duplicate_values(entries: dict[str, Metadata]) -> None:
        seen: dict[Any, str] = {}
        for key, metadata in entries.items():
            value = metadata["value"]
            try:
                first = seen.setdefault(value, key)
            except TypeError:
                # Unhashable values cannot be compared this way; resolve() still scans them
                continue
            if first != key:
                logger.warning(
                    "Keys %r and %r share the value %r; lookups by value resolve to %r",
                    first,
                    key,
                    value,
                    first,
                )

    # ── Mapping protocol ──────────────────────────────────────────

    def __getitem__(self, key: Any) -> Metadata:
        return self._entries[normalize_key(key)]

    def __contains__(self, key: object) -> bool:
        return normalize_key(key) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"EnumDefinition({self.to_dict()!r})"

    # ── Introspection ─────────────────────────────────────────────

    @property
    def data(self) -> Mapping[str, Metadata]:
        """Read-only view of the normalized entries."""
        return self._entries

    @property
    def properties(self) -> tuple[str, ...]:
        """Every property name found in any entry, "value" and "label" first."""
        return self._properties

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def is_blank(self) -> bool:
        return not self._entries

    @property
    def allowed_values(self) -> list[Any]:
        """The entries' values in definition order."""
        return [metadata["value"] for metadata in self._entries.values()]

    @property
    def options(self) -> list[tuple[Any, str]]:
        """(label, key) pairs in definition order, e.g. for select inputs."""
        return [(metadata["label"], key) for key, metadata in self._entries.items()]

    def dig(self, key: Any, *path: Any) -> Any:
        """Nested lookup that returns None instead of raising.

        Example:
            definition.dig("active", "label") -> "Active"
        """
        current: Any = self.get(key)
        for step in path:
            if not isinstance(current, Mapping):
                return None
            current = current.get(normalize_key(step))
        return current

    def _key_for_value(self, column_value: Any) -> str | None:
        if _is_lookup_key(column_value):
            return normalize_key(column_value)
        if isinstance(column_value, Hashable):
            return self._typed_keys.get(column_value)
        return None

    def resolve(self, column_value: Any) -> Metadata | None:
        """Find the metadata entry for a stored column value.

        The value is first tried as a key: text values always, other values
        only against keys originally given with their type. When that
        misses, the entries are scanned for one whose "value" equals it. If
        several entries share that value, the first one in definition order
        wins.

        Args:
            column_value: The current value of the storage column

        Returns:
            The matching metadata, or None for a None value or no match
        """
        if column_value is None:
            return None

        key = self._key_for_value(column_value)
        if key is not None:
            metadata = self._entries.get(key)
            if metadata is not None:
                return metadata

        for metadata in self._entries.values():
            if metadata["value"] == column_value:
                return metadata
        return None

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Plain nested dict copy, safe to mutate or serialize."""
        return {key: dict(metadata) for key, metadata in self._entries.items()}
