"""Process-wide registry of enum fields, keyed by model identity.

The registry is created on first use. reset_registry() swaps in a fresh
instance; anything still holding the old one keeps a detached snapshot
that is never cleared in place.

Model keys are derived from the model's qualified name:
    "User"            -> "user"
    "UserNotification" -> "user_notification"
    "Admin::User"     -> "admin/user"

When a different class already owns that key, the module-qualified name is
used instead ("billing.User" -> "billing/user").
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from enum_fields.definition import EnumDefinition, normalize_key
from enum_fields.utils.inflection import underscore

logger = logging.getLogger(__name__)

_LOCALS_MARKER = "<locals>."


def _model_name(model: type) -> str | None:
    """Resolve the name a model registers under, or None if it has none."""
    name = model.__dict__.get("__model_name__") or getattr(model, "__qualname__", None)
    if not isinstance(name, str):
        return None
    # Classes defined inside functions: keep the part after the last "<locals>."
    if _LOCALS_MARKER in name:
        name = name.rsplit(_LOCALS_MARKER, 1)[1]
    name = name.strip()
    if not name or "<" in name:
        return None
    return name


def _qualified_key(model: type) -> str | None:
    """Module-qualified key, e.g. "billing.models" + "User" -> "billing/models/user"."""
    name = _model_name(model)
    module = getattr(model, "__module__", None)
    if name is None or not isinstance(module, str) or not module:
        return None
    return underscore(f"{module}.{name}")


def _same_model(a: type, b: type) -> bool:
    """A re-created class (module reload, redefinition) counts as the same model."""
    return a is b or (
        getattr(a, "__module__", None) == getattr(b, "__module__", None)
        and getattr(a, "__qualname__", None) == getattr(b, "__qualname__", None)
    )


def model_key(model: type | str) -> str:
    """Derive the registry key for a model class.

    Args:
        model: A model class, or an already-derived key

    Returns:
        The underscored, namespace-flattened name, or a process-unique
        token (the class id) for models without a resolvable name
    """
    if isinstance(model, str):
        return model
    name = _model_name(model)
    if name is None:
        return str(id(model))
    return underscore(name)


class Registry(Mapping[str, dict[str, EnumDefinition]]):
    """Model key -> accessor -> definition.

    Each key belongs to one model class. A second class that derives the
    same short key (two "User" models in different modules) registers under
    its module-qualified key instead, or under its id if that is taken too.
    """

    def __init__(self) -> None:
        self._store: dict[str, dict[str, EnumDefinition]] = {}
        self._owners: dict[str, type] = {}

    def key_for(self, model: type | str) -> str:
        """The key a model is (or would be) registered under."""
        if isinstance(model, str):
            return model
        for key, owner in self._owners.items():
            if owner is model:
                return key

        for key in (model_key(model), _qualified_key(model)):
            if key is None:
                continue
            owner = self._owners.get(key)
            if owner is None or _same_model(owner, model):
                return key
        return str(id(model))

    def register(self, model: type | str, accessor: Any, definition: EnumDefinition) -> None:
        """Insert or overwrite the definition for (model, accessor)."""
        key = self.key_for(model)
        if not isinstance(model, str):
            if key != model_key(model):
                logger.debug(
                    "Model key %r is taken, registering %s as %r", model_key(model), model, key
                )
            self._owners[key] = model
        self._store.setdefault(key, {})[normalize_key(accessor)] = definition
        logger.debug("Registered enum field %s.%s (%d entries)", key, accessor, len(definition))

    def lookup(self, model: type | str) -> dict[str, EnumDefinition]:
        """Accessor -> definition for one model; empty when nothing is registered."""
        return dict(self._store.get(self.key_for(model), {}))

    def snapshot(self) -> dict[str, dict[str, dict[str, dict[str, Any]]]]:
        """The whole registry as plain nested dicts, safe to inspect or export."""
        return {
            key: {accessor: definition.to_dict() for accessor, definition in fields.items()}
            for key, fields in self._store.items()
        }

    def __getitem__(self, key: Any) -> dict[str, EnumDefinition]:
        return self._store[normalize_key(key)]

    def __contains__(self, key: object) -> bool:
        return normalize_key(key) in self._store

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"Registry({sorted(self._store)!r})"


_registry: Registry | None = None


def get_registry() -> Registry:
    """Return the process-wide registry, creating it on first use."""
    global _registry
    if _registry is None:
        _registry = Registry()
    return _registry


def register(model: type | str, accessor: Any, definition: EnumDefinition) -> None:
    """Register a field definition in the process-wide registry."""
    get_registry().register(model, accessor, definition)


def reset_registry() -> Registry:
    """Install a fresh, empty registry and return it.

    The previous instance is left untouched, so references obtained
    before the reset become stale snapshots.
    """
    global _registry
    _registry = Registry()
    logger.debug("Enum field registry reset")
    return _registry
