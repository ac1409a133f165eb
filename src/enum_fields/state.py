"""Per-model enum field state.

Each model class that defines enum fields carries one ModelState in its own
class __dict__: the field table (accessor -> FieldSpec), the dispatch table
of names synthesized per accessor, and the validators per accessor.
Subclasses see their parents' fields by walking the MRO.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, overload

if TYPE_CHECKING:
    from enum_fields.field import FieldSpec

_STATE_ATTR = "_enum_fields_state"


@dataclass
class ModelState:
    """Enum field bookkeeping for a single model class."""

    fields: dict[str, FieldSpec] = field(default_factory=dict)
    installed: dict[str, list[str]] = field(default_factory=dict)
    """Accessor -> names synthesized on the model for it."""

    validators: dict[str, Callable[..., Any]] = field(default_factory=dict)


@overload
def model_state(model: type, *, create: Literal[True] = ...) -> ModelState: ...


@overload
def model_state(model: type, *, create: bool) -> ModelState | None: ...


def model_state(model: type, *, create: bool = True) -> ModelState | None:
    """Return the state stored on this exact class, creating it if asked."""
    state = model.__dict__.get(_STATE_ATTR)
    if state is None and create:
        state = ModelState()
        setattr(model, _STATE_ATTR, state)
    return state


def iter_states(model: type) -> Iterator[ModelState]:
    """States along the MRO, base classes first."""
    for klass in reversed(model.__mro__):
        state = klass.__dict__.get(_STATE_ATTR)
        if state is not None:
            yield state


def field_specs(model: type) -> dict[str, FieldSpec]:
    """Accessor -> FieldSpec for a model, including inherited fields."""
    specs: dict[str, FieldSpec] = {}
    for state in iter_states(model):
        specs.update(state.fields)
    return specs
