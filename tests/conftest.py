"""Shared pytest fixtures for enum-fields tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from enum_fields import EnumFieldsMixin, reset_registry
from enum_fields.registry import Registry

MakeModel = Callable[..., type]


@pytest.fixture(autouse=True)
def registry() -> Registry:
    """Give every test a fresh process-wide registry."""
    return reset_registry()


@pytest.fixture
def make_model() -> MakeModel:
    """Factory fixture for plain model classes.

    Instances accept attributes as keyword arguments, like an ORM
    constructor.
    """

    def _make(name: str = "TestModel", *, mixin: bool = True, **namespace: Any) -> type:
        def __init__(self: Any, **attributes: Any) -> None:
            for key, value in attributes.items():
                setattr(self, key, value)

        bases: tuple[type, ...] = (EnumFieldsMixin,) if mixin else (object,)
        return type(name, bases, {"__init__": __init__, "__module__": __name__, **namespace})

    return _make


@pytest.fixture
def status_definitions() -> dict[str, dict[str, Any]]:
    return {
        "value1": {"value": "value1", "label": "Value 1", "icon": "icon1", "color": "red"},
        "value2": {"value": "value2", "label": "Value 2", "icon": "icon2", "tooltip": "Second"},
    }


@pytest.fixture
def sqlite_session() -> Generator[Session, None, None]:
    """In-memory SQLite session; callers create their own tables."""
    engine = create_engine("sqlite://", echo=False)
    with Session(engine) as session:
        yield session
    engine.dispose()
