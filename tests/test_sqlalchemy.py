"""Tests for enum fields on SQLAlchemy declarative models."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, InstrumentedAttribute, Mapped, Session, mapped_column

from conftest import MakeModel
from enum_fields import EnumFieldsMixin, InvalidDefinitionsError


class Base(EnumFieldsMixin, DeclarativeBase):
    pass


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    status: Mapped[str | None] = mapped_column(String(32))
    priority_code: Mapped[int | None] = mapped_column()


class Fish(Base):
    __tablename__ = "fish"

    id: Mapped[int] = mapped_column(primary_key=True)
    species: Mapped[str | None] = mapped_column(String(32))
    record_type: Mapped[str | None] = mapped_column(String(32))


def _sql(statement: Any) -> str:
    return " ".join(str(statement.compile(compile_kwargs={"literal_binds": True})).split())


@pytest.fixture
def orders(sqlite_session: Session) -> type[Order]:
    Order.enum_field("status", {
        "pending": {"value": "pending", "label": "Pending", "color": "grey"},
        "shipped": {"value": "shipped", "label": "Shipped", "color": "green"},
    })
    Order.enum_field("priority", {"low": {"value": 1}, "high": {"value": 3}}, column="priority_code")

    Base.metadata.create_all(sqlite_session.get_bind())
    sqlite_session.add_all([
        Order(id=1, status="pending", priority_code=1),
        Order(id=2, status="shipped", priority_code=3),
        Order(id=3, status="shipped", priority_code=1),
        Order(id=4, status=None),
    ])
    sqlite_session.commit()
    return Order


class TestMappedInstances:
    """Synthesized readers on mapped instances."""

    def test_readers(self, orders: type[Order]) -> None:
        order = orders(status="shipped")
        assert order.status_label == "Shipped"
        assert order.status_color == "green"
        assert order.is_shipped_status is True
        assert order.is_pending_status is False

    def test_column_override(self, orders: type[Order]) -> None:
        order = orders(priority_code=3)
        assert order.priority == 3
        assert order.priority_label == 3
        assert order.is_high_priority is True
        order.priority = 1
        assert order.priority_code == 1

    def test_validation(self, orders: type[Order]) -> None:
        assert orders(status="pending").is_valid() is True
        order = orders(status="lost")
        assert order.is_valid() is False
        assert order.errors["status"] == ["must be one of: pending, shipped"]

    def test_loaded_rows(self, orders: type[Order], sqlite_session: Session) -> None:
        order = sqlite_session.get(orders, 2)
        assert order is not None
        assert order.status_metadata == {"value": "shipped", "label": "Shipped", "color": "green"}
        assert order.is_high_priority is True


class TestScopes:
    """Scopes return SELECT statements that run against the database."""

    def test_scope_filters_rows(self, orders: type[Order], sqlite_session: Session) -> None:
        shipped = sqlite_session.scalars(orders.shipped_status().order_by(orders.id)).all()
        assert [order.id for order in shipped] == [2, 3]

    def test_scope_on_override_column(self, orders: type[Order], sqlite_session: Session) -> None:
        low = sqlite_session.scalars(orders.low_priority().order_by(orders.id)).all()
        assert [order.id for order in low] == [1, 3]

    def test_scopes_chain(self, orders: type[Order], sqlite_session: Session) -> None:
        statement = orders.shipped_status().where(orders.priority_code == 1)
        assert [order.id for order in sqlite_session.scalars(statement)] == [3]

    def test_scope_sql(self, orders: type[Order]) -> None:
        assert "WHERE orders.status = 'pending'" in _sql(orders.pending_status())


class TestUnmappedScopes:
    """Plain classes get a table-level SELECT."""

    def test_table_named_after_model(self, make_model: MakeModel) -> None:
        model = make_model("Ticket")
        model.enum_field("state", ["open", "closed"])
        assert _sql(model.open_state()) == "SELECT * FROM tickets WHERE state = 'open'"

    def test_explicit_tablename(self, make_model: MakeModel) -> None:
        model = make_model("Ticket", __tablename__="support_tickets")
        model.enum_field("state", ["open"], column="state_code")
        assert _sql(model.open_state()) == "SELECT * FROM support_tickets WHERE state_code = 'open'"


class TestMappedColumnsAreKept:
    """Generated names that would replace a mapped column are rejected."""

    def test_uncountable_accessor(self) -> None:
        with pytest.raises(InvalidDefinitionsError, match="Fish.species already exists"):
            Fish.enum_field("species", ["cat", "dog"])
        assert isinstance(Fish.__dict__["species"], InstrumentedAttribute)
        assert not hasattr(Fish, "cat_species")

    def test_scope_named_like_column(self) -> None:
        with pytest.raises(InvalidDefinitionsError, match="record_type"):
            Fish.enum_field("type", ["record", "file"], column="record_type")
        assert not Fish.has_enum_field("type")

    def test_override_column_keeps_scopes_working(self, sqlite_session: Session) -> None:
        Fish.enum_field("kind", ["cat", "dog"], column="species")
        Base.metadata.create_all(sqlite_session.get_bind())
        sqlite_session.add_all([Fish(id=1, species="cat"), Fish(id=2, species="dog")])
        sqlite_session.commit()

        cats = sqlite_session.scalars(Fish.cat_kind()).all()
        assert [fish.id for fish in cats] == [1]
        assert cats[0].kind_label == "cat"
