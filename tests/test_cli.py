"""Tests for the enum-fields CLI."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from enum_fields import __version__
from enum_fields.cli import app

runner = CliRunner()

MODELS_SOURCE = '''
from enum_fields import EnumFieldsMixin


class Order(EnumFieldsMixin):
    pass


class Shipment(EnumFieldsMixin):
    pass


Order.enum_field("status", {
    "pending": {"value": "pending", "label": "Pending", "color": "grey"},
    "shipped": {"value": "shipped", "label": "Shipped"},
})
Shipment.enum_field("carrier", ["ups", "dhl"])
'''


@pytest.fixture
def models_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """A freshly importable module that defines enum fields on import."""
    name = "shop_models"
    (tmp_path / f"{name}.py").write_text(MODELS_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, name, raising=False)
    return name


class TestShow:
    def test_tables(self, models_module: str) -> None:
        result = runner.invoke(app, ["show", models_module])
        assert result.exit_code == 0
        assert "order.status" in result.stdout
        assert "shipment.carrier" in result.stdout
        assert "Pending" in result.stdout
        assert "2 field(s) on 2 model(s)" in result.stdout

    def test_json(self, models_module: str) -> None:
        result = runner.invoke(app, ["show", models_module, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["order"]["status"]["pending"] == {"value": "pending", "label": "Pending", "color": "grey"}
        assert data["shipment"]["carrier"]["dhl"] == {"value": "dhl", "label": "dhl"}

    def test_single_model(self, models_module: str) -> None:
        result = runner.invoke(app, ["show", models_module, "--model", "shipment", "--json"])
        assert result.exit_code == 0
        assert list(json.loads(result.stdout)) == ["shipment"]

    def test_unknown_model(self, models_module: str) -> None:
        result = runner.invoke(app, ["show", models_module, "-m", "invoice"])
        assert result.exit_code == 1
        assert "invoice" in result.stdout

    def test_missing_module(self) -> None:
        result = runner.invoke(app, ["show", "no_such_module_for_enum_fields"])
        assert result.exit_code == 1
        assert "Could not import" in result.stdout

    def test_module_without_fields(self) -> None:
        result = runner.invoke(app, ["show", "json"])
        assert result.exit_code == 0
        assert "No enum fields registered" in result.stdout


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == f"enum-fields {__version__}"
