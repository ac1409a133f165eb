"""CLI for enum-fields.

Commands:
    show <module>...    - Import modules and print their registered enum fields
    version             - Print the installed version
"""

from __future__ import annotations

import importlib
import json
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from enum_fields import __version__
from enum_fields.registry import get_registry

app = typer.Typer(
    name="enum-fields",
    help="Inspect enum fields registered on model classes",
    no_args_is_help=True,
)
console = Console()


def _format_extras(metadata: dict[str, Any]) -> str:
    extras = {k: v for k, v in metadata.items() if k not in ("value", "label")}
    return ", ".join(f"{k}={v!r}" for k, v in extras.items()) or "-"


@app.command()
def show(
    modules: Annotated[list[str], typer.Argument(help="Modules to import, e.g. myapp.models")],
    model: Annotated[str | None, typer.Option("--model", "-m", help="Only show this model key")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the registry as JSON")] = False,
):
    """Show enum fields registered by the given modules.

    Importing a module runs its enum field definitions, which fills the
    process-wide registry.
    """
    for module in modules:
        try:
            importlib.import_module(module)
        except ImportError as e:
            console.print(f"[red]Could not import {module}: {e}[/red]")
            raise typer.Exit(1) from e

    snapshot = get_registry().snapshot()
    if model is not None:
        if model not in snapshot:
            console.print(f"[yellow]No enum fields registered for model '{model}'[/yellow]")
            raise typer.Exit(1)
        snapshot = {model: snapshot[model]}

    if as_json:
        typer.echo(json.dumps(snapshot, indent=2, default=str))
        return

    if not snapshot:
        console.print("[yellow]No enum fields registered[/yellow]")
        return

    for model_key, fields in snapshot.items():
        for accessor, definition in fields.items():
            table = Table(title=f"{model_key}.{accessor}")
            table.add_column("Key")
            table.add_column("Value")
            table.add_column("Label")
            table.add_column("Extra")

            for key, metadata in definition.items():
                table.add_row(
                    key,
                    repr(metadata["value"]),
                    str(metadata["label"]),
                    _format_extras(metadata),
                )

            console.print(table)

    total = sum(len(fields) for fields in snapshot.values())
    console.print(f"\n[dim]{total} field(s) on {len(snapshot)} model(s)[/dim]")


@app.command()
def version():
    """Print the installed version."""
    typer.echo(f"enum-fields {__version__}")


if __name__ == "__main__":
    app()
