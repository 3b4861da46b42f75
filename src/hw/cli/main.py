"""hw CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from hw.cli.add import add_cmd, note_cmd
from hw.cli.init import init_cmd
from hw.cli.printing import print_cmd
from hw.cli.status import formats_cmd, status_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("hw")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hw {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="hw",
    help=(
        "hw — a homework toolkit for hackers.\n\n"
        "  hw init           Start tracking assignments in this directory.\n"
        "  hw add TITLE      Create an assignment and open it in your editor.\n"
        "  hw print --latest Print the assignment you just wrote."
    ),
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """hw — a homework toolkit for hackers."""


app.command("init")(init_cmd)
app.command("add")(add_cmd)
app.command("note")(note_cmd)
app.command("print")(print_cmd)
app.command("status")(status_cmd)
app.command("formats")(formats_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed hw version."""
    typer.echo(f"hw {_installed_version()}")


if __name__ == "__main__":
    app()
