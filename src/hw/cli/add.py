"""hw add / hw note — create an assignment and open it in the editor.

Usage:
  hw add "Essay One"
  hw add --class "Class 8" --format latex "Problem Set 3"
  hw note "Photosynthesis"          (→ Notes_on_Photosynthesis.markdown)

note is a shorthand for small, in-class notes: no class by default and the
note_format from hw.yaml.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from hw.cli.errors import report_errors
from hw.cli.repo import open_service

console = Console()


def add_cmd(
    title: Annotated[
        list[str],
        typer.Argument(help="Assignment title. Several words are joined with spaces."),
    ],
    class_name: Annotated[
        str | None,
        typer.Option("--class", "-c", help="Class name. Defaults to default_class in hw.yaml."),
    ] = None,
    format_id: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Format id (see: hw formats). Defaults to default_format."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Overwrite an existing file without asking."),
    ] = False,
) -> None:
    """Create a new assignment from its format template and edit it."""
    with report_errors(console):
        service = open_service(console)
        path = service.add(" ".join(title), class_name, format_id, yes=yes)
    console.print(f"[bold green]✓[/] Latest assignment: {escape(path.name)}")


def note_cmd(
    subject: Annotated[
        list[str],
        typer.Argument(help="Subject of the notes. Several words are joined with spaces."),
    ],
    class_name: Annotated[
        str | None,
        typer.Option("--class", "-c", help="Class name (empty by default)."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Overwrite an existing file without asking."),
    ] = False,
) -> None:
    """Quick note-taking in the configured note format."""
    with report_errors(console):
        service = open_service(console)
        path = service.note(" ".join(subject), class_name, yes=yes)
    console.print(f"[bold green]✓[/] Latest assignment: {escape(path.name)}")
