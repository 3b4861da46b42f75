"""hw print — print an assignment, or export it to PDF.

Usage:
  hw print Essay_One.markdown
  hw print --pdf Essay_One.markdown     (→ Essay_One.pdf next to the source)
  hw print --latest [--pdf]             (the file from the last hw add / note)

The format is inferred from the file extension. Relative paths are resolved
against the repository root.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from hw.cli.errors import err_missing_filename, report_errors
from hw.cli.repo import open_service

console = Console()


def print_cmd(
    filename: Annotated[
        str | None,
        typer.Argument(help="Assignment file. Ignored with --latest."),
    ] = None,
    pdf: Annotated[
        bool,
        typer.Option("--pdf", help="Write a PDF next to the file instead of printing."),
    ] = False,
    latest: Annotated[
        bool,
        typer.Option("--latest", help="Use the most recently added assignment."),
    ] = False,
) -> None:
    """Print an assignment. If --latest is used, filename is ignored."""
    if not latest and not filename:
        console.print(err_missing_filename())
        raise typer.Exit(1)

    if latest and filename:
        console.print(f"[dim]--latest given; ignoring '{escape(filename)}'.[/]")

    with report_errors(console):
        service = open_service(console)
        result = service.print(None if latest else filename, use_latest=latest, want_pdf=pdf)

    if result.pdf is not None:
        console.print(f"  [green]✓[/] PDF written to [bold]{escape(str(result.pdf))}[/]")
    elif result.printed:
        console.print("  [green]✓[/] Sent to printer")
