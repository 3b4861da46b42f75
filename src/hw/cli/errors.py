"""hw rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    with report_errors(console):
        service.print(filename)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.markup import escape

from hw.errors import (
    AssignmentExists,
    ConfigurationMissing,
    CorruptStatus,
    EditorFailure,
    HwError,
    InvalidFallback,
    InvalidTitle,
    NoFallback,
    NoLatestAssignment,
    RenderFailure,
    UnknownFormat,
    UnsafePath,
)


def err_no_repository(exc: ConfigurationMissing) -> str:
    """No usable repository, locally or through ~/.hw_default.

    Example:
        Error: The configuration file could not be loaded.
          No hw.yaml here, and '/home/me/.hw_default' does not exist.
          Run:  hw init   (in the directory that should hold your assignments)
    """
    if exc.local_reason:
        return (
            "[red]Error:[/] The configuration file could not be loaded.\n"
            f"  hw.yaml in this directory is invalid: {escape(exc.local_reason)}\n"
            "  Fix or delete it, then run the command again."
        )
    if isinstance(exc, NoFallback):
        detail = f"No hw.yaml here, and {escape(exc.reason)}."
    elif isinstance(exc, InvalidFallback):
        detail = (
            f"No hw.yaml here, and the fallback '{escape(str(exc.directory))}' "
            f"from {escape(str(exc.pointer))}: {escape(exc.reason)}."
        )
    else:
        reason = f" ({escape(exc.reason)})" if exc.reason else ""
        detail = f"No usable hw.yaml in '{escape(str(exc.directory))}'{reason}."
    return (
        "[red]Error:[/] The configuration file could not be loaded.\n"
        f"  {detail}\n"
        "  Run:  hw init   (in the directory that should hold your assignments)"
    )


def err_unknown_format(exc: UnknownFormat) -> str:
    """Format name or file extension has no handler."""
    known = ", ".join(exc.known) if exc.known else "(none)"
    if exc.by_extension:
        shown = f"'.{escape(exc.key)}'" if exc.key else "(no extension)"
        return (
            f"[red]Error:[/] Cannot infer a format from extension {shown}.\n"
            f"  Known extensions: {escape(known)}\n"
            "  Run:  hw formats   to see supported formats."
        )
    return (
        f"[red]Error:[/] Unknown format '{escape(exc.key)}'.\n"
        f"  Known formats: {escape(known)}\n"
        "  Use:  hw add --format <name> ...   (see: hw formats)"
    )


def err_render_failed(exc: RenderFailure) -> str:
    """External converter / printer failed."""
    lines = [f"[red]Error:[/] Printing failed: {escape(str(exc))}"]
    if exc.stderr:
        lines.append("[dim]" + escape(exc.stderr) + "[/]")
    if exc.tool and "not found" in str(exc):
        lines.append(f"  Install {escape(exc.tool)} and make sure it is on PATH.")
    else:
        lines.append("  Fix the document or the tool error above, then run:  hw print <file>")
    return "\n".join(lines)


def err_no_latest() -> str:
    """print --latest with nothing recorded."""
    return (
        "[red]Error:[/] No latest assignment recorded yet.\n"
        "  Specify a filename explicitly:  hw print <file>\n"
        "  (or create one first:  hw add <title>)"
    )


def err_corrupt_status(exc: CorruptStatus) -> str:
    """status.json unreadable."""
    return (
        f"[red]Error:[/] {escape(str(exc))}\n"
        "  Specify a filename explicitly:  hw print <file>\n"
        f"  or repair the file (an empty record is: {{}}):  {escape(str(exc.path))}"
    )


def err_editor_failed(exc: EditorFailure) -> str:
    """Editor missing or exited with an error — file kept, not recorded."""
    return (
        f"[red]Error:[/] {escape(str(exc))}\n"
        f"  The file was created but not recorded as latest.\n"
        "  Set a working editor:  export HW_EDITOR=<command>   (or editor: in hw.yaml)"
    )


def err_assignment_exists(exc: AssignmentExists) -> str:
    """Overwrite declined."""
    return (
        f"[yellow]Cancelled:[/] '{escape(str(exc.path))}' already exists and was left untouched.\n"
        "  Use a different title, or pass --yes to overwrite."
    )


def err_invalid_title(exc: InvalidTitle) -> str:
    return (
        f"[red]Error:[/] {escape(str(exc))}\n"
        '  Use:  hw add "Assignment Title"'
    )


def err_unsafe_path(exc: UnsafePath) -> str:
    """Title or file_directory hook points outside the repository."""
    return (
        f"[red]Error:[/] {escape(exc.reason)}\n"
        "  Use a title without '..', and keep '..' and absolute paths\n"
        "  out of file_directory in hw.yaml."
    )


def err_missing_filename() -> str:
    """hw print without a file and without --latest."""
    return (
        "[red]Error:[/] No file to print.\n"
        "  Use:  hw print <file>   or   hw print --latest"
    )


def message_for(exc: HwError) -> str:
    """Return the rich message for any hw error."""
    if isinstance(exc, ConfigurationMissing):
        return err_no_repository(exc)
    if isinstance(exc, UnknownFormat):
        return err_unknown_format(exc)
    if isinstance(exc, RenderFailure):
        return err_render_failed(exc)
    if isinstance(exc, NoLatestAssignment):
        return err_no_latest()
    if isinstance(exc, CorruptStatus):
        return err_corrupt_status(exc)
    if isinstance(exc, EditorFailure):
        return err_editor_failed(exc)
    if isinstance(exc, AssignmentExists):
        return err_assignment_exists(exc)
    if isinstance(exc, InvalidTitle):
        return err_invalid_title(exc)
    if isinstance(exc, UnsafePath):
        return err_unsafe_path(exc)
    return f"[red]Error:[/] {escape(str(exc))}"


@contextmanager
def report_errors(console: Console) -> Iterator[None]:
    """Print one message for any HwError and exit with its exit code."""
    try:
        yield
    except HwError as exc:
        console.print(message_for(exc))
        raise typer.Exit(exc.exit_code)
