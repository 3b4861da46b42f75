"""hw status / hw formats — repository overview and supported formats."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from hw.cli.errors import report_errors
from hw.cli.repo import open_repository
from hw.errors import CorruptStatus
from hw.formats import build_registry
from hw.locator import FallbackRoot
from hw.status import StatusStore

console = Console()


def status_cmd() -> None:
    """Show the active repository, its settings and the latest assignment."""
    with report_errors(console):
        located = open_repository(console)

    cfg = located.config
    root = located.path.resolve()
    via = (
        f"fallback ({escape(str(located.pointer))})"
        if isinstance(located, FallbackRoot)
        else "current directory"
    )

    store = StatusStore(root)
    try:
        latest = store.read_latest()
    except CorruptStatus as exc:
        latest_line = f"[red]✗ {escape(exc.reason)}[/]"
    else:
        if latest is None:
            latest_line = "[dim](none yet)[/]"
        elif (root / latest).exists():
            latest_line = f"{escape(latest)} [green]✓[/]"
        else:
            latest_line = f"{escape(latest)} [yellow]✗ missing[/]"

    lines = [
        f"Repository:  [bold]{escape(str(root))}[/]",
        f"Found via:   {via}",
        f"Format:      {escape(cfg.default_format)} (notes: {escape(cfg.note_format)})",
        f"Class:       {escape(cfg.default_class) or '[dim](none)[/]'}",
        f"Editor:      {escape(cfg.editor_command)}",
        f"Git:         {'on' if cfg.use_git else 'off'}",
        f"Latest:      {latest_line}",
    ]
    if cfg.file_directory:
        lines.insert(5, f"Directory:   {escape(cfg.file_directory)}")

    console.print(Panel("\n".join(lines), title="[bold]hw[/]", expand=False))


def formats_cmd() -> None:
    """List the supported document formats."""
    registry = build_registry()

    table = Table(title="Formats", show_header=True, header_style="bold")
    table.add_column("Format", style="bold")
    table.add_column("Extension")
    table.add_column("Description")

    for handler in registry.list_formats():
        table.add_row(handler.format_id, f".{handler.extension}", handler.description)

    console.print(table)
