"""hw init — turn a directory into an hw repository.

Creates:
  hw.yaml        — repository config (formats, editor, git, file_directory hook)
  status.json    — status record, initially {}
  template.html  — Pandoc HTML template used when printing Markdown
  .git/          — unless --no-git
  ~/.hw_default  — global pointer, so hw works from any directory

Existing hw.yaml / status.json / template.html are preserved, so running init
again only re-points ~/.hw_default at this directory.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from hw import vcs
from hw.cli.errors import report_errors
from hw.config import CONFIG_NAME, ConfigError, default_config_text, load_config
from hw.formats import TEMPLATE_NAME
from hw.locator import LocalRoot, locate, write_pointer
from hw.status import STATUS_NAME, StatusStore
from hw.writer import write_atomic

console = Console()

_DEFAULT_PROJECT_DIR = Path(".")
_PACKAGED_TEMPLATE = Path(__file__).resolve().parent.parent / "resources" / TEMPLATE_NAME


def init_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Directory to initialize. Defaults to current directory."),
    ] = _DEFAULT_PROJECT_DIR,
    git: Annotated[
        bool,
        typer.Option("--git/--no-git", help="Run git init and commit new assignments."),
    ] = True,
) -> None:
    """Initialize a repository for homework tracking."""
    project_dir = project_dir.resolve()
    project_dir.mkdir(parents=True, exist_ok=True)

    with report_errors(console):
        located = locate(project_dir, for_init=True)

    if isinstance(located, LocalRoot):
        console.print("[yellow]⚠[/]  Already an hw repository. Existing files are preserved.")

    console.print(f"\n[bold]Initializing hw in {escape(str(project_dir))} …[/]\n")

    _create_config(project_dir, git)
    _create_status(project_dir)
    _copy_template(project_dir)

    if git:
        if vcs.init_repository(project_dir):
            console.print("  [green]✓[/] git repository")

    pointer = write_pointer(project_dir)
    console.print(f"  [green]✓[/] {escape(str(pointer))} → {escape(str(project_dir))}")

    console.print("\n[bold green]✓ hw repository initialized.[/]")
    console.print("\nNext steps:")
    console.print('  1. hw add "Assignment Title"      (create and edit an assignment)')
    console.print("  2. hw print --latest               (print what you just wrote)")
    console.print("  3. hw print --pdf <file>           (export to PDF)")


# ---------------------------------------------------------------------------
# Scaffold builders
# ---------------------------------------------------------------------------


def _create_config(project_dir: Path, git: bool) -> None:
    cfg_path = project_dir / CONFIG_NAME
    if cfg_path.exists():
        try:
            load_config(project_dir)
        except ConfigError as exc:
            console.print(f"  [yellow]⚠[/] {CONFIG_NAME} (kept, invalid: {escape(str(exc))})")
            console.print(f"    Fix or delete {CONFIG_NAME} and run init again.")
        else:
            console.print(f"  [dim]•[/] {CONFIG_NAME} (kept)")
        return
    write_atomic(cfg_path, default_config_text(use_git=git))
    console.print(f"  [green]✓[/] {CONFIG_NAME}")


def _create_status(project_dir: Path) -> None:
    if StatusStore(project_dir).initialize():
        console.print(f"  [green]✓[/] {STATUS_NAME}")
    else:
        console.print(f"  [dim]•[/] {STATUS_NAME} (kept)")


def _copy_template(project_dir: Path) -> None:
    target = project_dir / TEMPLATE_NAME
    if target.exists():
        console.print(f"  [dim]•[/] {TEMPLATE_NAME} (kept)")
        return
    shutil.copyfile(_PACKAGED_TEMPLATE, target)
    console.print(f"  [green]✓[/] {TEMPLATE_NAME}")
