"""Git integration — repository init and per-assignment commits.

Git is a convenience, never a gate: every failure (git missing, not a
repository, nothing to commit) is reported as a warning and the caller
carries on. All calls use list arguments and shell=False, so titles with
quotes or shell metacharacters cannot break out of the commit message.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from rich.console import Console

console = Console()


def commit_message(title: str) -> str:
    """Return the commit message for *title* (double quotes stripped)."""
    return title.replace('"', "")


def _git(root: Path, *args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", "-C", str(root), *args],
        check=True,
        capture_output=True,
        text=True,
        shell=False,
    )


def _describe(exc: Exception) -> str:
    if isinstance(exc, subprocess.CalledProcessError):
        detail = (exc.stderr or exc.stdout or "").strip().splitlines()
        return detail[-1] if detail else f"exit status {exc.returncode}"
    return str(exc)


def init_repository(root: Path) -> bool:
    """Run ``git init`` in *root*. Returns False (with a warning) on failure."""
    try:
        _git(root, "init")
    except (subprocess.CalledProcessError, FileNotFoundError) as exc:
        console.print(f"  [yellow]⚠[/] git init failed: {_describe(exc)}. Continuing without git.")
        return False
    return True


def commit_assignment(root: Path, path: Path, title: str) -> bool:
    """Stage *path* and commit it with a message derived from *title*.

    Returns:
        True if the commit was created, False if git failed (warning shown).
    """
    target = Path(path)
    if target.is_absolute():
        try:
            target = target.relative_to(Path(root).resolve())
        except ValueError:
            pass

    try:
        _git(root, "add", "--", str(target))
        _git(root, "commit", "-m", commit_message(title), "--", str(target))
    except (subprocess.CalledProcessError, FileNotFoundError) as exc:
        console.print(
            f"  [yellow]⚠[/] git commit failed: {_describe(exc)}. File saved, not committed."
        )
        return False

    console.print(f"  [green]✓[/] git: committed {target.as_posix()}")
    return True
