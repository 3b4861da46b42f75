"""File writing helpers shared by the status record, pointer file and new assignments.

Responsibilities:
  1. Confine assignment paths to the repository root.
     Path traversal (../../etc/passwd) from a relocation hook → hard fail.
  2. Overwrite protection: if the file exists, prompt the user (--yes skips).
  3. Write files atomically (temp file → rename), so a crash never leaves a
     half-written status.json behind.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import typer

_NEW_FILE_MODE = 0o644


# ------------------------------------------------------------------
# Path validation (path traversal prevention)
# ------------------------------------------------------------------


def confine_to_root(candidate: str | Path, root: Path) -> Path:
    """Resolve *candidate* against *root* and refuse anything outside it.

    Unlike user-typed output paths, assignment paths come from a configured
    hook, so absolute paths are held to the same rule as relative ones.

    Args:
        candidate: Relative (to *root*) or absolute path.
        root: Repository root.

    Returns:
        Resolved absolute Path inside *root*.

    Raises:
        ValueError: If the path resolves outside *root*.
    """
    root = root.resolve()
    resolved = (root / Path(candidate)).resolve()

    try:
        resolved.relative_to(root)
    except ValueError:
        raise ValueError(
            f"Path '{candidate}' resolves outside the repository "
            f"('{root}'). Path traversal is not permitted."
        )

    if resolved == root:
        raise ValueError(f"Path '{candidate}' names the repository root, not a file.")

    return resolved


# ------------------------------------------------------------------
# Overwrite guard
# ------------------------------------------------------------------


def check_overwrite(path: Path, yes: bool) -> bool:
    """Return True if we should proceed with writing, False if user declines.

    If *yes* is True, skip the prompt and return True.
    If the file does not exist, return True.
    Otherwise, ask the user.
    """
    if yes or not path.exists():
        return True

    confirmed = typer.confirm(f"  File exists: {path.name}\n  Overwrite?", default=False)
    return confirmed


# ------------------------------------------------------------------
# Atomic write
# ------------------------------------------------------------------


def write_atomic(path: Path, content: str) -> None:
    """Write *content* to *path* atomically (temp → rename).

    Creates parent directories if needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Write to a temp file in the same directory, then rename
    dir_ = path.parent
    mode = path.stat().st_mode & 0o777 if path.exists() else _NEW_FILE_MODE
    fd, tmp_path = tempfile.mkstemp(dir=dir_, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0o600; keep the mode an ordinary write would give.
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on error
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
