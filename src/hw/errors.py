"""hw exception hierarchy.

Core modules raise these; the CLI layer (hw.cli.errors.report_errors) turns
each one into a single actionable message and exits with ``exit_code``:

  0  success
  1  configuration / repository / status / editor failure
  2  unknown format
  3  render or print failure
"""

from __future__ import annotations

from pathlib import Path


class HwError(Exception):
    """Base class for every failure hw reports to the user."""

    exit_code: int = 1


# ---------------------------------------------------------------------------
# Repository location
# ---------------------------------------------------------------------------


class ConfigurationMissing(HwError):
    """No usable repository: neither the current directory nor the fallback."""

    # Set when the starting directory has an hw.yaml that failed to load.
    local_reason: str = ""

    def __init__(self, directory: Path | str, reason: str = "") -> None:
        self.directory = Path(directory)
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"No hw configuration in '{self.directory}'{detail}")


class NoFallback(ConfigurationMissing):
    """The global pointer file is absent, unreadable or empty."""

    def __init__(self, pointer: Path | str, reason: str = "") -> None:
        self.pointer = Path(pointer)
        super().__init__(self.pointer, reason or "no fallback repository recorded")


class InvalidFallback(ConfigurationMissing):
    """The global pointer names a directory that cannot be entered."""

    def __init__(self, target: Path | str, pointer: Path | str, reason: str = "") -> None:
        self.pointer = Path(pointer)
        super().__init__(target, reason or "fallback directory does not exist")


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------


class UnknownFormat(HwError):
    """No handler is registered under a format name or file extension."""

    exit_code = 2

    def __init__(self, key: str, known: list[str], *, by_extension: bool = False) -> None:
        self.key = key
        self.known = known
        self.by_extension = by_extension
        kind = "extension" if by_extension else "format"
        super().__init__(f"Unknown {kind} '{key}'")


class FormatConflict(HwError, ValueError):
    """Two handlers were registered under the same id or extension."""

    exit_code = 2


class RenderFailure(HwError):
    """An external converter or the print spooler failed."""

    exit_code = 3

    def __init__(self, message: str, *, tool: str | None = None, stderr: str = "") -> None:
        self.tool = tool
        self.stderr = stderr
        super().__init__(message)


# ---------------------------------------------------------------------------
# Status record
# ---------------------------------------------------------------------------


class StatusError(HwError):
    """Base class for status.json problems."""


class CorruptStatus(StatusError):
    """status.json exists but is not a readable JSON object."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Status record '{path}' is corrupt: {reason}")


class NoLatestAssignment(StatusError):
    """print --latest was requested but nothing has been recorded yet."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"No latest assignment recorded in '{path}'")


# ---------------------------------------------------------------------------
# Assignment creation
# ---------------------------------------------------------------------------


class EditorFailure(HwError):
    """The editor could not be started or exited with an error."""

    def __init__(self, editor: str, path: Path, reason: str) -> None:
        self.editor = editor
        self.path = path
        self.reason = reason
        super().__init__(f"Editor '{editor}' failed for '{path}': {reason}")


class AssignmentExists(HwError):
    """The target file exists and the user declined to overwrite it."""

    # Declining is a cancellation, not a failure.
    exit_code = 0

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"'{path}' already exists")


class InvalidTitle(HwError):
    """The assignment title is empty or yields an unusable file name."""

    def __init__(self, title: str, reason: str) -> None:
        self.title = title
        self.reason = reason
        super().__init__(f"Invalid title {title!r}: {reason}")


class UnsafePath(HwError):
    """A computed assignment path falls outside the repository root."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(reason)
