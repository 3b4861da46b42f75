"""Assignment orchestration: add, note and print.

AssignmentService is the only component that ties the registry, the status
record, the editor and git together. Side effects of ``add`` are strictly
sequential:

  resolve handler → name file → relocate (hook) → confine to root
  → seed default body → editor (blocking) → record latest → git commit

Nothing after the editor runs unless the editor exits successfully, so a
file is never recorded as latest (or committed) before the user has edited it.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

from rich.console import Console

from hw import vcs
from hw.config import HwConfig
from hw.errors import (
    AssignmentExists,
    EditorFailure,
    InvalidTitle,
    NoLatestAssignment,
    UnsafePath,
)
from hw.formats import FormatRegistry, RenderResult, build_registry
from hw.status import StatusStore
from hw.writer import check_overwrite, confine_to_root, write_atomic

NOTE_PREFIX = "Notes on "

Committer = Callable[[Path, Path, str], bool]


class AssignmentService:
    """Create, track and print assignments inside one repository.

    Args:
        root: Repository root (directory holding hw.yaml).
        config: Parsed repository configuration.
        registry: Format registry; built from *config* when omitted.
        status: Status store; ``StatusStore(root)`` when omitted.
        committer: Called as ``committer(root, path, title)`` after a
            successful edit when ``config.use_git`` is set.
        console: Where progress messages go.
    """

    def __init__(
        self,
        root: Path,
        config: HwConfig,
        registry: FormatRegistry | None = None,
        status: StatusStore | None = None,
        committer: Committer | None = None,
        console: Console | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.config = config
        self.registry = registry if registry is not None else build_registry(config, self.root)
        self.status = status if status is not None else StatusStore(self.root)
        self.committer = committer if committer is not None else vcs.commit_assignment
        self.console = console or Console()

    # ------------------------------------------------------------------
    # add / note
    # ------------------------------------------------------------------

    def add(
        self,
        title: str,
        class_name: str | None = None,
        format_id: str | None = None,
        *,
        yes: bool = False,
    ) -> Path:
        """Create a new assignment, open it in the editor and record it.

        Args:
            title: Assignment title; spaces become underscores in the file name.
            class_name: Class name; ``config.default_class`` when None.
            format_id: Format id; ``config.default_format`` when None.
            yes: Overwrite an existing file without asking.

        Returns:
            Absolute path of the assignment file.

        Raises:
            InvalidTitle: Empty title.
            UnknownFormat: *format_id* is not registered.
            UnsafePath: The relocation hook points outside the repository.
            AssignmentExists: The file exists and overwriting was declined.
            EditorFailure: The editor could not start or exited non-zero.
        """
        title = title.strip()
        if not title:
            raise InvalidTitle(title, "title must not be empty")

        fmt = format_id or self.config.default_format
        cls = self.config.default_class if class_name is None else class_name

        handler = self.registry.resolve_by_name(fmt)
        filename = handler.filename_for(title)
        relocated = self.relocate(filename, title, cls, handler.format_id)

        try:
            path = confine_to_root(relocated, self.root)
        except ValueError as exc:
            raise UnsafePath(relocated, str(exc)) from exc

        if not check_overwrite(path, yes=yes):
            raise AssignmentExists(path)

        relative = path.relative_to(self.root)
        write_atomic(path, handler.default_body(title, cls))
        self.console.print(f"  [green]✓[/] Created {relative.as_posix()} ({handler.format_id})")

        self._edit(path)

        self.status.record_latest(relative)

        if self.config.use_git:
            self.committer(self.root, relative, title)

        return path

    def note(self, subject: str, class_name: str | None = None, *, yes: bool = False) -> Path:
        """Quick note-taking: ``add("Notes on <subject>")`` in the note format."""
        return self.add(
            NOTE_PREFIX + subject.strip(),
            class_name or "",
            self.config.note_format,
            yes=yes,
        )

    def relocate(self, filename: str, title: str, class_name: str, format_id: str) -> str:
        """Apply the ``file_directory`` hook to *filename*.

        Returns the root-relative path the file should be written to.
        """
        template = self.config.file_directory
        if not template:
            return filename
        directory = template.format(
            filename=filename,
            title=title,
            format=format_id,
            **{"class": class_name},
        ).strip()
        if not directory:
            return filename
        return (Path(directory) / filename).as_posix()

    def _edit(self, path: Path) -> None:
        editor = self.config.editor_command
        try:
            argv = shlex.split(editor)
        except ValueError as exc:
            raise EditorFailure(editor, path, f"cannot parse command: {exc}") from exc
        if not argv:
            raise EditorFailure(editor, path, "empty editor command")

        try:
            completed = subprocess.run([*argv, str(path)], cwd=self.root, check=False)
        except OSError as exc:
            raise EditorFailure(editor, path, str(exc)) from exc

        if completed.returncode != 0:
            raise EditorFailure(editor, path, f"exit status {completed.returncode}")

    # ------------------------------------------------------------------
    # print
    # ------------------------------------------------------------------

    def resolve_reference(self, file_ref: str | None, *, use_latest: bool) -> Path:
        """Turn a file reference (or the latest assignment) into a path.

        Raises:
            NoLatestAssignment: *use_latest* is set and nothing is recorded.
            CorruptStatus: status.json cannot be parsed.
        """
        if use_latest:
            latest = self.status.read_latest()
            if latest is None:
                raise NoLatestAssignment(self.status.path)
            file_ref = latest
        if not file_ref:
            raise ValueError("A file reference is required unless use_latest is set.")

        path = Path(file_ref).expanduser()
        return path if path.is_absolute() else self.root / path

    def print(
        self,
        file_ref: str | None = None,
        *,
        use_latest: bool = False,
        want_pdf: bool = False,
    ) -> RenderResult:
        """Print (or export to PDF) an assignment.

        Raises:
            NoLatestAssignment, CorruptStatus: See resolve_reference().
            UnknownFormat: The file extension is not registered.
            RenderFailure: The handler's converter or printer failed.
        """
        path = self.resolve_reference(file_ref, use_latest=use_latest)
        handler = self.registry.resolve_by_extension(path.name)

        label = path.relative_to(self.root).as_posix() if path.is_relative_to(self.root) else str(path)
        action = "Exporting" if want_pdf else "Printing"
        self.console.print(f"{action} {label} ({handler.format_id})")

        return handler.print(path, want_pdf)
