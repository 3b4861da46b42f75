"""Base format handler interface for all hw document formats."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from hw.errors import RenderFailure

# Converter stderr is trimmed to its tail before it reaches the user.
_STDERR_TAIL = 20


@dataclass(frozen=True)
class RenderSettings:
    """Print/export settings handed to every handler at startup.

    Attributes:
        printer: Destination for ``lp -d``; None uses the system default.
        pdf_engine: Pandoc PDF engine used together with an HTML template.
        template: Repository template.html, if present.
    """

    printer: str | None = None
    pdf_engine: str = "weasyprint"
    template: Path | None = None


@dataclass(frozen=True)
class RenderResult:
    """Outcome of FormatHandler.print().

    Attributes:
        source: The document that was rendered.
        pdf: PDF written next to the source (``want_pdf=True`` only).
        printed: True if the document was sent to the printer.
    """

    source: Path
    pdf: Path | None = None
    printed: bool = False


class FormatHandler(ABC):
    """Abstract base for all document formats.

    Subclasses set ``format_id``, ``extension`` and ``description`` and
    implement ``default_body()`` and ``_render_pdf()``. Printing is always
    "render a PDF, then hand it to lp"; exporting keeps that PDF next to the
    source instead.

    External tools are found with ``shutil.which`` and run with list
    arguments and ``shell=False``.
    """

    format_id: str = ""
    extension: str = ""
    description: str = ""

    def __init__(self, settings: RenderSettings | None = None) -> None:
        if not self.format_id or not self.extension:
            raise TypeError(f"{type(self).__name__} must define format_id and extension")
        self.settings = settings or RenderSettings()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.format_id!r} .{self.extension}>"

    @abstractmethod
    def default_body(self, title: str, class_name: str) -> str:
        """Return the seed content for a new assignment.

        Args:
            title: Human-readable assignment title.
            class_name: Class the assignment belongs to; may be empty.
        """

    @abstractmethod
    def _render_pdf(self, source: Path, pdf: Path) -> None:
        """Convert *source* into *pdf*. Raise RenderFailure on error."""

    def filename_for(self, title: str) -> str:
        """Return the file name for a new assignment titled *title*."""
        return f"{title.replace(' ', '_')}.{self.extension}"

    def print(self, path: Path | str, want_pdf: bool = False) -> RenderResult:
        """Print *path*, or export it as ``<stem>.pdf`` when *want_pdf* is set.

        Raises:
            RenderFailure: If the source is missing, a tool is not installed,
                or a tool exits non-zero.
        """
        source = Path(path)
        if not source.is_file():
            raise RenderFailure(f"Source file not found: '{source}'")

        if want_pdf:
            pdf = source.with_suffix(".pdf")
            self._render_pdf(source, pdf)
            return RenderResult(source=source, pdf=pdf)

        with tempfile.TemporaryDirectory(prefix="hw-print-") as tmp:
            pdf = Path(tmp) / f"{source.stem}.pdf"
            self._render_pdf(source, pdf)
            self._send_to_printer(pdf)
        return RenderResult(source=source, printed=True)

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @staticmethod
    def _require_tool(name: str) -> str:
        tool = shutil.which(name)
        if not tool:
            raise RenderFailure(f"'{name}' not found on PATH.", tool=name)
        return tool

    @staticmethod
    def _run(cmd: list[str], *, tool: str, cwd: Path | None = None) -> None:
        try:
            subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                shell=False,
                cwd=cwd,
            )
        except subprocess.CalledProcessError as exc:
            stderr = "\n".join((exc.stderr or exc.stdout or "").strip().splitlines()[-_STDERR_TAIL:])
            raise RenderFailure(
                f"{tool} exited with status {exc.returncode}.", tool=tool, stderr=stderr
            ) from exc
        except OSError as exc:
            raise RenderFailure(f"Could not run {tool}: {exc}", tool=tool) from exc

    def _send_to_printer(self, pdf: Path) -> None:
        lp = self._require_tool("lp")
        cmd = [lp]
        if self.settings.printer:
            cmd += ["-d", self.settings.printer]
        cmd.append(str(pdf))
        self._run(cmd, tool="lp")
