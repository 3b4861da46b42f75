"""LaTeX format — compiled with pdflatex."""

from __future__ import annotations

import re
import shutil
import tempfile
from pathlib import Path

from hw.errors import RenderFailure
from hw.formats.base import FormatHandler

_SPECIALS: dict[str, str] = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
_SPECIALS_RE = re.compile("|".join(re.escape(c) for c in _SPECIALS))


def escape_latex(text: str) -> str:
    """Escape LaTeX special characters in plain *text*."""
    return _SPECIALS_RE.sub(lambda m: _SPECIALS[m.group()], text)


class LatexHandler(FormatHandler):
    """LaTeX assignments (``*.tex``).

    pdflatex runs in a scratch directory so .aux/.log files never land in the
    repository; only the finished PDF is moved to its destination.
    """

    format_id = "latex"
    extension = "tex"
    description = "LaTeX article, compiled with pdflatex"

    def default_body(self, title: str, class_name: str) -> str:
        return (
            "\\documentclass{article}\n"
            "\n"
            f"\\title{{{escape_latex(title)}}}\n"
            f"\\author{{{escape_latex(class_name)}}}\n"
            "\n"
            "\\begin{document}\n"
            "\\maketitle\n"
            "\n"
            "\n"
            "\\end{document}\n"
        )

    def _render_pdf(self, source: Path, pdf: Path) -> None:
        pdflatex = self._require_tool("pdflatex")
        source = source.resolve()

        with tempfile.TemporaryDirectory(prefix="hw-latex-") as tmp:
            cmd = [
                pdflatex,
                "-interaction=nonstopmode",
                "-halt-on-error",
                f"-output-directory={tmp}",
                f"-jobname={source.stem}",
                str(source),
            ]
            # Run beside the source so \input and \includegraphics resolve.
            self._run(cmd, tool="pdflatex", cwd=source.parent)

            built = Path(tmp) / f"{source.stem}.pdf"
            if not built.is_file():
                raise RenderFailure("pdflatex finished without producing a PDF.", tool="pdflatex")
            pdf.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(built), str(pdf))
