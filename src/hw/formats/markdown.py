"""Markdown format — rendered to PDF with Pandoc."""

from __future__ import annotations

from pathlib import Path

from hw.formats.base import FormatHandler


class MarkdownHandler(FormatHandler):
    """Markdown assignments (``*.markdown``).

    Rendering strategy:
    - With a repository template.html: standalone HTML through the template,
      turned into PDF by ``settings.pdf_engine`` (weasyprint by default).
    - Without one: Pandoc's default PDF route.
    """

    format_id = "markdown"
    extension = "markdown"
    description = "Markdown, rendered with Pandoc"

    def default_body(self, title: str, class_name: str) -> str:
        if class_name:
            return f"# {title}\n\n*{class_name}*\n\n"
        return f"# {title}\n\n"

    def _render_pdf(self, source: Path, pdf: Path) -> None:
        pandoc = self._require_tool("pandoc")
        cmd = [pandoc, str(source.resolve()), "--from=markdown", "-o", str(pdf.resolve())]

        template = self.settings.template
        if template is not None and template.is_file():
            cmd += [
                "--standalone",
                f"--template={template.resolve()}",
                "--to=html5",
                f"--pdf-engine={self.settings.pdf_engine}",
                f"--metadata=pagetitle:{source.stem.replace('_', ' ')}",
            ]

        # Run beside the source so relative image paths resolve.
        self._run(cmd, tool="pandoc", cwd=source.resolve().parent)
