"""Format registry — maps format ids and file extensions to handlers.

The set of formats is fixed at startup: build_registry() instantiates every
built-in handler with the repository's render settings. Nothing is imported
by name at runtime.

Usage:
    registry = build_registry(cfg, root)
    handler = registry.resolve_by_name("markdown")
    handler = registry.resolve_by_extension("Essay_One.markdown")
"""

from __future__ import annotations

from pathlib import Path

from hw.config import HwConfig
from hw.errors import FormatConflict, UnknownFormat
from hw.formats.base import FormatHandler, RenderResult, RenderSettings
from hw.formats.latex import LatexHandler
from hw.formats.markdown import MarkdownHandler

TEMPLATE_NAME: str = "template.html"

BUILTIN_HANDLERS: tuple[type[FormatHandler], ...] = (
    MarkdownHandler,
    LatexHandler,
)


def extension_of(filename: str | Path) -> str:
    """Return the text after the last '.' of the file name, or ''.

    Directory components are ignored, so ``notes.v2/essay`` has no extension.
    """
    name = Path(filename).name
    _, dot, ext = name.rpartition(".")
    return ext if dot else ""


class FormatRegistry:
    """Resolves format handlers by id or by file extension."""

    def __init__(self) -> None:
        self._by_id: dict[str, FormatHandler] = {}
        self._by_extension: dict[str, FormatHandler] = {}

    def register(self, handler: FormatHandler) -> None:
        """Register *handler*.

        Raises:
            FormatConflict: If its id or extension is already taken.
        """
        if handler.format_id in self._by_id:
            raise FormatConflict(f"Format '{handler.format_id}' is already registered.")
        owner = self._by_extension.get(handler.extension)
        if owner is not None:
            raise FormatConflict(
                f"Extension '.{handler.extension}' of format '{handler.format_id}' "
                f"is already claimed by format '{owner.format_id}'."
            )
        self._by_id[handler.format_id] = handler
        self._by_extension[handler.extension] = handler

    def resolve_by_name(self, format_id: str) -> FormatHandler:
        """Look up a handler by format id.

        Raises:
            UnknownFormat: If no handler is registered under *format_id*.
        """
        handler = self._by_id.get(format_id)
        if handler is None:
            raise UnknownFormat(format_id, self.format_ids())
        return handler

    def resolve_by_extension(self, filename: str | Path) -> FormatHandler:
        """Infer the handler from the extension of *filename*.

        Raises:
            UnknownFormat: If the name has no extension or an unregistered one.
        """
        ext = extension_of(filename)
        handler = self._by_extension.get(ext) if ext else None
        if handler is None:
            raise UnknownFormat(ext, self.extensions(), by_extension=True)
        return handler

    def list_formats(self) -> list[FormatHandler]:
        """Return all handlers in registration order."""
        return list(self._by_id.values())

    def format_ids(self) -> list[str]:
        return list(self._by_id)

    def extensions(self) -> list[str]:
        return list(self._by_extension)

    def __contains__(self, format_id: object) -> bool:
        return format_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)


def render_settings(cfg: HwConfig, root: Path | None = None) -> RenderSettings:
    """Build handler settings from *cfg* and the repository template."""
    template = None
    if root is not None and (root / TEMPLATE_NAME).is_file():
        template = root / TEMPLATE_NAME
    return RenderSettings(printer=cfg.printer, pdf_engine=cfg.pdf_engine, template=template)


def build_registry(cfg: HwConfig | None = None, root: Path | None = None) -> FormatRegistry:
    """Create the startup registry holding every built-in format."""
    settings = render_settings(cfg or HwConfig(), root)
    registry = FormatRegistry()
    for handler_cls in BUILTIN_HANDLERS:
        registry.register(handler_cls(settings))
    return registry


__all__ = [
    "BUILTIN_HANDLERS",
    "FormatHandler",
    "FormatRegistry",
    "RenderResult",
    "RenderSettings",
    "build_registry",
    "extension_of",
    "render_settings",
]
