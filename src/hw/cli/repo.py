"""Shared command setup: find the repository and build the service."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from hw.locator import FallbackRoot, LocalRoot, locate
from hw.service import AssignmentService


def open_repository(console: Console) -> LocalRoot | FallbackRoot:
    """Locate the repository, entering the fallback root if needed.

    Raises:
        ConfigurationMissing: No repository found (caller reports it).
    """
    located = locate()
    if isinstance(located, FallbackRoot):
        if located.local_reason:
            console.print(
                f"[yellow]⚠[/]  Ignoring invalid hw.yaml here: {escape(located.local_reason)}"
            )
        console.print(
            f"[dim]Using repository {escape(str(located.path))} "
            f"(from {escape(str(located.pointer))})[/]"
        )
    return located


def open_service(console: Console) -> AssignmentService:
    """Locate the repository and return a service bound to it."""
    located = open_repository(console)
    return AssignmentService(located.path, located.config, console=console)
