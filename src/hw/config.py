"""hw configuration loader.

Priority (high → low):
  1. CLI flags              (handled at call site — not in this module)
  2. Environment variables  (HW_EDITOR; VISUAL / EDITOR when hw.yaml sets no editor)
  3. Per-repository hw.yaml (next to status.json)
  4. Hardcoded defaults

Unlike the defaults-only fallback of most loaders, a repository *must* have
an hw.yaml: its presence is what marks a directory as an hw repository.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import string
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CONFIG_NAME: str = "hw.yaml"

_DEFAULT_EDITOR = "vim"

_KNOWN_KEYS: frozenset[str] = frozenset(
    [
        "default_format",
        "note_format",
        "default_class",
        "editor",
        "use_git",
        "file_directory",
        "printer",
        "pdf_engine",
    ]
)

# Placeholders accepted by file_directory.
_HOOK_FIELDS: frozenset[str] = frozenset(["filename", "title", "class", "format"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when hw.yaml is missing, unparsable or holds an invalid value."""


class ConfigNotFound(ConfigError):
    """Raised when a directory has no hw.yaml at all."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class HwConfig:
    """Repository configuration, built by load_config() from hw.yaml.

    Attributes:
        default_format: Format id used by ``hw add`` without --format.
        note_format: Format id used by ``hw note``.
        default_class: Class name used by ``hw add`` without --class.
        editor: Editor command line; split with shlex before spawning.
        use_git: Commit every new assignment after editing.
        file_directory: Optional relocation hook. A directory template relative
            to the repository root, formatted with {filename}, {title},
            {class} and {format}. None keeps files in the root.
        printer: Destination passed to ``lp -d``; None uses the system default.
        pdf_engine: Pandoc PDF engine used with the HTML template.
    """

    default_format: str = "markdown"
    note_format: str = "markdown"
    default_class: str = "Class 8"
    editor: str | None = None
    use_git: bool = True
    file_directory: str | None = None
    printer: str | None = None
    pdf_engine: str = "weasyprint"

    @property
    def editor_command(self) -> str:
        """The editor to run, falling back to vim."""
        return self.editor or _DEFAULT_EDITOR


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_KEYS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _expect_str(data: dict[str, Any], key: str, source: Path, *, optional: bool = False) -> Any:
    value = data[key]
    if value is None and optional:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{key}' in '{source}' must be a non-empty string, got {value!r}."
        )
    return value.strip()


def _expect_scalar(data: dict[str, Any], key: str, source: Path) -> str:
    """Return a string for a value that may be empty but must be a plain scalar."""
    value = data[key]
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigError(f"'{key}' in '{source}' must be a string, got {value!r}.")
    return str(value).strip()


def _template_fields(template: str) -> set[str]:
    """Return every field name in *template*, including ones nested in format specs."""
    fields: set[str] = set()
    for _, name, spec, _ in string.Formatter().parse(template):
        if name is None:
            continue
        fields.add(name)
        if spec:
            fields |= _template_fields(spec)
    return fields


def _validate_hook(template: str, source: Path) -> None:
    """Raise ConfigError if *template* uses placeholders the hook cannot fill.

    Only the named placeholders are accepted: ``{}``, ``{0}``, attribute or
    index access (``{title.upper}``) and nested fields are all rejected.
    """
    try:
        fields = _template_fields(template)
    except ValueError as exc:
        raise ConfigError(f"file_directory in '{source}' is not a valid template: {exc}") from exc

    unknown = fields - _HOOK_FIELDS
    if unknown:
        raise ConfigError(
            f"file_directory in '{source}' uses unknown placeholder(s): "
            f"{', '.join('{' + f + '}' for f in sorted(unknown))}.\n"
            f"  Allowed: {', '.join('{' + f + '}' for f in sorted(_HOOK_FIELDS))}"
        )

    # Format specs and conversions are only checked by formatting once.
    sample = {field: "x" for field in _HOOK_FIELDS}
    try:
        template.format(**sample)
    except (ValueError, TypeError) as exc:
        raise ConfigError(f"file_directory in '{source}' is not a valid template: {exc}") from exc


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


def _cfg_from_dict(data: dict[str, Any], source: Path) -> HwConfig:
    """Build an *HwConfig* from a raw YAML dict."""
    cfg = HwConfig()

    for key in ("default_format", "note_format", "pdf_engine"):
        if key in data:
            setattr(cfg, key, _expect_str(data, key, source))

    if "default_class" in data:
        cfg.default_class = _expect_scalar(data, "default_class", source)

    for key in ("editor", "printer", "file_directory"):
        if key in data:
            setattr(cfg, key, _expect_str(data, key, source, optional=True))

    if "use_git" in data:
        if not isinstance(data["use_git"], bool):
            raise ConfigError(
                f"'use_git' in '{source}' must be true or false, got {data['use_git']!r}."
            )
        cfg.use_git = data["use_git"]

    if cfg.file_directory:
        _validate_hook(cfg.file_directory, source)

    return cfg


def _apply_env_overrides(cfg: HwConfig) -> HwConfig:
    """Apply editor overrides from the environment (layer 2)."""
    if editor := os.environ.get("HW_EDITOR"):
        cfg.editor = editor
    elif cfg.editor is None:
        cfg.editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or None
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(project_dir: Path | None = None) -> HwConfig:
    """Load the *HwConfig* of the repository at *project_dir*.

    Args:
        project_dir: Directory holding hw.yaml. Defaults to CWD.

    Returns:
        Parsed configuration with environment overrides applied.

    Raises:
        ConfigNotFound: If *project_dir* has no hw.yaml.
        ConfigError: If hw.yaml cannot be read or parsed, is not a mapping,
            or holds a wrongly typed value.
    """
    search_dir = project_dir if project_dir is not None else Path.cwd()
    cfg_path = search_dir / CONFIG_NAME

    if not cfg_path.is_file():
        raise ConfigNotFound(f"No {CONFIG_NAME} in '{search_dir}'.")

    try:
        raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read '{cfg_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"'{cfg_path}' is not valid YAML: {exc}") from exc

    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{cfg_path}' must contain a mapping of settings.")

    _warn_unknown_keys(raw, cfg_path)
    cfg = _cfg_from_dict(raw, cfg_path)

    return _apply_env_overrides(cfg)


def default_config_text(*, use_git: bool = True) -> str:
    """Return the commented hw.yaml written by ``hw init``."""
    return (
        "# hw repository configuration.\n"
        "\n"
        "default_format: markdown   # format for `hw add` (see `hw formats`)\n"
        "note_format: markdown      # format for `hw note`\n"
        'default_class: "Class 8"   # class used when --class is omitted\n'
        "\n"
        "# Editor command; HW_EDITOR, VISUAL or EDITOR override an unset value.\n"
        "# editor: vim\n"
        "\n"
        f"use_git: {'true' if use_git else 'false'}              # commit each new assignment\n"
        "\n"
        "# Place new files in a subdirectory of the repository.\n"
        "# Placeholders: {filename} {title} {class} {format}\n"
        '# file_directory: "{class}"\n'
        "\n"
        "# printer: my-printer       # passed to `lp -d`\n"
        "pdf_engine: weasyprint     # pandoc engine used with template.html\n"
    )
