"""Tests for the hw config loader."""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest
import yaml

from hw.config import (
    CONFIG_NAME,
    ConfigError,
    ConfigNotFound,
    HwConfig,
    default_config_text,
    load_config,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_yaml(directory: Path, data: dict) -> Path:
    path = directory / CONFIG_NAME
    path.write_text(yaml.dump(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def test_load_config_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigNotFound):
        load_config(tmp_path)


def test_config_not_found_is_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_defaults_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_yaml(tmp_path, {"default_format": "latex"})
    monkeypatch.chdir(tmp_path)
    assert load_config().default_format == "latex"


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text("", encoding="utf-8")
    cfg = load_config(tmp_path)
    assert cfg == HwConfig()
    assert cfg.default_format == "markdown"
    assert cfg.note_format == "markdown"
    assert cfg.default_class == "Class 8"
    assert cfg.use_git is True
    assert cfg.file_directory is None


def test_comment_only_file_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text("# nothing here\n", encoding="utf-8")
    assert load_config(tmp_path).pdf_engine == "weasyprint"


def test_editor_command_falls_back_to_vim() -> None:
    assert HwConfig().editor_command == "vim"
    assert HwConfig(editor="nano").editor_command == "nano"


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


def test_all_keys_loaded(tmp_path: Path) -> None:
    _write_yaml(
        tmp_path,
        {
            "default_format": "latex",
            "note_format": "markdown",
            "default_class": "Physics",
            "editor": "code --wait",
            "use_git": False,
            "file_directory": "{class}/{format}",
            "printer": "office",
            "pdf_engine": "wkhtmltopdf",
        },
    )
    cfg = load_config(tmp_path)
    assert cfg.default_format == "latex"
    assert cfg.default_class == "Physics"
    assert cfg.editor == "code --wait"
    assert cfg.use_git is False
    assert cfg.file_directory == "{class}/{format}"
    assert cfg.printer == "office"
    assert cfg.pdf_engine == "wkhtmltopdf"


def test_default_class_may_be_empty(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text("default_class:\n", encoding="utf-8")
    assert load_config(tmp_path).default_class == ""


def test_default_class_number_becomes_string(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text("default_class: 101\n", encoding="utf-8")
    assert load_config(tmp_path).default_class == "101"


@pytest.mark.parametrize("value", [["Math", "Physics"], {"name": "Math"}, True])
def test_default_class_must_be_scalar(tmp_path: Path, value: object) -> None:
    _write_yaml(tmp_path, {"default_class": value})
    with pytest.raises(ConfigError, match="default_class"):
        load_config(tmp_path)


def test_optional_keys_accept_null(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text("printer: null\nfile_directory: null\n", encoding="utf-8")
    cfg = load_config(tmp_path)
    assert cfg.printer is None
    assert cfg.file_directory is None


# ---------------------------------------------------------------------------
# Invalid files
# ---------------------------------------------------------------------------


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text("default_format: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="not valid YAML"):
        load_config(tmp_path)


def test_non_mapping_raises(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_use_git_must_be_bool(tmp_path: Path) -> None:
    _write_yaml(tmp_path, {"use_git": "yes please"})
    with pytest.raises(ConfigError, match="use_git"):
        load_config(tmp_path)


def test_default_format_must_be_string(tmp_path: Path) -> None:
    _write_yaml(tmp_path, {"default_format": 3})
    with pytest.raises(ConfigError, match="default_format"):
        load_config(tmp_path)


def test_file_directory_unknown_placeholder(tmp_path: Path) -> None:
    _write_yaml(tmp_path, {"file_directory": "{semester}/{class}"})
    with pytest.raises(ConfigError, match="semester"):
        load_config(tmp_path)


def test_file_directory_malformed_template(tmp_path: Path) -> None:
    _write_yaml(tmp_path, {"file_directory": "{class"})
    with pytest.raises(ConfigError, match="not a valid template"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "template",
    ["{}", "{0}", "{class}/{}", "{title.upper}", "{title[0]}", "{title:{width}}"],
)
def test_file_directory_rejects_positional_and_nested_fields(tmp_path: Path, template: str) -> None:
    _write_yaml(tmp_path, {"file_directory": template})
    with pytest.raises(ConfigError, match="unknown placeholder"):
        load_config(tmp_path)


@pytest.mark.parametrize("template", ["{title:d}", "{class!z}"])
def test_file_directory_rejects_bad_format_spec(tmp_path: Path, template: str) -> None:
    _write_yaml(tmp_path, {"file_directory": template})
    with pytest.raises(ConfigError, match="not a valid template"):
        load_config(tmp_path)


def test_file_directory_accepts_format_spec(tmp_path: Path) -> None:
    _write_yaml(tmp_path, {"file_directory": "{class:.3}/{format}"})
    assert load_config(tmp_path).file_directory == "{class:.3}/{format}"


def test_malformed_template_error_is_chained(tmp_path: Path) -> None:
    _write_yaml(tmp_path, {"file_directory": "{class"})
    with pytest.raises(ConfigError) as info:
        load_config(tmp_path)
    assert isinstance(info.value.__cause__, ValueError)


def test_unknown_key_warns(tmp_path: Path) -> None:
    _write_yaml(tmp_path, {"defaultFormat": "latex"})
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        cfg = load_config(tmp_path)
    assert any("defaultFormat" in str(w.message) for w in caught)
    assert cfg.default_format == "markdown"


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def test_hw_editor_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_yaml(tmp_path, {"editor": "nano"})
    monkeypatch.setenv("HW_EDITOR", "emacs")
    assert load_config(tmp_path).editor == "emacs"


def test_editor_env_used_when_file_silent(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_yaml(tmp_path, {"default_format": "markdown"})
    monkeypatch.setenv("EDITOR", "nano")
    assert load_config(tmp_path).editor_command == "nano"


def test_visual_preferred_over_editor(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_yaml(tmp_path, {})
    monkeypatch.setenv("VISUAL", "gvim -f")
    monkeypatch.setenv("EDITOR", "nano")
    assert load_config(tmp_path).editor_command == "gvim -f"


def test_editor_env_does_not_override_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_yaml(tmp_path, {"editor": "nano"})
    monkeypatch.setenv("EDITOR", "ed")
    assert load_config(tmp_path).editor == "nano"


# ---------------------------------------------------------------------------
# default_config_text
# ---------------------------------------------------------------------------


def test_default_config_text_round_trips(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text(default_config_text(), encoding="utf-8")
    cfg = load_config(tmp_path)
    assert cfg.default_format == "markdown"
    assert cfg.default_class == "Class 8"
    assert cfg.use_git is True


def test_default_config_text_without_git(tmp_path: Path) -> None:
    (tmp_path / CONFIG_NAME).write_text(default_config_text(use_git=False), encoding="utf-8")
    assert load_config(tmp_path).use_git is False
