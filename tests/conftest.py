"""Shared pytest fixtures."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

_REPO_CONFIG = (
    "default_format: markdown\n"
    "note_format: markdown\n"
    'default_class: "Class 8"\n'
    "editor: fake-editor\n"
    "use_git: false\n"
)


@pytest.fixture(autouse=True)
def pointer_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect ~/.hw_default into tmp_path for every test."""
    path = tmp_path / "home" / ".hw_default"
    monkeypatch.setattr("hw.locator._POINTER_PATH", path)
    return path


@pytest.fixture(autouse=True)
def _clean_editor_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("HW_EDITOR", "VISUAL", "EDITOR"):
        monkeypatch.delenv(var, raising=False)


def make_repo(root: Path, config: str = _REPO_CONFIG) -> Path:
    """Create a minimal hw repository at *root*."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "hw.yaml").write_text(config, encoding="utf-8")
    (root / "status.json").write_text("{}\n", encoding="utf-8")
    return root


@pytest.fixture
def repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An initialized repository that is also the working directory."""
    root = make_repo(tmp_path / "homework")
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def editor_ok():
    """Editor subprocess that exits 0 without touching the file."""
    with patch(
        "hw.service.subprocess.run",
        return_value=subprocess.CompletedProcess(args=[], returncode=0),
    ) as run:
        yield run
