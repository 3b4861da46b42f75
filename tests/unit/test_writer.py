"""Tests for the shared file writing helpers."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from hw.writer import check_overwrite, confine_to_root, write_atomic


# ---------------------------------------------------------------------------
# confine_to_root
# ---------------------------------------------------------------------------


def test_confine_relative_path(tmp_path: Path) -> None:
    assert confine_to_root("Essay.markdown", tmp_path) == tmp_path.resolve() / "Essay.markdown"


def test_confine_nested_path(tmp_path: Path) -> None:
    result = confine_to_root("Physics/Lab.tex", tmp_path)
    assert result == tmp_path.resolve() / "Physics" / "Lab.tex"


def test_confine_rejects_parent_traversal(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Path traversal is not permitted"):
        confine_to_root("../../etc/passwd", tmp_path)


def test_confine_rejects_absolute_outside(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="outside the repository"):
        confine_to_root("/etc/passwd", tmp_path / "repo")


def test_confine_allows_absolute_inside(tmp_path: Path) -> None:
    inside = tmp_path.resolve() / "a.tex"
    assert confine_to_root(inside, tmp_path) == inside


def test_confine_rejects_root_itself(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="repository root"):
        confine_to_root(".", tmp_path)


def test_confine_allows_dotdot_that_stays_inside(tmp_path: Path) -> None:
    assert confine_to_root("a/../b.tex", tmp_path) == tmp_path.resolve() / "b.tex"


# ---------------------------------------------------------------------------
# check_overwrite
# ---------------------------------------------------------------------------


def test_check_overwrite_new_file(tmp_path: Path) -> None:
    assert check_overwrite(tmp_path / "new.tex", yes=False) is True


def test_check_overwrite_yes_skips_prompt(tmp_path: Path) -> None:
    existing = tmp_path / "a.tex"
    existing.write_text("x")
    with patch("hw.writer.typer.confirm") as confirm:
        assert check_overwrite(existing, yes=True) is True
    confirm.assert_not_called()


def test_check_overwrite_prompts_and_declines(tmp_path: Path) -> None:
    existing = tmp_path / "a.tex"
    existing.write_text("x")
    with patch("hw.writer.typer.confirm", return_value=False) as confirm:
        assert check_overwrite(existing, yes=False) is False
    confirm.assert_called_once()


def test_check_overwrite_prompts_and_accepts(tmp_path: Path) -> None:
    existing = tmp_path / "a.tex"
    existing.write_text("x")
    with patch("hw.writer.typer.confirm", return_value=True):
        assert check_overwrite(existing, yes=False) is True


# ---------------------------------------------------------------------------
# write_atomic
# ---------------------------------------------------------------------------


def test_write_atomic_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "file.txt"
    write_atomic(target, "hello")
    assert target.read_text(encoding="utf-8") == "hello"


def test_write_atomic_replaces_content(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("old")
    write_atomic(target, "new")
    assert target.read_text(encoding="utf-8") == "new"


def test_write_atomic_leaves_no_temp_files(tmp_path: Path) -> None:
    write_atomic(tmp_path / "file.txt", "content")
    assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


def test_write_atomic_new_file_mode(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    write_atomic(target, "content")
    assert stat.S_IMODE(target.stat().st_mode) == 0o644


def test_write_atomic_keeps_existing_mode(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("old")
    os.chmod(target, 0o600)
    write_atomic(target, "new")
    assert stat.S_IMODE(target.stat().st_mode) == 0o600


def test_write_atomic_cleans_up_on_failure(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("original")
    with patch("hw.writer.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError, match="disk full"):
            write_atomic(target, "new")
    assert target.read_text() == "original"
    assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]
