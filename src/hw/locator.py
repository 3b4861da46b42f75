"""Repository discovery: current directory first, then the global pointer.

hw can be run from anywhere. ``hw init`` records the repository it created in
a per-user pointer file (``~/.hw_default``); when the current directory is
not an hw repository, the pointer names the one to use instead.

Resolution order (never reordered, never short-circuited):
  1. hw.yaml in the starting directory loads   → LocalRoot
  2. otherwise, for ``hw init``                → NoRoot (nothing to find yet)
  3. read the pointer file                     → NoFallback if absent/empty
  4. pointer target must be a directory        → InvalidFallback otherwise
  5. hw.yaml in the target loads               → FallbackRoot
                                                 else ConfigurationMissing

resolve_root() only inspects; locate() additionally switches the working
directory to a fallback root, so relative paths in later steps refer to it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from hw.config import CONFIG_NAME, ConfigError, ConfigNotFound, HwConfig, load_config
from hw.errors import ConfigurationMissing, InvalidFallback, NoFallback
from hw.writer import write_atomic

_POINTER_PATH: Path = Path.home() / ".hw_default"


# ---------------------------------------------------------------------------
# Resolution results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LocalRoot:
    """The starting directory is itself a repository."""

    path: Path
    config: HwConfig


@dataclass(frozen=True)
class FallbackRoot:
    """The repository was found through the global pointer file.

    ``local_reason`` holds the load error of an hw.yaml in the starting
    directory that was skipped in favour of the pointer, if any.
    """

    path: Path
    config: HwConfig
    pointer: Path
    local_reason: str = ""


@dataclass(frozen=True)
class NoRoot:
    """No repository, and none is required (``hw init``)."""

    path: Path


@dataclass(frozen=True)
class LocateFailure:
    error: ConfigurationMissing


Resolution = LocalRoot | FallbackRoot | NoRoot | LocateFailure


# ---------------------------------------------------------------------------
# Pointer file
# ---------------------------------------------------------------------------


def pointer_location(pointer_path: Path | None = None) -> Path:
    return pointer_path if pointer_path is not None else _POINTER_PATH


def read_pointer(pointer_path: Path | None = None) -> Path:
    """Return the repository recorded in the pointer file.

    Raises:
        NoFallback: If the pointer file is missing, unreadable or empty.
    """
    pointer = pointer_location(pointer_path)
    try:
        text = pointer.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        raise NoFallback(pointer, f"'{pointer}' does not exist")
    except (OSError, UnicodeDecodeError) as exc:
        raise NoFallback(pointer, f"cannot read '{pointer}': {exc}")
    if not text:
        raise NoFallback(pointer, f"'{pointer}' is empty")
    return Path(text).expanduser()


def write_pointer(root: Path, pointer_path: Path | None = None) -> Path:
    """Record *root* as the fallback repository. Returns the pointer path."""
    pointer = pointer_location(pointer_path)
    write_atomic(pointer, f"{Path(root).resolve()}\n")
    return pointer


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _try_config(directory: Path) -> tuple[HwConfig | None, str]:
    try:
        return load_config(directory), ""
    except ConfigNotFound:
        return None, f"no {CONFIG_NAME}"
    except ConfigError as exc:
        return None, str(exc)


def _fail(error: ConfigurationMissing, local_reason: str) -> LocateFailure:
    error.local_reason = local_reason
    return LocateFailure(error)


def resolve_root(
    initial_dir: Path,
    *,
    for_init: bool = False,
    pointer_path: Path | None = None,
) -> Resolution:
    """Work out which repository a command should operate on.

    Pure: reads files but never changes the working directory.

    Args:
        initial_dir: Directory the command was started from.
        for_init: True for ``hw init``, which needs no existing repository.
        pointer_path: Override the global pointer location (for testing).

    Returns:
        LocalRoot, FallbackRoot, NoRoot or LocateFailure.
    """
    initial_dir = Path(initial_dir)

    config, reason = _try_config(initial_dir)
    if config is not None:
        return LocalRoot(path=initial_dir, config=config)
    # A present but broken hw.yaml is reported alongside any later failure.
    local_reason = reason if (initial_dir / CONFIG_NAME).exists() else ""

    if for_init:
        return NoRoot(path=initial_dir)

    pointer = pointer_location(pointer_path)
    try:
        target = read_pointer(pointer)
    except NoFallback as exc:
        return _fail(exc, local_reason)

    if not target.is_dir():
        return _fail(InvalidFallback(target, pointer), local_reason)

    config, reason = _try_config(target)
    if config is None:
        return _fail(ConfigurationMissing(target, reason), local_reason)

    return FallbackRoot(path=target, config=config, pointer=pointer, local_reason=local_reason)


def locate(
    initial_dir: Path | None = None,
    *,
    for_init: bool = False,
    pointer_path: Path | None = None,
) -> LocalRoot | FallbackRoot | NoRoot:
    """Resolve the repository and enter it.

    Raises:
        NoFallback, InvalidFallback, ConfigurationMissing: When no repository
            can be found. Nothing has been changed in that case.
    """
    start = Path(initial_dir) if initial_dir is not None else Path.cwd()
    result = resolve_root(start, for_init=for_init, pointer_path=pointer_path)

    if isinstance(result, LocateFailure):
        raise result.error

    if isinstance(result, FallbackRoot):
        try:
            os.chdir(result.path)
        except OSError as exc:
            raise InvalidFallback(result.path, result.pointer, f"cannot enter directory: {exc}")

    return result
