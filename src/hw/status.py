"""Persisted status record (status.json) at the repository root.

The record is a flat JSON object. hw owns one key, ``latest_assignment``:
the root-relative path of the file most recently created by ``hw add`` or
``hw note``. Other keys are carried through untouched on every write.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from hw.errors import CorruptStatus
from hw.writer import write_atomic

STATUS_NAME: str = "status.json"
LATEST_KEY: str = "latest_assignment"


class StatusStore:
    """Read/modify/write access to ``<root>/status.json``.

    There is no locking: two hw processes writing the same record race and
    the last writer wins. Writes are atomic, so readers never see a partial
    record.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @property
    def path(self) -> Path:
        return self.root / STATUS_NAME

    def initialize(self) -> bool:
        """Create an empty record if none exists. Returns True if created."""
        if self.path.exists():
            return False
        self._write({})
        return True

    def read_latest(self) -> str | None:
        """Return the latest assignment path, or None if none is recorded.

        Raises:
            CorruptStatus: If status.json exists but cannot be read or is not
                a JSON object.
        """
        latest = self._read().get(LATEST_KEY)
        if latest is None or latest == "":
            return None
        if not isinstance(latest, str):
            raise CorruptStatus(self.path, f"'{LATEST_KEY}' must be a string, got {latest!r}")
        return latest

    def record_latest(self, path: str | Path) -> None:
        """Overwrite the latest assignment path.

        A missing record is recreated. A corrupt one is not silently replaced:
        CorruptStatus propagates so the user can inspect the file.
        """
        data = self._read()
        data[LATEST_KEY] = Path(path).as_posix()
        self._write(data)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CorruptStatus(self.path, str(exc)) from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptStatus(self.path, f"invalid JSON ({exc.msg})") from exc
        if not isinstance(data, dict):
            raise CorruptStatus(self.path, "expected a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        write_atomic(self.path, json.dumps(data, indent=2, sort_keys=True) + "\n")
