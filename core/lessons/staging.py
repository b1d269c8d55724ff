"""
Staging area for unsaved drafts.

Holds one serialized draft per slot so a new lesson survives a reload before
its first save. Read once when a session starts without a lesson id; cleared
on save or discard.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Data directory - can be overridden via DATA_DIR environment variable
_PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.environ.get("DATA_DIR", _PROJECT_ROOT / "data"))

DEFAULT_SLOT = "currentLesson"


class StagingArea(Protocol):
    def read(self) -> dict[str, Any] | None: ...

    def write(self, record: dict[str, Any]) -> None: ...

    def clear(self) -> None: ...


class MemoryStaging:
    """Staging slot held in process memory."""

    def __init__(self):
        self._record: dict[str, Any] | None = None

    def read(self) -> dict[str, Any] | None:
        return json.loads(self._record) if self._record is not None else None

    def write(self, record: dict[str, Any]) -> None:
        # Stored serialized so later mutation of the draft can't leak in
        self._record = json.dumps(record)

    def clear(self) -> None:
        self._record = None


class JsonFileStaging:
    """Staging slot stored as a JSON file under DATA_DIR/staging/."""

    def __init__(self, slot: str = DEFAULT_SLOT, data_dir: Path | None = None):
        if not re.fullmatch(r"[A-Za-z0-9_-]+", slot):
            raise ValueError(f"Invalid staging slot name: {slot!r}")
        self.slot = slot
        self.path = Path(data_dir or DATA_DIR) / "staging" / f"{slot}.json"

    def read(self) -> dict[str, Any] | None:
        """Load the staged record, or None if nothing usable is staged."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable staging file %s: %s", self.path, e)
            return None

    def write(self, record: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(record, f, indent=2)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
