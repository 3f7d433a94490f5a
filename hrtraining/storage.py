"""
Local persistence for courses and settings.

Two independent key-value slots hold the application state:

    <data_dir>/hr_training_data.json      the full course collection
    <data_dir>/hr_training_settings.json  the settings record

Each slot is a single global value that is overwritten as a whole.
The stores only talk to a slot through the small read/write port below,
so tests can swap the files for an in-memory fake.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol

from hrtraining.model import Course, decode_collection, encode_collection
from hrtraining.seed import seed_courses

logger = logging.getLogger(__name__)

DATA_FILENAME = "hr_training_data.json"
SETTINGS_FILENAME = "hr_training_settings.json"


class StorageDecodeError(ValueError):
    """The local course slot holds something that is not a course collection."""


def default_data_dir() -> Path:
    """
    Return the directory that holds the two slot files.

    HRTRAINING_DATA_DIR overrides the package-local data/ folder.
    """
    env = os.environ.get("HRTRAINING_DATA_DIR", "").strip()
    if env:
        return Path(env)
    return Path(__file__).resolve().parent / "data"


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


class KeyValueSlot(Protocol):
    def read(self) -> Optional[str]: ...

    def write(self, text: str) -> None: ...

    def backup(self) -> None: ...


class JsonFileSlot:
    """
    A slot backed by one file.

    Writes go to a temporary file next to the target which then replaces
    it, so a reader never sees a half-written file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> Optional[str]:
        # first run: nothing written yet
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def backup(self) -> None:
        """Copy the current file to <name>.corrupt, replacing an older copy."""
        if self.path.exists():
            shutil.copyfile(self.path, self.path.with_name(self.path.name + ".corrupt"))

    def __repr__(self) -> str:
        return f"JsonFileSlot({str(self.path)!r})"


class MemorySlot:
    """In-memory slot, used by tests."""

    def __init__(self, initial: Optional[str] = None) -> None:
        self.value = initial
        self.writes = 0
        self.backup_value: Optional[str] = None

    def read(self) -> Optional[str]:
        return self.value

    def write(self, text: str) -> None:
        self.value = text
        self.writes += 1

    def backup(self) -> None:
        self.backup_value = self.value


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass
class Settings:
    """
    Application settings.

    remote_url is the spreadsheet webhook used as a remote mirror;
    an empty string disables remote sync.
    """

    remote_url: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        url = data.get("googleScriptUrl", "")
        return cls(remote_url=url if isinstance(url, str) else "")

    def to_dict(self) -> dict:
        return {"googleScriptUrl": self.remote_url}


class SettingsStore:
    def __init__(self, slot: KeyValueSlot) -> None:
        self.slot = slot

    def get(self) -> Settings:
        """
        Return the persisted settings, or defaults if there are none.

        A missing or unreadable settings file is not an error: the
        application simply runs with remote sync disabled.
        """
        try:
            text = self.slot.read()
            if not text:
                return Settings()
            data = json.loads(text)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read settings from %r (%s), using defaults", self.slot, exc)
            return Settings()
        if not isinstance(data, dict):
            logger.warning("Settings slot %r does not hold an object, using defaults", self.slot)
            return Settings()
        return Settings.from_dict(data)

    def put(self, settings: Settings) -> None:
        self.slot.write(json.dumps(settings.to_dict(), indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


class RecordStore:
    def __init__(self, slot: KeyValueSlot) -> None:
        self.slot = slot

    def read_raw(self) -> Optional[List[Course]]:
        """
        Return the persisted collection, or None if it was never written.

        Raises StorageDecodeError when the slot content cannot be decoded.
        """
        try:
            text = self.slot.read()
            if text is None:
                return None
            return decode_collection(json.loads(text))
        except ValueError as exc:
            # covers JSONDecodeError and UnicodeDecodeError
            raise StorageDecodeError(f"cannot decode course collection from {self.slot!r}: {exc}") from exc

    def write_raw(self, courses: List[Course]) -> None:
        self.slot.write(json.dumps(encode_collection(courses), indent=2, ensure_ascii=False))

    def set_aside(self) -> None:
        """
        Keep a copy of the current slot content before it gets overwritten.
        """
        self.slot.backup()
        logger.warning("Kept a copy of unreadable course data from %r", self.slot)

    def seed(self) -> List[Course]:
        """
        Write the example collection and return it.
        """
        courses = seed_courses()
        self.write_raw(courses)
        logger.info("Seeded record store %r with %d example courses", self.slot, len(courses))
        return courses


def file_stores(data_dir: str | Path | None = None) -> tuple[SettingsStore, RecordStore]:
    """
    Build the settings and record stores over the two files in data_dir.
    """
    base = Path(data_dir) if data_dir is not None else default_data_dir()
    return (
        SettingsStore(JsonFileSlot(base / SETTINGS_FILENAME)),
        RecordStore(JsonFileSlot(base / DATA_FILENAME)),
    )
