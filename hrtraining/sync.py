"""
Synchronizer: where course reads and writes go.

Policy ("local is truth, remote is a best-effort mirror"):

load()
    1. remote enabled -> try the mirror; a valid list is returned as-is
    2. otherwise (or on any remote failure) -> the local record store
    3. local store empty or undecodable -> seed it and return the seed
       (an undecodable file is copied aside first)

save(courses)
    1. write the local record store, always and first
    2. remote enabled -> push the full collection once; failures are
       logged and dropped (no retry, no queue, never raised)

Because remote writes are unacknowledged full overwrites, the mirror can
drift from the local store. That is accepted: the local copy never
depends on the remote one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from hrtraining.model import Course
from hrtraining.remote import RemoteMirror
from hrtraining.storage import RecordStore, Settings, SettingsStore, StorageDecodeError, file_stores

logger = logging.getLogger(__name__)

MirrorFactory = Callable[[str], RemoteMirror]


class Synchronizer:
    def __init__(
        self,
        settings_store: SettingsStore,
        record_store: RecordStore,
        mirror_factory: MirrorFactory = RemoteMirror,
    ) -> None:
        self.settings_store = settings_store
        self.record_store = record_store
        self.mirror_factory = mirror_factory

    def _mirror(self) -> Optional[RemoteMirror]:
        url = self.settings_store.get().remote_url.strip()
        if not url:
            return None
        return self.mirror_factory(url)

    def load(self) -> List[Course]:
        mirror = self._mirror()
        if mirror is not None:
            result = mirror.fetch()
            if result.ok and result.courses is not None:
                return result.courses
            logger.warning("Remote load failed, falling back to local store: %s", result.reason)

        try:
            local = self.record_store.read_raw()
        except StorageDecodeError as exc:
            logger.warning("Local course store is unreadable, reseeding: %s", exc)
            self.record_store.set_aside()
            local = None

        if local is not None:
            return local
        return self.record_store.seed()

    def save(self, courses: List[Course]) -> None:
        self.record_store.write_raw(courses)

        mirror = self._mirror()
        if mirror is None:
            return
        result = mirror.push(courses)
        if not result.ok:
            logger.warning("Remote save failed, local copy kept: %s", result.reason)


def default_synchronizer(data_dir: str | Path | None = None) -> Synchronizer:
    settings_store, record_store = file_stores(data_dir)
    return Synchronizer(settings_store, record_store)


# ---------------------------------------------------------------------------
# Consumer API over the default data directory
# ---------------------------------------------------------------------------


def fetch_courses() -> List[Course]:
    return default_synchronizer().load()


def save_courses(courses: List[Course]) -> None:
    default_synchronizer().save(courses)


def get_settings() -> Settings:
    return default_synchronizer().settings_store.get()


def save_settings(settings: Settings) -> None:
    default_synchronizer().settings_store.put(settings)
