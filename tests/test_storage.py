"""
Unit tests for the local settings and record stores.

Storage contract:
- Missing/invalid settings -> defaults (remote sync disabled)
- Missing course slot -> None; corrupt course slot -> StorageDecodeError
- Writes are full overwrites; the file format is a JSON array with camelCase keys
"""

import json
import tempfile
import unittest
from pathlib import Path

from hrtraining.model import Course
from hrtraining.storage import (
    JsonFileSlot,
    MemorySlot,
    RecordStore,
    Settings,
    SettingsStore,
    StorageDecodeError,
    file_stores,
)


class TestSettingsStore(unittest.TestCase):
    def test_missing_settings_returns_default(self) -> None:
        store = SettingsStore(MemorySlot())
        self.assertEqual(store.get(), Settings(remote_url=""))

    def test_put_and_get_roundtrip(self) -> None:
        slot = MemorySlot()
        store = SettingsStore(slot)
        store.put(Settings(remote_url="https://script.example.com/exec"))
        self.assertEqual(store.get().remote_url, "https://script.example.com/exec")
        # same key the web app used
        self.assertEqual(json.loads(slot.value), {"googleScriptUrl": "https://script.example.com/exec"})

    def test_put_overwrites_whole_record(self) -> None:
        store = SettingsStore(MemorySlot())
        store.put(Settings(remote_url="https://a.example.com"))
        store.put(Settings())
        self.assertEqual(store.get().remote_url, "")

    def test_corrupt_settings_fall_back_to_default(self) -> None:
        self.assertEqual(SettingsStore(MemorySlot("{not json")).get(), Settings())
        self.assertEqual(SettingsStore(MemorySlot("[1, 2]")).get(), Settings())
        self.assertEqual(SettingsStore(MemorySlot('{"googleScriptUrl": 5}')).get(), Settings())


class TestRecordStore(unittest.TestCase):
    def test_read_raw_missing_returns_none(self) -> None:
        self.assertIsNone(RecordStore(MemorySlot()).read_raw())

    def test_write_and_read_preserves_order(self) -> None:
        store = RecordStore(MemorySlot())
        courses = [Course(id="b", name="B"), Course(id="a", name="A", cost=100)]
        store.write_raw(courses)
        self.assertEqual(store.read_raw(), courses)

    def test_write_and_read_keeps_values_verbatim(self) -> None:
        store = RecordStore(MemorySlot())
        courses = [Course(id=" x ", status="", created_by=""), Course(id="y", expected_attendees=3)]
        store.write_raw(courses)
        self.assertEqual(store.read_raw(), courses)

    def test_empty_collection_is_not_absence(self) -> None:
        store = RecordStore(MemorySlot())
        store.write_raw([])
        self.assertEqual(store.read_raw(), [])

    def test_corrupt_slot_raises_decode_error(self) -> None:
        with self.assertRaises(StorageDecodeError):
            RecordStore(MemorySlot("{oops")).read_raw()
        with self.assertRaises(StorageDecodeError):
            RecordStore(MemorySlot('{"error": "bad"}')).read_raw()
        with self.assertRaises(StorageDecodeError):
            RecordStore(MemorySlot('[{"name": "no id"}]')).read_raw()

    def test_seed_writes_and_returns_example_courses(self) -> None:
        store = RecordStore(MemorySlot())
        seeded = store.seed()
        self.assertEqual([c.id for c in seeded], ["1", "2", "3"])
        self.assertEqual(store.read_raw(), seeded)


class TestJsonFileSlot(unittest.TestCase):
    def test_missing_file_reads_none(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertIsNone(JsonFileSlot(Path(d) / "missing.json").read())

    def test_write_creates_parent_dirs_and_leaves_no_temp_files(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "slot.json"
            slot = JsonFileSlot(p)
            slot.write("[]")
            slot.write('["x"]')
            self.assertEqual(slot.read(), '["x"]')
            self.assertEqual(sorted(x.name for x in p.parent.iterdir()), ["slot.json"])

    def test_backup_copies_file_aside(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "slot.json"
            slot = JsonFileSlot(p)
            slot.backup()
            self.assertFalse((Path(d) / "slot.json.corrupt").exists())

            slot.write("{broken")
            slot.backup()
            slot.write("[]")
            self.assertEqual((Path(d) / "slot.json.corrupt").read_text(encoding="utf-8"), "{broken")

    def test_file_stores_use_two_independent_files(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            settings_store, record_store = file_stores(d)
            settings_store.put(Settings(remote_url="https://x.example.com"))
            record_store.write_raw([Course(id="x", name="Excel")])

            names = sorted(p.name for p in Path(d).iterdir())
            self.assertEqual(names, ["hr_training_data.json", "hr_training_settings.json"])

            data = json.loads((Path(d) / "hr_training_data.json").read_text(encoding="utf-8"))
            self.assertEqual(data[0]["id"], "x")
            self.assertIn("expectedAttendees", data[0])


if __name__ == "__main__":
    unittest.main()
