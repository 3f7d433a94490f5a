"""
Tests for the in-memory course collection and the module-level consumer API.

Every edit must hand the complete post-edit collection to the synchronizer.
"""

import os
import tempfile
import unittest
from unittest import mock

from hrtraining import sync as sync_api
from hrtraining.book import CourseBook
from hrtraining.model import Course
from hrtraining.storage import MemorySlot, RecordStore, Settings, SettingsStore
from hrtraining.sync import Synchronizer


def _book(local=None) -> CourseBook:
    record_store = RecordStore(MemorySlot())
    if local is not None:
        record_store.write_raw(local)
    sync = Synchronizer(SettingsStore(MemorySlot()), record_store)
    return CourseBook.open(sync)


class TestCourseBook(unittest.TestCase):
    def test_open_loads_seed(self) -> None:
        book = _book()
        self.assertEqual(len(book), 3)
        self.assertEqual(book.get("2").status, "Planned")

    def test_upsert_appends_new_course(self) -> None:
        book = _book(local=[Course(id="x")])
        book.upsert(Course(id="y", name="New"))
        self.assertEqual([c.id for c in book], ["x", "y"])
        self.assertEqual(book.sync.record_store.read_raw(), book.courses)

    def test_upsert_replaces_in_place(self) -> None:
        book = _book(local=[Course(id="a"), Course(id="b"), Course(id="c")])
        book.upsert(Course(id="b", name="Edited", status="Completed"))
        self.assertEqual([c.id for c in book], ["a", "b", "c"])
        self.assertEqual(book.get("b").name, "Edited")
        self.assertEqual(book.sync.record_store.read_raw()[1].status, "Completed")

    def test_delete(self) -> None:
        book = _book(local=[Course(id="a"), Course(id="b")])
        self.assertTrue(book.delete("a"))
        self.assertEqual(book.sync.record_store.read_raw(), [Course(id="b")])

    def test_delete_unknown_does_not_save(self) -> None:
        book = _book(local=[Course(id="a")])
        slot = book.sync.record_store.slot
        writes = slot.writes
        self.assertFalse(book.delete("zzz"))
        self.assertEqual(slot.writes, writes)

    def test_batch_import_appends_and_keeps_ids_unique(self) -> None:
        book = _book(local=[Course(id="a", name="Old")])
        added = book.batch_import([Course(id="a", name="Imported"), Course(id="b", name="Other")])

        ids = [c.id for c in book]
        self.assertEqual(len(ids), 3)
        self.assertEqual(len(set(ids)), 3)
        self.assertEqual(ids[0], "a")
        self.assertEqual(book.get("a").name, "Old")
        self.assertNotEqual(added[0].id, "a")
        self.assertEqual(added[1].id, "b")
        self.assertEqual(book.sync.record_store.read_raw(), book.courses)

    def test_every_edit_sends_full_collection(self) -> None:
        book = _book(local=[Course(id="a")])
        with mock.patch.object(book.sync, "save") as save:
            book.upsert(Course(id="b"))
            book.delete("a")
        self.assertEqual(save.call_args_list[0].args[0], [Course(id="a"), Course(id="b")])
        self.assertEqual(save.call_args_list[1].args[0], [Course(id="b")])


class TestConsumerApi(unittest.TestCase):
    def test_module_functions_use_data_dir_from_env(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with mock.patch.dict(os.environ, {"HRTRAINING_DATA_DIR": d}):
                self.assertEqual(sync_api.get_settings(), Settings())
                self.assertEqual(len(sync_api.fetch_courses()), 3)

                sync_api.save_courses([Course(id="only")])
                self.assertEqual(sync_api.fetch_courses(), [Course(id="only")])

                sync_api.save_settings(Settings(remote_url=""))
                self.assertEqual(sync_api.get_settings().remote_url, "")


if __name__ == "__main__":
    unittest.main()
