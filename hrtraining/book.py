"""
In-memory course collection (application state).

Every edit produces the complete new collection and hands it to the
synchronizer; nothing here ever sends a diff.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Iterator, List, Optional

from hrtraining.model import Course, new_course_id
from hrtraining.sync import Synchronizer


class CourseBook:
    def __init__(self, sync: Synchronizer, courses: Optional[List[Course]] = None) -> None:
        self.sync = sync
        self._courses: List[Course] = list(courses) if courses is not None else []

    @classmethod
    def open(cls, sync: Synchronizer) -> "CourseBook":
        """Load the collection once (startup)."""
        return cls(sync, sync.load())

    @property
    def courses(self) -> List[Course]:
        return list(self._courses)

    def __len__(self) -> int:
        return len(self._courses)

    def __iter__(self) -> Iterator[Course]:
        return iter(list(self._courses))

    def get(self, course_id: str) -> Optional[Course]:
        for c in self._courses:
            if c.id == course_id:
                return c
        return None

    def _commit(self, courses: List[Course]) -> None:
        self._courses = courses
        self.sync.save(list(courses))

    def upsert(self, course: Course) -> None:
        """
        Replace the course with the same id in place, or append it.
        """
        if self.get(course.id) is not None:
            updated = [course if c.id == course.id else c for c in self._courses]
        else:
            updated = self._courses + [course]
        self._commit(updated)

    def delete(self, course_id: str) -> bool:
        if self.get(course_id) is None:
            return False
        self._commit([c for c in self._courses if c.id != course_id])
        return True

    def batch_import(self, imported: Iterable[Course]) -> List[Course]:
        """
        Append imported courses after the existing ones.

        Imported records whose id is already taken get a fresh id.
        Returns the records as they were added.
        """
        taken = {c.id for c in self._courses}
        added: List[Course] = []
        for course in imported:
            if course.id in taken:
                course = dataclasses.replace(course, id=new_course_id())
            taken.add(course.id)
            added.append(course)
        self._commit(self._courses + added)
        return added
