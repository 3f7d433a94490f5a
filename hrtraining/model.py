"""
Central data model for training course records.

A Course is stored and mirrored as a JSON object with camelCase keys
(the format the remote spreadsheet endpoint speaks). In Python we use
snake_case attributes and convert at the edges via from_dict / to_dict.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Iterable, List

logger = logging.getLogger(__name__)


STATUSES = ("Planned", "Completed", "Cancelled")
CREATORS = ("HR", "User")

# attribute name -> JSON key
_JSON_KEYS = {
    "id": "id",
    "name": "name",
    "company": "company",
    "department": "department",
    "objective": "objective",
    "start_date": "startDate",
    "end_date": "endDate",
    "time": "time",
    "duration": "duration",
    "expected_attendees": "expectedAttendees",
    "actual_attendees": "actualAttendees",
    "instructor": "instructor",
    "instructor_org": "instructorOrg",
    "cost": "cost",
    "satisfaction": "satisfaction",
    "status": "status",
    "cancellation_reason": "cancellationReason",
    "created_by": "createdBy",
}

_FLOAT_FIELDS = ("duration", "cost", "satisfaction")
_INT_FIELDS = ("expected_attendees", "actual_attendees")


def new_course_id() -> str:
    """Return a fresh client-generated course id."""
    return str(uuid.uuid4())


def _to_float(name: str, value: Any) -> float:
    """
    Coerce a stored or imported value to a number.

    Hand-edited files and spreadsheets put things like "3 hrs" into number
    columns; such values become 0 instead of invalidating the record.
    """
    if value is None or value == "":
        return 0.0
    if not isinstance(value, bool):
        try:
            number = float(value)
        except (TypeError, ValueError):
            pass
        else:
            if math.isfinite(number):
                return number
    logger.warning("%s: %r is not a number, using 0", name, value)
    return 0.0


def _to_int(name: str, value: Any) -> int:
    number = _to_float(name, value)
    if not number.is_integer():
        logger.warning("%s: %r is not a whole number, rounding", name, value)
    return int(round(number))


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Course:
    """
    One training course record.

    Only `id` is required; everything else has the same defaults as an
    empty course form.
    """

    id: str
    name: str = ""
    company: str = ""
    department: str = ""
    objective: str = ""
    start_date: str = ""
    end_date: str = ""
    time: str = ""
    duration: float = 0.0
    expected_attendees: int = 0
    actual_attendees: int = 0
    instructor: str = ""
    instructor_org: str = ""
    cost: float = 0.0
    satisfaction: float = 0.0
    status: str = "Planned"
    cancellation_reason: str = ""
    created_by: str = "HR"

    @classmethod
    def from_dict(cls, data: Any) -> "Course":
        """
        Decode one JSON object into a Course.

        Raises ValueError for non-mappings and records without an id.
        The id is kept verbatim; fields that are absent get form defaults,
        fields that are present are kept as given.
        """
        if not isinstance(data, dict):
            raise ValueError(f"course record must be an object, got {type(data).__name__}")

        course_id = _to_text(data.get("id"))
        if not course_id.strip():
            raise ValueError("course record has no id")

        kwargs: dict[str, Any] = {"id": course_id}
        for attr, key in _JSON_KEYS.items():
            if attr == "id" or key not in data:
                continue
            value = data[key]
            if attr in _FLOAT_FIELDS:
                kwargs[attr] = _to_float(key, value)
            elif attr in _INT_FIELDS:
                kwargs[attr] = _to_int(key, value)
            else:
                kwargs[attr] = _to_text(value)

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for attr, value in asdict(self).items():
            if attr == "cancellation_reason" and not value:
                continue
            out[_JSON_KEYS[attr]] = value
        return out

    def validate(self) -> List[str]:
        """
        Check the constraints a course form enforces.

        The storage layer accepts any value; callers creating or editing
        records interactively use this to reject obviously broken input.
        """
        problems: List[str] = []

        start = _parse_date("startDate", self.start_date, problems)
        end = _parse_date("endDate", self.end_date, problems)
        if start and end and end < start:
            problems.append("endDate is earlier than startDate")

        if self.duration < 0:
            problems.append("duration must not be negative")
        if self.cost < 0:
            problems.append("cost must not be negative")
        if self.expected_attendees < 0:
            problems.append("expectedAttendees must not be negative")
        if self.actual_attendees < 0:
            problems.append("actualAttendees must not be negative")
        if self.satisfaction != 0 and not (1 <= self.satisfaction <= 5):
            problems.append("satisfaction must be 0 (not rated) or between 1 and 5")

        if self.status not in STATUSES:
            problems.append(f"status must be one of {', '.join(STATUSES)}")
        if self.created_by not in CREATORS:
            problems.append(f"createdBy must be one of {', '.join(CREATORS)}")

        if self.status == "Cancelled" and not self.cancellation_reason.strip():
            problems.append("cancelled courses need a cancellationReason")
        if self.status != "Cancelled" and self.cancellation_reason.strip():
            problems.append("cancellationReason is only allowed for cancelled courses")

        return problems


def _parse_date(name: str, value: str, problems: List[str]) -> datetime | None:
    # empty dates are allowed (form not filled in yet)
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        problems.append(f"{name} must be YYYY-MM-DD, got {value!r}")
        return None


def decode_collection(payload: Any) -> List[Course]:
    """
    Turn a decoded JSON value into a list of courses.

    Raises ValueError if the payload is not a list or an element is not
    an object with an id. Odd field values never raise.
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a list of courses, got {type(payload).__name__}")
    return [Course.from_dict(item) for item in payload]


def encode_collection(courses: Iterable[Course]) -> List[dict[str, Any]]:
    return [c.to_dict() for c in courses]
