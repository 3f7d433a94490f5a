"""
Dashboard rollups over a course collection.

Definitions:
- expected totals count every course that is not cancelled
- actual totals count completed courses only
- training hours are person-hours (duration x attendees)
- completion_rate   = completed / all courses
- opening_rate      = not cancelled / all courses
- participation_rate = actual / expected attendees of completed courses
- avg_satisfaction  = mean over rated courses (satisfaction > 0)

Rates are percentages (0-100). An empty collection gives all zeros.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from hrtraining.model import Course


@dataclass
class DashboardStats:
    total_courses: int = 0
    expected_total_cost: float = 0.0
    actual_total_cost: float = 0.0
    expected_total_hours: float = 0.0
    actual_total_hours: float = 0.0
    avg_satisfaction: float = 0.0
    completion_rate: float = 0.0
    opening_rate: float = 0.0
    participation_rate: float = 0.0


def _pct(part: float, whole: float) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def compute_stats(courses: Iterable[Course]) -> DashboardStats:
    courses = list(courses)
    active = [c for c in courses if c.status != "Cancelled"]
    completed = [c for c in courses if c.status == "Completed"]
    rated = [c.satisfaction for c in courses if c.satisfaction > 0]

    expected_attendees = sum(c.expected_attendees for c in completed)
    actual_attendees = sum(c.actual_attendees for c in completed)

    return DashboardStats(
        total_courses=len(courses),
        expected_total_cost=sum(c.cost for c in active),
        actual_total_cost=sum(c.cost for c in completed),
        expected_total_hours=sum(c.duration * c.expected_attendees for c in active),
        actual_total_hours=sum(c.duration * c.actual_attendees for c in completed),
        avg_satisfaction=round(sum(rated) / len(rated), 2) if rated else 0.0,
        completion_rate=_pct(len(completed), len(courses)),
        opening_rate=_pct(len(active), len(courses)),
        participation_rate=_pct(actual_attendees, expected_attendees),
    )


def filter_courses(
    courses: Iterable[Course],
    company: Optional[str] = None,
    status: Optional[str] = None,
    year: Optional[str] = None,
) -> List[Course]:
    """
    Keep courses matching all given filters. year matches the start date.
    """
    out: List[Course] = []
    for c in courses:
        if company and c.company != company:
            continue
        if status and c.status != status:
            continue
        if year and not c.start_date.startswith(f"{year}-"):
            continue
        out.append(c)
    return out
