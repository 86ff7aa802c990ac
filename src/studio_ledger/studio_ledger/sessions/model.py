from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from ..core.enums import DayOfWeek


@dataclass(frozen=True)
class RecurringSession:
    """A weekly time slot (weekday + HH:MM) with its enrolled roster."""

    session_id: str
    activity_id: str
    instructor_id: str
    space_id: str
    day_of_week: DayOfWeek
    time: str
    person_ids: frozenset[str] = field(default_factory=frozenset)
    waitlist_ids: tuple[str, ...] = ()
    level_id: Optional[str] = None

    def occurs_on(self, on_date: date) -> bool:
        return DayOfWeek.from_date(on_date) == self.day_of_week

    def is_enrolled(self, person_id: str) -> bool:
        return person_id in self.person_ids

    def with_roster(self, person_ids) -> "RecurringSession":
        return replace(self, person_ids=frozenset(person_ids))

    def slot(self) -> tuple[DayOfWeek, str]:
        return self.day_of_week, self.time
