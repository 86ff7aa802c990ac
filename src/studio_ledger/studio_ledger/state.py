"""In-memory snapshot of one studio's data.

Services receive a ``StudioState`` explicitly and return an updated copy after a
successful write; nothing here talks to the database.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from functools import cached_property
from typing import Iterable, Optional

from .attendance.model import AttendanceRecord
from .attendance.repository import AttendanceRepository
from .catalog.model import Activity, Space, Specialist
from .catalog.repository import CatalogRepository
from .core.constants import UNKNOWN_LABEL
from .payments.model import Payment
from .payments.repository import PaymentRepository
from .people.model import Person
from .people.repository import PersonRepository
from .sessions.model import RecurringSession
from .sessions.repository import SessionRepository


@dataclass(frozen=True)
class StudioState:
    sessions: tuple[RecurringSession, ...] = ()
    people: tuple[Person, ...] = ()
    attendance: tuple[AttendanceRecord, ...] = ()
    payments: tuple[Payment, ...] = ()
    activities: tuple[Activity, ...] = ()
    specialists: tuple[Specialist, ...] = ()
    spaces: tuple[Space, ...] = ()

    @cached_property
    def _sessions_by_id(self) -> dict[str, RecurringSession]:
        return {s.session_id: s for s in self.sessions}

    @cached_property
    def _people_by_id(self) -> dict[str, Person]:
        return {p.person_id: p for p in self.people}

    @cached_property
    def _attendance_by_key(self) -> dict[tuple[str, date], AttendanceRecord]:
        return {r.key: r for r in self.attendance}

    # Lookups: missing references resolve to None / "Unknown" instead of raising.

    def session(self, session_id: str) -> Optional[RecurringSession]:
        return self._sessions_by_id.get(session_id)

    def person(self, person_id: str) -> Optional[Person]:
        return self._people_by_id.get(person_id)

    def person_name(self, person_id: str) -> str:
        p = self.person(person_id)
        return p.name if p else UNKNOWN_LABEL

    def activity_name(self, activity_id: str) -> str:
        return next((a.name for a in self.activities if a.activity_id == activity_id), UNKNOWN_LABEL)

    def specialist_name(self, specialist_id: str) -> str:
        return next((s.name for s in self.specialists if s.specialist_id == specialist_id), UNKNOWN_LABEL)

    def space(self, space_id: str) -> Optional[Space]:
        return next((s for s in self.spaces if s.space_id == space_id), None)

    def session_label(self, session: RecurringSession) -> str:
        return f"{self.activity_name(session.activity_id)} ({session.day_of_week.value} {session.time})"

    def attendance_for(self, session_id: str, occurrence_date: date) -> Optional[AttendanceRecord]:
        return self._attendance_by_key.get((session_id, occurrence_date))

    def sessions_for_person(self, person_id: str) -> list[RecurringSession]:
        return [s for s in self.sessions if s.is_enrolled(person_id)]

    def payments_for(self, person_id: str) -> list[Payment]:
        items = [p for p in self.payments if p.person_id == person_id]
        items.sort(key=lambda p: p.paid_at, reverse=True)
        return items

    # Updated copies, applied only after the store accepted the write.

    def with_record(self, record: AttendanceRecord) -> "StudioState":
        rest = tuple(r for r in self.attendance if r.key != record.key)
        return replace(self, attendance=rest + (record,))

    def with_people(self, updated: Iterable[Person]) -> "StudioState":
        by_id = {p.person_id: p for p in updated}
        people = tuple(by_id.pop(p.person_id, p) for p in self.people)
        return replace(self, people=people + tuple(by_id.values()))

    def without_person(self, person_id: str) -> "StudioState":
        sessions = tuple(
            replace(
                s,
                person_ids=s.person_ids - {person_id},
                waitlist_ids=tuple(pid for pid in s.waitlist_ids if pid != person_id),
            )
            for s in self.sessions
        )
        people = tuple(p for p in self.people if p.person_id != person_id)
        return replace(self, sessions=sessions, people=people)

    def with_sessions(self, updated: Iterable[RecurringSession]) -> "StudioState":
        by_id = {s.session_id: s for s in updated}
        sessions = tuple(by_id.pop(s.session_id, s) for s in self.sessions)
        return replace(self, sessions=sessions + tuple(by_id.values()))

    def without_session(self, session_id: str) -> "StudioState":
        return replace(self, sessions=tuple(s for s in self.sessions if s.session_id != session_id))

    def with_payments(self, payments: Iterable[Payment]) -> "StudioState":
        return replace(self, payments=tuple(payments))


class StudioStateLoader:
    """Builds a fresh snapshot from the repositories."""

    def __init__(
        self,
        sessions: SessionRepository,
        people: PersonRepository,
        attendance: AttendanceRepository,
        payments: PaymentRepository,
        catalog: CatalogRepository,
    ):
        self._sessions = sessions
        self._people = people
        self._attendance = attendance
        self._payments = payments
        self._catalog = catalog

    def load(self) -> StudioState:
        return StudioState(
            sessions=tuple(self._sessions.list_all()),
            people=tuple(self._people.list_all()),
            attendance=tuple(self._attendance.list_all()),
            payments=tuple(self._payments.list_all()),
            activities=tuple(self._catalog.list_activities()),
            specialists=tuple(self._catalog.list_specialists()),
            spaces=tuple(self._catalog.list_spaces()),
        )
