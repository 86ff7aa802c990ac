from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import iter_weekday_dates, parse_hhmm
from ..common.validators import require_non_empty, unique_ids
from ..core.enums import DayOfWeek
from ..core.exceptions import NotFoundError, ValidationError
from ..state import StudioState
from .model import RecurringSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def parse_day_of_week(value) -> DayOfWeek:
    try:
        return DayOfWeek(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid day of week: {value!r}")


def occurrence_dates(session: RecurringSession, start: date, end: date) -> list[date]:
    if end < start:
        raise ValidationError("End date must not be before start date")
    return list(iter_weekday_dates(session.day_of_week, start, end))


class ScheduleService:
    """Use case: manage weekly slots, rosters and waitlists."""

    def __init__(self, sessions: SessionRepository):
        self._sessions = sessions

    @staticmethod
    def get_session(state: StudioState, session_id: str) -> RecurringSession:
        session = state.session(session_id)
        if session is None:
            raise NotFoundError("Class not found")
        return session

    def add_session(
        self,
        state: StudioState,
        *,
        activity_id: str,
        instructor_id: str,
        space_id: str,
        day_of_week,
        time: str,
        level_id: Optional[str] = None,
    ) -> tuple[StudioState, RecurringSession]:
        session = RecurringSession(
            session_id=uuid.uuid4().hex,
            activity_id=require_non_empty(activity_id, "Activity"),
            instructor_id=require_non_empty(instructor_id, "Instructor"),
            space_id=require_non_empty(space_id, "Space"),
            day_of_week=parse_day_of_week(day_of_week),
            time=parse_hhmm(time).strftime("%H:%M"),
            level_id=(level_id or "").strip() or None,
        )
        self._sessions.save(session)
        logger.info("Scheduled session %s on %s %s", session.session_id, session.day_of_week.value, session.time)
        return state.with_sessions([session]), session

    def update_session(self, state: StudioState, session_id: str, **changes) -> StudioState:
        """Change slot attributes; roster and waitlist are kept."""
        session = self.get_session(state, session_id)

        fields = {}
        for name in ("activity_id", "instructor_id", "space_id"):
            if changes.get(name) is not None:
                fields[name] = require_non_empty(changes[name], name)
        if changes.get("day_of_week") is not None:
            fields["day_of_week"] = parse_day_of_week(changes["day_of_week"])
        if changes.get("time") is not None:
            fields["time"] = parse_hhmm(changes["time"]).strftime("%H:%M")
        if "level_id" in changes:
            fields["level_id"] = (changes["level_id"] or "").strip() or None

        updated = replace(session, **fields)
        self._sessions.save(updated)
        return state.with_sessions([updated])

    def delete_session(self, state: StudioState, session_id: str) -> StudioState:
        session = self.get_session(state, session_id)
        if session.person_ids:
            names = sorted(state.person_name(pid) for pid in session.person_ids)
            raise ValidationError(
                f"Cannot delete {state.session_label(session)}: {len(names)} enrolled ({', '.join(names)})"
            )

        if not self._sessions.delete(session_id):
            raise ValidationError("Class could not be deleted")
        logger.info("Deleted session %s", session_id)
        return state.without_session(session_id)

    def set_roster(self, state: StudioState, session_id: str, person_ids: Iterable[str]) -> StudioState:
        session = self.get_session(state, session_id)
        roster = unique_ids(person_ids, "person_ids")

        unknown = [pid for pid in roster if state.person(pid) is None]
        if unknown:
            raise ValidationError(f"Unknown people: {', '.join(sorted(unknown))}")

        updated = replace(
            session,
            person_ids=roster,
            waitlist_ids=tuple(pid for pid in session.waitlist_ids if pid not in roster),
        )
        self._sessions.save(updated)
        return state.with_sessions([updated])

    def enroll_person_in_sessions(self, state: StudioState, person_id: str, session_ids: Iterable[str]) -> StudioState:
        """Make ``session_ids`` exactly the set of classes the person is enrolled in."""
        if state.person(person_id) is None:
            raise NotFoundError("Person not found")

        wanted = unique_ids(session_ids, "session_ids")
        missing = [sid for sid in wanted if state.session(sid) is None]
        if missing:
            raise ValidationError(f"Unknown classes: {', '.join(sorted(missing))}")

        changed: list[RecurringSession] = []
        for s in state.sessions:
            if s.session_id in wanted and not s.is_enrolled(person_id):
                changed.append(s.with_roster(s.person_ids | {person_id}))
            elif s.session_id not in wanted and s.is_enrolled(person_id):
                changed.append(s.with_roster(s.person_ids - {person_id}))

        if changed:
            self._sessions.save_many(changed)
        return state.with_sessions(changed)

    def add_to_waitlist(self, state: StudioState, session_id: str, person_id: str) -> StudioState:
        session = self.get_session(state, session_id)
        if state.person(person_id) is None:
            raise NotFoundError("Person not found")
        if session.is_enrolled(person_id):
            raise ValidationError("Person is already enrolled in this class")
        if person_id in session.waitlist_ids:
            return state

        updated = replace(session, waitlist_ids=session.waitlist_ids + (person_id,))
        self._sessions.save(updated)
        return state.with_sessions([updated])

    def enroll_from_waitlist(self, state: StudioState, session_id: str, person_id: str) -> StudioState:
        session = self.get_session(state, session_id)
        if person_id not in session.waitlist_ids:
            raise ValidationError("Person is not on the waitlist")

        updated = replace(
            session,
            person_ids=session.person_ids | {person_id},
            waitlist_ids=tuple(pid for pid in session.waitlist_ids if pid != person_id),
        )
        self._sessions.save(updated)
        logger.info("Enrolled %s from waitlist into session %s", person_id, session_id)
        return state.with_sessions([updated])
