from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from ..common.validators import unique_ids
from ..core.exceptions import NotFoundError, ValidationError
from ..people.model import RecoveryCredit
from ..sessions.model import RecurringSession
from ..state import StudioState
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Use cases on session occurrences: marks, cancellation and recovery credits.

    An occurrence moves from scheduled to either recorded or cancelled. A cancelled
    occurrence accepts no further marks. Every write goes to the repository first;
    the returned ``StudioState`` reflects it only once the write succeeded.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    @staticmethod
    def occurrence(state: StudioState, session: RecurringSession, occurrence_date: date) -> AttendanceRecord:
        return state.attendance_for(session.session_id, occurrence_date) or AttendanceRecord.empty(
            session.session_id, occurrence_date
        )

    def cancel_occurrence(
        self,
        state: StudioState,
        session: Optional[RecurringSession],
        occurrence_date: date,
        *,
        grant_credits: bool,
    ) -> StudioState:
        """Cancel one occurrence and settle its credits.

        Enrolled people receive a credit for ``(session, date)`` at most once per
        occurrence, even if an earlier credit was already spent. Make-up attendees
        who paid with a credit get that credit back.
        """
        if session is None:
            raise ValidationError("Session is required")

        current = self.occurrence(state, session, occurrence_date)
        credits: list[tuple[str, RecoveryCredit]] = []

        granted = 0
        if grant_credits and not current.credits_granted:
            credit = RecoveryCredit(session_id=session.session_id, occurrence_date=occurrence_date)
            for pid in sorted(session.person_ids):
                person = state.person(pid)
                if person is None:
                    logger.warning("Skipping credit for unknown person %s on session %s", pid, session.session_id)
                    continue
                if credit not in person.recovery_credits:
                    credits.append((pid, credit))
            granted = len(credits)

        for pid, spent in sorted(current.redeemed_credits):
            person = state.person(pid)
            if person is None:
                logger.warning("Skipping refund for unknown person %s on session %s", pid, session.session_id)
                continue
            if spent not in person.recovery_credits:
                credits.append((pid, spent))

        record = AttendanceRecord(
            session_id=session.session_id,
            occurrence_date=occurrence_date,
            cancelled=True,
            credits_granted=current.credits_granted or grant_credits,
        )
        self._attendance.save_cancellation(record=record, credits=credits)
        logger.info(
            "Cancelled session %s on %s (credits granted: %d, refunded: %d)",
            session.session_id,
            occurrence_date.isoformat(),
            granted,
            len(credits) - granted,
        )

        extra: dict[str, set[RecoveryCredit]] = {}
        for pid, credit in credits:
            extra.setdefault(pid, set()).add(credit)
        updated = []
        for pid, gained in extra.items():
            person = state.person(pid)
            updated.append(person.with_credits(person.recovery_credits | gained))
        return state.with_record(record).with_people(updated)

    def record_attendance(
        self,
        state: StudioState,
        session: RecurringSession,
        occurrence_date: date,
        *,
        present_ids: Iterable[str] = (),
        absent_ids: Iterable[str] = (),
        justified_ids: Iterable[str] = (),
    ) -> StudioState:
        present = unique_ids(present_ids, "present_ids")
        absent = unique_ids(absent_ids, "absent_ids")
        justified = unique_ids(justified_ids, "justified_ids")

        if present & absent or present & justified or absent & justified:
            raise ValidationError("A person can only have one mark per class")

        outside = (present | absent | justified) - session.person_ids
        if outside:
            raise ValidationError(f"Not enrolled in this class: {', '.join(sorted(outside))}")

        current = self.occurrence(state, session, occurrence_date)
        if current.cancelled:
            raise ValidationError("This class was cancelled for that date")

        record = replace(current, present_ids=present, absent_ids=absent, justified_ids=justified)
        self._attendance.save(record)
        logger.info(
            "Recorded attendance for session %s on %s (%d present, %d absent, %d justified)",
            session.session_id,
            occurrence_date.isoformat(),
            len(present),
            len(absent),
            len(justified),
        )
        return state.with_record(record)

    def add_justified_absence(
        self, state: StudioState, session: RecurringSession, person_id: str, occurrence_date: date
    ) -> StudioState:
        if not session.is_enrolled(person_id):
            raise ValidationError("Only enrolled people can justify an absence")

        current = self.occurrence(state, session, occurrence_date)
        if current.cancelled:
            raise ValidationError("This class was cancelled for that date")

        record = replace(
            current,
            present_ids=current.present_ids - {person_id},
            absent_ids=current.absent_ids - {person_id},
            justified_ids=current.justified_ids | {person_id},
        )
        self._attendance.save(record)
        return state.with_record(record)

    def add_one_time_attendee(
        self, state: StudioState, session: RecurringSession, person_id: str, occurrence_date: date
    ) -> StudioState:
        record = self._one_time_record(state, session, person_id, occurrence_date)
        self._attendance.save(record)
        return state.with_record(record)

    def redeem_recovery_credit(
        self, state: StudioState, person_id: str, target: RecurringSession, occurrence_date: date
    ) -> StudioState:
        """Spend the person's oldest credit on a make-up spot in ``target``."""
        person = state.person(person_id)
        if person is None:
            raise NotFoundError("Person not found")

        credit = person.oldest_credit()
        if credit is None:
            raise ValidationError(f"{person.name} has no recovery credits")

        if person_id in self.occurrence(state, target, occurrence_date).one_time_ids:
            raise ValidationError(f"{person.name} already has a spot in this class")

        record = self._one_time_record(state, target, person_id, occurrence_date)
        record = replace(record, redeemed_credits=record.redeemed_credits | {(person_id, credit)})
        self._attendance.redeem_credit(record=record, person_id=person_id, credit=credit)
        logger.info(
            "Person %s redeemed credit %s/%s on session %s %s",
            person_id,
            credit.session_id,
            credit.occurrence_date.isoformat(),
            target.session_id,
            occurrence_date.isoformat(),
        )
        return state.with_record(record).with_people([person.with_credits(person.recovery_credits - {credit})])

    def expected_attendees(self, state: StudioState, session: RecurringSession, occurrence_date: date) -> list[str]:
        """Roster for one date: enrolled people not on vacation, plus one-time attendees."""
        record = self.occurrence(state, session, occurrence_date)
        if record.cancelled:
            return []

        out = []
        for pid in sorted(session.person_ids):
            person = state.person(pid)
            if person is not None and not person.is_on_vacation(occurrence_date):
                out.append(pid)
        out.extend(sorted(record.one_time_ids - session.person_ids))
        return out

    def _one_time_record(
        self, state: StudioState, session: RecurringSession, person_id: str, occurrence_date: date
    ) -> AttendanceRecord:
        if state.person(person_id) is None:
            raise NotFoundError("Person not found")
        if session.is_enrolled(person_id):
            raise ValidationError("Person is already enrolled in this class")

        current = self.occurrence(state, session, occurrence_date)
        if current.cancelled:
            raise ValidationError("This class was cancelled for that date")

        return replace(current, one_time_ids=current.one_time_ids | {person_id})
