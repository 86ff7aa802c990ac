from __future__ import annotations

from typing import Iterable, Sequence

from ..core.constants import CHURN_THRESHOLD, CHURN_WINDOW
from ..people.model import Person
from ..sessions.model import RecurringSession
from .model import AttendanceRecord


def consecutive_absences(person_id: str, records: Sequence[AttendanceRecord], *, window: int = CHURN_WINDOW) -> int:
    """Count absences from the newest record back, stopping at present or justified.

    ``records`` must be ordered newest first. Only the first ``window`` records are
    looked at; a record that does not mark the person neither counts nor stops.
    """
    count = 0
    for r in records[:window]:
        if person_id in r.present_ids or person_id in r.justified_ids:
            break
        if person_id in r.absent_ids:
            count += 1
    return count


def detect_churn_risk(
    people: Iterable[Person],
    attendance: Iterable[AttendanceRecord],
    sessions: Iterable[RecurringSession],
    *,
    window: int = CHURN_WINDOW,
    threshold: int = CHURN_THRESHOLD,
) -> list[Person]:
    """People with ``threshold`` or more consecutive recent absences, in input order.

    People enrolled in no session are never evaluated. Cancelled occurrences carry
    no marks and are skipped.
    """
    sessions = list(sessions)
    live = [r for r in attendance if not r.cancelled]

    at_risk: list[Person] = []
    for person in people:
        session_ids = {s.session_id for s in sessions if s.is_enrolled(person.person_id)}
        if not session_ids:
            continue

        history = [r for r in live if r.session_id in session_ids]
        history.sort(key=lambda r: r.occurrence_date, reverse=True)

        if consecutive_absences(person.person_id, history, window=window) >= threshold:
            at_risk.append(person)
    return at_risk
