from __future__ import annotations

from datetime import date, timedelta

from src.studio_ledger.studio_ledger.attendance.churn import consecutive_absences, detect_churn_risk
from src.studio_ledger.studio_ledger.attendance.model import AttendanceRecord
from src.studio_ledger.studio_ledger.core.enums import DayOfWeek
from src.studio_ledger.studio_ledger.people.model import Person
from src.studio_ledger.studio_ledger.sessions.model import RecurringSession

LATEST = date(2026, 3, 30)


def _session(session_id: str, person_ids) -> RecurringSession:
    return RecurringSession(
        session_id=session_id,
        activity_id="pilates",
        instructor_id="t1",
        space_id="room-a",
        day_of_week=DayOfWeek.MONDAY,
        time="10:00",
        person_ids=frozenset(person_ids),
    )


def _history(person_id: str, marks: str, *, session_id: str = "s1") -> list[AttendanceRecord]:
    """``marks`` is newest first: A=absent, P=present, J=justified, -=not marked, C=cancelled."""
    out = []
    for i, mark in enumerate(marks):
        day = LATEST - timedelta(weeks=i)
        out.append(
            AttendanceRecord(
                session_id=session_id,
                occurrence_date=day,
                present_ids=frozenset({person_id}) if mark == "P" else frozenset(),
                absent_ids=frozenset({person_id}) if mark == "A" else frozenset(),
                justified_ids=frozenset({person_id}) if mark == "J" else frozenset(),
                cancelled=mark == "C",
            )
        )
    return out


def test_three_recent_absences_is_at_risk():
    person = Person(person_id="p1", name="Ana")
    at_risk = detect_churn_risk([person], _history("p1", "AAAP"), [_session("s1", ["p1"])])
    assert at_risk == [person]


def test_streak_broken_by_present_is_not_at_risk():
    person = Person(person_id="p1", name="Ana")
    assert detect_churn_risk([person], _history("p1", "AAPA"), [_session("s1", ["p1"])]) == []


def test_justified_absence_breaks_streak():
    person = Person(person_id="p1", name="Ana")
    assert detect_churn_risk([person], _history("p1", "AAJA"), [_session("s1", ["p1"])]) == []


def test_person_not_enrolled_is_never_flagged():
    person = Person(person_id="p1", name="Ana")
    assert detect_churn_risk([person], _history("p1", "AAAAA"), [_session("s1", ["p2"])]) == []


def test_only_the_last_five_records_are_considered():
    # Unmarked records neither count nor stop the streak, but they use up the window.
    assert consecutive_absences("p1", _history("p1", "--AAA")) == 3
    assert consecutive_absences("p1", _history("p1", "---AAA")) == 2


def test_cancelled_occurrences_are_ignored():
    person = Person(person_id="p1", name="Ana")
    records = _history("p1", "ACAA")
    assert detect_churn_risk([person], records, [_session("s1", ["p1"])]) == [person]


def test_records_of_other_sessions_do_not_count():
    person = Person(person_id="p1", name="Ana")
    records = _history("p1", "AAA", session_id="other")
    assert detect_churn_risk([person], records, [_session("s1", ["p1"])]) == []


def test_output_keeps_input_order_and_accepts_custom_threshold():
    ana = Person(person_id="p1", name="Ana")
    luis = Person(person_id="p2", name="Luis")
    records = _history("p1", "AA") + _history("p2", "AA", session_id="s2")
    sessions = [_session("s1", ["p1"]), _session("s2", ["p2"])]

    assert detect_churn_risk([luis, ana], records, sessions, threshold=2) == [luis, ana]
    assert detect_churn_risk([luis, ana], records, sessions) == []
