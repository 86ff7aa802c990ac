from __future__ import annotations

from datetime import date

import pytest

from src.studio_ledger.studio_ledger.core.enums import DayOfWeek
from src.studio_ledger.studio_ledger.core.exceptions import NotFoundError, ValidationError
from src.studio_ledger.studio_ledger.people.model import Person
from src.studio_ledger.studio_ledger.sessions.model import RecurringSession
from src.studio_ledger.studio_ledger.sessions.service import ScheduleService, occurrence_dates
from src.studio_ledger.studio_ledger.state import StudioState


class InMemorySessions:
    def __init__(self):
        self.saved: dict[str, RecurringSession] = {}
        self.batches: list[list[str]] = []

    def list_all(self):
        return list(self.saved.values())

    def get_by_id(self, session_id):
        return self.saved.get(session_id)

    def save(self, session):
        self.saved[session.session_id] = session

    def save_many(self, sessions):
        self.batches.append([s.session_id for s in sessions])
        for s in sessions:
            self.saved[s.session_id] = s

    def delete(self, session_id):
        return self.saved.pop(session_id, None) is not None


def _state() -> StudioState:
    return StudioState(people=(Person(person_id="p1", name="Ana"), Person(person_id="p2", name="Luis")))


def _add(service: ScheduleService, state: StudioState, day: str = "monday", time: str = "18:00"):
    return service.add_session(
        state, activity_id="yoga", instructor_id="t1", space_id="room-a", day_of_week=day, time=time
    )


def test_add_session_normalizes_day_and_time():
    repo = InMemorySessions()
    state, session = _add(ScheduleService(repo), _state(), day=" Tuesday ", time="9:05")

    assert session.day_of_week == DayOfWeek.TUESDAY
    assert session.time == "09:05"
    assert state.session(session.session_id) == session
    assert repo.saved[session.session_id] == session


@pytest.mark.parametrize("day,time", [("funday", "18:00"), ("monday", "25:00")])
def test_add_session_rejects_bad_slots(day, time):
    with pytest.raises(ValidationError):
        _add(ScheduleService(InMemorySessions()), _state(), day=day, time=time)


def test_delete_refuses_sessions_with_people():
    service = ScheduleService(InMemorySessions())
    state, session = _add(service, _state())
    state = service.set_roster(state, session.session_id, ["p1"])

    with pytest.raises(ValidationError) as exc:
        service.delete_session(state, session.session_id)
    assert "Ana" in str(exc.value)

    state = service.set_roster(state, session.session_id, [])
    state = service.delete_session(state, session.session_id)
    assert state.session(session.session_id) is None


def test_set_roster_rejects_unknown_people():
    service = ScheduleService(InMemorySessions())
    state, session = _add(service, _state())
    with pytest.raises(ValidationError):
        service.set_roster(state, session.session_id, ["p1", "ghost"])


def test_enroll_person_in_sessions_sets_exact_membership():
    repo = InMemorySessions()
    service = ScheduleService(repo)
    state, a = _add(service, _state(), day="monday")
    state, b = _add(service, state, day="wednesday")
    state = service.set_roster(state, a.session_id, ["p1"])

    state = service.enroll_person_in_sessions(state, "p1", [b.session_id])

    assert not state.session(a.session_id).is_enrolled("p1")
    assert state.session(b.session_id).is_enrolled("p1")
    assert sorted(repo.batches[-1]) == sorted([a.session_id, b.session_id])


def test_waitlist_then_enroll():
    service = ScheduleService(InMemorySessions())
    state, session = _add(service, _state())
    state = service.add_to_waitlist(state, session.session_id, "p2")
    state = service.add_to_waitlist(state, session.session_id, "p2")
    assert state.session(session.session_id).waitlist_ids == ("p2",)

    state = service.enroll_from_waitlist(state, session.session_id, "p2")
    updated = state.session(session.session_id)
    assert updated.is_enrolled("p2")
    assert updated.waitlist_ids == ()


def test_unknown_session():
    with pytest.raises(NotFoundError):
        ScheduleService(InMemorySessions()).set_roster(_state(), "missing", [])


def test_occurrence_dates_for_a_month():
    session = RecurringSession(
        session_id="s1",
        activity_id="yoga",
        instructor_id="t1",
        space_id="room-a",
        day_of_week=DayOfWeek.FRIDAY,
        time="18:00",
    )
    dates = occurrence_dates(session, date(2026, 5, 1), date(2026, 5, 31))
    assert dates == [date(2026, 5, 1), date(2026, 5, 8), date(2026, 5, 15), date(2026, 5, 22), date(2026, 5, 29)]
    assert all(session.occurs_on(d) for d in dates)
