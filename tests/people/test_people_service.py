from __future__ import annotations

from datetime import date, datetime

import pytest

from src.studio_ledger.studio_ledger.core.enums import DayOfWeek, MembershipType, PaymentStatus
from src.studio_ledger.studio_ledger.core.exceptions import NotFoundError, ValidationError
from src.studio_ledger.studio_ledger.payments.status import payment_status
from src.studio_ledger.studio_ledger.people.service import PeopleService
from src.studio_ledger.studio_ledger.sessions.model import RecurringSession
from src.studio_ledger.studio_ledger.state import StudioState


class InMemoryPeople:
    def __init__(self):
        self.saved: dict = {}
        self.deleted: list[str] = []

    def list_all(self):
        return list(self.saved.values())

    def get_by_id(self, person_id):
        return self.saved.get(person_id)

    def save(self, person):
        self.saved[person.person_id] = person

    def delete_with_enrollments(self, person_id):
        self.deleted.append(person_id)
        return self.saved.pop(person_id, None) is not None


def test_new_person_starts_pending():
    service = PeopleService(InMemoryPeople())
    state, person = service.add_person(StudioState(), name="  Ana  ", phone="600 111 222")

    assert person.name == "Ana"
    assert person.membership == MembershipType.MONTHLY
    assert state.person(person.person_id) == person
    assert payment_status(person, datetime.now()).status == PaymentStatus.PENDING
    assert person.last_payment_date is None


def test_add_person_requires_name_and_valid_membership():
    service = PeopleService(InMemoryPeople())
    with pytest.raises(ValidationError):
        service.add_person(StudioState(), name=" ")
    with pytest.raises(ValidationError):
        service.add_person(StudioState(), name="Ana", membership="yearly")


def test_update_person_changes_membership():
    service = PeopleService(InMemoryPeople())
    state, person = service.add_person(StudioState(), name="Ana")
    state = service.update_person(state, person.person_id, membership="daily", notes="  ")

    updated = state.person(person.person_id)
    assert updated.membership == MembershipType.DAILY
    assert updated.notes is None


def test_delete_person_drops_enrollments_from_state():
    repo = InMemoryPeople()
    service = PeopleService(repo)
    state, person = service.add_person(StudioState(), name="Ana")
    session = RecurringSession(
        session_id="s1",
        activity_id="yoga",
        instructor_id="t1",
        space_id="room-a",
        day_of_week=DayOfWeek.MONDAY,
        time="18:00",
        person_ids=frozenset({person.person_id}),
        waitlist_ids=(person.person_id,),
    )
    state = state.with_sessions([session])

    state = service.delete_person(state, person.person_id)

    assert state.person(person.person_id) is None
    assert state.session("s1").person_ids == frozenset()
    assert state.session("s1").waitlist_ids == ()
    assert repo.deleted == [person.person_id]


def test_vacations():
    service = PeopleService(InMemoryPeople())
    state, person = service.add_person(StudioState(), name="Ana")

    with pytest.raises(ValidationError):
        service.add_vacation(state, person.person_id, date(2026, 8, 10), date(2026, 8, 1))

    state = service.add_vacation(state, person.person_id, date(2026, 8, 1), date(2026, 8, 15))
    person = state.person(person.person_id)
    assert service.is_on_vacation(person, date(2026, 8, 15))
    assert not service.is_on_vacation(person, date(2026, 8, 16))

    state = service.remove_vacation(state, person.person_id, person.vacation_periods[0].vacation_id)
    assert state.person(person.person_id).vacation_periods == ()
    with pytest.raises(NotFoundError):
        service.remove_vacation(state, person.person_id, "missing")
