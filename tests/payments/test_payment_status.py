from __future__ import annotations

from datetime import date, datetime, timedelta

from src.studio_ledger.studio_ledger.core.enums import MembershipType, PaymentStatus
from src.studio_ledger.studio_ledger.payments.calculator.standard_calculator import FixedCycleDueDateCalculator
from src.studio_ledger.studio_ledger.payments.status import overdue_people, payment_reminders, payment_status
from src.studio_ledger.studio_ledger.people.model import Person

NOW = datetime(2026, 4, 15, 12, 0, 0)


def _monthly(person_id: str, paid_days_ago, name: str = "") -> Person:
    return Person(
        person_id=person_id,
        name=name or person_id,
        membership=MembershipType.MONTHLY,
        last_payment_date=None if paid_days_ago is None else NOW - timedelta(days=paid_days_ago),
    )


def test_daily_membership_is_always_current():
    for last in (None, NOW - timedelta(days=400), NOW):
        person = Person(person_id="d", name="Day", membership=MembershipType.DAILY, last_payment_date=last)
        assert payment_status(person, NOW).status == PaymentStatus.CURRENT


def test_thirty_one_days_is_overdue():
    info = payment_status(_monthly("p1", 31), NOW)
    assert info.status == PaymentStatus.OVERDUE
    assert info.days_overdue == 1


def test_exactly_thirty_days_is_current():
    info = payment_status(_monthly("p1", 30), NOW)
    assert info.status == PaymentStatus.CURRENT
    assert info.days_until_due == 0


def test_no_payment_yet_is_pending():
    assert payment_status(_monthly("p1", None), NOW).status == PaymentStatus.PENDING


def test_reminders_cover_the_look_ahead_window_sorted_by_days():
    people = [
        _monthly("late", 31),
        _monthly("in5", 25),
        _monthly("today", 30),
        _monthly("in10", 20),
        _monthly("also5", 25),
    ]
    reminders = payment_reminders(people, NOW, look_ahead_days=7)

    assert [(r.person.person_id, r.days_until_due) for r in reminders] == [
        ("today", 0),
        ("in5", 5),
        ("also5", 5),
    ]
    assert reminders[1].due_date == date(2026, 4, 20)


def test_overdue_people_most_overdue_first():
    people = [_monthly("a", 32), _monthly("b", 45), _monthly("c", 10)]
    assert [e.person.person_id for e in overdue_people(people, NOW)] == ["b", "a"]


def test_custom_cycle_calculator():
    calc = FixedCycleDueDateCalculator(cycle_days=7)
    assert payment_status(_monthly("p1", 8), NOW, calculator=calc).status == PaymentStatus.OVERDUE
