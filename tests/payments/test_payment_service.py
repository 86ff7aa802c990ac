from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from src.studio_ledger.studio_ledger.core.enums import PaymentStatus
from src.studio_ledger.studio_ledger.core.exceptions import NotFoundError, ValidationError
from src.studio_ledger.studio_ledger.payments.model import Payment
from src.studio_ledger.studio_ledger.payments.service import PaymentService
from src.studio_ledger.studio_ledger.people.model import Person
from src.studio_ledger.studio_ledger.state import StudioState


class InMemoryPayments:
    def __init__(self):
        self.payments: list[Payment] = []
        self.last_dates: dict[str, object] = {}

    def list_all(self):
        return sorted(self.payments, key=lambda p: p.paid_at, reverse=True)

    def add(self, payment, *, last_payment_date):
        self.payments.append(payment)
        self.last_dates[payment.person_id] = last_payment_date

    def delete(self, payment, *, last_payment_date):
        if payment not in self.payments:
            return False
        self.payments.remove(payment)
        self.last_dates[payment.person_id] = last_payment_date
        return True


FIRST = datetime(2026, 1, 10, 9, 30)
SECOND = datetime(2026, 2, 10, 9, 30)


def _state() -> StudioState:
    return StudioState(people=(Person(person_id="p1", name="Ana"),))


def test_record_payment_moves_last_payment_date():
    repo = InMemoryPayments()
    service = PaymentService(repo)

    state = service.record_payment(_state(), "p1", "45.50", now=FIRST)

    assert state.person("p1").last_payment_date == FIRST
    assert repo.last_dates["p1"] == FIRST
    assert state.payments_for("p1")[0].amount == Decimal("45.50")
    assert service.status_for(state, "p1", now=FIRST).status == PaymentStatus.CURRENT


def test_undo_restores_previous_payment_date():
    repo = InMemoryPayments()
    service = PaymentService(repo)
    state = service.record_payment(_state(), "p1", 40, now=FIRST)
    state = service.record_payment(state, "p1", 40, now=SECOND)

    state = service.undo_last_payment(state, "p1")
    assert state.person("p1").last_payment_date == FIRST
    assert repo.last_dates["p1"] == FIRST

    state = service.undo_last_payment(state, "p1")
    assert state.person("p1").last_payment_date is None
    assert state.payments_for("p1") == []


def test_undo_without_payments_fails():
    with pytest.raises(ValidationError):
        PaymentService(InMemoryPayments()).undo_last_payment(_state(), "p1")


@pytest.mark.parametrize("amount", ["abc", "-5", "NaN", "Infinity", "-Infinity", "sNaN"])
def test_invalid_amounts_are_rejected(amount):
    with pytest.raises(ValidationError):
        PaymentService(InMemoryPayments()).record_payment(_state(), "p1", amount, now=FIRST)


def test_unknown_person():
    with pytest.raises(NotFoundError):
        PaymentService(InMemoryPayments()).record_payment(_state(), "nobody", 10, now=FIRST)


def test_reminders_use_configured_window():
    service = PaymentService(InMemoryPayments(), reminder_days=3)
    state = service.record_payment(_state(), "p1", 40, now=FIRST)

    assert service.reminders(state, now=datetime(2026, 2, 5, 9, 0)) == []
    assert [r.person.person_id for r in service.reminders(state, now=datetime(2026, 2, 7, 9, 0))] == ["p1"]
    with pytest.raises(ValidationError):
        service.reminders(state, now=FIRST, look_ahead_days=-1)
