from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..core.constants import DEFAULT_REMINDER_DAYS
from ..core.enums import MembershipType, PaymentStatus
from ..people.model import Person
from .calculator.base import DueDateCalculator
from .calculator.standard_calculator import FixedCycleDueDateCalculator
from .model import OverdueEntry, PaymentReminder, PaymentStatusInfo

_DEFAULT_CALCULATOR = FixedCycleDueDateCalculator()


def payment_status(
    person: Person, now: datetime, *, calculator: Optional[DueDateCalculator] = None
) -> PaymentStatusInfo:
    """Daily members are always current; otherwise overdue once the due date is strictly past."""
    if person.membership == MembershipType.DAILY:
        return PaymentStatusInfo(status=PaymentStatus.CURRENT)
    if person.last_payment_date is None:
        return PaymentStatusInfo(status=PaymentStatus.PENDING)

    due = (calculator or _DEFAULT_CALCULATOR).due_at(person)
    if due is None:
        return PaymentStatusInfo(status=PaymentStatus.CURRENT)

    if due < now:
        return PaymentStatusInfo(
            status=PaymentStatus.OVERDUE,
            due_date=due.date(),
            days_overdue=(now.date() - due.date()).days,
        )
    return PaymentStatusInfo(
        status=PaymentStatus.CURRENT,
        due_date=due.date(),
        days_until_due=(due.date() - now.date()).days,
    )


def payment_reminders(
    people: Iterable[Person],
    now: datetime,
    *,
    look_ahead_days: int = DEFAULT_REMINDER_DAYS,
    calculator: Optional[DueDateCalculator] = None,
) -> list[PaymentReminder]:
    """Current members whose due date falls within the next ``look_ahead_days`` days."""
    out: list[PaymentReminder] = []
    for person in people:
        info = payment_status(person, now, calculator=calculator)
        if info.status != PaymentStatus.CURRENT or info.days_until_due is None:
            continue
        if 0 <= info.days_until_due <= look_ahead_days:
            out.append(PaymentReminder(person=person, due_date=info.due_date, days_until_due=info.days_until_due))

    # sort is stable: ties keep input order
    out.sort(key=lambda r: r.days_until_due)
    return out


def overdue_people(
    people: Iterable[Person], now: datetime, *, calculator: Optional[DueDateCalculator] = None
) -> list[OverdueEntry]:
    out: list[OverdueEntry] = []
    for person in people:
        info = payment_status(person, now, calculator=calculator)
        if info.status == PaymentStatus.OVERDUE:
            out.append(OverdueEntry(person=person, due_date=info.due_date, days_overdue=info.days_overdue))
    out.sort(key=lambda e: e.days_overdue, reverse=True)
    return out
