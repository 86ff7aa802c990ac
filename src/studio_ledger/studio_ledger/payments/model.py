from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PaymentStatus
from ..people.model import Person


@dataclass(frozen=True)
class Payment:
    payment_id: str
    person_id: str
    paid_at: datetime
    amount: Decimal
    months: int = 1


@dataclass(frozen=True)
class PaymentStatusInfo:
    status: PaymentStatus
    due_date: Optional[date] = None
    days_overdue: Optional[int] = None
    days_until_due: Optional[int] = None


@dataclass(frozen=True)
class PaymentReminder:
    """Read-model for the upcoming-payments list."""

    person: Person
    due_date: date
    days_until_due: int


@dataclass(frozen=True)
class OverdueEntry:
    person: Person
    due_date: date
    days_overdue: int
