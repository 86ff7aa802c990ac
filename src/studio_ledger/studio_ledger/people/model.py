from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import MembershipType


@dataclass(frozen=True, order=True)
class RecoveryCredit:
    """Make-up class owed for a cancelled occurrence ``(session_id, occurrence_date)``."""

    occurrence_date: date
    session_id: str


@dataclass(frozen=True)
class VacationPeriod:
    vacation_id: str
    start_date: date
    end_date: date

    def covers(self, on_date: date) -> bool:
        return self.start_date <= on_date <= self.end_date


@dataclass(frozen=True)
class Person:
    person_id: str
    name: str
    phone: str = ""
    join_date: Optional[date] = None
    membership: MembershipType = MembershipType.MONTHLY
    last_payment_date: Optional[datetime] = None
    tariff_id: Optional[str] = None
    notes: Optional[str] = None
    vacation_periods: tuple[VacationPeriod, ...] = ()
    recovery_credits: frozenset[RecoveryCredit] = field(default_factory=frozenset)

    def with_credits(self, credits) -> "Person":
        return replace(self, recovery_credits=frozenset(credits))

    def is_on_vacation(self, on_date: date) -> bool:
        return any(v.covers(on_date) for v in self.vacation_periods)

    def oldest_credit(self) -> Optional[RecoveryCredit]:
        return min(self.recovery_credits) if self.recovery_credits else None
