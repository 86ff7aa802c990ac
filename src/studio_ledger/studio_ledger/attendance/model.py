from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..people.model import RecoveryCredit


@dataclass(frozen=True)
class AttendanceRecord:
    """Attendance of one occurrence ``(session_id, occurrence_date)``.

    ``present_ids``, ``absent_ids`` and ``justified_ids`` are disjoint subsets of the
    roster. ``one_time_ids`` are make-up attendees who are not on the roster;
    ``redeemed_credits`` pairs those who paid with a recovery credit with that credit.
    ``credits_granted`` stays set once a cancellation has handed out credits, even
    after they are spent.
    """

    session_id: str
    occurrence_date: date
    present_ids: frozenset[str] = field(default_factory=frozenset)
    absent_ids: frozenset[str] = field(default_factory=frozenset)
    justified_ids: frozenset[str] = field(default_factory=frozenset)
    one_time_ids: frozenset[str] = field(default_factory=frozenset)
    redeemed_credits: frozenset[tuple[str, RecoveryCredit]] = field(default_factory=frozenset)
    cancelled: bool = False
    credits_granted: bool = False

    @property
    def key(self) -> tuple[str, date]:
        return self.session_id, self.occurrence_date

    def credit_redeemed_by(self, person_id: str) -> Optional[RecoveryCredit]:
        return next((c for pid, c in self.redeemed_credits if pid == person_id), None)

    @classmethod
    def empty(cls, session_id: str, occurrence_date: date) -> "AttendanceRecord":
        return cls(session_id=session_id, occurrence_date=occurrence_date)
