from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..people.model import RecoveryCredit
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get(self, session_id: str, occurrence_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> None:
        """Create or replace the record for ``record.key``."""

        raise NotImplementedError

    def save_cancellation(
        self,
        *,
        record: AttendanceRecord,
        credits: Sequence[tuple[str, RecoveryCredit]],
    ) -> None:
        """Store a cancelled record and hand each ``(person_id, credit)`` pair out, atomically.

        Handing out a credit a person already holds must be a no-op.
        """

        raise NotImplementedError

    def redeem_credit(self, *, record: AttendanceRecord, person_id: str, credit: RecoveryCredit) -> None:
        """Store ``record`` and remove ``credit`` from the person atomically."""

        raise NotImplementedError
