from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import RecurringSession


class SessionRepository(Protocol):
    def list_all(self) -> Sequence[RecurringSession]:
        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[RecurringSession]:
        raise NotImplementedError

    def save(self, session: RecurringSession) -> None:
        """Insert or update the slot together with its roster and waitlist."""

        raise NotImplementedError

    def save_many(self, sessions: Sequence[RecurringSession]) -> None:
        """Same as ``save`` for several sessions, in one transaction."""

        raise NotImplementedError

    def delete(self, session_id: str) -> bool:
        raise NotImplementedError
