from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Person


class PersonRepository(Protocol):
    def list_all(self) -> Sequence[Person]:
        raise NotImplementedError

    def get_by_id(self, person_id: str) -> Optional[Person]:
        raise NotImplementedError

    def save(self, person: Person) -> None:
        """Upsert profile fields and vacation periods.

        Recovery credits are written by the attendance ledger, not here.
        """

        raise NotImplementedError

    def delete_with_enrollments(self, person_id: str) -> bool:
        """Delete the person and drop them from every roster and waitlist."""

        raise NotImplementedError
