from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ...people.model import Person


class DueDateCalculator(ABC):
    """Calculator interface (Strategy Pattern for membership billing)."""

    @abstractmethod
    def due_at(self, person: Person) -> Optional[datetime]:
        """When the next payment is due, or None if the person is never billed."""

        raise NotImplementedError
