from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...core.constants import PAYMENT_CYCLE_DAYS
from ...core.enums import MembershipType
from ...people.model import Person
from .base import DueDateCalculator


class FixedCycleDueDateCalculator(DueDateCalculator):
    """Standard rule: last payment + ``cycle_days``; daily members are never due."""

    def __init__(self, cycle_days: int = PAYMENT_CYCLE_DAYS):
        self._cycle = timedelta(days=int(cycle_days))

    def due_at(self, person: Person) -> Optional[datetime]:
        if person.membership == MembershipType.DAILY or person.last_payment_date is None:
            return None
        return person.last_payment_date + self._cycle
