from __future__ import annotations

from enum import Enum


class DayOfWeek(str, Enum):
    """Weekday a recurring session repeats on."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, value) -> "DayOfWeek":
        return list(cls)[value.weekday()]

    @property
    def index(self) -> int:
        return list(DayOfWeek).index(self)


class MembershipType(str, Enum):
    DAILY = "DAILY"
    MONTHLY = "MONTHLY"


class PaymentStatus(str, Enum):
    """Derived payment state shown next to each person."""

    CURRENT = "CURRENT"
    OVERDUE = "OVERDUE"
    PENDING = "PENDING"


class AttendanceMark(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    JUSTIFIED = "JUSTIFIED"
    ONE_TIME = "ONE_TIME"


class SuggestionType(str, Enum):
    CONFLICT = "CONFLICT"
    OPTIMIZATION = "OPTIMIZATION"
    INFO = "INFO"
