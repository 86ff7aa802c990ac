from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Activity:
    activity_id: str
    name: str


@dataclass(frozen=True)
class Specialist:
    specialist_id: str
    name: str
    phone: str = ""


@dataclass(frozen=True)
class Space:
    space_id: str
    name: str
    capacity: int = 0
