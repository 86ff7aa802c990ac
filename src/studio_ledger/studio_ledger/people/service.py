from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.validators import require_non_empty
from ..core.enums import MembershipType
from ..core.exceptions import NotFoundError, ValidationError
from ..state import StudioState
from .model import Person, VacationPeriod
from .repository import PersonRepository

logger = logging.getLogger(__name__)


def parse_membership(value) -> MembershipType:
    try:
        return MembershipType(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid membership type: {value!r}")


class PeopleService:
    """Use case: manage studio members."""

    def __init__(self, people: PersonRepository):
        self._people = people

    @staticmethod
    def get_person(state: StudioState, person_id: str) -> Person:
        person = state.person(person_id)
        if person is None:
            raise NotFoundError("Person not found")
        return person

    def add_person(
        self,
        state: StudioState,
        *,
        name: str,
        phone: str = "",
        membership=MembershipType.MONTHLY,
        tariff_id: Optional[str] = None,
        notes: Optional[str] = None,
        join_date: Optional[date] = None,
    ) -> tuple[StudioState, Person]:
        # New members start without a payment date (status PENDING).
        person = Person(
            person_id=uuid.uuid4().hex,
            name=require_non_empty(name, "Name"),
            phone=(phone or "").strip(),
            join_date=join_date or date.today(),
            membership=parse_membership(membership),
            tariff_id=(tariff_id or "").strip() or None,
            notes=(notes or "").strip() or None,
        )
        self._people.save(person)
        logger.info("Added person %s", person.person_id)
        return state.with_people([person]), person

    def update_person(self, state: StudioState, person_id: str, **changes) -> StudioState:
        person = self.get_person(state, person_id)

        fields = {}
        if changes.get("name") is not None:
            fields["name"] = require_non_empty(changes["name"], "Name")
        if changes.get("phone") is not None:
            fields["phone"] = changes["phone"].strip()
        if changes.get("membership") is not None:
            fields["membership"] = parse_membership(changes["membership"])
        for name in ("tariff_id", "notes"):
            if name in changes:
                fields[name] = (changes[name] or "").strip() or None

        updated = replace(person, **fields)
        self._people.save(updated)
        return state.with_people([updated])

    def delete_person(self, state: StudioState, person_id: str) -> StudioState:
        self.get_person(state, person_id)
        if not self._people.delete_with_enrollments(person_id):
            raise ValidationError("Person could not be deleted")
        logger.info("Deleted person %s", person_id)
        return state.without_person(person_id)

    def add_vacation(self, state: StudioState, person_id: str, start_date: date, end_date: date) -> StudioState:
        person = self.get_person(state, person_id)
        if end_date < start_date:
            raise ValidationError("Vacation end must not be before its start")

        period = VacationPeriod(vacation_id=uuid.uuid4().hex, start_date=start_date, end_date=end_date)
        updated = replace(person, vacation_periods=person.vacation_periods + (period,))
        self._people.save(updated)
        return state.with_people([updated])

    def remove_vacation(self, state: StudioState, person_id: str, vacation_id: str) -> StudioState:
        person = self.get_person(state, person_id)
        remaining = tuple(v for v in person.vacation_periods if v.vacation_id != vacation_id)
        if len(remaining) == len(person.vacation_periods):
            raise NotFoundError("Vacation period not found")

        updated = replace(person, vacation_periods=remaining)
        self._people.save(updated)
        return state.with_people([updated])

    @staticmethod
    def is_on_vacation(person: Person, on_date: date) -> bool:
        return person.is_on_vacation(on_date)
