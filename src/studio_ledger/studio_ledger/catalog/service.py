from __future__ import annotations

import uuid
from dataclasses import replace

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..state import StudioState
from .model import Activity, Space, Specialist
from .repository import CatalogRepository


class CatalogService:
    """Activities, specialists and spaces. Deletion is refused while sessions use them."""

    def __init__(self, catalog: CatalogRepository):
        self._catalog = catalog

    def add_activity(self, state: StudioState, *, name: str) -> tuple[StudioState, Activity]:
        activity = Activity(activity_id=uuid.uuid4().hex, name=require_non_empty(name, "Name"))
        self._catalog.save_activity(activity)
        return replace(state, activities=state.activities + (activity,)), activity

    def add_specialist(self, state: StudioState, *, name: str, phone: str = "") -> tuple[StudioState, Specialist]:
        specialist = Specialist(
            specialist_id=uuid.uuid4().hex,
            name=require_non_empty(name, "Name"),
            phone=(phone or "").strip(),
        )
        self._catalog.save_specialist(specialist)
        return replace(state, specialists=state.specialists + (specialist,)), specialist

    def add_space(self, state: StudioState, *, name: str, capacity: int) -> tuple[StudioState, Space]:
        if int(capacity) < 0:
            raise ValidationError("Capacity cannot be negative")
        space = Space(space_id=uuid.uuid4().hex, name=require_non_empty(name, "Name"), capacity=int(capacity))
        self._catalog.save_space(space)
        return replace(state, spaces=state.spaces + (space,)), space

    @staticmethod
    def _check_unused(state: StudioState, field: str, entity_id: str, label: str) -> None:
        users = [s for s in state.sessions if getattr(s, field) == entity_id]
        if users:
            details = "\n".join(f"- {state.session_label(s)}" for s in users)
            raise ValidationError(f"{label} is assigned to {len(users)} class(es):\n{details}")

    def delete_activity(self, state: StudioState, activity_id: str) -> StudioState:
        self._check_unused(state, "activity_id", activity_id, state.activity_name(activity_id))
        if not self._catalog.delete_activity(activity_id):
            raise ValidationError("Activity could not be deleted")
        return replace(state, activities=tuple(a for a in state.activities if a.activity_id != activity_id))

    def delete_specialist(self, state: StudioState, specialist_id: str) -> StudioState:
        self._check_unused(state, "instructor_id", specialist_id, state.specialist_name(specialist_id))
        if not self._catalog.delete_specialist(specialist_id):
            raise ValidationError("Specialist could not be deleted")
        return replace(state, specialists=tuple(s for s in state.specialists if s.specialist_id != specialist_id))

    def delete_space(self, state: StudioState, space_id: str) -> StudioState:
        space = state.space(space_id)
        self._check_unused(state, "space_id", space_id, space.name if space else space_id)
        if not self._catalog.delete_space(space_id):
            raise ValidationError("Space could not be deleted")
        return replace(state, spaces=tuple(s for s in state.spaces if s.space_id != space_id))
