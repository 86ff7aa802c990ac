from __future__ import annotations

from collections import defaultdict

from ..core.constants import LOW_OCCUPANCY_RATIO
from ..core.enums import SuggestionType
from ..sessions.model import RecurringSession
from ..state import StudioState
from .model import Suggestion
from .provider import SuggestionProvider


class RuleBasedSuggestionProvider(SuggestionProvider):
    """Deterministic provider: scheduling conflicts first, then under-used rooms."""

    def __init__(self, *, low_occupancy_ratio: float = LOW_OCCUPANCY_RATIO):
        self._ratio = float(low_occupancy_ratio)

    def suggest(self, state: StudioState) -> Suggestion:
        conflict = self._find_conflict(state)
        if conflict:
            return Suggestion(kind=SuggestionType.CONFLICT, message=conflict)

        optimization = self._find_low_occupancy(state)
        if optimization:
            return Suggestion(kind=SuggestionType.OPTIMIZATION, message=optimization)

        return Suggestion(kind=SuggestionType.INFO, message="Everything looks in order at the studio.")

    @staticmethod
    def _find_conflict(state: StudioState) -> str | None:
        by_instructor: dict[tuple, list[RecurringSession]] = defaultdict(list)
        by_space: dict[tuple, list[RecurringSession]] = defaultdict(list)
        for s in sorted(state.sessions, key=lambda s: (s.day_of_week.index, s.time, s.session_id)):
            by_instructor[(s.instructor_id,) + s.slot()].append(s)
            by_space[(s.space_id,) + s.slot()].append(s)

        for (instructor_id, day, hhmm), items in by_instructor.items():
            if len(items) > 1:
                return (
                    f"Schedule conflict: {state.specialist_name(instructor_id)} teaches "
                    f"{len(items)} classes on {day.value} at {hhmm}."
                )

        for (space_id, day, hhmm), items in by_space.items():
            if len(items) > 1:
                space = state.space(space_id)
                name = space.name if space else space_id
                return f"Schedule conflict: {name} hosts {len(items)} classes on {day.value} at {hhmm}."
        return None

    def _find_low_occupancy(self, state: StudioState) -> str | None:
        for s in sorted(state.sessions, key=lambda s: (s.day_of_week.index, s.time, s.session_id)):
            space = state.space(s.space_id)
            if space is None or space.capacity <= 0:
                continue
            enrolled = len(s.person_ids)
            if enrolled / space.capacity >= self._ratio:
                continue

            busy = {o.space_id for o in state.sessions if o.slot() == s.slot() and o.session_id != s.session_id}
            smaller = [
                sp
                for sp in state.spaces
                if sp.space_id != space.space_id
                and sp.space_id not in busy
                and enrolled <= sp.capacity < space.capacity
            ]
            label = state.session_label(s)
            if smaller:
                target = min(smaller, key=lambda sp: sp.capacity)
                return (
                    f"Optimization: {label} in {space.name} has {enrolled}/{space.capacity} people. "
                    f"It could move to {target.name} (capacity {target.capacity}), free at that time."
                )
            return f"Optimization: {label} in {space.name} has only {enrolled}/{space.capacity} people."
        return None
