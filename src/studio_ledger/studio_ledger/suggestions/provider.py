from __future__ import annotations

from abc import ABC, abstractmethod

from ..state import StudioState
from .model import Suggestion


class SuggestionProvider(ABC):
    """Strategy Pattern: anything that can look at the studio and suggest one thing.

    Implementations must not modify the state they are given.
    """

    @abstractmethod
    def suggest(self, state: StudioState) -> Suggestion:
        raise NotImplementedError
