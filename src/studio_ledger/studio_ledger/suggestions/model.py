from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import SuggestionType


@dataclass(frozen=True)
class Suggestion:
    """One actionable hint for the studio manager."""

    kind: SuggestionType
    message: str
