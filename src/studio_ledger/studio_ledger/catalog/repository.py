from __future__ import annotations

from typing import Protocol, Sequence

from .model import Activity, Space, Specialist


class CatalogRepository(Protocol):
    """Activities, specialists and spaces referenced by sessions."""

    def list_activities(self) -> Sequence[Activity]:
        raise NotImplementedError

    def list_specialists(self) -> Sequence[Specialist]:
        raise NotImplementedError

    def list_spaces(self) -> Sequence[Space]:
        raise NotImplementedError

    def save_activity(self, activity: Activity) -> None:
        raise NotImplementedError

    def save_specialist(self, specialist: Specialist) -> None:
        raise NotImplementedError

    def save_space(self, space: Space) -> None:
        raise NotImplementedError

    def delete_activity(self, activity_id: str) -> bool:
        raise NotImplementedError

    def delete_specialist(self, specialist_id: str) -> bool:
        raise NotImplementedError

    def delete_space(self, space_id: str) -> bool:
        raise NotImplementedError
