from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Activity, Space, Specialist
from .repository import CatalogRepository


class MySQLCatalogRepository(CatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_activities(self) -> Sequence[Activity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT activity_id, name FROM activities ORDER BY name ASC")
            return [Activity(activity_id=r["activity_id"], name=r["name"]) for r in fetchall(cur)]

    def list_specialists(self) -> Sequence[Specialist]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT specialist_id, name, phone FROM specialists ORDER BY name ASC")
            return [
                Specialist(specialist_id=r["specialist_id"], name=r["name"], phone=r.get("phone") or "")
                for r in fetchall(cur)
            ]

    def list_spaces(self) -> Sequence[Space]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT space_id, name, capacity FROM spaces ORDER BY name ASC")
            return [Space(space_id=r["space_id"], name=r["name"], capacity=int(r["capacity"])) for r in fetchall(cur)]

    def save_activity(self, activity: Activity) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO activities(activity_id, name) VALUES(%s,%s) ON DUPLICATE KEY UPDATE name=VALUES(name)",
                (activity.activity_id, activity.name),
            )

    def save_specialist(self, specialist: Specialist) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO specialists(specialist_id, name, phone) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE name=VALUES(name), phone=VALUES(phone)
                """,
                (specialist.specialist_id, specialist.name, specialist.phone),
            )

    def save_space(self, space: Space) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO spaces(space_id, name, capacity) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE name=VALUES(name), capacity=VALUES(capacity)
                """,
                (space.space_id, space.name, int(space.capacity)),
            )

    def _delete(self, table: str, id_col: str, entity_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {table} WHERE {id_col}=%s", (entity_id,))
            return cur.rowcount > 0

    def delete_activity(self, activity_id: str) -> bool:
        return self._delete("activities", "activity_id", activity_id)

    def delete_specialist(self, specialist_id: str) -> bool:
        return self._delete("specialists", "specialist_id", specialist_id)

    def delete_space(self, space_id: str) -> bool:
        return self._delete("spaces", "space_id", space_id)
