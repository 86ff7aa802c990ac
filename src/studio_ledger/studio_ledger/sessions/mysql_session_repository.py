from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DayOfWeek
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, group_by
from .model import RecurringSession
from .repository import SessionRepository


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, session_id: Optional[str] = None) -> list[RecurringSession]:
        where = "WHERE session_id=%s" if session_id else ""
        params = (session_id,) if session_id else ()

        cur.execute(
            f"""
            SELECT session_id, activity_id, instructor_id, space_id, day_of_week, start_time, level_id
            FROM sessions
            {where}
            ORDER BY FIELD(day_of_week,'MONDAY','TUESDAY','WEDNESDAY','THURSDAY','FRIDAY','SATURDAY','SUNDAY'),
                     start_time, session_id
            """,
            params,
        )
        rows = fetchall(cur)

        cur.execute(f"SELECT session_id, person_id FROM session_people {where}", params)
        roster = group_by(fetchall(cur), "session_id")
        cur.execute(f"SELECT session_id, person_id FROM session_waitlist {where} ORDER BY position", params)
        waitlist = group_by(fetchall(cur), "session_id")

        out: list[RecurringSession] = []
        for r in rows:
            sid = r["session_id"]
            out.append(
                RecurringSession(
                    session_id=sid,
                    activity_id=r["activity_id"],
                    instructor_id=r["instructor_id"],
                    space_id=r["space_id"],
                    day_of_week=DayOfWeek(r["day_of_week"]),
                    time=str(r["start_time"])[:5],
                    person_ids=frozenset(x["person_id"] for x in roster.get(sid, [])),
                    waitlist_ids=tuple(x["person_id"] for x in waitlist.get(sid, [])),
                    level_id=r.get("level_id"),
                )
            )
        return out

    def list_all(self) -> Sequence[RecurringSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load(cur)

    def get_by_id(self, session_id: str) -> Optional[RecurringSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            items = self._load(cur, session_id)
            return items[0] if items else None

    @staticmethod
    def _write(cur, s: RecurringSession) -> None:
        cur.execute(
            """
            INSERT INTO sessions(session_id, activity_id, instructor_id, space_id, day_of_week, start_time, level_id)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                activity_id=VALUES(activity_id),
                instructor_id=VALUES(instructor_id),
                space_id=VALUES(space_id),
                day_of_week=VALUES(day_of_week),
                start_time=VALUES(start_time),
                level_id=VALUES(level_id)
            """,
            (s.session_id, s.activity_id, s.instructor_id, s.space_id, s.day_of_week.value, s.time, s.level_id),
        )

        cur.execute("DELETE FROM session_people WHERE session_id=%s", (s.session_id,))
        if s.person_ids:
            cur.executemany(
                "INSERT INTO session_people(session_id, person_id) VALUES(%s,%s)",
                [(s.session_id, pid) for pid in sorted(s.person_ids)],
            )

        cur.execute("DELETE FROM session_waitlist WHERE session_id=%s", (s.session_id,))
        if s.waitlist_ids:
            cur.executemany(
                "INSERT INTO session_waitlist(session_id, person_id, position) VALUES(%s,%s,%s)",
                [(s.session_id, pid, i) for i, pid in enumerate(s.waitlist_ids)],
            )

    def save(self, session: RecurringSession) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write(cur, session)

    def save_many(self, sessions: Sequence[RecurringSession]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for s in sessions:
                self._write(cur, s)

    def delete(self, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sessions WHERE session_id=%s", (session_id,))
            return cur.rowcount > 0
