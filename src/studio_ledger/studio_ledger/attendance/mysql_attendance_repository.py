from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceMark
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall
from ..people.model import RecoveryCredit
from .model import AttendanceRecord
from .repository import AttendanceRepository

_MARK_FIELDS = {
    AttendanceMark.PRESENT: "present_ids",
    AttendanceMark.ABSENT: "absent_ids",
    AttendanceMark.JUSTIFIED: "justified_ids",
    AttendanceMark.ONE_TIME: "one_time_ids",
}


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, key: Optional[tuple[str, date]] = None) -> list[AttendanceRecord]:
        where = "WHERE session_id=%s AND occurrence_date=%s" if key else ""
        params = key or ()

        cur.execute(f"SELECT session_id, occurrence_date, cancelled, credits_granted FROM attendance {where}", params)
        heads = fetchall(cur)
        cur.execute(
            f"""
            SELECT session_id, occurrence_date, person_id, mark, credit_session_id, credit_occurrence_date
            FROM attendance_marks
            {where}
            """,
            params,
        )

        marks: dict[tuple[str, date], dict[str, set]] = {}
        for m in fetchall(cur):
            bucket = marks.setdefault((m["session_id"], as_date(m["occurrence_date"])), {})
            bucket.setdefault(_MARK_FIELDS[AttendanceMark(m["mark"])], set()).add(m["person_id"])
            if m.get("credit_session_id"):
                spent = RecoveryCredit(
                    session_id=m["credit_session_id"], occurrence_date=as_date(m["credit_occurrence_date"])
                )
                bucket.setdefault("redeemed_credits", set()).add((m["person_id"], spent))

        out: list[AttendanceRecord] = []
        for h in heads:
            k = (h["session_id"], as_date(h["occurrence_date"]))
            fields = {name: frozenset(items) for name, items in marks.get(k, {}).items()}
            out.append(
                AttendanceRecord(
                    session_id=k[0],
                    occurrence_date=k[1],
                    cancelled=bool(h["cancelled"]),
                    credits_granted=bool(h["credits_granted"]),
                    **fields,
                )
            )
        return out

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load(cur)

    def get(self, session_id: str, occurrence_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            items = self._load(cur, (session_id, occurrence_date))
            return items[0] if items else None

    @staticmethod
    def _write(cur, record: AttendanceRecord) -> None:
        cur.execute(
            """
            INSERT INTO attendance(session_id, occurrence_date, cancelled, credits_granted)
            VALUES(%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE cancelled=VALUES(cancelled), credits_granted=VALUES(credits_granted)
            """,
            (record.session_id, record.occurrence_date, int(record.cancelled), int(record.credits_granted)),
        )
        cur.execute(
            "DELETE FROM attendance_marks WHERE session_id=%s AND occurrence_date=%s",
            (record.session_id, record.occurrence_date),
        )

        spent = dict(record.redeemed_credits)
        rows = []
        for mark, name in _MARK_FIELDS.items():
            for pid in sorted(getattr(record, name)):
                credit = spent.get(pid) if mark == AttendanceMark.ONE_TIME else None
                rows.append(
                    (
                        record.session_id,
                        record.occurrence_date,
                        pid,
                        mark.value,
                        credit.session_id if credit else None,
                        credit.occurrence_date if credit else None,
                    )
                )
        if rows:
            cur.executemany(
                """
                INSERT INTO attendance_marks(
                    session_id, occurrence_date, person_id, mark, credit_session_id, credit_occurrence_date
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )

    def save(self, record: AttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write(cur, record)

    def save_cancellation(
        self,
        *,
        record: AttendanceRecord,
        credits: Sequence[tuple[str, RecoveryCredit]],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write(cur, record)
            if credits:
                # Primary key (person, session, date) makes a repeated grant a no-op.
                cur.executemany(
                    "INSERT IGNORE INTO recovery_credits(person_id, session_id, occurrence_date) VALUES(%s,%s,%s)",
                    [(pid, c.session_id, c.occurrence_date) for pid, c in credits],
                )

    def redeem_credit(self, *, record: AttendanceRecord, person_id: str, credit: RecoveryCredit) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write(cur, record)
            cur.execute(
                "DELETE FROM recovery_credits WHERE person_id=%s AND session_id=%s AND occurrence_date=%s",
                (person_id, credit.session_id, credit.occurrence_date),
            )
