from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MembershipType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, group_by
from .model import Person, RecoveryCredit, VacationPeriod
from .repository import PersonRepository


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, person_id: Optional[str] = None) -> list[Person]:
        where = "WHERE person_id=%s" if person_id else ""
        params = (person_id,) if person_id else ()

        cur.execute(
            f"""
            SELECT person_id, name, phone, join_date, membership_type, tariff_id, last_payment_date, notes
            FROM people
            {where}
            ORDER BY name ASC
            """,
            params,
        )
        rows = fetchall(cur)

        cur.execute(
            f"SELECT vacation_id, person_id, start_date, end_date FROM vacation_periods {where} ORDER BY start_date",
            params,
        )
        vacations = group_by(fetchall(cur), "person_id")
        cur.execute(f"SELECT person_id, session_id, occurrence_date FROM recovery_credits {where}", params)
        credits = group_by(fetchall(cur), "person_id")

        out: list[Person] = []
        for r in rows:
            pid = r["person_id"]
            out.append(
                Person(
                    person_id=pid,
                    name=r["name"],
                    phone=r.get("phone") or "",
                    join_date=as_date(r.get("join_date")),
                    membership=MembershipType(r["membership_type"]),
                    last_payment_date=r.get("last_payment_date"),
                    tariff_id=r.get("tariff_id"),
                    notes=r.get("notes"),
                    vacation_periods=tuple(
                        VacationPeriod(
                            vacation_id=v["vacation_id"],
                            start_date=as_date(v["start_date"]),
                            end_date=as_date(v["end_date"]),
                        )
                        for v in vacations.get(pid, [])
                    ),
                    recovery_credits=frozenset(
                        RecoveryCredit(session_id=c["session_id"], occurrence_date=as_date(c["occurrence_date"]))
                        for c in credits.get(pid, [])
                    ),
                )
            )
        return out

    def list_all(self) -> Sequence[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load(cur)

    def get_by_id(self, person_id: str) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            items = self._load(cur, person_id)
            return items[0] if items else None

    def save(self, person: Person) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO people(person_id, name, phone, join_date, membership_type, tariff_id, last_payment_date, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name),
                    phone=VALUES(phone),
                    join_date=VALUES(join_date),
                    membership_type=VALUES(membership_type),
                    tariff_id=VALUES(tariff_id),
                    notes=VALUES(notes)
                """,
                (
                    person.person_id,
                    person.name,
                    person.phone,
                    person.join_date,
                    person.membership.value,
                    person.tariff_id,
                    person.last_payment_date,
                    person.notes,
                ),
            )

            cur.execute("DELETE FROM vacation_periods WHERE person_id=%s", (person.person_id,))
            if person.vacation_periods:
                cur.executemany(
                    "INSERT INTO vacation_periods(vacation_id, person_id, start_date, end_date) VALUES(%s,%s,%s,%s)",
                    [(v.vacation_id, person.person_id, v.start_date, v.end_date) for v in person.vacation_periods],
                )

    def delete_with_enrollments(self, person_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM session_people WHERE person_id=%s", (person_id,))
            cur.execute("DELETE FROM session_waitlist WHERE person_id=%s", (person_id,))
            cur.execute("DELETE FROM people WHERE person_id=%s", (person_id,))
            return cur.rowcount > 0
