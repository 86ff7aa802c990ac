from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Payment
from .repository import PaymentRepository


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payment_id, person_id, paid_at, amount, months
                FROM payments
                ORDER BY paid_at DESC
                """
            )
            return [
                Payment(
                    payment_id=r["payment_id"],
                    person_id=r["person_id"],
                    paid_at=r["paid_at"],
                    amount=Decimal(r["amount"]),
                    months=int(r["months"]),
                )
                for r in fetchall(cur)
            ]

    def add(self, payment: Payment, *, last_payment_date: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO payments(payment_id, person_id, paid_at, amount, months) VALUES(%s,%s,%s,%s,%s)",
                (payment.payment_id, payment.person_id, payment.paid_at, payment.amount, int(payment.months)),
            )
            cur.execute(
                "UPDATE people SET last_payment_date=%s WHERE person_id=%s",
                (last_payment_date, payment.person_id),
            )

    def delete(self, payment: Payment, *, last_payment_date: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payments WHERE payment_id=%s", (payment.payment_id,))
            if cur.rowcount <= 0:
                return False
            cur.execute(
                "UPDATE people SET last_payment_date=%s WHERE person_id=%s",
                (last_payment_date, payment.person_id),
            )
            return True
