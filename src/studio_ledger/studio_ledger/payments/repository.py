from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Payment


class PaymentRepository(Protocol):
    def list_all(self) -> Sequence[Payment]:
        """All payments, most recent first."""

        raise NotImplementedError

    def add(self, payment: Payment, *, last_payment_date: datetime) -> None:
        """Insert ``payment`` and move the person's last payment date, atomically."""

        raise NotImplementedError

    def delete(self, payment: Payment, *, last_payment_date: Optional[datetime]) -> bool:
        """Delete ``payment`` and restore the person's last payment date, atomically."""

        raise NotImplementedError
