from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.constants import DEFAULT_REMINDER_DAYS
from ..core.exceptions import NotFoundError, ValidationError
from ..state import StudioState
from .calculator.base import DueDateCalculator
from .calculator.standard_calculator import FixedCycleDueDateCalculator
from .model import OverdueEntry, Payment, PaymentReminder, PaymentStatusInfo
from .repository import PaymentRepository
from .status import overdue_people, payment_reminders, payment_status

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(
        self,
        payments: PaymentRepository,
        *,
        calculator: Optional[DueDateCalculator] = None,
        reminder_days: int = DEFAULT_REMINDER_DAYS,
    ):
        self._payments = payments
        self._calculator = calculator or FixedCycleDueDateCalculator()
        self._reminder_days = int(reminder_days)

    def record_payment(
        self, state: StudioState, person_id: str, amount, *, now: Optional[datetime] = None
    ) -> StudioState:
        now = now or datetime.now()
        person = state.person(person_id)
        if person is None:
            raise NotFoundError("Person not found")

        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            raise ValidationError("Invalid amount")
        if not value.is_finite():
            raise ValidationError("Invalid amount")
        if value < 0:
            raise ValidationError("Amount cannot be negative")

        payment = Payment(payment_id=uuid.uuid4().hex, person_id=person_id, paid_at=now, amount=value)
        self._payments.add(payment, last_payment_date=now)
        logger.info("Recorded payment %s of %s for person %s", payment.payment_id, value, person_id)

        state = state.with_payments((payment,) + state.payments)
        return state.with_people([replace(person, last_payment_date=now)])

    def undo_last_payment(self, state: StudioState, person_id: str) -> StudioState:
        """Delete the most recent payment; the last payment date falls back to the one before."""
        person = state.person(person_id)
        if person is None:
            raise NotFoundError("Person not found")

        history = state.payments_for(person_id)
        if not history:
            raise ValidationError("No payments to undo")

        last = history[0]
        previous = history[1].paid_at if len(history) > 1 else None
        if not self._payments.delete(last, last_payment_date=previous):
            raise ValidationError("Payment could not be deleted")
        logger.info("Reverted payment %s for person %s", last.payment_id, person_id)

        state = state.with_payments(p for p in state.payments if p.payment_id != last.payment_id)
        return state.with_people([replace(person, last_payment_date=previous)])

    def status_for(self, state: StudioState, person_id: str, *, now: Optional[datetime] = None) -> PaymentStatusInfo:
        person = state.person(person_id)
        if person is None:
            raise NotFoundError("Person not found")
        return payment_status(person, now or datetime.now(), calculator=self._calculator)

    def reminders(
        self, state: StudioState, *, now: Optional[datetime] = None, look_ahead_days: Optional[int] = None
    ) -> list[PaymentReminder]:
        days = self._reminder_days if look_ahead_days is None else int(look_ahead_days)
        if days < 0:
            raise ValidationError("Look-ahead window cannot be negative")
        return payment_reminders(state.people, now or datetime.now(), look_ahead_days=days, calculator=self._calculator)

    def overdue(self, state: StudioState, *, now: Optional[datetime] = None) -> list[OverdueEntry]:
        return overdue_people(state.people, now or datetime.now(), calculator=self._calculator)
