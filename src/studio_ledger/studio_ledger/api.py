"""Shared helpers for the JSON controllers: error mapping and serializers."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .attendance.model import AttendanceRecord
from .common.datetime_utils import parse_iso_date
from .core.exceptions import DomainError, NotFoundError, PersistenceError, ValidationError
from .payments.model import OverdueEntry, Payment, PaymentReminder, PaymentStatusInfo
from .people.model import Person
from .sessions.model import RecurringSession
from .state import StudioState

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"success": False, "message": str(e)}), 404

    @app.errorhandler(PersistenceError)
    def _persistence(e: PersistenceError):
        logger.error("Store rejected write: %s", e)
        return jsonify({"success": False, "message": "The change could not be saved. Please retry."}), 503

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": "Internal error"}), 500


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data


def date_arg(value: Optional[str], *, default: Optional[date] = None) -> date:
    if not value:
        if default is None:
            raise ValidationError("Date is required")
        return default
    return parse_iso_date(value)


def ok(payload: Any = None, status: int = 200):
    body = {"success": True}
    if payload is not None:
        body["data"] = payload
    return jsonify(body), status


def _iso(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    return value.isoformat()


def session_to_dict(state: StudioState, s: RecurringSession) -> dict:
    return {
        "id": s.session_id,
        "activity_id": s.activity_id,
        "activity": state.activity_name(s.activity_id),
        "instructor_id": s.instructor_id,
        "instructor": state.specialist_name(s.instructor_id),
        "space_id": s.space_id,
        "day_of_week": s.day_of_week.value,
        "time": s.time,
        "person_ids": sorted(s.person_ids),
        "waitlist_ids": list(s.waitlist_ids),
        "level_id": s.level_id,
    }


def person_to_dict(p: Person, *, status: Optional[PaymentStatusInfo] = None) -> dict:
    out = {
        "id": p.person_id,
        "name": p.name,
        "phone": p.phone,
        "join_date": _iso(p.join_date),
        "membership": p.membership.value,
        "last_payment_date": _iso(p.last_payment_date),
        "tariff_id": p.tariff_id,
        "notes": p.notes,
        "vacation_periods": [
            {"id": v.vacation_id, "start_date": _iso(v.start_date), "end_date": _iso(v.end_date)}
            for v in p.vacation_periods
        ],
        "recovery_credits": [
            {"session_id": c.session_id, "date": _iso(c.occurrence_date)} for c in sorted(p.recovery_credits)
        ],
    }
    if status is not None:
        out["payment_status"] = status_to_dict(status)
    return out


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "session_id": r.session_id,
        "date": _iso(r.occurrence_date),
        "cancelled": r.cancelled,
        "credits_granted": r.credits_granted,
        "present_ids": sorted(r.present_ids),
        "absent_ids": sorted(r.absent_ids),
        "justified_ids": sorted(r.justified_ids),
        "one_time_ids": sorted(r.one_time_ids),
    }


def status_to_dict(info: PaymentStatusInfo) -> dict:
    return {
        "status": info.status.value,
        "due_date": _iso(info.due_date),
        "days_overdue": info.days_overdue,
        "days_until_due": info.days_until_due,
    }


def reminder_to_dict(r: PaymentReminder) -> dict:
    return {
        "person_id": r.person.person_id,
        "name": r.person.name,
        "phone": r.person.phone,
        "due_date": _iso(r.due_date),
        "days_until_due": r.days_until_due,
    }


def overdue_to_dict(e: OverdueEntry) -> dict:
    return {
        "person_id": e.person.person_id,
        "name": e.person.name,
        "phone": e.person.phone,
        "due_date": _iso(e.due_date),
        "days_overdue": e.days_overdue,
    }


def payment_to_dict(p: Payment) -> dict:
    return {
        "id": p.payment_id,
        "person_id": p.person_id,
        "paid_at": _iso(p.paid_at),
        "amount": str(p.amount),
        "months": p.months,
    }
