from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.studio_ledger.studio_ledger.catalog.model import Activity, Space, Specialist
from src.studio_ledger.studio_ledger.container import StudioSettings, assemble
from src.studio_ledger.studio_ledger.core.enums import MembershipType
from src.studio_ledger.studio_ledger.core.exceptions import PersistenceError
from src.studio_ledger.studio_ledger.main import create_app
from src.studio_ledger.studio_ledger.people.model import Person


class FakeSessions:
    def __init__(self):
        self.items = {}

    def list_all(self):
        return list(self.items.values())

    def get_by_id(self, session_id):
        return self.items.get(session_id)

    def save(self, session):
        self.items[session.session_id] = session

    def save_many(self, sessions):
        for s in sessions:
            self.save(s)

    def delete(self, session_id):
        return self.items.pop(session_id, None) is not None


class FakePeople:
    def __init__(self, people=()):
        self.items = {p.person_id: p for p in people}

    def list_all(self):
        return list(self.items.values())

    def get_by_id(self, person_id):
        return self.items.get(person_id)

    def save(self, person):
        # credits live in the attendance store
        old = self.items.get(person.person_id)
        credits = old.recovery_credits if old else frozenset()
        self.items[person.person_id] = person.with_credits(credits)

    def delete_with_enrollments(self, person_id):
        return self.items.pop(person_id, None) is not None


class FakeAttendance:
    def __init__(self, people: FakePeople, *, fail_cancellations: bool = False):
        self.people = people
        self.records = {}
        self.fail_cancellations = fail_cancellations

    def list_all(self):
        return list(self.records.values())

    def get(self, session_id, occurrence_date):
        return self.records.get((session_id, occurrence_date))

    def save(self, record):
        self.records[record.key] = record

    def save_cancellation(self, *, record, credits):
        if self.fail_cancellations:
            raise PersistenceError("connection lost")
        self.records[record.key] = record
        for pid, credit in credits:
            p = self.people.items[pid]
            self.people.items[pid] = p.with_credits(p.recovery_credits | {credit})

    def redeem_credit(self, *, record, person_id, credit):
        self.records[record.key] = record
        p = self.people.items[person_id]
        self.people.items[person_id] = p.with_credits(p.recovery_credits - {credit})


class FakePayments:
    def __init__(self, people: FakePeople):
        self.people = people
        self.items = []

    def list_all(self):
        return sorted(self.items, key=lambda p: p.paid_at, reverse=True)

    def add(self, payment, *, last_payment_date):
        self.items.append(payment)
        p = self.people.items[payment.person_id]
        self.people.items[payment.person_id] = replace(p, last_payment_date=last_payment_date)

    def delete(self, payment, *, last_payment_date):
        self.items.remove(payment)
        p = self.people.items[payment.person_id]
        self.people.items[payment.person_id] = replace(p, last_payment_date=last_payment_date)
        return True


class FakeCatalog:
    def __init__(self):
        self.activities = [Activity("yoga", "Yoga")]
        self.specialists = [Specialist("t1", "Carla")]
        self.spaces = [Space("room-a", "Main hall", capacity=4)]

    def list_activities(self):
        return list(self.activities)

    def list_specialists(self):
        return list(self.specialists)

    def list_spaces(self):
        return list(self.spaces)

    def save_activity(self, activity):
        self.activities.append(activity)

    def save_specialist(self, specialist):
        self.specialists.append(specialist)

    def save_space(self, space):
        self.spaces.append(space)

    def delete_activity(self, activity_id):
        self.activities = [a for a in self.activities if a.activity_id != activity_id]
        return True

    def delete_specialist(self, specialist_id):
        self.specialists = [s for s in self.specialists if s.specialist_id != specialist_id]
        return True

    def delete_space(self, space_id):
        self.spaces = [s for s in self.spaces if s.space_id != space_id]
        return True


def _build(*, fail_cancellations: bool = False):
    people = FakePeople(
        [
            Person(person_id="p1", name="Ana", phone="600111222"),
            Person(
                person_id="p2",
                name="Luis",
                membership=MembershipType.MONTHLY,
                last_payment_date=datetime.now() - timedelta(days=40),
            ),
        ]
    )
    container = assemble(
        sessions_repo=FakeSessions(),
        people_repo=people,
        attendance_repo=FakeAttendance(people, fail_cancellations=fail_cancellations),
        payments_repo=FakePayments(people),
        catalog_repo=FakeCatalog(),
        settings=StudioSettings(churn_window=5, churn_threshold=2, reminder_days=7),
    )
    return container


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=_build())
    return app.test_client()


def _create_session(client, **overrides):
    body = {"activity_id": "yoga", "instructor_id": "t1", "space_id": "room-a", "day_of_week": "MONDAY", "time": "18:00"}
    body.update(overrides)
    res = client.post("/api/sessions", json=body)
    assert res.status_code == 201
    return res.get_json()["data"]


def test_create_session_and_list(client):
    created = _create_session(client)
    assert created["activity"] == "Yoga"
    assert created["instructor"] == "Carla"

    res = client.get("/api/sessions")
    assert [s["id"] for s in res.get_json()["data"]] == [created["id"]]


def test_validation_errors_are_400(client):
    res = client.post("/api/sessions", json={"activity_id": "yoga", "day_of_week": "NOPE"})
    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_unknown_session_is_404(client):
    res = client.post("/api/sessions/missing/cancel", json={"date": "2026-03-02", "grant_credits": True})
    assert res.status_code == 404


def test_cancel_occurrence_grants_credits_once(client):
    session = _create_session(client)
    client.put(f"/api/sessions/{session['id']}/roster", json={"person_ids": ["p1", "p2"]})

    for _ in range(2):
        res = client.post(f"/api/sessions/{session['id']}/cancel", json={"date": "2026-03-02", "grant_credits": True})
        assert res.status_code == 200
        record = res.get_json()["data"]
        assert record["cancelled"] is True
        assert record["present_ids"] == [] and record["absent_ids"] == []

    person = client.get("/api/people/p1").get_json()["data"]
    assert person["recovery_credits"] == [{"session_id": session["id"], "date": "2026-03-02"}]


def test_failed_cancellation_is_503(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    client = create_app(container=_build(fail_cancellations=True)).test_client()
    session = _create_session(client)

    res = client.post(f"/api/sessions/{session['id']}/cancel", json={"date": "2026-03-02", "grant_credits": True})
    assert res.status_code == 503
    assert client.get(f"/api/sessions/{session['id']}/attendance?date=2026-03-02").get_json()["data"]["cancelled"] is False


def test_churn_risk_endpoint(client):
    session = _create_session(client)
    client.put(f"/api/sessions/{session['id']}/roster", json={"person_ids": ["p1"]})
    for day in ("2026-03-02", "2026-03-09"):
        res = client.post(f"/api/sessions/{session['id']}/attendance", json={"date": day, "absent_ids": ["p1"]})
        assert res.status_code == 200

    res = client.get("/api/people/churn-risk")
    assert [p["id"] for p in res.get_json()["data"]] == ["p1"]


def test_payment_flow(client):
    assert client.get("/api/people/p2/payment-status").get_json()["data"]["status"] == "OVERDUE"
    assert [e["person_id"] for e in client.get("/api/payments/overdue").get_json()["data"]] == ["p2"]

    res = client.post("/api/people/p2/payments", json={"amount": "45"})
    assert res.status_code == 201
    assert client.get("/api/people/p2/payment-status").get_json()["data"]["status"] == "CURRENT"

    client.delete("/api/people/p2/payments/last")
    assert client.get("/api/people/p2/payment-status").get_json()["data"]["status"] == "PENDING"


def test_reminders_endpoint_rejects_bad_days(client):
    assert client.get("/api/payments/reminders?days=x").status_code == 400
    assert client.get("/api/payments/reminders?days=3").get_json()["data"] == []


def test_people_export_csv(client):
    res = client.get("/api/people/export.csv")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    text = res.data.decode("utf-8-sig")
    assert text.splitlines()[0].startswith("id,name,phone")
    assert "Ana" in text


def test_catalog_delete_refused_while_in_use(client):
    _create_session(client)
    res = client.delete("/api/catalog/spaces/room-a")
    assert res.status_code == 400
    assert "Main hall" in res.get_json()["message"]


def test_suggestion_endpoint(client):
    res = client.get("/api/suggestion")
    assert res.get_json()["data"]["type"] == "INFO"


@pytest.mark.parametrize("body", [{"present_ids": [1]}, {"present_ids": "p1"}, {"absent_ids": [{"id": "p1"}]}])
def test_malformed_id_lists_are_400(client, body):
    session = _create_session(client)
    client.put(f"/api/sessions/{session['id']}/roster", json={"person_ids": ["p1"]})

    res = client.post(f"/api/sessions/{session['id']}/attendance", json={"date": "2026-03-02", **body})
    assert res.status_code == 400
    assert res.get_json()["success"] is False

    res = client.put(f"/api/sessions/{session['id']}/roster", json={"person_ids": "p1"})
    assert res.status_code == 400


@pytest.mark.parametrize("amount", ["NaN", "Infinity"])
def test_non_finite_amounts_are_400(client, amount):
    res = client.post("/api/people/p1/payments", json={"amount": amount})
    assert res.status_code == 400
