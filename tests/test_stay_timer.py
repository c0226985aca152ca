"""
test_stay_timer.py
------------------
Daily compliance job and traveler endpoints over stored records (in-memory SQLite).
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from stayguard.database import get_db
from stayguard.main import app
from stayguard.models.stay_record import StayRecordRow
from stayguard.services.records import get_stay_records, list_traveler_ids
from stayguard.services.rules import Severity
from stayguard.services.stay_timer import run_compliance_check_job

REF = date(2024, 6, 1)


@pytest.fixture
def seeded(db_session):
    db_session.add_all([
        # Schengen limit reached on REF
        StayRecordRow(traveler_id="alice", country="FR", entry_date=date(2024, 3, 4), exit_date=REF),
        # Overstayed visa
        StayRecordRow(traveler_id="bob", country="TH", entry_date=date(2024, 4, 1), max_stay_days=30),
        # Nothing to report
        StayRecordRow(traveler_id="carol", country="DE", entry_date=date(2024, 5, 1), exit_date=date(2024, 5, 5)),
        # Inverted row is skipped, the valid one still counts
        StayRecordRow(traveler_id="dave", country="IT", entry_date=date(2024, 5, 10), exit_date=date(2024, 5, 1)),
        StayRecordRow(traveler_id="dave", country="IT", entry_date=date(2024, 5, 20), max_stay_days=15),
    ])
    db_session.commit()
    return db_session


def test_read_boundary(seeded):
    assert list_traveler_ids(seeded) == ["alice", "bob", "carol", "dave"]
    [r] = get_stay_records(seeded, "bob")
    assert r.country == "TH"
    assert r.exit_date is None
    assert r.max_stay_days == 30


def test_job_dispatches_per_traveler(seeded):
    sent = {}
    out = run_compliance_check_job(reference_date=REF, dispatch=lambda t, alerts: sent.setdefault(t, alerts), db=seeded)
    assert set(out) == {"alice", "bob", "dave"}
    assert sent == out
    assert out["alice"][0].severity is Severity.high
    assert out["bob"][0].severity is Severity.critical
    # dave: 13 days into a 15-day stay
    assert out["dave"][0].data["days_remaining"] == 2


def test_job_keeps_overstay_when_history_too_long(seeded):
    seeded.add_all([
        StayRecordRow(traveler_id="erin", country="FR", entry_date=date(2012, 5, 1), exit_date=date(2012, 5, 10)),
        StayRecordRow(traveler_id="erin", country="TH", entry_date=date(2024, 4, 1), max_stay_days=30),
    ])
    seeded.commit()
    out = run_compliance_check_job(reference_date=REF, dispatch=lambda t, alerts: None, db=seeded)
    assert set(out) == {"alice", "bob", "dave", "erin"}
    first, *rest = out["erin"]
    assert first.severity is Severity.critical
    assert first.title == "Overstay in TH"
    [skipped] = [a for a in rest if "too long" in a.title]
    assert skipped.data["requested_days"] > skipped.data["max_days"]


@pytest.fixture
def client(seeded):
    app.dependency_overrides[get_db] = lambda: seeded
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_traveler_compliance(client):
    body = client.get("/travelers/alice/compliance", params={"reference_date": "2024-06-01"}).json()
    assert body["used_days"] == 90
    assert body["is_compliant"] is True


def test_traveler_overstay(client):
    body = client.get("/travelers/bob/overstay", params={"reference_date": "2024-06-01"}).json()
    [w] = body["warnings"]
    assert w["severity"] == "critical"
    assert body["summary"]["critical"] == 1


def test_traveler_alerts_tolerate_bad_rows(client):
    r = client.get("/travelers/dave/alerts", params={"reference_date": "2024-06-01"})
    assert r.status_code == 200
    assert r.json()[0]["severity"] == "high"


def test_unknown_traveler_has_no_presence(client):
    body = client.get("/travelers/nobody/compliance", params={"reference_date": "2024-06-01"}).json()
    assert body["used_days"] == 0


def test_manual_trigger(client):
    r = client.post("/notifications/run-compliance-check", params={"reference_date": "2024-06-01"})
    assert r.json()["travelers_with_alerts"] == 3
