"""
test_api.py
-----------
HTTP layer over a records snapshot, via FastAPI TestClient (startup hooks not run).
"""
import pytest
from fastapi.testclient import TestClient

from stayguard.dependencies import get_rules
from stayguard.main import app
from stayguard.services.rules import ComplianceRules


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def record(rid, country, entry, exit=None, **kw):
    return {"id": rid, "country": country, "entry_date": entry, "exit_date": exit, **kw}


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "healthy"}


class TestJurisdictionEndpoint:

    def test_overlap_counted_once(self, client):
        r = client.post("/compliance/jurisdiction", json={
            "records": [
                record("1", "DE", "2024-01-01", "2024-01-31"),
                record("2", "ES", "2024-01-20", "2024-02-20"),
            ],
            "reference_date": "2024-02-20",
        })
        assert r.status_code == 200
        body = r.json()
        assert body["used_days"] == 51
        assert body["remaining_days"] == 39
        assert body["is_compliant"] is True
        assert body["jurisdiction"] == "SCHENGEN"

    def test_violation_payload(self, client):
        r = client.post("/compliance/jurisdiction", json={
            "records": [record("1", "FR", "2024-01-01", "2024-04-01")],
            "reference_date": "2024-04-01",
        })
        body = r.json()
        assert body["is_compliant"] is False
        assert body["violations"] == [{
            "date": "2024-03-31",
            "days_over_limit": 1,
            "description": body["violations"][0]["description"],
        }, {
            "date": "2024-04-01",
            "days_over_limit": 2,
            "description": body["violations"][1]["description"],
        }]
        assert body["next_reset_date"] is not None

    def test_inverted_record_400(self, client):
        r = client.post("/compliance/jurisdiction", json={
            "records": [record("bad", "FR", "2024-03-10", "2024-03-01")],
            "reference_date": "2024-04-01",
        })
        assert r.status_code == 400
        assert r.json()["detail"]["record_id"] == "bad"

    def test_batch_tolerant_reports_rejected(self, client):
        r = client.post("/compliance/jurisdiction", json={
            "records": [
                record("bad", "FR", "2024-03-10", "2024-03-01"),
                record("ok", "FR", "2024-03-01", "2024-03-10"),
                record("th", "TH", "2024-03-01", "2024-03-10"),
            ],
            "reference_date": "2024-04-01",
            "strict": False,
        })
        body = r.json()
        assert r.status_code == 200
        assert body["used_days"] == 10
        assert body["rejected_record_ids"] == ["bad"]
        assert body["unclassified_record_ids"] == ["th"]

    def test_malformed_date_422(self, client):
        r = client.post("/compliance/jurisdiction", json={
            "records": [record("1", "FR", "01/03/2024")],
            "reference_date": "2024-04-01",
        })
        assert r.status_code == 422

    def test_unknown_jurisdiction_404(self, client):
        r = client.post("/compliance/jurisdiction", json={
            "records": [], "jurisdiction": "MERCOSUR", "reference_date": "2024-04-01",
        })
        assert r.status_code == 404

    def test_range_too_large_422(self, client):
        app.dependency_overrides[get_rules] = lambda: ComplianceRules(max_scan_range_days=30)
        r = client.post("/compliance/jurisdiction", json={
            "records": [record("1", "FR", "2024-01-01", "2024-01-05")],
            "reference_date": "2024-04-01",
        })
        assert r.status_code == 422
        assert r.json()["detail"]["max_days"] == 30


class TestFutureTripEndpoint:

    def test_trip_breaks_rule_on_day_six(self, client):
        r = client.post("/compliance/future-trip", json={
            "records": [record("h", "FR", "2024-03-09", "2024-06-01")],
            "reference_date": "2024-06-01",
            "start_date": "2024-06-02",
            "end_date": "2024-06-11",
        })
        body = r.json()
        assert r.status_code == 200
        assert body["violates_rule"] is True
        assert body["first_violation_date"] == "2024-06-07"
        assert body["max_additional_safe_days"] == 5
        assert body["earliest_safe_start_date"] == "2024-08-31"

    def test_inverted_trip_400(self, client):
        r = client.post("/compliance/future-trip", json={
            "records": [], "reference_date": "2024-06-01",
            "start_date": "2024-06-10", "end_date": "2024-06-01",
        })
        assert r.status_code == 400


class TestOverstayAndAlerts:

    def test_overstay_last_day_critical(self, client):
        r = client.post("/compliance/overstay", json={
            "records": [record("v", "TH", "2024-05-03", None, max_stay_days=30)],
            "reference_date": "2024-06-01",
        })
        body = r.json()
        [w] = body["warnings"]
        assert body["summary"] == {"total": 1, "critical": 1, "high": 0, "medium": 0, "low": 0}
        assert w["current_stay_days"] == 30
        assert w["days_remaining"] == 0
        assert w["severity"] == "critical"

    def test_alerts_ranked(self, client):
        r = client.post("/compliance/alerts", json={
            "records": [
                record("s", "FR", "2024-03-04", "2024-06-01"),
                record("v", "TH", "2024-04-01", None, max_stay_days=30),
            ],
            "reference_date": "2024-06-01",
        })
        alerts = r.json()
        assert [a["severity"] for a in alerts] == ["critical", "high"]
        assert alerts[1]["data"]["used_days"] == 90

    def test_overstay_predict(self, client):
        r = client.post("/compliance/overstay/predict", json={
            "records": [record("v", "TH", "2024-04-01", "2024-04-20", max_stay_days=30, expiry_date="2024-12-31")],
            "reference_date": "2024-06-01",
            "country": "TH",
            "start_date": "2024-07-01",
            "end_date": "2024-08-09",
        })
        assert r.status_code == 200
        body = r.json()
        assert body["will_exceed"] is True
        assert body["planned_stay_days"] == 40
        assert body["latest_exit_date"] == "2024-07-30"
        assert body["limiting_factor"] == "max_stay"

    def test_alerts_with_horizon_predict_violation(self, client):
        r = client.post("/compliance/alerts", json={
            "records": [record("s", "FR", "2024-06-11", "2024-09-19")],
            "reference_date": "2024-06-01",
            "horizon": "2024-09-29",
        })
        [a] = r.json()
        assert a["severity"] == "high"
        assert a["data"]["first_violation_date"] == "2024-09-09"

    def test_alerts_keep_overstay_when_history_too_long(self, client):
        r = client.post("/compliance/alerts", json={
            "records": [
                record("old", "FR", "2012-05-01", "2012-05-10"),
                record("v", "TH", "2024-04-01", None, max_stay_days=30),
            ],
            "reference_date": "2024-06-01",
        })
        assert r.status_code == 200
        alerts = r.json()
        assert alerts[0]["title"] == "Overstay in TH"
        assert alerts[0]["severity"] == "critical"
        assert any("too long" in a["title"] for a in alerts)


class TestJurisdictionsReference:

    def test_list(self, client):
        [j] = client.get("/jurisdictions/").json()
        assert j["code"] == "SCHENGEN"
        assert len(j["members"]) == 29

    def test_get_unknown(self, client):
        assert client.get("/jurisdictions/XX").status_code == 404
