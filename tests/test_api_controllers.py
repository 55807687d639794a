from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.attendance.model import AttendanceEvent
from src.payroll_engine.payroll_engine.container import EngineSettings, build_services
from src.payroll_engine.payroll_engine.core.enums import GeofenceKind, SessionStatus
from src.payroll_engine.payroll_engine.employees.model import CompanySettings, EmployeeProfile
from src.payroll_engine.payroll_engine.geofence.model import GeoPoint, Geofence
from src.payroll_engine.payroll_engine.main import create_app
from tests.fakes import InMemoryAdvances, InMemoryAttendance, InMemoryDirectory, InMemoryHolidays

JOB_TOKEN = "test-job-token"


@pytest.fixture
def repo():
    return InMemoryAttendance()


@pytest.fixture
def client(monkeypatch, repo):
    monkeypatch.setenv("APP_ENV", "testing")
    employee = EmployeeProfile(
        employee_id="EMP001",
        company_id="acme",
        user_id="uid-1",
        name="Asha",
        base_salary=Decimal("30000"),
        standard_daily_hours=Decimal("8"),
    )
    company = CompanySettings(
        company_id="acme",
        name="Acme",
        office_zone=Geofence(kind=GeofenceKind.OFFICE, center=GeoPoint(12.9716, 77.5946), radius_meters=200),
    )
    container = build_services(
        settings=EngineSettings(job_token=JOB_TOKEN, closer_max_workers=1, closer_retry_backoff_seconds=0),
        attendance_repo=repo,
        directory_repo=InMemoryDirectory([employee], [company]),
        advances_repo=InMemoryAdvances(),
        holidays_repo=InMemoryHolidays(),
    )
    app = create_app(container)
    return app.test_client()


def test_check_in_and_check_out_round_trip(client):
    resp = client.post(
        "/api/attendance/check-in",
        json={"employee_id": "EMP001", "location": {"latitude": 12.9716, "longitude": 77.5946, "accuracy": 10}},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["event"]["status"] == "CHECKED_IN"
    assert body["event"]["is_within_geofence"] == "INSIDE"
    assert body["event"]["matched_geofence_type"] == "office"

    resp = client.post("/api/attendance/check-out", json={"employee_id": "EMP001", "work_report": "Shipped it"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["event"]["status"] == "CHECKED_OUT"
    assert body["event"]["is_within_geofence_checkout"] == "UNKNOWN"
    assert body["event"]["work_report"] == "Shipped it"


def test_double_check_in_conflicts(client):
    assert client.post("/api/attendance/check-in", json={"employee_id": "EMP001"}).status_code == 201

    resp = client.post("/api/attendance/check-in", json={"employee_id": "EMP001"})

    assert resp.status_code == 409
    assert resp.get_json()["success"] is False


def test_check_out_without_session_conflicts(client):
    assert client.post("/api/attendance/check-out", json={"employee_id": "EMP001"}).status_code == 409


def test_bad_requests(client):
    assert client.post("/api/attendance/check-in", data="nope").status_code == 400
    assert client.post("/api/attendance/check-in", json={"employee_id": "  "}).status_code == 400
    bad_location = {"employee_id": "EMP001", "location": {"latitude": 123, "longitude": 0}}
    assert client.post("/api/attendance/check-in", json=bad_location).status_code == 400
    assert client.post("/api/attendance/check-in", json={"employee_id": "NOPE"}).status_code == 404


def test_wrongly_typed_fields_are_bad_requests(client):
    assert client.post("/api/attendance/check-in", json={"employee_id": 5}).status_code == 400
    assert client.post("/api/attendance/check-in", json={"employee_id": "EMP001", "photo_ref": 7}).status_code == 400
    assert client.post("/api/attendance/check-in", json={"employee_id": "EMP001"}).status_code == 201
    assert client.post("/api/attendance/check-out", json={"employee_id": "EMP001", "work_report": ["x"]}).status_code == 400

    advance_id = client.post("/api/advances", json={"employee_id": "EMP001", "amount": "100"}).get_json()["advance"]["id"]
    resp = client.post(f"/api/advances/{advance_id}/approve", json={"applies_year": "x", "applies_month": 2})
    assert resp.status_code == 400


def test_today_summary(client):
    client.post("/api/attendance/check-in", json={"employee_id": "EMP001"})

    resp = client.get("/api/attendance/EMP001/today")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["state"] == "CHECKED_IN"
    assert body["open_check_in_time"] is not None


def test_geofence_stats_requires_dates(client):
    assert client.get("/api/attendance/EMP001/geofence-stats?start=bad&end=2026-01-31").status_code == 400

    resp = client.get("/api/attendance/EMP001/geofence-stats?start=2026-01-01&end=2026-01-31")

    assert resp.status_code == 200
    assert resp.get_json()["stats"]["check_in_inside"] == 0


def test_payroll_report(client):
    resp = client.get("/api/payroll/EMP001/2026/1")

    assert resp.status_code == 200
    report = resp.get_json()["report"]
    assert report["base_salary"] == "30000.00"
    assert report["working_days"] == 27
    assert report["final_net_payable"] == "0.00"


def test_payroll_report_rejects_invalid_month(client):
    assert client.get("/api/payroll/EMP001/2026/13").status_code == 400


def test_advance_workflow(client):
    resp = client.post("/api/advances", json={"employee_id": "EMP001", "amount": "5000", "reason": "rent"})
    assert resp.status_code == 201
    advance_id = resp.get_json()["advance"]["id"]

    resp = client.post(f"/api/advances/{advance_id}/approve", json={"applies_year": 2026, "applies_month": 1})
    assert resp.status_code == 200
    assert resp.get_json()["advance"]["status"] == "approved"

    assert client.post(f"/api/advances/{advance_id}/reject").status_code == 400
    assert client.get("/api/payroll/EMP001/2026/1").get_json()["report"]["total_approved_advances"] == "5000.00"

    listed = client.get("/api/advances/employee/EMP001").get_json()["advances"]
    assert [a["id"] for a in listed] == [advance_id]


def test_job_requires_token(client):
    assert client.post("/jobs/close-stale-sessions").status_code == 403
    assert client.post("/jobs/close-stale-sessions", headers={"X-Job-Token": "wrong"}).status_code == 403
    assert client.post("/jobs/close-stale-sessions", headers={"X-Job-Token": "tökén"}).status_code == 403


def test_job_closes_stale_sessions(client, repo):
    repo.add(
        AttendanceEvent(
            event_id=1,
            company_id="acme",
            employee_id="EMP001",
            user_id="uid-1",
            status=SessionStatus.CHECKED_IN,
            check_in_time=datetime(2020, 5, 4, 9, 0),
        )
    )

    resp = client.post("/jobs/close-stale-sessions", headers={"X-Job-Token": JOB_TOKEN})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["report"]["sessions_closed"] == 1
    assert repo.get_by_id(1).check_out_time == datetime(2020, 5, 4, 17, 0)
