from __future__ import annotations

import csv
import io
from datetime import datetime

HR = {"X-User-Name": "Ahmed Hassan", "X-User-Role": "hr_manager", "X-Employee-Id": "e-1"}
SARA = {"X-User-Name": "Sara Ali", "X-Employee-Id": "e-2"}


def _create(client, headers=HR, **overrides):
    body = {"employeeName": "Sara Ali", "employeeId": "e-2", "date": "2026-02-03", "checkIn": "08:12", "checkOut": "17:00"}
    body.update(overrides)
    return client.post("/attendance", json=body, headers=headers)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_create_and_fetch(client):
    resp = _create(client)
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["status"] == "late"
    assert created["lateMinutes"] == 12
    assert created["workedMinutes"] == 528

    fetched = client.get(f"/attendance/{created['id']}").get_json()
    assert fetched == created


def test_missing_identity_is_401(client):
    resp = _create(client, headers={})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_invalid_body_is_400(client):
    assert _create(client, checkIn="25:00").status_code == 400
    assert _create(client, date="2026/02/03").status_code == 400


def test_duplicate_day_is_409(client):
    _create(client)
    assert _create(client, checkIn="07:30").status_code == 409


def test_unknown_record_is_404(client):
    assert client.get("/attendance/a-404").status_code == 404
    assert client.delete("/attendance/a-404", headers=HR).status_code == 404


def test_employee_cannot_delete(client):
    rec = _create(client).get_json()
    assert client.delete(f"/attendance/{rec['id']}", headers=SARA).status_code == 403
    assert client.delete(f"/attendance/{rec['id']}", headers=HR).get_json() == {"success": True}


def test_list_filters(client):
    _create(client)
    _create(client, employeeName="Omar Youssef", employeeId="e-5", checkIn="", checkOut="", date="2026-02-04")

    listing = client.get("/attendance?status=late").get_json()
    assert listing["total"] == 1
    assert listing["items"][0]["employeeName"] == "Sara Ali"

    assert client.get("/attendance?search=omar").get_json()["total"] == 1
    assert client.get("/attendance?from=2026-02-04&to=2026-02-10").get_json()["total"] == 1
    assert client.get("/attendance?status=bogus").status_code == 400


def test_late_correction(client):
    rec = _create(client).get_json()

    resp = client.put(f"/attendance/late/{rec['id']}", json={"lateMinutes": 0}, headers=HR)
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "present"

    assert client.put(f"/attendance/late/{rec['id']}", json={"lateMinutes": -3}, headers=HR).status_code == 400
    assert client.put(f"/attendance/late/{rec['id']}", json={"lateMinutes": 3}, headers=SARA).status_code == 403


def test_check_in_twice(client):
    assert client.post("/attendance/check-in", json={}, headers=SARA).status_code == 201
    assert client.post("/attendance/check-in", json={}, headers=SARA).status_code == 400


def test_exception_workflow(client):
    rec = _create(client).get_json()

    filed = client.post("/attendance/exception", json={"attendanceId": rec["id"], "reason": "زحام"}, headers=SARA)
    assert filed.status_code == 201
    assert filed.get_json()["status"] == "exception"
    assert "زحام" in filed.get_data(as_text=True)

    pending = client.get("/attendance/exceptions?status=pending").get_json()
    assert pending["pending"] == 1

    url = f"/attendance/exception/{rec['id']}"
    assert client.put(url, json={"status": "approved"}, headers=SARA).status_code == 403
    assert client.put(url, json={"status": "maybe"}, headers=HR).status_code == 400
    decided = client.put(url, json={"status": "rejected"}, headers=HR)
    assert decided.get_json()["exceptionApprovedBy"] == "Ahmed Hassan"
    assert decided.get_json()["status"] == "late"
    assert client.put(url, json={"status": "approved"}, headers=HR).status_code == 409


def test_reports(client):
    _create(client)
    _create(client, employeeName="Omar Youssef", employeeId="e-5", checkIn="07:40", date="2026-02-03")

    summary = client.get("/attendance/reports/summary?from=2026-02-01&to=2026-02-04").get_json()
    assert summary["totals"]["records"] == 2
    assert summary["totals"]["attendance_rate"] == 100

    assert client.get("/attendance/reports/summary?from=2026-02-01").status_code == 400
    assert client.get("/attendance/reports/summary?period=year").status_code == 400

    trend = client.get("/attendance/reports/trend?today=2026-02-04").get_json()["items"]
    assert len(trend) == 7
    assert trend[5]["date"] == "2026-02-03"
    assert (trend[5]["present"], trend[5]["late"]) == (1, 1)

    today = client.get("/attendance/reports/today?today=2026-02-03").get_json()
    assert today["counts"]["late"] == 1


def test_csv_export(client):
    _create(client)

    resp = client.get("/attendance/reports/export.csv?from=2026-02-01&to=2026-02-28")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance_report_20260201_20260228.csv" in resp.headers["Content-Disposition"]
    rows = list(csv.DictReader(io.StringIO(resp.data.decode("utf-8-sig"))))
    assert rows[0]["employee_name"] == "Sara Ali"
    assert rows[0]["worked_hours"] == "08:48"


def test_infinite_late_minutes_is_400(client):
    rec = _create(client).get_json()

    resp = client.put(
        f"/attendance/late/{rec['id']}",
        data='{"lateMinutes": Infinity}',
        content_type="application/json",
        headers=HR,
    )

    assert resp.status_code == 400


def test_report_dates_follow_the_app_clock(client, monkeypatch):
    monkeypatch.setattr(
        "attendance_engine.reports.controller.now_local", lambda: datetime(2026, 2, 4, 9, 30)
    )
    _create(client)

    trend = client.get("/attendance/reports/trend").get_json()["items"]
    assert trend[-1]["date"] == "2026-02-04"

    today = client.get("/attendance/reports/today").get_json()
    assert today["date"] == "2026-02-04"

    summary = client.get("/attendance/reports/summary?period=week").get_json()
    assert (summary["start"], summary["end"]) == ("2026-01-28", "2026-02-04")
    assert summary["totals"]["records"] == 1
