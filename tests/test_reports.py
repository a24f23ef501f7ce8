import io

import openpyxl

from app.services.report_service import DAILY_COLUMNS, OVERTIME_COLUMNS

DAY = "2030-03-05"


def _setup_absence(client, auth, shifts, make_driver):
    absent = make_driver("Somchai", [shifts["Morning Shift"]], carNumber="1กข 1234", contactNumber="081")
    cover = make_driver("Anan", [shifts["Night Shift"]])
    schedule = client.post("/api/v1/schedules/toggle", headers=auth, json={
        "driverId": absent["id"], "date": DAY, "type": "day_off",
    }).json()["data"]
    client.patch(f"/api/v1/schedules/{schedule['id']}/remark", headers=auth, json={"remark": "family"})
    client.post("/api/v1/replacements", headers=auth, json={
        "scheduleId": schedule["id"], "replacementDriverId": cover["id"],
    })
    return absent, cover


def test_daily_schedule_rows(client, auth, shifts, make_driver):
    absent, cover = _setup_absence(client, auth, shifts, make_driver)

    res = client.get("/api/v1/reports/daily-schedule", headers=auth, params={"date": DAY})
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["columns"] == DAILY_COLUMNS

    blocks = {b["shift"]["name"]: b["rows"] for b in data["blocks"]}
    morning = blocks["Morning Shift"]
    assert morning == [{
        "no": 1, "dayOff": "", "carNumber": "1กข 1234", "driverName": "Somchai",
        "alOff": "OFF", "replacement": "Anan", "remark": "family", "contact": "081",
    }]
    assert blocks["Night Shift"][0]["driverName"] == "Anan"
    assert blocks["Night Shift"][0]["alOff"] == ""
    assert blocks["Afternoon Shift"] == []


def test_daily_schedule_xlsx(client, auth, shifts, make_driver):
    _setup_absence(client, auth, shifts, make_driver)

    res = client.get("/api/v1/reports/daily-schedule", headers=auth, params={"date": DAY, "format": "xlsx"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert f"daily_schedule_{DAY}.xlsx" in res.headers["content-disposition"]

    ws = openpyxl.load_workbook(io.BytesIO(res.content)).active
    rows = [list(r) for r in ws.iter_rows(values_only=True)]
    assert rows[0][0] == f"Daily Schedule {DAY}"
    assert list(DAILY_COLUMNS) in [r[:len(DAILY_COLUMNS)] for r in rows]
    assert any(r[3] == "Somchai" and r[4] == "OFF" and r[5] == "Anan" for r in rows if len(r) > 5)


def test_overtime_report_xlsx(client, auth, shifts, make_driver):
    _setup_absence(client, auth, shifts, make_driver)

    data = client.get("/api/v1/reports/overtime", headers=auth, params={"year": 2030, "month": 3}).json()["data"]
    assert data["summary"]["totalHours"] == 8.0
    assert data["summary"]["totalValue"] == 12.0

    res = client.get("/api/v1/reports/overtime", headers=auth,
                     params={"year": 2030, "month": 3, "format": "xlsx"})
    assert res.status_code == 200
    assert "overtime_report_2030-03.xlsx" in res.headers["content-disposition"]

    ws = openpyxl.load_workbook(io.BytesIO(res.content)).active
    rows = [list(r) for r in ws.iter_rows(values_only=True)]
    assert rows[0] == OVERTIME_COLUMNS
    assert rows[1][:4] == ["Anan", "S002", "2030-03-05", 8.0]
    assert rows[-1][0] == "Total"


def test_dashboard(client, auth, make_driver):
    make_driver("Somchai")
    data = client.get("/api/v1/reports/dashboard", headers=auth).json()["data"]
    assert data["driverCount"] == 1
    assert data["absentToday"] == 0


def test_audit_log_records_mutations(client, auth, make_driver):
    make_driver("Somchai")
    res = client.get("/api/v1/reports/audit-logs", headers=auth, params={"entityType": "Driver"})
    logs = res.json()["data"]
    assert len(logs) == 1
    assert logs[0]["action"] == "CREATE"
    assert logs[0]["user"]["username"] == "planner"


def test_holidays(client, auth):
    res = client.post("/api/v1/holidays", headers=auth, json={"name": "Songkran", "date": "2030-04-13"})
    assert res.status_code == 201
    dup = client.post("/api/v1/holidays", headers=auth, json={"name": "Songkran 2", "date": "2030-04-13"})
    assert dup.status_code == 409

    assert client.get("/api/v1/holidays", headers=auth, params={"year": 2030}).json()["data"][0]["name"] == "Songkran"
    assert client.get("/api/v1/holidays", headers=auth, params={"year": 2031}).json()["data"] == []
    assert client.delete(f"/api/v1/holidays/{res.json()['data']['id']}", headers=auth).status_code == 200
