from app.models.schedule import Schedule

DAY = "2030-03-05"


def _toggle(client, auth, driver_id, type_, on=DAY):
    return client.post("/api/v1/schedules/toggle", headers=auth, json={
        "driverId": driver_id, "date": on, "type": type_,
    })


def test_toggle_creates_then_flips(client, auth, db, make_driver):
    driver = make_driver("Somchai")

    data = _toggle(client, auth, driver["id"], "day_off").json()["data"]
    assert data["isDayOff"] is True and data["isAnnualLeave"] is False
    assert data["status"] == "Day Off"
    assert data["needsReplacement"] is True

    data = _toggle(client, auth, driver["id"], "day_off").json()["data"]
    assert data["status"] == "Working"
    assert data["coverage"] is None

    assert db.query(Schedule).filter(Schedule.driverId == driver["id"]).count() == 1


def test_flags_are_mutually_exclusive(client, auth, make_driver):
    driver = make_driver("Somchai")
    _toggle(client, auth, driver["id"], "day_off")
    data = _toggle(client, auth, driver["id"], "annual_leave").json()["data"]
    assert data["isAnnualLeave"] is True
    assert data["isDayOff"] is False
    assert data["status"] == "Annual Leave"


def test_toggle_unknown_driver(client, auth):
    assert _toggle(client, auth, 999, "day_off").status_code == 404


def test_toggle_rejects_unknown_type(client, auth, make_driver):
    driver = make_driver("Somchai")
    assert _toggle(client, auth, driver["id"], "sick").status_code == 422


def test_remark(client, auth, make_driver):
    driver = make_driver("Somchai")
    schedule = _toggle(client, auth, driver["id"], "day_off").json()["data"]

    res = client.patch(f"/api/v1/schedules/{schedule['id']}/remark", headers=auth, json={"remark": "  swap  "})
    assert res.json()["data"]["remark"] == "swap"
    res = client.patch(f"/api/v1/schedules/{schedule['id']}/remark", headers=auth, json={"remark": ""})
    assert res.json()["data"]["remark"] is None


def test_day_view_lists_available_drivers(client, auth, shifts, make_driver):
    off = make_driver("Somchai", [shifts["Morning Shift"]])
    working = make_driver("Anan", [shifts["Morning Shift"]])
    _toggle(client, auth, off["id"], "day_off")

    data = client.get("/api/v1/schedules/day", headers=auth, params={"date": DAY}).json()["data"]
    assert data["weekday"] == "Tuesday"
    assert [s["driver"]["id"] for s in data["schedules"]] == [off["id"]]
    assert data["schedules"][0]["coverage"] == "uncovered"
    assert [d["id"] for d in data["availableDrivers"]] == [working["id"]]


def test_partial_coverage(client, auth, shifts, make_driver):
    off = make_driver("Somchai", [shifts["Morning Shift"], shifts["Night Shift"]])
    cover = make_driver("Anan")
    schedule = _toggle(client, auth, off["id"], "annual_leave").json()["data"]
    client.post("/api/v1/replacements", headers=auth, json={
        "scheduleId": schedule["id"], "replacementDriverId": cover["id"], "shiftId": shifts["Night Shift"],
    })

    data = client.get(f"/api/v1/schedules/{schedule['id']}", headers=auth).json()["data"]
    assert data["coverage"] == "partial"
    assert data["needsReplacement"] is True
    assert data["replacements"][0]["replacementDriver"]["name"] == "Anan"


def test_month_calendar(client, auth, make_driver):
    driver = make_driver("Somchai")
    _toggle(client, auth, driver["id"], "day_off", "2030-03-05")
    _toggle(client, auth, driver["id"], "annual_leave", "2030-03-20")
    client.post("/api/v1/holidays", headers=auth, json={"name": "Makha Bucha", "date": "2030-03-18"})

    data = client.get("/api/v1/schedules/calendar", headers=auth, params={"year": 2030, "month": 3}).json()["data"]
    assert len(data["days"]) == 31
    by_date = {d["date"]: d for d in data["days"]}
    assert by_date["2030-03-05"]["absences"][0]["status"] == "Day Off"
    assert by_date["2030-03-20"]["absences"][0]["status"] == "Annual Leave"
    assert by_date["2030-03-05"]["needsReplacementCount"] == 1
    assert by_date["2030-03-18"]["holiday"] == "Makha Bucha"
    assert by_date["2030-03-06"]["absences"] == []
