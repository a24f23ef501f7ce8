import logging
from datetime import date

from app.models.overtime_record import OvertimeRecord
from app.models.schedule import Schedule
from app.utils.calendar import dates_matching_weekday, today_local

URL = "/api/v1/dayoff-patterns"


def _set(client, auth, driver_id, year, month, day_of_week):
    return client.put(URL, headers=auth, json={
        "driverId": driver_id, "month": month, "year": year, "dayOfWeek": day_of_week,
    })


def _day_offs(db, driver_id):
    db.expire_all()
    return sorted(
        s.date for s in db.query(Schedule).filter(Schedule.driverId == driver_id, Schedule.isDayOff == True).all()
    )


def test_set_pattern_creates_a_day_off_per_matching_date(client, auth, db, make_driver, next_year):
    driver = make_driver("Somchai")
    res = _set(client, auth, driver["id"], next_year, 3, 2)
    assert res.status_code == 200, res.json()

    expected = dates_matching_weekday(next_year, 3, 2)
    data = res.json()["data"]
    assert data["dayName"] == "Tuesday"
    assert data["dates"] == [d.isoformat() for d in expected]
    assert _day_offs(db, driver["id"]) == expected


def test_set_pattern_is_idempotent(client, auth, db, make_driver, next_year):
    driver = make_driver("Somchai")
    _set(client, auth, driver["id"], next_year, 5, 5)
    first = _day_offs(db, driver["id"])
    _set(client, auth, driver["id"], next_year, 5, 5)
    assert _day_offs(db, driver["id"]) == first

    res = client.get(URL, headers=auth, params={"driverId": driver["id"]})
    assert res.json()["meta"]["total"] == 1


def test_changing_the_weekday_replaces_the_month(client, auth, db, make_driver, next_year):
    driver = make_driver("Somchai")
    _set(client, auth, driver["id"], next_year, 6, 1)
    res = _set(client, auth, driver["id"], next_year, 6, 3)
    assert res.status_code == 200

    assert _day_offs(db, driver["id"]) == dates_matching_weekday(next_year, 6, 3)
    res = client.get(URL, headers=auth, params={"driverId": driver["id"]})
    assert [p["dayOfWeek"] for p in res.json()["data"]] == [3]


def test_other_months_are_untouched(client, auth, db, make_driver, next_year):
    driver = make_driver("Somchai")
    _set(client, auth, driver["id"], next_year, 7, 0)
    _set(client, auth, driver["id"], next_year, 8, 6)
    _set(client, auth, driver["id"], next_year, 8, 4)

    days = _day_offs(db, driver["id"])
    assert [d for d in days if d.month == 7] == dates_matching_weekday(next_year, 7, 0)
    assert [d for d in days if d.month == 8] == dates_matching_weekday(next_year, 8, 4)


def test_upsert_keeps_existing_row_fields(client, auth, db, make_driver, next_year):
    driver = make_driver("Somchai")
    target = dates_matching_weekday(next_year, 4, 1)[0]
    client.post("/api/v1/schedules/toggle", headers=auth, json={
        "driverId": driver["id"], "date": target.isoformat(), "type": "annual_leave",
    })
    schedule = db.query(Schedule).filter(Schedule.driverId == driver["id"]).one()
    client.patch(f"/api/v1/schedules/{schedule.id}/remark", headers=auth, json={"remark": "hospital"})

    _set(client, auth, driver["id"], next_year, 4, 1)

    db.expire_all()
    row = db.query(Schedule).filter(Schedule.driverId == driver["id"], Schedule.date == target).one()
    assert row.id == schedule.id
    assert row.isDayOff is True
    assert row.isAnnualLeave is True
    assert row.remark == "hospital"


def test_delete_pattern_removes_its_day_offs(client, auth, db, make_driver, next_year):
    driver = make_driver("Somchai")
    pattern = _set(client, auth, driver["id"], next_year, 9, 2).json()["data"]

    res = client.delete(f"{URL}/{pattern['id']}", headers=auth)
    assert res.status_code == 200
    assert res.json()["data"]["deletedSchedules"] == len(pattern["dates"])
    assert _day_offs(db, driver["id"]) == []
    assert client.get(f"{URL}/{pattern['id']}", headers=auth).status_code == 404


def test_delete_unknown_pattern(client, auth):
    assert client.delete(f"{URL}/999", headers=auth).status_code == 404


def test_delete_pattern_gives_back_replacement_overtime(
    client, auth, db, shifts, make_driver, next_year,
):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan", [shifts["Afternoon Shift"]])
    pattern = _set(client, auth, absent["id"], next_year, 11, 4).json()["data"]

    first = date.fromisoformat(pattern["dates"][0])
    schedule = db.query(Schedule).filter(Schedule.driverId == absent["id"], Schedule.date == first).one()
    res = client.post("/api/v1/replacements", headers=auth, json={
        "scheduleId": schedule.id, "replacementDriverId": cover["id"],
    })
    assert res.status_code == 201

    assert client.delete(f"{URL}/{pattern['id']}", headers=auth).status_code == 200

    db.expire_all()
    assert db.query(OvertimeRecord).filter(OvertimeRecord.driverId == cover["id"]).count() == 0


def test_clearing_a_day_off_gives_back_replacement_overtime(
    client, auth, db, shifts, make_driver, next_year,
):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan", [shifts["Afternoon Shift"]])
    pattern = _set(client, auth, absent["id"], next_year, 10, 1).json()["data"]

    first = date.fromisoformat(pattern["dates"][0])
    schedule = db.query(Schedule).filter(Schedule.driverId == absent["id"], Schedule.date == first).one()
    res = client.post("/api/v1/replacements", headers=auth, json={
        "scheduleId": schedule.id, "replacementDriverId": cover["id"],
    })
    assert res.status_code == 201

    _set(client, auth, absent["id"], next_year, 10, 2)

    db.expire_all()
    assert db.query(OvertimeRecord).filter(OvertimeRecord.driverId == cover["id"]).count() == 0


def test_validation(client, auth, make_driver):
    driver = make_driver("Somchai")
    year = today_local().year

    assert _set(client, auth, driver["id"], year - 1, 1, 1).status_code == 422
    assert _set(client, auth, driver["id"], year, 13, 1).status_code == 422
    assert _set(client, auth, driver["id"], year, 0, 1).status_code == 422
    assert _set(client, auth, driver["id"], year, 1, 7).status_code == 422
    res = client.put(URL, headers=auth, json={"driverId": driver["id"], "month": 1})
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_driver(client, auth, next_year):
    assert _set(client, auth, 999, next_year, 1, 1).status_code == 404


def test_pattern_over_a_covering_day_is_logged(
    client, auth, db, shifts, make_driver, next_year, caplog,
):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan", [shifts["Afternoon Shift"]])
    target = dates_matching_weekday(next_year, 12, 3)[0]
    schedule = client.post("/api/v1/schedules/toggle", headers=auth, json={
        "driverId": absent["id"], "date": target.isoformat(), "type": "annual_leave",
    }).json()["data"]
    client.post("/api/v1/replacements", headers=auth, json={
        "scheduleId": schedule["id"], "replacementDriverId": cover["id"],
    })

    with caplog.at_level(logging.WARNING, logger="app.services.dayoff_service"):
        res = _set(client, auth, cover["id"], next_year, 12, 3)

    assert res.status_code == 200
    assert f"set off on {target} while covering schedule={schedule['id']}" in caplog.text
    assert target in _day_offs(db, cover["id"])
