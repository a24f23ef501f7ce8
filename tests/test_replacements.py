from app.models.overtime_record import OvertimeRecord, OTType

DAY = "2030-03-05"


def _assign(client, auth, schedule_id, driver_id, shift_id=None):
    body = {"scheduleId": schedule_id, "replacementDriverId": driver_id}
    if shift_id is not None:
        body["shiftId"] = shift_id
    return client.post("/api/v1/replacements", headers=auth, json=body)


def _replacement_records(db, driver_id):
    db.expire_all()
    return db.query(OvertimeRecord).filter(
        OvertimeRecord.driverId == driver_id,
        OvertimeRecord.otType == OTType.REPLACEMENT,
    ).all()


def test_assign_accrues_eight_hours(client, auth, shifts, make_driver, mark_absent, overtime_hours):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan")
    schedule = mark_absent(absent["id"], DAY)

    res = _assign(client, auth, schedule["id"], cover["id"], shifts["Morning Shift"])
    assert res.status_code == 201, res.json()
    assert res.json()["data"][0]["replacementDriver"]["id"] == cover["id"]
    assert overtime_hours(cover["id"], 2030, 3) == 8.0


def test_two_shifts_same_driver_merge_into_one_record(
    client, auth, db, shifts, make_driver, mark_absent, overtime_hours,
):
    absent = make_driver("Somchai", [shifts["Morning Shift"], shifts["Night Shift"]])
    cover = make_driver("Anan")
    schedule = mark_absent(absent["id"], DAY)

    assert _assign(client, auth, schedule["id"], cover["id"], shifts["Morning Shift"]).status_code == 201
    assert _assign(client, auth, schedule["id"], cover["id"], shifts["Night Shift"]).status_code == 201

    records = _replacement_records(db, cover["id"])
    assert len(records) == 1
    assert float(records[0].hours) == 16.0
    assert float(records[0].otRate) == 1.5
    assert overtime_hours(cover["id"], 2030, 3) == 16.0


def test_assign_without_shift_covers_every_open_shift(
    client, auth, shifts, make_driver, mark_absent, overtime_hours,
):
    absent = make_driver("Somchai", [shifts["Morning Shift"], shifts["Night Shift"]])
    cover = make_driver("Anan")
    schedule = mark_absent(absent["id"], DAY)

    res = _assign(client, auth, schedule["id"], cover["id"])
    assert res.status_code == 201
    assert len(res.json()["data"]) == 2
    assert overtime_hours(cover["id"], 2030, 3) == 16.0

    res = client.get(f"/api/v1/schedules/{schedule['id']}", headers=auth)
    assert res.json()["data"]["coverage"] == "covered"
    assert res.json()["data"]["needsReplacement"] is False

    # nothing left to cover
    res = _assign(client, auth, schedule["id"], make_driver("Prasit")["id"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_REPLACEMENT"


def test_update_moves_one_shift_of_overtime(
    client, auth, db, shifts, make_driver, mark_absent, overtime_hours,
):
    absent = make_driver("Somchai", [shifts["Morning Shift"], shifts["Night Shift"]])
    first = make_driver("Anan")
    second = make_driver("Prasit")
    schedule = mark_absent(absent["id"], DAY)

    morning = _assign(client, auth, schedule["id"], first["id"], shifts["Morning Shift"]).json()["data"][0]
    _assign(client, auth, schedule["id"], first["id"], shifts["Night Shift"])

    res = client.put(f"/api/v1/replacements/{morning['id']}", headers=auth,
                     json={"replacementDriverId": second["id"]})
    assert res.status_code == 200
    assert res.json()["data"]["replacementDriver"]["id"] == second["id"]

    # the old driver keeps the night shift's hours
    assert overtime_hours(first["id"], 2030, 3) == 8.0
    assert overtime_hours(second["id"], 2030, 3) == 8.0


def test_update_to_same_driver_changes_nothing(client, auth, shifts, make_driver, mark_absent, overtime_hours):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan")
    schedule = mark_absent(absent["id"], DAY)
    r = _assign(client, auth, schedule["id"], cover["id"]).json()["data"][0]

    res = client.put(f"/api/v1/replacements/{r['id']}", headers=auth, json={"replacementDriverId": cover["id"]})
    assert res.status_code == 200
    assert overtime_hours(cover["id"], 2030, 3) == 8.0


def test_delete_releases_overtime(client, auth, db, shifts, make_driver, mark_absent):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan")
    schedule = mark_absent(absent["id"], DAY)
    r = _assign(client, auth, schedule["id"], cover["id"]).json()["data"][0]

    assert client.delete(f"/api/v1/replacements/{r['id']}", headers=auth).status_code == 200
    assert _replacement_records(db, cover["id"]) == []


def test_same_shift_cannot_be_covered_twice(client, auth, shifts, make_driver, mark_absent, overtime_hours):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan")
    other = make_driver("Prasit")
    schedule = mark_absent(absent["id"], DAY)

    assert _assign(client, auth, schedule["id"], cover["id"], shifts["Morning Shift"]).status_code == 201
    res = _assign(client, auth, schedule["id"], other["id"], shifts["Morning Shift"])
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_ENTRY"
    assert overtime_hours(other["id"], 2030, 3) == 0


def test_schedule_must_be_absent(client, auth, shifts, make_driver, mark_absent):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan")
    schedule = mark_absent(absent["id"], DAY)
    mark_absent(absent["id"], DAY)   # toggled back to working

    res = _assign(client, auth, schedule["id"], cover["id"], shifts["Morning Shift"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SCHEDULE_NOT_ABSENT"


def test_candidate_checks(client, auth, shifts, make_driver, mark_absent):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    also_off = make_driver("Anan")
    schedule = mark_absent(absent["id"], DAY)
    mark_absent(also_off["id"], DAY, "annual_leave")

    res = _assign(client, auth, schedule["id"], absent["id"], shifts["Morning Shift"])
    assert res.status_code == 400
    res = _assign(client, auth, schedule["id"], also_off["id"], shifts["Morning Shift"])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_REPLACEMENT"
    assert _assign(client, auth, schedule["id"], 999, shifts["Morning Shift"]).status_code == 404
    assert _assign(client, auth, 999, also_off["id"]).status_code == 404


def test_deleting_absent_driver_releases_replacement_overtime(
    client, auth, db, shifts, make_driver, mark_absent,
):
    absent = make_driver("Somchai", [shifts["Morning Shift"]])
    cover = make_driver("Anan")
    schedule = mark_absent(absent["id"], DAY)
    _assign(client, auth, schedule["id"], cover["id"])

    assert client.delete(f"/api/v1/drivers/{absent['id']}", headers=auth).status_code == 200
    assert _replacement_records(db, cover["id"]) == []
