from datetime import date
from decimal import Decimal

from app.models.overtime_record import OvertimeRecord, OTType
from app.services.overtime_service import accrue_replacement_overtime, release_replacement_overtime


def test_manual_record_uses_type_rate(client, auth, make_driver):
    driver = make_driver("Somchai")
    res = client.post("/api/v1/overtime", headers=auth, json={
        "driverId": driver["id"], "date": "2030-04-13", "hours": 4, "otType": "holiday",
    })
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["otRate"] == 2.0
    assert data["total"] == 8.0
    assert data["otTypeLabel"] == "Holiday OT (200%)"


def test_replacement_type_cannot_be_entered_by_hand(client, auth, make_driver):
    driver = make_driver("Somchai")
    res = client.post("/api/v1/overtime", headers=auth, json={
        "driverId": driver["id"], "date": "2030-04-13", "hours": 8, "otType": "replacement",
    })
    assert res.status_code == 422


def test_hours_bounds(client, auth, make_driver):
    driver = make_driver("Somchai")
    for hours in (0, 0.25, 25):
        res = client.post("/api/v1/overtime", headers=auth, json={
            "driverId": driver["id"], "date": "2030-04-13", "hours": hours, "otType": "normal",
        })
        assert res.status_code == 422


def test_month_listing_and_summary(client, auth, make_driver):
    a = make_driver("Somchai")
    b = make_driver("Anan")
    for driver_id, day, hours, ot_type in [
        (a["id"], "2030-04-02", 2, "normal"),
        (a["id"], "2030-04-20", 3, "night"),
        (b["id"], "2030-04-10", 1, "day_off"),
        (a["id"], "2030-05-01", 5, "normal"),
    ]:
        client.post("/api/v1/overtime", headers=auth, json={
            "driverId": driver_id, "date": day, "hours": hours, "otType": ot_type,
        })

    data = client.get("/api/v1/overtime", headers=auth, params={"year": 2030, "month": 4}).json()["data"]
    assert [r["date"] for r in data["records"]] == ["2030-04-02", "2030-04-10", "2030-04-20"]
    assert data["summary"] == {"totalRecords": 3, "totalHours": 6.0, "totalValue": 11.0}

    data = client.get("/api/v1/overtime", headers=auth,
                      params={"year": 2030, "month": 4, "driverId": a["id"]}).json()["data"]
    assert data["summary"]["totalHours"] == 5.0


def test_delete_record(client, auth, make_driver):
    driver = make_driver("Somchai")
    record = client.post("/api/v1/overtime", headers=auth, json={
        "driverId": driver["id"], "date": "2030-04-13", "hours": 1, "otType": "normal",
    }).json()["data"]
    assert client.delete(f"/api/v1/overtime/{record['id']}", headers=auth).status_code == 200
    assert client.get(f"/api/v1/overtime/{record['id']}", headers=auth).status_code == 404


# ─── Ledger ───────────────────────────────────────────────────────────────────
def test_ledger_accrue_and_release(db, make_driver):
    driver = make_driver("Somchai")
    day = date(2030, 4, 13)

    accrue_replacement_overtime(db, driver["id"], day)
    accrue_replacement_overtime(db, driver["id"], day)
    record = accrue_replacement_overtime(db, driver["id"], day)
    assert record.hours == Decimal("24")
    assert db.query(OvertimeRecord).filter(OvertimeRecord.otType == OTType.REPLACEMENT).count() == 1

    assert release_replacement_overtime(db, driver["id"], day).hours == Decimal("16")
    assert release_replacement_overtime(db, driver["id"], day).hours == Decimal("8")
    assert release_replacement_overtime(db, driver["id"], day) is None
    assert db.query(OvertimeRecord).count() == 0

    # nothing left to release
    assert release_replacement_overtime(db, driver["id"], day) is None
    db.rollback()
