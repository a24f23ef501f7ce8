import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.main import app
from app.services.auth_service import auth_service
from app.utils.calendar import today_local

PASSWORD = "Scheduler1"


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def user():
    session = SessionLocal()
    try:
        return auth_service.create_user(session, "planner", "Shift Planner", PASSWORD)
    finally:
        session.close()


@pytest.fixture
def auth(client, user):
    res = client.post("/api/v1/auth/login", json={"username": "planner", "password": PASSWORD})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['data']['accessToken']}"}


@pytest.fixture
def shifts(client, auth):
    res = client.post("/api/v1/shifts/seed", headers=auth)
    assert res.status_code == 200
    return {s["name"]: s["id"] for s in res.json()["data"]}


@pytest.fixture
def make_driver(client, auth):
    counter = {"n": 0}

    def _make(name: str, shift_ids: list[int] | None = None, **extra) -> dict:
        counter["n"] += 1
        body = {
            "name": name,
            "staffId": f"S{counter['n']:03d}",
            "shifts": [{"shiftId": sid, "isPrimary": i == 0} for i, sid in enumerate(shift_ids or [])],
            **extra,
        }
        res = client.post("/api/v1/drivers", json=body, headers=auth)
        assert res.status_code == 201, res.json()
        return res.json()["data"]

    return _make


@pytest.fixture
def next_year() -> int:
    return today_local().year + 1


@pytest.fixture
def mark_absent(client, auth):
    def _mark(driver_id: int, on: str, type_: str = "day_off") -> dict:
        res = client.post(
            "/api/v1/schedules/toggle",
            json={"driverId": driver_id, "date": on, "type": type_},
            headers=auth,
        )
        assert res.status_code == 200, res.json()
        return res.json()["data"]

    return _mark


@pytest.fixture
def overtime_hours(client, auth):
    def _hours(driver_id: int, year: int, month: int) -> float:
        res = client.get(
            "/api/v1/overtime",
            params={"year": year, "month": month, "driverId": driver_id, "otType": "replacement"},
            headers=auth,
        )
        assert res.status_code == 200
        return res.json()["data"]["summary"]["totalHours"]

    return _hours
