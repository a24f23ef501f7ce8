from app.models.user import User

PASSWORD = "Scheduler1"


def _login(client, password=PASSWORD):
    return client.post("/api/v1/auth/login", json={"username": "planner", "password": password})


def test_login_returns_tokens(client, user):
    res = _login(client)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["tokenType"] == "Bearer"
    assert data["accessToken"] and data["refreshToken"]
    assert data["user"]["username"] == "planner"


def test_wrong_password_is_rejected(client, user):
    res = _login(client, "Wrong1234")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHORIZED"


def test_endpoints_require_a_token(client, user):
    res = client.get("/api/v1/drivers")
    assert res.status_code == 401
    res = client.get("/api/v1/drivers", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_health_is_public(client):
    assert client.get("/health").json()["status"] == "ok"


def test_me(client, auth):
    res = client.get("/api/v1/auth/me", headers=auth)
    assert res.status_code == 200
    assert res.json()["data"]["name"] == "Shift Planner"


def test_refresh_and_logout(client, user):
    tokens = _login(client).json()["data"]
    headers = {"Authorization": f"Bearer {tokens['accessToken']}"}

    res = client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert res.status_code == 200
    assert res.json()["data"]["accessToken"]

    res = client.post("/api/v1/auth/logout", json={"refreshToken": tokens["refreshToken"]}, headers=headers)
    assert res.status_code == 200

    res = client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "REFRESH_TOKEN_INVALID"


def test_access_token_is_not_a_refresh_token(client, user):
    tokens = _login(client).json()["data"]
    res = client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["accessToken"]})
    assert res.status_code == 401


def test_change_password(client, auth):
    res = client.post("/api/v1/auth/change-password", headers=auth, json={
        "currentPassword": PASSWORD,
        "newPassword": "Changed123",
        "confirmPassword": "Changed123",
    })
    assert res.status_code == 200
    assert _login(client).status_code == 401
    assert _login(client, "Changed123").status_code == 200


def test_change_password_validates_strength(client, auth):
    res = client.post("/api/v1/auth/change-password", headers=auth, json={
        "currentPassword": PASSWORD,
        "newPassword": "weak",
        "confirmPassword": "weak",
    })
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


def test_inactive_user_is_refused(client, auth, db, user):
    db.get(User, user.id).isActive = False
    db.commit()

    res = client.get("/api/v1/auth/me", headers=auth)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "ACCOUNT_INACTIVE"
    assert _login(client).status_code == 403
