"""
Tests the session endpoints: CSRF, registration, login, logout and the
current user.
"""

from postboard.core.uuid import uuid7


def unique_email() -> str:
    return f"{uuid7().hex}@postboard.local"


def csrf_headers(client) -> dict[str, str]:
    response = client.get("/sanctum/csrf-cookie")
    assert response.status_code == 204
    return {"X-XSRF-TOKEN": client.cookies["XSRF-TOKEN"]}


def register(client, email: str, password: str = "password1234"):
    return client.post(
        "/api/register",
        json={
            "name": "Test User",
            "email": email,
            "password": password,
            "password_confirmation": password,
        },
        headers=csrf_headers(client),
    )


def test_csrf_cookie(client):
    response = client.get("/sanctum/csrf-cookie")

    assert response.status_code == 204
    assert "XSRF-TOKEN" in response.cookies
    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" not in set_cookie


def test_csrf_required(client):
    body = {"email": "someone@postboard.local", "password": "password1234"}

    response = client.post("/api/login", json=body)
    assert response.status_code == 419
    assert response.json() == {"message": "CSRF token mismatch."}

    client.get("/sanctum/csrf-cookie")
    response = client.post("/api/login", json=body, headers={"X-XSRF-TOKEN": "nope"})
    assert response.status_code == 419


def test_register_and_user(client):
    email = unique_email()

    response = register(client, email)

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == email
    assert body["token"]
    assert "password_hash" not in body["user"]
    assert client.cookies["postboard_session"] == body["token"]

    response = client.get("/api/user")
    assert response.status_code == 200
    assert response.json() == body["user"]

    response = client.get("/api/social-accounts")
    assert response.status_code == 200
    assert response.json() == []


def test_register_duplicate(client):
    email = unique_email()
    assert register(client, email).status_code == 201

    response = register(client, email.upper())

    assert response.status_code == 422
    assert response.json()["message"] == "The email has already been taken."
    assert response.json()["errors"]["email"] == ["The email has already been taken."]


def test_register_invalid(client):
    response = client.post(
        "/api/register",
        json={
            "name": "Test User",
            "email": unique_email(),
            "password": "password1234",
            "password_confirmation": "something else",
        },
        headers=csrf_headers(client),
    )

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "The password field confirmation does not match."
    assert list(body["errors"].keys()) == ["password"]

    response = client.post(
        "/api/register", json={"name": "No Email"}, headers=csrf_headers(client)
    )

    assert response.status_code == 422
    assert "email" in response.json()["errors"]
    assert "password" in response.json()["errors"]


def test_login_logout(client):
    email = unique_email()
    register(client, email)
    client.cookies.delete("postboard_session")

    assert client.get("/api/user").status_code == 401

    response = client.post(
        "/api/login",
        json={"email": email, "password": "wrong password"},
        headers=csrf_headers(client),
    )

    assert response.status_code == 422
    assert response.json()["message"] == "These credentials do not match our records."
    assert "postboard_session" not in client.cookies

    response = client.post(
        "/api/login",
        json={"email": email, "password": "password1234", "remember": True},
        headers=csrf_headers(client),
    )

    assert response.status_code == 200
    assert client.get("/api/user").json()["email"] == email

    response = client.post("/api/logout", headers=csrf_headers(client))

    assert response.status_code == 204
    assert "postboard_session" not in client.cookies
    assert client.get("/api/user").status_code == 401


def test_unauthenticated(client):
    response = client.get("/api/user")

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthenticated."}

    response = client.post("/api/logout", headers=csrf_headers(client))
    assert response.status_code == 401

    response = client.get(
        "/api/social-accounts", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


def test_bearer_token(example_client, example_settings):
    response = example_client.post(
        "/api/login",
        json={
            "email": example_settings.example_user_email,
            "password": example_settings.example_user_password,
        },
        headers=csrf_headers(example_client),
    )

    assert response.status_code == 200
    token = response.json()["token"]

    example_client.cookies.clear()
    headers = {"Authorization": f"Bearer {token}"}

    response = example_client.get("/api/user", headers=headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Example User"

    response = example_client.get("/api/social-accounts", headers=headers)
    assert response.status_code == 200
    accounts = response.json()
    assert [a["platform"] for a in accounts] == ["facebook", "instagram", "x"]
    assert all("avatar" in a and "profile_picture" not in a for a in accounts)

    # Bearer requests do not need the CSRF header
    response = example_client.post("/api/logout", headers=headers)
    assert response.status_code == 204

    assert example_client.get("/api/user", headers=headers).status_code == 401
