"""
Tests the authentication store against a scripted API.
"""

import json

import httpx
import pytest
from fake_backend import ACCOUNTS, CSRF_VALUE, SESSION_TOKEN, USER, refuse

from postboard.app.routes import ROUTES
from postboard.toolkit.router import Router
from postboard.toolkit.storage import FileStorage, MemoryStorage
from postboard.toolkit.store import AuthStore


def make_store(settings, backend, storage=None) -> AuthStore:
    return AuthStore.from_settings(
        settings=settings,
        storage=storage if storage is not None else MemoryStorage(),
        router=Router(ROUTES),
        transport=httpx.MockTransport(backend),
    )


def test_initial_state_from_storage(settings, backend):
    storage = MemoryStorage(
        {"user": json.dumps(USER), "socialAccounts": json.dumps(ACCOUNTS)}
    )

    store = make_store(settings, backend, storage)

    assert store.user == USER
    assert store.social_accounts == ACCOUNTS

    empty = make_store(settings, backend)

    assert empty.user is None
    assert empty.social_accounts == []


def test_corrupt_storage(settings, backend):
    with pytest.raises(ValueError):
        make_store(settings, backend, MemoryStorage({"user": "{not json"}))


@pytest.mark.asyncio(loop_scope="session")
async def test_login(settings, backend):
    store = make_store(settings, backend)

    async with store.client:
        result = await store.login({"email": USER["email"], "password": "password"})

    assert result.ok
    assert result.value == USER
    assert store.user == USER
    assert json.loads(store.storage.get_item("user")) == USER

    assert backend.paths() == ["/sanctum/csrf-cookie", "/api/login", "/api/user"]

    login_request = backend.last("/api/login")
    assert login_request.headers["X-XSRF-TOKEN"] == CSRF_VALUE
    assert "Authorization" not in login_request.headers
    assert json.loads(login_request.content) == {
        "email": USER["email"],
        "password": "password",
    }

    # Logging in does not navigate
    assert store.router.current is None


@pytest.mark.asyncio(loop_scope="session")
async def test_login_invalid(settings, backend):
    backend.routes[("POST", "/api/login")] = lambda request: httpx.Response(
        422, json={"message": "These credentials do not match our records."}
    )

    store = make_store(settings, backend)

    async with store.client:
        result = await store.login({"email": USER["email"], "password": "nope"})

    assert not result.ok
    assert result.kind == "status"
    assert result.message == "Invalid credentials"
    assert result.status_code == 422

    assert store.user is None
    assert store.storage.get_item("user") is None
    assert "/api/user" not in backend.paths()


@pytest.mark.asyncio(loop_scope="session")
async def test_login_unreachable(settings, backend):
    backend.routes[("GET", "/sanctum/csrf-cookie")] = refuse

    store = make_store(settings, backend)

    async with store.client:
        result = await store.login({"email": USER["email"], "password": "password"})

    assert result.kind == "transport"
    assert backend.paths() == ["/sanctum/csrf-cookie"]


@pytest.mark.asyncio(loop_scope="session")
async def test_register(settings, backend):
    store = make_store(settings, backend)

    async with store.client:
        result = await store.register(
            {
                "name": USER["name"],
                "email": USER["email"],
                "password": "password",
                "password_confirmation": "password",
            }
        )

    assert result.ok
    assert store.user == USER
    assert store.router.current.path == "/dashboard"
    assert backend.last("/api/register").headers["X-XSRF-TOKEN"] == CSRF_VALUE


@pytest.mark.asyncio(loop_scope="session")
@pytest.mark.parametrize(
    "response, kind, message",
    [
        (
            httpx.Response(422, json={"message": "The email has already been taken."}),
            "status",
            "The email has already been taken.",
        ),
        (httpx.Response(500, json={}), "status", "Registration failed"),
        (httpx.Response(500, text="<h1>Server Error</h1>"), "decode", None),
    ],
)
async def test_register_failure(settings, backend, response, kind, message):
    backend.routes[("POST", "/api/register")] = lambda request: response

    store = make_store(settings, backend)

    async with store.client:
        result = await store.register({"email": USER["email"]})

    assert result.kind == kind

    if message is not None:
        assert result.message == message

    assert store.user is None
    assert store.router.current is None


@pytest.mark.asyncio(loop_scope="session")
async def test_register_user_fetch_fails(settings, backend):
    backend.routes[("GET", "/api/user")] = lambda request: httpx.Response(500)

    store = make_store(settings, backend)

    async with store.client:
        result = await store.register({"email": USER["email"]})

    assert result.kind == "status"
    assert result.message == "User fetch failed: Internal Server Error"
    assert store.router.current is None


@pytest.mark.asyncio(loop_scope="session")
async def test_fetch_user_bad_body(settings, backend):
    backend.routes[("GET", "/api/user")] = lambda request: httpx.Response(
        200, text="<html></html>"
    )

    store = make_store(settings, backend)

    async with store.client:
        result = await store.fetch_user()

    assert result.kind == "decode"
    assert store.user is None


@pytest.mark.asyncio(loop_scope="session")
async def test_logout(settings, backend):
    storage = MemoryStorage(
        {"user": json.dumps(USER), "socialAccounts": json.dumps(ACCOUNTS)}
    )
    store = make_store(settings, backend, storage)

    async with store.client:
        result = await store.logout()

    assert result.ok
    assert result.value is None
    assert store.user is None
    assert storage.get_item("user") is None
    assert storage.get_item("socialAccounts") is not None
    assert store.router.current.path == "/login"


@pytest.mark.asyncio(loop_scope="session")
@pytest.mark.parametrize(
    "handler, kind",
    [
        (lambda request: httpx.Response(500), "status"),
        (refuse, "transport"),
    ],
)
async def test_logout_failure_keeps_user(settings, backend, handler, kind):
    backend.routes[("POST", "/api/logout")] = handler

    storage = MemoryStorage({"user": json.dumps(USER)})
    store = make_store(settings, backend, storage)

    async with store.client:
        result = await store.logout()

    assert result.kind == kind

    if kind == "status":
        assert result.message == "Logout failed: Internal Server Error"

    assert store.user == USER
    assert json.loads(storage.get_item("user")) == USER
    assert store.router.current is None


@pytest.mark.asyncio(loop_scope="session")
async def test_social_accounts_survive_restart(settings, backend, tmp_path):
    storage = FileStorage(tmp_path / "storage.json")
    store = make_store(settings, backend, storage)

    async with store.client:
        result = await store.fetch_social_accounts()

    assert result.value == ACCOUNTS
    assert store.social_accounts == ACCOUNTS

    restarted = make_store(settings, backend, FileStorage(tmp_path / "storage.json"))
    assert restarted.social_accounts == ACCOUNTS

    restarted.social_accounts = []
    restarted.hydrate_from_local_storage()
    assert restarted.social_accounts == ACCOUNTS

    await restarted.client.aclose()


def test_hydrate_without_stored_accounts(settings, backend):
    store = make_store(settings, backend)
    store.social_accounts = ACCOUNTS

    store.hydrate_from_local_storage()

    assert store.social_accounts == ACCOUNTS


@pytest.mark.asyncio(loop_scope="session")
async def test_fetch_social_accounts_failure(settings, backend):
    backend.routes[("GET", "/api/social-accounts")] = lambda request: httpx.Response(
        401, json={"message": "Unauthenticated."}
    )

    storage = MemoryStorage({"socialAccounts": json.dumps(ACCOUNTS)})
    store = make_store(settings, backend, storage)

    async with store.client:
        result = await store.fetch_social_accounts()

    assert result.kind == "status"
    assert result.message == "Failed to fetch accounts"
    assert result.status_code == 401
    assert store.social_accounts == ACCOUNTS


@pytest.mark.asyncio(loop_scope="session")
async def test_token_mode(token_settings, backend):
    store = make_store(token_settings, backend)

    async with store.client:
        result = await store.login({"email": USER["email"], "password": "password"})

        assert result.ok
        assert store.storage.get_item("token") == SESSION_TOKEN
        assert "Authorization" not in backend.last("/api/login").headers
        assert (
            backend.last("/api/user").headers["Authorization"]
            == f"Bearer {SESSION_TOKEN}"
        )

        result = await store.logout()

    assert result.ok
    assert backend.last("/api/logout").headers["Authorization"] == (
        f"Bearer {SESSION_TOKEN}"
    )
    assert store.storage.get_item("token") is None
    assert store.user is None


@pytest.mark.asyncio(loop_scope="session")
async def test_logout_refreshes_csrf_cookie(settings, backend):
    store = make_store(settings, backend, MemoryStorage({"user": json.dumps(USER)}))

    # An empty jar, as when the cookie from login has expired
    async with store.client:
        result = await store.logout()

    assert result.ok
    assert backend.paths() == ["/sanctum/csrf-cookie", "/api/logout"]
    assert backend.last("/api/logout").headers["X-XSRF-TOKEN"] == CSRF_VALUE


@pytest.mark.asyncio(loop_scope="session")
async def test_failure_message_without_reason_phrase(settings, backend):
    backend.routes[("POST", "/api/logout")] = lambda request: httpx.Response(
        419, json={"message": "CSRF token mismatch."}
    )
    backend.routes[("GET", "/api/user")] = lambda request: httpx.Response(419)

    store = make_store(settings, backend, MemoryStorage({"user": json.dumps(USER)}))

    async with store.client:
        logout = await store.logout()
        fetch = await store.fetch_user()

    assert logout.message == "Logout failed: 419"
    assert fetch.message == "User fetch failed: 419"
    assert store.user == USER
