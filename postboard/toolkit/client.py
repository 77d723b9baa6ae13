"""
An API client for postboard, wraps around httpx.

Authentication is chosen once per deployment (`Settings.auth_mode`):

- `cookie`: the session cookie set by the API at login rides along in the
  client's cookie jar. No `Authorization` header is ever sent.
- `token`: the session token is kept in client storage under `token` and sent
  as `Authorization: Bearer <token>` on every request.

Either way the `XSRF-TOKEN` cookie handed out by `/sanctum/csrf-cookie` is
echoed back as the `X-XSRF-TOKEN` header on state-changing requests.
"""

import json
from typing import Any

import httpx

from postboard.config.settings import AuthMode, Settings

from .storage import Storage

SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}
COOKIES_KEY = "cookies"

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class XsrfAuth(httpx.Auth):
    """
    Echo the CSRF cookie as a header on non-safe requests. Requires the live
    cookie jar of the client this is attached to (`client.cookies`).
    """

    name: AuthMode

    cookies: httpx.Cookies
    cookie_name: str
    header_name: str

    def __init__(
        self,
        cookies: httpx.Cookies,
        cookie_name: str = "XSRF-TOKEN",
        header_name: str = "X-XSRF-TOKEN",
    ):
        self.cookies = cookies
        self.cookie_name = cookie_name
        self.header_name = header_name

    def add_xsrf_header(self, request: httpx.Request):
        if request.method in SAFE_METHODS:
            return

        xsrf_token = self.cookies.get(self.cookie_name)

        if xsrf_token:
            request.headers[self.header_name] = xsrf_token

    def auth_flow(self, request: httpx.Request):
        self.add_xsrf_header(request)
        yield request


class CookieAuth(XsrfAuth):
    """
    Session-cookie authentication. The cookie jar does the work.
    """

    name = "cookie"


class TokenAuth(XsrfAuth):
    """
    Bearer-token authentication. The token is read from storage on every
    request, so logging in or out elsewhere takes effect immediately. When
    there is no token the request goes out unauthenticated.
    """

    name = "token"

    storage: Storage
    token_key: str

    def __init__(self, storage: Storage, token_key: str = "token", **kwargs):
        super().__init__(**kwargs)
        self.storage = storage
        self.token_key = token_key

    def auth_flow(self, request: httpx.Request):
        token = self.storage.get_item(self.token_key)

        if token:
            request.headers["Authorization"] = f"Bearer {token}"

        self.add_xsrf_header(request)
        yield request


def create_api_client(
    settings: Settings,
    storage: Storage,
    auth_mode: AuthMode | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """
    Create an API client bound to `settings.api_base_url`. The caller owns it
    and should close it (`async with` or `aclose()`).

    Parameters
    ----------
    settings: Settings
        Provides the base URL and the CSRF cookie/header names.
    storage: Storage
        Where the bearer token is read from in `token` mode.
    auth_mode: AuthMode | None, optional
        Overrides `settings.auth_mode`.
    **kwargs
        Passed on to `httpx.AsyncClient` (e.g. `transport` in tests).

    Example
    -------
    ```python
    from postboard.config.settings import Settings
    from postboard.toolkit.client import create_api_client
    from postboard.toolkit.storage import FileStorage

    settings = Settings()

    async with create_api_client(settings, FileStorage()) as client:
        response = await client.get("/user")
    ```
    """

    if auth_mode is None:
        auth_mode = settings.auth_mode

    client = httpx.AsyncClient(
        base_url=settings.api_base_url, headers=DEFAULT_HEADERS, **kwargs
    )

    xsrf = dict(
        cookies=client.cookies,
        cookie_name=settings.csrf_cookie_name,
        header_name=settings.csrf_header_name,
    )

    match auth_mode:
        case "token":
            client.auth = TokenAuth(storage=storage, **xsrf)
        case "cookie":
            client.auth = CookieAuth(**xsrf)
        case _:
            raise ValueError(f"Unknown auth mode {auth_mode}")

    return client


def save_cookies(cookies: httpx.Cookies, storage: Storage, key: str = COOKIES_KEY):
    """
    Serializes the cookie jar (session and CSRF cookies) to storage, so that a
    later client, e.g. the next CLI invocation, can pick the session up.
    Expired cookies are dropped.
    """

    cookies.jar.clear_expired_cookies()

    storage.set_item(
        key,
        json.dumps(
            [
                dict(
                    name=cookie.name,
                    value=cookie.value,
                    domain=cookie.domain,
                    path=cookie.path,
                )
                for cookie in cookies.jar
            ]
        ),
    )


def load_cookies(cookies: httpx.Cookies, storage: Storage, key: str = COOKIES_KEY):
    """
    Reads cookies saved by `save_cookies` into the jar.
    """

    stored = storage.get_item(key)

    if not stored:
        return

    for cookie in json.loads(stored):
        cookies.set(**cookie)
