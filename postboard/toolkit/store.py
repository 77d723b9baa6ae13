"""
Client-side authentication state: the current user and their linked social
accounts, mirrored to client storage so they survive restarts.

Every action returns a `Result`. Transport, status and decoding problems are
logged and reported as a `Failure`; nothing is retried, and state that an
earlier step already wrote is not rolled back.
"""

import json
from typing import Any

import httpx
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from postboard.config.settings import AuthMode, Settings

from .client import create_api_client
from .results import Failure, Result, Success
from .router import Router
from .storage import Storage

USER_KEY = "user"
SOCIAL_ACCOUNTS_KEY = "socialAccounts"
TOKEN_KEY = "token"


def reason(response: httpx.Response) -> str:
    """
    The reason phrase, or the status code for statuses httpx has no phrase
    for (such as 419).
    """
    return response.reason_phrase or str(response.status_code)


class AuthStore:
    """
    Holds `user` and `social_accounts`, both read from storage on creation.

    The store does not own its collaborators: the HTTP client (see
    `postboard.toolkit.client.create_api_client`), the storage and the router
    are all handed in, and the caller closes the client.

    Parameters
    ----------
    client: httpx.AsyncClient
        Client bound to the API base URL (e.g. `http://localhost:8000/api`).
    storage: Storage
        Client storage holding `user`, `socialAccounts` and, in token mode,
        `token`.
    router: Router
        Navigated to `/dashboard` after registering and `/login` after logging
        out.
    csrf_cookie_url: str
        Absolute URL of the CSRF cookie endpoint, which lives outside the API
        prefix.
    auth_mode: AuthMode
        In `token` mode the session token returned by register/login is kept
        in storage, and removed again on logout.
    """

    user: dict[str, Any] | None
    social_accounts: list[dict[str, Any]]

    def __init__(
        self,
        client: httpx.AsyncClient,
        storage: Storage,
        router: Router,
        csrf_cookie_url: str,
        auth_mode: AuthMode = "cookie",
        log: FilteringBoundLogger | None = None,
    ):
        self.client = client
        self.storage = storage
        self.router = router
        self.csrf_cookie_url = csrf_cookie_url
        self.auth_mode = auth_mode
        self.log = log if log is not None else get_logger()

        stored_user = self.storage.get_item(USER_KEY)
        stored_accounts = self.storage.get_item(SOCIAL_ACCOUNTS_KEY)

        self.user = json.loads(stored_user) if stored_user else None
        self.social_accounts = json.loads(stored_accounts) if stored_accounts else []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        storage: Storage,
        router: Router,
        log: FilteringBoundLogger | None = None,
        **client_kwargs: Any,
    ) -> "AuthStore":
        """
        Build a store together with its client, per the deployment's settings.
        Close `store.client` when done.
        """
        client = create_api_client(settings=settings, storage=storage, **client_kwargs)

        return cls(
            client=client,
            storage=storage,
            router=router,
            csrf_cookie_url=settings.csrf_cookie_url,
            auth_mode=settings.auth_mode,
            log=log,
        )

    async def _fail(
        self,
        log: FilteringBoundLogger,
        kind: str,
        message: str,
        status_code: int | None = None,
    ) -> Failure:
        failure = Failure(kind=kind, message=message, status_code=status_code)
        await log.aerror("store.failed", **failure.model_dump(exclude={"ok"}))
        return failure

    async def _send(
        self, method: str, url: str, log: FilteringBoundLogger, **kwargs
    ) -> httpx.Response | Failure:
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            return await self._fail(log, "transport", f"{e.__class__.__name__}: {e}")

    async def _decode(
        self, response: httpx.Response, log: FilteringBoundLogger
    ) -> Any | Failure:
        try:
            return response.json()
        except ValueError as e:
            return await self._fail(
                log, "decode", f"Invalid JSON: {e}", response.status_code
            )

    async def _fetch_csrf_cookie(self, log: FilteringBoundLogger) -> None | Failure:
        """
        Ask the API for a CSRF cookie. Only transport errors count; a bad
        status surfaces as a 419 on the request that follows.
        """
        response = await self._send("GET", self.csrf_cookie_url, log)

        if isinstance(response, Failure):
            return response

        return None

    def _remember_token(self, body: Any):
        if not isinstance(body, dict):
            return

        if token := body.get("token"):
            self.storage.set_item(TOKEN_KEY, token)

    async def register(self, user_data: dict[str, Any]) -> Result:
        """
        Register (which also logs in), load the user and go to the dashboard.
        On failure the message is the API's `message`, or
        `Registration failed` when it has none.
        """
        log = self.log.bind(action="register")

        if failure := await self._fetch_csrf_cookie(log):
            return failure

        response = await self._send("POST", "/register", log, json=user_data)

        if isinstance(response, Failure):
            return response

        if not response.is_success:
            body = await self._decode(response, log)

            if isinstance(body, Failure):
                return body

            message = body.get("message") if isinstance(body, dict) else None
            return await self._fail(
                log, "status", message or "Registration failed", response.status_code
            )

        if self.auth_mode == "token":
            body = await self._decode(response, log)

            if isinstance(body, Failure):
                return body

            self._remember_token(body)

        result = await self.fetch_user()

        if isinstance(result, Failure):
            return result

        await log.ainfo("store.register.success")
        self.router.push("/dashboard")

        return result

    async def login(self, user_data: dict[str, Any]) -> Result:
        """
        Log in and load the user. Any non-success status is reported as
        `Invalid credentials`.
        """
        log = self.log.bind(action="login")

        if failure := await self._fetch_csrf_cookie(log):
            return failure

        response = await self._send("POST", "/login", log, json=user_data)

        if isinstance(response, Failure):
            return response

        if not response.is_success:
            return await self._fail(
                log, "status", "Invalid credentials", response.status_code
            )

        if self.auth_mode == "token":
            body = await self._decode(response, log)

            if isinstance(body, Failure):
                return body

            self._remember_token(body)

        result = await self.fetch_user()

        if isinstance(result, Failure):
            return result

        await log.ainfo("store.login.success")

        return result

    async def logout(self) -> Result:
        """
        End the session and forget the user, then go to the login page. A fresh
        CSRF cookie is fetched first, as the one from login may have expired
        while the session slid forward.

        If the API call fails the local user is kept: the client still looks
        logged in even though the server may already have ended the session.
        """
        log = self.log.bind(action="logout")

        if failure := await self._fetch_csrf_cookie(log):
            return failure

        response = await self._send("POST", "/logout", log)

        if isinstance(response, Failure):
            return response

        if not response.is_success:
            return await self._fail(
                log,
                "status",
                f"Logout failed: {reason(response)}",
                response.status_code,
            )

        self.user = None
        self.storage.remove_item(USER_KEY)

        if self.auth_mode == "token":
            self.storage.remove_item(TOKEN_KEY)

        await log.ainfo("store.logout.success")
        self.router.push("/login")

        return Success()

    async def fetch_user(self) -> Result:
        log = self.log.bind(action="fetch_user")

        response = await self._send("GET", "/user", log)

        if isinstance(response, Failure):
            return response

        if not response.is_success:
            return await self._fail(
                log,
                "status",
                f"User fetch failed: {reason(response)}",
                response.status_code,
            )

        body = await self._decode(response, log)

        if isinstance(body, Failure):
            return body

        self.user = body
        self.storage.set_item(USER_KEY, json.dumps(self.user))

        return Success(value=self.user)

    async def fetch_social_accounts(self) -> Result:
        log = self.log.bind(action="fetch_social_accounts")

        response = await self._send("GET", "/social-accounts", log)

        if isinstance(response, Failure):
            return response

        if not response.is_success:
            return await self._fail(
                log, "status", "Failed to fetch accounts", response.status_code
            )

        body = await self._decode(response, log)

        if isinstance(body, Failure):
            return body

        self.social_accounts = body
        self.storage.set_item(SOCIAL_ACCOUNTS_KEY, json.dumps(self.social_accounts))

        await log.adebug("store.social_accounts.fetched", count=len(body))

        return Success(value=self.social_accounts)

    def hydrate_from_local_storage(self):
        """
        Reload the social accounts from storage, if there are any stored.
        """
        stored_accounts = self.storage.get_item(SOCIAL_ACCOUNTS_KEY)

        if stored_accounts:
            self.social_accounts = json.loads(stored_accounts)
