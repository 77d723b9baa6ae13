"""
A small client-side router over a static route table.

Route records follow the usual nested shape: a record either redirects, or
names a component (a template), optionally with children rendered inside it.
Child paths are relative to their parent unless they start with `/`. Path
patterns support `:name` segments and the catch-all `/:name(.*)*`.

Matching ranks static paths first, then paths with parameters, then
catch-alls; within a rank the declaration order wins.
"""

import re
from collections.abc import Iterator, Sequence

from pydantic import BaseModel, Field
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

CATCH_ALL = re.compile(r"^/:(\w+)\(\.\*\)\*$")
PARAMETER = re.compile(r"^:(\w+)$")
MAXIMUM_REDIRECTS = 10


class RouteRecord(BaseModel):
    path: str
    component: str | None = None
    redirect: str | None = None
    children: list["RouteRecord"] = Field(default_factory=list)


class ResolvedRoute(BaseModel):
    path: str
    # The full pattern that matched, e.g. `/posts/create`
    matched: str
    # Outermost first: layouts, then the page
    components: list[str]
    params: dict[str, str] = Field(default_factory=dict)
    redirected_from: str | None = None

    @property
    def page(self) -> str:
        return self.components[-1]

    @property
    def layout(self) -> str | None:
        return self.components[0] if len(self.components) > 1 else None


class NavigationError(Exception):
    pass


class Matcher:
    pattern: str
    components: list[str]
    redirect: str | None
    rank: int

    def __init__(self, pattern: str, components: list[str], redirect: str | None):
        self.pattern = pattern
        self.components = components
        self.redirect = redirect

        if catch_all := CATCH_ALL.match(pattern):
            self.regex = re.compile(rf"^/(?P<{catch_all.group(1)}>.*)$")
            self.rank = 2
            return

        parts = []
        self.rank = 0

        for segment in pattern.strip("/").split("/"):
            if parameter := PARAMETER.match(segment):
                parts.append(rf"(?P<{parameter.group(1)}>[^/]+)")
                self.rank = 1
            else:
                parts.append(re.escape(segment))

        self.regex = re.compile("^/" + "/".join(parts) + "$")

    def match(self, path: str) -> dict[str, str] | None:
        found = self.regex.match(path)
        return None if found is None else found.groupdict()


def join_paths(parent: str, child: str) -> str:
    if child.startswith("/"):
        return child

    return parent.rstrip("/") + "/" + child


def normalize(path: str) -> str:
    path = path.split("?", 1)[0].split("#", 1)[0]

    if not path.startswith("/"):
        path = "/" + path

    if len(path) > 1:
        path = path.rstrip("/") or "/"

    return path


def flatten(
    records: Sequence[RouteRecord], parent: str = "", components: tuple[str, ...] = ()
) -> Iterator[Matcher]:
    for record in records:
        full = join_paths(parent or "/", record.path)

        if record.redirect is not None:
            yield Matcher(pattern=full, components=[], redirect=record.redirect)
            continue

        chain = components + ((record.component,) if record.component else ())

        if record.children:
            yield from flatten(record.children, parent=full, components=chain)
        else:
            yield Matcher(pattern=full, components=list(chain), redirect=None)


class Router:
    """
    Resolves paths against a route table and keeps track of navigation.

    Example
    -------
    ```python
    router = Router(ROUTES)

    router.resolve("/").path  # "/dashboard"
    router.push("/login")
    router.current.page  # "pages/login.html"
    ```
    """

    routes: Sequence[RouteRecord]
    matchers: list[Matcher]
    current: ResolvedRoute | None
    history: list[str]

    def __init__(
        self, routes: Sequence[RouteRecord], log: FilteringBoundLogger | None = None
    ):
        self.routes = routes
        matchers = list(flatten(routes))
        # Stable sort keeps declaration order within a rank.
        self.matchers = sorted(matchers, key=lambda m: m.rank)
        self.current = None
        self.history = []
        self.log = log if log is not None else get_logger()

    def paths(self) -> list[str]:
        """
        Every page pattern in the table, in declaration order (redirects
        excluded).
        """
        return [m.pattern for m in flatten(self.routes) if m.redirect is None]

    def _match(self, path: str) -> tuple[Matcher, dict[str, str]]:
        for matcher in self.matchers:
            params = matcher.match(path)

            if params is not None:
                return matcher, params

        raise NavigationError(f"No route matches {path}")

    def resolve(self, path: str) -> ResolvedRoute:
        """
        Resolve `path`, following redirects.

        Raises
        ------
        NavigationError
            If nothing matches or the redirects loop.
        """

        original = normalize(path)
        path = original

        for _ in range(MAXIMUM_REDIRECTS):
            matcher, params = self._match(path)

            if matcher.redirect is None:
                return ResolvedRoute(
                    path=path,
                    matched=matcher.pattern,
                    components=matcher.components,
                    params=params,
                    redirected_from=original if path != original else None,
                )

            path = normalize(matcher.redirect)

        raise NavigationError(f"Too many redirects resolving {original}")

    def push(self, path: str) -> ResolvedRoute:
        """
        Navigate to `path`, recording it as the current route.
        """
        resolved = self.resolve(path)

        self.current = resolved
        self.history.append(resolved.path)

        self.log.info(
            "router.push",
            path=resolved.path,
            page=resolved.page,
            redirected_from=resolved.redirected_from,
        )

        return resolved
