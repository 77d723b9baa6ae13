"""
The dashboard's route table. Components are template names, loaded the first
time a route renders.
"""

from postboard.toolkit.router import RouteRecord

DEFAULT_LAYOUT = "layouts/default.html"
BLANK_LAYOUT = "layouts/blank.html"
ERROR_PAGE = "pages/error.html"

ROUTES = [
    RouteRecord(path="/", redirect="/dashboard"),
    RouteRecord(
        path="/",
        component=DEFAULT_LAYOUT,
        children=[
            RouteRecord(path="dashboard", component="pages/dashboard.html"),
            RouteRecord(path="posts/create", component="pages/posts/create.html"),
            RouteRecord(
                path="posts/scheduled", component="pages/posts/scheduled.html"
            ),
            RouteRecord(
                path="posts/scheduler", component="pages/posts/scheduler.html"
            ),
            RouteRecord(path="account-config", component="pages/account-config.html"),
            RouteRecord(path="calendar", component="pages/calendar.html"),
            RouteRecord(
                path="account-settings", component="pages/account-settings.html"
            ),
            # UI kit demonstration pages
            RouteRecord(path="typography", component="pages/typography.html"),
            RouteRecord(path="icons", component="pages/icons.html"),
            RouteRecord(path="cards", component="pages/cards.html"),
            RouteRecord(path="tables", component="pages/tables.html"),
            RouteRecord(path="form-layouts", component="pages/form-layouts.html"),
        ],
    ),
    RouteRecord(
        path="/",
        component=BLANK_LAYOUT,
        children=[
            RouteRecord(path="login", component="pages/login.html"),
            RouteRecord(path="register", component="pages/register.html"),
            RouteRecord(path="/:pathMatch(.*)*", component=ERROR_PAGE),
        ],
    ),
]
