"""
FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from postboard.config.settings import Settings


def logger():
    return get_logger()


def setup_templates(settings: Settings):
    def internal_urls(request: Request):
        return dict(
            base_url=settings.frontend_hostname,
            api_base_url=settings.api_base_url,
            csrf_cookie_url=settings.csrf_cookie_url,
            login_url=f"{settings.frontend_hostname}/login",
            register_url=f"{settings.frontend_hostname}/register",
            dashboard_url=f"{settings.frontend_hostname}/dashboard",
        )

    def auth_mode(request: Request):
        return dict(
            auth_mode=settings.auth_mode,
            csrf_cookie_name=settings.csrf_cookie_name,
            csrf_header_name=settings.csrf_header_name,
        )

    templates = Jinja2Templates(
        directory=__file__.replace("dependencies.py", "templates"),
        context_processors=[internal_urls, auth_mode],
    )

    @lru_cache
    def get_templates():
        return templates

    return get_templates


LoggerDependency = Annotated[FilteringBoundLogger, Depends(logger)]
