"""
FastAPI app
"""

from importlib.metadata import version

from fastapi import FastAPI

from postboard.config.settings import Settings

from .auth import auth_app, csrf_app
from .dependencies import SETTINGS
from .errors import add_exception_handlers
from .setup import example_setup
from .social import social_app


async def lifespan(app: FastAPI):
    example_setup(settings=app.settings)

    yield

    await app.database_manager.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API for the given settings (read from the environment if not
    provided).
    """

    if settings is None:
        settings = SETTINGS()

    app = FastAPI(
        lifespan=lifespan,
        title="postboard API",
        summary="Session-authenticated API for the postboard dashboard: registration, login and linked social accounts.",
        version=version("postboard"),
    )

    app.settings = settings
    app.database_manager = settings.async_manager()

    app = add_exception_handlers(app)

    app.include_router(csrf_app)
    app.include_router(auth_app, prefix=settings.api_path)
    app.include_router(social_app, prefix=settings.api_path)

    return app


app = create_app()
