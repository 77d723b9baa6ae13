"""
Core 'frontend' app, serving the dashboard's pages from the route table.
This does not require any access to the database: pages call the API
themselves with the session cookie.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import RedirectResponse

from postboard.config.settings import Settings
from postboard.toolkit.router import NavigationError, Router

from .dependencies import LoggerDependency, setup_templates
from .routes import ERROR_PAGE, ROUTES


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="postboard",
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )

    app.settings = settings
    app.page_router = Router(ROUTES)
    get_templates = setup_templates(settings=settings)

    @app.get("/{path:path}", include_in_schema=False)
    def page(path: str, request: Request, log: LoggerDependency):
        log = log.bind(path=f"/{path}")

        try:
            resolved = request.app.page_router.resolve(f"/{path}")
        except NavigationError:
            log.info("app.page.unmatched")
            raise HTTPException(status_code=404, detail="Page not found")

        if resolved.redirected_from is not None:
            log.debug("app.page.redirect", redirect_to=resolved.path)
            return RedirectResponse(url=resolved.path, status_code=302)

        status_code = 404 if resolved.page == ERROR_PAGE else 200

        log = log.bind(page=resolved.page, status_code=status_code)
        log.debug("app.page.render")

        return get_templates().TemplateResponse(
            request=request,
            name=resolved.page,
            context=dict(layout=resolved.layout, route=resolved),
            status_code=status_code,
        )

    return app


app = create_app()
