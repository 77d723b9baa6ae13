"""
Exception handlers. Every error leaves the API as a JSON object with a
`message` (and, for validation failures, `errors` keyed by field), which is
what the clients read.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from postboard.core.models import ErrorResponse


class UnprocessableContent(Exception):
    message: str
    errors: dict[str, list[str]]

    def __init__(self, message: str, errors: dict[str, list[str]]):
        self.message = message
        self.errors = errors
        super().__init__(message)


def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        ErrorResponse(message=str(exc.detail)).model_dump(exclude_none=True),
        status_code=exc.status_code,
        headers=exc.headers,
    )


def unprocessable_handler(request: Request, exc: UnprocessableContent) -> JSONResponse:
    return JSONResponse(
        ErrorResponse(message=exc.message, errors=exc.errors).model_dump(),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, list[str]] = {}

    for error in exc.errors():
        # The first element of `loc` is where the value came from (body, query)
        field = ".".join(str(x) for x in error["loc"][1:]) or str(error["loc"][0])
        errors.setdefault(field, []).append(error["msg"])

    message = next(iter(errors.values()))[0] if errors else "The given data was invalid."

    return unprocessable_handler(
        request=request, exc=UnprocessableContent(message=message, errors=errors)
    )


def add_exception_handlers(app: FastAPI) -> FastAPI:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(UnprocessableContent, unprocessable_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    return app
