import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from roach_reports.utils.response import error_response

logger = logging.getLogger(__name__)

# Body fields whose absence gets the endpoint's own message instead of the
# generic "<field>: <msg>" rendering.
REQUIRED_FIELD_MESSAGES: dict[str, str] = {
    "address": "address is required",
    "has_roaches": "has_roaches is required",
    "image_url": "image_url is required",
}


class AppException(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidArgument(AppException):
    """Missing or malformed required input."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFound(AppException):
    """Referenced entity does not exist."""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class UpstreamFailure(AppException):
    """The store or a third-party service failed. Never retried here."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = loc[-1] if loc else ""
    if first.get("type") == "missing" and field in REQUIRED_FIELD_MESSAGES:
        return REQUIRED_FIELD_MESSAGES[field]
    msg = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")
    if not field:
        return msg
    return f"{'.'.join(loc)}: {msg}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_response(_format_validation_error(exc)),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Store error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=502,
            content=error_response(str(getattr(exc, "orig", None) or exc)),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )
