import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config import Settings
from shared.exceptions import AppError, ErrorKind, error_kind
from shared.responses import failure_response

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Server error, please try again later"
NOT_FOUND_MESSAGE = "Page not found"


def error_response(exc: Exception, settings: Settings) -> JSONResponse:
    if error_kind(exc) is ErrorKind.APPLICATION:
        errors = [exc.additional_info] if exc.additional_info else None
        return failure_response(exc.status_code, exc.message, errors, exc.error_code)

    message = str(exc) if settings.is_development else GENERIC_ERROR_MESSAGE
    return failure_response(500, message)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.info(
            "%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message
        )
        return error_response(exc, request.app.state.settings)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        return failure_response(400, "Validation failed", errors, "VALIDATION_ERROR")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return failure_response(404, NOT_FOUND_MESSAGE)
        return failure_response(exc.status_code, str(exc.detail))
