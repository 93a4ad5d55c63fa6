import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from shared.config import Settings
from shared.error_handlers import error_response
from shared.responses import failure_response

logger = logging.getLogger(__name__)

CLIENT_ID_HEADER = "clientid"


class ClientIdMiddleware(BaseHTTPMiddleware):
    """Rejects requests that do not carry the configured ``clientid`` header.

    The check is skipped entirely when the site runs in local mode. Preflight
    requests and paths under ``exempt_prefixes`` (static assets) pass through.
    """

    def __init__(self, app: ASGIApp, settings: Settings, exempt_prefixes: tuple[str, ...] = ()):
        super().__init__(app)
        self.settings = settings
        self.exempt_prefixes = exempt_prefixes

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self.settings.is_local or request.method == "OPTIONS":
            return await call_next(request)
        if request.url.path.startswith(self.exempt_prefixes):
            return await call_next(request)

        client_id = request.headers.get(CLIENT_ID_HEADER, "").strip()
        if not client_id:
            logger.warning("Missing clientid on %s %s", request.method, request.url.path)
            return failure_response(401, "ClientId header is missing", error_code="CLIENT_ID_MISSING")

        if client_id != self.settings.CLIENT_ID:
            logger.warning("Invalid clientid on %s %s", request.method, request.url.path)
            return failure_response(401, "Invalid Client Id", error_code="CLIENT_ID_INVALID")

        request.state.client_id = client_id
        return await call_next(request)


class ErrorTranslationMiddleware(BaseHTTPMiddleware):
    """Turns exceptions that escape the routers into the JSON error envelope.

    Sits inside the CORS layer so failed responses still carry CORS headers.
    """

    def __init__(self, app: ASGIApp, settings: Settings):
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return error_response(exc, self.settings)
