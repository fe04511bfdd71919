import logging
import time

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from famcal.application.exceptions import (
    Conflict,
    FamcalException,
    Forbidden,
    InvalidRequest,
    NotFound,
    Unauthorized,
)

logger = logging.getLogger("famcal")


class SlowRequestMiddleware:  # pragma: no cover
    """Warns whenever a slow request is made."""

    SLOW_REQUEST_THRESHOLD_SECONDS = 1.5

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(
        self, scope: Scope, receive: Receive, send: Send
    ) -> None:
        if scope["type"] == "http":
            start = time.time()
            await self.app(scope, receive, send)
            elapsed = time.time() - start

            if elapsed > self.SLOW_REQUEST_THRESHOLD_SECONDS:
                path = scope.get("path", "<unknown>")

                logger.warning(
                    "Request for `%s` was slow (%f seconds)", path, elapsed
                )

        else:
            await self.app(scope, receive, send)


async def famcal_exception_handler(
    _: Request, exc: FamcalException
) -> JSONResponse:
    if isinstance(exc, InvalidRequest):
        code = 400
    elif isinstance(exc, Unauthorized):
        code = 401
    elif isinstance(exc, Forbidden):
        code = 403
    elif isinstance(exc, NotFound):
        code = 404
    elif isinstance(exc, Conflict):
        code = 409
    else:
        code = 500

    # Only the error code is sent to the client, the message might contain
    # details that shouldn't leave the server.
    logger.info("%s: %s", type(exc).__name__, exc)

    return JSONResponse({"error": exc.code}, status_code=code)


async def validation_exception_handler(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Request validation failed: %s", exc.errors())

    return JSONResponse({"error": InvalidRequest.code}, status_code=400)


HTTP_ERROR_CODES = {
    401: Unauthorized.code,
    403: Forbidden.code,
    404: NotFound.code,
    405: "method_not_allowed",
}


async def http_exception_handler(
    _: Request, exc: StarletteHTTPException
) -> JSONResponse:
    error = HTTP_ERROR_CODES.get(exc.status_code, "http_error")

    return JSONResponse(
        {"error": error},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


class UnhandledExceptionHandler:
    """
    Last line of defense: log anything that escaped the exception handlers and
    answer with a generic error, without leaking a stack trace to the client.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(
        self, scope: Scope, receive: Receive, send: Send
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started

            if message["type"] == "http.response.start":
                response_started = True

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)

        except Exception:
            path = scope.get("path", "<unknown>")
            logger.exception("Unhandled exception for `%s`", path)

            if response_started:
                raise

            response = JSONResponse({"error": "internal_error"}, status_code=500)
            await response(scope, receive, send)
