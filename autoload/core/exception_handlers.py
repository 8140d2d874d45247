# autoload/core/exception_handlers.py
from fastapi import FastAPI, Request, Response

from autoload.core.errors import AutoloadError
from autoload.core.logging import get_logger

logger = get_logger("exception_handlers")


async def autoload_error_handler(request: Request, exc: AutoloadError) -> Response:
    cause = exc.__cause__
    if cause is not None:
        logger.error(
            "[%s] %s %s -> %s: %s (%s: %s)",
            exc.__class__.__name__,
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
            cause.__class__.__name__,
            cause,
        )
    else:
        logger.error(
            "[%s] %s %s -> %s: %s",
            exc.__class__.__name__,
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    # Error detail stays in the log; the pusher only sees the status.
    return Response(status_code=exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception(
        "Unhandled error on %s %s: %s", request.method, request.url.path, exc
    )
    return Response(status_code=500)


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AutoloadError, autoload_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
