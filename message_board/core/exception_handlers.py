"""Exception handler for the plain HTTP routes.

Domain errors are reported inside the GraphQL response body (see
``message_board.api.graphql.error_reporting``). Anything that escapes a
non-GraphQL route ends up here and is returned as a generic 500::

    {"error": {"code": "internal_server_error", "message": ..., "request_id": ...}}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from message_board.core.logging import get_request_id

logger = logging.getLogger(__name__)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler: log the failure, answer with a generic 500."""
    logger.error(
        "unhandled_exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={
            "error_type": type(exc).__name__,
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers on a FastAPI app."""
    app.exception_handler(Exception)(general_exception_handler)
