"""HTTP middleware for request correlation.

Every request/response pair carries a request id: the incoming header value
when the client sends one, a fresh UUID otherwise. The id is bound to the
logging context for the lifetime of the request and echoed back together
with the request duration.

The header name comes from the settings the app was built with
(``app.state.settings.log.request_id_header``).

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from message_board.core.logging import clear_request_id, set_request_id


async def request_id_middleware(request: Request, call_next) -> Response:
    """Bind a request id to the logging context and echo it on the response.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with the request id header and
            ``X-Request-Duration-ms`` added.
    """
    header = request.app.state.settings.log.request_id_header
    request_id = request.headers.get(header) or uuid.uuid4().hex

    started = time.perf_counter()
    set_request_id(request_id)
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()
    elapsed_ms = (time.perf_counter() - started) * 1000

    response.headers[header] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{elapsed_ms:.2f}")
    return response
