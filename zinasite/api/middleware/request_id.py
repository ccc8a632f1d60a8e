"""
Correlation for gateway requests.

A caller-supplied X-Request-ID is kept (trimmed to a sane length) so the data
layer's GatewayClient and the gateway log the same ID; otherwise one is
generated. The ID is echoed on the response, including error responses.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from zinasite.logging_config import get_logger, log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64
SLOW_REQUEST_MS = 1000


def resolve_request_id(request: Request) -> str:
    supplied = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    return supplied[:MAX_REQUEST_ID_LENGTH] or uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind the request ID to the log context and report slow record calls."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id

        with log_context(request_id=request_id, backend="gateway"):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

            response.headers[REQUEST_ID_HEADER] = request_id
            if elapsed_ms > SLOW_REQUEST_MS:
                logger.warning(
                    "Slow gateway call %s %s", request.method, request.url.path,
                    extra={"status": response.status_code, "elapsed_ms": elapsed_ms},
                )
            else:
                logger.debug(
                    "%s %s -> %s", request.method, request.url.path, response.status_code,
                    extra={"elapsed_ms": elapsed_ms},
                )
        return response
