"""
Request-scoped middleware.

RequestIDMiddleware reads the optional X-Request-ID header (or generates a
UUID when it is missing) and exposes it to logging for the duration of the
request. The id is used for log correlation only and is not written back to
the response.
"""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from accounts_api.logging_config import request_id_var

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind the request id to the logging context for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        token = request_id_var.set(request_id)
        try:
            return await call_next(request)
        finally:
            request_id_var.reset(token)
