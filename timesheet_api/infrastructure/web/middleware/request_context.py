"""
Request context middleware.
Tags every request with an ID and reports its processing time.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns ``request.state.request_id`` and timing headers."""

    header_name = "X-Request-ID"

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request.state.request_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        response = await call_next(request)

        response.headers[self.header_name] = request.state.request_id
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response
