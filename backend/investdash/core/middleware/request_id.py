from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from investdash.core.config import settings
from investdash.core.logging import get_logger
from investdash.core.middleware.context import bind_request


logger = get_logger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id (incoming header or new uuid) and logs its outcome."""

    def __init__(self, app, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        bind_request(request_id, request.method, request.url.path)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 1)

        response.headers[self.header_name] = request_id
        if duration_ms > settings.slow_request_ms:
            logger.warning("request.slow", status_code=response.status_code, duration_ms=duration_ms)
        else:
            logger.info("request.completed", status_code=response.status_code, duration_ms=duration_ms)
        return response
