# haven/core/middleware.py
"""
Request middleware: request ids and access logging.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id (reused from the upstream header when
    present) and echoes it on the response.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[self.header_name] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs each request with its status and duration; 4xx/5xx at WARNING."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "request_id": get_request_id(request),
                "method": request.method,
                "url": request.url.path,
                "status_code": response.status_code,
                "process_time": f"{process_time:.4f}s",
            },
        )
        return response


def register_middlewares(app: FastAPI) -> None:
    """
    Register middlewares. Added last runs first, so the request id is set
    before the access log reads it.
    """
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)


def get_request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)
