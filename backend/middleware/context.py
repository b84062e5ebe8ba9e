import uuid
import time
from contextvars import ContextVar
from typing import Optional
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from config import logger

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and reports its duration in response headers."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request_id_var.set(request_id)

        start_time = time.perf_counter()
        logger.info(
            f"{request.method} {request.url.path} started",
            extra={"request_id": request_id, "client": request.client.host if request.client else None}
        )

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} in {duration * 1000:.1f}ms",
            extra={"request_id": request_id, "status_code": response.status_code}
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        return response

def get_request_id() -> Optional[str]:
    return request_id_var.get()
