"""
FastAPI middleware for request logging.

Tags every request with a short request id, logs method, path, status and
elapsed time, and returns the id in the X-Request-ID header.
"""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with an id and its response time."""

    async def dispatch(self, request: Request, call_next) -> Response:
        # Honor an id supplied by an upstream proxy
        req_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        logger.info(
            f"[{req_id}] {request.method} {request.url.path}",
            extra={"request_id": req_id, "query": str(request.query_params)},
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = time.perf_counter() - started
            logger.error(
                f"[{req_id}] {request.method} {request.url.path} failed after {elapsed:.3f}s: {e}",
                extra={"request_id": req_id},
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - started
        logger.info(
            f"[{req_id}] {response.status_code} in {elapsed:.3f}s",
            extra={"request_id": req_id, "status_code": response.status_code},
        )
        response.headers["X-Request-ID"] = req_id
        return response
