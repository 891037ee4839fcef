"""Request context middleware — tags every request's log lines with an id."""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger("depaudit.api")

REQUEST_ID_HEADER = "X-Request-ID"

# Liveness probes hit this every few seconds; keep them out of INFO logs.
_QUIET_PATHS = frozenset({"/api/health"})


def _is_valid_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError):
        return False


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id, method, path and client to structlog contextvars.

    An incoming ``X-Request-ID`` is reused when it is a UUID, otherwise a new
    one is generated. The id is echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        raw_id = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = raw_id if _is_valid_uuid(raw_id) else str(uuid.uuid4())
        path = request.url.path
        emit = log.debug if path in _QUIET_PATHS else log.info

        tokens = structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
            client=request.client.host if request.client else None,
        )
        log.debug("request.started")
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception(
                "request.failed", duration_ms=round((time.perf_counter() - start) * 1000, 1)
            )
            raise
        else:
            emit(
                "request.completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            structlog.contextvars.reset_contextvars(**tokens)
