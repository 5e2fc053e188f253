"""Request logging middleware."""

import time
import uuid

from fastapi import Request

from portal.utils.logger import get_logger, set_request_id

log = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def logging_middleware(request: Request, call_next):
    """Bind a request id, log the request and echo the id on the response."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    set_request_id(request_id)
    start = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        log.exception(
            "request failed",
            method=request.method,
            path=request.url.path,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        raise

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    # Health probes are noisy
    if request.url.path.endswith("/health"):
        log.debug("request completed", path=request.url.path, status_code=response.status_code)
    else:
        log.info(
            "request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
