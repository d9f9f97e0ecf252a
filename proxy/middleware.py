"""
Request timing middleware for the gateway routes.
"""
import logging
import time

from fastapi import Request

logger = logging.getLogger(__name__)

# Chat and credential routes are logged at info, probes and the index at debug
INFO_PREFIXES = ("/v1/chat", "/v1/messages", "/credentials")


async def log_requests_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000

    response.headers["x-process-time-ms"] = f"{elapsed_ms:.1f}"
    level = logging.INFO if request.url.path.startswith(INFO_PREFIXES) else logging.DEBUG
    # Streaming responses report time to first byte here, not total duration
    logger.log(level, f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms")

    return response
