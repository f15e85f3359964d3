"""Prometheus metrics middleware: instruments every HTTP request.

Per request: bump the in-flight gauge, time the call, then count it by
method/endpoint/status and observe the duration.  Unhandled exceptions
are recorded as 500.  /metrics itself is skipped so scrapes do not
inflate the numbers.

The endpoint label is the raw URL path.  Anchor paths carry a 32-byte
credential id, so they are collapsed to their route template to keep
label cardinality bounded.
"""

from __future__ import annotations

import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from anchor_registry.core.metrics import ACTIVE_REQUESTS, REQUEST_COUNT, REQUEST_DURATION

_PATH_TEMPLATES = (
    (re.compile(r"^/v1/anchors/[^/]+"), "/v1/anchors/{cred_id}"),
    (re.compile(r"^/v1/issuers/[^/]+"), "/v1/issuers/{issuer}"),
    (re.compile(r"^/v1/governance/issuers/[^/]+"), "/v1/governance/issuers/{issuer}"),
    (re.compile(r"^/v1/governance/attesters/[^/]+"), "/v1/governance/attesters/{identity}"),
)


def endpoint_label(path: str) -> str:
    for pattern, template in _PATH_TEMPLATES:
        if pattern.match(path):
            return pattern.sub(template, path, count=1)
    return path


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect Prometheus metrics for every HTTP request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        endpoint = endpoint_label(request.url.path)
        ACTIVE_REQUESTS.inc()
        start = time.monotonic()
        status_code: str | None = None

        try:
            response = await call_next(request)
            status_code = str(response.status_code)
        except Exception:
            status_code = "500"
            raise
        finally:
            duration = time.monotonic() - start
            ACTIVE_REQUESTS.dec()
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code if status_code is not None else "500",
            ).inc()
            REQUEST_DURATION.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(duration)

        return response
