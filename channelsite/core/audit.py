"""
Request auditing and response security headers.

One log line per request with the caller (X-User-Id, truncated), the
project the path refers to, status and duration. Health checks are
logged at DEBUG only.
"""
import re
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from channelsite.core.logging_config import get_logger

logger = get_logger(__name__)

HEALTH_PATHS = ("/health", "/health/ready")

_PROJECT_PATH_RE = re.compile(r"^/projects/([0-9a-fA-F-]{36})")


def project_from_path(path: str) -> Optional[str]:
    match = _PROJECT_PATH_RE.match(path)
    return match.group(1)[:8] if match else None


class AuditMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and adds X-Response-Time.

    Generation requests can take tens of seconds while the provider
    chain runs, so the duration is returned to the client too.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        path = request.url.path
        client = request.client.host if request.client else "unknown"
        caller = request.headers.get("x-user-id", "")[:8] or "-"
        project = project_from_path(path) or "-"

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"FAILED {request.method} {path} client={client} user={caller} project={project} "
                f"after {time.perf_counter() - started:.3f}s: {e}"
            )
            raise

        duration = time.perf_counter() - started
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        if path in HEALTH_PATHS:
            logger.debug(f"{path} {response.status_code} {duration:.3f}s")
            return response

        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400:
            log = logger.warning
        else:
            log = logger.info
        log(
            f"{request.method} {path} status={response.status_code} "
            f"duration={duration:.3f}s client={client} user={caller} project={project}"
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds nosniff, frame and referrer headers.

    Preview pages are framed by the builder UI, so they get SAMEORIGIN
    instead of DENY.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        frame_policy = "SAMEORIGIN" if request.url.path.endswith("/preview") else "DENY"
        response.headers["X-Frame-Options"] = frame_policy
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
