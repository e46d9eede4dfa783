# file: PORTAL/core/middleware.py
import logging
from enum import Enum
from typing import Optional, Sequence, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from PORTAL.core.config import AppConfig, PROTECTED_PATHS, STRICT_PROTECTED_PATHS
from PORTAL.core.errors import OriginRejected

logger = logging.getLogger("core.middleware")


class PathPolicy(str, Enum):
    STRICT = "strict"
    LENIENT = "lenient"
    UNRESTRICTED = "unrestricted"


# Strict pairs come first so a prefix listed in both tiers resolves to STRICT.
PATH_POLICIES: Tuple[Tuple[str, PathPolicy], ...] = tuple(
    [(p, PathPolicy.STRICT) for p in STRICT_PROTECTED_PATHS]
    + [(p, PathPolicy.LENIENT) for p in PROTECTED_PATHS]
)


def classify_path(
    path: str,
    policies: Sequence[Tuple[str, PathPolicy]] = PATH_POLICIES,
) -> PathPolicy:
    for tier in (PathPolicy.STRICT, PathPolicy.LENIENT):
        for prefix, policy in policies:
            if policy is tier and path.startswith(prefix):
                return tier
    return PathPolicy.UNRESTRICTED


def evaluate_origin(path: str, origin: Optional[str], allowed_origin: str) -> Optional[OriginRejected]:
    """
    Decide whether a request may pass the origin gate.

    Returns None when the request is forwarded, otherwise the rejection to
    send back. Comparison is exact: no scheme, host or case normalization.
    """
    policy = classify_path(path)

    if policy is PathPolicy.STRICT:
        if origin is None:
            logger.warning("Rejected request to %s - no Origin header present", path)
            return OriginRejected("Origin header is required")
        if origin != allowed_origin:
            logger.warning(
                "Rejected request from unauthorized origin: %s for path: %s. Allowed origin: %s",
                origin, path, allowed_origin,
            )
            return OriginRejected("Origin not allowed")

    elif policy is PathPolicy.LENIENT and origin is not None:
        if origin != allowed_origin:
            logger.warning(
                "Rejected request from unauthorized origin: %s for path: %s. Allowed origin: %s",
                origin, path, allowed_origin,
            )
            return OriginRejected("Origin not allowed")

    return None


class OriginValidationMiddleware(BaseHTTPMiddleware):
    """
    Rejects cross-origin requests to sensitive paths before any handler
    or authentication dependency runs.
    """

    def __init__(self, app: ASGIApp, config: AppConfig):
        super().__init__(app)
        self.allowed_origin = config.allowed_origin

    async def dispatch(self, request: Request, call_next) -> Response:
        rejection = evaluate_origin(
            request.url.path,
            request.headers.get("origin"),
            self.allowed_origin,
        )
        if rejection is not None:
            return PlainTextResponse(rejection.message, status_code=rejection.status_code)

        return await call_next(request)
