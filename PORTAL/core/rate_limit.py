# file: PORTAL/core/rate_limit.py
import math
import time

from fastapi import HTTPException, Request
from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from PORTAL.core.config import AppConfig

UPLOAD_SCOPE = "upload_profile_image"


def build_limiter(config: AppConfig) -> Limiter:
    """One limiter per app, so counters and limits never leak between apps."""
    return Limiter(key_func=get_remote_address, enabled=config.rate_limit_enabled)


async def enforce_upload_limit(request: Request) -> None:
    """
    Dependency: count the upload against the app's own limiter, using the
    limit string from that app's config.
    """
    limiter: Limiter = request.app.state.limiter
    if not limiter.enabled:
        return

    item = parse(request.app.state.config.upload_rate_limit)
    key = get_remote_address(request)
    if limiter.limiter.hit(item, key, UPLOAD_SCOPE):
        return

    reset_at, _ = limiter.limiter.get_window_stats(item, key, UPLOAD_SCOPE)
    retry_after = max(1, math.ceil(reset_at - time.time()))
    raise HTTPException(
        status_code=429,
        detail="Too many requests. Please slow down.",
        headers={"Retry-After": str(retry_after)},
    )
