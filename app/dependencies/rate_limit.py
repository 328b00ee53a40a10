"""Per-IP per-path sliding window limiter for the auth endpoints."""
import time
from collections import defaultdict, deque
from fastapi import HTTPException, Request, status
from app.core.config import settings
from app.utils.helpers import get_client_ip

# key -> deque[timestamps]
_buckets = defaultdict(deque)


def reset_rate_limits():
    _buckets.clear()


async def rate_limit(request: Request):
    if not settings.RATE_LIMIT_ENABLED:
        return True

    now = time.time()
    window_start = now - settings.RATE_LIMIT_PERIOD_SECONDS
    bucket = _buckets[f"{get_client_ip(request)}:{request.url.path}"]

    while bucket and bucket[0] <= window_start:
        bucket.popleft()

    if len(bucket) >= settings.RATE_LIMIT_REQUESTS:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, please try again later.",
        )

    bucket.append(now)
    return True
