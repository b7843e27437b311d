"""
Simple Memory-based Rate Limiter.
Per-process only; behind several workers each keeps its own window.
"""
import threading
import time
from fastapi import Request
from typing import Dict, Tuple

from stepgate.errors import RateLimited

# In-memory storage: {scope:ip: (timestamp, count)}
_rate_limit_store: Dict[str, Tuple[float, int]] = {}
_lock = threading.Lock()


def _sweep_expired(scope: str, window: int, now: float) -> None:
    """Drop this scope's entries whose window has closed. Caller holds _lock."""
    prefix = f"{scope}:"
    expired = [
        key for key, (started, _) in _rate_limit_store.items()
        if key.startswith(prefix) and now - started > window
    ]
    for key in expired:
        del _rate_limit_store[key]


def rate_limit(requests: int, window: int, scope: str = "default"):
    """
    Dependency for rate limiting by client IP.
    Example: Depends(rate_limit(requests=5, window=60, scope="verify"))
    """
    def limiter(request: Request):
        ip = request.client.host if request.client else "unknown"
        key = f"{scope}:{ip}"
        now = time.time()

        with _lock:
            _sweep_expired(scope, window, now)

            if key not in _rate_limit_store:
                _rate_limit_store[key] = (now, 1)
                return True

            last_ts, count = _rate_limit_store[key]
            if count >= requests:
                raise RateLimited(
                    f"Too many attempts. Try again in {int(window - (now - last_ts))} seconds."
                )

            _rate_limit_store[key] = (last_ts, count + 1)
            return True

    return limiter


def reset_rate_limits() -> None:
    with _lock:
        _rate_limit_store.clear()
