"""
Thread-safe rate-limited logging utilities.

Keeps repeated failures (e.g. a flaky endpoint during confirmation polling)
from flooding the log while still reporting them once per interval.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

_log_caches = {}
_log_cache_lock = threading.RLock()


def _cache_for(interval: int) -> TTLCache:
    with _log_cache_lock:
        cache = _log_caches.get(interval)
        if cache is None:
            cache = TTLCache(maxsize=100, ttl=interval)
            _log_caches[interval] = cache
        return cache


def rate_limited_log(
    message: str,
    level: str = "warning",
    interval: int = 60,
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message at most once per interval, in a thread-safe manner.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        interval: Minimum interval between identical logs in seconds
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    key = f"{level}:{message}"

    cache = _cache_for(interval)
    with _log_cache_lock:
        if key in cache:
            return False
        cache[key] = True

    log_method(message)
    return True


def reset_rate_limits() -> None:
    """Forget all previously logged messages."""
    with _log_cache_lock:
        for cache in _log_caches.values():
            cache.clear()
