"""
Gateway module for the LedgerCall SDK.

This module provides the request/response boundary to the remote ledger
service: an abstract gateway, the HTTP implementation, and an in-memory stub.
"""
import logging
import threading
from typing import Dict

from .transport import DEFAULT_TIMEOUT, HttpGateway, LedgerGateway, validate_base_url
from .stub_transport import StubGateway

__all__ = ['LedgerGateway', 'HttpGateway', 'StubGateway', 'get_gateway',
           'clear_gateway_cache', 'validate_base_url', 'DEFAULT_TIMEOUT']

logger = logging.getLogger(__name__)

# Module-level gateway cache with thread safety
_gateway_cache: Dict[str, HttpGateway] = {}
_cache_lock = threading.RLock()


def get_gateway(rpc_url: str, timeout: int = DEFAULT_TIMEOUT) -> HttpGateway:
    """
    Get or create an HTTP gateway from the module-level cache.

    Args:
        rpc_url: Base URL of the ledger RPC service
        timeout: Request timeout in seconds for a newly created gateway

    Returns:
        HttpGateway instance shared by all callers using the same URL
    """
    cache_key = validate_base_url(rpc_url)
    with _cache_lock:
        if cache_key not in _gateway_cache:
            logger.debug("Creating gateway for %s", cache_key)
            _gateway_cache[cache_key] = HttpGateway(cache_key, timeout=timeout)
        return _gateway_cache[cache_key]


def clear_gateway_cache() -> None:
    """Close and forget all cached gateways."""
    with _cache_lock:
        for gateway in _gateway_cache.values():
            gateway.close()
        _gateway_cache.clear()
