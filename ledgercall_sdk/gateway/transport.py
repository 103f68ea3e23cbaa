"""
Transport layer for the remote ledger service.

This module provides an abstraction over the request/response channel used
to talk to the ledger's RPC endpoint, plus the requests-based HTTP
implementation used in production.
"""
import logging
import urllib.parse
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions import RemoteError, RemoteUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class LedgerGateway(ABC):
    """
    Abstract base class for ledger gateway implementations.

    All payloads and responses are JSON-like dictionaries. Implementations
    raise RemoteUnavailableError when the service cannot be reached and
    RemoteError when it answers with a non-success response.
    """

    @abstractmethod
    def get(self, path: str) -> Dict[str, Any]:
        """
        Issue a GET request.

        Args:
            path: Endpoint path, e.g. ``/balance/<address>``

        Returns:
            Decoded response body

        Raises:
            RemoteUnavailableError: If the service cannot be reached
            RemoteError: If the service returns a non-success response
        """
        pass

    @abstractmethod
    def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Issue a POST request with a JSON body.

        Args:
            path: Endpoint path, e.g. ``/call-contract``
            payload: Request body

        Returns:
            Decoded response body

        Raises:
            RemoteUnavailableError: If the service cannot be reached
            RemoteError: If the service returns a non-success response
        """
        pass

    def close(self) -> None:
        """Close any open connections or resources."""
        pass

    def __enter__(self) -> "LedgerGateway":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def validate_base_url(url: str) -> str:
    """
    Check that an RPC base URL is usable and strip any trailing slash.

    Raises:
        ValueError: If the URL is not https (localhost/127.0.0.1 excepted)
    """
    parsed = urllib.parse.urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid RPC URL: {url!r}")
    host = parsed.netloc.split(":")[0]
    is_local = host in ("localhost", "127.0.0.1")
    if parsed.scheme != "https" and not is_local:
        raise ValueError(f"RPC URL must use https:// for security (got: {parsed.scheme}://)")
    return url.rstrip("/")


class HttpGateway(LedgerGateway):
    """
    requests-based gateway for the ledger's HTTP RPC endpoint.

    GET requests are retried on connection errors and 5xx responses. POST
    requests are never retried: a resubmitted transaction would either be
    rejected for its reused nonce or duplicate the call.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        retry_count: int = 3,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the gateway

        Args:
            base_url: RPC endpoint base URL
            timeout: Timeout for HTTP requests in seconds
            retry_count: Number of retries for GET requests
            session: Pre-configured session (a retrying one is built otherwise)
        """
        self.base_url = validate_base_url(base_url)
        self.timeout = timeout

        if session is None:
            session = requests.Session()
            retries = Retry(
                total=retry_count,
                backoff_factor=0.5,
                status_forcelist=[500, 502, 503, 504],
                allowed_methods=["GET"],
                raise_on_status=False,
                connect=retry_count,
                read=retry_count,
                other=retry_count,
            )
            session.mount("http://", HTTPAdapter(max_retries=retries))
            session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session = session

    def get(self, path: str) -> Dict[str, Any]:
        return self._request("GET", path)

    def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", path, payload)

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.warning("Ledger service unreachable: %s %s: %s", method, url, e)
            raise RemoteUnavailableError(f"Cannot reach ledger service at {self.base_url}: {e}") from e
        except requests.RequestException as e:
            raise RemoteUnavailableError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            body = response.text
            logger.debug("Ledger service returned %s for %s %s", response.status_code, method, url)
            raise RemoteError(
                f"api error: {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteError(
                f"Invalid JSON response from {url}: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not isinstance(data, dict):
            raise RemoteError(
                f"Unexpected response type from {url}: {type(data).__name__}",
                status_code=response.status_code,
                body=response.text,
            )
        return data

    def close(self) -> None:
        self.session.close()
