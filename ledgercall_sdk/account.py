"""
Account state queries.
"""
import logging
from urllib.parse import quote

from pydantic import ValidationError

from .exceptions import RemoteError
from .gateway.transport import LedgerGateway
from .models import BalanceInfo

logger = logging.getLogger(__name__)


def fetch_balance(gateway: LedgerGateway, address: str) -> BalanceInfo:
    """
    Fetch the balance and last-used nonce of an address.

    Issues exactly one request and never caches: callers about to submit a
    mutating call must fetch again and use ``next_nonce``.

    Args:
        gateway: Ledger gateway
        address: Account address

    Returns:
        BalanceInfo with the balance string and last-used nonce

    Raises:
        RemoteUnavailableError: If the gateway cannot be reached
        RemoteError: If the gateway returns a non-success or malformed response
    """
    response = gateway.get(f"/balance/{quote(address, safe='')}")

    if response.get("status") == "error":
        raise RemoteError(f"api error: {response.get('error', response)}", body=str(response))

    try:
        info = BalanceInfo.model_validate(response)
    except ValidationError as e:
        raise RemoteError(f"Malformed balance response for {address}: {e}", body=str(response)) from e

    logger.debug("Balance for %s: %s (nonce %d)", address[:12], info.balance, info.nonce)
    return info
