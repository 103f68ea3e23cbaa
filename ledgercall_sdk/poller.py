"""
Confirmation polling for submitted transactions.
"""
import logging
import time
from typing import Callable, Optional
from urllib.parse import quote

from .exceptions import RemoteError, RemoteUnavailableError
from .gateway._rate_limited_log import rate_limited_log
from .gateway.transport import LedgerGateway
from .models import TxReceipt, TxStatus

DEFAULT_POLL_INTERVAL = 5.0

# Common budgets; the attempt budget is always passed explicitly
QUICK_CHECK_ATTEMPTS = 5
LONG_WAIT_ATTEMPTS = 90


class ConfirmationPoller:
    """
    Polls a transaction until it is confirmed or the attempt budget runs out.

    The receipt moves from ``pending`` to exactly one of ``confirmed`` or
    ``timed_out``. Transport failures during a poll count as a
    non-confirming attempt, so an outage lasting the whole budget ends as
    ``timed_out`` rather than raising.
    """

    def __init__(
        self,
        gateway: LedgerGateway,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Optional[Callable[[float], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if poll_interval < 0:
            raise ValueError(f"poll_interval must be >= 0, got {poll_interval}")
        self.gateway = gateway
        self.poll_interval = poll_interval
        self._sleep = sleep if sleep is not None else time.sleep
        self.logger = logger or logging.getLogger(__name__)

    def poll_once(self, tx_hash: str) -> Optional[str]:
        """
        Query the transaction status once.

        Returns:
            The remote status string, or None if the request failed
        """
        try:
            response = self.gateway.get(f"/tx/{quote(tx_hash, safe='')}")
        except (RemoteUnavailableError, RemoteError) as e:
            rate_limited_log(
                f"Status poll for {tx_hash[:16]} failed: {e}",
                level="warning",
                logger_instance=self.logger,
            )
            return None
        status = response.get("status")
        return status if isinstance(status, str) else None

    def wait(self, tx_hash: str, max_attempts: int) -> TxReceipt:
        """
        Wait for a transaction to be confirmed.

        Args:
            tx_hash: Hash returned on submission
            max_attempts: Maximum number of status polls (at least 1)

        Returns:
            TxReceipt with status ``confirmed`` or ``timed_out`` and the
            number of polls made
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        receipt = TxReceipt(tx_hash=tx_hash)
        while receipt.attempts < max_attempts:
            status = self.poll_once(tx_hash)
            receipt.attempts += 1

            if status == TxStatus.CONFIRMED.value:
                receipt.status = TxStatus.CONFIRMED
                self.logger.info("Transaction %s... confirmed after %d poll(s)", tx_hash[:16], receipt.attempts)
                return receipt

            self.logger.debug(
                "Transaction %s... status=%s (attempt %d/%d)",
                tx_hash[:16], status, receipt.attempts, max_attempts,
            )
            if receipt.attempts < max_attempts:
                self._sleep(self.poll_interval)

        receipt.status = TxStatus.TIMED_OUT
        self.logger.warning("Transaction %s... not confirmed after %d poll(s)", tx_hash[:16], max_attempts)
        return receipt


def wait_for_confirmation(
    gateway: LedgerGateway,
    tx_hash: str,
    max_attempts: int,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> TxReceipt:
    """
    Poll ``GET /tx/{hash}`` until confirmed or ``max_attempts`` polls were made.

    Args:
        gateway: Ledger gateway
        tx_hash: Hash returned on submission
        max_attempts: Attempt budget, required because interactive and
            scripted callers need different patience
        poll_interval: Seconds to wait between polls

    Returns:
        TxReceipt with final status ``confirmed`` or ``timed_out``
    """
    return ConfirmationPoller(gateway, poll_interval=poll_interval).wait(tx_hash, max_attempts)
