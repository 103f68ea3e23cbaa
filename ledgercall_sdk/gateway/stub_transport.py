"""
Stub gateway implementation backed by an in-memory ledger.

This module provides a gateway that needs no network access. It keeps
accounts, view results and transaction statuses in memory, verifies
signatures and nonces the way the remote service does, and lets tests
script polling responses and transport failures.
"""
import hashlib
import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional, Tuple
from urllib.parse import unquote

from .. import signing
from ..exceptions import RemoteError, RemoteUnavailableError
from ..models import CONTRACT_CALL_OU, Transaction
from .transport import LedgerGateway

logger = logging.getLogger(__name__)


class StubGateway(LedgerGateway):
    """
    In-memory stand-in for the remote ledger service.

    Mutating calls are accepted only when the signature verifies against the
    canonical transaction encoding and the nonce is exactly one more than
    the account's last-used nonce.
    """

    def __init__(self, polls_until_confirmed: int = 1):
        """
        Initialize the stub gateway.

        Args:
            polls_until_confirmed: Number of status polls after which an
                accepted transaction reports "confirmed" (earlier polls report
                "pending")
        """
        self.polls_until_confirmed = polls_until_confirmed
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.view_results: Dict[Tuple[str, str], Any] = {}
        self.submitted: Dict[str, Dict[str, Any]] = {}
        self.requests: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []
        self._statuses: Dict[str, Deque[str]] = {}
        self._poll_counts: Dict[str, int] = {}
        self._failures: Deque[Exception] = deque()
        self._lock = threading.RLock()
        self.unavailable = False

    # ------------------------------------------------------------------
    # Test setup helpers
    # ------------------------------------------------------------------

    def add_account(self, address: str, balance: str = "0", nonce: int = 0) -> None:
        self.accounts[address] = {"balance": balance, "nonce": nonce}

    def set_view_result(self, contract: str, method: str, result: Any) -> None:
        self.view_results[(contract, method)] = result

    def script_statuses(self, tx_hash: str, statuses: Iterable[str]) -> None:
        """Make successive polls of ``tx_hash`` return these statuses; the last one repeats."""
        self._statuses[tx_hash] = deque(statuses)

    def fail_next(self, count: int = 1, error: Optional[Exception] = None) -> None:
        """Make the next ``count`` requests raise (RemoteUnavailableError by default)."""
        for _ in range(count):
            self._failures.append(error or RemoteUnavailableError("Simulated network failure"))

    def poll_count(self, tx_hash: str) -> int:
        return self._poll_counts.get(tx_hash, 0)

    # ------------------------------------------------------------------
    # LedgerGateway interface
    # ------------------------------------------------------------------

    def get(self, path: str) -> Dict[str, Any]:
        with self._lock:
            self._before_request("GET", path, None)
            parts = path.strip("/").split("/")
            if len(parts) == 2 and parts[0] == "balance":
                return self._balance(unquote(parts[1]))
            if len(parts) == 2 and parts[0] == "tx":
                return self._tx_status(unquote(parts[1]))
            raise RemoteError(f"api error: no route for GET {path}", status_code=404, body="not found")

    def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            self._before_request("POST", path, payload)
            route = path.strip("/")
            if route == "contract/call-view":
                return self._call_view(payload)
            if route == "call-contract":
                return self._call_contract(payload)
            raise RemoteError(f"api error: no route for POST {path}", status_code=404, body="not found")

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    def _before_request(self, method: str, path: str, payload: Optional[Dict[str, Any]]) -> None:
        self.requests.append((method, path, payload))
        if path.startswith("/tx/") or path.startswith("tx/"):
            tx_hash = unquote(path.rstrip("/").rsplit("/", 1)[-1])
            self._poll_counts[tx_hash] = self._poll_counts.get(tx_hash, 0) + 1
        if self.unavailable:
            raise RemoteUnavailableError("Stub gateway is unavailable")
        if self._failures:
            raise self._failures.popleft()

    def _balance(self, address: str) -> Dict[str, Any]:
        account = self.accounts.get(address)
        if account is None:
            raise RemoteError("api error: address not found", status_code=404, body="address not found")
        return dict(account)

    def _call_view(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        key = (payload.get("contract"), payload.get("method"))
        if key not in self.view_results:
            return {"status": "error", "error": f"unknown method {key[1]}"}
        return {"status": "success", "result": self.view_results[key]}

    def _call_contract(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        caller = payload.get("caller")
        account = self.accounts.get(caller)
        if account is None:
            return {"status": "error", "error": "sender not found"}

        try:
            tx = Transaction(
                from_address=caller,
                to_address=payload["contract"],
                amount="0",
                nonce=payload["nonce"],
                ou=CONTRACT_CALL_OU,
                timestamp=payload["timestamp"],
            )
        except (KeyError, ValueError) as e:
            return {"status": "error", "error": f"malformed transaction: {e}"}

        if not signing.verify(payload.get("publicKey", ""), tx, payload.get("signature", "")):
            logger.info("Stub gateway rejected call from %s: invalid signature", caller[:12])
            return {"status": "error", "error": "invalid signature"}

        expected = account["nonce"] + 1
        if tx.nonce != expected:
            return {"status": "error", "error": f"invalid nonce: expected {expected}, got {tx.nonce}"}

        account["nonce"] = tx.nonce
        tx_hash = hashlib.sha256(signing.canonical_bytes(tx)).hexdigest()
        self.submitted[tx_hash] = dict(payload)
        if tx_hash not in self._statuses:
            pending = max(self.polls_until_confirmed - 1, 0)
            self._statuses[tx_hash] = deque(["pending"] * pending + ["confirmed"])

        logger.info("Stub gateway accepted %s.%s as %s...", payload.get("contract"), payload.get("method"), tx_hash[:16])
        return {"status": "accepted", "tx_hash": tx_hash}

    def _tx_status(self, tx_hash: str) -> Dict[str, Any]:
        statuses = self._statuses.get(tx_hash)
        if not statuses:
            raise RemoteError("api error: transaction not found", status_code=404, body="transaction not found")
        status = statuses.popleft() if len(statuses) > 1 else statuses[0]
        return {"status": status, "tx_hash": tx_hash}
