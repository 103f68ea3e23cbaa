"""
LedgerClient - Main client for calling contracts on the remote ledger.
"""
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from . import signing
from .account import fetch_balance
from .config import load_interface, load_wallet
from .contract import ContractClient, call_mutating, call_view
from .gateway import get_gateway
from .gateway.transport import LedgerGateway
from .models import BalanceInfo, ContractCallSpec, ContractInterface, MethodKind, TxReceipt, WalletConfig
from .poller import DEFAULT_POLL_INTERVAL, ConfirmationPoller


class LedgerClient:
    """
    Client for the remote ledger/contract-execution service.

    This client handles:
    1. Balance and nonce queries
    2. Read-only contract views
    3. Signing and submitting mutating contract calls
    4. Waiting for transaction confirmation

    The nonce is fetched again before every mutating call, so a failed
    earlier call never leaves a stale nonce behind. Concurrent mutating calls
    for the same account must be serialized by the caller. The raw signing
    key is decoded only for the duration of each mutating call.
    """

    def __init__(
        self,
        wallet: WalletConfig,
        gateway: Optional[LedgerGateway] = None,
        interface: Optional[ContractInterface] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the LedgerClient

        Args:
            wallet: Key material for the account to sign for
            gateway: Gateway to use (defaults to a cached HttpGateway for wallet.rpc_url)
            interface: Optional contract interface used to validate calls
            logger: Optional logger instance to use for debug/info logging

        Raises:
            InvalidKeyError: If the wallet's private key is malformed
            ValueError: If the RPC URL is not https (unless it is localhost/127.0.0.1)
        """
        self.logger = logger or logging.getLogger(__name__)
        self._wallet = wallet
        self.address = wallet.address
        self.public_key = signing.public_key_b64(self._signing_key())
        self.gateway = gateway or get_gateway(wallet.rpc_url)
        self.contracts = ContractClient(self.gateway, interface)

    @classmethod
    def from_files(
        cls,
        wallet_path: Optional[Union[str, Path]] = None,
        interface_path: Optional[Union[str, Path]] = None,
        gateway: Optional[LedgerGateway] = None,
    ) -> "LedgerClient":
        """Build a client from a wallet file and, if given, an interface file."""
        interface = load_interface(interface_path) if interface_path else None
        return cls(load_wallet(wallet_path), gateway=gateway, interface=interface)

    def _signing_key(self) -> bytes:
        return signing.decode_private_key(self._wallet.private_key.get_secret_value())

    def __repr__(self) -> str:
        return f"LedgerClient(address={self.address!r})"

    def get_balance(self) -> BalanceInfo:
        """Fetch balance and last-used nonce of this account."""
        return fetch_balance(self.gateway, self.address)

    def view(self, contract_address: str, method: str, params: Sequence[str] = ()) -> Optional[str]:
        """
        Call a read-only contract method.

        Returns:
            The textual result, or None when the remote reports no result
        """
        return call_view(self.gateway, contract_address, method, params, self.address)

    def call(self, contract_address: str, method: str, params: Sequence[str] = ()) -> str:
        """
        Sign and submit a mutating contract call using a freshly fetched nonce.

        Returns:
            Transaction hash

        Raises:
            RemoteUnavailableError: If the service cannot be reached
            RemoteError: If the nonce lookup fails
            SubmissionRejectedError: If the remote rejects the transaction
        """
        state = self.get_balance()
        self.logger.debug("Using nonce %d for %s.%s", state.next_nonce, contract_address[:12], method)
        return call_mutating(
            self.gateway, self._signing_key(), self.address, state.nonce,
            contract_address, method, params,
        )

    def invoke(self, method: str, params: Sequence[str] = ()) -> Optional[str]:
        """
        Call a method of the configured contract interface.

        Parameters are validated against the interface before anything is
        sent. View methods return their result; mutating methods return the
        transaction hash.
        """
        spec: ContractCallSpec = self.contracts.spec(method, params)
        if spec.kind == MethodKind.VIEW:
            return self.contracts.view(spec, self.address)
        state = self.get_balance()
        return self.contracts.call(spec, self._signing_key(), self.address, state.nonce)

    def wait(
        self,
        tx_hash: str,
        max_attempts: int,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> TxReceipt:
        """Poll until the transaction is confirmed or max_attempts polls were made."""
        poller = ConfirmationPoller(self.gateway, poll_interval=poll_interval, logger=self.logger)
        return poller.wait(tx_hash, max_attempts)

    def call_and_wait(
        self,
        contract_address: str,
        method: str,
        params: Sequence[str],
        max_attempts: int,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> TxReceipt:
        """Submit a mutating call and wait for its confirmation."""
        tx_hash = self.call(contract_address, method, params)
        return self.wait(tx_hash, max_attempts, poll_interval=poll_interval)
