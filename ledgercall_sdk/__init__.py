"""
LedgerCall SDK - sign, submit and confirm contract calls on a remote ledger.
"""
from .version import __version__
from .client import LedgerClient
from .account import fetch_balance
from .contract import ContractClient, call_mutating, call_view
from .poller import ConfirmationPoller, wait_for_confirmation
from .signing import canonical_bytes, public_key, sign, sign_transaction, verify
from .models import (
    BalanceInfo, ContractCallSpec, ContractInterface, ContractMethod, ContractParam,
    MethodKind, SignedTransaction, Transaction, TxReceipt, TxStatus, WalletConfig,
)
from .exceptions import (
    LedgerCallError, InvalidKeyError, ParameterValidationError, ConfigError,
    RemoteUnavailableError, RemoteError, SubmissionRejectedError,
)

__all__ = [
    "LedgerClient",
    "ContractClient",
    "ConfirmationPoller",
    "fetch_balance",
    "call_view",
    "call_mutating",
    "wait_for_confirmation",
    "canonical_bytes",
    "public_key",
    "sign",
    "sign_transaction",
    "verify",
    "BalanceInfo",
    "ContractCallSpec",
    "ContractInterface",
    "ContractMethod",
    "ContractParam",
    "MethodKind",
    "SignedTransaction",
    "Transaction",
    "TxReceipt",
    "TxStatus",
    "WalletConfig",
    "LedgerCallError",
    "InvalidKeyError",
    "ParameterValidationError",
    "ConfigError",
    "RemoteUnavailableError",
    "RemoteError",
    "SubmissionRejectedError",
    "__version__",
]
