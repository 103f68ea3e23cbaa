"""
Contract calls: read-only views and signed, state-mutating calls.
"""
import logging
from typing import Any, Dict, Optional, Sequence

from . import signing
from .exceptions import ParameterValidationError, RemoteError, SubmissionRejectedError
from .gateway.transport import LedgerGateway
from .models import CONTRACT_CALL_OU, ContractCallSpec, ContractInterface, MethodKind, Transaction

logger = logging.getLogger(__name__)

VIEW_PATH = "/contract/call-view"
CALL_PATH = "/call-contract"


def _check_params(params: Sequence[str]) -> list:
    if isinstance(params, (str, bytes)):
        raise ParameterValidationError(
            f"Parameters must be a list of strings, got a bare {type(params).__name__}"
        )
    values = list(params)
    for index, value in enumerate(values):
        if not isinstance(value, str):
            raise ParameterValidationError(
                f"Parameter {index} must be a string, got {type(value).__name__}"
            )
    return values


def call_view(
    gateway: LedgerGateway,
    contract_address: str,
    method: str,
    params: Sequence[str],
    caller_address: str,
) -> Optional[str]:
    """
    Invoke a read-only contract method.

    Args:
        gateway: Ledger gateway
        contract_address: Contract to call
        method: Method name
        params: Ordered string parameters
        caller_address: Address the view is evaluated for

    Returns:
        The textual result if the remote reports ``status == "success"`` and
        the result is a string, otherwise None

    Raises:
        RemoteUnavailableError: If the gateway cannot be reached
        RemoteError: If the gateway answers with a transport-level error
    """
    response = gateway.post(VIEW_PATH, {
        "contract": contract_address,
        "method": method,
        "params": _check_params(params),
        "caller": caller_address,
    })

    if response.get("status") != "success":
        logger.debug("View %s.%s returned no result: %s", contract_address[:12], method, response.get("error"))
        return None

    result = response.get("result")
    return result if isinstance(result, str) else None


def _rejection_reason(response: Dict[str, Any]) -> str:
    for key in ("error", "message", "reason"):
        if response.get(key):
            return str(response[key])
    return str(response)


def call_mutating(
    gateway: LedgerGateway,
    private_key: bytes,
    caller_address: str,
    current_nonce: int,
    contract_address: str,
    method: str,
    params: Sequence[str],
) -> str:
    """
    Sign and submit a state-mutating contract call.

    The transaction uses ``current_nonce + 1``, carries no value and is
    stamped with the current time. Rejections are never retried.

    Args:
        gateway: Ledger gateway
        private_key: Raw 32-byte Ed25519 signing key of ``caller_address``
        caller_address: Sender address
        current_nonce: The account's last-used nonce, freshly fetched
        contract_address: Contract to call
        method: Method name
        params: Ordered string parameters

    Returns:
        Transaction hash assigned by the remote service

    Raises:
        InvalidKeyError: If the key is malformed (before any network call)
        ParameterValidationError: If a parameter is not a string (before any network call)
        RemoteUnavailableError: If the gateway cannot be reached
        SubmissionRejectedError: If the remote rejects the transaction
    """
    values = _check_params(params)
    tx = Transaction.create(
        from_address=caller_address,
        to_address=contract_address,
        amount="0",
        nonce=current_nonce + 1,
        ou=CONTRACT_CALL_OU,
    )
    signed = signing.sign_transaction(private_key, tx)

    payload = {
        "contract": contract_address,
        "method": method,
        "params": values,
        "caller": caller_address,
        "nonce": tx.nonce,
        "timestamp": tx.timestamp,
        "signature": signed.signature,
        "publicKey": signed.public_key,
    }

    try:
        response = gateway.post(CALL_PATH, payload)
    except SubmissionRejectedError:
        raise
    except RemoteError as e:
        raise SubmissionRejectedError(e.body or str(e), status_code=e.status_code, body=e.body) from e

    if response.get("status") == "error" or not response.get("tx_hash"):
        reason = _rejection_reason(response)
        logger.warning("Call %s.%s rejected: %s", contract_address[:12], method, reason)
        raise SubmissionRejectedError(reason, body=str(response))

    tx_hash = str(response["tx_hash"])
    logger.info("Submitted %s.%s nonce=%d tx=%s", contract_address[:12], method, tx.nonce, tx_hash[:16])
    return tx_hash


class ContractClient:
    """
    Contract calls bound to a gateway and, optionally, a contract interface.

    When an interface is given, every call is validated against the declared
    method kind and parameter list before anything is sent.
    """

    def __init__(self, gateway: LedgerGateway, interface: Optional[ContractInterface] = None):
        self.gateway = gateway
        self.interface = interface

    def spec(self, method: str, params: Sequence[str] = ()) -> ContractCallSpec:
        if self.interface is None:
            raise ParameterValidationError("No contract interface configured")
        return self.interface.build_call(method, params)

    def view(self, spec: ContractCallSpec, caller_address: str) -> Optional[str]:
        if spec.kind != MethodKind.VIEW:
            raise ParameterValidationError(f"{spec.method_name} is not a view method")
        return call_view(self.gateway, spec.contract_address, spec.method_name, spec.params, caller_address)

    def call(
        self,
        spec: ContractCallSpec,
        private_key: bytes,
        caller_address: str,
        current_nonce: int,
    ) -> str:
        if spec.kind != MethodKind.MUTATING:
            raise ParameterValidationError(f"{spec.method_name} is not a mutating method")
        return call_mutating(
            self.gateway, private_key, caller_address, current_nonce,
            spec.contract_address, spec.method_name, spec.params,
        )

    def invoke(
        self,
        spec: ContractCallSpec,
        caller_address: str,
        private_key: Optional[bytes] = None,
        current_nonce: Optional[int] = None,
    ) -> Optional[str]:
        """
        Dispatch a call spec by its kind.

        Returns:
            The view result (or None) for view methods, the transaction hash
            for mutating methods
        """
        if spec.kind == MethodKind.VIEW:
            return self.view(spec, caller_address)
        if private_key is None or current_nonce is None:
            raise ParameterValidationError(
                f"{spec.method_name} is mutating and needs a private key and current nonce"
            )
        return self.call(spec, private_key, caller_address, current_nonce)
