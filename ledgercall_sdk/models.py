"""
Data models for the LedgerCall SDK.
"""
import time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_validator

from .exceptions import ParameterValidationError

# Operation-unit marker attached to every contract call transaction
CONTRACT_CALL_OU = "1"


class WalletConfig(BaseModel):
    """
    Key material for the single account this client signs for.

    Loaded from a ``{"priv", "addr", "rpc"}`` document. The private key is a
    SecretStr so it never shows up in reprs, logs or ``model_dump`` output.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    private_key: SecretStr = Field(..., alias="priv")
    address: str = Field(..., alias="addr", min_length=1)
    rpc_url: str = Field(..., alias="rpc", min_length=1)


class Transaction(BaseModel):
    """A value transfer or contract call, immutable once constructed."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_address: str = Field(..., alias="from")
    to_address: str = Field(..., alias="to_")
    amount: str
    nonce: int = Field(..., ge=0)
    ou: str
    timestamp: float

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: str) -> str:
        try:
            parsed = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"amount must be a decimal string, got {value!r}")
        if not parsed.is_finite() or parsed < 0:
            raise ValueError(f"amount must be a non-negative decimal, got {value!r}")
        return value

    @classmethod
    def create(
        cls,
        from_address: str,
        to_address: str,
        amount: str,
        nonce: int,
        ou: str,
        timestamp: Optional[float] = None,
    ) -> "Transaction":
        """Build a transaction stamped with the current time unless given one."""
        return cls(
            from_address=from_address,
            to_address=to_address,
            amount=amount,
            nonce=nonce,
            ou=ou,
            timestamp=time.time() if timestamp is None else timestamp,
        )

    def signing_fields(self) -> Dict[str, Any]:
        """The six signed fields, keyed and ordered as the remote verifier expects."""
        return {
            "from": self.from_address,
            "to_": self.to_address,
            "amount": self.amount,
            "nonce": self.nonce,
            "ou": self.ou,
            "timestamp": self.timestamp,
        }


class SignedTransaction(BaseModel):
    """Transaction plus its base64 Ed25519 signature and public key."""
    model_config = ConfigDict(frozen=True)

    transaction: Transaction
    signature: str
    public_key: str


class MethodKind(str, Enum):
    """Whether a contract method only reads state or mutates it."""
    VIEW = "view"
    MUTATING = "mutating"


class ContractParam(BaseModel):
    """Parameter descriptor with optional input-collection hints."""
    name: str
    type: str = Field("string", validation_alias=AliasChoices("type", "param_type"))
    example: Optional[str] = None
    max: Optional[int] = Field(None, ge=0)


class ContractMethod(BaseModel):
    """A method entry of a contract interface descriptor."""
    name: str
    kind: MethodKind = Field(..., validation_alias=AliasChoices("kind", "type"))
    params: List[ContractParam] = Field(default_factory=list)

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> Any:
        # Descriptor files call mutating methods "call"
        if isinstance(value, str) and value.lower() in ("call", "mutating", "write"):
            return MethodKind.MUTATING
        if isinstance(value, str) and value.lower() in ("view", "read"):
            return MethodKind.VIEW
        return value


class ContractCallSpec(BaseModel):
    """A fully resolved contract invocation, validated against its descriptor."""
    model_config = ConfigDict(frozen=True)

    contract_address: str
    method_name: str
    params: Tuple[str, ...] = ()
    kind: MethodKind


class ContractInterface(BaseModel):
    """Contract address plus its ordered method descriptors."""
    contract: str
    methods: List[ContractMethod] = Field(default_factory=list)

    def get_method(self, name: str) -> ContractMethod:
        for method in self.methods:
            if method.name == name:
                return method
        raise ParameterValidationError(
            f"Method {name!r} not found in interface for contract {self.contract}"
        )

    def build_call(self, method_name: str, params: Sequence[str] = ()) -> ContractCallSpec:
        """
        Resolve a method by name and validate the given parameters against it.

        Args:
            method_name: Name of the method in this interface
            params: Ordered parameter values, one string per declared parameter

        Returns:
            ContractCallSpec ready to pass to a ContractClient

        Raises:
            ParameterValidationError: If the method is unknown, the parameter
                count differs from the declaration, a value is not a string,
                or a value exceeds its declared max length
        """
        method = self.get_method(method_name)
        if isinstance(params, (str, bytes)):
            raise ParameterValidationError(
                f"{method_name} parameters must be a list of strings, got a bare {type(params).__name__}"
            )
        values = tuple(params)

        if len(values) != len(method.params):
            raise ParameterValidationError(
                f"{method_name} expects {len(method.params)} parameter(s), got {len(values)}"
            )

        for descriptor, value in zip(method.params, values):
            if not isinstance(value, str):
                raise ParameterValidationError(
                    f"Parameter {descriptor.name!r} must be a string, got {type(value).__name__}"
                )
            if descriptor.max is not None and len(value) > descriptor.max:
                raise ParameterValidationError(
                    f"Parameter {descriptor.name!r} exceeds max length {descriptor.max}"
                )

        return ContractCallSpec(
            contract_address=self.contract,
            method_name=method.name,
            params=values,
            kind=method.kind,
        )


class BalanceInfo(BaseModel):
    """Balance and last-used nonce of an address."""
    balance: str
    nonce: int = Field(..., ge=0)

    @field_validator("balance", mode="before")
    @classmethod
    def _balance_to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def next_nonce(self) -> int:
        return self.nonce + 1


class TxStatus(str, Enum):
    """Lifecycle status of a submitted transaction."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed_out"


class TxReceipt(BaseModel):
    """Submitted transaction hash and the status observed by the poller."""
    tx_hash: str
    status: TxStatus = TxStatus.PENDING
    attempts: int = 0

    @property
    def confirmed(self) -> bool:
        return self.status == TxStatus.CONFIRMED
