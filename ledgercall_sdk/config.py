"""
Configuration loading for the LedgerCall SDK.

Wallet key material and contract interface descriptors are JSON documents
located by explicit path, environment variable, or a default file in the
working directory.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import ContractInterface, WalletConfig

logger = logging.getLogger(__name__)

WALLET_ENV = "LEDGERCALL_WALLET"
INTERFACE_ENV = "LEDGERCALL_INTERFACE"
RPC_URL_ENV = "LEDGERCALL_RPC_URL"

DEFAULT_WALLET_FILE = "wallet.json"
DEFAULT_INTERFACE_FILE = "exec_interface.json"

PathLike = Union[str, Path]


def _resolve(path: Optional[PathLike], env_var: str, default: str) -> Path:
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get(env_var)
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / default


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


class ClientConfig:
    """Loads wallet and contract interface files; interfaces are cached by path."""

    _interface_cache: Dict[Path, ContractInterface] = {}

    @classmethod
    def load_wallet(cls, path: Optional[PathLike] = None) -> WalletConfig:
        """
        Load wallet key material.

        The file is looked up as ``path``, then ``$LEDGERCALL_WALLET``, then
        ``./wallet.json``. ``$LEDGERCALL_RPC_URL`` overrides the file's ``rpc``.

        Returns:
            WalletConfig with the still-encoded private key. Wallets are read
            fresh on every call and never cached

        Raises:
            ConfigError: If the file is missing, unreadable or incomplete
        """
        resolved = _resolve(path, WALLET_ENV, DEFAULT_WALLET_FILE)
        data = _read_json(resolved)
        try:
            wallet = WalletConfig.model_validate(data)
        except ValidationError as e:
            # Only report field names; values may contain the key
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
            raise ConfigError(f"Invalid wallet file {resolved}: bad or missing fields: {fields}") from None
        logger.info("Loaded wallet %s... from %s", wallet.address[:12], resolved)

        rpc_override = os.environ.get(RPC_URL_ENV)
        if rpc_override:
            wallet = wallet.model_copy(update={"rpc_url": rpc_override})
        return wallet

    @classmethod
    def load_interface(cls, path: Optional[PathLike] = None) -> ContractInterface:
        """
        Load a contract interface descriptor.

        The file is looked up as ``path``, then ``$LEDGERCALL_INTERFACE``,
        then ``./exec_interface.json``.

        Raises:
            ConfigError: If the file is missing or not a valid descriptor
        """
        resolved = _resolve(path, INTERFACE_ENV, DEFAULT_INTERFACE_FILE)
        interface = cls._interface_cache.get(resolved)
        if interface is None:
            data = _read_json(resolved)
            try:
                interface = ContractInterface.model_validate(data)
            except ValidationError as e:
                raise ConfigError(f"Invalid contract interface {resolved}: {e}") from e
            cls._interface_cache[resolved] = interface
            logger.info("Loaded interface for %s (%d methods)", interface.contract[:12], len(interface.methods))
        return interface

    @classmethod
    def clear_cache(cls) -> None:
        cls._interface_cache = {}


def load_wallet(path: Optional[PathLike] = None) -> WalletConfig:
    return ClientConfig.load_wallet(path)


def load_interface(path: Optional[PathLike] = None) -> ContractInterface:
    return ClientConfig.load_interface(path)
