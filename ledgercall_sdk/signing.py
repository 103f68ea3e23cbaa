"""
Transaction signing for the LedgerCall SDK.

Transactions are serialized to a canonical compact JSON encoding of their six
signed fields and signed with Ed25519. The same encoding is reproduced by the
remote verifier, so field order and separators must never change.
"""
import base64
import binascii
import json
import logging
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .exceptions import InvalidKeyError
from .models import SignedTransaction, Transaction

logger = logging.getLogger(__name__)

# Raw Ed25519 seed length
PRIVATE_KEY_LENGTH = 32


def canonical_bytes(tx: Transaction) -> bytes:
    """
    Serialize the six signed transaction fields.

    Args:
        tx: Transaction to serialize

    Returns:
        UTF-8 bytes of ``{"from","to_","amount","nonce","ou","timestamp"}``
        as compact JSON in that exact order
    """
    return json.dumps(tx.signing_fields(), separators=(",", ":")).encode("utf-8")


def decode_private_key(private_key_b64: str) -> bytes:
    """
    Decode a base64 private key into raw signing bytes.

    Raises:
        InvalidKeyError: If the value is not valid base64 or has the wrong length
    """
    try:
        raw = base64.b64decode(private_key_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidKeyError(f"Private key is not valid base64: {e}") from None
    _check_length(raw)
    return raw


def _check_length(private_key: bytes) -> None:
    if not isinstance(private_key, (bytes, bytearray)):
        raise InvalidKeyError(f"Private key must be bytes, got {type(private_key).__name__}")
    if len(private_key) != PRIVATE_KEY_LENGTH:
        raise InvalidKeyError(
            f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(private_key)}"
        )


def _load_key(private_key: bytes) -> Ed25519PrivateKey:
    _check_length(private_key)
    return Ed25519PrivateKey.from_private_bytes(bytes(private_key))


def public_key(private_key: bytes) -> bytes:
    """Derive the raw 32-byte Ed25519 public key."""
    return _load_key(private_key).public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


def public_key_b64(private_key: bytes) -> str:
    """Derive the public key, base64-encoded for transport."""
    return base64.b64encode(public_key(private_key)).decode("ascii")


def sign(private_key: bytes, tx: Transaction) -> str:
    """
    Sign a transaction.

    Args:
        private_key: Raw 32-byte Ed25519 private key
        tx: Transaction to sign

    Returns:
        Base64-encoded signature over ``canonical_bytes(tx)``

    Raises:
        InvalidKeyError: If the key is not 32 bytes
    """
    signature = _load_key(private_key).sign(canonical_bytes(tx))
    return base64.b64encode(signature).decode("ascii")


def sign_transaction(private_key: bytes, tx: Transaction) -> SignedTransaction:
    """Sign a transaction and attach the signature and public key."""
    signed = SignedTransaction(
        transaction=tx,
        signature=sign(private_key, tx),
        public_key=public_key_b64(private_key),
    )
    logger.debug("Signed transaction nonce=%s to=%s", tx.nonce, tx.to_address[:12])
    return signed


def verify(pub_key: Union[bytes, str], tx: Transaction, signature_b64: str) -> bool:
    """
    Verify a signature against the canonical encoding of a transaction.

    Args:
        pub_key: Raw public key bytes or its base64 encoding
        tx: Transaction that was signed
        signature_b64: Base64 signature

    Returns:
        True if the signature is valid, False otherwise
    """
    try:
        if isinstance(pub_key, str):
            pub_key = base64.b64decode(pub_key, validate=True)
        signature = base64.b64decode(signature_b64, validate=True)
        Ed25519PublicKey.from_public_bytes(pub_key).verify(signature, canonical_bytes(tx))
        return True
    except (InvalidSignature, binascii.Error, ValueError):
        return False
