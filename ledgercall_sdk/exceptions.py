"""
Exceptions for the LedgerCall SDK.
"""
from typing import Optional


class LedgerCallError(Exception):
    """Base exception for all LedgerCall SDK errors."""
    pass


class InvalidKeyError(LedgerCallError, ValueError):
    """Raised when private key material is malformed or has the wrong length."""
    pass


class ParameterValidationError(LedgerCallError, ValueError):
    """Raised when call parameters do not match the contract interface."""
    pass


class ConfigError(LedgerCallError):
    """Raised when wallet or contract interface configuration cannot be loaded."""
    pass


class RemoteUnavailableError(LedgerCallError):
    """Raised when the remote ledger service cannot be reached."""
    pass


class RemoteError(LedgerCallError):
    """Raised when the remote ledger service returns a non-success response."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class SubmissionRejectedError(RemoteError):
    """
    Raised when the remote service rejects a submitted transaction.

    The ``reason`` attribute carries the remote's rejection message verbatim
    (invalid signature, stale nonce, insufficient balance, ...).
    """

    def __init__(self, reason: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.reason = reason
        super().__init__(f"Transaction rejected: {reason}", status_code=status_code, body=body)
