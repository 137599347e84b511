"""
Gateguard Exceptions
====================
Exception classes for signed message authentication and IP admission storage.
"""

from typing import Optional, Any


class GateguardError(Exception):
    """Base exception for all gateguard errors."""
    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ClaimError(GateguardError):
    """Raised when a signed message claim is malformed."""
    pass


class AddressFormatError(ClaimError):
    """Raised when an address lacks the prefix or is not 40 hex characters."""
    pass


class ChecksumMismatchError(ClaimError):
    """Raised when an address does not match its checksum encoding."""
    pass


class DateFormatError(ClaimError):
    """Raised when date_message does not match the validation format."""
    pass


class SignatureFormatError(ClaimError):
    """Raised when a signature is not 65 bytes of hex."""
    pass


class CryptoError(GateguardError):
    """Raised when the signing or recovery primitive fails."""
    pass


class StorageError(GateguardError):
    """Raised when a write to the admission store fails."""
    def __init__(
        self,
        message: str,
        operation: str = "unknown",
        table: Optional[str] = None,
        details: Any = None,
    ):
        self.operation = operation
        self.table = table
        super().__init__(f"[{operation}] {message}", details=details)
