"""
Gateguard Core Library
======================
Signed message authentication and IP admission for API gateway middleware.
"""

__version__ = "0.1.0"

# Errors
from gateguard_core.errors import (
    GateguardError,
    ClaimError,
    AddressFormatError,
    ChecksumMismatchError,
    DateFormatError,
    SignatureFormatError,
    CryptoError,
    StorageError,
)

# Signed Messages
from gateguard_core.signed_message import (
    SignedMessage,
    AuthDecision,
    AuthOutcome,
    AuthResult,
    BlockReason,
    compute_checksum,
    is_valid_checksum,
    parse_address,
    parse_valid_address,
    compute_message_hash,
    format_expiry,
    sign_message,
    verify_message,
    authenticate,
)

# IP Status
from gateguard_core.ip_status import (
    IpStatus,
    IpStatusPayload,
    AdmissionStore,
    RedisAdmissionStore,
    InMemoryAdmissionStore,
    create_ip_status_router,
    IpAdmissionMiddleware,
)

# Logging
from gateguard_core.logging_setup import setup_logging

__all__ = [
    # Errors
    "GateguardError",
    "ClaimError",
    "AddressFormatError",
    "ChecksumMismatchError",
    "DateFormatError",
    "SignatureFormatError",
    "CryptoError",
    "StorageError",
    # Signed Messages
    "SignedMessage",
    "AuthDecision",
    "AuthOutcome",
    "AuthResult",
    "BlockReason",
    "compute_checksum",
    "is_valid_checksum",
    "parse_address",
    "parse_valid_address",
    "compute_message_hash",
    "format_expiry",
    "sign_message",
    "verify_message",
    "authenticate",
    # IP Status
    "IpStatus",
    "IpStatusPayload",
    "AdmissionStore",
    "RedisAdmissionStore",
    "InMemoryAdmissionStore",
    "create_ip_status_router",
    "IpAdmissionMiddleware",
    # Logging
    "setup_logging",
]
