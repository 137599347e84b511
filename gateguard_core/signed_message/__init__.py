"""
Signed Message Module
=====================
Address checksums and secp256k1 signed message authentication.
"""

from .models import (
    AuthDecision,
    AuthOutcome,
    AuthResult,
    BlockReason,
    SignedMessage,
)
from .checksum import (
    compute_checksum,
    is_valid_checksum,
    parse_address,
    parse_valid_address,
)
from .signature import (
    compute_message_hash,
    decode_signature,
    format_expiry,
    parse_expiry,
    recover_address,
    sign_message,
    verify_message,
    SIGNATURE_LENGTH,
)
from .authenticator import authenticate

__all__ = [
    # Models
    "AuthDecision",
    "AuthOutcome",
    "AuthResult",
    "BlockReason",
    "SignedMessage",
    # Checksum
    "compute_checksum",
    "is_valid_checksum",
    "parse_address",
    "parse_valid_address",
    # Signature
    "compute_message_hash",
    "decode_signature",
    "format_expiry",
    "parse_expiry",
    "recover_address",
    "sign_message",
    "verify_message",
    "SIGNATURE_LENGTH",
    # Authenticator
    "authenticate",
]
