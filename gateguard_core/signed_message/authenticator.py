"""
Signed Message Authenticator
============================
Maps claim verification onto gateway decisions.

verify_message() returns False for a well-formed claim that is expired or
signed by someone else, and raises for a malformed one. Both deny the
request, but only malformed claims are logged as anomalies.
"""

from datetime import datetime
from typing import Dict, Optional, Type
import structlog

from ..errors import (
    AddressFormatError,
    ChecksumMismatchError,
    ClaimError,
    CryptoError,
    DateFormatError,
    GateguardError,
    SignatureFormatError,
)
from .models import AuthOutcome, AuthResult, BlockReason, SignedMessage
from .signature import parse_expiry, resolve_now, verify_message

logger = structlog.get_logger(__name__)

ERROR_REASONS: Dict[Type[GateguardError], BlockReason] = {
    AddressFormatError: BlockReason.INVALID_ADDRESS,
    ChecksumMismatchError: BlockReason.CHECKSUM_MISMATCH,
    DateFormatError: BlockReason.INVALID_DATE,
    SignatureFormatError: BlockReason.INVALID_SIGNATURE,
    CryptoError: BlockReason.CRYPTO_FAILURE,
}


def authenticate(
    claim: SignedMessage,
    now: Optional[datetime] = None,
) -> AuthResult:
    """
    Authenticate a signed message claim.
    
    Args:
        claim: Claim to authenticate
        now: Reference time (default: current UTC time)
        
    Returns:
        AuthResult with outcome, decision and reason
    """
    now = resolve_now(now)
    try:
        verified = verify_message(claim, now=now)
    except (ClaimError, CryptoError) as e:
        reason_code = ERROR_REASONS.get(type(e), BlockReason.CRYPTO_FAILURE)
        logger.warning(
            "signed_message_malformed",
            error_type=type(e).__name__,
            error=e.message,
            reason=reason_code.value,
            address=claim.address,
        )
        return AuthResult(
            outcome=AuthOutcome.MALFORMED,
            reason=e.message,
            reason_code=reason_code,
            address=claim.address,
        )
    
    if verified:
        return AuthResult(outcome=AuthOutcome.AUTHENTICATED, address=claim.address)
    
    # verify_message already parsed the date, so this cannot raise
    if now > parse_expiry(claim.date_message):
        reason_code = BlockReason.EXPIRED
    else:
        reason_code = BlockReason.SIGNATURE_MISMATCH
    
    logger.debug(
        "signed_message_rejected",
        reason=reason_code.value,
        address=claim.address,
    )
    return AuthResult(
        outcome=AuthOutcome.REJECTED,
        reason=f"Claim rejected: {reason_code.value}",
        reason_code=reason_code,
        address=claim.address,
    )
