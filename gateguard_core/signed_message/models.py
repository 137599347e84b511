"""
Signed Message Models
=====================
Data models and enums for signed message authentication.
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass
from enum import Enum


class AuthDecision(str, Enum):
    """Gateway decision for a signed message claim."""
    ALLOW = "ALLOW"
    BLOCK = "BLOCK"


class AuthOutcome(str, Enum):
    """Terminal outcome of a verification attempt."""
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"
    MALFORMED = "malformed"


class BlockReason(str, Enum):
    """Reasons for refusing a claim."""
    EXPIRED = "expired"
    SIGNATURE_MISMATCH = "signature_mismatch"
    INVALID_ADDRESS = "invalid_address"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    INVALID_DATE = "invalid_date"
    INVALID_SIGNATURE = "invalid_signature"
    CRYPTO_FAILURE = "crypto_failure"


@dataclass
class SignedMessage:
    """A claim: the signer's address, an expiry message and its signature."""
    address: str
    date_message: str
    signature: str = ""
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignedMessage":
        return cls(
            address=data["address"],
            date_message=data["date_message"],
            signature=data.get("signature", ""),
        )
    
    def to_dict(self) -> Dict[str, str]:
        return {
            "address": self.address,
            "date_message": self.date_message,
            "signature": self.signature,
        }


@dataclass
class AuthResult:
    """Result of authenticating a signed message."""
    outcome: AuthOutcome
    reason: Optional[str] = None
    reason_code: Optional[BlockReason] = None
    address: Optional[str] = None
    
    @property
    def decision(self) -> AuthDecision:
        if self.outcome == AuthOutcome.AUTHENTICATED:
            return AuthDecision.ALLOW
        return AuthDecision.BLOCK
    
    @property
    def allowed(self) -> bool:
        return self.decision == AuthDecision.ALLOW
