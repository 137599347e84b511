"""
Signature Functions
===================
Personal-message hashing, recoverable secp256k1 signing and claim verification.
"""

import re
from datetime import datetime, timezone
from typing import Optional, Union

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import ValidationError as EthUtilsValidationError, keccak

from ..config import (
    PERSONAL_MESSAGE_PREFIX,
    SIGNATURE_PREFIX,
    VALIDATION_DATE_FORMAT,
)
from ..errors import CryptoError, DateFormatError, SignatureFormatError
from .checksum import parse_valid_address
from .models import SignedMessage

SIGNATURE_LENGTH = 65
# Wallets commonly encode the recovery id as 27/28
LEGACY_V_OFFSET = 27

_CRYPTO_ERRORS = (
    BadSignature,
    ValidationError,
    EthUtilsValidationError,
    ValueError,
    TypeError,
)
_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*")
# strptime also accepts "Z" and "+HH:MM" for %z
_DATE_MESSAGE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2} [+-][0-9]{4}")


def compute_message_hash(date_message: str) -> bytes:
    """
    Compute the personal-message hash of a date message.
    
    keccak256("\\x19Ethereum Signed Message:\\n" + len + message), where
    len is the decimal UTF-8 byte length of the message.
    
    Args:
        date_message: Message to hash
        
    Returns:
        32-byte keccak256 digest
    """
    payload = date_message.encode("utf-8")
    prefix = f"{PERSONAL_MESSAGE_PREFIX}{len(payload)}".encode("utf-8")
    return keccak(prefix + payload)


def format_expiry(moment: datetime) -> str:
    """Render an expiry instant as a date_message."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.strftime(VALIDATION_DATE_FORMAT)


def parse_expiry(date_message: str) -> datetime:
    """
    Parse a date_message into an aware datetime.
    
    Raises:
        DateFormatError: If the message does not match the validation format
    """
    if not isinstance(date_message, str) or not _DATE_MESSAGE.fullmatch(date_message):
        raise DateFormatError(
            f"date_message must match {VALIDATION_DATE_FORMAT!r}",
            details=date_message,
        )
    
    try:
        return datetime.strptime(date_message, VALIDATION_DATE_FORMAT)
    except ValueError as e:
        raise DateFormatError(
            f"date_message must match {VALIDATION_DATE_FORMAT!r}",
            details=str(e),
        ) from e


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return an aware reference time, treating naive values as UTC."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _load_private_key(secret_key: Union[bytes, str]) -> keys.PrivateKey:
    if isinstance(secret_key, str):
        if secret_key.startswith("0x"):
            secret_key = secret_key[2:]
        secret_key = bytes.fromhex(secret_key)
    return keys.PrivateKey(secret_key)


def decode_signature(signature: str) -> bytes:
    """
    Strip the optional prefix and hex-decode a signature.
    
    Raises:
        SignatureFormatError: If the result is not 65 bytes of valid hex
    """
    body = signature
    if body.startswith(SIGNATURE_PREFIX):
        body = body[len(SIGNATURE_PREFIX):]
    
    if not _HEX.fullmatch(body):
        raise SignatureFormatError("Signature is not valid hex", details=signature)

    raw = bytes.fromhex(body)
    if len(raw) != SIGNATURE_LENGTH:
        raise SignatureFormatError(
            f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}"
        )
    
    return raw


def sign_message(
    claim: SignedMessage,
    secret_key: Union[bytes, str],
) -> SignedMessage:
    """
    Sign a claim's date_message and store the signature on the claim.
    
    The signature is written as 0x + hex(r || s || v) with v in {0, 1}.
    
    Args:
        claim: Claim to sign, mutated in place
        secret_key: 32-byte secp256k1 secret, raw or hex encoded
        
    Returns:
        The same claim
        
    Raises:
        CryptoError: If the key is malformed or signing fails
    """
    message_hash = compute_message_hash(claim.date_message)
    
    try:
        private_key = _load_private_key(secret_key)
        signature = private_key.sign_msg_hash(message_hash)
    except _CRYPTO_ERRORS as e:
        raise CryptoError("Failed to sign message", details=str(e)) from e
    
    claim.signature = SIGNATURE_PREFIX + signature.to_bytes().hex()
    return claim


def recover_address(message_hash: bytes, raw_signature: bytes) -> bytes:
    """
    Recover the 20-byte signer address from a hash and a 65-byte signature.
    
    Raises:
        CryptoError: If recovery fails
    """
    v = raw_signature[64]
    if v >= LEGACY_V_OFFSET:
        raw_signature = raw_signature[:64] + bytes([v - LEGACY_V_OFFSET])
    
    try:
        signature = keys.Signature(signature_bytes=raw_signature)
        public_key = signature.recover_public_key_from_msg_hash(message_hash)
    except _CRYPTO_ERRORS as e:
        raise CryptoError("Failed to recover signer", details=str(e)) from e
    
    return public_key.to_canonical_address()


def verify_message(claim: SignedMessage, now: Optional[datetime] = None) -> bool:
    """
    Verify a signed message claim.
    
    Checks run in order and stop at the first failure:
    expiry, address checksum, signature shape, signer recovery.
    
    Args:
        claim: Claim to verify
        now: Reference time (default: current UTC time)
        
    Returns:
        True if the claim is unexpired and signed by claim.address,
        False if it is expired or signed by someone else
        
    Raises:
        DateFormatError: date_message is unparseable
        AddressFormatError: address is malformed
        ChecksumMismatchError: address checksum is wrong
        SignatureFormatError: signature is not 65 bytes of hex
        CryptoError: signer recovery failed
    """
    valid_until = parse_expiry(claim.date_message)
    
    if resolve_now(now) > valid_until:
        return False
    
    address = parse_valid_address(claim.address)
    raw_signature = decode_signature(claim.signature)
    message_hash = compute_message_hash(claim.date_message)
    
    return recover_address(message_hash, raw_signature) == address
