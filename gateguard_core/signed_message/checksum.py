"""
Address Checksum
================
Mixed-case checksum encoding of 20-byte addresses (EIP-55).
"""

import re

from eth_utils import keccak

from ..config import ADDRESS_PREFIX
from ..errors import AddressFormatError, ChecksumMismatchError

_HEX_ADDRESS = re.compile(r"[0-9a-fA-F]{40}")


def _strip_prefix(address: str) -> str:
    if address[:2].lower() == ADDRESS_PREFIX:
        return address[2:]
    return address


def compute_checksum(address: str) -> str:
    """
    Compute the mixed-case checksum form of an address.
    
    A letter at index i is uppercased when bit (7 - 4 * (i % 2)) of
    byte i // 2 of keccak256(lowercase hex) is set. Digits are unchanged.
    
    Args:
        address: 40 hex characters, optionally prefixed with 0x
        
    Returns:
        Checksummed address prefixed with 0x
        
    Raises:
        AddressFormatError: If the address is not 40 hex characters
    """
    lowered = _strip_prefix(address).lower()
    if not _HEX_ADDRESS.fullmatch(lowered):
        raise AddressFormatError(
            "Address must be 40 hex characters", details=address
        )
    
    digest = keccak(text=lowered)
    result = [ADDRESS_PREFIX]
    for i, c in enumerate(lowered):
        if c.isdigit():
            result.append(c)
        elif digest[i // 2] & (1 << (7 - 4 * (i % 2))):
            result.append(c.upper())
        else:
            result.append(c)
    
    return "".join(result)


def is_valid_checksum(address: str) -> bool:
    """Check that an address is exactly its own checksum encoding."""
    try:
        return address == compute_checksum(address)
    except AddressFormatError:
        return False


def parse_address(address: str) -> bytes:
    """
    Parse a 0x-prefixed hex address into its 20 raw bytes.
    
    Raises:
        AddressFormatError: If the prefix is missing or the remainder
            is not exactly 40 hex characters
    """
    if not address.startswith(ADDRESS_PREFIX):
        raise AddressFormatError(
            f"Address must be prefixed with {ADDRESS_PREFIX}", details=address
        )
    
    body = address[len(ADDRESS_PREFIX):]
    if not _HEX_ADDRESS.fullmatch(body):
        raise AddressFormatError(
            "Address must be 40 hex characters", details=address
        )
    
    return bytes.fromhex(body)


def parse_valid_address(address: str) -> bytes:
    """Parse an address and require a matching checksum."""
    raw = parse_address(address)
    if not is_valid_checksum(address):
        raise ChecksumMismatchError("Invalid address checksum", details=address)
    return raw
