"""
Unit Tests for Signed Message Authentication
============================================
Tests for address checksums, message hashing, signing and verification.
"""

import os
import pytest
from datetime import datetime, timezone, timedelta

from eth_utils import keccak, to_checksum_address
from structlog.testing import capture_logs

from gateguard_core.errors import (
    AddressFormatError,
    ChecksumMismatchError,
    CryptoError,
    DateFormatError,
    SignatureFormatError,
)
from gateguard_core.signed_message import (
    AuthDecision,
    AuthOutcome,
    BlockReason,
    SignedMessage,
    authenticate,
    compute_checksum,
    compute_message_hash,
    format_expiry,
    is_valid_checksum,
    parse_address,
    parse_valid_address,
    sign_message,
    verify_message,
)

SECRET_KEY = "809465b17d0a4ddb3e4c69e8f23c2cabad868f51f8bed5c765ad1d6516c3306f"
ADDRESS = "0xbAB36286672fbdc7B250804bf6D14Be0dF69fa29"
OTHER_SECRET_KEY = "0x" + "01" * 32


def in_minutes(minutes: int) -> str:
    return format_expiry(datetime.now(timezone.utc) + timedelta(minutes=minutes))


@pytest.fixture
def signed_claim() -> SignedMessage:
    claim = SignedMessage(address=ADDRESS, date_message=in_minutes(5))
    return sign_message(claim, SECRET_KEY)


class TestChecksum:
    """Tests for mixed-case address checksums."""

    def test_known_vector(self):
        """Should produce the known checksum for a lowercase address."""
        result = compute_checksum("bab36286672fbdc7b250804bf6d14be0df69fa29")
        assert result == ADDRESS

    def test_prefixed_and_uppercase_input(self):
        """Should accept a 0x prefix and any input case."""
        assert compute_checksum("0xBAB36286672FBDC7B250804BF6D14BE0DF69FA29") == ADDRESS

    def test_idempotent(self):
        """Checksumming a checksummed address should not change it."""
        once = compute_checksum("bab36286672fbdc7b250804bf6d14be0df69fa29")
        assert compute_checksum(once) == once

    def test_random_addresses_match_eth_utils(self):
        """Generated checksums should be valid and agree with eth-utils."""
        for _ in range(25):
            raw = os.urandom(20).hex()
            checksummed = compute_checksum(raw)
            assert checksummed == to_checksum_address("0x" + raw)
            assert is_valid_checksum(checksummed) is True

    def test_is_valid_checksum_is_case_sensitive(self):
        """Lowercased or flipped addresses should not validate."""
        assert is_valid_checksum(ADDRESS) is True
        assert is_valid_checksum(ADDRESS.lower()) is False
        assert is_valid_checksum(ADDRESS.replace("bAB", "BAB")) is False

    def test_is_valid_checksum_malformed(self):
        """Malformed input should be reported invalid, not raise."""
        assert is_valid_checksum("0x1234") is False

    def test_compute_checksum_rejects_bad_length(self):
        """Should raise for addresses that are not 40 hex characters."""
        with pytest.raises(AddressFormatError):
            compute_checksum("0xabc")

    def test_parse_address(self):
        """Should return the 20 raw bytes."""
        raw = parse_address(ADDRESS)
        assert len(raw) == 20
        assert raw.hex() == ADDRESS[2:].lower()

    def test_parse_address_requires_prefix(self):
        """Should reject addresses without 0x."""
        with pytest.raises(AddressFormatError):
            parse_address(ADDRESS[2:])

    def test_parse_address_requires_hex(self):
        """Should reject non-hex characters and whitespace."""
        with pytest.raises(AddressFormatError):
            parse_address("0x" + "g" * 40)
        with pytest.raises(AddressFormatError):
            parse_address("0x" + "ab " * 13 + "a")

    def test_parse_valid_address_checksum_mismatch(self):
        """Should reject well-formed addresses with a wrong checksum."""
        with pytest.raises(ChecksumMismatchError):
            parse_valid_address(ADDRESS.lower())
        assert parse_valid_address(ADDRESS) == parse_address(ADDRESS)


class TestMessageHash:
    """Tests for personal-message hashing."""

    def test_ascii_message(self):
        """Should hash prefix, length and message."""
        message = "2030-01-01 00:00:00 +0000"
        expected = keccak(b"\x19Ethereum Signed Message:\n25" + message.encode())
        assert compute_message_hash(message) == expected

    def test_length_is_byte_length(self):
        """Multi-byte characters should count by UTF-8 bytes."""
        expected = keccak(b"\x19Ethereum Signed Message:\n2" + "é".encode("utf-8"))
        assert compute_message_hash("é") == expected

    def test_matches_eth_account(self):
        """Should agree with eth-account's EIP-191 encoding."""
        from eth_account import Account
        from eth_account.messages import encode_defunct

        message = in_minutes(5)
        signed = Account.sign_message(encode_defunct(text=message), private_key=SECRET_KEY)
        assert bytes(signed.message_hash) == compute_message_hash(message)


class TestSignVerify:
    """Tests for signing and verifying claims."""

    def test_sign_and_verify(self, signed_claim):
        """A freshly signed claim should verify."""
        assert verify_message(signed_claim) is True

    def test_sign_mutates_claim(self):
        """Signing should write a 0x-prefixed 65-byte signature in place."""
        claim = SignedMessage(address=ADDRESS, date_message=in_minutes(5))
        result = sign_message(claim, bytes.fromhex(SECRET_KEY))

        assert result is claim
        assert claim.signature.startswith("0x")
        assert len(claim.signature) == 2 + 130

    def test_signature_prefix_optional(self, signed_claim):
        """Signatures without 0x should verify too."""
        signed_claim.signature = signed_claim.signature[2:]
        assert verify_message(signed_claim) is True

    def test_recoverable_by_eth_account(self, signed_claim):
        """eth-account should recover the same signer."""
        from eth_account import Account
        from eth_account.messages import encode_defunct

        recovered = Account.recover_message(
            encode_defunct(text=signed_claim.date_message),
            signature=signed_claim.signature,
        )
        assert recovered == ADDRESS

    def test_verifies_eth_account_signature(self):
        """Wallet signatures with a 27/28 recovery id should verify."""
        from eth_account import Account
        from eth_account.messages import encode_defunct

        message = in_minutes(5)
        signed = Account.sign_message(encode_defunct(text=message), private_key=SECRET_KEY)
        claim = SignedMessage(
            address=ADDRESS,
            date_message=message,
            signature="0x" + bytes(signed.signature).hex(),
        )
        assert verify_message(claim) is True

    def test_expired_claim_returns_false(self):
        """An expired claim should be rejected without error."""
        claim = SignedMessage(address=ADDRESS, date_message=in_minutes(-5))
        sign_message(claim, SECRET_KEY)
        assert verify_message(claim) is False

    def test_expired_claim_skips_other_checks(self):
        """Expiry is checked before the address and signature."""
        claim = SignedMessage(
            address="not-an-address",
            date_message=in_minutes(-5),
            signature="garbage",
        )
        assert verify_message(claim) is False

    def test_explicit_now(self):
        """Expiry should be evaluated against the supplied time."""
        claim = SignedMessage(address=ADDRESS, date_message="2030-01-01 00:00:00 +0000")
        sign_message(claim, SECRET_KEY)

        before = datetime(2029, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
        after = datetime(2030, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert verify_message(claim, now=before) is True
        assert verify_message(claim, now=after) is False

    def test_expiry_instant_itself_is_valid(self):
        """Only strictly later times are expired."""
        claim = SignedMessage(address=ADDRESS, date_message="2030-01-01 02:00:00 +0200")
        sign_message(claim, SECRET_KEY)
        assert verify_message(claim, now=datetime(2030, 1, 1, 0, 0, 0)) is True

    def test_wrong_signer_returns_false(self):
        """A claim signed by another key should not verify."""
        claim = SignedMessage(address=ADDRESS, date_message=in_minutes(5))
        sign_message(claim, OTHER_SECRET_KEY)
        assert verify_message(claim) is False

    def test_tampered_message_returns_false(self, signed_claim):
        """Changing the signed message should break verification."""
        signed_claim.date_message = in_minutes(10)
        assert verify_message(signed_claim) is False

    @pytest.mark.parametrize(
        "date_message",
        [
            "2030/01/01 00:00",
            "2000-01-01 00:00:00 Z",
            "2030-01-01 00:00:00 Z",
            "2030-01-01 00:00:00 +00:00",
            "2030-01-01 00:00:00",
            "2030-01-01T00:00:00 +0000",
        ],
    )
    def test_bad_date_format(self, signed_claim, date_message):
        """Should raise DateFormatError unless the offset is +HHMM or -HHMM."""
        signed_claim.date_message = date_message
        with pytest.raises(DateFormatError):
            verify_message(signed_claim)

    def test_bad_address(self, signed_claim):
        """Should raise AddressFormatError for a missing prefix."""
        signed_claim.address = ADDRESS[2:]
        with pytest.raises(AddressFormatError):
            verify_message(signed_claim)

    def test_bad_checksum(self, signed_claim):
        """Should raise ChecksumMismatchError for a lowercase address."""
        signed_claim.address = ADDRESS.lower()
        with pytest.raises(ChecksumMismatchError):
            verify_message(signed_claim)

    @pytest.mark.parametrize("signature", ["0x1234", "0x" + "zz" * 65, "", "0x" + "ab" * 66])
    def test_bad_signature_shape(self, signed_claim, signature):
        """Should raise SignatureFormatError unless 65 bytes of hex."""
        signed_claim.signature = signature
        with pytest.raises(SignatureFormatError):
            verify_message(signed_claim)

    def test_bad_recovery_id(self, signed_claim):
        """An invalid recovery id should surface as CryptoError."""
        signed_claim.signature = signed_claim.signature[:-2] + "05"
        with pytest.raises(CryptoError):
            verify_message(signed_claim)

    def test_sign_with_malformed_key(self):
        """Malformed keys should raise CryptoError."""
        claim = SignedMessage(address=ADDRESS, date_message=in_minutes(5))
        with pytest.raises(CryptoError):
            sign_message(claim, "not-hex")
        with pytest.raises(CryptoError):
            sign_message(claim, b"\x01" * 31)
        assert claim.signature == ""

    def test_payload_roundtrip(self, signed_claim):
        """Claims should map to and from the wire payload."""
        payload = signed_claim.to_dict()
        assert set(payload) == {"address", "date_message", "signature"}
        assert verify_message(SignedMessage.from_dict(payload)) is True


class TestAuthenticate:
    """Tests for authentication outcomes."""

    def test_authenticated(self, signed_claim):
        """A valid claim should be allowed."""
        result = authenticate(signed_claim)

        assert result.outcome == AuthOutcome.AUTHENTICATED
        assert result.decision == AuthDecision.ALLOW
        assert result.allowed is True
        assert result.address == ADDRESS

    def test_rejected_expired(self):
        """An expired claim should be rejected, not malformed."""
        claim = SignedMessage(address=ADDRESS, date_message=in_minutes(-1))
        sign_message(claim, SECRET_KEY)

        result = authenticate(claim)

        assert result.outcome == AuthOutcome.REJECTED
        assert result.reason_code == BlockReason.EXPIRED
        assert result.decision == AuthDecision.BLOCK

    def test_rejected_wrong_signer(self):
        """A claim signed by another key should be a signature mismatch."""
        claim = SignedMessage(address=ADDRESS, date_message=in_minutes(5))
        sign_message(claim, OTHER_SECRET_KEY)

        result = authenticate(claim)

        assert result.outcome == AuthOutcome.REJECTED
        assert result.reason_code == BlockReason.SIGNATURE_MISMATCH

    def test_malformed_is_logged(self, signed_claim):
        """Malformed claims should be blocked and logged as anomalies."""
        signed_claim.address = ADDRESS.lower()

        with capture_logs() as logs:
            result = authenticate(signed_claim)

        assert result.outcome == AuthOutcome.MALFORMED
        assert result.reason_code == BlockReason.CHECKSUM_MISMATCH
        assert result.allowed is False
        assert logs[0]["event"] == "signed_message_malformed"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["error_type"] == "ChecksumMismatchError"

    def test_rejection_not_logged_as_warning(self):
        """Expired claims should not produce warning events."""
        claim = SignedMessage(address=ADDRESS, date_message=in_minutes(-1))

        with capture_logs() as logs:
            authenticate(claim)

        assert all(entry["log_level"] != "warning" for entry in logs)

    @pytest.mark.parametrize(
        "field,value,reason",
        [
            ("date_message", "tomorrow", BlockReason.INVALID_DATE),
            ("date_message", "2000-01-01 00:00:00 Z", BlockReason.INVALID_DATE),
            ("address", "0x1234", BlockReason.INVALID_ADDRESS),
            ("signature", "0x00", BlockReason.INVALID_SIGNATURE),
        ],
    )
    def test_malformed_reasons(self, signed_claim, field, value, reason):
        """Each error kind should map to its own reason code."""
        setattr(signed_claim, field, value)

        result = authenticate(signed_claim)

        assert result.outcome == AuthOutcome.MALFORMED
        assert result.reason_code == reason
