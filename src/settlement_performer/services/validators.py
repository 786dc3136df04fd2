"""Hex field checks shared by the settlement handlers."""

from __future__ import annotations

import binascii
import string

from settlement_performer.exceptions import FieldValidationError

HEX_PREFIX = "0x"

# 0x + 64 hex digits
BYTES32_HEX_LENGTH = 66

_HEX_DIGITS = frozenset(string.hexdigits)


def require_hex(field_name: str, value: str, expected_length: int) -> None:
    """Check that value is a 0x-prefixed hex string, optionally of an exact length.

    Args:
        field_name: Name reported in the error.
        value: Candidate string.
        expected_length: Required length including the prefix; 0 disables the check.

    Raises:
        FieldValidationError: On the first failed check.
    """
    if not value:
        raise FieldValidationError(field_name, f"{field_name} missing")
    if not value.startswith(HEX_PREFIX):
        raise FieldValidationError(field_name, f"{field_name} must start with 0x")
    if expected_length > 0 and len(value) != expected_length:
        raise FieldValidationError(
            field_name,
            f"{field_name} length must be {expected_length} chars incl 0x",
        )
    if not _HEX_DIGITS.issuperset(value[len(HEX_PREFIX) :]):
        raise FieldValidationError(field_name, f"{field_name} must be hex-encoded")


def decode_hex_bytes(value: str) -> bytes:
    """Decode a hex string with an optional 0x prefix.

    Raises:
        ValueError: On non-hex characters (whitespace included) or an odd digit
            count. binascii.Error is a ValueError.
    """
    return binascii.unhexlify(value.removeprefix(HEX_PREFIX))
