"""
Address Canonicalizer.

Resolver records hold addresses as text. Comparisons are only ever made
between canonical encodings: exactly 40 lowercase hex digits, most
significant byte first, optionally preceded by ``0x``.

Record formats (fixed):
    auth declaration value   — prefixed
    vault declaration value  — prefixed
    reverse lookup label     — unprefixed
"""

from __future__ import annotations

import re


ADDRESS_BYTES = 20
HEX_PREFIX = "0x"

_HEX_ADDRESS = re.compile(r"^(?:0[xX])?([0-9a-fA-F]{40})$")


class AddressFormatError(ValueError):
    """Raised when address text or bytes cannot be an address."""
    pass


def to_hex_string(address: bytes, with_prefix: bool = True) -> str:
    """
    Canonical text form of a 20-byte address.

    Example:
        to_hex_string(b"\\x11" * 20)        -> "0x1111...1111"
        to_hex_string(b"\\x11" * 20, False) -> "1111...1111"
    """
    if len(address) != ADDRESS_BYTES:
        raise AddressFormatError(
            f"Address must be {ADDRESS_BYTES} bytes, got {len(address)}"
        )
    text = address.hex()
    return HEX_PREFIX + text if with_prefix else text


def from_hex_string(value: str) -> bytes:
    """
    Parse address text in any case, with or without ``0x``.

    Only used at input edges. Never used to make a comparison pass.
    """
    match = _HEX_ADDRESS.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise AddressFormatError(f"Not a 20-byte hex address: {value!r}")
    return bytes.fromhex(match.group(1))
