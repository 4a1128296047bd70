"""
Hex transport codec for keys and signatures.

Hex is the only wire format: lowercase on output, either case accepted on
input, no prefixes, no whitespace.  Length checks against the active
SchemeDescriptor live here too, and MUST run before any buffer is handed to
a scheme; the lattice unpackers assume exactly-sized input.
"""

from __future__ import annotations

import binascii
from typing import TYPE_CHECKING

from sigcrypto.errors import InvalidKeyLength, InvalidSignatureLength, MalformedEncoding

if TYPE_CHECKING:
    from sigcrypto.schemes import SchemeDescriptor

# Field names as they appear in HTTP payloads and error messages
PUBLIC_KEY  = "publicKey"
PRIVATE_KEY = "privateKey"
SIGNATURE   = "signature"


def encode_hex(data: bytes) -> str:
    return data.hex()


def decode_hex(text: str, field: str = "value") -> bytes:
    """Decode hex text, raising MalformedEncoding on anything but [0-9a-fA-F]{2n}."""
    if not isinstance(text, str):
        raise MalformedEncoding(field, f"expected a string, got {type(text).__name__}")
    if len(text) % 2:
        raise MalformedEncoding(field, "odd number of hex digits")
    try:
        # unhexlify (unlike bytes.fromhex) rejects embedded whitespace
        return binascii.unhexlify(text)
    except ValueError as exc:
        raise MalformedEncoding(field, str(exc)) from None


def validate_length(data: bytes, expected: int, field: str) -> None:
    """Raise InvalidSignatureLength / InvalidKeyLength unless len(data) == expected."""
    if len(data) == expected:
        return
    if field == SIGNATURE:
        raise InvalidSignatureLength(field, expected, len(data))
    raise InvalidKeyLength(field, expected, len(data))


# ── Decode + validate ─────────────────────────────────────────────────────────

def decode_public_key(text: str, descriptor: "SchemeDescriptor") -> bytes:
    raw = decode_hex(text, PUBLIC_KEY)
    validate_length(raw, descriptor.public_key_size, PUBLIC_KEY)
    return raw


def decode_private_key(text: str, descriptor: "SchemeDescriptor") -> bytes:
    raw = decode_hex(text, PRIVATE_KEY)
    validate_length(raw, descriptor.private_key_size, PRIVATE_KEY)
    return raw


def decode_signature(text: str, descriptor: "SchemeDescriptor") -> bytes:
    raw = decode_hex(text, SIGNATURE)
    validate_length(raw, descriptor.signature_size, SIGNATURE)
    return raw
