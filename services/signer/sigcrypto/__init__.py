"""Pluggable signature schemes, hex key codec and the scheme registry."""

from sigcrypto.engine import SignatureEngine, available_schemes, get_engine, register_scheme
from sigcrypto.errors import SigningError
from sigcrypto.keys import KeyPair

__all__ = [
    "KeyPair",
    "SignatureEngine",
    "SigningError",
    "available_schemes",
    "get_engine",
    "register_scheme",
]
