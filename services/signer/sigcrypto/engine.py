"""
SignatureEngine: scheme-agnostic dispatch over {generate, sign, verify}.

REGISTRY maps a scheme name to its SignatureScheme instance.  Adding a
scheme means calling register_scheme(); nothing that holds an engine has to
change.  An engine holds no state besides the scheme it was built for.
"""

from __future__ import annotations

import logging

from sigcrypto.ed25519 import Ed25519Scheme
from sigcrypto.errors import UnknownScheme
from sigcrypto.keys import KeyPair
from sigcrypto.lattice import dilithium3, ml_dsa_65
from sigcrypto.schemes import RandomSource, SchemeDescriptor, SignatureScheme

log = logging.getLogger(__name__)

REGISTRY: dict[str, SignatureScheme] = {}


def register_scheme(scheme: SignatureScheme) -> SignatureScheme:
    name = scheme.descriptor.name
    if name in REGISTRY:
        raise ValueError(f"signature scheme {name!r} is already registered")
    REGISTRY[name] = scheme
    log.debug("Registered signature scheme %s", name)
    return scheme


def get_scheme(name: str) -> SignatureScheme:
    try:
        return REGISTRY[name]
    except KeyError:
        raise UnknownScheme(name, sorted(REGISTRY)) from None


def available_schemes() -> list[SchemeDescriptor]:
    return [s.descriptor for s in REGISTRY.values()]


class SignatureEngine:
    def __init__(self, scheme: str | SignatureScheme) -> None:
        self._scheme = get_scheme(scheme) if isinstance(scheme, str) else scheme

    @property
    def scheme_name(self) -> str:
        return self._scheme.descriptor.name

    @property
    def descriptor(self) -> SchemeDescriptor:
        return self._scheme.descriptor

    def generate(self, random_source: RandomSource | None = None) -> KeyPair:
        return self._scheme.generate(random_source)

    def sign(
        self,
        private_key: bytes,
        message: bytes,
        random_source: RandomSource | None = None,
    ) -> bytes:
        return self._scheme.sign(private_key, message, random_source)

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        return self._scheme.verify(public_key, message, signature)

    def __repr__(self) -> str:
        return f"SignatureEngine({self.scheme_name!r})"


def get_engine(name: str) -> SignatureEngine:
    return SignatureEngine(get_scheme(name))


# ── Built-in schemes ──────────────────────────────────────────────────────────

register_scheme(Ed25519Scheme())
register_scheme(ml_dsa_65())
register_scheme(dilithium3())
