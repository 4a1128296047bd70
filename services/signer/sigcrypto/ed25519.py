"""
Ed25519 (RFC 8032) via the `cryptography` package.

Wire formats:
  public key   A(32)                      compressed Edwards point
  private key  seed(32) || A(32)          64 bytes, the layout Go's
                                            crypto/ed25519 and libsodium use
  signature    R(32) || S(32)

Signing is deterministic; key generation draws a 32-byte seed.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from sigcrypto.schemes import ByteLayout, EntropySource, SchemeDescriptor, Segment, SignatureScheme

SEED_SIZE = 32

DESCRIPTOR = SchemeDescriptor(
    name                = "ed25519",
    public_key_size     = 32,
    private_key_size    = 64,
    signature_size      = 64,
    requires_randomness = True,
    randomized_signing  = False,
    public_key_layout   = ByteLayout((Segment("A", 32),)),
    private_key_layout  = ByteLayout((Segment("seed", SEED_SIZE), Segment("A", 32))),
    signature_layout    = ByteLayout((Segment("R", 32), Segment("S", 32))),
    family              = "classical",
)


def _raw_public(private: Ed25519PrivateKey) -> bytes:
    return private.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


class Ed25519Scheme(SignatureScheme):
    descriptor = DESCRIPTOR

    def _keypair(self, entropy: EntropySource) -> tuple[bytes, bytes]:
        seed = entropy(SEED_SIZE)
        public = _raw_public(Ed25519PrivateKey.from_private_bytes(seed))
        return public, seed + public

    def _sign(self, private_key: bytes, message: bytes, entropy: EntropySource | None) -> bytes:
        # Only the seed is secret; the trailing A half is carried for format compatibility.
        parts = self.descriptor.private_key_layout.unpack(private_key)
        key = Ed25519PrivateKey.from_private_bytes(parts["seed"])  # type: ignore[arg-type]
        return key.sign(message)

    def _verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        try:
            key = Ed25519PublicKey.from_public_bytes(public_key)
        except ValueError:
            return False
        try:
            key.verify(signature, message)
        except InvalidSignature:
            return False
        return True
