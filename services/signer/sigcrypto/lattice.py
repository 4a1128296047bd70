"""
Lattice (module-LWE) signatures via `dilithium-py`.

Two parameter sets are registered:

  ml-dsa-65    FIPS 204 ML-DSA-65.  Hedged signing: each signature draws a
               fresh 32-byte `rnd`, so signing needs entropy.
  dilithium3   Round-3 CRYSTALS-Dilithium3, byte-compatible with CIRCL's
               dilithium/mode3 (pk 1952 / sk 4000 / sig 3293).
               Deterministic signing.

Both share k=6, l=5, eta=4, gamma1=2^19, omega=55, so the packed blocks are

  t1 poly  320 B (10-bit coefficients)     s1/s2 poly 128 B (eta=4, 4-bit)
  t0 poly  416 B (13-bit coefficients)     z poly     640 B (20-bit)

and differ only in the size of `tr` and of the challenge seed `c_tilde`.

Private keys are unpacked into LatticePrivateKey before signing: the
secret vectors s1 and s2 are decoded and range-checked, and the backend
signs with the buffer re-packed from them.  Public keys carry no invalid
encodings (any 10-bit pattern is a t1 coefficient), so past the length
check they go to the backend as-is and it decodes them itself.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass

from dilithium_py.dilithium import Dilithium3
from dilithium_py.ml_dsa import ML_DSA_65

from sigcrypto.codec import PRIVATE_KEY
from sigcrypto.errors import MalformedKey
from sigcrypto.schemes import ByteLayout, EntropySource, SchemeDescriptor, Segment, SignatureScheme

log = logging.getLogger(__name__)

K = 6
L = 5
SEED_SIZE   = 32
T1_POLY     = 320
ETA_POLY    = 128
T0_POLY     = 416
Z_POLY      = 640
OMEGA       = 55
ETA         = 4


def _lattice_descriptor(
    name: str,
    tr_size: int,
    c_tilde_size: int,
    randomized_signing: bool,
) -> SchemeDescriptor:
    public_layout = ByteLayout((
        Segment("rho", SEED_SIZE),
        Segment("t1",  T1_POLY, K),
    ))
    private_layout = ByteLayout((
        Segment("rho", SEED_SIZE),
        Segment("key", SEED_SIZE),
        Segment("tr",  tr_size),
        Segment("s1",  ETA_POLY, L),
        Segment("s2",  ETA_POLY, K),
        Segment("t0",  T0_POLY, K),
    ))
    signature_layout = ByteLayout((
        Segment("c_tilde", c_tilde_size),
        Segment("z",       Z_POLY, L),
        Segment("h",       OMEGA + K),
    ))
    return SchemeDescriptor(
        name                = name,
        public_key_size     = public_layout.size,
        private_key_size    = private_layout.size,
        signature_size      = signature_layout.size,
        requires_randomness = True,
        randomized_signing  = randomized_signing,
        public_key_layout   = public_layout,
        private_key_layout  = private_layout,
        signature_layout    = signature_layout,
        family              = "lattice",
    )


ML_DSA_65_DESCRIPTOR  = _lattice_descriptor("ml-dsa-65",  tr_size=64, c_tilde_size=48, randomized_signing=True)
DILITHIUM3_DESCRIPTOR = _lattice_descriptor("dilithium3", tr_size=32, c_tilde_size=32, randomized_signing=False)


# ── Structured private key ────────────────────────────────────────────────────

def _unpack_eta(poly: bytes) -> tuple[int, ...]:
    """
    Decode one s1/s2 polynomial: 256 coefficients, two per byte, low nibble
    first, each stored as eta - c.  Nibbles above 2*eta encode no valid
    coefficient.
    """
    coeffs = []
    for byte in poly:
        for nibble in (byte & 0x0F, byte >> 4):
            if nibble > 2 * ETA:
                raise MalformedKey(PRIVATE_KEY, f"secret coefficient outside [-{ETA}, {ETA}]")
            coeffs.append(ETA - nibble)
    return tuple(coeffs)


def _pack_eta(coeffs: tuple[int, ...]) -> bytes:
    return bytes((ETA - lo) | ((ETA - hi) << 4) for lo, hi in zip(coeffs[0::2], coeffs[1::2]))


@dataclass(frozen=True)
class LatticePrivateKey:
    """
    A private key split along the descriptor layout, with the short secret
    vectors s1 and s2 decoded to signed coefficients.  Decoding rejects keys
    whose secrets are out of range, which the backend would otherwise sign
    with silently.
    """

    descriptor: SchemeDescriptor
    rho:        bytes
    key:        bytes
    tr:         bytes
    s1:         tuple[tuple[int, ...], ...]
    s2:         tuple[tuple[int, ...], ...]
    t0:         tuple[bytes, ...]

    @classmethod
    def unpack(cls, descriptor: SchemeDescriptor, buf: bytes) -> "LatticePrivateKey":
        parts = descriptor.private_key_layout.unpack(buf)
        return cls(
            descriptor,
            rho=parts["rho"],  # type: ignore[arg-type]
            key=parts["key"],  # type: ignore[arg-type]
            tr=parts["tr"],  # type: ignore[arg-type]
            s1=tuple(_unpack_eta(p) for p in parts["s1"]),
            s2=tuple(_unpack_eta(p) for p in parts["s2"]),
            t0=parts["t0"],  # type: ignore[arg-type]
        )

    def pack(self) -> bytes:
        return self.descriptor.private_key_layout.pack({
            "rho": self.rho,
            "key": self.key,
            "tr":  self.tr,
            "s1":  tuple(_pack_eta(p) for p in self.s1),
            "s2":  tuple(_pack_eta(p) for p in self.s2),
            "t0":  self.t0,
        })

    def __repr__(self) -> str:
        return f"LatticePrivateKey({self.descriptor.name}, rho={self.rho.hex()[:16]}…)"


# ── Scheme ────────────────────────────────────────────────────────────────────

class LatticeScheme(SignatureScheme):
    """
    Adapter over a dilithium-py parameter-set instance.

    The shared module-level backend instances are never mutated: when a call
    needs caller-supplied entropy, a shallow copy gets its own random_bytes.
    """

    def __init__(self, descriptor: SchemeDescriptor, backend) -> None:
        self.descriptor = descriptor
        self._backend   = backend

    def _with_entropy(self, entropy: EntropySource | None):
        if entropy is None:
            return self._backend
        backend = copy.copy(self._backend)
        backend.random_bytes = entropy
        return backend

    def _keypair(self, entropy: EntropySource) -> tuple[bytes, bytes]:
        pk, sk = self._with_entropy(entropy).keygen()
        return pk, sk

    def _sign(self, private_key: bytes, message: bytes, entropy: EntropySource | None) -> bytes:
        sk = LatticePrivateKey.unpack(self.descriptor, private_key)
        return self._with_entropy(entropy).sign(sk.pack(), message)

    def _verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        try:
            return bool(self._backend.verify(public_key, message, signature))
        except (ValueError, IndexError) as exc:
            # Correctly sized but undecodable (e.g. a malformed hint vector)
            log.debug("%s: rejecting undecodable signature: %s", self.descriptor.name, exc)
            return False


def ml_dsa_65() -> LatticeScheme:
    return LatticeScheme(ML_DSA_65_DESCRIPTOR, ML_DSA_65)


def dilithium3() -> LatticeScheme:
    return LatticeScheme(DILITHIUM3_DESCRIPTOR, Dilithium3)
