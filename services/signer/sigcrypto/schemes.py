"""
Signature-scheme contract.

A scheme is described by an immutable SchemeDescriptor (exact sizes and the
byte layout of its flat key/signature formats) and implemented as a
SignatureScheme subclass providing the capability set

    generate(random_source) -> KeyPair
    sign(private_key, message, random_source) -> signature
    verify(public_key, message, signature) -> bool

The public methods on SignatureScheme do the length gating and entropy
accounting; subclasses only implement the _keypair / _sign / _verify hooks
and can assume every buffer they receive has the exact descriptor size.

Layouts:
    A ByteLayout is an ordered list of Segments.  A segment may repeat
    (`count` > 1) for vectors of fixed-size blocks such as packed
    polynomials; unpacking yields a tuple of blocks for those.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Union

from sigcrypto.codec import PRIVATE_KEY, PUBLIC_KEY, SIGNATURE, validate_length
from sigcrypto.errors import RandomnessExhausted
from sigcrypto.keys import KeyPair

# os.urandom-compatible: takes a byte count, returns that many bytes
RandomSource = Callable[[int], bytes]

Unpacked = dict[str, Union[bytes, tuple[bytes, ...]]]


# ── Byte layouts ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Segment:
    name:  str
    size:  int
    count: int = 1

    @property
    def total(self) -> int:
        return self.size * self.count


@dataclass(frozen=True)
class ByteLayout:
    segments: tuple[Segment, ...]

    @property
    def size(self) -> int:
        return sum(s.total for s in self.segments)

    def unpack(self, buf: bytes) -> Unpacked:
        """
        Split a flat buffer into named segments.

        The buffer must already have been length-checked by the codec; a
        mismatch here is a programming error, not a client error.
        """
        if len(buf) != self.size:
            raise ValueError(f"layout expects {self.size} bytes, got {len(buf)}")
        out: Unpacked = {}
        offset = 0
        for seg in self.segments:
            if seg.count == 1:
                out[seg.name] = bytes(buf[offset: offset + seg.size])
            else:
                out[seg.name] = tuple(
                    bytes(buf[offset + i * seg.size: offset + (i + 1) * seg.size])
                    for i in range(seg.count)
                )
            offset += seg.total
        return out

    def pack(self, parts: Unpacked) -> bytes:
        chunks: list[bytes] = []
        for seg in self.segments:
            value = parts[seg.name]
            blocks = (value,) if seg.count == 1 else value
            if len(blocks) != seg.count or any(len(b) != seg.size for b in blocks):
                raise ValueError(f"segment {seg.name!r} does not match layout")
            chunks.extend(blocks)  # type: ignore[arg-type]
        return b"".join(chunks)


# ── Descriptor ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SchemeDescriptor:
    name:                str
    public_key_size:     int
    private_key_size:    int
    signature_size:      int
    requires_randomness: bool          # key generation draws entropy
    randomized_signing:  bool          # signing draws entropy too
    public_key_layout:   ByteLayout
    private_key_layout:  ByteLayout
    signature_layout:    ByteLayout
    family:              str = "classical"

    def __post_init__(self) -> None:
        for label, layout, size in (
            ("public key",  self.public_key_layout,  self.public_key_size),
            ("private key", self.private_key_layout, self.private_key_size),
            ("signature",   self.signature_layout,   self.signature_size),
        ):
            if layout.size != size:
                raise ValueError(
                    f"{self.name}: {label} layout covers {layout.size} bytes, expected {size}"
                )

    def to_dict(self) -> dict:
        return {
            "name":               self.name,
            "family":             self.family,
            "publicKeySize":      self.public_key_size,
            "privateKeySize":     self.private_key_size,
            "signatureSize":      self.signature_size,
            "requiresRandomness": self.requires_randomness,
            "randomizedSigning":  self.randomized_signing,
        }


# ── Entropy ───────────────────────────────────────────────────────────────────

class EntropySource:
    """Wraps a RandomSource so starvation surfaces as RandomnessExhausted."""

    def __init__(self, source: RandomSource | None = None) -> None:
        self._source = source or os.urandom
        self.drawn = 0

    def __call__(self, n: int) -> bytes:
        try:
            data = self._source(n)
        except OSError as exc:
            raise RandomnessExhausted(f"random source failed: {exc.strerror or exc}") from None
        if not isinstance(data, (bytes, bytearray)) or len(data) != n:
            got = len(data) if isinstance(data, (bytes, bytearray)) else 0
            raise RandomnessExhausted(f"random source returned {got} of {n} requested bytes")
        self.drawn += n
        return bytes(data)


# ── Capability base ───────────────────────────────────────────────────────────

class SignatureScheme:
    descriptor: SchemeDescriptor

    @property
    def name(self) -> str:
        return self.descriptor.name

    def generate(self, random_source: RandomSource | None = None) -> KeyPair:
        d = self.descriptor
        public_key, private_key = self._keypair(EntropySource(random_source))
        validate_length(public_key, d.public_key_size, PUBLIC_KEY)
        validate_length(private_key, d.private_key_size, PRIVATE_KEY)
        return KeyPair(scheme=d.name, public_key=public_key, private_key=private_key)

    def sign(
        self,
        private_key: bytes,
        message: bytes,
        random_source: RandomSource | None = None,
    ) -> bytes:
        d = self.descriptor
        validate_length(private_key, d.private_key_size, PRIVATE_KEY)
        entropy = EntropySource(random_source) if d.randomized_signing else None
        return self._sign(bytes(private_key), bytes(message), entropy)

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        d = self.descriptor
        validate_length(public_key, d.public_key_size, PUBLIC_KEY)
        validate_length(signature, d.signature_size, SIGNATURE)
        return self._verify(bytes(public_key), bytes(message), bytes(signature))

    # ── Hooks ─────────────────────────────────────────────────────────────────

    def _keypair(self, entropy: EntropySource) -> tuple[bytes, bytes]:
        """Return (public_key, private_key) as flat buffers."""
        raise NotImplementedError

    def _sign(self, private_key: bytes, message: bytes, entropy: EntropySource | None) -> bytes:
        raise NotImplementedError

    def _verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.descriptor.name}>"
