"""
KeyPair, the unit of key custody.

A KeyPair is produced only by a scheme's generate() call and is immutable
afterwards, so both halves always come from the same generation.  It is
never persisted; the private half never leaves the process and is kept out
of repr() so it cannot end up in a log line by accident.

Encoding: raw fixed-size bytes in memory, lowercase hex on the wire.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field


@dataclass(frozen=True)
class KeyPair:
    scheme:      str
    public_key:  bytes
    private_key: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not self.public_key or not self.private_key:
            raise ValueError("KeyPair requires both a public and a private key")

    # ── Key export ───────────────────────────────────────────────────────────

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()

    @property
    def fingerprint(self) -> str:
        """Short SHA-256 fingerprint of the public key, safe to log."""
        return hashlib.sha256(self.public_key).hexdigest()[:16]
