"""
The process-wide keypair slot.

A KeySlot is created by the FastAPI app at startup and handed to every
request handler; there is no module-level keypair.  It holds at most one
KeyPair and moves through two states:

    NO_KEY  ──generate()──▶  HAS_KEY  ──generate()──▶  HAS_KEY (replaced)

One lock guards reading and replacing the KeyPair reference.  Generation
and signing run outside the lock against an immutable snapshot, so every
operation sees a fully-old or fully-new keypair and never blocks on another
request's cryptography.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum

from sigcrypto.engine import SignatureEngine
from sigcrypto.errors import NoKeyConfigured
from sigcrypto.keys import KeyPair
from sigcrypto.schemes import RandomSource

log = logging.getLogger(__name__)


class SlotState(str, Enum):
    NO_KEY  = "NO_KEY"
    HAS_KEY = "HAS_KEY"


@dataclass(frozen=True)
class SignResult:
    signature:  bytes
    public_key: bytes    # public half of the keypair that produced `signature`
    scheme:     str


class KeySlot:
    def __init__(self, engine: SignatureEngine, random_source: RandomSource | None = None) -> None:
        self._engine        = engine
        self._random_source = random_source
        self._keypair: KeyPair | None = None
        self._lock = threading.Lock()

    @property
    def engine(self) -> SignatureEngine:
        return self._engine

    @property
    def state(self) -> SlotState:
        with self._lock:
            return SlotState.HAS_KEY if self._keypair is not None else SlotState.NO_KEY

    def snapshot(self) -> KeyPair:
        """Return the active KeyPair, or raise NoKeyConfigured."""
        with self._lock:
            keypair = self._keypair
        if keypair is None:
            raise NoKeyConfigured()
        return keypair

    # ── Operations ────────────────────────────────────────────────────────────

    def generate(self) -> KeyPair:
        """Generate a fresh keypair and install it, discarding any previous one."""
        keypair = self._engine.generate(self._random_source)
        with self._lock:
            replaced = self._keypair is not None
            self._keypair = keypair
        log.info(
            "%s keypair %s (fingerprint=%s)",
            keypair.scheme,
            "replaced" if replaced else "generated",
            keypair.fingerprint,
        )
        return keypair

    def sign(self, message: bytes) -> SignResult:
        keypair = self.snapshot()
        signature = self._engine.sign(keypair.private_key, message, self._random_source)
        return SignResult(signature=signature, public_key=keypair.public_key, scheme=keypair.scheme)

    def verify(
        self,
        public_key: bytes,
        message: bytes,
        signature: bytes,
        engine: SignatureEngine | None = None,
    ) -> bool:
        """Verify against a caller-supplied public key; the slot's own key is not consulted."""
        return (engine or self._engine).verify(public_key, message, signature)
