import os
import sys
import hashlib

import pytest
from fastapi.testclient import TestClient

# Add the service directory to the Python path so `main`, `keyslot` and
# `sigcrypto` import the same way they do inside the container.
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "services", "signer"))
)

from main import create_app  # noqa: E402
from settings import Settings  # noqa: E402
from sigcrypto.engine import get_scheme  # noqa: E402

ALL_SCHEMES = ["ed25519", "ml-dsa-65", "dilithium3"]


class SeededSource:
    """Deterministic RandomSource: SHA-256 counter stream over a seed."""

    def __init__(self, seed: bytes = b"seed") -> None:
        self._seed = seed
        self._counter = 0
        self.requests = []

    def __call__(self, n: int) -> bytes:
        self.requests.append(n)
        out = b""
        while len(out) < n:
            out += hashlib.sha256(self._seed + self._counter.to_bytes(8, "big")).digest()
            self._counter += 1
        return out[:n]


class ShortSource:
    """Returns fewer bytes than asked for."""

    def __call__(self, n: int) -> bytes:
        return b"\x00" * (n // 2)


class FailingSource:
    def __call__(self, n: int) -> bytes:
        raise OSError(11, "entropy pool drained")


@pytest.fixture(params=ALL_SCHEMES)
def scheme(request):
    return get_scheme(request.param)


@pytest.fixture(scope="session")
def keypairs():
    """One keypair per scheme, shared across tests (lattice keygen is slow)."""
    return {name: get_scheme(name).generate() for name in ALL_SCHEMES}


@pytest.fixture
def make_client():
    def _make(random_source=None, **overrides) -> TestClient:
        settings = Settings(**overrides)
        return TestClient(create_app(settings, random_source))

    return _make


@pytest.fixture
def client(make_client):
    return make_client(scheme="ed25519")
