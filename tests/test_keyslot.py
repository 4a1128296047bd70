import threading

import pytest

from conftest import FailingSource
from keyslot import KeySlot, SlotState
from sigcrypto.engine import get_engine
from sigcrypto.errors import NoKeyConfigured, RandomnessExhausted


@pytest.fixture
def slot():
    return KeySlot(get_engine("ed25519"))


def test_starts_without_key(slot):
    assert slot.state is SlotState.NO_KEY
    with pytest.raises(NoKeyConfigured):
        slot.snapshot()


def test_sign_before_generate(slot):
    with pytest.raises(NoKeyConfigured) as excinfo:
        slot.sign(b"hello")
    assert excinfo.value.code == "NoKeyConfigured"


def test_generate_then_sign(slot):
    kp = slot.generate()
    assert slot.state is SlotState.HAS_KEY
    result = slot.sign(b"hello")
    assert result.public_key == kp.public_key
    assert result.scheme == "ed25519"
    assert slot.verify(kp.public_key, b"hello", result.signature)
    assert not slot.verify(kp.public_key, b"hellO", result.signature)


def test_generate_replaces_previous_key(slot):
    first = slot.generate()
    second = slot.generate()
    assert first.public_key != second.public_key
    assert slot.snapshot() is second
    result = slot.sign(b"hello")
    assert not slot.verify(first.public_key, b"hello", result.signature)


def test_failed_generation_leaves_slot_untouched():
    slot = KeySlot(get_engine("ed25519"), random_source=FailingSource())
    with pytest.raises(RandomnessExhausted):
        slot.generate()
    assert slot.state is SlotState.NO_KEY


def test_verify_does_not_need_a_key(slot):
    other = KeySlot(get_engine("ed25519"))
    kp = other.generate()
    result = other.sign(b"hi")
    assert slot.state is SlotState.NO_KEY
    assert slot.verify(kp.public_key, b"hi", result.signature)


def test_keypair_repr_hides_private_key(slot):
    kp = slot.generate()
    assert kp.private_key.hex() not in repr(kp)
    assert "private_key" not in repr(kp)
    assert len(kp.fingerprint) == 16


def test_concurrent_generate_and_sign_see_consistent_keypairs(slot):
    slot.generate()
    errors = []
    results = []
    stop = threading.Event()

    def regenerate():
        while not stop.is_set():
            slot.generate()

    def signer(n):
        for i in range(50):
            message = f"msg-{n}-{i}".encode()
            results.append((message, slot.sign(message)))

    gen_threads = [threading.Thread(target=regenerate) for _ in range(2)]
    sign_threads = [threading.Thread(target=signer, args=(n,)) for n in range(4)]
    for t in gen_threads + sign_threads:
        t.start()
    for t in sign_threads:
        t.join()
    stop.set()
    for t in gen_threads:
        t.join()

    for message, result in results:
        if not slot.verify(result.public_key, message, result.signature):
            errors.append(message)

    assert len(results) == 200
    assert errors == []
