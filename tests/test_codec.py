import pytest

from sigcrypto import codec
from sigcrypto.engine import get_scheme
from sigcrypto.errors import InvalidKeyLength, InvalidSignatureLength, MalformedEncoding


def test_encode_hex_is_lowercase():
    assert codec.encode_hex(b"\xde\xad\xbe\xef") == "deadbeef"
    assert codec.encode_hex(b"") == ""


def test_decode_hex_accepts_either_case():
    assert codec.decode_hex("DEADbeef") == b"\xde\xad\xbe\xef"


def test_decode_hex_empty_string():
    assert codec.decode_hex("") == b""


@pytest.mark.parametrize(
    "text",
    ["zz", "abc", "0xdeadbeef", "de ad", "dead\n", "déad", "g0"],
)
def test_decode_hex_rejects_malformed(text):
    with pytest.raises(MalformedEncoding) as excinfo:
        codec.decode_hex(text, codec.SIGNATURE)
    assert excinfo.value.field == codec.SIGNATURE
    assert excinfo.value.code == "MalformedEncoding"


def test_decode_hex_rejects_non_string():
    with pytest.raises(MalformedEncoding):
        codec.decode_hex(b"abcd")  # type: ignore[arg-type]


def test_validate_length_passes_exact_size():
    codec.validate_length(b"\x00" * 32, 32, codec.PUBLIC_KEY)


def test_validate_length_names_key_field():
    with pytest.raises(InvalidKeyLength) as excinfo:
        codec.validate_length(b"\x00" * 31, 32, codec.PUBLIC_KEY)
    err = excinfo.value
    assert err.field == codec.PUBLIC_KEY
    assert (err.expected, err.actual) == (32, 31)
    assert "publicKey" in err.detail


def test_validate_length_signature_field_raises_signature_error():
    with pytest.raises(InvalidSignatureLength) as excinfo:
        codec.validate_length(b"", 64, codec.SIGNATURE)
    assert excinfo.value.actual == 0


def test_decode_public_key_checks_descriptor_size():
    descriptor = get_scheme("ed25519").descriptor
    assert codec.decode_public_key("11" * 32, descriptor) == b"\x11" * 32
    with pytest.raises(InvalidKeyLength):
        codec.decode_public_key("11" * 33, descriptor)


def test_decode_signature_checks_descriptor_size():
    descriptor = get_scheme("ml-dsa-65").descriptor
    assert len(codec.decode_signature("00" * 3309, descriptor)) == 3309
    with pytest.raises(InvalidSignatureLength):
        codec.decode_signature("00" * 64, descriptor)


def test_decode_private_key_checks_descriptor_size():
    descriptor = get_scheme("dilithium3").descriptor
    with pytest.raises(InvalidKeyLength) as excinfo:
        codec.decode_private_key("00" * 4032, descriptor)
    assert excinfo.value.field == codec.PRIVATE_KEY


def test_malformed_encoding_wins_over_length():
    descriptor = get_scheme("ed25519").descriptor
    with pytest.raises(MalformedEncoding):
        codec.decode_signature("zz", descriptor)
