import pytest

from ssh_keyloader.crypto.wire import (
    WireReader,
    WireWriter,
    build_public_key_blob,
    read_public_key_params,
)
from ssh_keyloader.exceptions import MalformedWireDataError
from ssh_keyloader.models.keys import (
    DsaPublicParams,
    EcdsaPublicParams,
    Ed25519PublicParams,
    RsaPublicParams,
)


def _string(value: bytes) -> bytes:
    return len(value).to_bytes(4, "big") + value


def test_read_uint32_and_string() -> None:
    reader = WireReader(_string(b"ssh-rsa") + b"\x00\x00\x00\x01")

    assert reader.read_string() == b"ssh-rsa"
    assert reader.read_uint32() == 1
    assert reader.remaining == 0


def test_read_uint32_raises_on_truncated_length() -> None:
    with pytest.raises(MalformedWireDataError, match="truncated length"):
        WireReader(b"\x00\x00").read_uint32()


def test_read_string_raises_when_length_exceeds_data() -> None:
    with pytest.raises(MalformedWireDataError, match="claims 16 bytes"):
        WireReader(b"\x00\x00\x00\x10abc").read_string()


def test_read_mpint_rejects_negative_values() -> None:
    with pytest.raises(MalformedWireDataError, match="negative"):
        WireReader(_string(b"\xff")).read_mpint()


def test_read_mpint_strips_sign_byte() -> None:
    assert WireReader(_string(b"\x00\x80")).read_mpint() == 0x80


def test_read_text_rejects_non_ascii() -> None:
    with pytest.raises(MalformedWireDataError, match="non-ASCII"):
        WireReader(_string(b"\xc3\xa9")).read_text()


def test_write_mpint_encodings() -> None:
    writer = WireWriter()
    writer.write_mpint(0)
    writer.write_mpint(0x7F)
    writer.write_mpint(0x80)

    assert writer.getvalue() == (
        b"\x00\x00\x00\x00" + b"\x00\x00\x00\x01\x7f" + b"\x00\x00\x00\x02\x00\x80"
    )


def test_write_mpint_rejects_negative() -> None:
    with pytest.raises(ValueError, match="negative"):
        WireWriter().write_mpint(-1)


def test_read_public_key_params_rsa() -> None:
    blob = _string(b"ssh-rsa") + _string(b"\x01\x00\x01") + _string(b"\x00\xc3\x01")

    params = read_public_key_params(blob)

    assert params == RsaPublicParams(e=65537, n=0xC301)


def test_read_public_key_params_dsa() -> None:
    blob = _string(b"ssh-dss") + b"".join(_string(bytes([value])) for value in (23, 11, 4, 8))

    assert read_public_key_params(blob) == DsaPublicParams(p=23, q=11, g=4, y=8)


def test_read_public_key_params_ed25519() -> None:
    blob = _string(b"ssh-ed25519") + _string(bytes(32))

    assert read_public_key_params(blob) == Ed25519PublicParams(key=bytes(32))


def test_read_public_key_params_ed25519_wrong_size() -> None:
    blob = _string(b"ssh-ed25519") + _string(bytes(31))

    with pytest.raises(MalformedWireDataError, match="32 bytes"):
        read_public_key_params(blob)


def test_read_public_key_params_ecdsa() -> None:
    blob = _string(b"ecdsa-sha2-nistp256") + _string(b"nistp256") + _string(b"\x04point")

    assert read_public_key_params(blob) == EcdsaPublicParams(curve="nistp256", point=b"\x04point")


def test_read_public_key_params_ecdsa_curve_mismatch() -> None:
    blob = _string(b"ecdsa-sha2-nistp256") + _string(b"nistp384") + _string(b"\x04")

    with pytest.raises(MalformedWireDataError, match="does not match"):
        read_public_key_params(blob)


def test_read_public_key_params_unknown_curve() -> None:
    blob = _string(b"ecdsa-sha2-nistp192") + _string(b"nistp192") + _string(b"\x04")

    with pytest.raises(MalformedWireDataError, match="unknown curve"):
        read_public_key_params(blob)


def test_read_public_key_params_unknown_algorithm() -> None:
    with pytest.raises(MalformedWireDataError, match="unknown key algorithm"):
        read_public_key_params(_string(b"ssh-foo") + _string(b"x"))


def test_read_public_key_params_rejects_trailing_bytes() -> None:
    blob = _string(b"ssh-ed25519") + _string(bytes(32)) + b"\x00"

    with pytest.raises(MalformedWireDataError, match="1 trailing bytes"):
        read_public_key_params(blob)


def test_read_public_key_params_rejects_truncated_blob() -> None:
    blob = _string(b"ssh-rsa") + _string(b"\x01\x00\x01") + b"\x00\x00\x01\x00\xc3"

    with pytest.raises(MalformedWireDataError):
        read_public_key_params(blob)


def test_build_public_key_blob_matches_reader() -> None:
    params = EcdsaPublicParams(curve="nistp521", point=b"\x04" + bytes(132))

    blob = build_public_key_blob(params)

    assert blob.startswith(_string(b"ecdsa-sha2-nistp521") + _string(b"nistp521"))
    assert read_public_key_params(blob) == params
