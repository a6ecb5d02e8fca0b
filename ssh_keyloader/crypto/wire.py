"""
SSH wire format (RFC 4251 section 5) for public key blobs.

A public key blob is a sequence of length-prefixed fields: the algorithm
name followed by algorithm-specific parameters.

    ssh-rsa:            string "ssh-rsa", mpint e, mpint n
    ssh-dss:            string "ssh-dss", mpint p, mpint q, mpint g, mpint y
    ecdsa-sha2-<curve>: string tag, string curve, string Q
    ssh-ed25519:        string "ssh-ed25519", string key (32 bytes)
"""

from ssh_keyloader.exceptions import MalformedWireDataError
from ssh_keyloader.models.keys import (
    DsaPublicParams,
    EcdsaPublicParams,
    Ed25519PublicParams,
    PublicKeyParams,
    RsaPublicParams,
)

_UINT32_SIZE = 4
_ED25519_KEY_SIZE = 32
_ECDSA_TAG_PREFIX = "ecdsa-sha2-"

SUPPORTED_CURVES = ("nistp256", "nistp384", "nistp521")


class WireReader:
    """Sequential reader over a wire-format byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read_uint32(self) -> int:
        if self.remaining < _UINT32_SIZE:
            msg = f"truncated length field at offset {self._offset}"
            raise MalformedWireDataError(reason=msg)
        value = int.from_bytes(self._data[self._offset : self._offset + _UINT32_SIZE], "big")
        self._offset += _UINT32_SIZE
        return value

    def read_string(self) -> bytes:
        length = self.read_uint32()
        if length > self.remaining:
            msg = f"field claims {length} bytes, only {self.remaining} left"
            raise MalformedWireDataError(reason=msg)
        value = self._data[self._offset : self._offset + length]
        self._offset += length
        return value

    def read_text(self) -> str:
        raw = self.read_string()
        try:
            return raw.decode("ascii")
        except UnicodeDecodeError:
            msg = "non-ASCII name field"
            raise MalformedWireDataError(reason=msg) from None

    def read_mpint(self) -> int:
        value = int.from_bytes(self.read_string(), "big", signed=True)
        if value < 0:
            msg = "negative integer in key parameters"
            raise MalformedWireDataError(reason=msg)
        return value

    def expect_end(self) -> None:
        if self.remaining:
            msg = f"{self.remaining} trailing bytes after key"
            raise MalformedWireDataError(reason=msg)


class WireWriter:
    """Accumulates wire-format fields."""

    def __init__(self) -> None:
        self._chunks: list[bytes] = []

    def write_uint32(self, value: int) -> None:
        self._chunks.append(value.to_bytes(_UINT32_SIZE, "big"))

    def write_string(self, value: bytes | str) -> None:
        if isinstance(value, str):
            value = value.encode("ascii")
        self.write_uint32(len(value))
        self._chunks.append(value)

    def write_mpint(self, value: int) -> None:
        if value < 0:
            msg = "negative mpint not supported"
            raise ValueError(msg)
        if value == 0:
            self.write_string(b"")
            return
        # Extra byte keeps the sign bit clear.
        self.write_string(value.to_bytes((value.bit_length() + 8) // 8, "big"))

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)


def read_public_key_params(blob: bytes) -> PublicKeyParams:
    """
    Decode a public key blob.

    Args:
        blob: Base64-decoded key blob.

    Returns:
        Parameters of the key, tagged by algorithm.

    Raises:
        MalformedWireDataError: If the blob is truncated, has trailing data,
            or names an unknown algorithm.
    """
    reader = WireReader(blob)
    wire_tag = reader.read_text()
    params = _read_params(wire_tag, reader)
    reader.expect_end()
    return params


def build_public_key_blob(params: PublicKeyParams) -> bytes:
    """Encode public key parameters as a wire-format blob."""
    writer = WireWriter()
    writer.write_string(params.wire_tag)
    match params:
        case RsaPublicParams(e=e, n=n):
            writer.write_mpint(e)
            writer.write_mpint(n)
        case DsaPublicParams(p=p, q=q, g=g, y=y):
            for value in (p, q, g, y):
                writer.write_mpint(value)
        case EcdsaPublicParams(curve=curve, point=point):
            writer.write_string(curve)
            writer.write_string(point)
        case Ed25519PublicParams(key=key):
            writer.write_string(key)
    return writer.getvalue()


def _read_params(wire_tag: str, reader: WireReader) -> PublicKeyParams:
    match wire_tag:
        case "ssh-rsa":
            e = reader.read_mpint()
            n = reader.read_mpint()
            return RsaPublicParams(e=e, n=n)
        case "ssh-dss":
            p = reader.read_mpint()
            q = reader.read_mpint()
            g = reader.read_mpint()
            y = reader.read_mpint()
            return DsaPublicParams(p=p, q=q, g=g, y=y)
        case "ssh-ed25519":
            return Ed25519PublicParams(key=_read_ed25519_key(reader))
        case _ if wire_tag.startswith(_ECDSA_TAG_PREFIX):
            return _read_ecdsa_params(wire_tag.removeprefix(_ECDSA_TAG_PREFIX), reader)
        case _:
            msg = f"unknown key algorithm {wire_tag!r}"
            raise MalformedWireDataError(reason=msg)


def _read_ed25519_key(reader: WireReader) -> bytes:
    key = reader.read_string()
    if len(key) != _ED25519_KEY_SIZE:
        msg = f"ed25519 key must be {_ED25519_KEY_SIZE} bytes, got {len(key)}"
        raise MalformedWireDataError(reason=msg)
    return key


def _read_ecdsa_params(curve: str, reader: WireReader) -> EcdsaPublicParams:
    if curve not in SUPPORTED_CURVES:
        msg = f"unknown curve {curve!r}"
        raise MalformedWireDataError(reason=msg)
    identifier = reader.read_text()
    if identifier != curve:
        msg = f"curve {identifier!r} does not match key type {curve!r}"
        raise MalformedWireDataError(reason=msg)
    return EcdsaPublicParams(curve=curve, point=reader.read_string())
