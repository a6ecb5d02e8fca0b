"""
Key domain models.
"""

import base64
import hashlib
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar

_ENCRYPTED_TOKEN = b"ENCRYPTED"


class KeyType(StrEnum):
    """SSH names of the supported key algorithms."""

    DH = "dh"
    RSA = "rsa"
    DSA = "dsa"
    ECDSA = "ecdsa"
    ED25519 = "ed25519"


class KeyFormat(StrEnum):
    """Armor styles a private key file can be written in."""

    DSA = "DSA"
    RSA = "RSA"
    EC = "EC"
    OPENSSH = "OPENSSH"
    UNRECOGNIZED = "UNRECOGNIZED"

    @property
    def marker(self) -> str:
        """Header line that identifies this armor."""
        if self is KeyFormat.UNRECOGNIZED:
            return ""
        return f"-----BEGIN {self.value} PRIVATE KEY-----"

    @property
    def key_type(self) -> KeyType | None:
        """Algorithm the armor implies, or None for containers of any algorithm."""
        match self:
            case KeyFormat.DSA:
                return KeyType.DSA
            case KeyFormat.RSA:
                return KeyType.RSA
            case KeyFormat.EC:
                return KeyType.ECDSA
            case _:
                return None


@dataclass(frozen=True, kw_only=True)
class RawKeyMaterial:
    """
    Serialized private key bytes with their detected armor.

    Attributes:
        data: Raw file content.
        filename: Origin of the data, used for diagnostics only.
        key_format: Armor detected from the marker lines.
    """

    data: bytes = field(repr=False)
    filename: str = ""
    key_format: KeyFormat = KeyFormat.UNRECOGNIZED

    @property
    def is_encrypted(self) -> bool:
        """True if the literal token ENCRYPTED appears anywhere in the data."""
        return _ENCRYPTED_TOKEN in self.data


@dataclass(frozen=True, kw_only=True)
class PromptContext:
    """Context handed to a prompter when a passphrase is needed."""

    purpose: str
    filename: str
    fingerprint: bytes


@dataclass(frozen=True, kw_only=True)
class RsaPublicParams:
    key_type: ClassVar[KeyType] = KeyType.RSA

    e: int
    n: int

    @property
    def wire_tag(self) -> str:
        return "ssh-rsa"


@dataclass(frozen=True, kw_only=True)
class DsaPublicParams:
    key_type: ClassVar[KeyType] = KeyType.DSA

    p: int
    q: int
    g: int
    y: int

    @property
    def wire_tag(self) -> str:
        return "ssh-dss"


@dataclass(frozen=True, kw_only=True)
class EcdsaPublicParams:
    key_type: ClassVar[KeyType] = KeyType.ECDSA

    curve: str  # e.g. "nistp256"
    point: bytes

    @property
    def wire_tag(self) -> str:
        return f"ecdsa-sha2-{self.curve}"


@dataclass(frozen=True, kw_only=True)
class Ed25519PublicParams:
    key_type: ClassVar[KeyType] = KeyType.ED25519

    key: bytes

    @property
    def wire_tag(self) -> str:
        return "ssh-ed25519"


PublicKeyParams = RsaPublicParams | DsaPublicParams | EcdsaPublicParams | Ed25519PublicParams


@dataclass(frozen=True, kw_only=True, eq=False)
class SshKey:
    """
    A key produced by the crypto backend.

    The wrapped key object is opaque to this library; equality compares the
    algorithm and public wire blob, never object identity.

    Attributes:
        key_type: Algorithm of the key.
        key: Backend key object, or None for an empty key.
        is_private: Whether `key` holds private material.
        wire_tag: SSH algorithm name used on the wire (e.g. "ssh-rsa").
        public_blob: Wire encoding of the public half.
        comment: Trailing comment from an authorized-keys line.
    """

    key_type: KeyType
    key: Any = field(default=None, repr=False)
    is_private: bool = False
    wire_tag: str = ""
    public_blob: bytes = field(default=b"", repr=False)
    comment: str = ""

    @property
    def is_empty(self) -> bool:
        return self.key is None

    @property
    def fingerprint(self) -> str:
        """OpenSSH-style SHA256 fingerprint of the public blob."""
        digest = hashlib.sha256(self.public_blob).digest()
        return "SHA256:" + base64.b64encode(digest).decode("ascii").rstrip("=")

    def public_line(self) -> str:
        """Render the key as an authorized-keys line."""
        if not self.public_blob:
            msg = f"{self.key_type} key has no public wire encoding"
            raise ValueError(msg)
        encoded = base64.b64encode(self.public_blob).decode("ascii")
        line = f"{self.wire_tag} {encoded}"
        return f"{line} {self.comment}" if self.comment else line

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SshKey):
            return NotImplemented
        return (self.key_type, self.is_private, self.public_blob) == (
            other.key_type,
            other.is_private,
            other.public_blob,
        )

    def __hash__(self) -> int:
        return hash((self.key_type, self.is_private, self.public_blob))
