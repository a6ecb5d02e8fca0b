from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed25519, rsa

from ssh_keyloader.crypto.cryptography_backend import CryptographyBackend
from ssh_keyloader.services.registry import KeyTypeRegistry


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def dsa_key() -> dsa.DSAPrivateKey:
    return dsa.generate_private_key(key_size=1024)


@pytest.fixture(scope="session")
def ecdsa_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ed25519_key() -> ed25519.Ed25519PrivateKey:
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture
def make_pem() -> Callable[..., bytes]:
    """Serialize a key in traditional PEM armor (BEGIN RSA/DSA/EC PRIVATE KEY)."""

    def _make(key: Any, passphrase: bytes | None = None) -> bytes:
        return key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.TraditionalOpenSSL,
            _encryption(passphrase),
        )

    return _make


@pytest.fixture
def make_openssh() -> Callable[..., bytes]:
    """Serialize a key in OpenSSH armor (BEGIN OPENSSH PRIVATE KEY)."""

    def _make(key: Any, passphrase: bytes | None = None) -> bytes:
        return key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.OpenSSH,
            _encryption(passphrase),
        )

    return _make


@pytest.fixture
def make_public_line() -> Callable[..., str]:
    """Authorized-keys line for a private key, as written by cryptography."""

    def _make(key: Any, comment: str = "user@host") -> str:
        line = key.public_key().public_bytes(
            serialization.Encoding.OpenSSH, serialization.PublicFormat.OpenSSH
        )
        return f"{line.decode('ascii')} {comment}".rstrip()

    return _make


@pytest.fixture
def make_prompter() -> Callable[[list[str]], Mock]:
    """Prompter whose session answers with the given passphrases in order."""

    def _make(answers: list[str]) -> Mock:
        session = Mock()
        session.ask.side_effect = list(answers)
        prompter = Mock()
        prompter.start.return_value = session
        return prompter

    return _make


@pytest.fixture(scope="session")
def registry() -> KeyTypeRegistry:
    return KeyTypeRegistry.from_backend(CryptographyBackend())


def _encryption(passphrase: bytes | None) -> serialization.KeySerializationEncryption:
    if passphrase is None:
        return serialization.NoEncryption()
    return serialization.BestAvailableEncryption(passphrase)
