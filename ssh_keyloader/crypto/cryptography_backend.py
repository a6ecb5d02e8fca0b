"""
Key backend implementation using the cryptography library.

PEM armor (RSA, DSA, EC) goes through `load_pem_private_key`, the OpenSSH
container through `load_ssh_private_key`. Encrypted OpenSSH containers need
the bcrypt package at runtime.
"""

import hashlib
from collections.abc import Callable
from functools import cached_property
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed25519, rsa

from ssh_keyloader.crypto.secure_bytes import SecureBytes
from ssh_keyloader.crypto.wire import build_public_key_blob
from ssh_keyloader.exceptions import DecryptionFailedError, UnsupportedKeyTypeError
from ssh_keyloader.models.keys import (
    DsaPublicParams,
    EcdsaPublicParams,
    Ed25519PublicParams,
    KeyFormat,
    KeyType,
    PublicKeyParams,
    RsaPublicParams,
    SshKey,
)

_CURVES: dict[str, type[ec.EllipticCurve]] = {
    "nistp256": ec.SECP256R1,
    "nistp384": ec.SECP384R1,
    "nistp521": ec.SECP521R1,
}
_SSH_CURVE_NAMES = {curve.name: ssh_name for ssh_name, curve in _CURVES.items()}


def _probe(generate: Callable[[], Any]) -> bool:
    try:
        generate()
    except UnsupportedAlgorithm:
        return False
    return True


class CryptographyBackend:
    """
    Key backend implementation using cryptography.

    Example:
        backend = CryptographyBackend()
        key = backend.load_private_key(pem_bytes, passphrase, KeyFormat.RSA)
    """

    def supports(self, key_type: KeyType) -> bool:
        return key_type in self._supported_types

    def new_empty_key(self, key_type: KeyType) -> SshKey:
        if not self.supports(key_type):
            raise UnsupportedKeyTypeError(key_type.value)
        return SshKey(key_type=key_type)

    def load_private_key(
        self,
        data: bytes,
        passphrase: SecureBytes,
        key_format: KeyFormat,
    ) -> SshKey:
        """
        Decode a private key.

        Args:
            data: Armored key material.
            passphrase: Passphrase to try. Ignored for unencrypted material.
            key_format: Armor detected from the marker lines.

        Returns:
            SshKey wrapping the cryptography private key.

        Raises:
            DecryptionFailedError: If decoding fails or the key does not
                match its armor.
            UnsupportedKeyTypeError: If the container holds an algorithm
                this backend does not support.
        """
        if key_format is KeyFormat.UNRECOGNIZED:
            msg = "Cannot decode key material without a recognized armor"
            raise DecryptionFailedError(msg)

        try:
            private_key = self._deserialize(data, passphrase, key_format)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            msg = f"Failed to load {key_format.value} private key: {e}"
            raise DecryptionFailedError(msg) from e

        key_type = self._key_type_of(private_key)
        expected = key_format.key_type
        if expected is not None and key_type is not expected:
            msg = f"{key_format.value} armor holds a {key_type.value} key"
            raise DecryptionFailedError(msg)
        if not self.supports(key_type):
            raise UnsupportedKeyTypeError(key_type.value)

        params = self._public_params(private_key.public_key())
        return SshKey(
            key_type=key_type,
            key=private_key,
            is_private=True,
            wire_tag=params.wire_tag,
            public_blob=build_public_key_blob(params),
        )

    def load_public_key(self, params: PublicKeyParams) -> SshKey:
        """
        Build a public key from wire parameters.

        Raises:
            UnsupportedKeyTypeError: If the algorithm is not supported.
            ValueError: If the parameters do not describe a valid key.
        """
        if not self.supports(params.key_type):
            raise UnsupportedKeyTypeError(params.key_type.value)

        match params:
            case RsaPublicParams(e=e, n=n):
                public_key: Any = rsa.RSAPublicNumbers(e, n).public_key()
            case DsaPublicParams(p=p, q=q, g=g, y=y):
                public_key = dsa.DSAPublicNumbers(y, dsa.DSAParameterNumbers(p, q, g)).public_key()
            case EcdsaPublicParams(curve=curve, point=point):
                public_key = ec.EllipticCurvePublicKey.from_encoded_point(_CURVES[curve](), point)
            case Ed25519PublicParams(key=raw):
                public_key = ed25519.Ed25519PublicKey.from_public_bytes(raw)
            case _:
                raise UnsupportedKeyTypeError(type(params).__name__)

        return SshKey(
            key_type=params.key_type,
            key=public_key,
            wire_tag=params.wire_tag,
            public_blob=build_public_key_blob(params),
        )

    @staticmethod
    def digest(data: bytes) -> bytes:
        return hashlib.sha256(data).digest()

    @cached_property
    def _supported_types(self) -> frozenset[KeyType]:
        supported = {KeyType.DH, KeyType.RSA, KeyType.DSA}
        if _probe(lambda: ec.generate_private_key(ec.SECP256R1())):
            supported.add(KeyType.ECDSA)
        if _probe(ed25519.Ed25519PrivateKey.generate):
            supported.add(KeyType.ED25519)
        return frozenset(supported)

    @staticmethod
    def _deserialize(data: bytes, passphrase: SecureBytes, key_format: KeyFormat) -> Any:
        if key_format is KeyFormat.OPENSSH:
            loader = serialization.load_ssh_private_key
        else:
            loader = serialization.load_pem_private_key

        password = bytes(passphrase) if passphrase else None
        try:
            return loader(data, password=password)
        except TypeError:
            if password is None:
                raise
            # A passphrase was given for material that is not encrypted.
            return loader(data, password=None)

    @staticmethod
    def _key_type_of(private_key: Any) -> KeyType:
        match private_key:
            case rsa.RSAPrivateKey():
                return KeyType.RSA
            case dsa.DSAPrivateKey():
                return KeyType.DSA
            case ec.EllipticCurvePrivateKey():
                return KeyType.ECDSA
            case ed25519.Ed25519PrivateKey():
                return KeyType.ED25519
            case _:
                raise UnsupportedKeyTypeError(type(private_key).__name__)

    @staticmethod
    def _public_params(public_key: Any) -> PublicKeyParams:
        match public_key:
            case rsa.RSAPublicKey():
                numbers = public_key.public_numbers()
                return RsaPublicParams(e=numbers.e, n=numbers.n)
            case dsa.DSAPublicKey():
                numbers = public_key.public_numbers()
                group = numbers.parameter_numbers
                return DsaPublicParams(p=group.p, q=group.q, g=group.g, y=numbers.y)
            case ec.EllipticCurvePublicKey():
                curve = _SSH_CURVE_NAMES.get(public_key.curve.name)
                if curve is None:
                    raise UnsupportedKeyTypeError(public_key.curve.name)
                point = public_key.public_bytes(
                    serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
                )
                return EcdsaPublicParams(curve=curve, point=point)
            case ed25519.Ed25519PublicKey():
                raw = public_key.public_bytes(
                    serialization.Encoding.Raw, serialization.PublicFormat.Raw
                )
                return Ed25519PublicParams(key=raw)
            case _:
                raise UnsupportedKeyTypeError(type(public_key).__name__)
