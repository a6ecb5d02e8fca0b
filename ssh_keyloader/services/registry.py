"""
Registry of key algorithms available at runtime.

The backend is asked once which algorithms it supports; the answer is frozen
into the registry so lookups never re-check library capabilities.
"""

from functools import cache
from typing import Self

import structlog

from ssh_keyloader.crypto.cryptography_backend import CryptographyBackend
from ssh_keyloader.crypto.protocol import KeyBackend
from ssh_keyloader.exceptions import UnsupportedKeyTypeError
from ssh_keyloader.models.keys import KeyType, SshKey

logger = structlog.get_logger(__name__)


class KeyTypeRegistry:
    """
    Maps SSH algorithm names to empty key constructors.

    Example:
        registry = KeyTypeRegistry.from_backend(CryptographyBackend())
        key = registry.get("rsa")
        assert key.is_empty
    """

    def __init__(self, backend: KeyBackend, supported: frozenset[KeyType]) -> None:
        self._backend = backend
        self._supported = supported

    @classmethod
    def from_backend(cls, backend: KeyBackend) -> Self:
        supported = frozenset(key_type for key_type in KeyType if backend.supports(key_type))
        logger.debug(
            "Key type registry built",
            supported=sorted(key_type.value for key_type in supported),
        )
        return cls(backend, supported)

    @property
    def backend(self) -> KeyBackend:
        return self._backend

    @property
    def supported_types(self) -> frozenset[KeyType]:
        return self._supported

    def supports(self, name: str | KeyType) -> bool:
        return self._lookup(name) is not None

    def get(self, name: str | KeyType) -> SshKey:
        """
        Construct a new, empty key of the named algorithm.

        Args:
            name: SSH name of the algorithm, e.g. "rsa".

        Returns:
            An empty SshKey.

        Raises:
            UnsupportedKeyTypeError: If the name is unknown or the backend
                lacks support for it.
        """
        key_type = self._lookup(name)
        if key_type is None:
            raise UnsupportedKeyTypeError(str(name))
        return self._backend.new_empty_key(key_type)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.supports(name)

    def _lookup(self, name: str | KeyType) -> KeyType | None:
        try:
            key_type = KeyType(name)
        except ValueError:
            return None
        return key_type if key_type in self._supported else None


@cache
def default_registry() -> KeyTypeRegistry:
    """Process-wide registry backed by CryptographyBackend."""
    return KeyTypeRegistry.from_backend(CryptographyBackend())
