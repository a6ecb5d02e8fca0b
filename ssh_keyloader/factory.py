"""
Key factory facade.

This is the main entry point for users of the library. It ties the key type
registry, the private key loader and the public key parser together and adds
the file-reading wrappers around them.
"""

from pathlib import Path

import structlog

from ssh_keyloader.config import KeyLoaderConfig
from ssh_keyloader.crypto.protocol import Prompter
from ssh_keyloader.exceptions import KeyFileError, NotAPublicKeyError
from ssh_keyloader.models.keys import SshKey
from ssh_keyloader.services.private_key_loader import PrivateKeyLoader
from ssh_keyloader.services.public_key_parser import PublicKeyParser
from ssh_keyloader.services.registry import KeyTypeRegistry, default_registry

logger = structlog.get_logger(__name__)


class KeyFactory:
    """
    Obtains key objects by SSH name and loads public and private keys.

    Example:
        ```python
        factory = KeyFactory()

        empty = factory.get("rsa")
        key = factory.load_private_key("~/.ssh/id_ed25519")
        public = factory.load_public_key("~/.ssh/id_ed25519.pub")
        ```

    Args:
        registry: Supported algorithms and their backend. Uses the default
            cryptography-backed registry if not provided.
        config: Loader configuration. Uses defaults if not provided.
        prompter: Default passphrase prompter. Uses the terminal if not provided.
    """

    def __init__(
        self,
        registry: KeyTypeRegistry | None = None,
        config: KeyLoaderConfig | None = None,
        prompter: Prompter | None = None,
    ) -> None:
        self._registry = registry or default_registry()
        self._config = config or KeyLoaderConfig()
        self._private_loader = PrivateKeyLoader(self._registry, self._config, prompter)
        self._public_parser = PublicKeyParser(self._registry)

    @property
    def registry(self) -> KeyTypeRegistry:
        return self._registry

    def get(self, name: str) -> SshKey:
        """Return a new, empty key of the named algorithm."""
        return self._registry.get(name)

    def load_private_key(
        self,
        filename: str | Path,
        passphrase: str | None = None,
        ask_passphrase: bool | None = None,
        prompter: Prompter | None = None,
    ) -> SshKey:
        """
        Load a private key from a file.

        The algorithm is determined from the file's armor. If the key is
        encrypted and `passphrase` does not open it, the prompter is asked
        for a passphrase unless `ask_passphrase` is False.

        Raises:
            KeyFileError: If the file cannot be read.
        """
        data = _read_key_file(filename)
        key = self.load_data_private_key(data, passphrase, ask_passphrase, str(filename), prompter)
        logger.info("Private key loaded", filename=str(filename), key_type=key.key_type.value)
        return key

    def load_data_private_key(
        self,
        data: bytes | str,
        passphrase: str | None = None,
        ask_passphrase: bool | None = None,
        filename: str = "",
        prompter: Prompter | None = None,
    ) -> SshKey:
        """
        Load a private key from in-memory material.

        Raises:
            UnsupportedKeyTypeError: If the armor names an unsupported algorithm.
            NotAPrivateKeyError: If the data has no private key armor.
            DecryptionFailedError: If the key cannot be decoded.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        material = self._private_loader.detect(data, filename)
        return self._private_loader.load(material, passphrase, ask_passphrase, prompter)

    def load_public_key(self, filename: str | Path) -> SshKey:
        """
        Load a public key from a file.

        The first line that is neither blank nor a comment is parsed.

        Raises:
            KeyFileError: If the file cannot be read.
            NotAPublicKeyError: If the file holds no valid public key.
        """
        data = _read_key_file(filename)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NotAPublicKeyError(str(filename)) from e

        for line in text.splitlines():
            stripped = line.strip()
            if stripped and not stripped.startswith("#"):
                key = self._public_parser.parse(stripped, str(filename))
                logger.info("Public key loaded", filename=str(filename), key_type=key.key_type.value)
                return key
        raise NotAPublicKeyError(str(filename))

    def load_data_public_key(self, data: str, filename: str = "") -> SshKey:
        """
        Parse a public key line.

        Raises:
            NotAPublicKeyError: If the line holds no valid public key.
        """
        return self._public_parser.parse(data, filename)


def _read_key_file(filename: str | Path) -> bytes:
    path = Path(filename).expanduser()
    try:
        return path.read_bytes()
    except OSError as e:
        raise KeyFileError(str(filename)) from e
