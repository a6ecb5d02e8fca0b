"""
SSH key loading.

Turns private key files (PEM or OpenSSH armor) and authorized-keys style
public key lines into key objects.

Example:
    ```python
    from ssh_keyloader import KeyFactory

    factory = KeyFactory()

    # Prompts on the terminal if the key is encrypted
    private = factory.load_private_key("~/.ssh/id_rsa")

    public = factory.load_data_public_key("ssh-ed25519 AAAAC3Nza... user@host")
    print(public.fingerprint)
    ```
"""

from ssh_keyloader.config import KeyLoaderConfig
from ssh_keyloader.exceptions import (
    DecryptionFailedError,
    KeyFileError,
    MalformedWireDataError,
    NotAPrivateKeyError,
    NotAPublicKeyError,
    SshKeyError,
    UnsupportedKeyTypeError,
)
from ssh_keyloader.factory import KeyFactory
from ssh_keyloader.models.keys import KeyFormat, KeyType, SshKey

__version__ = "0.1.0"

__all__ = [
    # Main entry point
    "KeyFactory",
    "KeyLoaderConfig",
    # Models
    "KeyType",
    "KeyFormat",
    "SshKey",
    # Exceptions
    "SshKeyError",
    "UnsupportedKeyTypeError",
    "NotAPrivateKeyError",
    "NotAPublicKeyError",
    "MalformedWireDataError",
    "DecryptionFailedError",
    "KeyFileError",
]
