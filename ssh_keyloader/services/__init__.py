"""Key loading services."""

from ssh_keyloader.services.private_key_loader import PrivateKeyLoader
from ssh_keyloader.services.public_key_parser import PublicKeyParser
from ssh_keyloader.services.registry import KeyTypeRegistry, default_registry

__all__ = [
    "KeyTypeRegistry",
    "PrivateKeyLoader",
    "PublicKeyParser",
    "default_registry",
]
