"""
Cryptographic operations for ssh_keyloader.

This module provides:
- The key backend and prompter protocols
- A backend built on the cryptography library
- SSH wire format encoding and decoding
- Secure passphrase handling
"""

from ssh_keyloader.crypto.cryptography_backend import CryptographyBackend
from ssh_keyloader.crypto.protocol import KeyBackend, Prompter, PromptSession
from ssh_keyloader.crypto.secure_bytes import SecureBytes
from ssh_keyloader.crypto.wire import (
    WireReader,
    WireWriter,
    build_public_key_blob,
    read_public_key_params,
)

__all__ = [
    "SecureBytes",
    "KeyBackend",
    "Prompter",
    "PromptSession",
    "CryptographyBackend",
    "WireReader",
    "WireWriter",
    "build_public_key_blob",
    "read_public_key_params",
]
