"""
Domain models for ssh_keyloader.

These are immutable (frozen) dataclasses representing the core domain concepts.
"""

from ssh_keyloader.models.keys import (
    DsaPublicParams,
    EcdsaPublicParams,
    Ed25519PublicParams,
    KeyFormat,
    KeyType,
    PromptContext,
    PublicKeyParams,
    RawKeyMaterial,
    RsaPublicParams,
    SshKey,
)

__all__ = [
    "KeyType",
    "KeyFormat",
    "RawKeyMaterial",
    "PromptContext",
    "SshKey",
    # Public key parameters
    "PublicKeyParams",
    "RsaPublicParams",
    "DsaPublicParams",
    "EcdsaPublicParams",
    "Ed25519PublicParams",
]
