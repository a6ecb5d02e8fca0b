"""
Crypto backend and prompter protocol definitions.

The backend interface lets different crypto libraries be swapped without
changing the loaders. The prompter interface decouples passphrase collection
from the terminal (or any other UI).
"""

from typing import Protocol, runtime_checkable

from ssh_keyloader.crypto.secure_bytes import SecureBytes
from ssh_keyloader.models.keys import KeyFormat, KeyType, PromptContext, PublicKeyParams, SshKey


@runtime_checkable
class KeyBackend(Protocol):
    """
    Abstract interface for key operations.

    Implementations wrap a concrete crypto library and report which
    algorithms it can handle at runtime.
    """

    def supports(self, key_type: KeyType) -> bool:
        """Whether the underlying library can handle `key_type`."""
        ...

    def new_empty_key(self, key_type: KeyType) -> SshKey:
        """Construct an empty key of the given algorithm."""
        ...

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
            The decoded private key.

        Raises:
            DecryptionFailedError: If the material cannot be decrypted or
                parsed for this format.
        """
        ...

    def load_public_key(self, params: PublicKeyParams) -> SshKey:
        """
        Build a public key from wire parameters.

        Raises:
            ValueError: If the parameters do not describe a valid key.
        """
        ...

    def digest(self, data: bytes) -> bytes:
        """Digest of raw material, used as prompt context."""
        ...


@runtime_checkable
class PromptSession(Protocol):
    """One prompting session, spanning every retry of a single load."""

    def ask(self, message: str, echo: bool) -> str:
        """Ask for input. `echo` False hides what is typed."""
        ...

    def success(self) -> None:
        """Signal that the last answer worked."""
        ...


@runtime_checkable
class Prompter(Protocol):
    """Factory for prompt sessions."""

    def start(self, context: PromptContext) -> PromptSession:
        ...
