"""
ssh_keyloader exception hierarchy.

All exceptions inherit from SshKeyError for easy catching.
"""

from typing import Any


class SshKeyError(Exception):
    """Base exception for all ssh_keyloader errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class UnsupportedKeyTypeError(SshKeyError):
    """Key algorithm or armor label is not supported."""

    def __init__(self, label: str) -> None:
        super().__init__(f"not a supported key type '{label}'")
        self.label = label


class NotAPrivateKeyError(SshKeyError):
    """Material carries no private key marker line."""

    def __init__(self, filename: str = "") -> None:
        super().__init__(f"not a private key ({filename})")
        self.filename = filename


class NotAPublicKeyError(SshKeyError):
    """Line carries no recognizable public key."""

    def __init__(self, filename: str = "", message: str | None = None) -> None:
        super().__init__(message or f"public key at {filename} is not valid")
        self.filename = filename


class MalformedWireDataError(NotAPublicKeyError):
    """Public key blob is not valid wire-format data."""

    def __init__(self, filename: str = "", reason: str | None = None) -> None:
        message = f"malformed public key data in {filename!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(filename, message)
        self.reason = reason


class DecryptionFailedError(SshKeyError):
    """Private key could not be decrypted or parsed for its format."""

    def __init__(self, message: str, *, filename: str = "", attempts: int = 0) -> None:
        super().__init__(message)
        self.filename = filename
        self.attempts = attempts

    def record_attempts(self, filename: str, attempts: int) -> None:
        """Attach load diagnostics without replacing the error."""
        self.filename = filename
        self.attempts = attempts
        self.context.update(filename=filename, attempts=attempts)


class KeyFileError(SshKeyError):
    """Key file could not be read."""

    def __init__(self, filename: str) -> None:
        super().__init__("Failed to read key file", filename=filename)
        self.filename = filename
