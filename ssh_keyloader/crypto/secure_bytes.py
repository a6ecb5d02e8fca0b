"""
Passphrase buffer for the private key loader.

Each guess lives in one buffer for a single decode attempt and is zeroed
before the next guess replaces it.
"""

import ctypes
from typing import Self


def _secure_zero(data: bytearray) -> None:
    if not data:
        return
    view = (ctypes.c_char * len(data)).from_buffer(data)
    ctypes.memset(ctypes.addressof(view), 0, len(data))


class SecureBytes:
    """
    Passphrase bytes that can be wiped in place.

    An empty buffer is falsy, which backends read as "no passphrase".
    """

    __slots__ = ("_data", "_cleared")

    def __init__(self, data: bytes | bytearray) -> None:
        self._data = bytearray(data)
        self._cleared = False

    @classmethod
    def from_string(cls, passphrase: str) -> Self:
        """Encode a typed passphrase as UTF-8, wiping the temporary copy."""
        encoded = bytearray(passphrase, "utf-8")
        try:
            return cls(encoded)
        finally:
            _secure_zero(encoded)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.clear()

    def __del__(self) -> None:
        self.clear()

    def clear(self) -> None:
        if not self._cleared:
            _secure_zero(self._data)
            self._cleared = True

    @property
    def is_cleared(self) -> bool:
        return self._cleared

    def __bytes__(self) -> bytes:
        # The copy handed to the decoder is not wiped.
        if self._cleared:
            raise RuntimeError("SecureBytes has been cleared")
        return bytes(self._data)

    def __bool__(self) -> bool:
        return bool(self._data) and not self._cleared

    def __repr__(self) -> str:
        size = "cleared" if self._cleared else f"{len(self._data)} bytes"
        return f"SecureBytes(<{size}>)"
