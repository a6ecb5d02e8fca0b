"""
Public key parsing from authorized-keys style lines.

    [options] <type-tag> <base64-blob> [comment]

Leading fields are skipped until one matches a known type tag; the field
after it is the key blob.
"""

import base64
import dataclasses
import re

import structlog

from ssh_keyloader.crypto.wire import read_public_key_params
from ssh_keyloader.exceptions import MalformedWireDataError, NotAPublicKeyError
from ssh_keyloader.models.keys import SshKey
from ssh_keyloader.services.registry import KeyTypeRegistry

logger = structlog.get_logger(__name__)

_TYPE_TAG = re.compile(r"^(ssh-(rsa|dss|ed25519)|ecdsa-sha2-nistp\d+)$")


def find_key_blob(fields: list[str]) -> tuple[str, str, list[str]] | None:
    """
    Locate the type tag and blob among whitespace-separated fields.

    Returns:
        Tuple of (type_tag, blob, trailing_fields), or None if no type tag
        is followed by a blob.
    """
    for index, field in enumerate(fields):
        if _TYPE_TAG.match(field):
            if index + 1 >= len(fields):
                return None
            return field, fields[index + 1], fields[index + 2 :]
    return None


class PublicKeyParser:
    """
    Parses single public key lines into keys.

    Args:
        registry: Registry of supported algorithms; its backend builds key
            objects from wire parameters.
    """

    def __init__(self, registry: KeyTypeRegistry) -> None:
        self._registry = registry
        self._backend = registry.backend

    def parse(self, line: str, filename: str = "") -> SshKey:
        """
        Parse one public key line.

        Args:
            line: Text such as "ssh-ed25519 AAAAC3... user@host".
            filename: Origin of the line, used in errors.

        Returns:
            The public key, with any trailing text as its comment.

        Raises:
            NotAPublicKeyError: If no type tag and blob are found, or the
                algorithm is not in the registry.
            MalformedWireDataError: If the blob does not decode to a valid key.
        """
        located = find_key_blob(line.split())
        if located is None:
            raise NotAPublicKeyError(filename)
        type_tag, encoded, trailing = located

        try:
            blob = base64.b64decode(encoded, validate=True)
        except ValueError as e:
            raise MalformedWireDataError(filename, "invalid base64") from e

        try:
            params = read_public_key_params(blob)
        except MalformedWireDataError as e:
            raise MalformedWireDataError(filename, e.reason) from e

        if params.wire_tag != type_tag:
            logger.debug(
                "Public key type tag differs from blob",
                filename=filename,
                type_tag=type_tag,
                wire_tag=params.wire_tag,
            )

        if not self._registry.supports(params.key_type):
            msg = f"public key at {filename} uses unsupported algorithm '{params.key_type}'"
            raise NotAPublicKeyError(filename, msg)

        try:
            key = self._backend.load_public_key(params)
        except ValueError as e:
            raise MalformedWireDataError(filename, str(e)) from e

        return dataclasses.replace(key, comment=" ".join(trailing))
