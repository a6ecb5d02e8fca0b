"""
Private key loading.

Material is classified by its armor marker lines, then decoded by the
backend. Encrypted material may be retried with passphrases collected from a
prompter, driven by an explicit state machine:

    INITIAL -> ATTEMPTING -> SUCCESS
                    |
                    +-> NEEDS_PASSPHRASE -> PROMPTING -> ATTEMPTING
                    |
                    +-> FAILED
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

import structlog

from ssh_keyloader.config import KeyLoaderConfig
from ssh_keyloader.crypto.protocol import Prompter, PromptSession
from ssh_keyloader.crypto.secure_bytes import SecureBytes
from ssh_keyloader.exceptions import (
    DecryptionFailedError,
    NotAPrivateKeyError,
    UnsupportedKeyTypeError,
)
from ssh_keyloader.models.keys import KeyFormat, KeyType, PromptContext, RawKeyMaterial, SshKey
from ssh_keyloader.prompt import TerminalPrompter
from ssh_keyloader.services.registry import KeyTypeRegistry

logger = structlog.get_logger(__name__)

_PROMPT_PURPOSE = "private_key"
_GENERIC_MARKER = re.compile(rb"-----BEGIN (.+) PRIVATE KEY-----")

# First match wins.
_DETECTION_ORDER = (KeyFormat.DSA, KeyFormat.RSA, KeyFormat.EC, KeyFormat.OPENSSH)


def sniff_key_format(data: bytes, *, ec_supported: bool) -> KeyFormat:
    """
    Find the armor of private key material from its marker lines.

    Args:
        data: Raw key material.
        ec_supported: Whether EC armor should be recognized at all.

    Returns:
        The first matching format, or KeyFormat.UNRECOGNIZED.
    """
    for key_format in _DETECTION_ORDER:
        if key_format is KeyFormat.EC and not ec_supported:
            continue
        if key_format.marker.encode("ascii") in data:
            return key_format
    return KeyFormat.UNRECOGNIZED


def detect_material(data: bytes, filename: str = "", *, ec_supported: bool) -> RawKeyMaterial:
    """
    Classify private key material.

    Raises:
        UnsupportedKeyTypeError: If a private key marker names an unsupported label.
        NotAPrivateKeyError: If no private key marker is present.
    """
    key_format = sniff_key_format(data, ec_supported=ec_supported)
    if key_format is not KeyFormat.UNRECOGNIZED:
        return RawKeyMaterial(data=data, filename=filename, key_format=key_format)

    if (match := _GENERIC_MARKER.search(data)) is not None:
        raise UnsupportedKeyTypeError(match.group(1).decode("ascii", errors="replace"))
    raise NotAPrivateKeyError(filename)


class DecryptState(Enum):
    INITIAL = auto()
    ATTEMPTING = auto()
    NEEDS_PASSPHRASE = auto()
    PROMPTING = auto()
    SUCCESS = auto()
    FAILED = auto()


_TERMINAL_STATES = frozenset({DecryptState.SUCCESS, DecryptState.FAILED})


@dataclass
class DecryptSession:
    """
    State of one private key load.

    Attributes:
        material: Material being decoded.
        passphrase: Current passphrase guess.
        ask_passphrase: Whether prompting is allowed.
        prompter: Source of prompt sessions.
        state: Current state.
        attempts: Number of passphrases collected from the prompter.
        prompt_session: Created on the first prompt, reused afterwards.
        key: Decoded key once SUCCESS is reached.
        error: Last decode failure.
    """

    material: RawKeyMaterial
    passphrase: SecureBytes
    ask_passphrase: bool
    prompter: Prompter
    state: DecryptState = DecryptState.INITIAL
    attempts: int = 0
    prompt_session: PromptSession | None = None
    key: SshKey | None = None
    error: DecryptionFailedError | None = None

    @property
    def finished(self) -> bool:
        return self.state in _TERMINAL_STATES


class PrivateKeyLoader:
    """
    Decodes private key material, prompting for passphrases when needed.

    Args:
        registry: Registry of supported algorithms; its backend decodes keys.
        config: Loader configuration. Uses defaults if not provided.
        prompter: Default prompter. Uses TerminalPrompter if not provided.
    """

    def __init__(
        self,
        registry: KeyTypeRegistry,
        config: KeyLoaderConfig | None = None,
        prompter: Prompter | None = None,
    ) -> None:
        self._registry = registry
        self._backend = registry.backend
        self._config = config or KeyLoaderConfig()
        self._prompter = prompter or TerminalPrompter()

    def detect(self, data: bytes, filename: str = "") -> RawKeyMaterial:
        """Classify material by its marker lines. See `detect_material`."""
        material = detect_material(
            data, filename, ec_supported=self._registry.supports(KeyType.ECDSA)
        )
        logger.debug(
            "Private key format detected",
            filename=filename,
            key_format=material.key_format.value,
            encrypted=material.is_encrypted,
        )
        return material

    def load(
        self,
        material: RawKeyMaterial,
        passphrase: str | None = None,
        ask_passphrase: bool | None = None,
        prompter: Prompter | None = None,
    ) -> SshKey:
        """
        Decode private key material.

        Args:
            material: Detected key material.
            passphrase: Passphrase to try first. A placeholder is used if None.
            ask_passphrase: Whether to prompt for encrypted material. Defaults
                to the configured value.
            prompter: Prompter overriding the loader's default.

        Returns:
            The decoded private key.

        Raises:
            DecryptionFailedError: The last decode failure, once retries are
                exhausted or not allowed.
            UnsupportedKeyTypeError: If the decoded key's algorithm is not in
                the registry.
        """
        session = self.start(material, passphrase, ask_passphrase, prompter)
        try:
            while not session.finished:
                session.state = self.advance(session)
        finally:
            session.passphrase.clear()

        if session.state is DecryptState.SUCCESS and session.key is not None:
            return session.key

        error = session.error or DecryptionFailedError("Private key load ended without a key")
        error.record_attempts(material.filename, session.attempts)
        raise error

    def start(
        self,
        material: RawKeyMaterial,
        passphrase: str | None = None,
        ask_passphrase: bool | None = None,
        prompter: Prompter | None = None,
    ) -> DecryptSession:
        """Create a session in the INITIAL state."""
        initial = passphrase if passphrase is not None else self._config.placeholder_passphrase
        return DecryptSession(
            material=material,
            passphrase=SecureBytes.from_string(initial),
            ask_passphrase=self._config.ask_passphrase if ask_passphrase is None else ask_passphrase,
            prompter=prompter or self._prompter,
        )

    def advance(self, session: DecryptSession) -> DecryptState:
        """
        Perform one transition.

        Returns:
            The state the session moves to. Terminal states return themselves.
        """
        match session.state:
            case DecryptState.INITIAL:
                return DecryptState.ATTEMPTING
            case DecryptState.ATTEMPTING:
                return self._attempt(session)
            case DecryptState.NEEDS_PASSPHRASE:
                return self._open_prompt(session)
            case DecryptState.PROMPTING:
                return self._prompt(session)
            case _:
                return session.state

    def _attempt(self, session: DecryptSession) -> DecryptState:
        material = session.material
        logger.debug("Decoding private key", filename=material.filename, attempt=session.attempts)
        try:
            key = self._backend.load_private_key(
                material.data, session.passphrase, material.key_format
            )
        except DecryptionFailedError as e:
            session.error = e
            return self._after_failure(session)

        if not self._registry.supports(key.key_type):
            raise UnsupportedKeyTypeError(key.key_type.value)
        session.key = key
        if session.prompt_session is not None:
            session.prompt_session.success()
        return DecryptState.SUCCESS

    def _after_failure(self, session: DecryptSession) -> DecryptState:
        if not (session.material.is_encrypted and session.ask_passphrase):
            return DecryptState.FAILED
        if session.attempts >= self._config.max_passphrase_attempts:
            logger.warning(
                "Passphrase attempts exhausted",
                filename=session.material.filename,
                attempts=session.attempts,
            )
            return DecryptState.FAILED
        return DecryptState.NEEDS_PASSPHRASE

    def _open_prompt(self, session: DecryptSession) -> DecryptState:
        if session.prompt_session is None:
            material = session.material
            context = PromptContext(
                purpose=_PROMPT_PURPOSE,
                filename=material.filename,
                fingerprint=self._backend.digest(material.data),
            )
            logger.debug(
                "Starting passphrase prompt",
                filename=material.filename,
                fingerprint=context.fingerprint.hex(),
            )
            session.prompt_session = session.prompter.start(context)
        return DecryptState.PROMPTING

    def _prompt(self, session: DecryptSession) -> DecryptState:
        if session.prompt_session is None:
            msg = "PROMPTING reached without a prompt session"
            raise RuntimeError(msg)
        answer = session.prompt_session.ask(
            self._config.format_prompt(session.material.filename), echo=False
        )
        session.passphrase.clear()
        session.passphrase = SecureBytes.from_string(answer)
        session.attempts += 1
        return DecryptState.ATTEMPTING
