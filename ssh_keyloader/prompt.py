"""
Terminal passphrase prompter.

Used when the caller does not provide a prompter of their own.
"""

import getpass
from collections.abc import Callable

import structlog

from ssh_keyloader.models.keys import PromptContext

logger = structlog.get_logger(__name__)

Reader = Callable[[str], str]


class TerminalPromptSession:
    """Prompt session reading from the controlling terminal."""

    def __init__(self, context: PromptContext, read_secret: Reader, read_line: Reader) -> None:
        self._context = context
        self._read_secret = read_secret
        self._read_line = read_line

    @property
    def context(self) -> PromptContext:
        return self._context

    def ask(self, message: str, echo: bool = True) -> str:
        prompt = f"{message} "
        if echo:
            return self._read_line(prompt)
        return self._read_secret(prompt)

    def success(self) -> None:
        logger.debug("Prompt answer accepted", filename=self._context.filename)


class TerminalPrompter:
    """
    Prompter that asks on the terminal.

    Args:
        read_secret: Reads input without echo. Defaults to getpass.getpass.
        read_line: Reads input with echo. Defaults to input.
    """

    def __init__(self, read_secret: Reader | None = None, read_line: Reader | None = None) -> None:
        self._read_secret = read_secret or getpass.getpass
        self._read_line = read_line or input

    def start(self, context: PromptContext) -> TerminalPromptSession:
        return TerminalPromptSession(context, self._read_secret, self._read_line)
