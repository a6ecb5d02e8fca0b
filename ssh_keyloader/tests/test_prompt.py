from unittest.mock import Mock

from ssh_keyloader.crypto.protocol import Prompter, PromptSession
from ssh_keyloader.models.keys import PromptContext
from ssh_keyloader.prompt import TerminalPrompter

_CONTEXT = PromptContext(purpose="private_key", filename="id_rsa", fingerprint=b"\x00")


def test_terminal_prompter_satisfies_protocols() -> None:
    prompter = TerminalPrompter(read_secret=Mock(), read_line=Mock())

    assert isinstance(prompter, Prompter)
    assert isinstance(prompter.start(_CONTEXT), PromptSession)


def test_ask_without_echo_reads_secret() -> None:
    read_secret = Mock(return_value="hunter2")
    read_line = Mock()
    session = TerminalPrompter(read_secret=read_secret, read_line=read_line).start(_CONTEXT)

    answer = session.ask("Enter passphrase for id_rsa:", echo=False)

    assert answer == "hunter2"
    read_secret.assert_called_once_with("Enter passphrase for id_rsa: ")
    read_line.assert_not_called()


def test_ask_with_echo_reads_line() -> None:
    read_secret = Mock()
    read_line = Mock(return_value="yes")
    session = TerminalPrompter(read_secret=read_secret, read_line=read_line).start(_CONTEXT)

    assert session.ask("Continue?", echo=True) == "yes"
    read_secret.assert_not_called()


def test_session_keeps_context() -> None:
    session = TerminalPrompter(read_secret=Mock(), read_line=Mock()).start(_CONTEXT)

    session.success()

    assert session.context is _CONTEXT
