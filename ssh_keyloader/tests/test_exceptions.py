from ssh_keyloader.exceptions import (
    DecryptionFailedError,
    KeyFileError,
    MalformedWireDataError,
    NotAPrivateKeyError,
    NotAPublicKeyError,
    SshKeyError,
    UnsupportedKeyTypeError,
)


def test_ssh_key_error_str_without_context() -> None:
    error = SshKeyError("Something failed")

    assert str(error) == "Something failed"


def test_ssh_key_error_str_with_context() -> None:
    error = SshKeyError("Failed", filename="id_rsa", attempts=3)

    assert "Failed" in str(error)
    assert "filename='id_rsa'" in str(error)
    assert "attempts=3" in str(error)


def test_unsupported_key_type_error_keeps_label() -> None:
    error = UnsupportedKeyTypeError("FOO")

    assert error.label == "FOO"
    assert "FOO" in str(error)


def test_not_a_private_key_error_names_file() -> None:
    error = NotAPrivateKeyError("/tmp/id_rsa")

    assert error.filename == "/tmp/id_rsa"
    assert "not a private key (/tmp/id_rsa)" in str(error)


def test_malformed_wire_data_error_is_not_a_public_key_error() -> None:
    error = MalformedWireDataError("keys.pub", "truncated")

    assert isinstance(error, NotAPublicKeyError)
    assert error.filename == "keys.pub"
    assert error.reason == "truncated"
    assert "truncated" in str(error)


def test_decryption_failed_error_records_attempts_in_place() -> None:
    error = DecryptionFailedError("bad decrypt")

    error.record_attempts("id_rsa", 3)

    assert error.filename == "id_rsa"
    assert error.attempts == 3
    assert "attempts=3" in str(error)


def test_key_file_error_names_file() -> None:
    error = KeyFileError("~/.ssh/missing")

    assert error.filename == "~/.ssh/missing"
    assert isinstance(error, SshKeyError)
