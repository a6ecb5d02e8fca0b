"""
Key loader configuration.
"""

from dataclasses import dataclass

# Upper bound on passphrase prompts for a single private key load.
MAX_PASSPHRASE_ATTEMPTS = 3


@dataclass(frozen=True, kw_only=True)
class KeyLoaderConfig:
    """
    Attributes:
        max_passphrase_attempts: Number of passphrase prompts allowed per load.
        placeholder_passphrase: Passphrase tried when the caller supplies none.
        prompt_message: Prompt text, formatted with the key's filename.
        ask_passphrase: Whether loads may prompt unless told otherwise.
    """

    max_passphrase_attempts: int = MAX_PASSPHRASE_ATTEMPTS
    placeholder_passphrase: str = "invalid"
    prompt_message: str = "Enter passphrase for {filename}:"
    ask_passphrase: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.max_passphrase_attempts <= MAX_PASSPHRASE_ATTEMPTS:
            msg = f"max_passphrase_attempts must be between 0 and {MAX_PASSPHRASE_ATTEMPTS}"
            raise ValueError(msg)
        if not self.placeholder_passphrase:
            msg = "placeholder_passphrase must not be empty"
            raise ValueError(msg)
        if "{filename}" not in self.prompt_message:
            msg = "prompt_message must contain a {filename} placeholder"
            raise ValueError(msg)

    def format_prompt(self, filename: str) -> str:
        return self.prompt_message.format(filename=filename)
