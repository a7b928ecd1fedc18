"""Errors raised by a run. Each one is terminal and maps to an exit code."""
from __future__ import annotations


class RunError(Exception):
    """Base class for failures that abort a run."""

    stage = "run"
    exit_code = 1


class ConfigError(RunError):
    """The run configuration file is unreadable or invalid."""

    stage = "config"
    exit_code = 2


class MissingCredential(RunError):
    """No non-empty token could be resolved."""

    stage = "credential"
    exit_code = 3

    def __init__(self, var_name: str = "HF_TOKEN", reason: str = "is not set") -> None:
        self.var_name = var_name
        super().__init__(
            f"{var_name} {reason}. Export {var_name}=<token> or add it to a .env file "
            "in the working directory."
        )


class InputError(RunError):
    """The request body cannot be built from the given input."""

    stage = "input"
    exit_code = 2


class TransportError(RunError):
    """The HTTP call failed before a response body could be read."""

    stage = "transport"
    exit_code = 4


class ParseError(RunError):
    """The response body is not usable JSON."""

    stage = "parse"
    exit_code = 5

    def __init__(self, message: str, body: str | None = None) -> None:
        self.body = body
        if body is not None:
            message = f"{message}: {snippet(body)!r}"
        super().__init__(message)


def snippet(text: str, limit: int = 200) -> str:
    """Shorten text to at most ``limit`` characters for error messages."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
