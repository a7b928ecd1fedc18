"""Run configuration: defaults, YAML overrides, .env loading and credential lookup."""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any, Literal, MutableMapping

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, ValidationError

from hf_request_runner.common.errors import ConfigError, MissingCredential
from hf_request_runner.common.schema import Credential

LOGGER = logging.getLogger("hf_request.common.config")

ROUTER_BASE_URL = "https://router.huggingface.co"
DEFAULT_TEXT_MODEL = "bigcode/starcoder2-3b"
DEFAULT_CHAT_MODEL = "Qwen/Qwen2.5-Coder-7B-Instruct"
DEFAULT_INPUT = "Write a Python script that prints 'hello'"
DEFAULT_SYSTEM_PROMPT = (
    "You are a Python code generator. Respond only with valid, executable Python code. "
    "No explanations, markdown, or extra text."
)
DEFAULT_TOKEN_ENV = "HF_TOKEN"
DEFAULT_ENV_FILE = ".env"


class RunConfig(BaseModel):
    """Settings for a single request."""
    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    mode: Literal["text", "chat"] = "text"
    model: str | None = None
    url: str | None = None
    input: str = DEFAULT_INPUT
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_tokens: int | None = None
    temperature: float | None = None
    timeout: float | None = None
    token_env: str = DEFAULT_TOKEN_ENV
    env_file: str = DEFAULT_ENV_FILE

    def resolved_model(self) -> str:
        if self.model:
            return self.model
        return DEFAULT_CHAT_MODEL if self.mode == "chat" else DEFAULT_TEXT_MODEL

    def resolved_url(self) -> str:
        """Fixed endpoint for the mode unless ``url`` is set explicitly."""
        if self.url:
            return self.url
        if self.mode == "chat":
            return f"{ROUTER_BASE_URL}/v1/chat/completions"
        return f"{ROUTER_BASE_URL}/hf-inference/models/{self.resolved_model()}"


def load_cfg(path: str | Path | None, overrides: dict[str, Any] | None = None) -> RunConfig:
    """
    Build a RunConfig from an optional YAML file plus explicit overrides.

    Args:
        path: YAML mapping of RunConfig fields, or None for defaults.
        overrides: Values that win over the file (``None`` entries are ignored).

    Raises:
        ConfigError: unreadable file, invalid YAML, or invalid fields.
    """
    data: dict[str, Any] = {}
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"cannot read config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"config {path} must be a mapping, got {type(loaded).__name__}")
        data.update(loaded)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return RunConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid config: {e}") from e


def load_env_file(
    path: str | Path = DEFAULT_ENV_FILE,
    environ: MutableMapping[str, str] | None = None,
) -> list[str]:
    """
    Copy KEY=value pairs from a .env file into ``environ`` without overriding.

    A missing file is not an error.

    Returns:
        Names of the variables that were added.
    """
    env = os.environ if environ is None else environ
    env_path = Path(path)
    if not env_path.is_file():
        LOGGER.debug("No env file at %s", env_path)
        return []

    added = []
    for key, value in dotenv_values(env_path).items():
        if value is None or key in env:
            continue
        env[key] = value
        added.append(key)
    LOGGER.debug("Loaded %d variable(s) from %s", len(added), env_path)
    return added


def resolve_credential(
    var_name: str = DEFAULT_TOKEN_ENV,
    env_file: str | Path | None = DEFAULT_ENV_FILE,
    environ: MutableMapping[str, str] | None = None,
) -> Credential:
    """
    Resolve the bearer token, loading ``env_file`` first if given.

    Values already present in the environment take precedence over the file.

    Raises:
        MissingCredential: the variable is absent, empty, or whitespace.
    """
    env = os.environ if environ is None else environ
    if env_file is not None:
        load_env_file(env_file, env)

    token = env.get(var_name, "")
    if not token.strip():
        raise MissingCredential(var_name)
    # Header values are latin-1 on the wire; bearer tokens are ASCII.
    if not token.isascii():
        raise MissingCredential(var_name, reason="contains non-ASCII characters (invalid bearer token format)")
    return Credential(token=token)
