"""Pydantic models for request payloads and the bearer credential."""
from __future__ import annotations
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, SecretStr, field_validator


class Credential(BaseModel):
    """Bearer token. ``SecretStr`` keeps it out of reprs and log lines."""
    model_config = ConfigDict(frozen=True)

    token: SecretStr

    @field_validator("token")
    @classmethod
    def _non_empty(cls, value: SecretStr) -> SecretStr:
        secret = value.get_secret_value()
        if not secret.strip():
            raise ValueError("token must be non-empty")
        if not secret.isascii():
            raise ValueError("token must be ASCII")
        return value

    def auth_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token.get_secret_value().strip()}"}


def _utf8_encodable(value: str) -> str:
    # Lone surrogates (e.g. undecodable argv bytes) cannot be written as JSON.
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"text is not valid UTF-8 at position {e.start}") from e
    return value


Utf8Str = Annotated[str, AfterValidator(_utf8_encodable)]


class InferenceParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_new_tokens: int | None = None
    temperature: float | None = None


class InferenceRequest(BaseModel):
    """Text-generation payload for the hf-inference route: ``{"inputs": ...}``."""
    model_config = ConfigDict(frozen=True)

    inputs: Utf8Str
    parameters: InferenceParameters | None = None

    def to_bytes(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: Utf8Str


class ChatRequest(BaseModel):
    """OpenAI-compatible chat-completions payload."""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: Utf8Str
    messages: tuple[ChatMessage, ...]
    max_tokens: int | None = None
    temperature: float | None = None

    def to_bytes(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")
