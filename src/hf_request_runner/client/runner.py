"""One-shot request runner for the Hugging Face inference router.

Resolves the bearer token, builds a text or chat payload, POSTs it once and
parses the JSON body. Payload construction is pure; the network call goes
through an httpx client that callers (and tests) may inject.
"""
from __future__ import annotations
import json
import logging
import math
import time
from typing import Any, MutableMapping

import httpx
from pydantic import ValidationError

from hf_request_runner.common.config import RunConfig, resolve_credential
from hf_request_runner.common.errors import InputError, ParseError, TransportError
from hf_request_runner.common.extract import extract_generated_text, extract_python_code
from hf_request_runner.common.schema import (
    ChatMessage,
    ChatRequest,
    Credential,
    InferenceParameters,
    InferenceRequest,
)

LOGGER = logging.getLogger("hf_request.client.runner")

Payload = InferenceRequest | ChatRequest


def build_request(text: str, cfg: RunConfig) -> Payload:
    """
    Build the request body for ``cfg.mode``.

    Args:
        text: User input. Any encodable string is accepted as-is.
        cfg: Run configuration (model, sampling params, system prompt).

    Raises:
        InputError: text or model contains lone surrogates.
    """
    try:
        if cfg.mode == "chat":
            return ChatRequest(
                model=cfg.resolved_model(),
                messages=(
                    ChatMessage(role="system", content=cfg.system_prompt),
                    ChatMessage(role="user", content=text),
                ),
                max_tokens=cfg.max_tokens,
                temperature=cfg.temperature,
            )

        params = None
        if cfg.max_tokens is not None or cfg.temperature is not None:
            params = InferenceParameters(max_new_tokens=cfg.max_tokens, temperature=cfg.temperature)
        return InferenceRequest(inputs=text, parameters=params)
    except ValidationError as e:
        raise InputError(f"cannot encode request body: {e.errors()[0]['msg']}") from e


def build_headers(credential: Credential) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    headers.update(credential.auth_header())
    return headers


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number {literal} overflows a double")
    return value


def parse_response(response: httpx.Response) -> Any:
    """
    Parse the body as strict JSON regardless of status code.

    ``NaN``/``Infinity`` literals and overflowing numbers are rejected so the
    rendered output is always valid JSON.

    Raises:
        ParseError: empty, non-JSON, or too deeply nested body.
    """
    body = response.text
    if not body.strip():
        raise ParseError(f"empty response body (HTTP {response.status_code})", body="")
    try:
        return response.json(parse_constant=_reject_constant, parse_float=_finite_float)
    except (ValueError, RecursionError) as e:
        raise ParseError(
            f"response body is not valid JSON (HTTP {response.status_code})", body=body
        ) from e


def render(data: Any) -> str:
    """Indented, key-order-preserving JSON."""
    return json.dumps(data, indent=2, ensure_ascii=False)


class RequestRunner:
    """Sends a single inference request and returns the parsed response.

    Pass either a ready ``client`` (used as-is and not closed) or a
    ``transport`` for the client the runner creates per call, not both.
    """

    def __init__(
        self,
        cfg: RunConfig | None = None,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        if client is not None and transport is not None:
            raise ValueError("pass either client or transport, not both")
        self.cfg = cfg or RunConfig()
        self._client = client
        self._transport = transport
        self._environ = environ

    def resolve_credential(self) -> Credential:
        return resolve_credential(self.cfg.token_env, self.cfg.env_file, self._environ)

    def _make_client(self) -> httpx.Client:
        kwargs: dict[str, Any] = {}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        # Only pass a timeout when one is configured; httpx.Client(timeout=None) disables it.
        if self.cfg.timeout is not None:
            kwargs["timeout"] = self.cfg.timeout
        return httpx.Client(**kwargs)

    def send(self, payload: Payload, credential: Credential) -> httpx.Response:
        """
        POST ``payload`` once. No retries.

        Raises:
            TransportError: connection, TLS, timeout or protocol failure.
        """
        url = self.cfg.resolved_url()
        headers = build_headers(credential)
        LOGGER.info("POST %s (%s mode)", url, self.cfg.mode)

        start = time.time()
        try:
            if self._client is not None:
                response = self._client.post(url, headers=headers, content=payload.to_bytes())
            else:
                with self._make_client() as client:
                    response = client.post(url, headers=headers, content=payload.to_bytes())
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            LOGGER.error("Request to %s failed: %s", url, e)
            raise TransportError(f"POST {url} failed: {e}") from e

        latency = int((time.time() - start) * 1000)
        LOGGER.info("HTTP %s in %sms", response.status_code, latency)
        if response.is_error:
            LOGGER.warning("Server returned HTTP %s; parsing body anyway", response.status_code)
        return response

    def run(self, text: str | None = None) -> Any:
        """
        Resolve the credential, send the request and parse the response.

        Args:
            text: Input string; defaults to ``cfg.input``.

        Returns:
            The parsed JSON value, uninterpreted.
        """
        credential = self.resolve_credential()
        payload = build_request(self.cfg.input if text is None else text, self.cfg)
        response = self.send(payload, credential)
        return parse_response(response)

    def render(self, data: Any, code: bool = False) -> str:
        """Pretty JSON, or with ``code`` the extracted Python from the generated text."""
        if code:
            generated = extract_generated_text(data, chat=self.cfg.mode == "chat")
            return extract_python_code(generated)
        return render(data)
