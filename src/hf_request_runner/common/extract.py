"""Helpers to pull generated text and code out of a parsed response."""
from __future__ import annotations
import re
from typing import Any

from hf_request_runner.common.errors import ParseError

_CODE_BLOCK_RE = re.compile(r"```(?:python)?\s*\n([\s\S]*?)\n```")


def extract_python_code(text: str) -> str:
    """
    Return the body of the first fenced code block, or the whole text.

    Args:
        text: Model output, possibly wrapped in markdown.

    Returns:
        Stripped code.
    """
    match = _CODE_BLOCK_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _text_field(obj: Any) -> str | None:
    if not isinstance(obj, dict):
        return None
    for key in ("generated_text", "text"):
        value = obj.get(key)
        if isinstance(value, str):
            return value
    return None


def extract_generated_text(data: Any, chat: bool = False) -> str:
    """
    Find the generated text in a router response.

    Chat responses carry it at ``choices[0].message.content``. Text-generation
    responses are either a list whose first item has ``generated_text`` (or
    ``text``) or a single object with one of those keys.

    Raises:
        ParseError: if no generated text is present.
    """
    if chat:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if isinstance(content, str):
            return content
        raise ParseError("no choices[0].message.content in chat response")

    if isinstance(data, list) and data:
        found = _text_field(data[0])
    else:
        found = _text_field(data)
    if found is None:
        raise ParseError("no generated_text in response")
    return found
