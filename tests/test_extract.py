from __future__ import annotations

import pytest

from hf_request_runner.common.errors import ParseError
from hf_request_runner.common.extract import extract_generated_text, extract_python_code


def test_extract_python_code_with_markdown() -> None:
    assert extract_python_code("```python\nprint('hello')\n```") == "print('hello')"


def test_extract_python_code_without_language() -> None:
    assert extract_python_code("```\nprint('hello')\n```") == "print('hello')"


def test_extract_python_code_plain_text() -> None:
    assert extract_python_code("  print('hello')\n") == "print('hello')"


def test_extract_python_code_multiline_keeps_inner_blank_lines() -> None:
    text = "Here you go:\n```python\ndef hello():\n    print('world')\n\nhello()\n```\nDone."
    assert extract_python_code(text) == "def hello():\n    print('world')\n\nhello()"


def test_generated_text_from_list_and_object() -> None:
    assert extract_generated_text([{"generated_text": "a"}]) == "a"
    assert extract_generated_text({"text": "b"}) == "b"
    assert extract_generated_text({"generated_text": "c", "text": "d"}) == "c"


def test_generated_text_from_chat_choices() -> None:
    data = {"choices": [{"message": {"role": "assistant", "content": "print(1)"}}]}
    assert extract_generated_text(data, chat=True) == "print(1)"


@pytest.mark.parametrize("data", [{"error": "Model is loading"}, [], {"choices": []}, "plain"])
def test_generated_text_missing_raises(data: object) -> None:
    with pytest.raises(ParseError):
        extract_generated_text(data, chat=isinstance(data, dict) and "choices" in data)
