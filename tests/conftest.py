from __future__ import annotations

import logging
from typing import Iterator

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    # setup_logging() replaces root handlers; put pytest's back afterwards.
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def no_token_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure HF_TOKEN is unset and restored (removed) after the test even if a .env sets it."""
    monkeypatch.setenv("HF_TOKEN", "placeholder")
    monkeypatch.delenv("HF_TOKEN")
