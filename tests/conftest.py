"""Pytest configuration for ollama-wire tests."""

from __future__ import annotations

import pytest

from ollama_wire.core.config import HOST_ENV_NAME, TIMEOUT_ENV_NAME


@pytest.fixture(autouse=True)
def _clear_transport_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host/timeout environment from the developer shell out of tests."""
    monkeypatch.delenv(HOST_ENV_NAME, raising=False)
    monkeypatch.delenv(TIMEOUT_ENV_NAME, raising=False)
