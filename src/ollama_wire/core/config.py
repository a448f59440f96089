"""Transport configuration defaults and environment loading."""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictStr, ValidationError

from ollama_wire import __version__
from ollama_wire.client.exceptions import ConfigError
from ollama_wire.client.host import format_host

HOST_ENV_NAME = "OLLAMA_HOST"
TIMEOUT_ENV_NAME = "OLLAMA_TIMEOUT"
DEFAULT_TIMEOUT_SECONDS = 30.0


def default_user_agent(version: str = __version__) -> str:
    """Describe this library and the running platform for the User-Agent header."""
    machine = platform.machine() or "unknown"
    system = platform.system().lower() or "unknown"
    return f"ollama-wire/{version} ({machine} {system}) Python/{platform.python_version()}"


class TransportConfig(BaseModel):
    """Connection settings shared by every dispatcher built from it."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    host: StrictStr = ""
    user_agent: StrictStr = Field(default_factory=default_user_agent)
    timeout: StrictFloat | None = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    headers: dict[StrictStr, StrictStr] = Field(default_factory=dict)

    @property
    def base_url(self) -> str:
        return format_host(self.host)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> TransportConfig:
        """Build config from ``OLLAMA_HOST``/``OLLAMA_TIMEOUT`` plus explicit overrides."""
        env = os.environ if environ is None else environ
        payload: dict[str, Any] = {}
        host = env.get(HOST_ENV_NAME, "").strip()
        if host:
            payload["host"] = host
        raw_timeout = env.get(TIMEOUT_ENV_NAME, "").strip()
        if raw_timeout:
            try:
                payload["timeout"] = float(raw_timeout)
            except ValueError as exc:
                raise ConfigError(f"invalid {TIMEOUT_ENV_NAME} value: {raw_timeout!r}") from exc
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return load_config(payload)


def load_config(payload: Mapping[str, Any]) -> TransportConfig:
    """Validate a config mapping, raising :class:`ConfigError` on bad input."""
    try:
        return TransportConfig.model_validate(dict(payload))
    except ValidationError as exc:
        raise ConfigError(f"invalid transport config: {exc}") from exc
