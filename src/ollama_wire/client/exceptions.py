"""Typed client-side exception hierarchy for ollama-wire calls."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ErrorMetadata:
    """Structured metadata for mapping errors across interfaces."""

    category: str
    exit_code: int


class OllamaWireError(RuntimeError):
    """Base error for ollama-wire operations."""

    metadata = ErrorMetadata(category="INTERNAL_ERROR", exit_code=10)

    @property
    def exit_code(self) -> int:
        return self.metadata.exit_code

    @property
    def category(self) -> str:
        return self.metadata.category


class ResponseError(OllamaWireError):
    """The server answered with a non-success status.

    ``error`` holds the best-effort message extracted from the response body
    and ``status_code`` the HTTP status of the response.
    """

    metadata = ErrorMetadata(category="RESPONSE_ERROR", exit_code=1)

    def __init__(self, error: str, status_code: int) -> None:
        super().__init__(error)
        self.error = error
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(error={self.error!r}, status_code={self.status_code})"


class RequestAbortedError(OllamaWireError):
    """An in-flight request was aborted through its abort signal."""

    metadata = ErrorMetadata(category="ABORTED", exit_code=130)

    def __init__(self, reason: object | None = None) -> None:
        message = "request aborted"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.reason = reason


class InvalidHostError(OllamaWireError, ValueError):
    """Host string could not be coerced into a URL."""

    metadata = ErrorMetadata(category="INVALID_HOST", exit_code=2)


class ConfigError(OllamaWireError):
    """Transport configuration failed validation."""

    metadata = ErrorMetadata(category="INVALID_CONFIG", exit_code=2)
