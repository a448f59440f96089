"""ollama-wire package."""

__version__ = "0.1.0"

from .client import (  # noqa: E402
    AbortSignal,
    AsyncDispatcher,
    Dispatcher,
    JsonBody,
    RawBody,
    ResponseError,
    format_host,
    parse_json,
)
from .core.config import TransportConfig  # noqa: E402
from .session import open_async_dispatcher, open_dispatcher  # noqa: E402

__all__ = [
    "AbortSignal",
    "AsyncDispatcher",
    "Dispatcher",
    "JsonBody",
    "RawBody",
    "ResponseError",
    "TransportConfig",
    "__version__",
    "format_host",
    "open_async_dispatcher",
    "open_dispatcher",
    "parse_json",
]
