"""Transport core: host resolution, request dispatch, NDJSON decoding."""

from .abort import AbortSignal
from .exceptions import (
    ConfigError,
    ErrorMetadata,
    InvalidHostError,
    OllamaWireError,
    RequestAbortedError,
    ResponseError,
)
from .host import DEFAULT_HOST, DEFAULT_HOSTNAME, DEFAULT_PORT, format_host, join_url
from .http import (
    AsyncDispatcher,
    AsyncFetch,
    Body,
    Dispatcher,
    Fetch,
    JsonBody,
    RawBody,
    RequestOptions,
    aread_json,
    async_httpx_fetch,
    httpx_fetch,
    merge_headers,
    read_json,
)
from .ndjson import JsonParse, aiter_records, aparse_json, iter_records, parse_json, try_parse_json
from .validate import acheck_ok, check_ok

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_HOSTNAME",
    "DEFAULT_PORT",
    "AbortSignal",
    "AsyncDispatcher",
    "AsyncFetch",
    "Body",
    "ConfigError",
    "Dispatcher",
    "ErrorMetadata",
    "Fetch",
    "InvalidHostError",
    "JsonBody",
    "JsonParse",
    "OllamaWireError",
    "RawBody",
    "RequestAbortedError",
    "RequestOptions",
    "ResponseError",
    "acheck_ok",
    "aiter_records",
    "aparse_json",
    "aread_json",
    "async_httpx_fetch",
    "check_ok",
    "format_host",
    "httpx_fetch",
    "iter_records",
    "join_url",
    "merge_headers",
    "parse_json",
    "read_json",
    "try_parse_json",
]
