"""Turn non-success responses into :class:`ResponseError`."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .exceptions import ResponseError
from .ndjson import try_parse_json

logger = logging.getLogger(__name__)

_BODY_READ_ERRORS = (httpx.HTTPError, httpx.StreamError)


def check_ok(response: httpx.Response) -> None:
    """Raise :class:`ResponseError` unless the response status is 2xx."""
    if response.is_success:
        return
    message = _default_message(response)
    try:
        response.read()
    except _BODY_READ_ERRORS as exc:
        logger.warning("failed to read error response body: %s", exc)
    else:
        message = _message_from_body(response, message)
    raise ResponseError(message, response.status_code)


async def acheck_ok(response: httpx.Response) -> None:
    """Async counterpart of :func:`check_ok`."""
    if response.is_success:
        return
    message = _default_message(response)
    try:
        await response.aread()
    except _BODY_READ_ERRORS as exc:
        logger.warning("failed to read error response body: %s", exc)
    else:
        message = _message_from_body(response, message)
    raise ResponseError(message, response.status_code)


def _default_message(response: httpx.Response) -> str:
    return f"Error {response.status_code}: {response.reason_phrase}"


def _message_from_body(response: httpx.Response, default: str) -> str:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        parsed = try_parse_json(response.text)
        if not parsed.ok:
            logger.warning("failed to parse error response body as JSON: %s", parsed.error)
            return default
        if isinstance(parsed.value, dict):
            return _error_to_text(parsed.value.get("error")) or default
        return default

    logger.debug("error response is not JSON, using body text")
    return response.text or default


def _error_to_text(error: Any) -> str | None:
    if not error:
        return None
    if isinstance(error, str):
        return error
    return json.dumps(error, separators=(",", ":"), sort_keys=True)
