"""Tests for response validation and error message extraction."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator

import httpx
import pytest

from ollama_wire.client import ResponseError, acheck_ok, check_ok


class _FailingStream(httpx.SyncByteStream):
    def __iter__(self) -> Iterator[bytes]:
        raise httpx.ReadError("connection reset")
        yield b""  # pragma: no cover


class _AsyncFailingStream(httpx.AsyncByteStream):
    async def __aiter__(self) -> AsyncIterator[bytes]:
        raise httpx.ReadError("connection reset")
        yield b""  # pragma: no cover


def test_success_response_passes() -> None:
    check_ok(httpx.Response(200, json={"status": "ok"}))
    check_ok(httpx.Response(204))


def test_json_error_field_becomes_message() -> None:
    response = httpx.Response(404, json={"error": "model not found"})

    with pytest.raises(ResponseError) as exc_info:
        check_ok(response)

    assert exc_info.value.error == "model not found"
    assert str(exc_info.value) == "model not found"
    assert exc_info.value.status_code == 404


def test_json_content_type_with_charset_is_recognized() -> None:
    response = httpx.Response(
        400,
        content=b'{"error":"invalid options"}',
        headers={"content-type": "application/json; charset=utf-8"},
    )

    with pytest.raises(ResponseError, match="^invalid options$"):
        check_ok(response)


def test_empty_non_json_body_falls_back_to_status_text() -> None:
    with pytest.raises(ResponseError) as exc_info:
        check_ok(httpx.Response(500))

    assert exc_info.value.error == "Error 500: Internal Server Error"
    assert exc_info.value.status_code == 500


def test_text_body_becomes_message() -> None:
    response = httpx.Response(502, text="upstream unavailable")

    with pytest.raises(ResponseError) as exc_info:
        check_ok(response)

    assert exc_info.value.error == "upstream unavailable"
    assert exc_info.value.status_code == 502


def test_json_without_error_field_uses_default_message() -> None:
    response = httpx.Response(409, json={"detail": "conflict"})

    with pytest.raises(ResponseError) as exc_info:
        check_ok(response)

    assert exc_info.value.error == "Error 409: Conflict"


def test_non_string_error_field_is_rendered_as_json() -> None:
    response = httpx.Response(422, json={"error": {"field": "model", "reason": "missing"}})

    with pytest.raises(ResponseError) as exc_info:
        check_ok(response)

    assert exc_info.value.error == '{"field":"model","reason":"missing"}'


def test_unparsable_json_body_uses_default_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    response = httpx.Response(
        503,
        content=b"<html>busy</html>",
        headers={"content-type": "application/json"},
    )

    with caplog.at_level(logging.WARNING, logger="ollama_wire.client.validate"):
        with pytest.raises(ResponseError) as exc_info:
            check_ok(response)

    assert exc_info.value.error == "Error 503: Service Unavailable"
    assert exc_info.value.status_code == 503
    assert "failed to parse error response body as JSON" in caplog.text


def test_deeply_nested_json_body_uses_default_message() -> None:
    response = httpx.Response(
        500,
        content=b"[" * 100_000,
        headers={"content-type": "application/json"},
    )

    with pytest.raises(ResponseError) as exc_info:
        check_ok(response)

    assert exc_info.value.error == "Error 500: Internal Server Error"
    assert exc_info.value.status_code == 500


def test_body_read_failure_keeps_default_message(caplog: pytest.LogCaptureFixture) -> None:
    response = httpx.Response(500, stream=_FailingStream())

    with caplog.at_level(logging.WARNING, logger="ollama_wire.client.validate"):
        with pytest.raises(ResponseError) as exc_info:
            check_ok(response)

    assert exc_info.value.error == "Error 500: Internal Server Error"
    assert "failed to read error response body" in caplog.text


@pytest.mark.asyncio
async def test_async_success_response_passes() -> None:
    await acheck_ok(httpx.Response(200, json={}))


@pytest.mark.asyncio
async def test_async_json_error_field_becomes_message() -> None:
    response = httpx.Response(404, json={"error": "model not found"})

    with pytest.raises(ResponseError) as exc_info:
        await acheck_ok(response)

    assert exc_info.value.error == "model not found"
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_async_deeply_nested_json_body_uses_default_message() -> None:
    response = httpx.Response(
        502,
        content=b'{"error":' + b"[" * 100_000,
        headers={"content-type": "application/json"},
    )

    with pytest.raises(ResponseError) as exc_info:
        await acheck_ok(response)

    assert exc_info.value.error == "Error 502: Bad Gateway"


@pytest.mark.asyncio
async def test_async_streamed_text_body_becomes_message() -> None:
    async def body() -> AsyncIterator[bytes]:
        yield b"out of "
        yield b"memory"

    response = httpx.Response(500, content=body())

    with pytest.raises(ResponseError) as exc_info:
        await acheck_ok(response)

    assert exc_info.value.error == "out of memory"


@pytest.mark.asyncio
async def test_async_body_read_failure_keeps_default_message() -> None:
    response = httpx.Response(500, stream=_AsyncFailingStream())

    with pytest.raises(ResponseError) as exc_info:
        await acheck_ok(response)

    assert exc_info.value.error == "Error 500: Internal Server Error"
