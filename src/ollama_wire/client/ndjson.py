"""Incremental newline-delimited JSON decoding for streaming responses."""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JsonParse:
    """Outcome of parsing one JSON document without raising."""

    ok: bool
    value: Any = None
    error: str | None = None


def try_parse_json(text: str) -> JsonParse:
    try:
        return JsonParse(ok=True, value=json.loads(text))
    except json.JSONDecodeError as exc:
        return JsonParse(ok=False, error=exc.msg)
    except (ValueError, RecursionError) as exc:
        # Nesting deeper than the interpreter stack surfaces as RecursionError.
        return JsonParse(ok=False, error=str(exc))


class _LineBuffer:
    """Decode buffer for one stream: the partial trailing line plus a UTF-8 decoder."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: list[str] = []

    def feed(self, chunk: bytes) -> list[str]:
        """Return the lines completed by ``chunk``; only new text is scanned."""
        text = self._decoder.decode(chunk)
        if "\n" not in text:
            if text:
                self._pending.append(text)
            return []
        head, *rest = text.split("\n")
        self._pending.append(head)
        lines = ["".join(self._pending), *rest[:-1]]
        self._pending = [rest[-1]] if rest[-1] else []
        return lines

    def finish(self) -> list[str]:
        self._pending.append(self._decoder.decode(b"", final=True))
        tail = "".join(self._pending)
        self._pending = []
        return [part for part in tail.split("\n") if part]


def _parse_lines(lines: Iterable[str]) -> Iterator[Any]:
    for line in lines:
        parsed = try_parse_json(line)
        if not parsed.ok:
            logger.warning("invalid json: %s", line)
            continue
        yield parsed.value


def parse_json(chunks: Iterable[bytes]) -> Iterator[Any]:
    """Yield one parsed JSON value per line of a chunked UTF-8 byte stream.

    Chunk boundaries may fall anywhere, including inside a multi-byte
    character. Lines that are not valid JSON are logged and skipped. The
    chunk iterator is closed when the generator finishes or is closed early.
    """
    buffer = _LineBuffer()
    iterator = iter(chunks)
    try:
        for chunk in iterator:
            yield from _parse_lines(buffer.feed(chunk))
        yield from _parse_lines(buffer.finish())
    finally:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()


async def aparse_json(chunks: AsyncIterable[bytes]) -> AsyncIterator[Any]:
    """Async counterpart of :func:`parse_json`."""
    buffer = _LineBuffer()
    iterator = aiter(chunks)
    try:
        async for chunk in iterator:
            for value in _parse_lines(buffer.feed(chunk)):
                yield value
        for value in _parse_lines(buffer.finish()):
            yield value
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


def iter_records(response: httpx.Response) -> Iterator[Any]:
    """Decode a streaming response body and close the response afterwards."""
    try:
        yield from parse_json(response.iter_bytes())
    finally:
        response.close()


async def aiter_records(response: httpx.Response) -> AsyncIterator[Any]:
    """Decode an async streaming response body and close it afterwards."""
    records = aparse_json(response.aiter_bytes())
    try:
        async for record in records:
            yield record
    finally:
        await records.aclose()
        await response.aclose()
