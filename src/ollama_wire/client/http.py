"""Request dispatch with default headers and response validation."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias
from urllib.parse import urlsplit

import httpx

from .abort import AbortSignal
from .exceptions import RequestAbortedError
from .host import DEFAULT_HOST, join_url
from .validate import acheck_ok, check_ok

logger = logging.getLogger(__name__)

HeaderInput: TypeAlias = Mapping[str, str] | httpx.Headers | None


@dataclass(frozen=True, slots=True)
class JsonBody:
    """Request body serialized to JSON text before sending."""

    value: Any

    def encode(self) -> str:
        return json.dumps(self.value, separators=(",", ":"))


@dataclass(frozen=True, slots=True)
class RawBody:
    """Pre-encoded request body sent unchanged."""

    content: bytes | str

    def encode(self) -> bytes | str:
        return self.content


Body: TypeAlias = JsonBody | RawBody


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """Everything the transport needs besides the target URL."""

    method: str
    headers: httpx.Headers
    content: bytes | str | None = None
    signal: AbortSignal | None = None


Fetch: TypeAlias = Callable[[str, RequestOptions], httpx.Response]
AsyncFetch: TypeAlias = Callable[[str, RequestOptions], Awaitable[httpx.Response]]


def default_headers(user_agent: str) -> httpx.Headers:
    return httpx.Headers(
        {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": user_agent,
        }
    )


def merge_headers(*layers: HeaderInput) -> httpx.Headers:
    """Merge header mappings into a new set; later layers win per key."""
    merged = httpx.Headers()
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


def httpx_fetch(client: httpx.Client) -> Fetch:
    """Adapt an ``httpx.Client`` to the transport function contract.

    Responses are sent in stream mode; the body is left unread for the
    caller. A blocking send cannot be interrupted, so the abort signal is
    only checked before the request goes out.
    """

    def fetch(url: str, options: RequestOptions) -> httpx.Response:
        if options.signal is not None:
            options.signal.throw_if_aborted()
        request = client.build_request(
            options.method,
            url,
            headers=options.headers,
            content=options.content,
        )
        return client.send(request, stream=True)

    return fetch


def async_httpx_fetch(client: httpx.AsyncClient) -> AsyncFetch:
    """Adapt an ``httpx.AsyncClient``; the send races the abort signal."""

    async def fetch(url: str, options: RequestOptions) -> httpx.Response:
        request = client.build_request(
            options.method,
            url,
            headers=options.headers,
            content=options.content,
        )
        signal = options.signal
        if signal is None:
            return await client.send(request, stream=True)

        signal.throw_if_aborted()
        send = asyncio.ensure_future(client.send(request, stream=True))
        aborted = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({send, aborted}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            aborted.cancel()
            if not send.done():
                send.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await send
        if send.cancelled():
            raise RequestAbortedError(signal.reason)
        return send.result()

    return fetch


class _DispatcherBase:
    def __init__(
        self,
        *,
        user_agent: str,
        base_url: str = DEFAULT_HOST,
        headers: HeaderInput = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = merge_headers(default_headers(user_agent), headers)

    @property
    def base_url(self) -> str:
        return self._base_url

    def url(self, target: str) -> str:
        parsed = urlsplit(target)
        if parsed.scheme and parsed.netloc:
            return target
        return join_url(self._base_url, target)

    def _prepare(
        self,
        method: str,
        target: str,
        *,
        body: Body | None,
        headers: HeaderInput,
        signal: AbortSignal | None,
    ) -> tuple[str, RequestOptions]:
        url = self.url(target)
        options = RequestOptions(
            method=method,
            headers=merge_headers(self._headers, headers),
            content=body.encode() if body is not None else None,
            signal=signal,
        )
        logger.debug("%s %s", method, url)
        return url, options


class Dispatcher(_DispatcherBase):
    """Blocking dispatcher over a :data:`Fetch` transport function."""

    def __init__(
        self,
        fetch: Fetch,
        *,
        user_agent: str,
        base_url: str = DEFAULT_HOST,
        headers: HeaderInput = None,
    ) -> None:
        super().__init__(user_agent=user_agent, base_url=base_url, headers=headers)
        self._fetch = fetch

    def request(
        self,
        method: str,
        target: str,
        body: Body | None = None,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        url, options = self._prepare(method, target, body=body, headers=headers, signal=signal)
        response = self._fetch(url, options)
        try:
            check_ok(response)
        except BaseException:
            response.close()
            raise
        return response

    def get(
        self,
        target: str,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        return self.request("GET", target, headers=headers, signal=signal)

    def head(
        self,
        target: str,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        return self.request("HEAD", target, headers=headers, signal=signal)

    def post(
        self,
        target: str,
        body: Body | None = None,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        return self.request("POST", target, body, headers=headers, signal=signal)

    def delete(
        self,
        target: str,
        body: Body | None = None,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        return self.request("DELETE", target, body, headers=headers, signal=signal)


class AsyncDispatcher(_DispatcherBase):
    """Asyncio dispatcher over an :data:`AsyncFetch` transport function."""

    def __init__(
        self,
        fetch: AsyncFetch,
        *,
        user_agent: str,
        base_url: str = DEFAULT_HOST,
        headers: HeaderInput = None,
    ) -> None:
        super().__init__(user_agent=user_agent, base_url=base_url, headers=headers)
        self._fetch = fetch

    async def request(
        self,
        method: str,
        target: str,
        body: Body | None = None,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        url, options = self._prepare(method, target, body=body, headers=headers, signal=signal)
        response = await self._fetch(url, options)
        try:
            await acheck_ok(response)
        except BaseException:
            await response.aclose()
            raise
        return response

    async def get(
        self,
        target: str,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        return await self.request("GET", target, headers=headers, signal=signal)

    async def head(
        self,
        target: str,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        return await self.request("HEAD", target, headers=headers, signal=signal)

    async def post(
        self,
        target: str,
        body: Body | None = None,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        return await self.request("POST", target, body, headers=headers, signal=signal)

    async def delete(
        self,
        target: str,
        body: Body | None = None,
        *,
        headers: HeaderInput = None,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        return await self.request("DELETE", target, body, headers=headers, signal=signal)


def read_json(response: httpx.Response) -> Any:
    """Read, parse and close a simple-endpoint response."""
    try:
        response.read()
        return response.json()
    finally:
        response.close()


async def aread_json(response: httpx.Response) -> Any:
    try:
        await response.aread()
        return response.json()
    finally:
        await response.aclose()
