"""Context managers that bind a configured httpx client to a dispatcher."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

import httpx

from .client.http import AsyncDispatcher, Dispatcher, async_httpx_fetch, httpx_fetch
from .core.config import TransportConfig


@contextmanager
def open_dispatcher(
    config: TransportConfig | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> Iterator[Dispatcher]:
    """Yield a :class:`Dispatcher` backed by an ``httpx.Client`` it owns."""
    resolved = config or TransportConfig.from_env()
    with httpx.Client(timeout=resolved.timeout, transport=transport) as client:
        yield Dispatcher(
            httpx_fetch(client),
            user_agent=resolved.user_agent,
            base_url=resolved.base_url,
            headers=resolved.headers,
        )


@asynccontextmanager
async def open_async_dispatcher(
    config: TransportConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[AsyncDispatcher]:
    """Yield an :class:`AsyncDispatcher` backed by an ``httpx.AsyncClient`` it owns."""
    resolved = config or TransportConfig.from_env()
    async with httpx.AsyncClient(timeout=resolved.timeout, transport=transport) as client:
        yield AsyncDispatcher(
            async_httpx_fetch(client),
            user_agent=resolved.user_agent,
            base_url=resolved.base_url,
            headers=resolved.headers,
        )
