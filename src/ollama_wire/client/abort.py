"""Caller-owned abort signal forwarded to transport calls."""

from __future__ import annotations

import asyncio
import threading

from .exceptions import RequestAbortedError


class AbortSignal:
    """One-shot flag a caller sets to abort an in-flight request.

    ``abort`` may be called from any thread. Waiters are woken on the event
    loop they are waiting on.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._lock = threading.Lock()
        self._aborted = False
        self._reason: object | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> object | None:
        return self._reason

    def abort(self, reason: object | None = None) -> None:
        with self._lock:
            if self._aborted:
                return
            self._reason = reason
            self._aborted = True
            loop = self._loop
        if loop is None or loop is _running_loop():
            self._event.set()
            return
        try:
            loop.call_soon_threadsafe(self._event.set)
        except RuntimeError:
            # Loop already closed; nobody is left waiting on it.
            self._event.set()

    def throw_if_aborted(self) -> None:
        if self._aborted:
            raise RequestAbortedError(self._reason)

    async def wait(self) -> None:
        with self._lock:
            if self._aborted:
                return
            self._loop = asyncio.get_running_loop()
        await self._event.wait()


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
