"""Synchronous network bridge — blocking calls over an async httpx transport.

The automation thread cannot suspend, so every wait (network round-trips and
plain delays alike) pumps a private asyncio loop in short slices until the
awaited work is done. Callbacks queued on the loop keep being serviced while
the engine waits.
"""
import asyncio
import logging
import time
from typing import Any, Callable, Coroutine

import httpx

from . import debug
from .errors import TransportError

log = logging.getLogger(__name__)


class RunLoop:
    """Private event loop owned by the automation thread."""

    def __init__(self, slice_seconds: float = 0.1):
        self.slice = slice_seconds
        self._loop = asyncio.new_event_loop()

    @property
    def closed(self) -> bool:
        return self._loop.is_closed()

    def call_soon(self, callback: Callable, *args) -> asyncio.Handle:
        """Queue host work to run during the next pump."""
        return self._loop.call_soon(callback, *args)

    def pump(self, seconds: float = None):
        """Service pending loop work for at most one slice."""
        seconds = self.slice if seconds is None else min(seconds, self.slice)
        self._loop.run_until_complete(asyncio.sleep(max(seconds, 0.0)))

    def sleep(self, duration: float):
        deadline = time.monotonic() + duration
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            self.pump(remaining)

    def run(self, coro: Coroutine, ceiling: float) -> Any:
        """Drive `coro` to completion, one slice at a time, or fail at `ceiling` seconds."""
        task = self._loop.create_task(coro)
        deadline = time.monotonic() + ceiling
        while not task.done():
            if time.monotonic() >= deadline:
                task.cancel()
                self._loop.run_until_complete(asyncio.gather(task, return_exceptions=True))
                raise TransportError(f"Request did not complete within {ceiling}s")
            self._loop.run_until_complete(asyncio.wait({task}, timeout=self.slice))
        return task.result()

    def close(self):
        if self._loop.is_closed():
            return
        self._loop.run_until_complete(self._loop.shutdown_asyncgens())
        self._loop.close()


class PlannerTransport:
    """Bearer-authenticated JSON POSTs to the planner API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        run_loop: RunLoop,
        ceiling: float = 120.0,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.run_loop = run_loop
        self.ceiling = ceiling
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.ceiling),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def post_async(self, path: str, payload: dict) -> httpx.Response:
        start = time.time()
        try:
            resp = await self._get_client().post(path, json=payload)
        except httpx.HTTPError as e:
            log.error(f"POST {path} failed: {e}")
            raise TransportError(f"POST {path} failed: {e}") from e
        elapsed_ms = (time.time() - start) * 1000
        debug.log_http("POST", path, resp.status_code, elapsed_ms)
        log.debug(f"POST {path} → {resp.status_code} ({elapsed_ms:.0f}ms, {len(resp.content)} bytes)")
        return resp

    def post(self, path: str, payload: dict) -> httpx.Response:
        """Blocking POST; returns the response whatever its status code."""
        return self.run_loop.run(self.post_async(path, payload), self.ceiling)

    def close(self):
        if self._client is not None and not self._client.is_closed and not self.run_loop.closed:
            self.run_loop.run(self._client.aclose(), self.ceiling)
        self._client = None
