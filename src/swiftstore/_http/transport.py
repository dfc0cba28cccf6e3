"""HTTP transport implementations for sync and async connections."""

from __future__ import annotations

import abc
from collections.abc import AsyncIterator
from typing import Any

import httpx

from .config import ConnectionConfig


class BaseTransport(abc.ABC):
    """Abstract transport with an async interface.

    Storage requests are sent with streamed responses: the caller owns the
    response and must release it with :meth:`close_response` or
    :meth:`read_response`.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.config.timeout)

    @abc.abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        content: Any = None,
    ) -> httpx.Response:
        """Send a request and return the response with its body still open."""
        ...

    @abc.abstractmethod
    async def send_isolated(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request and return the response with its body read and closed.

        A transport that owns its client sends on a short-lived client closed
        before returning, so no connection of the exchange stays pooled. A
        caller's client is used as given so its TLS, proxy and mounts apply.
        """
        ...

    @abc.abstractmethod
    def iter_chunks(self, response: httpx.Response) -> AsyncIterator[bytes]: ...

    @abc.abstractmethod
    async def read_response(self, response: httpx.Response) -> bytes:
        """Read the remaining body and release the response."""
        ...

    @abc.abstractmethod
    async def close_response(self, response: httpx.Response) -> None: ...

    @abc.abstractmethod
    async def close(self) -> None: ...


class BlockingTransport(BaseTransport):
    """Sync I/O transport. Methods are async def but don't suspend."""

    def __init__(self, config: ConnectionConfig, client: httpx.Client | None = None) -> None:
        super().__init__(config)
        # Created up front so threads sharing a connection share one pool
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=self._timeout())

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        content: Any = None,
    ) -> httpx.Response:
        request = self._client.build_request(method, url, headers=headers, content=content)
        return self._client.send(request, stream=True)

    async def send_isolated(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        if self._owns_client:
            with httpx.Client(timeout=self._timeout()) as client:
                return client.request(method, url, headers=headers)
        request = self._client.build_request(method, url, headers=headers)
        response = self._client.send(request, stream=True)
        await self.read_response(response)
        return response

    def iter_chunks(self, response: httpx.Response) -> AsyncIterator[bytes]:
        async def _iterate() -> AsyncIterator[bytes]:
            for chunk in response.iter_raw():
                yield chunk

        return _iterate()

    async def read_response(self, response: httpx.Response) -> bytes:
        try:
            return response.read()
        finally:
            response.close()

    async def close_response(self, response: httpx.Response) -> None:
        response.close()

    async def close(self) -> None:
        if self._owns_client:
            self._client.close()


class AsyncTransport(BaseTransport):
    """Async I/O transport using httpx.AsyncClient."""

    def __init__(self, config: ConnectionConfig, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(config)
        self._owns_client = client is None
        self._client = (
            client if client is not None else httpx.AsyncClient(timeout=self._timeout())
        )

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        content: Any = None,
    ) -> httpx.Response:
        # httpx treats anything iterable as a sync stream; hand it the async side
        if content is not None and hasattr(content, "__aiter__"):
            content = content.__aiter__()
        request = self._client.build_request(method, url, headers=headers, content=content)
        return await self._client.send(request, stream=True)

    async def send_isolated(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        if self._owns_client:
            async with httpx.AsyncClient(timeout=self._timeout()) as client:
                return await client.request(method, url, headers=headers)
        request = self._client.build_request(method, url, headers=headers)
        response = await self._client.send(request, stream=True)
        await self.read_response(response)
        return response

    def iter_chunks(self, response: httpx.Response) -> AsyncIterator[bytes]:
        return response.aiter_raw()

    async def read_response(self, response: httpx.Response) -> bytes:
        try:
            return await response.aread()
        finally:
            await response.aclose()

    async def close_response(self, response: httpx.Response) -> None:
        await response.aclose()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = [
    "BaseTransport",
    "BlockingTransport",
    "AsyncTransport",
]
