"""Sync and async connections to a Swift object store."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from ._core import BaseConnection, UploadBody
from ._http.config import ConnectionConfig, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ._http.iter_coroutine import iter_coroutine
from ._http.transport import AsyncTransport, BlockingTransport
from ._internal.checksum import SupportsWrite
from ._internal.session import create_async_lock, create_thread_lock
from .headers import Headers
from .types import Account, Container, ContainersOpts, Object, ObjectsOpts


def _build_config(
    username: str | None,
    api_key: str | None,
    auth_url: str | None,
    retries: int | None,
    user_agent: str | None,
    timeout: float | None,
) -> ConnectionConfig:
    return ConnectionConfig(
        username=username,
        api_key=api_key,
        auth_url=auth_url,
        retries=retries,
        user_agent=user_agent or DEFAULT_USER_AGENT,
        timeout=timeout or DEFAULT_TIMEOUT,
    )


class Connection(BaseConnection):
    """Synchronous connection.

    Authentication happens on first use and again whenever the token
    expires. Credentials not passed in are read from ``SWIFT_API_USER``,
    ``SWIFT_API_KEY`` and ``SWIFT_AUTH_URL``. A connection may be shared
    between threads.
    """

    def __init__(
        self,
        username: str | None = None,
        api_key: str | None = None,
        auth_url: str | None = None,
        *,
        retries: int | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = _build_config(username, api_key, auth_url, retries, user_agent, timeout)
        super().__init__(BlockingTransport(self._config, client), create_thread_lock())

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def authenticate(self) -> None:
        """Authenticate now, replacing any token already held."""
        iter_coroutine(self._authenticate())

    def unauthenticate(self) -> None:
        iter_coroutine(self._unauthenticate())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        iter_coroutine(self._transport.close())

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def account(self) -> tuple[Account, Headers]:
        return iter_coroutine(self._account())

    def account_update(self, headers: Mapping[str, str]) -> None:
        """Add, replace or remove account metadata.

        Remove keys by setting them to an empty string.
        """
        iter_coroutine(self._account_update(headers))

    def container_names(self, opts: ContainersOpts | None = None) -> list[str]:
        return iter_coroutine(self._container_names(opts))

    def containers(self, opts: ContainersOpts | None = None) -> list[Container]:
        return iter_coroutine(self._containers(opts))

    def container(self, container: str) -> tuple[Container, Headers]:
        return iter_coroutine(self._container(container))

    def container_create(self, container: str, headers: Mapping[str, str] | None = None) -> None:
        """Create a container. Succeeds if it exists, updating any metadata given."""
        iter_coroutine(self._container_create(container, headers))

    def container_delete(self, container: str) -> None:
        """Delete a container.

        Raises ContainerNotFoundError or ContainerNotEmptyError.
        """
        iter_coroutine(self._container_delete(container))

    def container_update(self, container: str, headers: Mapping[str, str]) -> None:
        iter_coroutine(self._container_update(container, headers))

    def object_names(self, container: str, opts: ObjectsOpts | None = None) -> list[str]:
        return iter_coroutine(self._object_names(container, opts))

    def objects(self, container: str, opts: ObjectsOpts | None = None) -> list[Object]:
        """List objects with full information.

        With ``opts.delimiter`` set, some entries may be pseudo directories.
        """
        return iter_coroutine(self._objects(container, opts))

    def object(self, container: str, object_name: str) -> tuple[Object, Headers]:
        return iter_coroutine(self._object(container, object_name))

    def object_put(
        self,
        container: str,
        object_name: str,
        contents: UploadBody,
        *,
        check_hash: bool = True,
        md5_hash: str | None = None,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Headers:
        """Create or replace an object from ``contents``.

        With ``check_hash`` the MD5 of the bytes sent is compared with the
        Etag the server returns, raising ObjectCorruptedError on mismatch.
        With ``md5_hash`` the hash is sent to the server instead, which
        verifies it itself.
        """
        return iter_coroutine(
            self._object_put(
                container,
                object_name,
                contents,
                check_hash=check_hash,
                md5_hash=md5_hash,
                content_type=content_type,
                headers=headers,
            )
        )

    def object_put_bytes(
        self,
        container: str,
        object_name: str,
        contents: bytes,
        content_type: str | None = None,
    ) -> None:
        self.object_put(container, object_name, contents, content_type=content_type)

    def object_put_string(
        self,
        container: str,
        object_name: str,
        contents: str,
        content_type: str | None = None,
    ) -> None:
        self.object_put(container, object_name, contents, content_type=content_type)

    def object_get(
        self,
        container: str,
        object_name: str,
        sink: SupportsWrite,
        *,
        check_hash: bool = True,
        headers: Mapping[str, str] | None = None,
    ) -> Headers:
        """Write an object's contents to ``sink`` and return the response headers."""
        return iter_coroutine(
            self._object_get(
                container, object_name, sink, check_hash=check_hash, headers=headers
            )
        )

    def object_get_bytes(self, container: str, object_name: str) -> bytes:
        return iter_coroutine(self._object_get_bytes(container, object_name))

    def object_get_string(self, container: str, object_name: str) -> str:
        return self.object_get_bytes(container, object_name).decode("utf-8")

    def object_delete(self, container: str, object_name: str) -> None:
        iter_coroutine(self._object_delete(container, object_name))

    def object_update(
        self, container: str, object_name: str, headers: Mapping[str, str]
    ) -> None:
        """Add, replace or remove object metadata, or set headers such as X-Delete-At."""
        iter_coroutine(self._object_update(container, object_name, headers))


class AsyncConnection(BaseConnection):
    """Asynchronous connection. See :class:`Connection`."""

    def __init__(
        self,
        username: str | None = None,
        api_key: str | None = None,
        auth_url: str | None = None,
        *,
        retries: int | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = _build_config(username, api_key, auth_url, retries, user_agent, timeout)
        super().__init__(AsyncTransport(self._config, client), create_async_lock())

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    async def authenticate(self) -> None:
        await self._authenticate()

    async def unauthenticate(self) -> None:
        await self._unauthenticate()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._transport.close()

    async def __aenter__(self) -> AsyncConnection:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def account(self) -> tuple[Account, Headers]:
        return await self._account()

    async def account_update(self, headers: Mapping[str, str]) -> None:
        await self._account_update(headers)

    async def container_names(self, opts: ContainersOpts | None = None) -> list[str]:
        return await self._container_names(opts)

    async def containers(self, opts: ContainersOpts | None = None) -> list[Container]:
        return await self._containers(opts)

    async def container(self, container: str) -> tuple[Container, Headers]:
        return await self._container(container)

    async def container_create(
        self, container: str, headers: Mapping[str, str] | None = None
    ) -> None:
        await self._container_create(container, headers)

    async def container_delete(self, container: str) -> None:
        await self._container_delete(container)

    async def container_update(self, container: str, headers: Mapping[str, str]) -> None:
        await self._container_update(container, headers)

    async def object_names(self, container: str, opts: ObjectsOpts | None = None) -> list[str]:
        return await self._object_names(container, opts)

    async def objects(self, container: str, opts: ObjectsOpts | None = None) -> list[Object]:
        return await self._objects(container, opts)

    async def object(self, container: str, object_name: str) -> tuple[Object, Headers]:
        return await self._object(container, object_name)

    async def object_put(
        self,
        container: str,
        object_name: str,
        contents: UploadBody,
        *,
        check_hash: bool = True,
        md5_hash: str | None = None,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Headers:
        return await self._object_put(
            container,
            object_name,
            contents,
            check_hash=check_hash,
            md5_hash=md5_hash,
            content_type=content_type,
            headers=headers,
        )

    async def object_put_bytes(
        self,
        container: str,
        object_name: str,
        contents: bytes,
        content_type: str | None = None,
    ) -> None:
        await self.object_put(container, object_name, contents, content_type=content_type)

    async def object_put_string(
        self,
        container: str,
        object_name: str,
        contents: str,
        content_type: str | None = None,
    ) -> None:
        await self.object_put(container, object_name, contents, content_type=content_type)

    async def object_get(
        self,
        container: str,
        object_name: str,
        sink: SupportsWrite,
        *,
        check_hash: bool = True,
        headers: Mapping[str, str] | None = None,
    ) -> Headers:
        return await self._object_get(
            container, object_name, sink, check_hash=check_hash, headers=headers
        )

    async def object_get_bytes(self, container: str, object_name: str) -> bytes:
        return await self._object_get_bytes(container, object_name)

    async def object_get_string(self, container: str, object_name: str) -> str:
        return (await self._object_get_bytes(container, object_name)).decode("utf-8")

    async def object_delete(self, container: str, object_name: str) -> None:
        await self._object_delete(container, object_name)

    async def object_update(
        self, container: str, object_name: str, headers: Mapping[str, str]
    ) -> None:
        await self._object_update(container, object_name, headers)


__all__ = ["Connection", "AsyncConnection"]
