"""Account, container and object operations shared by the sync and async connections."""

from __future__ import annotations

import io
import json
import mimetypes
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from ._http.transport import BaseTransport
from ._internal.checksum import (
    HashingReader,
    HashingWriter,
    SupportsRead,
    SupportsWrite,
    verify_download,
    verify_upload,
)
from ._internal.classify import CONTAINER_ERRORS
from ._internal.dispatcher import RequestDispatcher, RequestSpec, StorageResponse
from ._internal.session import AuthSession, SessionLock
from ._internal.utils import debug, parse_http_date, parse_int_header, parse_listing_timestamp
from .errors import ObjectCorruptedError, SwiftError
from .headers import Headers
from .types import Account, Container, ContainersOpts, Object, ObjectsOpts

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DIRECTORY_CONTENT_TYPE = "application/directory"

UploadBody = bytes | bytearray | memoryview | str | SupportsRead | Iterable[bytes]


def guess_content_type(object_name: str) -> str:
    content_type, _ = mimetypes.guess_type(object_name)
    return content_type or DEFAULT_CONTENT_TYPE


def build_container(entry: Mapping[str, Any]) -> Container:
    return Container(
        name=entry["name"],
        count=int(entry.get("count", 0)),
        bytes=int(entry.get("bytes", 0)),
    )


def build_object(entry: Mapping[str, Any]) -> Object:
    """Build an :class:`Object` from one entry of a JSON object listing."""
    obj = Object(
        name=entry.get("name", ""),
        content_type=entry.get("content_type", ""),
        bytes=int(entry.get("bytes", 0)),
        server_last_modified=entry.get("last_modified", ""),
        hash=entry.get("hash", ""),
        subdir=entry.get("subdir", ""),
    )
    if obj.subdir:
        obj.name = obj.subdir
        obj.pseudo_directory = True
        obj.content_type = DIRECTORY_CONTENT_TYPE
    if obj.server_last_modified:
        try:
            obj.last_modified = parse_listing_timestamp(obj.server_last_modified)
        except ValueError as exc:
            raise SwiftError(f"Bad timestamp '{obj.server_last_modified}': {exc}") from exc
    return obj


def build_object_info(object_name: str, headers: Headers) -> Object:
    """Build an :class:`Object` from the headers of a HEAD response."""
    server_last_modified = headers.get("Last-Modified", "")
    return Object(
        name=object_name,
        content_type=headers.get("Content-Type", ""),
        bytes=parse_int_header(headers, "Content-Length"),
        server_last_modified=server_last_modified,
        last_modified=parse_http_date(server_last_modified),
        hash=headers.get("Etag", ""),
    )


def _expected_length(headers: Headers) -> int:
    if headers.get("Content-Length", "") == "":
        return -1
    return parse_int_header(headers, "Content-Length")


class BaseConnection:
    """Async business logic for every storage operation.

    Subclasses provide the transport and the session lock and expose the
    public API, either awaiting these methods or running them through
    ``iter_coroutine``.
    """

    def __init__(self, transport: BaseTransport, lock: SessionLock) -> None:
        self._transport = transport
        self._session = AuthSession(transport, lock)
        self._dispatcher = RequestDispatcher(transport, self._session)
        self._closed = False

    @property
    def authenticated(self) -> bool:
        """Whether a token is held. The server is not consulted."""
        return self._session.is_valid()

    def _ensure_open(self) -> None:
        if self._closed:
            raise SwiftError("Connection is closed")

    async def _storage(self, spec: RequestSpec) -> StorageResponse:
        self._ensure_open()
        return await self._dispatcher.execute(spec)

    async def _read_lines(self, response: httpx.Response) -> list[str]:
        body = await self._transport.read_response(response)
        return body.decode("utf-8").splitlines()

    async def _read_json(self, response: httpx.Response) -> list[dict[str, Any]]:
        body = await self._transport.read_response(response)
        if not body.strip():
            return []
        return json.loads(body)

    async def _authenticate(self) -> None:
        self._ensure_open()
        await self._session.authenticate()

    async def _unauthenticate(self) -> None:
        await self._session.invalidate()

    # Account

    async def _account(self) -> tuple[Account, Headers]:
        result = await self._storage(
            RequestSpec(method="HEAD", resource_class="account", no_response=True)
        )
        headers = result.headers
        info = Account(
            bytes_used=parse_int_header(headers, "X-Account-Bytes-Used"),
            containers=parse_int_header(headers, "X-Account-Container-Count"),
            objects=parse_int_header(headers, "X-Account-Object-Count"),
        )
        return info, headers

    async def _account_update(self, headers: Mapping[str, str]) -> None:
        await self._storage(
            RequestSpec(
                method="POST",
                resource_class="account",
                headers=headers,
                no_response=True,
            )
        )

    # Containers

    def _list_containers_spec(
        self, opts: ContainersOpts | None, *, as_json: bool
    ) -> RequestSpec:
        opts = opts or ContainersOpts()
        params = opts.params()
        if as_json:
            params.append(("format", "json"))
        return RequestSpec(
            method="GET",
            resource_class="account",
            params=params,
            headers=opts.headers or {},
            error_map=CONTAINER_ERRORS,
        )

    async def _container_names(self, opts: ContainersOpts | None = None) -> list[str]:
        result = await self._storage(self._list_containers_spec(opts, as_json=False))
        return await self._read_lines(result.response)

    async def _containers(self, opts: ContainersOpts | None = None) -> list[Container]:
        result = await self._storage(self._list_containers_spec(opts, as_json=True))
        return [build_container(entry) for entry in await self._read_json(result.response)]

    async def _container(self, container: str) -> tuple[Container, Headers]:
        result = await self._storage(
            RequestSpec(
                method="HEAD",
                resource_class="container",
                container=container,
                no_response=True,
            )
        )
        headers = result.headers
        info = Container(
            name=container,
            bytes=parse_int_header(headers, "X-Container-Bytes-Used"),
            count=parse_int_header(headers, "X-Container-Object-Count"),
        )
        return info, headers

    async def _container_create(
        self, container: str, headers: Mapping[str, str] | None = None
    ) -> None:
        await self._storage(
            RequestSpec(
                method="PUT",
                resource_class="container",
                container=container,
                headers=headers or {},
                no_response=True,
            )
        )

    async def _container_delete(self, container: str) -> None:
        await self._storage(
            RequestSpec(
                method="DELETE",
                resource_class="container",
                container=container,
                no_response=True,
            )
        )

    async def _container_update(self, container: str, headers: Mapping[str, str]) -> None:
        await self._storage(
            RequestSpec(
                method="POST",
                resource_class="container",
                container=container,
                headers=headers,
                no_response=True,
            )
        )

    # Objects

    def _list_objects_spec(
        self, container: str, opts: ObjectsOpts | None, *, as_json: bool
    ) -> RequestSpec:
        opts = opts or ObjectsOpts()
        params = opts.params()
        if as_json:
            params.append(("format", "json"))
        return RequestSpec(
            method="GET",
            resource_class="container",
            container=container,
            params=params,
            headers=opts.headers or {},
        )

    async def _object_names(self, container: str, opts: ObjectsOpts | None = None) -> list[str]:
        result = await self._storage(self._list_objects_spec(container, opts, as_json=False))
        return await self._read_lines(result.response)

    async def _objects(self, container: str, opts: ObjectsOpts | None = None) -> list[Object]:
        result = await self._storage(self._list_objects_spec(container, opts, as_json=True))
        return [build_object(entry) for entry in await self._read_json(result.response)]

    async def _object(self, container: str, object_name: str) -> tuple[Object, Headers]:
        result = await self._storage(
            RequestSpec(
                method="HEAD",
                resource_class="object",
                container=container,
                object_name=object_name,
                no_response=True,
            )
        )
        return build_object_info(object_name, result.headers), result.headers

    async def _object_put(
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
        extra_headers = {"Content-Type": content_type or guess_content_type(object_name)}
        if headers:
            extra_headers.update(headers)
        if md5_hash:
            # The server checks the hash itself and answers 422 on mismatch
            extra_headers["Etag"] = md5_hash
            check_hash = False
        reader = HashingReader(contents, hash_content=check_hash)
        if reader.length is not None:
            extra_headers.setdefault("Content-Length", str(reader.length))

        result = await self._storage(
            RequestSpec(
                method="PUT",
                resource_class="object",
                container=container,
                object_name=object_name,
                headers=extra_headers,
                body=reader,
                no_response=True,
            )
        )
        if check_hash:
            verify_upload(reader, result.headers)
        return result.headers

    async def _object_get(
        self,
        container: str,
        object_name: str,
        sink: SupportsWrite,
        *,
        check_hash: bool = True,
        headers: Mapping[str, str] | None = None,
    ) -> Headers:
        """Copy the object into ``sink``.

        A body shorter than its Content-Length raises ObjectCorruptedError,
        whether httpx notices the early close itself or the copy just ends.
        """
        result = await self._storage(
            RequestSpec(
                method="GET",
                resource_class="object",
                container=container,
                object_name=object_name,
                headers=headers or {},
            )
        )
        writer = HashingWriter(sink)
        try:
            async for chunk in self._transport.iter_chunks(result.response):
                writer.write(chunk)
        except httpx.RemoteProtocolError as exc:
            # A connection closed before Content-Length bytes arrived
            if writer.bytes_written < _expected_length(result.headers):
                debug(f"download cut short after {writer.bytes_written} bytes: {exc}")
                raise ObjectCorruptedError() from exc
            raise
        finally:
            await self._transport.close_response(result.response)

        verify_download(writer, result.headers, check_hash=check_hash)
        return result.headers

    async def _object_get_bytes(self, container: str, object_name: str) -> bytes:
        buf = io.BytesIO()
        await self._object_get(container, object_name, buf, check_hash=True)
        return buf.getvalue()

    async def _object_delete(self, container: str, object_name: str) -> None:
        await self._storage(
            RequestSpec(
                method="DELETE",
                resource_class="object",
                container=container,
                object_name=object_name,
                no_response=True,
            )
        )

    async def _object_update(
        self, container: str, object_name: str, headers: Mapping[str, str]
    ) -> None:
        await self._storage(
            RequestSpec(
                method="POST",
                resource_class="object",
                container=container,
                object_name=object_name,
                headers=headers,
                no_response=True,
            )
        )


__all__ = [
    "BaseConnection",
    "build_container",
    "build_object",
    "build_object_info",
    "guess_content_type",
]
