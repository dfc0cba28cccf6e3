"""MD5 integrity checks wrapped around upload sources and download sinks.

The hash is fed with exactly the bytes that cross the stream boundary, so a
match proves the transfer itself was intact. MD5 is used because it is what
Swift reports in the ``Etag`` header, not for security.
"""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import AsyncIterator, Iterable, Iterator, Mapping
from typing import Any, Protocol

from ..errors import ObjectCorruptedError
from .utils import debug, parse_int_header

DEFAULT_CHUNK_SIZE = 64 * 1024


def _md5() -> Any:
    return hashlib.md5(usedforsecurity=False)


class SupportsRead(Protocol):
    def read(self, size: int = -1) -> bytes:  # pragma: no cover - Protocol
        ...


class SupportsWrite(Protocol):
    def write(self, data: bytes, /) -> Any:  # pragma: no cover - Protocol
        ...


class HashingReader:
    """Wrap a bytes/str/file-like or iterable upload body.

    Iterating the reader (sync or async) yields the body in chunks and feeds
    every chunk into a running MD5.
    """

    def __init__(
        self,
        body: bytes | bytearray | memoryview | str | SupportsRead | Iterable[bytes],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        hash_content: bool = True,
    ) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._source = body
        self._chunk_size = max(1024, chunk_size)
        self._hash_content = hash_content
        self._hash = _md5()
        self._bytes_read = 0
        self._start = self._tell()

    @property
    def bytes_read(self) -> int:
        return self._bytes_read

    @property
    def length(self) -> int | None:
        """Total body size when known up front."""
        if isinstance(self._source, (bytes, bytearray, memoryview)):
            return len(self._source)
        return None

    def hexdigest(self) -> str:
        return self._hash.hexdigest()

    def _tell(self) -> int | None:
        if not hasattr(self._source, "read"):
            return None
        try:
            return int(self._source.tell())  # type: ignore[union-attr]
        except (AttributeError, OSError, ValueError):
            return None

    def rewind(self) -> bool:
        """Restart the body from the beginning; False if it cannot be replayed."""
        if isinstance(self._source, (bytes, bytearray, memoryview)):
            pass
        elif self._start is not None:
            try:
                self._source.seek(self._start)  # type: ignore[union-attr]
            except (AttributeError, OSError, ValueError):
                return False
        elif self._bytes_read:
            return False
        self._hash = _md5()
        self._bytes_read = 0
        return True

    def _update(self, chunk: bytes) -> bytes:
        if self._hash_content:
            self._hash.update(chunk)
        self._bytes_read += len(chunk)
        return chunk

    def __iter__(self) -> Iterator[bytes]:
        if isinstance(self._source, (bytes, bytearray, memoryview)):
            view = memoryview(self._source)
            for offset in range(0, len(view), self._chunk_size):
                yield self._update(view[offset : offset + self._chunk_size].tobytes())
            return
        if hasattr(self._source, "read"):
            while True:
                chunk = self._source.read(self._chunk_size)  # type: ignore[union-attr]
                if not chunk:
                    break
                if isinstance(chunk, str):
                    chunk = chunk.encode("utf-8")
                yield self._update(bytes(chunk))
            return
        for chunk in self._source:  # type: ignore[union-attr]
            yield self._update(bytes(chunk))

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self:
            yield chunk
            await asyncio.sleep(0)


class HashingWriter:
    """Forward writes to ``sink`` unchanged while hashing and counting them."""

    def __init__(self, sink: SupportsWrite) -> None:
        self._sink = sink
        self._hash = _md5()
        self._bytes_written = 0

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    def hexdigest(self) -> str:
        return self._hash.hexdigest()

    def write(self, chunk: bytes) -> int:
        self._sink.write(chunk)
        self._hash.update(chunk)
        self._bytes_written += len(chunk)
        return len(chunk)


def _received_hash(headers: Mapping[str, str]) -> str:
    return headers.get("Etag", "").lower()


def verify_upload(reader: HashingReader, headers: Mapping[str, str]) -> None:
    received = _received_hash(headers)
    calculated = reader.hexdigest()
    if received != calculated:
        debug(f"upload hash mismatch: received {received!r}, calculated {calculated!r}")
        raise ObjectCorruptedError()


def verify_download(
    writer: HashingWriter,
    headers: Mapping[str, str],
    *,
    check_hash: bool,
) -> None:
    if check_hash:
        received = _received_hash(headers)
        calculated = writer.hexdigest()
        if received != calculated:
            debug(f"download hash mismatch: received {received!r}, calculated {calculated!r}")
            raise ObjectCorruptedError()

    if headers.get("Content-Length", "") != "":
        expected = parse_int_header(headers, "Content-Length")
        if expected != writer.bytes_written:
            debug(f"download length mismatch: expected {expected}, got {writer.bytes_written}")
            raise ObjectCorruptedError()


__all__ = [
    "HashingReader",
    "HashingWriter",
    "SupportsRead",
    "SupportsWrite",
    "verify_download",
    "verify_upload",
]
