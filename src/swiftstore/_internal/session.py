"""Authentication session: the storage URL and token pair, and the handshake."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from typing import Any, Protocol

from .._http.transport import BaseTransport
from ..errors import SwiftAuthError
from ..headers import read_headers
from .classify import AUTH_ERRORS, classify
from .utils import debug


@dataclass(frozen=True, slots=True)
class Credentials:
    storage_url: str
    token: str


class SessionLock(Protocol):
    async def __aenter__(self) -> Any: ...

    async def __aexit__(self, *args: object) -> Any: ...


class ThreadLock:
    """``threading.Lock`` behind the async context manager protocol.

    Acquiring blocks the calling thread instead of suspending, which is what
    coroutines driven by ``iter_coroutine`` need.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    async def __aenter__(self) -> ThreadLock:
        self._lock.acquire()
        return self

    async def __aexit__(self, *args: object) -> None:
        self._lock.release()


class AuthSession:
    """Holds the current credentials and performs the authentication handshake.

    The session is either unauthenticated or holds both a storage URL and a
    token; the two are always replaced together. All state changes happen
    under ``lock``, so concurrent callers that find the session invalid wait
    for a single handshake instead of each starting their own.
    """

    def __init__(self, transport: BaseTransport, lock: SessionLock) -> None:
        self._transport = transport
        self._lock = lock
        self._credentials: Credentials | None = None

    def is_valid(self) -> bool:
        return self._credentials is not None

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    async def ensure_valid(self) -> Credentials:
        """Return usable credentials, authenticating first if necessary."""
        async with self._lock:
            if self._credentials is None:
                self._credentials = await self._handshake()
            return self._credentials

    async def authenticate(self) -> Credentials:
        """Authenticate unconditionally, replacing any current credentials."""
        async with self._lock:
            self._credentials = None
            self._credentials = await self._handshake()
            return self._credentials

    async def invalidate(self, token: str | None = None) -> None:
        """Forget the current credentials.

        With ``token``, only forget them if that token is still the current
        one; a request that failed with an old token must not discard the
        result of a newer handshake.
        """
        async with self._lock:
            self._clear(token)

    def _clear(self, token: str | None) -> None:
        if self._credentials is None:
            return
        if token is not None and self._credentials.token != token:
            return
        self._credentials = None

    async def _handshake(self) -> Credentials:
        config = self._transport.config
        _, _, auth_url = config.resolve_credentials()
        debug(f"authenticating against {auth_url}")
        response = await self._transport.send_isolated(
            "GET", auth_url, headers=config.get_auth_headers()
        )
        error = classify(response.status_code, response.reason_phrase, AUTH_ERRORS)
        if error is not None:
            raise error
        headers = read_headers(response)
        storage_url = headers.get("X-Storage-Url", "")
        token = headers.get("X-Auth-Token", "")
        if not storage_url or not token:
            raise SwiftAuthError(
                "Response didn't have storage url and auth token",
                status_code=response.status_code,
            )
        return Credentials(storage_url=storage_url, token=token)


def create_thread_lock() -> SessionLock:
    return ThreadLock()


def create_async_lock() -> SessionLock:
    return asyncio.Lock()


__all__ = [
    "AuthSession",
    "Credentials",
    "SessionLock",
    "ThreadLock",
    "create_async_lock",
    "create_thread_lock",
]
