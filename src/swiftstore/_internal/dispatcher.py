"""Runs one logical storage operation against the authenticated storage URL."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

import httpx

from .._http.transport import BaseTransport
from ..headers import Headers, canonical_header_key, read_headers
from .classify import ERROR_MAPS, ErrorMap, ResourceClass, classify
from .session import AuthSession
from .utils import debug, quote_segment


@dataclass(frozen=True, slots=True)
class RequestSpec:
    """Description of a single storage request.

    ``retries`` of 0 means "use the connection default". ``error_map`` defaults
    to the table for ``resource_class``.
    """

    method: str
    resource_class: ResourceClass = "account"
    container: str | None = None
    object_name: str | None = None
    params: Sequence[tuple[str, str]] = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    no_response: bool = False
    retries: int = 0
    error_map: ErrorMap | None = None

    def __post_init__(self) -> None:
        if self.object_name and not self.container:
            raise ValueError("object_name requires a container")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        object.__setattr__(self, "params", tuple(self.params))
        object.__setattr__(
            self, "headers", {canonical_header_key(k): v for k, v in self.headers.items()}
        )
        if self.error_map is None:
            object.__setattr__(self, "error_map", ERROR_MAPS[self.resource_class])


@dataclass(slots=True)
class StorageResponse:
    """A successful response whose body, unless suppressed, is still open."""

    response: httpx.Response
    headers: Headers


def build_url(storage_url: str, spec: RequestSpec) -> str:
    url = storage_url
    if spec.container:
        url += "/" + quote_segment(spec.container)
        if spec.object_name:
            url += "/" + quote_segment(spec.object_name)
    if spec.params:
        encoded = urlencode(list(spec.params))
        if encoded:
            url += "?" + encoded
    return url


def _rewind_body(body: Any) -> bool:
    if body is None or isinstance(body, (bytes, bytearray, memoryview, str)):
        return True
    rewind = getattr(body, "rewind", None)
    if rewind is None:
        return False
    return bool(rewind())


class RequestDispatcher:
    """Sends requests for one connection.

    Authenticates lazily and re-authenticates when the token has expired: a
    401 invalidates the session and the request is sent again, at most
    ``retries`` times. Nothing else is retried; transport errors propagate
    as raised by httpx.
    """

    def __init__(self, transport: BaseTransport, session: AuthSession) -> None:
        self._transport = transport
        self._session = session

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    def _build_headers(self, spec: RequestSpec, token: str) -> dict[str, str]:
        headers = self._transport.config.get_default_headers()
        headers.update(spec.headers)
        headers["X-Auth-Token"] = token
        return headers

    async def execute(self, spec: RequestSpec) -> StorageResponse:
        """Run ``spec`` and return the response.

        If ``spec.no_response`` is set the body has been drained and closed;
        otherwise the caller must release the response.
        """
        retries = spec.retries or self._transport.config.retries or 0
        while True:
            credentials = await self._session.ensure_valid()
            response = await self._transport.send(
                spec.method,
                build_url(credentials.storage_url, spec),
                headers=self._build_headers(spec, credentials.token),
                content=spec.body,
            )
            if response.status_code != 401 or retries <= 0:
                break
            if not _rewind_body(spec.body):
                debug("token expired but the request body cannot be replayed")
                break
            await self._transport.close_response(response)
            debug(f"token expired, re-authenticating ({retries} retries left)")
            await self._session.invalidate(credentials.token)
            retries -= 1

        try:
            error = classify(response.status_code, response.reason_phrase, spec.error_map)
            if error is not None:
                raise error
            headers = read_headers(response)
            if spec.no_response:
                await self._transport.read_response(response)
        except BaseException:
            await self._transport.close_response(response)
            raise
        return StorageResponse(response=response, headers=headers)


__all__ = [
    "RequestDispatcher",
    "RequestSpec",
    "StorageResponse",
    "build_url",
]
