"""Header and metadata containers.

Swift returns at most one value per header and carries user metadata in
prefixed headers (``X-Object-Meta-Color: blue``). :class:`Headers` holds
canonically-cased header names; :class:`Metadata` holds the lower-cased keys
with the prefix stripped. Converting metadata to headers and back yields the
same mapping for lower-case keys; the original case of a key is not kept.
"""

from __future__ import annotations

import string
from collections.abc import Mapping

import httpx

from ._internal.utils import debug

ACCOUNT_META_PREFIX = "X-Account-Meta-"
CONTAINER_META_PREFIX = "X-Container-Meta-"
OBJECT_META_PREFIX = "X-Object-Meta-"

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def canonical_header_key(key: str) -> str:
    """Return ``key`` in canonical form, e.g. ``x-object-meta-foo`` -> ``X-Object-Meta-Foo``.

    Keys containing characters that are not valid in a header name are
    returned unchanged.
    """
    if not key or any(ch not in _TOKEN_CHARS for ch in key):
        return key
    parts = []
    upper = True
    for ch in key:
        parts.append(ch.upper() if upper else ch.lower())
        upper = ch == "-"
    return "".join(parts)


class Headers(dict[str, str]):
    """HTTP headers, one value per canonical header name."""

    def metadata(self, prefix: str) -> Metadata:
        return to_metadata(self, prefix)

    def account_metadata(self) -> Metadata:
        return self.metadata(ACCOUNT_META_PREFIX)

    def container_metadata(self) -> Metadata:
        return self.metadata(CONTAINER_META_PREFIX)

    def object_metadata(self) -> Metadata:
        return self.metadata(OBJECT_META_PREFIX)


class Metadata(dict[str, str]):
    """Account, container or object metadata keyed by lower-case name."""

    def headers(self, prefix: str) -> Headers:
        return to_headers(self, prefix)

    def account_headers(self) -> Headers:
        return self.headers(ACCOUNT_META_PREFIX)

    def container_headers(self) -> Headers:
        return self.headers(CONTAINER_META_PREFIX)

    def object_headers(self) -> Headers:
        return self.headers(OBJECT_META_PREFIX)


def to_metadata(headers: Mapping[str, str], prefix: str) -> Metadata:
    """Extract the metadata carried in ``headers`` under ``prefix``.

    The prefix matches regardless of case, also on keys that cannot be
    canonicalized.
    """
    prefix = prefix.lower()
    metadata = Metadata()
    for key, value in headers.items():
        if key.lower().startswith(prefix):
            metadata[key[len(prefix) :].lower()] = value
    return metadata


def to_headers(metadata: Mapping[str, str], prefix: str) -> Headers:
    """Turn ``metadata`` into headers named ``prefix + key`` in canonical case."""
    prefix = canonical_header_key(prefix)
    headers = Headers()
    for key, value in metadata.items():
        name = canonical_header_key(prefix + key)
        if not name.startswith(prefix):
            # Not a valid token, so only the prefix could be canonicalized
            name = prefix + key
        headers[name] = value
    return headers


def read_headers(response: httpx.Response) -> Headers:
    """Copy the response headers into a :class:`Headers`.

    Swift never sends a header twice; if it happens anyway the first value
    wins and a debug diagnostic is emitted.
    """
    headers = Headers()
    for key, value in response.headers.multi_items():
        key = canonical_header_key(key)
        if key in headers:
            debug(f"received multiple values for header {key!r}")
            continue
        headers[key] = value
    return headers


__all__ = [
    "ACCOUNT_META_PREFIX",
    "CONTAINER_META_PREFIX",
    "OBJECT_META_PREFIX",
    "Headers",
    "Metadata",
    "canonical_header_key",
    "read_headers",
    "to_headers",
    "to_metadata",
]
