"""Status code to error mapping, per kind of resource addressed."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from ..errors import (
    AccountNotFoundError,
    AuthorizationFailed,
    ContainerNotEmptyError,
    ContainerNotFoundError,
    ObjectCorruptedError,
    ObjectNotFoundError,
    SwiftError,
    SwiftHTTPError,
)

ResourceClass = Literal["account", "container", "object"]
ErrorMap = Mapping[int, type[SwiftError]]

AUTH_ERRORS: ErrorMap = {
    401: AuthorizationFailed,
}

ACCOUNT_ERRORS: ErrorMap = {
    401: AuthorizationFailed,
    404: AccountNotFoundError,
}

CONTAINER_ERRORS: ErrorMap = {
    401: AuthorizationFailed,
    404: ContainerNotFoundError,
    409: ContainerNotEmptyError,
}

OBJECT_ERRORS: ErrorMap = {
    401: AuthorizationFailed,
    404: ObjectNotFoundError,
    422: ObjectCorruptedError,
}

ERROR_MAPS: dict[ResourceClass, ErrorMap] = {
    "account": ACCOUNT_ERRORS,
    "container": CONTAINER_ERRORS,
    "object": OBJECT_ERRORS,
}


def classify(status_code: int, reason: str, error_map: ErrorMap | None) -> SwiftError | None:
    """Return the error for ``status_code``, or None when it is a success.

    A resource-specific entry wins over the generic 2xx check, so a table
    can turn any status into a specific error.
    """
    if error_map is not None:
        error_cls = error_map.get(status_code)
        if error_cls is not None:
            return error_cls()
    if 200 <= status_code <= 299:
        return None
    return SwiftHTTPError(status_code, reason)


__all__ = [
    "ACCOUNT_ERRORS",
    "AUTH_ERRORS",
    "CONTAINER_ERRORS",
    "ERROR_MAPS",
    "ErrorMap",
    "OBJECT_ERRORS",
    "ResourceClass",
    "classify",
]
