from .errors import (
    SwiftError,
    SwiftAuthError,
    AuthorizationFailed,
    SwiftNotFoundError,
    AccountNotFoundError,
    ContainerNotFoundError,
    ObjectNotFoundError,
    SwiftConflictError,
    ContainerNotEmptyError,
    ObjectCorruptedError,
    SwiftHTTPError,
    SwiftHeaderError,
)
from .headers import (
    ACCOUNT_META_PREFIX,
    CONTAINER_META_PREFIX,
    OBJECT_META_PREFIX,
    Headers,
    Metadata,
    canonical_header_key,
    to_headers,
    to_metadata,
)
from .types import Account, Container, ContainersOpts, Object, ObjectsOpts
from ._http.config import ConnectionConfig
from .client import AsyncConnection, Connection

__all__ = [
    "Connection",
    "AsyncConnection",
    "ConnectionConfig",
    "SwiftError",
    "SwiftAuthError",
    "AuthorizationFailed",
    "SwiftNotFoundError",
    "AccountNotFoundError",
    "ContainerNotFoundError",
    "ObjectNotFoundError",
    "SwiftConflictError",
    "ContainerNotEmptyError",
    "ObjectCorruptedError",
    "SwiftHTTPError",
    "SwiftHeaderError",
    "ACCOUNT_META_PREFIX",
    "CONTAINER_META_PREFIX",
    "OBJECT_META_PREFIX",
    "Headers",
    "Metadata",
    "canonical_header_key",
    "to_headers",
    "to_metadata",
    "Account",
    "Container",
    "ContainersOpts",
    "Object",
    "ObjectsOpts",
]
