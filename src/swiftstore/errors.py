"""Exceptions raised by swiftstore.

Every error generated by this package is a :class:`SwiftError`. Transport
errors from httpx (``httpx.TransportError`` and subclasses) are passed through
unmodified.
"""

from __future__ import annotations


class SwiftError(Exception):
    """Base error. ``status_code`` is the HTTP status if relevant, else 0."""

    default_status: int = 0
    default_text: str = "Swift Error"

    def __init__(self, text: str | None = None, *, status_code: int | None = None) -> None:
        self.text = text if text is not None else self.default_text
        self.status_code = status_code if status_code is not None else self.default_status
        super().__init__(self.text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, text={self.text!r})"


class SwiftAuthError(SwiftError):
    default_status = 401
    default_text = "Authorization Failed"


class AuthorizationFailed(SwiftAuthError):
    """The service rejected the credentials or token (HTTP 401)."""


class SwiftNotFoundError(SwiftError):
    default_status = 404
    default_text = "Resource Not Found"


class AccountNotFoundError(SwiftNotFoundError):
    default_text = "Account Not Found"


class ContainerNotFoundError(SwiftNotFoundError):
    default_text = "Container Not Found"


class ObjectNotFoundError(SwiftNotFoundError):
    default_text = "Object Not Found"


class SwiftConflictError(SwiftError):
    default_status = 409
    default_text = "Resource Conflict"


class ContainerNotEmptyError(SwiftConflictError):
    default_text = "Container Not Empty"


class ObjectCorruptedError(SwiftError):
    """Checksum or length mismatch on a transfer that otherwise succeeded."""

    default_status = 422
    default_text = "Object Corrupted"


class SwiftHTTPError(SwiftError):
    """Any non-2xx status with no resource-specific meaning."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        status = f"{status_code} {reason}".rstrip()
        super().__init__(f"HTTP Error: {status_code}: {status}", status_code=status_code)
        self.reason = reason


class SwiftHeaderError(SwiftError):
    """A header the client relies on was missing or could not be parsed."""

    def __init__(self, header: str, value: str | None, cause: Exception | None = None) -> None:
        message = f"Bad Header '{header}': '{value or ''}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, status_code=0)
        self.header = header
        self.value = value


__all__ = [
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
]
