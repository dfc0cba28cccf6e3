"""Connection configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ..errors import SwiftError

DEFAULT_USER_AGENT = "swiftstore/1.0"
DEFAULT_RETRIES = 3
DEFAULT_TIMEOUT = 60.0


def get_retries() -> int:
    retries = os.getenv("SWIFT_RETRIES")
    try:
        return int(retries) if retries is not None else DEFAULT_RETRIES
    except ValueError:
        return DEFAULT_RETRIES


@dataclass
class ConnectionConfig:
    """Credentials and tuning for one connection.

    Some common auth URLs::

        Rackspace US        https://auth.api.rackspacecloud.com/v1.0
        Rackspace UK        https://lon.auth.api.rackspacecloud.com/v1.0
        Memset Memstore UK  https://auth.storage.memset.com/v1.0
    """

    username: str | None = None
    api_key: str | None = None
    auth_url: str | None = None
    retries: int | None = None
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if self.retries is None or self.retries <= 0:
            self.retries = get_retries()

    def resolve_credentials(self) -> tuple[str, str, str]:
        """Resolve (username, api_key, auth_url) from arguments or environment."""
        username = self.username or os.getenv("SWIFT_API_USER")
        api_key = self.api_key or os.getenv("SWIFT_API_KEY")
        auth_url = self.auth_url or os.getenv("SWIFT_AUTH_URL")
        missing = [
            name
            for name, value in (
                ("username (SWIFT_API_USER)", username),
                ("api_key (SWIFT_API_KEY)", api_key),
                ("auth_url (SWIFT_AUTH_URL)", auth_url),
            )
            if not value
        ]
        if missing:
            raise SwiftError(f"Missing Swift credentials: {', '.join(missing)}")
        return username, api_key, auth_url  # type: ignore[return-value]

    def get_auth_headers(self) -> dict[str, str]:
        username, api_key, _ = self.resolve_credentials()
        return {
            "User-Agent": self.user_agent,
            "X-Auth-User": username,
            "X-Auth-Key": api_key,
        }

    def get_default_headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}


__all__ = [
    "ConnectionConfig",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "get_retries",
]
