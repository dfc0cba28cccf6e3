"""Shared fixtures for all tests."""

from collections.abc import Generator

import httpx
import pytest
import respx

AUTH_URL = "https://auth.example.com/v1.0"
STORAGE_HOST = "storage.example.com"
STORAGE_PATH = "/v1/AUTH_test"
STORAGE_URL = f"https://{STORAGE_HOST}{STORAGE_PATH}"

USERNAME = "test_user"
API_KEY = "test_api_key_123456789"


@pytest.fixture
def mock_env_clear(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear all Swift-related environment variables for testing.

    This ensures tests don't accidentally use real credentials from the environment.
    """
    env_vars_to_clear = [
        "SWIFT_API_USER",
        "SWIFT_API_KEY",
        "SWIFT_AUTH_URL",
        "SWIFT_RETRIES",
        "DEBUG",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def credentials() -> dict[str, str]:
    """Keyword arguments for building a connection against the mocked service."""
    return {"username": USERNAME, "api_key": API_KEY, "auth_url": AUTH_URL}


class TokenIssuer:
    """Auth endpoint handler that issues tok-1, tok-2, ... and counts handshakes."""

    def __init__(self) -> None:
        self.handshakes = 0

    @property
    def token(self) -> str:
        return f"tok-{self.handshakes}"

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.handshakes += 1
        return httpx.Response(
            200,
            headers={"X-Storage-Url": STORAGE_URL, "X-Auth-Token": self.token},
        )


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer()


@pytest.fixture
def swift_mock(mock_env_clear, token_issuer) -> Generator[respx.MockRouter, None, None]:
    """Mock router with the auth endpoint wired to ``token_issuer``."""
    with respx.mock(assert_all_called=False) as mock:
        mock.get(AUTH_URL, name="auth").mock(side_effect=token_issuer)
        yield mock


def storage_route(
    mock: respx.MockRouter, method: str, suffix: str = "", **kwargs
) -> respx.Route:
    """Route for ``method`` on ``STORAGE_URL + suffix``, ignoring the query string."""
    return mock.route(method=method, host=STORAGE_HOST, path=STORAGE_PATH + suffix, **kwargs)
