"""Tests for request dispatch: URL building and the re-authentication retry."""

import hashlib
import io

import httpx
import pytest

from swiftstore import AsyncConnection, Connection
from swiftstore.errors import AuthorizationFailed, ContainerNotFoundError
from swiftstore._internal.classify import CONTAINER_ERRORS, OBJECT_ERRORS
from swiftstore._internal.dispatcher import RequestSpec, build_url

from conftest import STORAGE_URL, storage_route

ACCOUNT_HEADERS = {
    "X-Account-Bytes-Used": "10",
    "X-Account-Container-Count": "1",
    "X-Account-Object-Count": "2",
}


class ExpiringToken:
    """Storage handler answering 401 to the first ``failures`` requests."""

    def __init__(self, failures: int, response: httpx.Response | None = None) -> None:
        self.failures = failures
        self.response = response or httpx.Response(204, headers=ACCOUNT_HEADERS)
        self.tokens: list[str] = []
        self.bodies: list[bytes] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.tokens.append(request.headers["X-Auth-Token"])
        self.bodies.append(request.read())
        if len(self.tokens) <= self.failures:
            return httpx.Response(401)
        return self.response


class TestRequestSpec:
    def test_defaults(self):
        spec = RequestSpec(method="HEAD")
        assert spec.resource_class == "account"
        assert spec.retries == 0
        assert spec.no_response is False

    def test_error_map_from_resource_class(self):
        assert RequestSpec(method="GET", resource_class="object", container="c", object_name="o").error_map is OBJECT_ERRORS

    def test_explicit_error_map(self):
        spec = RequestSpec(method="GET", error_map=CONTAINER_ERRORS)
        assert spec.error_map is CONTAINER_ERRORS

    def test_object_requires_container(self):
        with pytest.raises(ValueError):
            RequestSpec(method="GET", resource_class="object", object_name="o")

    def test_negative_retries(self):
        with pytest.raises(ValueError):
            RequestSpec(method="GET", retries=-1)

    def test_headers_canonicalized_last_wins(self):
        spec = RequestSpec(
            method="PUT",
            headers={"content-type": "text/plain", "Content-Type": "image/png"},
        )
        assert spec.headers == {"Content-Type": "image/png"}


class TestBuildUrl:
    def test_account(self):
        assert build_url(STORAGE_URL, RequestSpec(method="HEAD")) == STORAGE_URL

    def test_container_and_object(self):
        spec = RequestSpec(
            method="GET",
            resource_class="object",
            container="photos",
            object_name="2020/summer beach.jpg",
        )
        assert build_url(STORAGE_URL, spec) == f"{STORAGE_URL}/photos/2020/summer%20beach.jpg"

    def test_params(self):
        spec = RequestSpec(
            method="GET",
            container="photos",
            params=[("prefix", "a b"), ("delimiter", "/"), ("format", "json")],
        )
        assert build_url(STORAGE_URL, spec) == (
            f"{STORAGE_URL}/photos?prefix=a+b&delimiter=%2F&format=json"
        )


class TestReauthentication:
    """A 401 invalidates the token and the request is sent again, a bounded number of times."""

    @pytest.mark.parametrize("failures", [1, 2, 3])
    def test_retries_until_success(self, swift_mock, credentials, token_issuer, failures):
        handler = ExpiringToken(failures)
        storage_route(swift_mock, "HEAD").mock(side_effect=handler)

        with Connection(**credentials, retries=failures) as conn:
            info, _ = conn.account()

        assert info.containers == 1
        assert token_issuer.handshakes == failures + 1
        # Each attempt carries the token from the latest handshake
        assert handler.tokens == [f"tok-{i}" for i in range(1, failures + 2)]

    def test_budget_exhausted(self, swift_mock, credentials, token_issuer):
        handler = ExpiringToken(failures=3)
        storage_route(swift_mock, "HEAD").mock(side_effect=handler)

        with Connection(**credentials, retries=2) as conn:
            with pytest.raises(AuthorizationFailed):
                conn.account()

        assert token_issuer.handshakes == 3
        assert len(handler.tokens) == 3

    def test_default_budget_from_environment(self, swift_mock, credentials, token_issuer, monkeypatch):
        monkeypatch.setenv("SWIFT_RETRIES", "1")
        handler = ExpiringToken(failures=5)
        storage_route(swift_mock, "HEAD").mock(side_effect=handler)

        with Connection(**credentials) as conn:
            assert conn.config.retries == 1
            with pytest.raises(AuthorizationFailed):
                conn.account()

        assert len(handler.tokens) == 2

    def test_other_errors_not_retried(self, swift_mock, credentials, token_issuer):
        route = storage_route(swift_mock, "HEAD", "/missing").mock(
            return_value=httpx.Response(404)
        )

        with Connection(**credentials) as conn:
            with pytest.raises(ContainerNotFoundError):
                conn.container("missing")

        assert route.call_count == 1
        assert token_issuer.handshakes == 1

    def test_transport_errors_not_retried(self, swift_mock, credentials, token_issuer):
        route = storage_route(swift_mock, "HEAD").mock(side_effect=httpx.ConnectError("reset"))

        with Connection(**credentials) as conn:
            with pytest.raises(httpx.ConnectError):
                conn.account()

        assert route.call_count == 1
        assert token_issuer.handshakes == 1

    def test_token_kept_after_transport_error(self, swift_mock, credentials, token_issuer):
        storage_route(swift_mock, "HEAD").mock(
            side_effect=[httpx.ConnectError("reset"), httpx.Response(204, headers=ACCOUNT_HEADERS)]
        )

        with Connection(**credentials) as conn:
            with pytest.raises(httpx.ConnectError):
                conn.account()
            conn.account()

        assert token_issuer.handshakes == 1

    def test_seekable_body_replayed(self, swift_mock, credentials, token_issuer):
        data = b"replayable contents"
        handler = ExpiringToken(
            failures=1,
            response=httpx.Response(201, headers={"Etag": hashlib.md5(data).hexdigest()}),
        )
        storage_route(swift_mock, "PUT", "/c/o.bin").mock(side_effect=handler)

        with Connection(**credentials) as conn:
            conn.object_put("c", "o.bin", io.BytesIO(data))

        assert handler.bodies == [data, data]
        assert token_issuer.handshakes == 2

    def test_one_shot_body_not_replayed(self, swift_mock, credentials, token_issuer):
        handler = ExpiringToken(failures=1, response=httpx.Response(201))
        storage_route(swift_mock, "PUT", "/c/o.bin").mock(side_effect=handler)

        def chunks():
            yield b"one "
            yield b"shot"

        with Connection(**credentials) as conn:
            with pytest.raises(AuthorizationFailed):
                conn.object_put("c", "o.bin", chunks())

        assert handler.bodies == [b"one shot"]
        assert token_issuer.handshakes == 1

    @pytest.mark.asyncio
    async def test_async_retry(self, swift_mock, credentials, token_issuer):
        handler = ExpiringToken(failures=1)
        storage_route(swift_mock, "HEAD").mock(side_effect=handler)

        async with AsyncConnection(**credentials) as conn:
            info, _ = await conn.account()

        assert info.objects == 2
        assert token_issuer.handshakes == 2
        assert handler.tokens == ["tok-1", "tok-2"]


class TestRequestHeaders:
    def test_token_and_user_agent(self, swift_mock, credentials):
        route = storage_route(swift_mock, "HEAD").mock(
            return_value=httpx.Response(204, headers=ACCOUNT_HEADERS)
        )

        with Connection(**credentials, user_agent="backup-tool/2.0") as conn:
            conn.account()

        request = route.calls.last.request
        assert request.headers["X-Auth-Token"] == "tok-1"
        assert request.headers["User-Agent"] == "backup-tool/2.0"
        assert swift_mock["auth"].calls.last.request.headers["User-Agent"] == "backup-tool/2.0"

    def test_caller_cannot_override_token(self, swift_mock, credentials):
        route = storage_route(swift_mock, "POST").mock(return_value=httpx.Response(204))

        with Connection(**credentials) as conn:
            conn.account_update({"x-auth-token": "forged", "X-Account-Meta-A": "1"})

        request = route.calls.last.request
        assert request.headers["X-Auth-Token"] == "tok-1"
        assert request.headers["X-Account-Meta-A"] == "1"
