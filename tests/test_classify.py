"""Tests for mapping HTTP statuses to errors per resource class."""

import pytest

from swiftstore.errors import (
    AccountNotFoundError,
    AuthorizationFailed,
    ContainerNotEmptyError,
    ContainerNotFoundError,
    ObjectCorruptedError,
    ObjectNotFoundError,
    SwiftAuthError,
    SwiftError,
    SwiftHTTPError,
    SwiftHeaderError,
    SwiftNotFoundError,
)
from swiftstore._internal.classify import (
    ACCOUNT_ERRORS,
    AUTH_ERRORS,
    CONTAINER_ERRORS,
    ERROR_MAPS,
    OBJECT_ERRORS,
    classify,
)


class TestClassify:
    """Test classify() against the resource tables."""

    @pytest.mark.parametrize("status", [200, 201, 202, 204, 299])
    def test_success_statuses(self, status):
        for error_map in ERROR_MAPS.values():
            assert classify(status, "OK", error_map) is None

    def test_table_entry_wins(self):
        error = classify(404, "Not Found", CONTAINER_ERRORS)
        assert isinstance(error, ContainerNotFoundError)
        assert error.status_code == 404
        assert error.text == "Container Not Found"

    def test_same_status_differs_by_resource(self):
        assert isinstance(classify(409, "Conflict", CONTAINER_ERRORS), ContainerNotEmptyError)

        error = classify(409, "Conflict", OBJECT_ERRORS)
        assert type(error) is SwiftHTTPError
        assert error.status_code == 409

    def test_404_per_resource(self):
        assert isinstance(classify(404, "", ACCOUNT_ERRORS), AccountNotFoundError)
        assert isinstance(classify(404, "", CONTAINER_ERRORS), ContainerNotFoundError)
        assert isinstance(classify(404, "", OBJECT_ERRORS), ObjectNotFoundError)

    def test_422_is_object_corruption(self):
        assert isinstance(classify(422, "Unprocessable Entity", OBJECT_ERRORS), ObjectCorruptedError)

    @pytest.mark.parametrize("error_map", [AUTH_ERRORS, ACCOUNT_ERRORS, CONTAINER_ERRORS, OBJECT_ERRORS])
    def test_401_is_authorization_failed(self, error_map):
        error = classify(401, "Unauthorized", error_map)
        assert isinstance(error, AuthorizationFailed)
        assert error.status_code == 401

    def test_unmapped_status_is_generic(self):
        error = classify(503, "Service Unavailable", OBJECT_ERRORS)
        assert isinstance(error, SwiftHTTPError)
        assert error.status_code == 503
        assert error.reason == "Service Unavailable"
        assert str(error) == "HTTP Error: 503: 503 Service Unavailable"

    def test_no_table(self):
        assert classify(204, "", None) is None
        assert isinstance(classify(404, "Not Found", None), SwiftHTTPError)


class TestErrors:
    """Test the error hierarchy."""

    def test_hierarchy(self):
        assert issubclass(AuthorizationFailed, SwiftAuthError)
        assert issubclass(ObjectNotFoundError, SwiftNotFoundError)
        for cls in (SwiftAuthError, SwiftNotFoundError, ObjectCorruptedError, SwiftHTTPError):
            assert issubclass(cls, SwiftError)

    def test_custom_text(self):
        error = SwiftAuthError("Response didn't have storage url and auth token", status_code=200)
        assert error.status_code == 200
        assert str(error) == "Response didn't have storage url and auth token"

    def test_header_error(self):
        error = SwiftHeaderError("Content-Length", "abc")
        assert error.status_code == 0
        assert str(error) == "Bad Header 'Content-Length': 'abc'"

    def test_repr(self):
        assert repr(ObjectCorruptedError()) == (
            "ObjectCorruptedError(status_code=422, text='Object Corrupted')"
        )
