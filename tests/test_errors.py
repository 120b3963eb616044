"""Tests for error classification and tool error responses."""

import json

import urllib3.exceptions
from kubernetes.client import ApiException

from kai_mcp.utils.errors import (
    AuthorizationError,
    ConflictError,
    KaiError,
    NotConfiguredError,
    NotFoundError,
    ResourceExistsError,
    TransientError,
    ValidationError,
    is_not_found,
    translate_api_error,
)
from kai_mcp.utils.response import PaginatedResponse, error_response, paginate


class TestTranslateApiError:
    """Tests for translate_api_error."""

    def test_not_found(self) -> None:
        error = translate_api_error(ApiException(status=404), "Service", "web", "default")

        assert isinstance(error, NotFoundError)
        assert error.message == "Service 'web' not found in namespace 'default'"

    def test_already_exists(self) -> None:
        error = translate_api_error(ApiException(status=409), "Pod", "p", "default")

        assert isinstance(error, ResourceExistsError)
        assert "already exists" in error.message

    def test_forbidden(self) -> None:
        error = translate_api_error(ApiException(status=403, reason="Forbidden"), "Secret", "s")

        assert isinstance(error, AuthorizationError)

    def test_unprocessable_uses_status_message(self) -> None:
        """Verify the cluster's status message is surfaced."""
        exc = ApiException(status=422, reason="Unprocessable Entity")
        exc.body = json.dumps({"message": "spec.ports: Required value"})

        error = translate_api_error(exc, "Service", "web", "default")

        assert isinstance(error, ValidationError)
        assert "spec.ports: Required value" in error.message

    def test_server_error_is_transient(self) -> None:
        exc = ApiException(status=500, reason="Internal Server Error")

        error = translate_api_error(exc, "Deployment", "d")

        assert isinstance(error, TransientError)
        assert error.cause is exc

    def test_connection_error_is_transient(self) -> None:
        exc = urllib3.exceptions.ProtocolError("Connection aborted")

        error = translate_api_error(exc, "Pod", "p")

        assert isinstance(error, TransientError)
        assert "Could not reach the cluster" in error.message

    def test_classified_error_passed_through(self) -> None:
        original = ConflictError("bad", kind="Service")

        assert translate_api_error(original, "Pod") is original

    def test_not_found_decided_by_message(self) -> None:
        error = translate_api_error(RuntimeError('namespaces "x" not found'), "Namespace", "x")

        assert isinstance(error, NotFoundError)

    def test_is_not_found(self) -> None:
        assert is_not_found(NotFoundError("Pod", "p"))
        assert is_not_found(ApiException(status=404))
        assert not is_not_found(ApiException(status=500))


class TestErrorTypes:
    """Tests for the error hierarchy."""

    def test_to_dict_carries_identity(self) -> None:
        error = ValidationError("bad port", "Service", "web", "default", field="ports[0].port")

        assert error.to_dict() == {
            "type": "ValidationError",
            "message": "bad port",
            "kind": "Service",
            "name": "web",
            "namespace": "default",
            "field": "ports[0].port",
        }

    def test_cluster_scoped_not_found_message(self) -> None:
        assert NotFoundError("Namespace", "prod").message == "Namespace 'prod' not found"

    def test_all_errors_are_kai_errors(self) -> None:
        for error_type in (NotConfiguredError, ConflictError, AuthorizationError):
            assert issubclass(error_type, KaiError)


class TestErrorResponse:
    """Tests for error_response."""

    def test_validation_error_includes_field(self) -> None:
        response = error_response(ValidationError("bad", "Pod", "p", "ns", field="image"))

        assert response["error"] == "Invalid request"
        assert response["field"] == "image"

    def test_titles(self) -> None:
        assert error_response(NotFoundError("Pod", "p"))["error"] == "Not found"
        assert error_response(ConflictError("c"))["error"] == "Conflicting fields"
        assert error_response(NotConfiguredError("n"))["error"] == "No cluster context"
        assert error_response(TransientError("t"))["error"] == "Operation failed"


class TestPaginate:
    """Tests for paginate function."""

    def test_paginate_no_limit(self) -> None:
        """Test pagination without limit returns all items."""
        items = [1, 2, 3, 4, 5]
        result, total = paginate(items)
        assert result == items
        assert total == 5

    def test_paginate_with_offset_and_limit(self) -> None:
        """Test pagination with both offset and limit."""
        result, total = paginate([1, 2, 3, 4, 5], offset=1, limit=2)
        assert result == [2, 3]
        assert total == 5

    def test_paginate_offset_beyond_items(self) -> None:
        """Test pagination with offset beyond item count."""
        result, total = paginate([1, 2, 3], offset=10)
        assert result == []
        assert total == 3


class TestPaginatedResponse:
    """Tests for PaginatedResponse builder."""

    def test_has_more(self) -> None:
        response = PaginatedResponse.build([1, 2], total=5, offset=0, limit=2, kind="Pod")

        assert response["has_more"] is True
        assert response["kind"] == "Pod"

    def test_last_page(self) -> None:
        response = PaginatedResponse.build([5], total=5, offset=4, limit=2)

        assert response["has_more"] is False
