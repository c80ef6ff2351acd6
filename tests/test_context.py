"""
Tests for request preparation and upstream error mapping.
"""

import pytest

from dreamfactory.context import ApiContext
from dreamfactory.errors import NotFoundError, UpstreamError
from dreamfactory.http.facade import HttpMethod, HttpResponse
from dreamfactory.models import AppRequest
from tests.constants import API_ROOT

# =============================================================================
# PREPARE TESTS
# =============================================================================


class TestPrepare:
    """Tests for ApiContext.prepare()."""

    def test_request_without_body(self, context: ApiContext):
        """Test that a bodiless request has no content type."""
        request = context.prepare(HttpMethod.GET, "system/app", 3)

        assert request.url == f"{API_ROOT}/system/app/3"
        assert request.body is None
        assert "Content-Type" not in request.headers
        assert request.headers["Accept"] == "application/json"

    def test_request_with_body(self, context: ApiContext):
        """Test that a body is encoded and labeled."""
        request = context.prepare(HttpMethod.POST, "system/app", body=[AppRequest(name="x")])

        assert request.body == b'[{"name":"x"}]'
        assert request.headers["Content-Type"] == "application/json"

    def test_headers_are_a_snapshot(self, context: ApiContext):
        """Test that later header changes do not affect a prepared request."""
        request = context.prepare(HttpMethod.GET, "system/app")
        context.headers.set("X-Later", "1")

        assert "X-Later" not in request.headers


# =============================================================================
# ERROR MAPPING TESTS
# =============================================================================


class TestErrorFromResponse:
    """Tests for ApiContext.error_from_response()."""

    @pytest.mark.parametrize(
        ("body", "message"),
        [
            (b'{"error": {"code": 400, "message": "Invalid filter."}}', "Invalid filter."),
            (b'{"error": [{"code": 500, "message": "First failure"}]}', "First failure"),
            (b'{"error": "Plain message"}', "Plain message"),
            (b'{"message": "Top-level message"}', "Top-level message"),
        ],
    )
    def test_error_shapes(self, context: ApiContext, body, message):
        """Test that the known error body shapes yield their message."""
        error = context.error_from_response(HttpResponse(400, body))

        assert type(error) is UpstreamError
        assert error.status_code == 400
        assert error.message == message

    @pytest.mark.parametrize(
        "body", [b"", b"<html>502 Bad Gateway</html>", b'{"error": {"code": 500}}', b"[]"]
    )
    def test_unparseable_bodies_fall_back(self, context: ApiContext, body):
        """Test that bodies without a usable message fall back to the status."""
        error = context.error_from_response(HttpResponse(502, body))

        assert error.status_code == 502
        assert "502" in error.message

    def test_payload_is_kept(self, context: ApiContext):
        """Test that the decoded error body is attached to the exception."""
        error = context.error_from_response(
            HttpResponse(409, b'{"error": {"code": 409, "message": "Duplicate"}}')
        )

        assert error.payload == {"error": {"code": 409, "message": "Duplicate"}}
        assert str(error) == "409: Duplicate"

    def test_not_found_only_when_requested(self, context: ApiContext):
        """Test that 404 maps to NotFoundError only when asked for."""
        response = HttpResponse(404, b'{"error": "Record not found"}')

        assert type(context.error_from_response(response)) is UpstreamError
        assert isinstance(context.error_from_response(response, not_found=True), NotFoundError)

    @pytest.mark.asyncio
    async def test_execute_raises_for_non_success(self, context: ApiContext, facade):
        """Test that execute() raises for a non-2xx status."""
        facade.add("GET", "system/app", status=500, json={"error": "boom"})

        with pytest.raises(UpstreamError, match="boom"):
            await context.execute(context.prepare(HttpMethod.GET, "system/app"))
