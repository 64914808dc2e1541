"""Tests for api/base.py - Unified API response format."""

from datetime import timezone

from api.base import (
    success_response,
    error_response,
    ErrorCodes,
)


class TestSuccessResponse:
    """Tests for success_response()."""

    def test_structure(self):
        resp = success_response({"foo": "bar"})
        assert resp.success is True
        assert resp.data == {"foo": "bar"}
        assert resp.error is None

    def test_request_id_generated(self):
        resp = success_response({})
        assert resp.meta.request_id is not None
        assert len(resp.meta.request_id) > 0

    def test_timestamp_is_utc(self):
        resp = success_response({})
        assert resp.meta.timestamp.tzinfo == timezone.utc


class TestErrorResponse:
    """Tests for error_response()."""

    def test_structure(self):
        resp = error_response("TEST_ERROR", "Something went wrong")
        assert resp.success is False
        assert resp.data is None
        assert resp.error.code == "TEST_ERROR"
        assert resp.error.message == "Something went wrong"

    def test_request_id_generated(self):
        resp = error_response("ERR", "msg")
        assert resp.meta.request_id is not None
        assert len(resp.meta.request_id) > 0

    def test_timestamp_is_utc(self):
        resp = error_response("ERR", "msg")
        assert resp.meta.timestamp.tzinfo == timezone.utc


class TestErrorCodes:
    """Error codes clients rely on."""

    def test_has_internal_error(self):
        assert ErrorCodes.INTERNAL_ERROR == "INTERNAL_ERROR"

    def test_has_not_found(self):
        assert ErrorCodes.NOT_FOUND == "NOT_FOUND"

    def test_has_validation_error(self):
        assert ErrorCodes.VALIDATION_ERROR == "VALIDATION_ERROR"

    def test_has_invalid_request(self):
        assert ErrorCodes.INVALID_REQUEST == "INVALID_REQUEST"

    def test_has_quotation_required(self):
        assert ErrorCodes.QUOTATION_REQUIRED == "QUOTATION_REQUIRED"

    def test_has_service_unavailable(self):
        assert ErrorCodes.SERVICE_UNAVAILABLE == "SERVICE_UNAVAILABLE"


class TestEnvelopeSerialization:
    """The envelope as it goes over the wire."""

    def test_explicit_request_id_kept(self):
        resp = success_response({}, request_id="req-123")
        assert resp.meta.request_id == "req-123"

    def test_breakdown_decimals_serialize_as_strings(self):
        from decimal import Decimal
        from core.models import PriceBreakdown

        breakdown = PriceBreakdown(base_price=Decimal("2000"), total=Decimal("2360"))
        data = success_response({"breakdown": breakdown.model_dump(mode="json")}).model_dump(mode="json")

        assert data["data"]["breakdown"]["total"] == "2360"
        assert data["data"]["breakdown"]["display_total"] == 2360
        assert data["error"] is None
