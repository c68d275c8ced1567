"""Tests for response envelopes and paging info."""

from http import HTTPStatus

import httpx
import pytest
from pydantic import ValidationError

from fluent_http.core.schemas import (
    FluentHttpPagedResponse,
    FluentHttpResponse,
    PagingInfo,
    compute_page_count,
    is_success_status,
)
from fluent_http.errors import ConfigurationError


class TestIsSuccessStatus:
    """Tests for the 2xx success check."""

    @pytest.mark.parametrize("code", [200, 201, 204, 250, 299])
    def test_success_range(self, code):
        """Test every 2xx code is successful."""
        assert is_success_status(code) is True

    @pytest.mark.parametrize("code", [0, 100, 199, 300, 301, 404, 500, 599, -200, 10**6])
    def test_outside_range(self, code):
        """Test codes outside 200-299 are unsuccessful."""
        assert is_success_status(code) is False

    @pytest.mark.parametrize("code", [None, "abc", "", 200.5, float("nan"), float("inf"), object(), [200]])
    def test_invalid_values_do_not_raise(self, code):
        """Test junk status codes are unsuccessful instead of raising."""
        assert is_success_status(code) is False

    def test_http_status_enum(self):
        """Test HTTPStatus members are accepted."""
        assert is_success_status(HTTPStatus.CREATED) is True
        assert is_success_status(HTTPStatus.NOT_FOUND) is False


class TestPageCount:
    """Tests for page count computation."""

    @pytest.mark.parametrize(
        "total_count,page_size,expected",
        [
            (97, 10, 10),
            (100, 10, 10),
            (101, 10, 11),
            (1, 1, 1),
            (5, 100, 1),
            (0, 10, 0),
            (10, 0, 0),
            (0, 0, 0),
        ],
    )
    def test_compute_page_count(self, total_count, page_size, expected):
        """Test ceil(total / size), or 0 when either is unset."""
        assert compute_page_count(total_count, page_size) == expected


class TestPagingInfo:
    """Tests for PagingInfo."""

    def test_defaults(self):
        """Test a fresh PagingInfo is all zeros."""
        paging = PagingInfo()

        assert paging.total_count == 0
        assert paging.page == 0
        assert paging.page_size == 0
        assert paging.page_count == 0

    def test_build(self):
        """Test build computes the page count."""
        paging = PagingInfo.build(total_count=97, page=3, page_size=10)

        assert paging.total_count == 97
        assert paging.page == 3
        assert paging.page_size == 10
        assert paging.page_count == 10

    def test_set_paged_data_replaces_all_fields(self):
        """Test set_paged_data recomputes every field."""
        paging = PagingInfo.build(total_count=97, page=3, page_size=10)
        paging.set_paged_data(total_count=0, page=1, page_size=25)

        assert paging.total_count == 0
        assert paging.page == 1
        assert paging.page_size == 25
        assert paging.page_count == 0

    def test_negative_values_rejected_without_partial_update(self):
        """Test negative input leaves the paging untouched."""
        paging = PagingInfo.build(total_count=40, page=2, page_size=20)

        with pytest.raises(ConfigurationError):
            paging.set_paged_data(total_count=-1, page=1, page_size=10)

        assert paging.total_count == 40
        assert paging.page == 2
        assert paging.page_size == 20
        assert paging.page_count == 2


class TestFluentHttpResponse:
    """Tests for the response envelope."""

    def test_success_envelope(self):
        """Test successful envelope exposes the body and no error."""
        request = httpx.Request("GET", "http://api.test/pets")
        response = FluentHttpResponse(
            status_code=200,
            reason_phrase="OK",
            request=request,
            response_body={"id": 1},
        )

        assert response.is_success_status_code is True
        assert response.response_body == {"id": 1}
        assert response.error_message is None
        assert response.request is request

    def test_failure_envelope(self):
        """Test failed envelope exposes the error text only."""
        response = FluentHttpResponse(status_code=404, reason_phrase="Not Found", error_message="missing")

        assert response.is_success_status_code is False
        assert response.error_message == "missing"
        assert response.response_body is None

    def test_envelope_is_frozen(self):
        """Test envelopes cannot be modified after construction."""
        response = FluentHttpResponse(status_code=200, response_body="ok")

        with pytest.raises(ValidationError):
            response.status_code = 500

    def test_to_log_dict(self):
        """Test log summary includes method and url."""
        request = httpx.Request("DELETE", "http://api.test/pets/1")
        response = FluentHttpResponse(status_code=204, reason_phrase="No Content", request=request)

        summary = response.to_log_dict()

        assert summary["method"] == "DELETE"
        assert summary["url"] == "http://api.test/pets/1"
        assert summary["status_code"] == 204
        assert summary["success"] is True

    def test_paged_envelope_defaults(self):
        """Test paged envelopes own a fresh default PagingInfo."""
        first = FluentHttpPagedResponse(status_code=500, error_message="boom")
        second = FluentHttpPagedResponse(status_code=500, error_message="boom")

        assert first.paging == PagingInfo()
        assert first.paging is not second.paging
        assert first.to_log_dict()["page_count"] == 0
