"""Response envelopes, paging and normalization."""

from fluent_http.core.normalizer import normalize_paged_response, normalize_response
from fluent_http.core.paging import BodyShape, Paginable, read_total_count
from fluent_http.core.schemas import (
    FluentHttpPagedResponse,
    FluentHttpResponse,
    PagingInfo,
    compute_page_count,
    is_success_status,
)

__all__ = [
    "BodyShape",
    "FluentHttpPagedResponse",
    "FluentHttpResponse",
    "Paginable",
    "PagingInfo",
    "compute_page_count",
    "is_success_status",
    "normalize_paged_response",
    "normalize_response",
    "read_total_count",
]
