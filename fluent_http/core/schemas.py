"""Response envelopes returned by terminal calls."""

import math
from typing import Any, Generic, Optional, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, computed_field

from fluent_http.errors import ConfigurationError

T = TypeVar("T")


def is_success_status(status_code: Any) -> bool:
    """Check whether a status code is in the 2xx range.

    Never raises: anything that is not an integral number is unsuccessful.
    """
    try:
        code = int(status_code)
        if code != status_code and not isinstance(status_code, str):
            return False
    except (TypeError, ValueError, OverflowError):
        return False
    return 200 <= code <= 299


def compute_page_count(total_count: int, page_size: int) -> int:
    """Number of pages needed for total_count items, 0 when either is unset."""
    if page_size > 0 and total_count > 0:
        return math.ceil(total_count / page_size)
    return 0


class PagingInfo(BaseModel):
    """Pagination metadata attached to a paged response."""

    total_count: int = Field(default=0, ge=0)
    page: int = Field(default=0, ge=0)
    page_size: int = Field(default=0, ge=0)
    page_count: int = Field(default=0, ge=0)

    @classmethod
    def build(cls, total_count: int, page: int, page_size: int) -> "PagingInfo":
        """Create paging info with the page count computed."""
        paging = cls()
        paging.set_paged_data(total_count, page, page_size)
        return paging

    def set_paged_data(self, total_count: int, page: int, page_size: int) -> None:
        """Replace all four fields at once.

        Raises:
            ConfigurationError: If any value is negative
        """
        if total_count < 0 or page < 0 or page_size < 0:
            raise ConfigurationError(
                f"Paging values must be non-negative: total_count={total_count}, "
                f"page={page}, page_size={page_size}"
            )
        page_count = compute_page_count(total_count, page_size)
        self.total_count = total_count
        self.page = page
        self.page_size = page_size
        self.page_count = page_count


class FluentHttpResponse(BaseModel, Generic[T]):
    """Normalized result of one HTTP call.

    Exactly one of error_message and response_body is populated, depending on
    whether the status code is in the 2xx range.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    status_code: int
    reason_phrase: str = ""
    request: Optional[httpx.Request] = None
    error_message: Optional[str] = None
    response_body: Optional[T] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_success_status_code(self) -> bool:
        """True when the status code is in the 200-299 range."""
        return is_success_status(self.status_code)

    def to_log_dict(self) -> dict[str, Any]:
        """Summary of the response for structured logging."""
        summary: dict[str, Any] = {
            "status_code": self.status_code,
            "reason_phrase": self.reason_phrase,
            "success": self.is_success_status_code,
        }
        if self.request is not None:
            summary["method"] = self.request.method
            summary["url"] = str(self.request.url)
        return summary


class FluentHttpPagedResponse(FluentHttpResponse[T], Generic[T]):
    """Normalized response with pagination metadata."""

    paging: PagingInfo = Field(default_factory=PagingInfo)

    def to_log_dict(self) -> dict[str, Any]:
        summary = super().to_log_dict()
        summary.update(
            total_count=self.paging.total_count,
            page=self.paging.page,
            page_count=self.paging.page_count,
        )
        return summary
