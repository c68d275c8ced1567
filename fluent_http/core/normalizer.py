"""Mapping of raw HTTP responses into response envelopes."""

from typing import Any

import httpx

from fluent_http.core.paging import BodyShape, read_total_count
from fluent_http.core.schemas import (
    FluentHttpPagedResponse,
    FluentHttpResponse,
    PagingInfo,
    is_success_status,
)
from fluent_http.serialization import Serializer, negotiate_media_type
from fluent_http.utils.logging import get_logger

logger = get_logger(__name__)

_default_serializer = Serializer()


def _read_body(
    response: httpx.Response,
    response_type: Any,
    accept: str | None,
    serializer: Serializer,
) -> Any:
    """Convert a successful response body into response_type.

    An empty body (204, body-less 201) yields None for typed reads.
    """
    if response_type is str:
        return response.text
    if response_type is bytes:
        return response.content
    if not response.content:
        return None

    media_type = negotiate_media_type(response.headers.get("content-type"), accept)
    return serializer.deserialize(
        response.content,
        response_type,
        media_type,
        status_code=response.status_code,
    )


def _request_of(response: httpx.Response) -> httpx.Request | None:
    try:
        return response.request
    except RuntimeError:
        # Responses built without a request (tests, manual construction)
        return None


def normalize_response(
    response: httpx.Response,
    response_type: Any = str,
    *,
    accept: str | None = None,
    serializer: Serializer | None = None,
) -> FluentHttpResponse:
    """Build the envelope for a response whose body has been read.

    Unsuccessful status codes are captured as error_message and never raised.

    Args:
        response: Response with its body already read
        response_type: Type to deserialize a successful body into
        accept: Accept media type sent with the request
        serializer: Serializer to use for typed bodies

    Returns:
        Response envelope

    Raises:
        DeserializationError: If a successful body does not match response_type
    """
    serializer = serializer or _default_serializer

    if not is_success_status(response.status_code):
        return FluentHttpResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            request=_request_of(response),
            error_message=response.text,
        )

    return FluentHttpResponse(
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        request=_request_of(response),
        response_body=_read_body(response, response_type, accept, serializer),
    )


def normalize_paged_response(
    response: httpx.Response,
    item_type: Any,
    *,
    page: int,
    page_size: int,
    shape: BodyShape = BodyShape.COLLECTION,
    accept: str | None = None,
    serializer: Serializer | None = None,
) -> FluentHttpPagedResponse:
    """Build a paged envelope for a response whose body has been read.

    With BodyShape.COLLECTION the body is parsed as list[item_type] and the
    first item reports the total count; with BodyShape.SINGLE the body is
    parsed as item_type itself. Paging stays at its defaults on failure.

    Args:
        response: Response with its body already read
        item_type: Paginable item type
        page: Requested page number
        page_size: Requested page size
        shape: Layout of the body
        accept: Accept media type sent with the request
        serializer: Serializer to use for typed bodies

    Returns:
        Paged response envelope
    """
    serializer = serializer or _default_serializer
    paging = PagingInfo()

    if not is_success_status(response.status_code):
        return FluentHttpPagedResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            request=_request_of(response),
            error_message=response.text,
            paging=paging,
        )

    response_type = list[item_type] if shape == BodyShape.COLLECTION else item_type
    body = _read_body(response, response_type, accept, serializer)
    total_count = read_total_count(body, shape)
    paging.set_paged_data(total_count, page, page_size)

    logger.debug(
        "paging_computed",
        total_count=total_count,
        page=page,
        page_size=page_size,
        page_count=paging.page_count,
    )

    return FluentHttpPagedResponse(
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        request=_request_of(response),
        response_body=body,
        paging=paging,
    )
