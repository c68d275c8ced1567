"""Fluent stages restricting which calls are legal at each point of a chain.

create() -> ContentStage -> ConfigStage [-> PageStage -> PagedConfigStage]

Each stage only exposes the operations valid at that point, so an out of
order call such as setting a page size before choosing the content type is
both a static type error and an AttributeError at runtime.
"""

from collections.abc import Iterable
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Optional, TypeVar, overload

from fluent_http.core.paging import BodyShape, Paginable
from fluent_http.core.schemas import FluentHttpPagedResponse, FluentHttpResponse
from fluent_http.serialization import MediaType

if TYPE_CHECKING:
    from fluent_http.client import FluentHttpClient

T = TypeVar("T")
TSend = TypeVar("TSend")
P = TypeVar("P", bound=Paginable)

StageT = TypeVar("StageT", bound="_Stage")


def entity_type(entity: Any) -> Any:
    """Type a sent entity is read back as.

    Lists and tuples whose items share one type keep that item type, so
    [Pet(...)] reads back as list[Pet]. Mixed or empty collections fall back
    to the bare container type.
    """
    if isinstance(entity, (list, tuple)) and entity:
        item_types = {type(item) for item in entity}
        if len(item_types) == 1:
            (item_type,) = item_types
            return list[item_type] if isinstance(entity, list) else tuple[item_type, ...]
    return type(entity)


class _Stage:
    """Shared lifetime handling; every stage releases the same transport."""

    __slots__ = ("_client",)

    def __init__(self, client: "FluentHttpClient"):
        self._client = client

    @property
    def closed(self) -> bool:
        """True once every transport handle has been released."""
        return self._client.closed

    def close(self) -> None:
        """Release the synchronous transport handle."""
        self._client.close()

    async def aclose(self) -> None:
        """Release all transport handles."""
        await self._client.aclose()

    def __enter__(self: StageT) -> StageT:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._client.close()

    async def __aenter__(self: StageT) -> StageT:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self._client.aclose()


class ContentStage(_Stage):
    """First stage: choose the Accept media type."""

    __slots__ = ()

    def with_json_content(self) -> "ConfigStage":
        """Accept application/json, replacing any previous Accept header."""
        self._client.set_accept(MediaType.JSON)
        return ConfigStage(self._client)

    def with_xml_content(self) -> "ConfigStage":
        """Accept application/xml, replacing any previous Accept header."""
        self._client.set_accept(MediaType.XML)
        return ConfigStage(self._client)


class ConfigStage(_Stage):
    """Headers, authorization, timeout, paging entry and the terminal verbs."""

    __slots__ = ()

    def add_header(self, name: str, value: str | Iterable[str]) -> "ConfigStage":
        """Add a header; repeated names and multiple values are kept in order."""
        self._client.add_header(name, value)
        return self

    def with_authorization(self, token: str) -> "ConfigStage":
        """Send the token as an 'Authorization: Bearer' header."""
        self._client.set_authorization(token)
        return self

    def set_timeout(
        self,
        seconds: float | timedelta = 0,
        *,
        minutes: float = 0,
        hours: float = 0,
    ) -> "ConfigStage":
        """Replace the request timeout (300 seconds by default).

        Raises:
            ConfigurationError: If the total duration is not positive
        """
        self._client.set_timeout(seconds, minutes=minutes, hours=hours)
        return self

    def from_page(self, page: int) -> "PageStage":
        """Start a paged request at the given page number."""
        self._client.current_page = page
        return PageStage(self._client)

    # GET

    def get(self, response_type: type[T] = str) -> FluentHttpResponse[T]:  # type: ignore[assignment]
        return self._client.execute("GET", response_type)

    async def get_async(self, response_type: type[T] = str) -> FluentHttpResponse[T]:  # type: ignore[assignment]
        return await self._client.execute_async("GET", response_type)

    # POST

    @overload
    def post(self, entity: T) -> FluentHttpResponse[T]: ...

    @overload
    def post(self, entity: TSend, response_type: type[T]) -> FluentHttpResponse[T]: ...

    def post(self, entity: Any, response_type: Optional[Any] = None) -> FluentHttpResponse:
        """POST the serialized entity.

        Without response_type the body is read back as entity_type(entity).
        """
        return self._client.execute("POST", response_type or entity_type(entity), entity)

    @overload
    async def post_async(self, entity: T) -> FluentHttpResponse[T]: ...

    @overload
    async def post_async(self, entity: TSend, response_type: type[T]) -> FluentHttpResponse[T]: ...

    async def post_async(
        self, entity: Any, response_type: Optional[Any] = None
    ) -> FluentHttpResponse:
        return await self._client.execute_async("POST", response_type or entity_type(entity), entity)

    def post_raw(
        self,
        content: bytes | str,
        response_type: type[T] = str,  # type: ignore[assignment]
        content_type: str | None = None,
    ) -> FluentHttpResponse[T]:
        """POST pre-built content as is, with an optional Content-Type."""
        return self._client.execute("POST", response_type, content, content_type)

    async def post_raw_async(
        self,
        content: bytes | str,
        response_type: type[T] = str,  # type: ignore[assignment]
        content_type: str | None = None,
    ) -> FluentHttpResponse[T]:
        return await self._client.execute_async("POST", response_type, content, content_type)

    # PUT

    @overload
    def put(self, entity: T) -> FluentHttpResponse[T]: ...

    @overload
    def put(self, entity: TSend, response_type: type[T]) -> FluentHttpResponse[T]: ...

    def put(self, entity: Any, response_type: Optional[Any] = None) -> FluentHttpResponse:
        """PUT the serialized entity.

        Without response_type the body is read back as entity_type(entity).
        """
        return self._client.execute("PUT", response_type or entity_type(entity), entity)

    @overload
    async def put_async(self, entity: T) -> FluentHttpResponse[T]: ...

    @overload
    async def put_async(self, entity: TSend, response_type: type[T]) -> FluentHttpResponse[T]: ...

    async def put_async(
        self, entity: Any, response_type: Optional[Any] = None
    ) -> FluentHttpResponse:
        return await self._client.execute_async("PUT", response_type or entity_type(entity), entity)

    # DELETE

    def delete(self, response_type: type[T] = str) -> FluentHttpResponse[T]:  # type: ignore[assignment]
        return self._client.execute("DELETE", response_type)

    async def delete_async(self, response_type: type[T] = str) -> FluentHttpResponse[T]:  # type: ignore[assignment]
        return await self._client.execute_async("DELETE", response_type)


class PageStage(_Stage):
    """Paged request: the page size must be chosen next."""

    __slots__ = ()

    def with_size(self, page_size: int) -> "PagedConfigStage":
        self._client.page_size = page_size
        return PagedConfigStage(self._client)


class PagedConfigStage(_Stage):
    """Paged retrieval. Only GET is offered since paging is a read concept."""

    __slots__ = ()

    def get_paged(
        self,
        item_type: type[P],
        shape: BodyShape = BodyShape.COLLECTION,
    ) -> FluentHttpPagedResponse[Any]:
        """GET a page of results.

        Args:
            item_type: Paginable item type
            shape: COLLECTION parses list[item_type], SINGLE parses item_type

        Returns:
            Paged envelope; page and page size are clamped to at least 1
        """
        return self._client.execute_paged(item_type, shape)

    async def get_paged_async(
        self,
        item_type: type[P],
        shape: BodyShape = BodyShape.COLLECTION,
    ) -> FluentHttpPagedResponse[Any]:
        return await self._client.execute_paged_async(item_type, shape)
