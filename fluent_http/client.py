"""Builder state and request execution behind the fluent stages."""

import time
from collections.abc import Iterable
from datetime import timedelta
from typing import Any

import httpx

from fluent_http.config import Settings, get_settings
from fluent_http.core.normalizer import normalize_paged_response, normalize_response
from fluent_http.core.paging import BodyShape
from fluent_http.core.schemas import FluentHttpPagedResponse, FluentHttpResponse
from fluent_http.errors import (
    BuilderConsumedError,
    ConfigurationError,
    RequestTimeoutError,
    TransportError,
)
from fluent_http.locale import LocaleProvider, resolve_locale
from fluent_http.serialization import MediaType, Serializer
from fluent_http.stages import ContentStage
from fluent_http.utils.logging import get_correlation_id, get_logger
from fluent_http.utils.metrics import record_request

logger = get_logger(__name__)

ACCEPT_LANGUAGE_HEADER = "Accept-Language"
CORRELATION_ID_HEADER = "X-Correlation-ID"

_NO_BODY = object()


class FluentHttpClient:
    """Request configuration and transport handles for one fluent chain.

    Instances are created by create() and driven through the stage objects.
    A builder issues a single terminal call; its transport handles must be
    released with close() or aclose(), or by using a stage as a context manager.
    """

    def __init__(
        self,
        base_address: str,
        request_path: str,
        *,
        settings: Settings | None = None,
        locale_provider: LocaleProvider | None = None,
        serializer: Serializer | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize builder state.

        Args:
            base_address: Absolute http(s) service base URL
            request_path: Path (and query) relative to the base address
            settings: Client defaults, read from the environment when omitted
            locale_provider: Source of the default Accept-Language value
            serializer: Body serializer
            transport: httpx transport for synchronous calls
            async_transport: httpx transport for asynchronous calls

        Raises:
            ConfigurationError: If base_address is not an absolute http(s) URL
        """
        self.settings = settings or get_settings()
        self.base_address = _validate_base_address(base_address)
        self.request_path = request_path
        self.locale_provider = locale_provider
        self.serializer = serializer or Serializer()

        self.headers: list[tuple[str, str]] = []
        self.accept: MediaType | None = None
        self.auth_token: str | None = None
        self.timeout: float = self.settings.default_timeout_seconds
        self.current_page = 0
        self.page_size = 0

        self._transport = transport
        # Transports such as httpx.MockTransport serve both client kinds
        if async_transport is None and isinstance(transport, httpx.AsyncBaseTransport):
            async_transport = transport
        self._async_transport = async_transport
        self._client: httpx.Client | None = None
        self._async_client: httpx.AsyncClient | None = None
        self._consumed = False
        self._closed = False

    # Configuration

    def set_accept(self, media_type: MediaType) -> None:
        """Replace any Accept header with a single media type."""
        self.headers = [(k, v) for k, v in self.headers if k.lower() != "accept"]
        self.accept = media_type

    def add_header(self, name: str, value: str | Iterable[str]) -> None:
        if not name or not name.strip():
            raise ConfigurationError("Header name must not be empty")
        values = [value] if isinstance(value, str) else list(value)
        for item in values:
            self.headers.append((name.strip(), str(item)))

    def set_authorization(self, token: str) -> None:
        if not token or not token.strip():
            raise ConfigurationError("Authorization token must not be empty")
        self.auth_token = token.strip()

    def set_timeout(
        self,
        seconds: float | timedelta = 0,
        minutes: float = 0,
        hours: float = 0,
    ) -> None:
        if isinstance(seconds, timedelta):
            seconds = seconds.total_seconds()
        total = hours * 3600 + minutes * 60 + seconds
        if total <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {total} seconds")
        self.timeout = float(total)

    # Pre-call normalization

    def verify(self) -> None:
        """Add the default Accept-Language header if the caller set none."""
        if any(name.lower() == ACCEPT_LANGUAGE_HEADER.lower() for name, _ in self.headers):
            return
        culture = resolve_locale(self.locale_provider, self.settings.default_locale)
        self.headers.append((ACCEPT_LANGUAGE_HEADER, culture))

    def verify_paged(self) -> None:
        """Verify, then clamp the page number and page size to at least 1."""
        self.verify()
        self.page_size = max(self.page_size, 1)
        self.current_page = max(self.current_page, 1)

    # Terminal calls

    def execute(
        self,
        method: str,
        response_type: Any = str,
        entity: Any = _NO_BODY,
        content_type: str | None = None,
    ) -> FluentHttpResponse:
        self._begin_terminal()
        self.verify()
        response = self._send(method, entity, content_type)
        result = normalize_response(
            response,
            response_type,
            accept=self._accept_value(),
            serializer=self.serializer,
        )
        logger.debug("http_response_normalized", **result.to_log_dict())
        return result

    async def execute_async(
        self,
        method: str,
        response_type: Any = str,
        entity: Any = _NO_BODY,
        content_type: str | None = None,
    ) -> FluentHttpResponse:
        self._begin_terminal()
        self.verify()
        response = await self._send_async(method, entity, content_type)
        result = normalize_response(
            response,
            response_type,
            accept=self._accept_value(),
            serializer=self.serializer,
        )
        logger.debug("http_response_normalized", **result.to_log_dict())
        return result

    def execute_paged(self, item_type: Any, shape: BodyShape) -> FluentHttpPagedResponse:
        self._begin_terminal()
        self.verify_paged()
        response = self._send("GET")
        result = normalize_paged_response(
            response,
            item_type,
            page=self.current_page,
            page_size=self.page_size,
            shape=shape,
            accept=self._accept_value(),
            serializer=self.serializer,
        )
        logger.debug("http_response_normalized", **result.to_log_dict())
        return result

    async def execute_paged_async(
        self, item_type: Any, shape: BodyShape
    ) -> FluentHttpPagedResponse:
        self._begin_terminal()
        self.verify_paged()
        response = await self._send_async("GET")
        result = normalize_paged_response(
            response,
            item_type,
            page=self.current_page,
            page_size=self.page_size,
            shape=shape,
            accept=self._accept_value(),
            serializer=self.serializer,
        )
        logger.debug("http_response_normalized", **result.to_log_dict())
        return result

    # Transport handles

    def get_client(self) -> httpx.Client:
        """Get or create the synchronous HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_address,
                follow_redirects=self.settings.follow_redirects,
                headers={"User-Agent": self.settings.user_agent},
                transport=self._transport,
            )
        return self._client

    def get_async_client(self) -> httpx.AsyncClient:
        """Get or create the asynchronous HTTP client."""
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                base_url=self.base_address,
                follow_redirects=self.settings.follow_redirects,
                headers={"User-Agent": self.settings.user_agent},
                transport=self._async_transport,
            )
        return self._async_client

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the synchronous client.

        An open asynchronous client can only be released with aclose().
        """
        if self._client is not None:
            self._client.close()
            self._client = None
        if self._async_client is not None:
            logger.warning(
                "async_client_not_closed",
                base_address=self.base_address,
                hint="use aclose() or 'async with' after async calls",
            )
            return
        self._closed = True

    async def aclose(self) -> None:
        """Release both clients."""
        if self._client is not None:
            self._client.close()
            self._client = None
        if self._async_client is not None:
            await self._async_client.aclose()
            self._async_client = None
        self._closed = True

    # Internals

    def _begin_terminal(self) -> None:
        if self._closed:
            raise ConfigurationError("Builder has been closed")
        if self._consumed:
            raise BuilderConsumedError(
                "A terminal call was already made on this builder; create a new one"
            )
        self._consumed = True

    def _accept_value(self) -> str | None:
        return self.accept.value if self.accept else None

    def _request_headers(self) -> httpx.Headers:
        headers = httpx.Headers(self.headers)
        if self.accept is not None:
            headers["Accept"] = self.accept.value
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        correlation_id = get_correlation_id()
        if correlation_id and CORRELATION_ID_HEADER not in headers:
            headers[CORRELATION_ID_HEADER] = correlation_id
        return headers

    def _encode_body(
        self, entity: Any, content_type: str | None, headers: httpx.Headers
    ) -> bytes | None:
        if entity is _NO_BODY:
            return None
        if isinstance(entity, (bytes, str)):
            if content_type:
                headers["Content-Type"] = content_type
            return self.serializer.serialize(entity)
        media_type = self.accept or MediaType.JSON
        headers["Content-Type"] = content_type or media_type.value
        return self.serializer.serialize(entity, media_type)

    def _build_request(
        self,
        client: httpx.Client | httpx.AsyncClient,
        method: str,
        entity: Any,
        content_type: str | None,
    ) -> httpx.Request:
        headers = self._request_headers()
        content = self._encode_body(entity, content_type, headers)
        return client.build_request(
            method,
            self.request_path,
            content=content,
            headers=headers,
            timeout=httpx.Timeout(self.timeout),
        )

    def _send(
        self,
        method: str,
        entity: Any = _NO_BODY,
        content_type: str | None = None,
    ) -> httpx.Response:
        client = self.get_client()
        request = self._build_request(client, method, entity, content_type)
        start_time = time.perf_counter()

        try:
            response = client.send(request, stream=True)
            try:
                response.read()
            finally:
                response.close()
        except httpx.RequestError as e:
            raise self._transport_failure(request, e, start_time) from e

        self._record(request, response, start_time)
        return response

    async def _send_async(
        self,
        method: str,
        entity: Any = _NO_BODY,
        content_type: str | None = None,
    ) -> httpx.Response:
        client = self.get_async_client()
        request = self._build_request(client, method, entity, content_type)
        start_time = time.perf_counter()

        try:
            response = await client.send(request, stream=True)
            try:
                await response.aread()
            finally:
                await response.aclose()
        except httpx.RequestError as e:
            raise self._transport_failure(request, e, start_time) from e

        self._record(request, response, start_time)
        return response

    def _record(
        self, request: httpx.Request, response: httpx.Response, start_time: float
    ) -> None:
        duration = time.perf_counter() - start_time
        logger.debug(
            "http_request",
            method=request.method,
            url=str(request.url),
            status=response.status_code,
            duration_seconds=round(duration, 4),
        )
        if self.settings.metrics_enabled:
            record_request(request.method, response.status_code, duration)

    def _transport_failure(
        self, request: httpx.Request, error: httpx.RequestError, start_time: float
    ) -> TransportError:
        duration = time.perf_counter() - start_time
        if self.settings.metrics_enabled:
            record_request(request.method, "error", duration)

        url = str(request.url)
        if isinstance(error, httpx.TimeoutException):
            logger.warning(
                "http_request_timeout",
                method=request.method,
                url=url,
                timeout_seconds=self.timeout,
            )
            return RequestTimeoutError(
                f"{request.method} {url} timed out after {self.timeout}s: {error}",
                method=request.method,
                url=url,
                timeout=self.timeout,
            )

        logger.error(
            "http_request_failed",
            method=request.method,
            url=url,
            error=str(error),
            error_type=type(error).__name__,
        )
        return TransportError(
            f"{request.method} {url} failed: {error}",
            method=request.method,
            url=url,
        )


def _validate_base_address(base_address: str) -> str:
    try:
        url = httpx.URL(base_address)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Invalid base address {base_address!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(
            f"Base address must be an absolute http(s) URL, got {base_address!r}"
        )
    return str(url)


def create(
    base_address: str,
    request_path: str,
    *,
    settings: Settings | None = None,
    locale_provider: LocaleProvider | None = None,
    serializer: Serializer | None = None,
    transport: httpx.BaseTransport | None = None,
    async_transport: httpx.AsyncBaseTransport | None = None,
) -> ContentStage:
    """Start a fluent request chain against base_address + request_path.

    Example:
        with create("https://petstore.swagger.io", "v2/pet/findByStatus?status=available") as api:
            pets = api.with_json_content().get(list[Pet])

    Returns:
        The content stage, where the Accept media type is chosen
    """
    client = FluentHttpClient(
        base_address,
        request_path,
        settings=settings,
        locale_provider=locale_provider,
        serializer=serializer,
        transport=transport,
        async_transport=async_transport,
    )
    return ContentStage(client)
