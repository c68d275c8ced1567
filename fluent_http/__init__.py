"""Fluent builder for HTTP requests with normalized response envelopes."""

from fluent_http.client import FluentHttpClient, create
from fluent_http.core import (
    BodyShape,
    FluentHttpPagedResponse,
    FluentHttpResponse,
    Paginable,
    PagingInfo,
    is_success_status,
)
from fluent_http.errors import (
    BuilderConsumedError,
    ConfigurationError,
    DeserializationError,
    FluentHttpError,
    RequestTimeoutError,
    SerializationError,
    TransportError,
)
from fluent_http.locale import DEFAULT_LOCALE, fixed_locale, system_locale
from fluent_http.serialization import MediaType, Serializer
from fluent_http.stages import ConfigStage, ContentStage, PagedConfigStage, PageStage

__version__ = "0.1.0"

__all__ = [
    "create",
    "FluentHttpClient",
    "ContentStage",
    "ConfigStage",
    "PageStage",
    "PagedConfigStage",
    "BodyShape",
    "FluentHttpResponse",
    "FluentHttpPagedResponse",
    "Paginable",
    "PagingInfo",
    "is_success_status",
    "MediaType",
    "Serializer",
    "DEFAULT_LOCALE",
    "fixed_locale",
    "system_locale",
    "FluentHttpError",
    "ConfigurationError",
    "BuilderConsumedError",
    "TransportError",
    "RequestTimeoutError",
    "DeserializationError",
    "SerializationError",
]
