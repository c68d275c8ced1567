"""Exception hierarchy for the fluent HTTP client.

Unsuccessful HTTP status codes are never raised; they are captured in the
response envelope. Only execution failures surface as exceptions.
"""


class FluentHttpError(Exception):
    """Base class for all fluent HTTP client errors."""


class ConfigurationError(FluentHttpError, ValueError):
    """Raised when the builder is configured with an invalid value."""


class BuilderConsumedError(ConfigurationError):
    """Raised when a second terminal call is made on the same builder."""


class TransportError(FluentHttpError):
    """Raised when the request could not be delivered (DNS, connect, TLS)."""

    def __init__(self, message: str, method: str = "", url: str = ""):
        self.message = message
        self.method = method
        self.url = url
        super().__init__(message)


class RequestTimeoutError(TransportError, TimeoutError):
    """Raised when the transport gives up after the configured timeout."""

    def __init__(self, message: str, method: str = "", url: str = "", timeout: float = 0):
        self.timeout = timeout
        super().__init__(message, method=method, url=url)


class DeserializationError(FluentHttpError):
    """Raised when a successful response body does not match the expected type."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        media_type: str | None = None,
        target_type: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.media_type = media_type
        self.target_type = target_type
        super().__init__(message)


class SerializationError(DeserializationError):
    """Raised when a request entity cannot be serialized."""
