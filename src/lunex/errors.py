from typing import Any, Union


class LunexError(Exception):
    """Base class for every error raised by the client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(LunexError, ValueError):
    """Invalid client construction (missing base URL, negative retries, ...). Never retried."""


class TransportError(LunexError):
    """Connectivity failure (DNS, refused connection, reset). Retryable.

    The exception raised by the underlying HTTP library is kept as ``cause``
    and chained as ``__cause__``.
    """

    def __init__(self, message: str, cause: Union[BaseException, None] = None):
        super().__init__(message)
        self.cause = cause


class RequestTimeoutError(LunexError, TimeoutError):
    """An attempt did not settle within the configured timeout. Retryable."""

    name = "TimeoutError"

    def __init__(self, timeout_ms: int):
        super().__init__(f"Request timed out after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class HttpError(LunexError):
    """Well-formed response with a status outside [200, 300). Fatal."""

    def __init__(
        self,
        status: int,
        status_text: str,
        details: Any = None,
        headers: Union[dict[str, str], None] = None,
    ):
        super().__init__(f"HTTP {status} - {status_text}")
        self.status = status
        self.status_text = status_text
        self.details = details
        self.headers = headers or {}


class ParseError(LunexError):
    """Success-status body that does not parse per its declared content type. Fatal."""

    def __init__(self, message: str, body: str = "", cause: Union[BaseException, None] = None):
        super().__init__(message)
        self.body = body
        self.cause = cause


class EncodeError(LunexError, TypeError):
    """Request body that cannot be serialized as JSON. Raised before any attempt."""

    def __init__(self, message: str, cause: Union[BaseException, None] = None):
        super().__init__(message)
        self.cause = cause
