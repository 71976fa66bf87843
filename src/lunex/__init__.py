from .adapters import AiohttpTransport, HttpxTransport, Transport
from .client import LunexClient
from .env import load_options_from_env
from .errors import (
    ConfigurationError,
    EncodeError,
    HttpError,
    LunexError,
    ParseError,
    RequestTimeoutError,
    TransportError,
)
from .policies import (
    BackoffPolicy,
    ExponentialBackoff,
    FixedBackoff,
    FunctionalBackoff,
    coerce_backoff,
)
from .request import RequestDescriptor, build_query_string, build_request, build_url
from .types import ClientOptions, RawResponse, ResponseSummary

__all__ = [
    "LunexClient",
    "ClientOptions",
    "ResponseSummary",
    "RawResponse",
    "RequestDescriptor",
    "build_request",
    "build_url",
    "build_query_string",
    "BackoffPolicy",
    "FixedBackoff",
    "ExponentialBackoff",
    "FunctionalBackoff",
    "coerce_backoff",
    "Transport",
    "HttpxTransport",
    "AiohttpTransport",
    "LunexError",
    "ConfigurationError",
    "EncodeError",
    "TransportError",
    "RequestTimeoutError",
    "HttpError",
    "ParseError",
    "load_options_from_env",
]
