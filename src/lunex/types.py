import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Union

from .errors import ConfigurationError, LunexError
from .policies import BackoffPolicy, ExponentialBackoff, coerce_backoff, sleep_ms

DEFAULT_TIMEOUT_MS = 10000
DEFAULT_MAX_RETRIES = 0

# Async or plain callable; a returned awaitable is awaited
DelayFn = Callable[[int], Union[Awaitable[None], None]]
Hook = Callable[..., Any]


@dataclass(frozen=True)
class ClientOptions:
    # Per-attempt timeout in milliseconds
    timeout: int = DEFAULT_TIMEOUT_MS
    # 0 means a single attempt
    max_retries: int = DEFAULT_MAX_RETRIES
    delay_fn: DelayFn = sleep_ms
    backoff: BackoffPolicy = field(default_factory=ExponentialBackoff)
    default_headers: Mapping[str, str] = field(default_factory=dict)

    # Lifecycle hooks; None is a no-op
    on_request_start: Union[Hook, None] = None
    on_request_end: Union[Hook, None] = None
    on_request_error: Union[Hook, None] = None

    def __post_init__(self):
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ConfigurationError("max_retries must be an integer")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ConfigurationError("timeout must be a number of milliseconds")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0")
        if not callable(self.delay_fn):
            raise ConfigurationError("delay_fn must be callable")
        try:
            object.__setattr__(self, "backoff", coerce_backoff(self.backoff))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid backoff: {e}") from e
        # Read-only view over a private copy
        object.__setattr__(
            self, "default_headers", MappingProxyType(dict(self.default_headers or {}))
        )

    def replace(self, **changes) -> "ClientOptions":
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class RawResponse:
    """Transport-neutral view of one HTTP response."""

    status: int
    status_text: str
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""

    def header(self, name: str, default: Union[str, None] = None) -> Union[str, None]:
        lname = name.lower()
        for k, v in self.headers.items():
            if k.lower() == lname:
                return v
        return default


@dataclass(frozen=True)
class ResponseSummary:
    """Passed to on_request_end once a logical call succeeds."""

    method: str
    url: str
    status: int
    status_text: str
    headers: dict[str, str]
    data: Any
    attempts: int
    elapsed_ms: float


# ---------- attempt outcomes (live for one retry-loop iteration) ----------


@dataclass(frozen=True)
class Success:
    value: Any
    status: int
    status_text: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RecoverableFailure:
    error: LunexError


@dataclass(frozen=True)
class FatalFailure:
    error: LunexError


AttemptOutcome = Union[Success, RecoverableFailure, FatalFailure]
