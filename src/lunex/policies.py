import asyncio
import inspect
from typing import Callable, Union

# Defaults mirror the transport-error backoff of the retry config
DEFAULT_BASE_MS = 250
DEFAULT_GROWTH = 2.0
DEFAULT_CAP_MS = 5000


async def sleep_ms(ms: int) -> None:
    """Default delay function: suspend the current task for ``ms`` milliseconds."""
    await asyncio.sleep(max(0, ms) / 1000)


class BackoffPolicy:
    """Decides how long to wait before retry number ``attempt`` (1-based)."""

    def delay_for(self, attempt: int) -> int:
        return 0


class FixedBackoff(BackoffPolicy):
    def __init__(self, delay_ms: int = DEFAULT_BASE_MS):
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self.delay_ms = int(delay_ms)

    def delay_for(self, attempt: int) -> int:
        return self.delay_ms


class ExponentialBackoff(BackoffPolicy):
    """``min(cap_ms, base_ms * growth ** (attempt - 1))``; never decreases with attempt."""

    def __init__(
        self,
        base_ms: int = DEFAULT_BASE_MS,
        growth: float = DEFAULT_GROWTH,
        cap_ms: int = DEFAULT_CAP_MS,
    ):
        if base_ms < 0 or cap_ms < 0:
            raise ValueError("base_ms and cap_ms must be >= 0")
        if growth < 1:
            raise ValueError("growth must be >= 1")
        self.base_ms = base_ms
        self.growth = growth
        self.cap_ms = cap_ms

    def delay_for(self, attempt: int) -> int:
        # Bound the exponent so large attempt counts do not overflow
        exponent = min(max(0, attempt - 1), 32)
        return int(min(self.cap_ms, self.base_ms * (self.growth**exponent)))


class FunctionalBackoff(BackoffPolicy):
    """Wrap a user-supplied ``fn(attempt) -> ms`` into a BackoffPolicy.

    Results are clamped so the schedule stays monotonically non-decreasing.
    """

    def __init__(self, fn: Callable[[int], Union[int, float]]):
        self.fn = fn

    def delay_for(self, attempt: int) -> int:
        current = 0
        for n in range(1, max(1, attempt) + 1):
            current = max(current, int(self.fn(n)))
        return current


def _count_positional_args(fn) -> int:
    try:
        sig = inspect.signature(fn)
        return len(
            [
                p
                for p in sig.parameters.values()
                if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
            ]
        )
    except (TypeError, ValueError):
        return 1


def coerce_backoff(backoff: Union[object, None]) -> BackoffPolicy:
    """Turn None | str | int | BackoffPolicy | callable into a BackoffPolicy.

    Accepted inputs:
      - None           -> ExponentialBackoff with defaults
      - "exponential"  -> ExponentialBackoff with defaults
      - "fixed"        -> FixedBackoff with the default delay
      - int / float    -> FixedBackoff of that many milliseconds
      - BackoffPolicy instance (returned as-is)
      - callable fn(attempt) -> ms, wrapped into FunctionalBackoff
    """
    if backoff is None:
        return ExponentialBackoff()
    if isinstance(backoff, BackoffPolicy):
        return backoff
    if isinstance(backoff, bool):
        raise TypeError("backoff must not be a bool")
    if isinstance(backoff, (int, float)):
        return FixedBackoff(int(backoff))
    if isinstance(backoff, str):
        name = backoff.lower()
        if name == "exponential":
            return ExponentialBackoff()
        if name == "fixed":
            return FixedBackoff()
        raise ValueError(
            "Unknown backoff string. Use 'fixed' or 'exponential', or pass a callable/BackoffPolicy."
        )
    if callable(backoff):
        if _count_positional_args(backoff) != 1:
            raise TypeError("backoff callable must accept exactly one argument: the attempt number")
        return FunctionalBackoff(backoff)
    raise TypeError("backoff must be None, 'fixed'|'exponential', a number, BackoffPolicy, or a callable")
