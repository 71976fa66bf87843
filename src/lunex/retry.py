import contextlib
import inspect
import logging
from typing import Awaitable, Callable, Union

from .errors import RequestTimeoutError, TransportError
from .policies import BackoffPolicy, ExponentialBackoff, sleep_ms
from .state import RetryState
from .types import AttemptOutcome, DelayFn, FatalFailure, RecoverableFailure, Success

# Only connectivity and timeout faults are transient; HTTP statuses are final
RECOVERABLE_ERRORS = (TransportError, RequestTimeoutError)


async def run_with_retries(
    attempt: Callable[[RetryState], Awaitable[AttemptOutcome]],
    *,
    max_retries: int = 0,
    delay_fn: DelayFn = sleep_ms,
    backoff: Union[BackoffPolicy, None] = None,
    logger: Union[logging.Logger, None] = None,
    label: str = "",
) -> tuple[Success, RetryState]:
    """Run ``attempt`` until it succeeds, fails fatally, or retries are exhausted.

    Recoverable failures (returned as RecoverableFailure or raised as
    TransportError/RequestTimeoutError) consume one retry each and are followed
    by ``delay_fn(backoff.delay_for(n))`` where n is the 1-based retry number;
    delay_fn may be async or plain. FatalFailure is raised immediately. On
    exhaustion the error of the last attempt is raised; earlier errors are
    dropped.
    """
    backoff = backoff or ExponentialBackoff()
    logger = logger or logging.getLogger("lunex")
    state = RetryState(max_retries=max_retries)
    while True:
        try:
            outcome = await attempt(state)
        except RECOVERABLE_ERRORS as e:
            outcome = RecoverableFailure(e)

        if isinstance(outcome, Success):
            return outcome, state
        if isinstance(outcome, FatalFailure):
            raise outcome.error

        state.last_error = outcome.error
        if not state.can_retry():
            with contextlib.suppress(Exception):
                logger.warning(
                    f"{label} failed after {state.attempts} attempt(s): {outcome.error}"
                )
            raise state.last_error

        state.attempt_index += 1
        delay = backoff.delay_for(state.attempt_index)
        with contextlib.suppress(Exception):
            logger.info(
                f"{label} attempt {state.attempt_index} failed ({outcome.error}); "
                f"retry {state.attempt_index}/{state.max_retries} in {delay}ms"
            )
        result = delay_fn(delay)
        if inspect.isawaitable(result):
            await result
