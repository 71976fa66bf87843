import asyncio
from typing import Awaitable, TypeVar

from .errors import RequestTimeoutError

T = TypeVar("T")


class TimeoutController:
    """Bound the wall-clock time of one attempt.

    ``run`` starts the awaitable as a task and arms a timer; if the timer fires
    first the task is cancelled (asyncio's cooperative cancellation is the
    signal the transport observes) and RequestTimeoutError is raised. The timer
    is disarmed on every exit path.
    """

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        self.fired = False

    def _expire(self, task: asyncio.Future) -> None:
        if not task.done():
            self.fired = True
            task.cancel()

    async def run(self, awaitable: Awaitable[T]) -> T:
        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(awaitable)
        handle = loop.call_later(self.timeout_ms / 1000, self._expire, task)
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            own_cancel = current is not None and getattr(current, "cancelling", lambda: 0)() > 0
            if self.fired and not own_cancel:
                raise RequestTimeoutError(self.timeout_ms) from None
            raise
        except Exception as exc:
            # Some transports surface their own error while being torn down
            if self.fired:
                raise RequestTimeoutError(self.timeout_ms) from exc
            raise
        finally:
            handle.cancel()
