import contextlib
import inspect
import logging
from typing import Union

from .types import ClientOptions, Hook, ResponseSummary


class HookDispatcher:
    """Fire the optional lifecycle hooks of ClientOptions, isolating their failures.

    A hook may be a plain function or return an awaitable (async def); either
    way an exception inside it is logged and dropped so it cannot change the
    outcome of the request.
    """

    def __init__(self, options: ClientOptions, logger: Union[logging.Logger, None] = None):
        self.options = options
        self._logger = logger or logging.getLogger("lunex")

    async def _fire(self, name: str, hook: Union[Hook, None], *args) -> None:
        if hook is None:
            return
        try:
            result = hook(*args)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            with contextlib.suppress(Exception):
                self._logger.warning(f"{name} hook raised {type(e).__name__}: {e}; ignoring")

    async def start(self, method: str, url: str, options: dict) -> None:
        await self._fire("on_request_start", self.options.on_request_start, method, url, options)

    async def end(self, summary: ResponseSummary) -> None:
        await self._fire("on_request_end", self.options.on_request_end, summary)

    async def error(self, error: BaseException) -> None:
        await self._fire("on_request_error", self.options.on_request_error, error)
