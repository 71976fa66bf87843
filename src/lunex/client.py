import contextlib
import logging
import time
from collections.abc import Mapping
from typing import Any, Union

from .adapters import Transport, coerce_transport
from .env import DEFAULT_PREFIX, load_options_from_env
from .errors import ConfigurationError
from .hooks import HookDispatcher
from .request import METHODS, build_request, merge_headers
from .response import interpret_response
from .retry import run_with_retries
from .state import RetryState
from .timeout import TimeoutController
from .types import AttemptOutcome, ClientOptions, ResponseSummary

# kwargs accepted in place of an options object
OPTION_KEYS = frozenset(
    {
        "timeout",
        "max_retries",
        "delay_fn",
        "backoff",
        "on_request_start",
        "on_request_end",
        "on_request_error",
    }
)


def _resolve_options(
    options: Union[ClientOptions, Mapping, None],
    default_headers: Union[Mapping[str, str], None],
    kwargs: dict,
) -> ClientOptions:
    # Prefer an options object, then kwargs, finally defaults
    if options is None or isinstance(options, Mapping):
        if options is None:
            settings = {k: kwargs.pop(k) for k in list(kwargs.keys()) if k in OPTION_KEYS}
        else:
            settings = {k: v for k, v in options.items() if k in OPTION_KEYS}
        options = ClientOptions(**settings)
    elif not isinstance(options, ClientOptions):
        raise ConfigurationError("options must be a ClientOptions, a mapping, or None")
    if default_headers:
        options = options.replace(
            default_headers=merge_headers(options.default_headers, default_headers)
        )
    return options


class LunexClient:
    """Async HTTP client bound to one base URL.

    Every verb call is a logical call: the start hook fires once, the request
    is attempted up to ``max_retries + 1`` times (only transport failures and
    timeouts are retried), and the end or error hook fires once with the final
    outcome.

    Usage:
        async with LunexClient("https://api.example.com", max_retries=2) as client:
            users = await client.get("users", {"limit": 5})
    """

    def __init__(
        self,
        base_url: str,
        default_headers: Union[Mapping[str, str], None] = None,
        options: Union[ClientOptions, Mapping, None] = None,
        transport: Union[Transport, str, None] = None,
        http_client=None,
        log_level: Union[int, None] = None,
        **kwargs,
    ):
        """Initialize a LunexClient.

        Args:
            base_url (str): prefix for every request path
            default_headers (Mapping[str, str] | None): sent with every request;
                merged over options.default_headers
            options (ClientOptions | Mapping | None): client options; when None,
                option kwargs are used instead
            transport (Transport | str | None): "httpx" (default), "aiohttp", or a
                Transport instance
            http_client (httpx.AsyncClient | None): borrowed client for the httpx transport
            log_level (int | None): level for the "lunex" logger
            kwargs:
            - timeout: int (milliseconds)
            - max_retries: int
            - delay_fn: async or plain callable(ms)
            - backoff: BackoffPolicy | "fixed" | "exponential" | int | callable
            - on_request_start / on_request_end / on_request_error: callables

        Raises:
            ConfigurationError: missing base URL or invalid options
        """
        if not base_url or not isinstance(base_url, str):
            raise ConfigurationError("base_url is required")
        self._base_url = base_url
        self._options = _resolve_options(options, default_headers, kwargs)
        if kwargs:
            raise TypeError(f"Unexpected keyword arguments: {', '.join(sorted(kwargs))}")
        self._own_transport = transport is None or isinstance(transport, str)
        self._transport = coerce_transport(transport, http_client)
        self._logger = logging.getLogger("lunex")
        if log_level is not None:
            with contextlib.suppress(Exception):
                self._logger.setLevel(log_level)

    def __repr__(self) -> str:
        return (
            f"LunexClient(base_url={self._base_url!r}, timeout={self.timeout}, "
            f"max_retries={self.max_retries})"
        )

    # ---------- read-only configuration ----------
    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def timeout(self) -> int:
        return self._options.timeout

    @property
    def max_retries(self) -> int:
        return self._options.max_retries

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self._options.default_headers)

    # ---------- lifecycle ----------
    async def aclose(self) -> None:
        if self._own_transport:
            await self._transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
        return False

    @classmethod
    def from_env(
        cls,
        base_url: Union[str, None] = None,
        prefix: str = DEFAULT_PREFIX,
        env_path: Union[str, None] = None,
        **kwargs,
    ):
        """Create a client from LUNEX_* environment variables (see load_options_from_env).

        An explicit ``base_url`` wins over LUNEX_BASE_URL. ``transport``,
        ``http_client`` and ``log_level`` go to the client; other kwargs
        become ClientOptions fields.
        """
        client_kwargs = {
            k: kwargs.pop(k)
            for k in list(kwargs.keys())
            if k in {"transport", "http_client", "log_level", "default_headers"}
        }
        env_base_url, options = load_options_from_env(prefix=prefix, env_path=env_path, **kwargs)
        url = base_url or env_base_url
        if not url:
            raise ConfigurationError(f"base_url is required (pass it or set {prefix}BASE_URL)")
        return cls(url, options=options, **client_kwargs)

    # ---------- request pipeline ----------
    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Union[Mapping[str, Any], None] = None,
        body: Any = None,
        headers: Union[Mapping[str, str], None] = None,
        timeout: Union[int, None] = None,
    ) -> Any:
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported method: {method}")
        opts = self._options
        timeout_ms = opts.timeout if timeout is None else timeout
        if timeout_ms <= 0:
            raise ConfigurationError("timeout must be > 0")
        # Built once up front so a bad URL or body fails before any hook fires
        url = build_request(
            method,
            self._base_url,
            path,
            query=query,
            body=body,
            default_headers=opts.default_headers,
            headers=headers,
        ).url
        effective = {
            "headers": merge_headers(opts.default_headers, headers),
            "query": dict(query) if query else None,
            "body": body,
            "timeout": timeout_ms,
            "max_retries": opts.max_retries,
        }
        label = f"{method} {url}"
        hooks = HookDispatcher(opts, self._logger)
        await hooks.start(method, url, effective)
        started = time.monotonic()

        async def attempt(state: RetryState) -> AttemptOutcome:
            # Fresh descriptor per attempt
            descriptor = build_request(
                method,
                self._base_url,
                path,
                query=query,
                body=body,
                default_headers=opts.default_headers,
                headers=headers,
            )
            with contextlib.suppress(Exception):
                self._logger.debug(f"req start {label} attempt={state.attempts}")
            raw = await TimeoutController(timeout_ms).run(self._transport.send(descriptor))
            with contextlib.suppress(Exception):
                self._logger.debug(f"req done {label} status={raw.status}")
            return interpret_response(raw)

        try:
            outcome, state = await run_with_retries(
                attempt,
                max_retries=opts.max_retries,
                delay_fn=opts.delay_fn,
                backoff=opts.backoff,
                logger=self._logger,
                label=label,
            )
        except Exception as e:
            await hooks.error(e)
            raise

        await hooks.end(
            ResponseSummary(
                method=method,
                url=url,
                status=outcome.status,
                status_text=outcome.status_text,
                headers=outcome.headers,
                data=outcome.value,
                attempts=state.attempts,
                elapsed_ms=(time.monotonic() - started) * 1000,
            )
        )
        return outcome.value

    # sugar
    async def get(
        self,
        path: str,
        query: Union[Mapping[str, Any], None] = None,
        *,
        headers: Union[Mapping[str, str], None] = None,
        timeout: Union[int, None] = None,
    ) -> Any:
        return await self.request("GET", path, query=query, headers=headers, timeout=timeout)

    async def post(self, path: str, body: Any = None, **kw) -> Any:
        return await self.request("POST", path, body=body, **kw)

    async def put(self, path: str, body: Any = None, **kw) -> Any:
        return await self.request("PUT", path, body=body, **kw)

    async def patch(self, path: str, body: Any = None, **kw) -> Any:
        return await self.request("PATCH", path, body=body, **kw)

    async def delete(self, path: str, **kw) -> Any:
        return await self.request("DELETE", path, **kw)
