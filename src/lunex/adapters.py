import contextlib

from .errors import TransportError
from .request import RequestDescriptor
from .types import RawResponse


class Transport:
    """Performs exactly one network call per ``send``; never retries.

    Any HTTP response, whatever its status, comes back as a RawResponse.
    Only connectivity failures raise (as TransportError).
    """

    async def send(self, descriptor: RequestDescriptor) -> RawResponse:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


# ---------- httpx (default) ----------
class HttpxTransport(Transport):
    def __init__(self, client=None):
        # A caller-supplied httpx.AsyncClient is borrowed, never closed here
        self.client = client
        self._internal_client = None

    def _get_client(self):
        import httpx  # noqa: PLC0415

        client = self.client or self._internal_client
        if client is None:
            # No library-level timeout: TimeoutController is the single bound
            self._internal_client = client = httpx.AsyncClient(timeout=None)
        return client

    async def send(self, descriptor: RequestDescriptor) -> RawResponse:
        import httpx  # noqa: PLC0415

        client = self._get_client()
        try:
            resp = await client.request(
                descriptor.method,
                descriptor.url,
                headers=descriptor.headers,
                content=descriptor.body,
            )
        except httpx.TransportError as e:
            raise TransportError(f"{type(e).__name__}: {e}", cause=e) from e
        return RawResponse(
            status=resp.status_code,
            status_text=resp.reason_phrase,
            headers=dict(resp.headers),
            content=resp.content,
        )

    async def aclose(self) -> None:
        if self._internal_client is not None:
            with contextlib.suppress(Exception):
                await self._internal_client.aclose()
            self._internal_client = None


# ---------- aiohttp ----------
class AiohttpTransport(Transport):
    def __init__(self, session=None):
        self.session = session
        self._own_session = False

    def _get_session(self):
        if self.session is None:
            import aiohttp  # noqa: PLC0415

            self.session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
            self._own_session = True
        return self.session

    async def send(self, descriptor: RequestDescriptor) -> RawResponse:
        import aiohttp  # noqa: PLC0415

        session = self._get_session()
        try:
            async with session.request(
                descriptor.method,
                descriptor.url,
                headers=descriptor.headers,
                data=descriptor.body,
            ) as resp:
                content = await resp.read()
                return RawResponse(
                    status=resp.status,
                    status_text=resp.reason or "",
                    headers={str(k): v for k, v in resp.headers.items()},
                    content=content,
                )
        except aiohttp.ClientError as e:
            raise TransportError(f"{type(e).__name__}: {e}", cause=e) from e

    async def aclose(self) -> None:
        if self._own_session and self.session is not None:
            await self.session.close()
            self.session = None
            self._own_session = False


def coerce_transport(transport=None, http_client=None) -> Transport:
    """Turn None | "httpx" | "aiohttp" | Transport into a Transport.

    ``http_client`` is an optional httpx.AsyncClient for the default transport.
    """
    if transport is None or transport == "httpx":
        return HttpxTransport(client=http_client)
    if transport == "aiohttp":
        return AiohttpTransport()
    if isinstance(transport, Transport):
        return transport
    if hasattr(transport, "send"):
        return transport
    raise TypeError("transport must be None, 'httpx'|'aiohttp', or a Transport")
