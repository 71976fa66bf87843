import json

import aiohttp
import pytest

from lunex import AiohttpTransport, HttpError, LunexClient, TransportError
from lunex.request import RequestDescriptor


class FakeResponse:
    def __init__(self, status=200, reason="OK", headers=None, body=b""):
        self.status = status
        self.reason = reason
        self.headers = headers or {}
        self._body = body

    async def read(self):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.mark.asyncio
async def test_aiohttp_send_returns_raw_response():
    session = FakeSession(
        [FakeResponse(200, "OK", {"Content-Type": "application/json"}, b'{"ok": true}')]
    )
    transport = AiohttpTransport(session=session)
    raw = await transport.send(
        RequestDescriptor("POST", "https://api.example.com/users", {"X-A": "1"}, b"{}")
    )
    assert raw.status == 200  # noqa: PLR2004
    assert raw.status_text == "OK"
    assert raw.header("content-type") == "application/json"
    assert json.loads(raw.content) == {"ok": True}
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "https://api.example.com/users")
    assert kwargs["headers"] == {"X-A": "1"}
    assert kwargs["data"] == b"{}"


@pytest.mark.asyncio
async def test_aiohttp_client_errors_become_transport_errors():
    session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
    transport = AiohttpTransport(session=session)
    with pytest.raises(TransportError) as ei:
        await transport.send(RequestDescriptor("GET", "https://api.example.com/x"))
    assert isinstance(ei.value.cause, aiohttp.ClientConnectionError)


@pytest.mark.asyncio
async def test_client_retries_over_aiohttp_transport():
    session = FakeSession(error=aiohttp.ClientConnectionError("refused"))

    async def no_delay(ms):
        return None

    client = LunexClient(
        "https://api.example.com",
        transport=AiohttpTransport(session=session),
        max_retries=2,
        delay_fn=no_delay,
    )
    with pytest.raises(TransportError):
        await client.get("users")
    assert len(session.calls) == 3  # noqa: PLR2004


@pytest.mark.asyncio
async def test_client_http_error_over_aiohttp_transport():
    session = FakeSession(
        [FakeResponse(500, "Internal Server Error", {"Content-Type": "text/plain"}, b"Error occurred")]
    )
    client = LunexClient("https://api.example.com", transport=AiohttpTransport(session=session))
    with pytest.raises(HttpError) as ei:
        await client.get("fail")
    assert ei.value.message == "HTTP 500 - Internal Server Error"
    assert ei.value.details == "Error occurred"


@pytest.mark.asyncio
async def test_borrowed_session_is_not_closed():
    session = FakeSession()
    transport = AiohttpTransport(session=session)
    await transport.aclose()
    assert transport.session is session
