"""
Tests unitaires pour le StreamClient (handshake, lecture, dispatch).

Contraintes:
    - Aucun appel réseau (httpx.MockTransport)
"""
import io

import httpx
import pytest

from conftest import sse_response
from posthog_mcp_bridge.bridge.output import OutputForwarder
from posthog_mcp_bridge.bridge.state import ConnectionState
from posthog_mcp_bridge.bridge.stream import StreamClient
from posthog_mcp_bridge.core.exceptions import StreamConnectionError, StreamReadError
from posthog_mcp_bridge.core.models import Frame

BASE_URL = "https://mcp.example.com"


def _make_stream_client(client: httpx.AsyncClient, out: io.StringIO, state: ConnectionState = None):
    state = state or ConnectionState("phx_test")
    return StreamClient(client, BASE_URL + "/", state, OutputForwarder(out)), state


@pytest.mark.asyncio
@pytest.mark.unit
async def test_handshake_sends_auth_and_accept_headers():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["headers"] = request.headers
        return sse_response([])

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        stream_client, _ = _make_stream_client(client, io.StringIO())
        async with stream_client.open() as response:
            await stream_client.consume(response)

    assert captured["url"] == "https://mcp.example.com/sse"
    assert captured["headers"]["authorization"] == "Bearer phx_test"
    assert captured["headers"]["accept"] == "text/event-stream"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_handshake_non_success_raises_connection_error():
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(401))) as client:
        stream_client, _ = _make_stream_client(client, io.StringIO())
        with pytest.raises(StreamConnectionError) as exc_info:
            async with stream_client.open():
                pass

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "SSE connection failed: 401"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_handshake_transport_error_raises_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        stream_client, _ = _make_stream_client(client, io.StringIO())
        with pytest.raises(StreamConnectionError):
            async with stream_client.open():
                pass


@pytest.mark.asyncio
@pytest.mark.unit
async def test_consume_binds_endpoint_and_forwards_messages():
    chunks = [
        b"event: endpoint\ndata: /msg?sessionId=42\n\n",
        b"event: mess",
        b"age\ndata: {\"ok\":true}\n\n",
    ]
    out = io.StringIO()

    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: sse_response(chunks))) as client:
        stream_client, state = _make_stream_client(client, out)
        async with stream_client.open() as response:
            await stream_client.consume(response)

    assert state.endpoint_url == "https://mcp.example.com/msg?sessionId=42"
    assert out.getvalue() == "{\"ok\":true}\n"
    assert stream_client.chunks_received == 3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_consume_read_error_raises_stream_read_error():
    async def _body():
        yield b"event: endpoint\ndata: /msg\n\n"
        raise httpx.ReadError("Connexion perdue")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=_body())

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        stream_client, state = _make_stream_client(client, io.StringIO())
        with pytest.raises(StreamReadError) as exc_info:
            async with stream_client.open() as response:
                await stream_client.consume(response)

    assert exc_info.value.chunks_received == 1
    # Les frames reçues avant l'erreur ont bien été traitées
    assert state.is_bound


@pytest.mark.unit
class TestDispatch:

    def _dispatcher(self):
        out = io.StringIO()
        state = ConnectionState("tok")
        client = StreamClient(object(), BASE_URL, state, OutputForwarder(out))
        return client, state, out

    def test_second_endpoint_is_ignored(self):
        client, state, _ = self._dispatcher()
        client.dispatch(Frame("endpoint", "/msg?sessionId=1"))
        client.dispatch(Frame("endpoint", "/msg?sessionId=2"))
        assert state.endpoint_url == "https://mcp.example.com/msg?sessionId=1"

    def test_message_data_forwarded_verbatim(self):
        client, _, out = self._dispatcher()
        client.dispatch(Frame("message", "{ \"id\" : 1 }"))
        assert out.getvalue() == "{ \"id\" : 1 }\n"

    def test_unmatched_event_types_are_noops(self):
        client, state, out = self._dispatcher()
        client.dispatch(Frame("", "/orphan"))
        client.dispatch(Frame("ping", "x"))
        assert state.endpoint_url is None
        assert out.getvalue() == ""
