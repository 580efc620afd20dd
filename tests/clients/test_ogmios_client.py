import json
from unittest.mock import AsyncMock, patch

import pytest

from conftest import OGMIOS_URL, FakeSession, rpc_error, rpc_result
from kupmios.clients.http import SchemaDecoder
from kupmios.clients.ogmios import OgmiosClient, open_websocket, rpc_request, websocket_url
from kupmios.errors import DecodeError, RemoteRejection
from kupmios.schemas.ogmios import SubmitTransactionResult


def test_rpc_request_envelope():
    assert rpc_request("submitTransaction", {"transaction": {"cbor": "84"}}) == {
        "jsonrpc": "2.0",
        "method": "submitTransaction",
        "params": {"transaction": {"cbor": "84"}},
        "id": None,
    }
    assert rpc_request("queryLedgerState/protocolParameters")["params"] == {}


def test_websocket_url():
    assert websocket_url("http://localhost:1337") == "ws://localhost:1337"
    assert websocket_url("https://ogmios.example") == "wss://ogmios.example"
    assert websocket_url("ws://already") == "ws://already"


@pytest.mark.asyncio
async def test_request_returns_result():
    session = FakeSession(
        {"submitTransaction": rpc_result("submitTransaction", {"transaction": {"id": "ff"}})}
    )
    client = OgmiosClient(OGMIOS_URL, SchemaDecoder(session=session))

    result = await client.request(
        "submitTransaction", {"transaction": {"cbor": "84"}}, SubmitTransactionResult
    )

    assert result.transaction.id == "ff"
    method, url, body = session.calls[0]
    assert (method, url) == ("POST", OGMIOS_URL)
    assert body["params"] == {"transaction": {"cbor": "84"}}


@pytest.mark.asyncio
async def test_request_raises_remote_rejection_with_error_object():
    error = {"code": 3005, "message": "Era mismatch", "data": {"queryEra": "conway"}}
    session = FakeSession({"submitTransaction": rpc_error("submitTransaction", error)})
    client = OgmiosClient(OGMIOS_URL, SchemaDecoder(session=session))

    with pytest.raises(RemoteRejection) as info:
        await client.request("submitTransaction", {}, SubmitTransactionResult)

    assert info.value.error == error


@pytest.mark.asyncio
async def test_malformed_result_is_decode_error():
    session = FakeSession(
        {"submitTransaction": rpc_result("submitTransaction", {"transaction": {}})}
    )
    client = OgmiosClient(OGMIOS_URL, SchemaDecoder(session=session))

    with pytest.raises(DecodeError):
        await client.request("submitTransaction", {}, SubmitTransactionResult)


@pytest.mark.asyncio
async def test_open_websocket_sends_payload_once_connected():
    ws = AsyncMock()
    payload = rpc_request("nextBlock")

    with patch("kupmios.clients.ogmios.websockets.connect", AsyncMock(return_value=ws)) as connect:
        result = await open_websocket("http://localhost:1337", payload)

    assert result is ws
    connect.assert_awaited_once_with("ws://localhost:1337")
    ws.send.assert_awaited_once_with(json.dumps(payload))


@pytest.mark.asyncio
async def test_open_websocket_closes_on_send_failure():
    ws = AsyncMock()
    ws.send.side_effect = ConnectionError("closed")

    with patch("kupmios.clients.ogmios.websockets.connect", AsyncMock(return_value=ws)):
        with pytest.raises(ConnectionError):
            await open_websocket("ws://localhost:1337", rpc_request("nextBlock"))

    ws.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_client_open_websocket_uses_base_url():
    ws = AsyncMock()
    client = OgmiosClient("https://ogmios.example/", SchemaDecoder(session=FakeSession()))

    with patch("kupmios.clients.ogmios.websockets.connect", AsyncMock(return_value=ws)) as connect:
        await client.open_websocket("findIntersection", {"points": ["origin"]})

    connect.assert_awaited_once_with("wss://ogmios.example")
    sent = json.loads(ws.send.await_args.args[0])
    assert sent["method"] == "findIntersection"
    assert sent["params"] == {"points": ["origin"]}
