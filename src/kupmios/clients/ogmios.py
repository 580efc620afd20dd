"""JSON-RPC client for the Ogmios node bridge."""

from __future__ import annotations

import json
from typing import Any, TypeVar

import websockets

from ..errors import RemoteRejection
from ..logger import get_logger
from ..schemas.ogmios import RpcFailure, rpc_envelope
from .http import SchemaDecoder

logger = get_logger(__name__)

T = TypeVar("T")


def rpc_request(method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "method": method, "params": params or {}, "id": None}


def websocket_url(url: str) -> str:
    if url.startswith("https://"):
        return "wss://" + url[len("https://"):]
    if url.startswith("http://"):
        return "ws://" + url[len("http://"):]
    return url


async def open_websocket(url: str, payload: dict[str, Any], **connect_kwargs: Any):
    """Open a WebSocket to the node bridge and send ``payload`` once connected.

    The caller owns the returned connection and must close it.
    """
    ws = await websockets.connect(websocket_url(url), **connect_kwargs)
    try:
        await ws.send(json.dumps(payload))
    except Exception:
        await ws.close()
        raise
    logger.debug("Sent %s over WebSocket to %s", payload.get("method"), url)
    return ws


class OgmiosClient:
    def __init__(self, base_url: str, decoder: SchemaDecoder):
        self.base_url = base_url.rstrip("/")
        self._decoder = decoder

    async def request(
        self,
        method: str,
        params: dict[str, Any] | None,
        result_schema: type[T] | Any,
    ) -> T:
        """Call ``method`` and return its decoded ``result``.

        Raises:
            RemoteRejection: If the response carries an ``error`` object.
        """
        response = await self._decoder.post(
            self.base_url,
            rpc_request(method, params),
            rpc_envelope(result_schema),
            check_status=False,
        )
        if isinstance(response, RpcFailure):
            logger.warning("Ogmios rejected %s: %s", method, response.error)
            raise RemoteRejection(response.error)
        return response.result

    async def open_websocket(self, method: str, params: dict[str, Any] | None = None):
        return await open_websocket(self.base_url, rpc_request(method, params))
