from __future__ import annotations

from .http import SchemaDecoder
from .kupo import KupoClient
from .ogmios import OgmiosClient, open_websocket

__all__ = ["SchemaDecoder", "KupoClient", "OgmiosClient", "open_websocket"]
