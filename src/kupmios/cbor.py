"""CBOR helpers for script payloads."""

from __future__ import annotations

import cbor2


def _loads_bytes(data: bytes) -> bytes:
    """Decode ``data`` as exactly one CBOR byte string."""
    value = cbor2.loads(data)
    if not isinstance(value, bytes):
        raise ValueError("CBOR item is not a byte string")
    if cbor2.dumps(value) != data:
        raise ValueError("CBOR byte string does not span the whole input")
    return value


def _is_wrapped(data: bytes) -> bool:
    try:
        _loads_bytes(data)
    except (cbor2.CBORError, ValueError):
        return False
    return True


def apply_double_cbor_encoding(script: str) -> str:
    """Return ``script`` wrapped in exactly two CBOR byte-string layers.

    The indexer serves Plutus scripts as flat bytes, while transaction
    builders expect them double encoded. Scripts that already carry one or
    two layers are wrapped only as far as needed.
    """
    raw = bytes.fromhex(script)
    if _is_wrapped(raw):
        if _is_wrapped(_loads_bytes(raw)):
            return script
        return cbor2.dumps(raw).hex()
    return cbor2.dumps(cbor2.dumps(raw)).hex()
