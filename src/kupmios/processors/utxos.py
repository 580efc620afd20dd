"""Assemble domain UTxOs from indexer records, and back into node-bridge shape."""

from __future__ import annotations

from typing import Any

from ..domain import Assets, Script, ScriptType, UTxO
from ..schemas.kupo import KupoUTxO, KupoValue
from ..units import LOVELACE, from_unit, unit_from_kupo_key

OGMIOS_SCRIPT_LANGUAGES = {
    ScriptType.PLUTUS_V1: "plutus:v1",
    ScriptType.PLUTUS_V2: "plutus:v2",
    ScriptType.PLUTUS_V3: "plutus:v3",
}


def to_assets(value: KupoValue) -> Assets:
    """Flatten an indexer value into ``{unit: quantity}`` with lovelace always present."""
    assets: Assets = {LOVELACE: value.coins}
    for key, quantity in value.assets.items():
        assets[unit_from_kupo_key(key)] = quantity
    return assets


def to_utxo(
    raw: KupoUTxO,
    datum: str | None = None,
    script_ref: Script | None = None,
) -> UTxO:
    return UTxO(
        tx_hash=raw.transaction_id,
        output_index=raw.output_index,
        address=raw.address,
        assets=to_assets(raw.value),
        datum_hash=raw.datum_hash if raw.datum_type == "hash" else None,
        datum=datum,
        script_ref=script_ref,
    )


def to_ogmios_value(assets: Assets) -> dict[str, Any]:
    value: dict[str, Any] = {"ada": {"lovelace": assets.get(LOVELACE, 0)}}
    for unit, quantity in assets.items():
        if unit == LOVELACE:
            continue
        policy_id, asset_name = from_unit(unit)
        value.setdefault(policy_id, {})[asset_name or ""] = quantity
    return value


def to_ogmios_utxo(utxo: UTxO) -> dict[str, Any]:
    """Convert a UTxO into the shape ``evaluateTransaction`` expects in ``additionalUtxo``.

    Native reference scripts are omitted; the node bridge only accepts them
    in their JSON form.
    """
    script = None
    if utxo.script_ref is not None and utxo.script_ref.type in OGMIOS_SCRIPT_LANGUAGES:
        script = {
            "language": OGMIOS_SCRIPT_LANGUAGES[utxo.script_ref.type],
            "cbor": utxo.script_ref.script,
        }
    return {
        "transaction": {"id": utxo.tx_hash},
        "index": utxo.output_index,
        "address": utxo.address,
        "value": to_ogmios_value(utxo.assets),
        "datumHash": utxo.datum_hash,
        "datum": utxo.datum,
        "script": script,
    }
