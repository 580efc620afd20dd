"""Pydantic models for Kupo indexer responses."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class KupoModel(BaseModel):
    """Indexer payloads must match exactly; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)


class KupoValue(KupoModel):
    coins: int
    assets: dict[str, int] = {}


class KupoPoint(KupoModel):
    slot_no: int
    header_hash: str


class KupoSpentPoint(KupoPoint):
    transaction_id: Optional[str] = None
    input_index: Optional[int] = None
    redeemer: Optional[str] = None


class KupoUTxO(KupoModel):
    """A single match returned by ``/matches``."""

    transaction_index: int
    transaction_id: str
    output_index: int
    address: str
    value: KupoValue
    datum_hash: Optional[str] = None
    datum_type: Optional[Literal["hash", "inline"]] = None
    script_hash: Optional[str] = None
    created_at: KupoPoint
    spent_at: Optional[KupoSpentPoint] = None


class KupoDatum(KupoModel):
    datum: str


class KupoScript(KupoModel):
    language: Literal["native", "plutus:v1", "plutus:v2", "plutus:v3"]
    script: str


KupoUTxOList = list[KupoUTxO]
OptionalKupoDatum = Optional[KupoDatum]
OptionalKupoScript = Optional[KupoScript]
