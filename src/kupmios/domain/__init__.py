"""Domain models returned by providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

Assets = dict[str, int]
CostModel = dict[str, int]


class ScriptType(str, Enum):
    NATIVE = "Native"
    PLUTUS_V1 = "PlutusV1"
    PLUTUS_V2 = "PlutusV2"
    PLUTUS_V3 = "PlutusV3"


@dataclass(frozen=True)
class Script:
    """A reference script. Plutus scripts are double CBOR encoded hex."""

    type: ScriptType
    script: str


@dataclass(frozen=True)
class Credential:
    """A payment credential; queries match every address carrying it."""

    type: Literal["Key", "Script"]
    hash: str


@dataclass(frozen=True)
class OutRef:
    tx_hash: str
    output_index: int


@dataclass(frozen=True)
class UTxO:
    """An unspent transaction output, identified by (tx_hash, output_index)."""

    tx_hash: str
    output_index: int
    address: str
    assets: Assets
    datum_hash: str | None = None
    datum: str | None = None
    script_ref: Script | None = None

    @property
    def out_ref(self) -> OutRef:
        return OutRef(tx_hash=self.tx_hash, output_index=self.output_index)


@dataclass(frozen=True)
class Delegation:
    pool_id: str | None
    rewards: int


@dataclass(frozen=True)
class ProtocolParameters:
    """Canonical protocol parameters.

    Every monetary and unit-count field is an exact integer. The execution
    prices and the reference-script fee coefficient are floats.
    """

    min_fee_a: int
    min_fee_b: int
    max_tx_size: int
    max_val_size: int
    key_deposit: int
    pool_deposit: int
    drep_deposit: int
    gov_action_deposit: int
    price_mem: float
    price_step: float
    max_tx_ex_mem: int
    max_tx_ex_steps: int
    coins_per_utxo_byte: int
    collateral_percentage: int
    max_collateral_inputs: int
    min_fee_ref_script_cost_per_byte: float
    cost_models: dict[str, CostModel] = field(default_factory=dict)


@dataclass(frozen=True)
class ExUnits:
    mem: int
    steps: int


@dataclass(frozen=True)
class EvalRedeemer:
    """Execution budget computed for one redeemer."""

    ex_units: ExUnits
    redeemer_index: int
    redeemer_tag: str


__all__ = [
    "Assets",
    "CostModel",
    "Credential",
    "Delegation",
    "EvalRedeemer",
    "ExUnits",
    "OutRef",
    "ProtocolParameters",
    "Script",
    "ScriptType",
    "UTxO",
]
