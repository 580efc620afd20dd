"""Pydantic models for Ogmios JSON-RPC responses.

Ogmios adds protocol parameters and summary fields as the ledger evolves, so
unknown fields are ignored; every declared field is still validated strictly.
"""

from __future__ import annotations

from typing import Annotated, Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, PlainValidator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _parse_ratio(value: Any) -> tuple[int, int]:
    """Parse an Ogmios rational (``"577/10000"``) into a numerator/denominator pair."""
    if isinstance(value, str):
        parts = value.split("/")
        if len(parts) != 2:
            raise ValueError(f"Expected a 'numerator/denominator' string, got {value!r}")
        try:
            numerator, denominator = int(parts[0]), int(parts[1])
        except ValueError as e:
            raise ValueError(f"Invalid rational {value!r}") from e
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        numerator, denominator = value
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
            raise ValueError(f"Rational components must be integers, got {value!r}")
    else:
        raise ValueError(f"Expected a rational, got {value!r}")
    if denominator == 0:
        raise ValueError(f"Rational {value!r} has a zero denominator")
    return numerator, denominator


Ratio = Annotated[tuple[int, int], PlainValidator(_parse_ratio)]


class OgmiosModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        strict=True,
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Lovelace(OgmiosModel):
    lovelace: int


class Ada(OgmiosModel):
    ada: Lovelace


class Bytes(OgmiosModel):
    bytes: int


class ExecutionUnits(OgmiosModel):
    memory: int
    cpu: int


class ExecutionPrices(OgmiosModel):
    memory: Ratio
    cpu: Ratio


class MinFeeReferenceScripts(OgmiosModel):
    base: float
    range: int
    multiplier: float


class PlutusCostModels(OgmiosModel):
    plutus_v1: list[int] = Field(alias="plutus:v1")
    plutus_v2: list[int] = Field(alias="plutus:v2")
    plutus_v3: Optional[list[int]] = Field(default=None, alias="plutus:v3")


class ProtocolVersion(OgmiosModel):
    major: int
    minor: int


class ProtocolParameters(OgmiosModel):
    """Result of ``queryLedgerState/protocolParameters``."""

    min_fee_coefficient: int
    min_fee_constant: Ada
    min_fee_reference_scripts: MinFeeReferenceScripts
    max_block_body_size: Bytes
    max_block_header_size: Bytes
    max_transaction_size: Bytes
    max_value_size: Bytes
    stake_credential_deposit: Ada
    stake_pool_deposit: Ada
    delegate_representative_deposit: Ada
    governance_action_deposit: Ada
    stake_pool_retirement_epoch_bound: int
    desired_number_of_stake_pools: int
    stake_pool_pledge_influence: Ratio
    monetary_expansion: Ratio
    treasury_expansion: Ratio
    min_stake_pool_cost: Ada
    min_utxo_deposit_constant: Ada
    min_utxo_deposit_coefficient: int
    plutus_cost_models: PlutusCostModels
    script_execution_prices: ExecutionPrices
    max_execution_units_per_transaction: ExecutionUnits
    max_execution_units_per_block: ExecutionUnits
    collateral_percentage: int
    max_collateral_inputs: int
    version: ProtocolVersion


class DelegateId(OgmiosModel):
    id: str


class RewardAccountSummary(OgmiosModel):
    delegate: Optional[DelegateId] = None
    rewards: Ada
    deposit: Optional[Ada] = None


RewardAccountSummaries = Optional[dict[str, RewardAccountSummary]]


class TransactionId(OgmiosModel):
    id: str


class SubmitTransactionResult(OgmiosModel):
    transaction: TransactionId


class RedeemerValidator(OgmiosModel):
    purpose: str
    index: int


class RedeemerBudget(OgmiosModel):
    memory: int
    cpu: int


class EvaluatedRedeemer(OgmiosModel):
    validator: RedeemerValidator
    budget: RedeemerBudget


class RpcResult(OgmiosModel, Generic[T]):
    jsonrpc: str
    method: str
    id: Any = None
    result: T


class RpcFailure(OgmiosModel):
    jsonrpc: str
    method: str
    id: Any = None
    error: dict[str, Any]


def rpc_envelope(result_schema: Any) -> Any:
    """Build the response schema ``{result} | {error}`` for a JSON-RPC call."""
    return Union[RpcResult[result_schema], RpcFailure]
