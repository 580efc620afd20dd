"""Translate node-bridge protocol parameters into the canonical shape."""

from __future__ import annotations

from ..domain import CostModel, ProtocolParameters
from ..schemas import ogmios


def ratio_to_float(ratio: tuple[int, int]) -> float:
    numerator, denominator = ratio
    return numerator / denominator


def indexed_cost_model(values: list[int]) -> CostModel:
    """Key a cost-model array by stringified position."""
    return {str(index): value for index, value in enumerate(values)}


def to_cost_models(models: ogmios.PlutusCostModels) -> dict[str, CostModel]:
    cost_models = {
        "PlutusV1": indexed_cost_model(models.plutus_v1),
        "PlutusV2": indexed_cost_model(models.plutus_v2),
    }
    if models.plutus_v3 is not None:
        cost_models["PlutusV3"] = indexed_cost_model(models.plutus_v3)
    return cost_models


def to_protocol_parameters(result: ogmios.ProtocolParameters) -> ProtocolParameters:
    """Pure, deterministic mapping; ``result`` has already been validated."""
    prices = result.script_execution_prices
    max_units = result.max_execution_units_per_transaction
    return ProtocolParameters(
        min_fee_a=result.min_fee_coefficient,
        min_fee_b=result.min_fee_constant.ada.lovelace,
        max_tx_size=result.max_transaction_size.bytes,
        max_val_size=result.max_value_size.bytes,
        key_deposit=result.stake_credential_deposit.ada.lovelace,
        pool_deposit=result.stake_pool_deposit.ada.lovelace,
        drep_deposit=result.delegate_representative_deposit.ada.lovelace,
        gov_action_deposit=result.governance_action_deposit.ada.lovelace,
        price_mem=ratio_to_float(prices.memory),
        price_step=ratio_to_float(prices.cpu),
        max_tx_ex_mem=max_units.memory,
        max_tx_ex_steps=max_units.cpu,
        coins_per_utxo_byte=result.min_utxo_deposit_coefficient,
        collateral_percentage=result.collateral_percentage,
        max_collateral_inputs=result.max_collateral_inputs,
        min_fee_ref_script_cost_per_byte=result.min_fee_reference_scripts.base,
        cost_models=to_cost_models(result.plutus_cost_models),
    )
