from __future__ import annotations

from .auxiliary import AuxiliaryData, AuxiliaryResolver
from .protocol_parameters import to_protocol_parameters
from .utxos import to_assets, to_ogmios_utxo, to_utxo

__all__ = [
    "AuxiliaryData",
    "AuxiliaryResolver",
    "to_protocol_parameters",
    "to_assets",
    "to_ogmios_utxo",
    "to_utxo",
]
