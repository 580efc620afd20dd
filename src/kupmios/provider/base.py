from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..constants import DEFAULT_CHECK_INTERVAL_MS
from ..domain import (
    Credential,
    Delegation,
    EvalRedeemer,
    OutRef,
    ProtocolParameters,
    UTxO,
)


class BaseProvider(ABC):
    """Read ledger state and submit transactions, independent of the backend."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        ...

    @abstractmethod
    async def get_protocol_parameters(self) -> ProtocolParameters: ...

    @abstractmethod
    async def get_utxos(self, address_or_credential: str | Credential) -> list[UTxO]: ...

    @abstractmethod
    async def get_utxos_with_unit(
        self, address_or_credential: str | Credential, unit: str
    ) -> list[UTxO]: ...

    @abstractmethod
    async def get_utxo_by_unit(self, unit: str) -> UTxO:
        """Return the single UTxO holding ``unit``."""
        ...

    @abstractmethod
    async def get_utxos_by_out_ref(self, out_refs: Sequence[OutRef]) -> list[UTxO]: ...

    @abstractmethod
    async def get_delegation(self, reward_address: str) -> Delegation: ...

    @abstractmethod
    async def get_datum(self, datum_hash: str) -> str: ...

    @abstractmethod
    async def await_tx(
        self, tx_hash: str, check_interval_ms: int = DEFAULT_CHECK_INTERVAL_MS
    ) -> bool: ...

    @abstractmethod
    async def submit_tx(self, tx_cbor: str) -> str:
        """Submit a signed transaction and return its hash."""
        ...

    @abstractmethod
    async def evaluate_tx(
        self, tx_cbor: str, additional_utxos: Sequence[UTxO] | None = None
    ) -> list[EvalRedeemer]: ...
