"""REST client for the Kupo UTxO indexer."""

from __future__ import annotations

from ..domain import Credential
from ..schemas.kupo import (
    KupoDatum,
    KupoScript,
    KupoUTxO,
    KupoUTxOList,
    OptionalKupoDatum,
    OptionalKupoScript,
)
from ..units import from_unit
from .http import SchemaDecoder


def address_pattern(address_or_credential: str | Credential) -> str:
    """Match pattern for a bech32 address or any address with a payment credential."""
    if isinstance(address_or_credential, Credential):
        return f"{address_or_credential.hash}/*"
    return address_or_credential


def unit_pattern(unit: str) -> str:
    policy_id, asset_name = from_unit(unit)
    return f"{policy_id}.{asset_name or '*'}"


def transaction_pattern(tx_hash: str) -> str:
    """Match pattern for every output of ``tx_hash``."""
    return f"*@{tx_hash}"


class KupoClient:
    def __init__(self, base_url: str, decoder: SchemaDecoder):
        self.base_url = base_url.rstrip("/")
        self._decoder = decoder

    def matches_url(
        self,
        pattern: str,
        *,
        unspent: bool = True,
        policy_id: str | None = None,
        asset_name: str | None = None,
    ) -> str:
        query: list[str] = []
        if unspent:
            query.append("unspent")
        if policy_id:
            query.append(f"policy_id={policy_id}")
        if asset_name:
            query.append(f"asset_name={asset_name}")
        url = f"{self.base_url}/matches/{pattern}"
        return f"{url}?{'&'.join(query)}" if query else url

    async def matches(
        self,
        pattern: str,
        *,
        unspent: bool = True,
        policy_id: str | None = None,
        asset_name: str | None = None,
    ) -> list[KupoUTxO]:
        url = self.matches_url(
            pattern, unspent=unspent, policy_id=policy_id, asset_name=asset_name
        )
        return await self._decoder.get(url, KupoUTxOList)

    async def datum(self, datum_hash: str) -> KupoDatum | None:
        return await self._decoder.get(
            f"{self.base_url}/datums/{datum_hash}", OptionalKupoDatum
        )

    async def script(self, script_hash: str) -> KupoScript | None:
        return await self._decoder.get(
            f"{self.base_url}/scripts/{script_hash}", OptionalKupoScript
        )
