"""Provider backed by a Kupo indexer and an Ogmios node bridge."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Sequence, TypeVar

import requests

from ..clients.http import SchemaDecoder
from ..clients.kupo import KupoClient, address_pattern, transaction_pattern, unit_pattern
from ..clients.ogmios import OgmiosClient
from ..confirmation import ConfirmationPoller
from ..constants import (
    DEFAULT_AWAIT_TX_TIMEOUT,
    DEFAULT_CALL_TIMEOUT,
    DEFAULT_CHECK_INTERVAL_MS,
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    DEFAULT_REQUEST_TIMEOUT,
)
from ..domain import (
    Credential,
    Delegation,
    EvalRedeemer,
    ExUnits,
    OutRef,
    ProtocolParameters,
    UTxO,
)
from ..errors import AbsentValueError, AmbiguousUnitError, KupmiosError
from ..logger import get_logger
from ..processors.auxiliary import AuxiliaryResolver, gather_or_cancel
from ..processors.protocol_parameters import to_protocol_parameters
from ..processors.utxos import to_ogmios_utxo
from ..schemas import ogmios
from ..settings import KupmiosSettings
from ..units import from_unit
from .base import BaseProvider

logger = get_logger(__name__)

T = TypeVar("T")


class KupmiosProvider(BaseProvider):
    """UTxO queries go to Kupo; ledger queries and submission go to Ogmios.

    Every public method either returns a domain value or raises
    :class:`KupmiosError`. Each call is bounded by ``call_timeout`` seconds,
    except ``get_datum`` (unbounded) and ``await_tx`` (``await_tx_timeout``).
    """

    def __init__(
        self,
        kupo_url: str,
        ogmios_url: str,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        call_timeout: float = DEFAULT_CALL_TIMEOUT,
        await_tx_timeout: float = DEFAULT_AWAIT_TX_TIMEOUT,
        max_concurrent_requests: int | None = DEFAULT_MAX_CONCURRENT_REQUESTS,
        session: requests.Session | None = None,
    ):
        self.call_timeout = call_timeout
        self.kupo = KupoClient(
            kupo_url,
            SchemaDecoder(
                session=session,
                request_timeout=request_timeout,
                max_concurrent_requests=max_concurrent_requests,
            ),
        )
        self.ogmios = OgmiosClient(
            ogmios_url,
            SchemaDecoder(session=session, request_timeout=request_timeout),
        )
        self.resolver = AuxiliaryResolver(self.kupo)
        self.poller = ConfirmationPoller(self.kupo, timeout=await_tx_timeout)

    @classmethod
    def from_settings(cls, settings: KupmiosSettings) -> KupmiosProvider:
        return cls(
            settings.kupo_url,
            settings.ogmios_url,
            request_timeout=settings.request_timeout,
            call_timeout=settings.call_timeout,
            await_tx_timeout=settings.await_tx_timeout,
            max_concurrent_requests=settings.max_concurrent_requests,
        )

    @property
    def provider_name(self) -> str:
        return "kupmios"

    async def _run(
        self,
        operation: str,
        awaitable: Awaitable[T],
        *,
        timeout: float | None = DEFAULT_CALL_TIMEOUT,
    ) -> T:
        """Await ``awaitable`` within ``timeout`` and normalize any failure."""
        try:
            if timeout is None:
                return await awaitable
            async with asyncio.timeout(timeout):
                return await awaitable
        except KupmiosError as exc:
            logger.warning("%s failed: %s", operation, exc.message)
            raise
        except Exception as exc:
            error = KupmiosError.from_exception(exc, operation)
            logger.warning("%s", error.message)
            raise error from exc

    async def get_protocol_parameters(self) -> ProtocolParameters:
        async def _fetch() -> ProtocolParameters:
            result = await self.ogmios.request(
                "queryLedgerState/protocolParameters", {}, ogmios.ProtocolParameters
            )
            return to_protocol_parameters(result)

        return await self._run(
            "get_protocol_parameters", _fetch(), timeout=self.call_timeout
        )

    async def _utxos_at(
        self,
        address_or_credential: str | Credential,
        *,
        policy_id: str | None = None,
        asset_name: str | None = None,
    ) -> list[UTxO]:
        records = await self.kupo.matches(
            address_pattern(address_or_credential),
            policy_id=policy_id,
            asset_name=asset_name,
        )
        logger.debug("%d UTxOs at %s", len(records), address_or_credential)
        return await self.resolver.to_utxos(records)

    async def get_utxos(self, address_or_credential: str | Credential) -> list[UTxO]:
        return await self._run(
            "get_utxos", self._utxos_at(address_or_credential), timeout=self.call_timeout
        )

    async def get_utxos_with_unit(
        self, address_or_credential: str | Credential, unit: str
    ) -> list[UTxO]:
        async def _fetch() -> list[UTxO]:
            policy_id, asset_name = from_unit(unit)
            return await self._utxos_at(
                address_or_credential, policy_id=policy_id, asset_name=asset_name
            )

        return await self._run(
            "get_utxos_with_unit", _fetch(), timeout=self.call_timeout
        )

    async def get_utxo_by_unit(self, unit: str) -> UTxO:
        async def _fetch() -> UTxO:
            records = await self.kupo.matches(unit_pattern(unit))
            if len(records) > 1:
                raise AmbiguousUnitError(unit, len(records))
            if not records:
                raise AbsentValueError(f"No UTxO holds unit {unit}")
            return await self.resolver.to_utxo(records[0])

        return await self._run("get_utxo_by_unit", _fetch(), timeout=self.call_timeout)

    async def get_utxos_by_out_ref(self, out_refs: Sequence[OutRef]) -> list[UTxO]:
        """Look up each distinct transaction once, then keep only the requested outputs."""
        wanted = {(ref.tx_hash, ref.output_index) for ref in out_refs}
        tx_hashes = list(dict.fromkeys(ref.tx_hash for ref in out_refs))

        async def _fetch_tx(tx_hash: str) -> list[UTxO]:
            async with asyncio.timeout(self.call_timeout):
                records = await self.kupo.matches(transaction_pattern(tx_hash))
                selected = [
                    raw
                    for raw in records
                    if (raw.transaction_id, raw.output_index) in wanted
                ]
                return await self.resolver.to_utxos(selected)

        async def _fetch() -> list[UTxO]:
            batches = await gather_or_cancel(*(_fetch_tx(h) for h in tx_hashes))
            return [utxo for batch in batches for utxo in batch]

        return await self._run("get_utxos_by_out_ref", _fetch(), timeout=None)

    async def get_delegation(self, reward_address: str) -> Delegation:
        async def _fetch() -> Delegation:
            result = await self.ogmios.request(
                "queryLedgerState/rewardAccountSummaries",
                {"keys": [reward_address]},
                ogmios.RewardAccountSummaries,
            )
            summary = next(iter(result.values()), None) if result else None
            if summary is None:
                return Delegation(pool_id=None, rewards=0)
            return Delegation(
                pool_id=summary.delegate.id if summary.delegate else None,
                rewards=summary.rewards.ada.lovelace,
            )

        return await self._run("get_delegation", _fetch(), timeout=self.call_timeout)

    async def get_datum(self, datum_hash: str) -> str:
        async def _fetch() -> str:
            found = await self.kupo.datum(datum_hash)
            if found is None:
                raise AbsentValueError(f"No datum found for datum hash: {datum_hash}")
            return found.datum

        return await self._run("get_datum", _fetch(), timeout=None)

    async def await_tx(
        self, tx_hash: str, check_interval_ms: int = DEFAULT_CHECK_INTERVAL_MS
    ) -> bool:
        return await self._run(
            "await_tx", self.poller.wait(tx_hash, check_interval_ms), timeout=None
        )

    async def submit_tx(self, tx_cbor: str) -> str:
        async def _submit() -> str:
            result = await self.ogmios.request(
                "submitTransaction",
                {"transaction": {"cbor": tx_cbor}},
                ogmios.SubmitTransactionResult,
            )
            logger.info("Submitted transaction %s", result.transaction.id)
            return result.transaction.id

        return await self._run("submit_tx", _submit(), timeout=self.call_timeout)

    async def evaluate_tx(
        self, tx_cbor: str, additional_utxos: Sequence[UTxO] | None = None
    ) -> list[EvalRedeemer]:
        async def _evaluate() -> list[EvalRedeemer]:
            params: dict[str, Any] = {
                "transaction": {"cbor": tx_cbor},
                "additionalUtxo": [to_ogmios_utxo(u) for u in additional_utxos or ()],
            }
            result = await self.ogmios.request(
                "evaluateTransaction", params, list[ogmios.EvaluatedRedeemer]
            )
            return [
                EvalRedeemer(
                    ex_units=ExUnits(mem=item.budget.memory, steps=item.budget.cpu),
                    redeemer_index=item.validator.index,
                    redeemer_tag=item.validator.purpose,
                )
                for item in result
            ]

        return await self._run("evaluate_tx", _evaluate(), timeout=self.call_timeout)
