"""Resolve inline datums and reference scripts for indexer records."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Coroutine, Iterable, TypeVar

from ..cbor import apply_double_cbor_encoding
from ..clients.kupo import KupoClient
from ..domain import Script, ScriptType, UTxO
from ..errors import DecodeError
from ..logger import get_logger
from ..schemas.kupo import KupoScript, KupoUTxO
from .utxos import to_utxo

logger = get_logger(__name__)

T = TypeVar("T")

SCRIPT_TYPES: dict[str, ScriptType] = {
    "native": ScriptType.NATIVE,
    "plutus:v1": ScriptType.PLUTUS_V1,
    "plutus:v2": ScriptType.PLUTUS_V2,
    "plutus:v3": ScriptType.PLUTUS_V3,
}


@dataclass(frozen=True)
class AuxiliaryData:
    datum: str | None
    script_ref: Script | None


async def gather_or_cancel(*coros: Coroutine[Any, Any, T]) -> list[T]:
    """Run ``coros`` concurrently and return their results in order.

    The first failure cancels the lookups still in flight and is re-raised
    as is, not wrapped in an exception group.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(coro) for coro in coros]
    except BaseExceptionGroup as group:
        raise group.exceptions[0] from None
    return [task.result() for task in tasks]


def to_script(raw: KupoScript) -> Script:
    script_type = SCRIPT_TYPES[raw.language]
    if script_type is ScriptType.NATIVE:
        return Script(type=script_type, script=raw.script)
    try:
        encoded = apply_double_cbor_encoding(raw.script)
    except ValueError as e:
        raise DecodeError(
            f"Indexer returned a {raw.language} script that is not hex: {e}", url=""
        ) from e
    return Script(type=script_type, script=encoded)


class AuxiliaryResolver:
    """Fetch the datum and reference script that an indexer record points to.

    Both lookups for a record run concurrently, and every record in a batch
    is resolved concurrently. Any failed lookup fails the whole batch and
    cancels the lookups still pending; the decoder's request semaphore
    bounds how many lookups are in flight.
    """

    def __init__(self, kupo: KupoClient):
        self._kupo = kupo

    async def resolve_datum(self, raw: KupoUTxO) -> str | None:
        if raw.datum_type != "inline" or not raw.datum_hash:
            return None
        found = await self._kupo.datum(raw.datum_hash)
        if found is None:
            logger.debug("No datum stored for hash %s", raw.datum_hash)
            return None
        return found.datum

    async def resolve_script(self, raw: KupoUTxO) -> Script | None:
        if not raw.script_hash:
            return None
        found = await self._kupo.script(raw.script_hash)
        if found is None:
            logger.debug("No script stored for hash %s", raw.script_hash)
            return None
        return to_script(found)

    async def resolve(self, raw: KupoUTxO) -> AuxiliaryData:
        datum, script_ref = await gather_or_cancel(
            self.resolve_datum(raw), self.resolve_script(raw)
        )
        return AuxiliaryData(datum=datum, script_ref=script_ref)

    async def to_utxo(self, raw: KupoUTxO) -> UTxO:
        aux = await self.resolve(raw)
        return to_utxo(raw, datum=aux.datum, script_ref=aux.script_ref)

    async def to_utxos(self, records: Iterable[KupoUTxO]) -> list[UTxO]:
        return await gather_or_cancel(*(self.to_utxo(raw) for raw in records))
