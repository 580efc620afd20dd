import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from pydantic import TypeAdapter

from conftest import DATUM_HASH, SCRIPT_HASH
from kupmios.domain import Script, ScriptType
from kupmios.errors import DecodeError
from kupmios.processors.auxiliary import AuxiliaryResolver, gather_or_cancel, to_script
from kupmios.schemas.kupo import KupoDatum, KupoScript, KupoUTxO

FLAT_SCRIPT = "01000033222220051200120011"


def _record(payload) -> KupoUTxO:
    return TypeAdapter(KupoUTxO).validate_json(json.dumps(payload))


@pytest.fixture
def kupo():
    client = AsyncMock()
    client.datum.return_value = KupoDatum(datum="d87980")
    client.script.return_value = KupoScript(language="plutus:v2", script=FLAT_SCRIPT)
    return client


@pytest.mark.asyncio
async def test_inline_datum_is_fetched(kupo, kupo_utxo):
    resolver = AuxiliaryResolver(kupo)

    aux = await resolver.resolve(_record(kupo_utxo(datum_type="inline", datum_hash=DATUM_HASH)))

    assert aux.datum == "d87980"
    assert aux.script_ref is None
    kupo.datum.assert_awaited_once_with(DATUM_HASH)
    kupo.script.assert_not_awaited()


@pytest.mark.asyncio
async def test_hash_datum_is_not_fetched(kupo, kupo_utxo):
    aux = await AuxiliaryResolver(kupo).resolve(
        _record(kupo_utxo(datum_type="hash", datum_hash=DATUM_HASH))
    )

    assert aux.datum is None
    kupo.datum.assert_not_awaited()


@pytest.mark.asyncio
async def test_absent_datum_becomes_none(kupo, kupo_utxo):
    kupo.datum.return_value = None

    aux = await AuxiliaryResolver(kupo).resolve(
        _record(kupo_utxo(datum_type="inline", datum_hash=DATUM_HASH))
    )

    assert aux.datum is None


@pytest.mark.asyncio
async def test_plutus_script_is_double_encoded(kupo, kupo_utxo):
    aux = await AuxiliaryResolver(kupo).resolve(_record(kupo_utxo(script_hash=SCRIPT_HASH)))

    assert aux.script_ref == Script(type=ScriptType.PLUTUS_V2, script="4e4d" + FLAT_SCRIPT)
    kupo.script.assert_awaited_once_with(SCRIPT_HASH)


@pytest.mark.asyncio
async def test_native_script_is_returned_as_is(kupo, kupo_utxo):
    kupo.script.return_value = KupoScript(language="native", script="8200581c")

    aux = await AuxiliaryResolver(kupo).resolve(_record(kupo_utxo(script_hash=SCRIPT_HASH)))

    assert aux.script_ref == Script(type=ScriptType.NATIVE, script="8200581c")


@pytest.mark.asyncio
async def test_datum_and_script_lookups_overlap(kupo, kupo_utxo):
    started: list[str] = []
    release = asyncio.Event()

    async def slow_datum(_hash):
        started.append("datum")
        await release.wait()
        return KupoDatum(datum="d87980")

    async def slow_script(_hash):
        started.append("script")
        release.set()
        return None

    kupo.datum.side_effect = slow_datum
    kupo.script.side_effect = slow_script
    record = _record(kupo_utxo(datum_type="inline", datum_hash=DATUM_HASH, script_hash=SCRIPT_HASH))

    aux = await asyncio.wait_for(AuxiliaryResolver(kupo).resolve(record), timeout=1)

    assert sorted(started) == ["datum", "script"]
    assert aux.datum == "d87980"


@pytest.mark.asyncio
async def test_one_failed_lookup_fails_the_batch(kupo, kupo_utxo):
    kupo.script.side_effect = RuntimeError("indexer down")
    records = [
        _record(kupo_utxo(output_index=0)),
        _record(kupo_utxo(output_index=1, script_hash=SCRIPT_HASH)),
    ]

    with pytest.raises(RuntimeError, match="indexer down"):
        await AuxiliaryResolver(kupo).to_utxos(records)


@pytest.mark.asyncio
async def test_to_utxos_keeps_order(kupo, kupo_utxo):
    records = [_record(kupo_utxo(output_index=i)) for i in (2, 0, 1)]

    utxos = await AuxiliaryResolver(kupo).to_utxos(records)

    assert [u.output_index for u in utxos] == [2, 0, 1]


@pytest.mark.asyncio
async def test_failed_lookup_cancels_pending_lookup(kupo, kupo_utxo):
    cancelled = asyncio.Event()

    async def hanging_datum(_hash):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    kupo.datum.side_effect = hanging_datum
    kupo.script.side_effect = RuntimeError("indexer down")
    record = _record(kupo_utxo(datum_type="inline", datum_hash=DATUM_HASH, script_hash=SCRIPT_HASH))

    with pytest.raises(RuntimeError, match="indexer down"):
        await asyncio.wait_for(AuxiliaryResolver(kupo).resolve(record), timeout=1)

    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_gather_or_cancel_keeps_order():
    async def value(v):
        await asyncio.sleep(0.01 * v)
        return v

    assert await gather_or_cancel(value(3), value(1), value(2)) == [3, 1, 2]
    assert await gather_or_cancel() == []


def test_non_hex_plutus_script_is_decode_error():
    with pytest.raises(DecodeError, match="plutus:v2"):
        to_script(KupoScript(language="plutus:v2", script="not-hex"))


@pytest.mark.asyncio
async def test_non_hex_script_fails_resolution_as_decode_error(kupo, kupo_utxo):
    kupo.script.return_value = KupoScript(language="plutus:v3", script="zz")

    with pytest.raises(DecodeError):
        await AuxiliaryResolver(kupo).resolve(_record(kupo_utxo(script_hash=SCRIPT_HASH)))
