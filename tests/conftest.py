"""Shared fixtures: sample wire payloads and an in-memory HTTP session."""

from __future__ import annotations

import copy
import json
from typing import Any, Callable

import pytest
import requests

KUPO_URL = "http://kupo.test"
OGMIOS_URL = "http://ogmios.test"

POLICY_ID = "c0ffee" + "00" * 25
ASSET_NAME = "4e4654"
TX_HASH = "a" * 64
SCRIPT_HASH = "5c" * 28
DATUM_HASH = "d4" * 32

KUPO_UTXO: dict[str, Any] = {
    "transaction_index": 3,
    "transaction_id": TX_HASH,
    "output_index": 0,
    "address": "addr_test1vz09v9yfxguvlp0zsnrpa3tdtm7el8xufp3m5lsm7qxzclgmzkket",
    "value": {"coins": 2_000_000, "assets": {f"{POLICY_ID}.{ASSET_NAME}": 1}},
    "datum_hash": None,
    "script_hash": None,
    "created_at": {"slot_no": 1200, "header_hash": "b" * 64},
    "spent_at": None,
}

OGMIOS_PROTOCOL_PARAMETERS: dict[str, Any] = {
    "minFeeCoefficient": 44,
    "minFeeConstant": {"ada": {"lovelace": 155381}},
    "minFeeReferenceScripts": {"range": 25600, "base": 15.0, "multiplier": 1.2},
    "maxBlockBodySize": {"bytes": 90112},
    "maxBlockHeaderSize": {"bytes": 1100},
    "maxTransactionSize": {"bytes": 16384},
    "maxValueSize": {"bytes": 5000},
    "stakeCredentialDeposit": {"ada": {"lovelace": 2_000_000}},
    "stakePoolDeposit": {"ada": {"lovelace": 500_000_000}},
    "delegateRepresentativeDeposit": {"ada": {"lovelace": 500_000_000}},
    "governanceActionDeposit": {"ada": {"lovelace": 100_000_000_000}},
    "stakePoolRetirementEpochBound": 18,
    "desiredNumberOfStakePools": 500,
    "stakePoolPledgeInfluence": "3/10",
    "monetaryExpansion": "3/1000",
    "treasuryExpansion": "1/5",
    "minStakePoolCost": {"ada": {"lovelace": 170_000_000}},
    "minUtxoDepositConstant": {"ada": {"lovelace": 0}},
    "minUtxoDepositCoefficient": 4310,
    "plutusCostModels": {
        "plutus:v1": [100788, 420, 1],
        "plutus:v2": [100788, 420, 1, 1],
        "plutus:v3": [100788, 420],
    },
    "scriptExecutionPrices": {"memory": "577/10000", "cpu": "721/10000000"},
    "maxExecutionUnitsPerTransaction": {"memory": 14_000_000, "cpu": 10_000_000_000},
    "maxExecutionUnitsPerBlock": {"memory": 62_000_000, "cpu": 20_000_000_000},
    "collateralPercentage": 150,
    "maxCollateralInputs": 3,
    "version": {"major": 9, "minor": 1},
    "constitutionalCommitteeMaxTermLength": 146,
}


def rpc_result(method: str, result: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "method": method, "result": result, "id": None}


def rpc_error(method: str, error: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "method": method, "error": error, "id": None}


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self.status_code = status_code
        self.content = json.dumps(payload).encode()

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Stand-in for ``requests.Session``.

    GET requests are routed by URL, POST requests by JSON-RPC method. A route
    value may be a payload, a :class:`FakeResponse`, or a callable returning
    either.
    """

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes: dict[str, Any] = dict(routes or {})
        self.calls: list[tuple[str, str, Any]] = []

    def request(self, method: str, url: str, timeout: float | None = None, json: Any = None):
        self.calls.append((method, url, json))
        key = json["method"] if method == "POST" else url
        if key not in self.routes:
            return FakeResponse({"hint": f"no route for {key}"}, status_code=404)
        route = self.routes[key]
        if callable(route):
            route = route()
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)

    def urls(self) -> list[str]:
        return [url for _, url, _ in self.calls]


@pytest.fixture
def kupo_utxo() -> Callable[..., dict[str, Any]]:
    """Factory for indexer records; keyword arguments override fields."""

    def _make(**overrides: Any) -> dict[str, Any]:
        record = copy.deepcopy(KUPO_UTXO)
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def protocol_parameters_payload() -> dict[str, Any]:
    return copy.deepcopy(OGMIOS_PROTOCOL_PARAMETERS)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
