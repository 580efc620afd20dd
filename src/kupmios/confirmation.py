"""Poll the indexer until a transaction's outputs become visible."""

from __future__ import annotations

import asyncio
from typing import Any

import backoff

from .clients.kupo import KupoClient, transaction_pattern
from .constants import DEFAULT_AWAIT_TX_TIMEOUT, DEFAULT_CHECK_INTERVAL_MS
from .logger import get_logger
from .schemas.kupo import KupoUTxO

logger = get_logger(__name__)


def _log_backoff(details: dict[str, Any]) -> None:
    logger.debug(
        "Transaction %s not visible yet (attempt %d), retrying in %.2fs",
        details["args"][0],
        details["tries"],
        details["wait"],
    )


class ConfirmationPoller:
    """Wait for a transaction by polling ``/matches/*@{tx_hash}?unspent``.

    Waits grow exponentially from the check interval (interval, 2x, 4x, ...)
    and the whole wait is capped by ``timeout`` seconds. Only a non-empty
    match list counts as confirmation.
    """

    def __init__(self, kupo: KupoClient, *, timeout: float = DEFAULT_AWAIT_TX_TIMEOUT):
        self._kupo = kupo
        self.timeout = timeout

    async def poll(self, tx_hash: str) -> list[KupoUTxO]:
        return await self._kupo.matches(transaction_pattern(tx_hash), unspent=True)

    async def wait(
        self, tx_hash: str, check_interval_ms: int = DEFAULT_CHECK_INTERVAL_MS
    ) -> bool:
        """Return ``True`` once the transaction is visible.

        Raises:
            TimeoutError: If the transaction is still not visible after ``timeout``.
        """
        poll_until_found = backoff.on_predicate(
            backoff.expo,
            lambda matches: not matches,
            factor=check_interval_ms / 1000,
            max_time=self.timeout,
            jitter=None,
            on_backoff=_log_backoff,
        )(self.poll)

        async with asyncio.timeout(self.timeout):
            matches = await poll_until_found(tx_hash)
        if not matches:
            raise TimeoutError(
                f"Transaction {tx_hash} not visible after {self.timeout}s"
            )
        logger.info("Transaction %s confirmed (%d outputs)", tx_hash, len(matches))
        return True
