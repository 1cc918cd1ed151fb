"""Wallet activity statistics over a timeframe.

Counts and sums come from Transfer logs in the scanned window and from the
transactions those logs belong to. Value and fee totals are integer wei,
summed once per unique transaction.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Awaitable, Optional, TypeVar

import structlog
from structlog.contextvars import bound_contextvars

from wallet_inspector.clients.rpc_client.schema import ReceiptSchema, TransactionSchema
from wallet_inspector.exceptions import UpstreamError, UpstreamUnavailableError
from wallet_inspector.models.scan import ScanWindow
from wallet_inspector.models.transfer_fact import OwnershipKey, TransferFact
from wallet_inspector.models.wallet_stats import WalletAgeEstimate, WalletStatsSnapshot
from wallet_inspector.services.activity.timeframe import Timeframe
from wallet_inspector.services.decoding import decode_transfer_logs
from wallet_inspector.utils.abi import SELECTOR_APPROVE
from wallet_inspector.utils.dedupe import dedupe_facts
from wallet_inspector.utils.units import hex_to_int
from wallet_inspector.utils.validation import mask_address, require_address

if TYPE_CHECKING:
    from wallet_inspector.clients.rpc_client import RpcClient
    from wallet_inspector.services.log_fetch import LogBatchFetcher

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class TransactionFigures:
    """What one transaction contributes to the snapshot."""

    value_wei: int
    fee_wei: Optional[int]
    """None when the receipt was unavailable."""
    is_deployment: bool
    is_approval: bool


def transaction_figures(tx: TransactionSchema, receipt: Optional[ReceiptSchema]) -> TransactionFigures:
    """Value, fee, deployment and approval flags of one transaction."""
    fee: Optional[int] = None
    if receipt is not None:
        price = receipt.get("effectiveGasPrice") or tx.get("gasPrice")
        fee = hex_to_int(receipt.get("gasUsed")) * hex_to_int(price)
    data = (tx.get("input") or "").lower()
    return TransactionFigures(
        value_wei=hex_to_int(tx.get("value")),
        fee_wei=fee,
        is_deployment=not tx.get("to"),
        is_approval=data.startswith(SELECTOR_APPROVE),
    )


def utc_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d")


class ActivityAggregator:
    """Builds a WalletStatsSnapshot from Transfer logs and their transactions."""

    def __init__(
        self,
        rpc_client: "RpcClient",
        fetcher: "LogBatchFetcher",
        *,
        max_scan_blocks: int = 50_000,
        blocks_per_second: float = 1.0,
        safety_factor: float = 1.2,
        average_blocks_per_tx: int = 5,
        max_concurrency: int = 8,
        now: Callable[[], float] = time.time,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            rpc_client: For block headers, transactions, receipts and account reads.
            fetcher: Transfer log fetcher.
            max_scan_blocks: Upper bound on the scanned window.
            blocks_per_second: Assumed block rate for the timeframe block budget.
            safety_factor: Multiplier on the block budget.
            average_blocks_per_tx: Wallet age heuristic.
            max_concurrency: Max block/transaction lookups in flight.
            now: Wall clock in unix seconds (injected for tests).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._rpc = rpc_client
        self._fetcher = fetcher
        self._max_scan_blocks = max_scan_blocks
        self._blocks_per_second = blocks_per_second
        self._safety_factor = safety_factor
        self._average_blocks_per_tx = max(1, average_blocks_per_tx)
        self._max_concurrency = max(1, max_concurrency)
        self._now = now
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _best_effort(self, what: str, awaitable: Awaitable[T]) -> Optional[T]:
        try:
            return await awaitable
        except UpstreamError as e:
            self._logger.warning(
                "stats_lookup_skipped",
                lookup=what,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return None

    async def _chain_head(self) -> int:
        try:
            head = await self._rpc.get_block("latest")
        except UpstreamError as e:
            self._logger.error(
                "chain_head_unavailable",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise UpstreamUnavailableError(
                f"RPC provider unavailable: could not read latest block ({e})", cause=e
            ) from e
        return hex_to_int(head.get("number"))

    async def resolve_block_timestamps(
        self,
        blocks: Iterable[int],
        semaphore: asyncio.Semaphore,
    ) -> dict[int, int]:
        """Timestamp per block; unresolvable blocks are absent from the result."""
        unique = sorted(set(blocks))

        async def one(block: int) -> tuple[int, Optional[int]]:
            async with semaphore:
                try:
                    return block, await self._rpc.get_block_timestamp(block)
                except UpstreamError as e:
                    self._logger.warning(
                        "block_timestamp_skipped",
                        block_number=block,
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                    return block, None

        results = await asyncio.gather(*(one(b) for b in unique))
        return {block: ts for block, ts in results if ts is not None}

    async def _transaction(
        self,
        tx_hash: str,
        semaphore: asyncio.Semaphore,
    ) -> Optional[TransactionFigures]:
        async with semaphore:
            tx, receipt = await asyncio.gather(
                self._rpc.get_transaction(tx_hash),
                self._rpc.get_transaction_receipt(tx_hash),
                return_exceptions=True,
            )
        for result in (tx, receipt):
            if isinstance(result, BaseException) and not isinstance(result, UpstreamError):
                raise result
        if isinstance(tx, UpstreamError):
            self._logger.warning(
                "transaction_skipped",
                tx_hash=tx_hash,
                error_type=type(tx).__name__,
                error_message=str(tx),
            )
            return None
        if isinstance(receipt, UpstreamError):
            # Value and flags still count; the fee is left unresolved.
            self._logger.warning(
                "receipt_skipped",
                tx_hash=tx_hash,
                error_type=type(receipt).__name__,
                error_message=str(receipt),
            )
            receipt = None
        if tx is None:
            self._logger.warning("transaction_skipped", tx_hash=tx_hash, reason="not_found")
            return None
        return transaction_figures(tx, receipt)

    async def _wallet_age(self, latest_block: int, tx_count: int, now: int) -> Optional[WalletAgeEstimate]:
        lookback = max(0, latest_block - tx_count * self._average_blocks_per_tx)
        timestamp = await self._best_effort("wallet_age_block", self._rpc.get_block_timestamp(lookback))
        if timestamp is None:
            return None
        return WalletAgeEstimate(
            lookback_block=lookback,
            lookback_timestamp=timestamp,
            age_seconds=max(0, now - timestamp),
        )

    async def aggregate_activity(
        self,
        address: str,
        timeframe: Timeframe | str = Timeframe.LAST_7_DAYS,
    ) -> WalletStatsSnapshot:
        """Statistics for address over timeframe ("7d", "30d" or "all").

        Raises:
            InvalidInputError: For a malformed address or unknown timeframe.
            UpstreamUnavailableError: If the chain head or every log sub-range is unreadable.
        """
        addr = require_address(address)
        tf = Timeframe.parse(timeframe)
        with bound_contextvars(wallet_masked=mask_address(addr), timeframe=tf.value):
            latest_block = await self._chain_head()
            now = int(self._now())
            cutoff = tf.cutoff(now)
            budget = tf.block_budget(
                max_scan_blocks=self._max_scan_blocks,
                blocks_per_second=self._blocks_per_second,
                safety_factor=self._safety_factor,
            )
            window = ScanWindow.behind_head(latest_block, budget)

            balance, tx_count, logs = await asyncio.gather(
                self._best_effort("balance", self._rpc.get_balance(addr)),
                self._best_effort("transaction_count", self._rpc.get_transaction_count(addr)),
                self._fetcher.fetch_transfer_logs(addr, window),
            )
            facts = dedupe_facts([*decode_transfer_logs(logs.received), *decode_transfer_logs(logs.sent)])

            sem = asyncio.Semaphore(self._max_concurrency)
            timestamps = await self.resolve_block_timestamps(
                (f.block_number for f in facts if f.timestamp is None), sem
            )

            snapshot = WalletStatsSnapshot(
                address=addr,
                timeframe=tf.value,
                from_block=window.from_block,
                to_block=window.to_block,
                cutoff_timestamp=cutoff,
                balance_wei=balance,
                transaction_count=tx_count,
                fetch_report=logs.report,
            )
            counted: list[TransferFact] = []
            for fact in facts:
                ts = fact.timestamp if fact.timestamp is not None else timestamps.get(fact.block_number)
                if ts is None:
                    snapshot.facts_unresolved += 1
                    continue
                if ts < cutoff:
                    snapshot.facts_before_cutoff += 1
                    continue
                day = utc_date(ts)
                snapshot.daily_activity[day] = snapshot.daily_activity.get(day, 0) + 1
                counted.append(fact)
            self._count_facts(addr, counted, snapshot)

            tx_hashes = list(dict.fromkeys(f.transaction_hash for f in counted if f.transaction_hash))
            figures = await asyncio.gather(*(self._transaction(h, sem) for h in tx_hashes))
            for fig in figures:
                if fig is None:
                    snapshot.transactions_unresolved += 1
                    continue
                snapshot.total_value_wei += fig.value_wei
                if fig.fee_wei is None:
                    snapshot.transactions_unresolved += 1
                else:
                    snapshot.total_fees_wei += fig.fee_wei
                snapshot.deployments += int(fig.is_deployment)
                snapshot.approvals += int(fig.is_approval)

            if tx_count:  # no sent transactions leaves the age unknown
                snapshot.wallet_age = await self._wallet_age(latest_block, tx_count, now)

            log_method = self._logger.warning if snapshot.degraded else self._logger.info
            log_method(
                "activity_aggregated",
                from_block=window.from_block,
                to_block=window.to_block,
                interactions=snapshot.total_interactions,
                transactions=len(tx_hashes),
                facts_before_cutoff=snapshot.facts_before_cutoff,
                facts_unresolved=snapshot.facts_unresolved,
                transactions_unresolved=snapshot.transactions_unresolved,
            )
            return snapshot

    @staticmethod
    def _count_facts(address: str, facts: list[TransferFact], snapshot: WalletStatsSnapshot) -> None:
        contracts: set[str] = set()
        counterparties: set[str] = set()
        nfts: set[OwnershipKey] = set()
        for fact in facts:
            snapshot.total_interactions += 1
            contracts.add(fact.contract_address)
            other = fact.to_address if fact.from_address == address else fact.from_address
            if other and other != address and not fact.is_mint:
                counterparties.add(other)
            if fact.is_mint and fact.to_address == address:
                snapshot.mints += 1
            if fact.has_token_id:
                nfts.add(fact.key)
        snapshot.unique_contracts = len(contracts)
        snapshot.unique_counterparties = len(counterparties)
        snapshot.unique_nfts = len(nfts)
