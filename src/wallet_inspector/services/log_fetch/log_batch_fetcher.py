"""Batched Transfer log retrieval over a block window, split by the provider's max span.

A failed sub-range is logged, recorded in the FetchReport and skipped; it is
not retried. Callers must treat the result as a lower bound on history.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.contextvars import bound_contextvars

from wallet_inspector.clients.rpc_client.schema import LogSchema
from wallet_inspector.exceptions import UpstreamError, UpstreamUnavailableError
from wallet_inspector.models.scan import FetchReport, ScanWindow, SkippedRange
from wallet_inspector.utils.abi import TRANSFER_TOPIC, address_topic
from wallet_inspector.utils.validation import mask_address

if TYPE_CHECKING:
    from wallet_inspector.clients.rpc_client import RpcClient


class TransferDirection(str, Enum):
    RECEIVED = "received"
    """Address in the `to` topic."""
    SENT = "sent"
    """Address in the `from` topic."""


def split_block_range(from_block: int, to_block: int, max_span: int) -> list[tuple[int, int]]:
    """Partition [from_block, to_block] into consecutive inclusive chunks of <= max_span blocks.

    >>> split_block_range(0, 1199, 500)
    [(0, 499), (500, 999), (1000, 1199)]
    """
    if max_span < 1:
        raise ValueError(f"max_span must be >= 1, got {max_span}")
    ranges: list[tuple[int, int]] = []
    start = from_block
    while start <= to_block:
        end = min(start + max_span - 1, to_block)
        ranges.append((start, end))
        start = end + 1
    return ranges


def transfer_topics(address: str, direction: TransferDirection) -> list[Optional[str]]:
    """Topic filter for Transfer events with address on the given side."""
    padded = address_topic(address)
    if direction is TransferDirection.RECEIVED:
        return [TRANSFER_TOPIC, None, padded]
    return [TRANSFER_TOPIC, padded, None]


@dataclass(slots=True)
class TransferLogs:
    """Raw received/sent logs for one address over one window."""

    received: list[LogSchema]
    sent: list[LogSchema]
    report: FetchReport


class LogBatchFetcher:
    """Fetches Transfer logs in max_span sized sub-ranges, both directions, concurrently."""

    def __init__(
        self,
        rpc_client: "RpcClient",
        *,
        max_span: int = 500,
        max_concurrency: int = 8,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            rpc_client: JSON-RPC client providing get_logs / block_number.
            max_span: Largest block range accepted by the provider per eth_getLogs call.
            max_concurrency: Max sub-range requests in flight.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        if max_span < 1:
            raise ValueError(f"max_span must be >= 1, got {max_span}")
        self._rpc = rpc_client
        self._max_span = max_span
        self._max_concurrency = max(1, max_concurrency)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def latest_block(self) -> int:
        """Chain head. Failure here means the provider is unreachable.

        Raises:
            UpstreamUnavailableError: If the head block cannot be read.
        """
        try:
            return await self._rpc.block_number()
        except UpstreamError as e:
            self._logger.error(
                "chain_head_unavailable",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise UpstreamUnavailableError(
                f"RPC provider unavailable: could not read latest block ({e})", cause=e
            ) from e

    async def window_behind_head(self, window_size: int) -> ScanWindow:
        """[max(0, head - window_size), head]."""
        latest = await self.latest_block()
        return ScanWindow.behind_head(latest, window_size)

    async def _fetch_range(
        self,
        address: str,
        direction: TransferDirection,
        start: int,
        end: int,
        semaphore: asyncio.Semaphore,
    ) -> tuple[list[LogSchema], Optional[SkippedRange]]:
        async with semaphore:
            try:
                logs = await self._rpc.get_logs(
                    from_block=start,
                    to_block=end,
                    topics=transfer_topics(address, direction),
                )
            except UpstreamError as e:
                self._logger.warning(
                    "log_batch_skipped",
                    direction=direction.value,
                    from_block=start,
                    to_block=end,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return [], SkippedRange(start, end, direction.value, str(e))
        self._logger.debug(
            "log_batch_fetched",
            direction=direction.value,
            from_block=start,
            to_block=end,
            logs=len(logs),
        )
        return logs, None

    async def fetch_direction(
        self,
        address: str,
        window: ScanWindow,
        direction: TransferDirection,
        *,
        semaphore: Optional[asyncio.Semaphore] = None,
    ) -> tuple[list[LogSchema], FetchReport]:
        """Fetch one direction over the whole window; logs come back in range order."""
        report = FetchReport(window=window)
        if window.is_empty:
            return [], report
        sem = semaphore or asyncio.Semaphore(self._max_concurrency)
        ranges = split_block_range(window.from_block, window.to_block, self._max_span)
        results = await asyncio.gather(
            *(self._fetch_range(address, direction, a, b, sem) for a, b in ranges)
        )
        logs: list[LogSchema] = []
        report.ranges_requested = len(ranges)
        for chunk, skipped in results:
            if skipped is not None:
                report.skipped.append(skipped)
                continue
            report.ranges_fetched += 1
            logs.extend(chunk)
        report.logs_fetched = len(logs)
        return logs, report

    async def fetch_transfer_logs(self, address: str, window: ScanWindow) -> TransferLogs:
        """Fetch received and sent Transfer logs for address over window.

        Raises:
            UpstreamUnavailableError: If every sub-range of a non-empty window failed.
        """
        with bound_contextvars(
            scan_address_masked=mask_address(address),
            scan_from_block=window.from_block,
            scan_to_block=window.to_block,
        ):
            sem = asyncio.Semaphore(self._max_concurrency)
            (received, received_report), (sent, sent_report) = await asyncio.gather(
                self.fetch_direction(address, window, TransferDirection.RECEIVED, semaphore=sem),
                self.fetch_direction(address, window, TransferDirection.SENT, semaphore=sem),
            )
            report = received_report.merge(sent_report)
            if report.ranges_requested and not report.ranges_fetched:
                self._logger.error(
                    "log_scan_unavailable",
                    ranges_requested=report.ranges_requested,
                )
                raise UpstreamUnavailableError(
                    f"RPC provider unavailable: all {report.ranges_requested} log sub-range "
                    f"requests failed for blocks [{window.from_block}, {window.to_block}]"
                )
            log_method = self._logger.warning if report.degraded else self._logger.info
            log_method(
                "log_scan_completed",
                received_logs=len(received),
                sent_logs=len(sent),
                ranges_requested=report.ranges_requested,
                ranges_skipped=len(report.skipped),
            )
            return TransferLogs(received=received, sent=sent, report=report)
