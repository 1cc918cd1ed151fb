"""Ownership pipeline: fetch window -> decode -> dedupe -> reconcile -> enrich."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.contextvars import bound_contextvars

from wallet_inspector.models.held_token import OwnershipReport
from wallet_inspector.models.scan import ScanWindow
from wallet_inspector.services.decoding import decode_transfer_logs
from wallet_inspector.services.ownership.reconciler import (
    DEFAULT_MAX_RESULTS,
    OwnershipPolicy,
    reconcile_ownership,
)
from wallet_inspector.utils.dedupe import dedupe_facts
from wallet_inspector.utils.validation import mask_address, require_address

if TYPE_CHECKING:
    from wallet_inspector.services.enrichment import MetadataEnricher
    from wallet_inspector.services.log_fetch import LogBatchFetcher


class OwnershipService:
    """Infers the NFTs an address currently holds from recent Transfer logs."""

    def __init__(
        self,
        fetcher: "LogBatchFetcher",
        enricher: Optional["MetadataEnricher"] = None,
        *,
        window_blocks: int = 2000,
        max_results: int = DEFAULT_MAX_RESULTS,
        policy: OwnershipPolicy | str = OwnershipPolicy.LATEST_TRANSFER_WINS,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._fetcher = fetcher
        self._enricher = enricher
        self._window_blocks = window_blocks
        self._max_results = max_results
        self._policy = OwnershipPolicy(policy)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def reconcile_ownership(
        self,
        address: str,
        window: Optional[ScanWindow] = None,
    ) -> OwnershipReport:
        """Held tokens for address over window (default: window_blocks behind head).

        Raises:
            InvalidInputError: If address is not a 20-byte hex address.
            UpstreamUnavailableError: If the chain head or every log sub-range is unreadable.
        """
        addr = require_address(address)
        with bound_contextvars(wallet_masked=mask_address(addr)):
            if window is None:
                window = await self._fetcher.window_behind_head(self._window_blocks)
            logs = await self._fetcher.fetch_transfer_logs(addr, window)

            # fungible (3-topic) transfers carry no token id and cannot be held as NFTs
            received = dedupe_facts(f for f in decode_transfer_logs(logs.received) if f.has_token_id)
            sent = dedupe_facts(f for f in decode_transfer_logs(logs.sent) if f.has_token_id)

            result = reconcile_ownership(
                addr,
                received,
                sent,
                policy=self._policy,
                max_results=self._max_results,
            )
            report = OwnershipReport(
                address=addr,
                held_tokens=result.held,
                fetch_report=logs.report,
                truncated=result.truncated,
            )
            if self._enricher is not None and result.held:
                outcomes = await self._enricher.enrich(addr, result.held)
                report.outcomes = outcomes
                report.held_tokens = [o.token for o in outcomes if o.included and o.token is not None]

            self._logger.info(
                "ownership_reconciled",
                from_block=window.from_block,
                to_block=window.to_block,
                policy=self._policy.value,
                received_keys=result.received_keys,
                sent_keys=result.sent_keys,
                held=len(report.held_tokens),
                excluded=len(report.excluded),
                truncated=result.truncated,
                degraded=logs.report.degraded,
            )
            return report
