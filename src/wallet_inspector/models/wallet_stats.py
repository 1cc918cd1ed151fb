"""WalletStatsSnapshot: counts and integer sums over one scanned window."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from wallet_inspector.models.scan import FetchReport
from wallet_inspector.utils.units import format_ether

SECONDS_PER_DAY = 86_400
SECONDS_PER_HOUR = 3_600


@dataclass(frozen=True, slots=True)
class WalletAgeEstimate:
    """Elapsed time since a heuristic lookback block.

    This is an approximation (current_block - tx_count * blocks_per_tx), never
    the account creation time.
    """

    lookback_block: int
    lookback_timestamp: int
    age_seconds: int
    is_estimate: bool = True

    @property
    def days(self) -> int:
        return self.age_seconds // SECONDS_PER_DAY

    @property
    def hours(self) -> int:
        return (self.age_seconds % SECONDS_PER_DAY) // SECONDS_PER_HOUR

    def describe(self) -> str:
        return f"~{self.days} days {self.hours} hours (estimated)"


@dataclass(slots=True)
class WalletStatsSnapshot:
    """Aggregate statistics for one address over one timeframe.

    total_value_wei and total_fees_wei are exact integer sums; use the *_ether
    properties for display.
    """

    address: str
    timeframe: str
    from_block: int
    to_block: int
    cutoff_timestamp: int
    total_interactions: int = 0
    approvals: int = 0
    deployments: int = 0
    mints: int = 0
    unique_contracts: int = 0
    unique_counterparties: int = 0
    unique_nfts: int = 0
    total_value_wei: int = 0
    total_fees_wei: int = 0
    daily_activity: dict[str, int] = field(default_factory=dict)
    """UTC calendar date (YYYY-MM-DD) -> counted facts."""
    balance_wei: int | None = None
    transaction_count: int | None = None
    wallet_age: WalletAgeEstimate | None = None
    fetch_report: FetchReport | None = None
    facts_before_cutoff: int = 0
    facts_unresolved: int = 0
    """Facts skipped because their block timestamp could not be resolved."""
    transactions_unresolved: int = 0

    @property
    def total_value_ether(self) -> Decimal:
        return format_ether(self.total_value_wei)

    @property
    def total_fees_ether(self) -> Decimal:
        return format_ether(self.total_fees_wei)

    @property
    def balance_ether(self) -> Decimal | None:
        return None if self.balance_wei is None else format_ether(self.balance_wei)

    @property
    def active_days(self) -> int:
        return len(self.daily_activity)

    @property
    def average_per_day(self) -> float:
        return self.total_interactions / max(self.active_days, 1)

    @property
    def degraded(self) -> bool:
        """True when any part of the scan was skipped (thin data may be an artifact)."""
        return bool(
            self.facts_unresolved
            or self.transactions_unresolved
            or (self.fetch_report is not None and self.fetch_report.degraded)
        )
