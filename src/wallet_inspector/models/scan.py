"""Scan window and fetch report: which block ranges were read and which were skipped."""

from __future__ import annotations

from dataclasses import dataclass, field

from wallet_inspector.exceptions import InvalidInputError


@dataclass(frozen=True, slots=True)
class ScanWindow:
    """Inclusive block range [from_block, to_block]."""

    from_block: int
    to_block: int

    def __post_init__(self) -> None:
        if self.from_block < 0 or self.to_block < 0:
            raise InvalidInputError(
                f"Block numbers must be non-negative: [{self.from_block}, {self.to_block}]",
                field="window",
            )

    @classmethod
    def behind_head(cls, latest_block: int, window_size: int) -> ScanWindow:
        """Window of window_size blocks ending at latest_block, clamped at genesis."""
        return cls(from_block=max(0, latest_block - window_size), to_block=latest_block)

    @property
    def is_empty(self) -> bool:
        return self.to_block < self.from_block

    @property
    def block_count(self) -> int:
        return 0 if self.is_empty else self.to_block - self.from_block + 1


@dataclass(frozen=True, slots=True)
class SkippedRange:
    """A sub-range whose fetch failed and was not retried."""

    from_block: int
    to_block: int
    direction: str
    error: str


@dataclass(slots=True)
class FetchReport:
    """Observability record for one directional or combined log scan.

    Results built from a report with skipped ranges are a lower bound.
    """

    window: ScanWindow
    ranges_requested: int = 0
    ranges_fetched: int = 0
    logs_fetched: int = 0
    skipped: list[SkippedRange] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.skipped)

    def merge(self, other: FetchReport) -> FetchReport:
        return FetchReport(
            window=self.window,
            ranges_requested=self.ranges_requested + other.ranges_requested,
            ranges_fetched=self.ranges_fetched + other.ranges_fetched,
            logs_fetched=self.logs_fetched + other.logs_fetched,
            skipped=[*self.skipped, *other.skipped],
        )
