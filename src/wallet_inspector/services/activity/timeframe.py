"""Stats timeframes and the block budget they translate to."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from wallet_inspector.exceptions import InvalidInputError

SECONDS_PER_DAY = 86_400


class Timeframe(str, Enum):
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    ALL = "all"

    @classmethod
    def parse(cls, value: "Timeframe | str") -> Timeframe:
        """Accept an enum member or its string value.

        Raises:
            InvalidInputError: For anything other than "7d", "30d" or "all".
        """
        try:
            return cls(value.strip().lower() if isinstance(value, str) else value)
        except ValueError as e:
            raise InvalidInputError(
                f"Invalid timeframe {value!r}; expected one of 7d, 30d, all",
                field="timeframe",
                value=value,
            ) from e

    @property
    def seconds(self) -> Optional[int]:
        """Length of the timeframe; None for "all"."""
        if self is Timeframe.LAST_7_DAYS:
            return 7 * SECONDS_PER_DAY
        if self is Timeframe.LAST_30_DAYS:
            return 30 * SECONDS_PER_DAY
        return None

    def cutoff(self, now: int) -> int:
        """Earliest included timestamp; 0 for "all"."""
        seconds = self.seconds
        return 0 if seconds is None else max(0, now - seconds)

    def block_budget(
        self,
        *,
        max_scan_blocks: int,
        blocks_per_second: float = 1.0,
        safety_factor: float = 1.2,
    ) -> int:
        """Blocks to scan behind the head to cover the timeframe, capped at max_scan_blocks."""
        seconds = self.seconds
        if seconds is None:
            return max_scan_blocks
        return min(math.floor(seconds * blocks_per_second * safety_factor), max_scan_blocks)
