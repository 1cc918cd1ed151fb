"""TransferFact and OwnershipKey: normalized Transfer events and the token identity they move.

A TransferFact is immutable once decoded. Ordering within a scan window is
(block_number, log_index); facts without a log index only order by block.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import NamedTuple

from wallet_inspector.utils.validation import ZERO_ADDRESS, normalize_address


class OwnershipKey(NamedTuple):
    """(contract_address, token_id) with the contract address lower-cased."""

    contract_address: str
    token_id: str

    @classmethod
    def of(cls, contract_address: str, token_id: str | int) -> OwnershipKey:
        return cls(normalize_address(contract_address), str(token_id))

    def __str__(self) -> str:
        return f"{self.contract_address}:{self.token_id}"


@dataclass(frozen=True, slots=True)
class TransferFact:
    """One decoded Transfer(address,address,uint256) log."""

    contract_address: str
    """Emitting contract (lower-case 0x...)."""
    token_id: str
    """Decimal-encoded uint256 from the third indexed topic; "0" when absent."""
    from_address: str
    to_address: str
    block_number: int
    transaction_hash: str
    log_index: int | None = None
    timestamp: int | None = None
    """Block timestamp (unix seconds) if the source included it; resolved lazily otherwise."""
    has_token_id: bool = True
    """False for ERC-20 style logs (no fourth topic)."""
    amount: int | None = None
    """ERC-20 value word from the log data when has_token_id is False."""

    @property
    def key(self) -> OwnershipKey:
        return OwnershipKey(self.contract_address, self.token_id)

    @property
    def is_mint(self) -> bool:
        return self.from_address == ZERO_ADDRESS

    @property
    def block_time(self) -> datetime | None:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp, tz=UTC)

    def is_after(self, other: TransferFact) -> bool:
        """True if self is strictly later than other in chain order.

        Same block with an unknown log index on either side is not "after".
        """
        if self.block_number != other.block_number:
            return self.block_number > other.block_number
        if self.log_index is None or other.log_index is None:
            return False
        return self.log_index > other.log_index
