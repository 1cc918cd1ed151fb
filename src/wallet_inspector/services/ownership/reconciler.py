"""Ownership reconciliation: received/sent TransferFacts -> currently held tokens.

Pure computation, no I/O. A token is held by A iff the most recent transfer
of its key within the window moved it to A. Tokens acquired before the window
start are invisible here (window-boundary blind spot); this may under-report
ownership but never reports a token whose later send is in the window.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from wallet_inspector.models.held_token import HeldToken
from wallet_inspector.models.transfer_fact import OwnershipKey, TransferFact
from wallet_inspector.utils.validation import normalize_address

DEFAULT_MAX_RESULTS = 20


class OwnershipPolicy(str, Enum):
    """How a send in the window affects a received key."""

    LATEST_TRANSFER_WINS = "latest_transfer_wins"
    """Only a send at or after the latest receive removes ownership; re-acquisition counts."""
    ANY_SEND_REMOVES = "any_send_removes"
    """Any send of the key in the window removes ownership, regardless of order."""


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    held: list[HeldToken]
    """Most recently acquired first, capped at max_results."""
    truncated: int
    received_keys: int
    sent_keys: int


def latest_by_key(facts: Iterable[TransferFact]) -> dict[OwnershipKey, TransferFact]:
    """Most recent fact per key; on an undecidable tie the later input wins."""
    latest: dict[OwnershipKey, TransferFact] = {}
    for fact in facts:
        current = latest.get(fact.key)
        if current is None or not current.is_after(fact):
            latest[fact.key] = fact
    return latest


def _still_held(
    received: TransferFact,
    sent: TransferFact | None,
    address: str,
    policy: OwnershipPolicy,
) -> bool:
    if sent is None:
        return True
    if policy is OwnershipPolicy.ANY_SEND_REMOVES:
        return False
    # A self-transfer as the latest send leaves the token with the address.
    if sent.to_address == address:
        return True
    return received.is_after(sent)


def _recency(fact: TransferFact) -> tuple[int, int]:
    return fact.block_number, fact.log_index if fact.log_index is not None else -1


def reconcile_ownership(
    address: str,
    received: Iterable[TransferFact],
    sent: Iterable[TransferFact],
    *,
    policy: OwnershipPolicy = OwnershipPolicy.LATEST_TRANSFER_WINS,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> ReconciliationResult:
    """Compute the tokens address currently holds from one window of transfers.

    Args:
        address: Queried wallet (any case).
        received: Facts where address is `to`.
        sent: Facts where address is `from`.
        policy: Send/receive ordering rule (see OwnershipPolicy).
        max_results: Cap on returned tokens; callers needing more must page the window.

    Same-block ties where either log index is unknown count the send as later.
    """
    addr = normalize_address(address)
    latest_received = latest_by_key(received)
    latest_sent = latest_by_key(sent)

    held_facts = [
        fact
        for key, fact in latest_received.items()
        if _still_held(fact, latest_sent.get(key), addr, policy)
    ]
    held_facts.sort(key=_recency, reverse=True)

    limit = max(0, max_results)
    kept = held_facts[:limit]
    return ReconciliationResult(
        held=[HeldToken(key=f.key, last_transfer=f) for f in kept],
        truncated=len(held_facts) - len(kept),
        received_keys=len(latest_received),
        sent_keys=len(latest_sent),
    )
