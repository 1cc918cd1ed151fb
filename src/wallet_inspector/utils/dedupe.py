"""Deduplication keys for transfer facts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from wallet_inspector.models.transfer_fact import TransferFact


def transfer_fact_key(fact: "TransferFact") -> str:
    """Return a stable key identifying one transfer log.

    Prefers (transaction hash, log index); when the source does not expose the
    log index falls back to contract|token|block|from|to.
    """
    if fact.transaction_hash and fact.log_index is not None:
        return f"log:{fact.transaction_hash}:{fact.log_index}"
    return (
        f"cmp:{fact.contract_address}|{fact.token_id}|{fact.block_number}"
        f"|{fact.from_address}|{fact.to_address}"
    )


def dedupe_facts(facts: Iterable["TransferFact"]) -> list["TransferFact"]:
    """Drop repeated facts, keeping the first occurrence and input order."""
    seen: set[str] = set()
    result: list[TransferFact] = []
    for fact in facts:
        key = transfer_fact_key(fact)
        if key in seen:
            continue
        seen.add(key)
        result.append(fact)
    return result
