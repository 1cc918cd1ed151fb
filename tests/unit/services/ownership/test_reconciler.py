# -*- coding: utf-8 -*-
"""Unit tests for ownership reconciliation."""

from __future__ import annotations

from collections.abc import Callable

from wallet_inspector.models.transfer_fact import OwnershipKey, TransferFact
from wallet_inspector.services.ownership import OwnershipPolicy, latest_by_key, reconcile_ownership


def test_received_only_token_is_owned(
    wallet: str,
    contract: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    result = reconcile_ownership(wallet, [fact_factory(token_id="5", block_number=100)], [])

    assert [t.key for t in result.held] == [OwnershipKey(contract, "5")]
    assert result.truncated == 0


def test_later_send_removes_ownership(
    wallet: str,
    counterparty: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    received = [fact_factory(block_number=100)]
    sent = [fact_factory(block_number=150, from_address=wallet, to_address=counterparty)]

    assert reconcile_ownership(wallet, received, sent).held == []


def test_reacquired_token_is_owned(
    wallet: str,
    counterparty: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    received = [fact_factory(block_number=100), fact_factory(block_number=200)]
    sent = [fact_factory(block_number=150, from_address=wallet, to_address=counterparty)]

    result = reconcile_ownership(wallet, received, sent)

    assert len(result.held) == 1
    assert result.held[0].last_transfer.block_number == 200


def test_any_send_policy_removes_reacquired_token(
    wallet: str,
    counterparty: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    received = [fact_factory(block_number=200)]
    sent = [fact_factory(block_number=150, from_address=wallet, to_address=counterparty)]

    result = reconcile_ownership(wallet, received, sent, policy=OwnershipPolicy.ANY_SEND_REMOVES)

    assert result.held == []


def test_same_block_send_without_log_index_counts_as_later(
    wallet: str,
    counterparty: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    received = [fact_factory(block_number=100, log_index=None)]
    sent = [fact_factory(block_number=100, log_index=None, from_address=wallet, to_address=counterparty)]

    assert reconcile_ownership(wallet, received, sent).held == []


def test_same_block_log_index_orders_receive_after_send(
    wallet: str,
    counterparty: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    sent = [fact_factory(block_number=100, log_index=1, from_address=wallet, to_address=counterparty)]
    received = [fact_factory(block_number=100, log_index=4)]

    assert len(reconcile_ownership(wallet, received, sent).held) == 1


def test_self_transfer_keeps_ownership(
    wallet: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    received = [fact_factory(block_number=100, log_index=0)]
    self_send = fact_factory(block_number=120, log_index=0, from_address=wallet, to_address=wallet)

    result = reconcile_ownership(wallet, [*received, self_send], [self_send])

    assert len(result.held) == 1


def test_results_are_most_recent_first_and_capped(
    wallet: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    received = [fact_factory(token_id=str(i), block_number=100 + i) for i in range(25)]

    result = reconcile_ownership(wallet, received, [], max_results=20)

    assert len(result.held) == 20
    assert result.truncated == 5
    assert result.held[0].key.token_id == "24"
    assert result.held[-1].key.token_id == "5"


def test_address_case_is_ignored(
    wallet: str,
    fact_factory: Callable[..., TransferFact],
) -> None:
    result = reconcile_ownership(wallet.upper().replace("0X", "0x"), [fact_factory()], [])
    assert len(result.held) == 1


def test_latest_by_key_keeps_latest_fact(fact_factory: Callable[..., TransferFact]) -> None:
    old = fact_factory(block_number=1)
    new = fact_factory(block_number=2)

    latest = latest_by_key([new, old])

    assert list(latest.values()) == [new]
