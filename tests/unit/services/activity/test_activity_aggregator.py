# -*- coding: utf-8 -*-
"""Unit tests for ActivityAggregator."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from wallet_inspector.clients.rpc_client.schema import LogSchema
from wallet_inspector.exceptions import InvalidInputError, UpstreamError, UpstreamUnavailableError
from wallet_inspector.services.activity import ActivityAggregator, transaction_figures
from wallet_inspector.services.log_fetch import LogBatchFetcher, TransferDirection, transfer_topics
from wallet_inspector.utils.abi import SELECTOR_APPROVE
from wallet_inspector.utils.units import format_ether, parse_ether
from wallet_inspector.utils.validation import ZERO_ADDRESS

NOW = 1_700_000_000  # 2023-11-14T22:13:20Z
HEAD = 10_000
DAY = 86_400

TX_A = "0x" + "a" * 64
TX_B = "0x" + "b" * 64
TX_OLD = "0x" + "c" * 64


def _rpc(
    wallet: str,
    received: list[LogSchema],
    sent: list[LogSchema],
    *,
    timestamps: dict[int, int],
    transactions: dict[str, dict[str, Any]],
    receipts: dict[str, dict[str, Any]],
) -> Any:
    received_topics = transfer_topics(wallet, TransferDirection.RECEIVED)

    def get_logs(*, from_block: int, to_block: int, topics: list[Optional[str]], **_: Any) -> list[LogSchema]:
        source = received if topics == received_topics else sent
        return [log for log in source if from_block <= int(log["blockNumber"], 16) <= to_block]

    def get_block_timestamp(block: int) -> int:
        if block not in timestamps:
            raise UpstreamError(f"block {block} unavailable")
        return timestamps[block]

    return SimpleNamespace(
        get_block=AsyncMock(return_value={"number": hex(HEAD), "timestamp": hex(NOW)}),
        get_logs=AsyncMock(side_effect=get_logs),
        get_block_timestamp=AsyncMock(side_effect=get_block_timestamp),
        get_balance=AsyncMock(return_value=10**18),
        get_transaction_count=AsyncMock(return_value=2),
        get_transaction=AsyncMock(side_effect=lambda h: transactions.get(h)),
        get_transaction_receipt=AsyncMock(side_effect=lambda h: receipts.get(h)),
    )


def _aggregator(rpc: Any) -> ActivityAggregator:
    return ActivityAggregator(
        rpc,
        LogBatchFetcher(rpc, max_span=500),
        max_scan_blocks=1000,
        now=lambda: NOW,
    )


@pytest.fixture
def scenario(
    wallet: str,
    counterparty: str,
    transfer_log_factory: Callable[..., LogSchema],
) -> Any:
    """One receive and one send in the last day, one receive eight days ago."""
    other = "0x2222222222222222222222222222222222222222"
    received = [
        transfer_log_factory(counterparty, wallet, token_id=1, block_number=9_990, tx_hash=TX_A),
        transfer_log_factory(counterparty, wallet, token_id=2, block_number=9_100, tx_hash=TX_OLD),
    ]
    sent = [transfer_log_factory(wallet, other, token_id=1, block_number=9_995, tx_hash=TX_B)]
    return _rpc(
        wallet,
        received,
        sent,
        timestamps={9_990: NOW - 3_600, 9_995: NOW - 1_800, 9_100: NOW - 8 * DAY},
        transactions={
            TX_A: {"hash": TX_A, "to": "0xc0ffee254729296a45a3885639ac7e10f9d54979", "value": "0x0", "gasPrice": "0x1", "input": "0x"},
            TX_B: {"hash": TX_B, "to": "0xc0ffee254729296a45a3885639ac7e10f9d54979", "value": hex(parse_ether("0.5")), "gasPrice": "0x5", "input": "0x42842e0e"},
            TX_OLD: {"hash": TX_OLD, "to": None, "value": "0x1", "gasPrice": "0x1", "input": "0x"},
        },
        receipts={
            TX_A: {"gasUsed": hex(21_000), "effectiveGasPrice": "0x1"},
            TX_B: {"gasUsed": hex(21_000), "effectiveGasPrice": "0x2"},
            TX_OLD: {"gasUsed": hex(21_000), "effectiveGasPrice": "0x1"},
        },
    )


async def test_7d_cutoff_excludes_old_facts(wallet: str, scenario: Any) -> None:
    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "7d")

    assert snapshot.total_interactions == 2
    assert snapshot.facts_before_cutoff == 1
    assert snapshot.cutoff_timestamp == NOW - 7 * DAY
    assert snapshot.daily_activity == {"2023-11-14": 2}
    fetched = sorted(c.args[0] for c in scenario.get_transaction.call_args_list)
    assert fetched == [TX_A, TX_B]


async def test_fee_sum_is_exact_through_ether_round_trip(wallet: str, scenario: Any) -> None:
    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "7d")

    assert snapshot.total_fees_wei == 21_000 * 1 + 21_000 * 2
    assert snapshot.total_fees_ether == Decimal("0.000000000000063")
    assert parse_ether(format_ether(snapshot.total_fees_wei)) == 63_000
    assert snapshot.total_value_wei == parse_ether("0.5")
    assert snapshot.total_value_ether == Decimal("0.5")


async def test_counts_contracts_counterparties_and_nfts(wallet: str, scenario: Any) -> None:
    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "7d")

    assert snapshot.unique_contracts == 1
    assert snapshot.unique_counterparties == 2
    assert snapshot.unique_nfts == 1
    assert snapshot.mints == 0
    assert snapshot.deployments == 0
    assert snapshot.approvals == 0
    assert snapshot.balance_wei == 10**18
    assert snapshot.transaction_count == 2
    assert not snapshot.degraded


async def test_all_timeframe_counts_everything(wallet: str, scenario: Any) -> None:
    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "all")

    assert snapshot.total_interactions == 3
    assert snapshot.facts_before_cutoff == 0
    assert snapshot.cutoff_timestamp == 0
    assert snapshot.deployments == 1
    assert snapshot.total_fees_wei == 84_000


async def test_wallet_age_is_an_estimate_from_tx_count(wallet: str, scenario: Any) -> None:
    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "7d")

    # lookback = head - tx_count * 5 = 9_990
    assert snapshot.wallet_age is not None
    assert snapshot.wallet_age.lookback_block == 9_990
    assert snapshot.wallet_age.age_seconds == 3_600
    assert snapshot.wallet_age.is_estimate


async def test_mints_are_counted(
    wallet: str,
    transfer_log_factory: Callable[..., LogSchema],
) -> None:
    mint = transfer_log_factory(ZERO_ADDRESS, wallet, token_id=9, block_number=9_999, tx_hash=TX_A)
    rpc = _rpc(
        wallet,
        [mint],
        [],
        timestamps={9_999: NOW - 60},
        transactions={TX_A: {"to": "0xc0ffee254729296a45a3885639ac7e10f9d54979", "value": "0x0", "input": "0x1249c58b"}},
        receipts={TX_A: {"gasUsed": "0x1", "effectiveGasPrice": "0x1"}},
    )

    snapshot = await _aggregator(rpc).aggregate_activity(wallet, "7d")

    assert snapshot.mints == 1
    assert snapshot.unique_counterparties == 0


async def test_unresolved_block_timestamp_is_counted_not_fatal(
    wallet: str,
    counterparty: str,
    transfer_log_factory: Callable[..., LogSchema],
) -> None:
    log = transfer_log_factory(counterparty, wallet, block_number=9_999, tx_hash=TX_A)
    rpc = _rpc(wallet, [log], [], timestamps={}, transactions={}, receipts={})

    snapshot = await _aggregator(rpc).aggregate_activity(wallet, "7d")

    assert snapshot.facts_unresolved == 1
    assert snapshot.total_interactions == 0
    assert snapshot.degraded


async def test_chain_head_failure_is_fatal(wallet: str, scenario: Any) -> None:
    scenario.get_block = AsyncMock(side_effect=UpstreamError("connection refused"))

    with pytest.raises(UpstreamUnavailableError):
        await _aggregator(scenario).aggregate_activity(wallet, "7d")


async def test_balance_failure_is_best_effort(wallet: str, scenario: Any) -> None:
    scenario.get_balance = AsyncMock(side_effect=UpstreamError("timeout"))

    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "7d")

    assert snapshot.balance_wei is None
    assert snapshot.total_interactions == 2


async def test_invalid_timeframe_raises_before_network(wallet: str, scenario: Any) -> None:
    with pytest.raises(InvalidInputError):
        await _aggregator(scenario).aggregate_activity(wallet, "1y")
    assert scenario.get_block.await_count == 0


def test_transaction_figures_flags_deploy_and_approval() -> None:
    approve = transaction_figures(
        {"to": "0xc0ffee254729296a45a3885639ac7e10f9d54979", "value": "0x0", "gasPrice": "0x3", "input": SELECTOR_APPROVE + "00" * 64},
        {"gasUsed": hex(50_000)},
    )
    deploy = transaction_figures({"to": None, "value": "0x10", "input": "0x6080"}, None)

    assert approve.is_approval and not approve.is_deployment
    assert approve.fee_wei == 150_000
    assert deploy.is_deployment and not deploy.is_approval
    assert deploy.fee_wei is None
    assert deploy.value_wei == 16


async def test_wallet_age_unknown_without_sent_transactions(wallet: str, scenario: Any) -> None:
    scenario.get_transaction_count = AsyncMock(return_value=0)

    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "7d")

    assert snapshot.transaction_count == 0
    assert snapshot.wallet_age is None
    assert HEAD not in [c.args[0] for c in scenario.get_block_timestamp.call_args_list]


async def test_receipt_failure_keeps_value_and_flags(wallet: str, scenario: Any) -> None:
    scenario.get_transaction_receipt = AsyncMock(side_effect=UpstreamError("receipt timeout"))

    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "all")

    assert snapshot.total_value_wei == parse_ether("0.5") + 1
    assert snapshot.deployments == 1
    assert snapshot.total_fees_wei == 0
    assert snapshot.transactions_unresolved == 3
    assert snapshot.degraded


async def test_transaction_and_receipt_failure_skips_transaction(wallet: str, scenario: Any) -> None:
    scenario.get_transaction = AsyncMock(side_effect=UpstreamError("tx timeout"))
    scenario.get_transaction_receipt = AsyncMock(side_effect=UpstreamError("receipt timeout"))

    snapshot = await _aggregator(scenario).aggregate_activity(wallet, "7d")

    assert snapshot.total_value_wei == 0
    assert snapshot.transactions_unresolved == 2
    assert snapshot.total_interactions == 2
