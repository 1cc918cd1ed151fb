# -*- coding: utf-8 -*-
"""Unit tests for Transfer log decoding."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from wallet_inspector.clients.rpc_client.schema import LogSchema
from wallet_inspector.services.decoding import (
    decode_address_topic,
    decode_transfer_log,
    decode_transfer_logs,
    decode_uint256_topic,
)
from wallet_inspector.utils.abi import TRANSFER_TOPIC, ZERO_TOPIC, address_topic
from wallet_inspector.utils.validation import ZERO_ADDRESS


def test_decode_erc721_transfer(
    transfer_log_factory: Callable[..., LogSchema],
    wallet: str,
    counterparty: str,
    contract: str,
) -> None:
    log = transfer_log_factory(counterparty, wallet, token_id=1234, block_number=0x10, log_index=2)

    fact = decode_transfer_log(log)

    assert fact.contract_address == contract
    assert fact.token_id == "1234"
    assert fact.from_address == counterparty
    assert fact.to_address == wallet
    assert fact.block_number == 16
    assert fact.log_index == 2
    assert fact.has_token_id is True
    assert fact.amount is None


def test_zero_token_id_decodes_to_zero(
    transfer_log_factory: Callable[..., LogSchema],
    wallet: str,
) -> None:
    log = transfer_log_factory(ZERO_ADDRESS, wallet, token_id=0)
    log["topics"][3] = ZERO_TOPIC

    fact = decode_transfer_log(log)

    assert fact.token_id == "0"
    assert fact.has_token_id is True
    assert fact.is_mint


def test_missing_token_topic_decodes_as_fungible(
    transfer_log_factory: Callable[..., LogSchema],
    wallet: str,
    counterparty: str,
) -> None:
    log = transfer_log_factory(counterparty, wallet, token_id=None, data="0x" + "0" * 62 + "64")

    fact = decode_transfer_log(log)

    assert fact.token_id == "0"
    assert fact.has_token_id is False
    assert fact.amount == 100


def test_malformed_topics_do_not_raise() -> None:
    log: Any = {
        "address": "0xC0FFEE254729296A45A3885639AC7E10F9D54979",
        "topics": [TRANSFER_TOPIC, "0x12", None, "0xnothex"],
        "blockNumber": "0x1",
        "transactionHash": " 0xABC ",
    }

    fact = decode_transfer_log(log)

    assert fact.contract_address == "0xc0ffee254729296a45a3885639ac7e10f9d54979"
    assert fact.from_address == ""
    assert fact.to_address == ""
    assert fact.token_id == "0"
    assert fact.transaction_hash == "0xabc"
    assert fact.log_index is None


def test_block_timestamp_is_read_when_present(
    transfer_log_factory: Callable[..., LogSchema],
    wallet: str,
    counterparty: str,
) -> None:
    log = transfer_log_factory(counterparty, wallet)
    log["blockTimestamp"] = hex(1_700_000_000)

    assert decode_transfer_log(log).timestamp == 1_700_000_000


def test_decode_transfer_logs_skips_removed(
    transfer_log_factory: Callable[..., LogSchema],
    wallet: str,
    counterparty: str,
) -> None:
    kept = transfer_log_factory(counterparty, wallet, token_id=1)
    removed = transfer_log_factory(counterparty, wallet, token_id=2)
    removed["removed"] = True

    facts = decode_transfer_logs([kept, removed])

    assert [f.token_id for f in facts] == ["1"]


def test_topic_helpers() -> None:
    assert decode_uint256_topic(None) == "0"
    assert decode_uint256_topic("0x") == "0"
    assert decode_uint256_topic("0x" + "f" * 64) == str(2**256 - 1)
    assert decode_address_topic(address_topic("0x" + "AB" * 20)) == "0x" + "ab" * 20
    assert decode_address_topic(None) == ""
