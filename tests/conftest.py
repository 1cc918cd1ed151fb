# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional

import pytest

from wallet_inspector.clients.rpc_client.schema import LogSchema
from wallet_inspector.config import NftIndexSettings, RpcSettings, Settings
from wallet_inspector.models.transfer_fact import TransferFact
from wallet_inspector.utils.abi import TRANSFER_TOPIC, address_topic


@pytest.fixture
def wallet() -> str:
    """Default inspected wallet used by tests."""
    return "0x2d27b6e21b3d4d7c9a43fdf58f12345678907706"


@pytest.fixture
def counterparty() -> str:
    return "0x1111111111111111111111111111111111111111"


@pytest.fixture
def contract() -> str:
    """Default NFT contract used by tests."""
    return "0xc0ffee254729296a45a3885639ac7e10f9d54979"


@pytest.fixture
def settings() -> Settings:
    """Settings with a fake RPC endpoint and the NFT index disabled."""
    return Settings(
        rpc=RpcSettings(url="https://rpc.test/{api_key}", api_key="k"),
        nft_index=NftIndexSettings(enabled=False),
    )


@pytest.fixture
def fact_factory(
    wallet: str,
    counterparty: str,
    contract: str,
) -> Callable[..., TransferFact]:
    """Build TransferFact with sensible defaults (counterparty -> wallet) and easy overrides."""

    def _build(**overrides: Any) -> TransferFact:
        block = overrides.pop("block_number", 100)
        log_index = overrides.pop("log_index", 0)
        return TransferFact(
            contract_address=overrides.pop("contract_address", contract),
            token_id=str(overrides.pop("token_id", "1")),
            from_address=overrides.pop("from_address", counterparty),
            to_address=overrides.pop("to_address", wallet),
            block_number=block,
            transaction_hash=overrides.pop(
                "transaction_hash", "0x" + f"{block:x}{log_index or 0:x}".rjust(64, "a")
            ),
            log_index=log_index,
            timestamp=overrides.pop("timestamp", None),
            has_token_id=overrides.pop("has_token_id", True),
            amount=overrides.pop("amount", None),
        )

    return _build


@pytest.fixture
def transfer_log_factory(contract: str) -> Callable[..., LogSchema]:
    """Build a raw eth_getLogs Transfer record (ERC-721 by default)."""

    def _build(
        from_address: str,
        to_address: str,
        *,
        token_id: Optional[int] = 1,
        block_number: int = 100,
        log_index: Optional[int] = 0,
        tx_hash: Optional[str] = None,
        contract_address: Optional[str] = None,
        data: str = "0x",
    ) -> LogSchema:
        topics = [TRANSFER_TOPIC, address_topic(from_address), address_topic(to_address)]
        if token_id is not None:
            topics.append("0x" + f"{token_id:x}".rjust(64, "0"))
        log: dict[str, Any] = {
            "address": contract_address or contract,
            "topics": topics,
            "data": data,
            "blockNumber": hex(block_number),
            "transactionHash": tx_hash or "0x" + f"{block_number:x}".rjust(64, "b"),
            "removed": False,
        }
        if log_index is not None:
            log["logIndex"] = hex(log_index)
        return log  # type: ignore[return-value]

    return _build
