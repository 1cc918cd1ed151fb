# -*- coding: utf-8 -*-
"""Unit tests for NftIndexClient."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from wallet_inspector.clients.nft_index import NftIndexClient
from wallet_inspector.config import NftIndexSettings, Settings
from wallet_inspector.exceptions import MissingRequiredConfigError, UpstreamError


def _settings(**nft_index: Any) -> Settings:
    return Settings(nft_index=NftIndexSettings(**{"enabled": True, "api_key": "key", **nft_index}))


async def test_get_activities_returns_items_and_cursor(wallet: str) -> None:
    http: Any = SimpleNamespace(
        get=AsyncMock(
            return_value={
                "code": 0,
                "result": {"data": [{"nft": {"tokenId": "1"}}, "junk"], "nextPageCursor": "abc"},
            }
        )
    )
    client = NftIndexClient(http, _settings(host="https://index.test/v2/monad/"))

    items, cursor = await client.get_activities(wallet, cursor="prev")

    assert items == [{"nft": {"tokenId": "1"}}]
    assert cursor == "abc"
    assert http.get.call_args.args[0] == "https://index.test/v2/monad/collection/activities"
    assert http.get.call_args.kwargs["headers"]["X-API-KEY"] == "key"
    assert http.get.call_args.kwargs["params"] == {
        "address": wallet,
        "limit": 50,
        "ascendingOrder": "false",
        "cursor": "prev",
    }


async def test_non_zero_code_raises_upstream_error(wallet: str) -> None:
    http: Any = SimpleNamespace(get=AsyncMock(return_value={"code": 1, "reason": "invalid key"}))

    with pytest.raises(UpstreamError, match="invalid key"):
        await NftIndexClient(http, _settings()).get_activities(wallet)


async def test_last_page_has_no_cursor(wallet: str) -> None:
    http: Any = SimpleNamespace(get=AsyncMock(return_value={"code": 0, "result": {"data": []}}))

    items, cursor = await NftIndexClient(http, _settings()).get_activities(wallet)

    assert items == [] and cursor is None


async def test_missing_api_key(wallet: str) -> None:
    client = NftIndexClient(SimpleNamespace(get=AsyncMock()), _settings(api_key=None))

    assert client.enabled is False
    with pytest.raises(MissingRequiredConfigError):
        await client.get_activities(wallet)
