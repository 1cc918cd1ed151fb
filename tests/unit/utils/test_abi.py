# -*- coding: utf-8 -*-
"""Unit tests for ERC-165/721 calldata encoding and return-data decoding."""

from __future__ import annotations

import pytest
from eth_abi import encode

from wallet_inspector.utils import abi


def _ret(types: list[str], values: list[object]) -> str:
    return "0x" + encode(types, values).hex()


def test_encode_supports_interface_uses_erc721_interface_id() -> None:
    data = abi.encode_supports_interface()
    assert data == "0x01ffc9a7" + "80ac58cd" + "0" * 56


def test_encode_owner_of_and_token_uri() -> None:
    assert abi.encode_owner_of(7) == "0x6352211e" + "0" * 63 + "7"
    assert abi.encode_token_uri(255) == "0xc87b56dd" + "0" * 62 + "ff"


def test_selectors_and_transfer_topic_match_known_values() -> None:
    assert abi.SELECTOR_APPROVE == "0x095ea7b3"
    assert abi.SELECTOR_NAME == "0x06fdde03"
    assert abi.SELECTOR_SYMBOL == "0x95d89b41"
    assert abi.TRANSFER_TOPIC == "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"


def test_address_topic_left_pads() -> None:
    topic = abi.address_topic("0x" + "AB" * 20)
    assert topic == "0x" + "0" * 24 + "ab" * 20


def test_decode_bool() -> None:
    assert abi.decode_bool(_ret(["bool"], [True])) is True
    assert abi.decode_bool(_ret(["bool"], [False])) is False


def test_decode_address_lower_cases() -> None:
    addr = "0x2d27b6e21b3d4d7c9a43fdf58f12345678907706"
    assert abi.decode_address(_ret(["address"], [addr])) == addr


def test_decode_string_and_bytes32_fallback() -> None:
    assert abi.decode_string(_ret(["string"], ["Monad Punks"])) == "Monad Punks"
    assert abi.decode_string("0x" + b"MKR".ljust(32, b"\x00").hex()) == "MKR"


@pytest.mark.parametrize("decoder", [abi.decode_bool, abi.decode_address, abi.decode_string])
def test_decoders_reject_empty_return_data(decoder: object) -> None:
    with pytest.raises(ValueError):
        decoder("0x")  # type: ignore[operator]
