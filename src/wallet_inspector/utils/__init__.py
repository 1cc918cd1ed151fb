# -*- coding: utf-8 -*-
"""Utility modules."""

from wallet_inspector.utils.dedupe import dedupe_facts, transfer_fact_key
from wallet_inspector.utils.units import format_ether, format_units, hex_to_int, parse_units
from wallet_inspector.utils.validation import (
    ZERO_ADDRESS,
    is_hex_address,
    is_tx_hash,
    mask_address,
    normalize_address,
    require_address,
    require_tx_hash,
)

__all__ = [
    "ZERO_ADDRESS",
    "dedupe_facts",
    "format_ether",
    "format_units",
    "hex_to_int",
    "is_hex_address",
    "is_tx_hash",
    "mask_address",
    "normalize_address",
    "parse_units",
    "require_address",
    "require_tx_hash",
    "transfer_fact_key",
]
