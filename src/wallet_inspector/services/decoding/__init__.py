# -*- coding: utf-8 -*-
"""Transfer event decoding."""

from wallet_inspector.services.decoding.transfer_decoder import (
    decode_address_topic,
    decode_transfer_log,
    decode_transfer_logs,
    decode_uint256_topic,
)

__all__ = [
    "decode_address_topic",
    "decode_transfer_log",
    "decode_transfer_logs",
    "decode_uint256_topic",
]
