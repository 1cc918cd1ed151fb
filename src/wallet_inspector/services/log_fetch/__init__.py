# -*- coding: utf-8 -*-
"""Batched Transfer log retrieval."""

from wallet_inspector.services.log_fetch.log_batch_fetcher import (
    LogBatchFetcher,
    TransferDirection,
    TransferLogs,
    split_block_range,
    transfer_topics,
)

__all__ = [
    "LogBatchFetcher",
    "TransferDirection",
    "TransferLogs",
    "split_block_range",
    "transfer_topics",
]
