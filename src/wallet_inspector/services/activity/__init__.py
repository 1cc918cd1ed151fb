# -*- coding: utf-8 -*-
"""Wallet activity statistics."""

from wallet_inspector.services.activity.activity_aggregator import (
    ActivityAggregator,
    TransactionFigures,
    transaction_figures,
)
from wallet_inspector.services.activity.timeframe import Timeframe

__all__ = [
    "ActivityAggregator",
    "Timeframe",
    "TransactionFigures",
    "transaction_figures",
]
