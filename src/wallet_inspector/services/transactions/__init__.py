# -*- coding: utf-8 -*-
"""Transaction lookup."""

from wallet_inspector.services.transactions.transaction_lookup import (
    TransactionLookupService,
    TransactionSummary,
)

__all__ = ["TransactionLookupService", "TransactionSummary"]
