# -*- coding: utf-8 -*-
"""NFT ownership reconciliation."""

from wallet_inspector.services.ownership.ownership_service import OwnershipService
from wallet_inspector.services.ownership.reconciler import (
    DEFAULT_MAX_RESULTS,
    OwnershipPolicy,
    ReconciliationResult,
    latest_by_key,
    reconcile_ownership,
)

__all__ = [
    "DEFAULT_MAX_RESULTS",
    "OwnershipPolicy",
    "OwnershipService",
    "ReconciliationResult",
    "latest_by_key",
    "reconcile_ownership",
]
