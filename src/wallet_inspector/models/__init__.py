"""Domain models: transfer facts, held tokens, scan reports and wallet statistics."""

from wallet_inspector.models.held_token import (
    EnrichmentOutcome,
    EnrichmentStatus,
    HeldToken,
    OwnershipReport,
    TokenMetadata,
)
from wallet_inspector.models.scan import FetchReport, ScanWindow, SkippedRange
from wallet_inspector.models.transfer_fact import OwnershipKey, TransferFact
from wallet_inspector.models.wallet_stats import WalletAgeEstimate, WalletStatsSnapshot

__all__ = [
    "EnrichmentOutcome",
    "EnrichmentStatus",
    "FetchReport",
    "HeldToken",
    "OwnershipKey",
    "OwnershipReport",
    "ScanWindow",
    "SkippedRange",
    "TokenMetadata",
    "TransferFact",
    "WalletAgeEstimate",
    "WalletStatsSnapshot",
]
