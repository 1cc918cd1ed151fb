"""Wallet inspector: NFT ownership reconciliation and activity statistics for EVM wallets."""

from wallet_inspector.clients import AsyncHttpClient, NftIndexClient, RpcClient
from wallet_inspector.config import get_settings
from wallet_inspector.DI import Container
from wallet_inspector.services.activity import ActivityAggregator
from wallet_inspector.services.ownership import OwnershipService

__version__ = "0.1.0"
__all__ = [
    "ActivityAggregator",
    "AsyncHttpClient",
    "Container",
    "NftIndexClient",
    "OwnershipService",
    "RpcClient",
    "get_settings",
]
