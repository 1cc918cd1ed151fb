"""EVM JSON-RPC client."""

from wallet_inspector.clients.rpc_client.rpc_client import RpcClient
from wallet_inspector.clients.rpc_client.schema import (
    AccessListEntrySchema,
    BlockSchema,
    CallRequestSchema,
    FeeHistorySchema,
    LogSchema,
    ReceiptSchema,
    TokenBalanceSchema,
    TokenMetadataSchema,
    TransactionSchema,
)

__all__ = [
    "AccessListEntrySchema",
    "BlockSchema",
    "CallRequestSchema",
    "FeeHistorySchema",
    "LogSchema",
    "ReceiptSchema",
    "RpcClient",
    "TokenBalanceSchema",
    "TokenMetadataSchema",
    "TransactionSchema",
]
