"""JSON-RPC response types (Ethereum execution API, keys as returned: camelCase hex quantities)."""

from __future__ import annotations

from typing import TypedDict


class LogSchema(TypedDict, total=False):
    """eth_getLogs item."""

    address: str
    topics: list[str]
    data: str
    blockNumber: str
    blockHash: str
    blockTimestamp: str
    transactionHash: str
    transactionIndex: str
    logIndex: str
    removed: bool


class BlockSchema(TypedDict, total=False):
    """eth_getBlockByNumber result (transactions as hashes)."""

    number: str
    hash: str
    timestamp: str
    transactions: list[str]
    gasUsed: str
    baseFeePerGas: str


class TransactionSchema(TypedDict, total=False):
    """eth_getTransactionByHash result."""

    hash: str
    blockNumber: str
    # "from" is a keyword; read it with tx.get("from")
    to: str | None
    value: str
    gas: str
    gasPrice: str
    input: str
    nonce: str


class ReceiptSchema(TypedDict, total=False):
    """eth_getTransactionReceipt result."""

    transactionHash: str
    blockNumber: str
    gasUsed: str
    effectiveGasPrice: str
    status: str
    contractAddress: str | None
    to: str | None


class TokenBalanceSchema(TypedDict, total=False):
    """alchemy_getTokenBalances tokenBalances item."""

    contractAddress: str
    tokenBalance: str | None
    error: str | None


class TokenMetadataSchema(TypedDict, total=False):
    """alchemy_getTokenMetadata result."""

    name: str | None
    symbol: str | None
    decimals: int | None
    logo: str | None


# Transaction call object for eth_estimateGas / eth_createAccessList ("from" is a keyword)
CallRequestSchema = TypedDict(
    "CallRequestSchema",
    {"from": str, "to": str, "value": str, "data": str},
    total=False,
)


class AccessListEntrySchema(TypedDict, total=False):
    address: str
    storageKeys: list[str]


class FeeHistorySchema(TypedDict, total=False):
    """eth_feeHistory result."""

    oldestBlock: str
    baseFeePerGas: list[str]
    gasUsedRatio: list[float]
    reward: list[list[str]]
