"""NFT index API response types (collection activities endpoint, camelCase keys)."""

from __future__ import annotations

from typing import TypedDict


class NftSchema(TypedDict, total=False):
    name: str
    contractAddress: str
    tokenId: str
    image: str
    qty: str
    collectionName: str
    verified: bool


class NftActivitySchema(TypedDict, total=False):
    """GET /collection/activities item."""

    transactionHash: str
    method: str
    blockNumber: int
    timestamp: int
    # "from"/"to" are keywords; read them with activity.get("from")
    type: str
    nft: NftSchema


class NftActivityPage(TypedDict, total=False):
    data: list[NftActivitySchema]
    nextPageCursor: str
    total: int
