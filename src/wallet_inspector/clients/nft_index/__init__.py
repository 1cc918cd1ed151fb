"""NFT activity index client."""

from wallet_inspector.clients.nft_index.nft_index import NftIndexClient
from wallet_inspector.clients.nft_index.schema import NftActivitySchema, NftSchema

__all__ = ["NftActivitySchema", "NftIndexClient", "NftSchema"]
