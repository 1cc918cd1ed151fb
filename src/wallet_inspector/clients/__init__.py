"""HTTP, JSON-RPC and NFT index clients."""

from wallet_inspector.clients.http import AsyncHttpClient
from wallet_inspector.clients.nft_index import NftIndexClient
from wallet_inspector.clients.rpc_client import RpcClient

__all__ = [
    "AsyncHttpClient",
    "NftIndexClient",
    "RpcClient",
]
