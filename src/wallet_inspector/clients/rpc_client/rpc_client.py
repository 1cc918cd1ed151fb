"""EVM JSON-RPC client: logs, blocks, transactions, receipts, eth_call, account, gas and network reads."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional, cast

import structlog
from structlog.contextvars import bound_contextvars

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
from wallet_inspector.exceptions import MissingRequiredConfigError, UpstreamError
from wallet_inspector.utils.units import hex_to_int
from wallet_inspector.utils.validation import mask_address

if TYPE_CHECKING:
    from wallet_inspector.clients.http import AsyncHttpClient
    from wallet_inspector.config import Settings

BlockTag = int | str


def _block_param(block: BlockTag) -> str:
    """Render an int as a hex quantity; pass tags ("latest", "0x10") through."""
    if isinstance(block, int):
        return hex(block)
    return block


class RpcClient:
    """Client for an EVM JSON-RPC provider.

    Every method performs exactly one request. JSON-RPC error objects and
    transport failures raise UpstreamError; whether that is fatal is decided
    by the caller.
    """

    def __init__(
        self,
        http_client: AsyncHttpClient,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the RPC client.

        Args:
            http_client: HTTP client for POST requests (JSON-RPC).
            settings: Configuration (uses settings.rpc.url / settings.rpc.api_key).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._ids = itertools.count(1)

    def _rpc_url(self) -> str:
        url = self._settings.rpc.resolved_url()
        if not url:
            raise MissingRequiredConfigError("RPC__URL")
        return url.rstrip("/")

    async def request(self, method: str, params: Optional[list[Any]] = None) -> Any:
        """Send one JSON-RPC call and return its ``result`` (may be None).

        Raises:
            UpstreamError: If the request fails or the response carries an error object.
        """
        url = self._rpc_url()
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        with bound_contextvars(rpc_method=method):
            try:
                response = await self._http.post(url, json=payload)
            except UpstreamError as e:
                e.method = method
                raise
            if not isinstance(response, dict):
                raise UpstreamError(
                    f"Unexpected RPC response type for {method}: {type(response).__name__}",
                    url=url,
                    method=method,
                )
            resp_dict = cast(dict[str, Any], response)
            if "error" in resp_dict and resp_dict["error"] is not None:
                err = resp_dict["error"]
                if isinstance(err, dict):
                    err_d = cast(dict[str, Any], err)
                    msg = str(err_d.get("message", err_d))
                else:
                    msg = str(err)
                self._logger.debug("rpc_error_response", rpc_error=msg)
                raise UpstreamError(f"RPC error in {method}: {msg}", url=url, method=method)
            return resp_dict.get("result")

    async def block_number(self) -> int:
        """Return the latest block number."""
        result = await self.request("eth_blockNumber")
        if result is None:
            raise UpstreamError("No result in eth_blockNumber response", method="eth_blockNumber")
        return hex_to_int(result)

    async def get_block(self, block: BlockTag = "latest") -> BlockSchema:
        """Fetch a block header (transactions as hashes).

        Raises:
            UpstreamError: If the provider returns no block.
        """
        result = await self.request("eth_getBlockByNumber", [_block_param(block), False])
        if not isinstance(result, dict):
            raise UpstreamError(
                f"No result in eth_getBlockByNumber response for {block}",
                method="eth_getBlockByNumber",
            )
        return cast(BlockSchema, result)

    async def get_block_timestamp(self, block: BlockTag) -> int:
        """Return a block's timestamp in unix seconds."""
        header = await self.get_block(block)
        return hex_to_int(header.get("timestamp"))

    async def get_logs(
        self,
        *,
        from_block: int,
        to_block: int,
        topics: list[Optional[str]],
        address: Optional[str] = None,
    ) -> list[LogSchema]:
        """eth_getLogs over an inclusive block range. No matches yields []."""
        flt: dict[str, Any] = {
            "fromBlock": _block_param(from_block),
            "toBlock": _block_param(to_block),
            "topics": topics,
        }
        if address:
            flt["address"] = address
        result = await self.request("eth_getLogs", [flt])
        if result is None:
            return []
        if not isinstance(result, list):
            raise UpstreamError(
                f"Unexpected eth_getLogs result type: {type(result).__name__}",
                method="eth_getLogs",
            )
        return [cast(LogSchema, x) for x in cast(list[Any], result) if isinstance(x, dict)]

    async def get_transaction(self, tx_hash: str) -> Optional[TransactionSchema]:
        """Return the transaction, or None if the provider does not know it."""
        result = await self.request("eth_getTransactionByHash", [tx_hash])
        return cast(TransactionSchema, result) if isinstance(result, dict) else None

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[ReceiptSchema]:
        """Return the receipt, or None for unknown/pending transactions."""
        result = await self.request("eth_getTransactionReceipt", [tx_hash])
        return cast(ReceiptSchema, result) if isinstance(result, dict) else None

    async def eth_call(self, to: str, data: str, block: BlockTag = "latest") -> str:
        """Perform eth_call (read-only contract call).

        Args:
            to: Contract address (0x...).
            data: Hex-encoded calldata (with 0x prefix).
            block: Block tag (default "latest").

        Returns:
            Hex-encoded result ("0x" when the call returned nothing).
        """
        to_norm = to.strip()
        if not to_norm.startswith("0x"):
            to_norm = "0x" + to_norm
        result = await self.request(
            "eth_call", [{"to": to_norm, "data": data}, _block_param(block)]
        )
        return str(result) if result is not None else "0x"

    async def get_balance(self, address: str, block: BlockTag = "latest") -> int:
        """Native balance in wei."""
        result = await self.request("eth_getBalance", [address, _block_param(block)])
        return hex_to_int(result)

    async def get_transaction_count(self, address: str, block: BlockTag = "latest") -> int:
        """Nonce (number of transactions sent) of an address."""
        result = await self.request("eth_getTransactionCount", [address, _block_param(block)])
        return hex_to_int(result)

    async def get_code(self, address: str, block: BlockTag = "latest") -> str:
        result = await self.request("eth_getCode", [address, _block_param(block)])
        return str(result) if result else "0x"

    async def chain_id(self) -> int:
        return hex_to_int(await self.request("eth_chainId"))

    async def gas_price(self) -> int:
        return hex_to_int(await self.request("eth_gasPrice"))

    async def get_token_balances(self, owner_address: str) -> list[TokenBalanceSchema]:
        """ERC-20 balances via the provider extension alchemy_getTokenBalances."""
        result = await self.request("alchemy_getTokenBalances", [owner_address, "erc20"])
        if not isinstance(result, dict):
            self._logger.warning(
                "rpc_token_balances_missing",
                owner_masked=mask_address(owner_address),
            )
            return []
        balances = cast(dict[str, Any], result).get("tokenBalances") or []
        return [cast(TokenBalanceSchema, b) for b in balances if isinstance(b, dict)]

    async def get_token_metadata(self, token_address: str) -> Optional[TokenMetadataSchema]:
        """ERC-20 metadata via alchemy_getTokenMetadata (None if the provider has none)."""
        result = await self.request("alchemy_getTokenMetadata", [token_address])
        return cast(TokenMetadataSchema, result) if isinstance(result, dict) else None

    async def max_priority_fee_per_gas(self) -> int:
        return hex_to_int(await self.request("eth_maxPriorityFeePerGas"))

    async def estimate_gas(self, call: CallRequestSchema, block: BlockTag = "latest") -> int:
        """Gas units the call would use (eth_estimateGas)."""
        result = await self.request("eth_estimateGas", [call, _block_param(block)])
        if result is None:
            raise UpstreamError("No result in eth_estimateGas response", method="eth_estimateGas")
        return hex_to_int(result)

    async def create_access_list(
        self,
        call: CallRequestSchema,
        block: BlockTag = "latest",
    ) -> list[AccessListEntrySchema]:
        """eth_createAccessList; not every provider supports it."""
        result = await self.request("eth_createAccessList", [call, _block_param(block)])
        entries = cast(dict[str, Any], result).get("accessList") if isinstance(result, dict) else None
        return [cast(AccessListEntrySchema, e) for e in entries or [] if isinstance(e, dict)]

    async def fee_history(
        self,
        block_count: int,
        newest_block: BlockTag = "latest",
        reward_percentiles: Optional[list[float]] = None,
    ) -> FeeHistorySchema:
        result = await self.request(
            "eth_feeHistory",
            [hex(block_count), _block_param(newest_block), reward_percentiles or []],
        )
        if not isinstance(result, dict):
            raise UpstreamError("No result in eth_feeHistory response", method="eth_feeHistory")
        return cast(FeeHistorySchema, result)

    async def client_version(self) -> str:
        return str(await self.request("web3_clientVersion") or "")

    async def net_version(self) -> str:
        return str(await self.request("net_version") or "")

    async def is_syncing(self) -> bool:
        """eth_syncing returns false when synced, a progress object otherwise."""
        return await self.request("eth_syncing") not in (False, None)
