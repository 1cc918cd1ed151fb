"""Account overview: balance, nonce, contract check, chain head and node status."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog

from wallet_inspector.utils.units import format_ether, format_gwei, hex_to_int
from wallet_inspector.utils.validation import mask_address, require_address

if TYPE_CHECKING:
    from wallet_inspector.clients.rpc_client import RpcClient


@dataclass(frozen=True, slots=True)
class WalletOverview:
    address: str
    balance_wei: int
    transaction_count: int
    is_contract: bool
    chain_id: int
    latest_block: int
    latest_block_timestamp: int
    gas_price_wei: int
    client_version: str
    syncing: bool

    @property
    def balance_ether(self) -> Decimal:
        return format_ether(self.balance_wei)

    @property
    def gas_price_gwei(self) -> Decimal:
        return format_gwei(self.gas_price_wei)


class WalletOverviewService:
    def __init__(
        self,
        rpc_client: "RpcClient",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._rpc = rpc_client
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def get_overview(self, address: str) -> WalletOverview:
        """Raises InvalidInputError for a malformed address, UpstreamError if any read fails."""
        addr = require_address(address)
        balance, tx_count, code, chain_id, head, gas_price, client_version, syncing = await asyncio.gather(
            self._rpc.get_balance(addr),
            self._rpc.get_transaction_count(addr),
            self._rpc.get_code(addr),
            self._rpc.chain_id(),
            self._rpc.get_block("latest"),
            self._rpc.gas_price(),
            self._rpc.client_version(),
            self._rpc.is_syncing(),
        )
        overview = WalletOverview(
            address=addr,
            balance_wei=balance,
            transaction_count=tx_count,
            is_contract=code not in ("", "0x"),
            chain_id=chain_id,
            latest_block=hex_to_int(head.get("number")),
            latest_block_timestamp=hex_to_int(head.get("timestamp")),
            gas_price_wei=gas_price,
            client_version=client_version,
            syncing=syncing,
        )
        self._logger.debug(
            "wallet_overview_loaded",
            wallet_masked=mask_address(addr),
            is_contract=overview.is_contract,
        )
        return overview
