"""Network status and gas estimation.

Required reads propagate UpstreamError. Reads that providers commonly do not
implement (priority fee, net_version, fee history, access lists) are
best-effort and come back as None.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Awaitable, Optional, TypeVar

import structlog
from structlog.contextvars import bound_contextvars

from wallet_inspector.clients.rpc_client.schema import (
    AccessListEntrySchema,
    CallRequestSchema,
    FeeHistorySchema,
)
from wallet_inspector.exceptions import InvalidInputError, UpstreamError
from wallet_inspector.utils.units import format_ether, format_gwei, hex_to_int
from wallet_inspector.utils.validation import mask_address, require_address, require_hex_data

if TYPE_CHECKING:
    from wallet_inspector.clients.rpc_client import RpcClient

T = TypeVar("T")

DEFAULT_FEE_HISTORY_BLOCKS = 20
DEFAULT_REWARD_PERCENTILES = (25.0, 50.0, 75.0)


@dataclass(frozen=True, slots=True)
class GasPrices:
    gas_price_wei: int
    max_priority_fee_wei: Optional[int] = None
    """None when the provider lacks eth_maxPriorityFeePerGas."""

    @property
    def gas_price_gwei(self) -> Decimal:
        return format_gwei(self.gas_price_wei)

    @property
    def max_priority_fee_gwei(self) -> Optional[Decimal]:
        return None if self.max_priority_fee_wei is None else format_gwei(self.max_priority_fee_wei)


@dataclass(frozen=True, slots=True)
class FeeHistory:
    """Parsed eth_feeHistory, quantities in wei."""

    oldest_block: int
    base_fees_wei: list[int] = field(default_factory=list)
    gas_used_ratios: list[float] = field(default_factory=list)
    rewards_wei: list[list[int]] = field(default_factory=list)
    """One row per block, one column per requested percentile."""

    @classmethod
    def from_rpc(cls, raw: FeeHistorySchema) -> FeeHistory:
        return cls(
            oldest_block=hex_to_int(raw.get("oldestBlock")),
            base_fees_wei=[hex_to_int(x) for x in raw.get("baseFeePerGas") or []],
            gas_used_ratios=[float(x) for x in raw.get("gasUsedRatio") or []],
            rewards_wei=[[hex_to_int(x) for x in row] for row in raw.get("reward") or []],
        )


@dataclass(frozen=True, slots=True)
class NetworkInfo:
    latest_block: int
    chain_id: int
    gas: GasPrices
    client_version: str
    syncing: bool
    net_version: Optional[str] = None
    fee_history: Optional[FeeHistory] = None


@dataclass(frozen=True, slots=True)
class GasEstimate:
    from_address: str
    to_address: str
    value_wei: int
    data: str
    gas_limit: int
    gas: GasPrices
    access_list: Optional[list[AccessListEntrySchema]] = None
    """None when eth_createAccessList is unsupported."""

    @property
    def cost_wei(self) -> int:
        """gas_limit * gas_price, exact."""
        return self.gas_limit * self.gas.gas_price_wei

    @property
    def cost_gwei(self) -> Decimal:
        return format_gwei(self.cost_wei)

    @property
    def cost_ether(self) -> Decimal:
        return format_ether(self.cost_wei)


class NetworkInfoService:
    """Chain status, gas prices and transaction cost estimates."""

    def __init__(
        self,
        rpc_client: "RpcClient",
        *,
        fee_history_blocks: int = DEFAULT_FEE_HISTORY_BLOCKS,
        reward_percentiles: Sequence[float] = DEFAULT_REWARD_PERCENTILES,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._rpc = rpc_client
        self._fee_history_blocks = max(1, fee_history_blocks)
        self._reward_percentiles = list(reward_percentiles)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _optional(self, what: str, awaitable: Awaitable[T]) -> Optional[T]:
        try:
            return await awaitable
        except UpstreamError as e:
            self._logger.info(
                "network_read_unsupported",
                lookup=what,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return None

    async def _fee_history(self) -> FeeHistory:
        raw = await self._rpc.fee_history(self._fee_history_blocks, "latest", self._reward_percentiles)
        return FeeHistory.from_rpc(raw)

    async def get_network_info(self) -> NetworkInfo:
        """Raises UpstreamError if head, gas price, chain id, client version or sync status fail."""
        results = await asyncio.gather(
            self._rpc.block_number(),
            self._rpc.gas_price(),
            self._rpc.chain_id(),
            self._rpc.client_version(),
            self._rpc.is_syncing(),
            self._optional("max_priority_fee", self._rpc.max_priority_fee_per_gas()),
            self._optional("net_version", self._rpc.net_version()),
            self._optional("fee_history", self._fee_history()),
        )
        head, gas_price, chain_id, client_version, syncing, priority, net_version, history = results
        info = NetworkInfo(
            latest_block=head,
            chain_id=chain_id,
            gas=GasPrices(gas_price, priority),
            client_version=client_version,
            syncing=syncing,
            net_version=net_version or None,
            fee_history=history,
        )
        self._logger.debug("network_info_loaded", chain_id=chain_id, latest_block=head, syncing=syncing)
        return info

    async def estimate_gas(
        self,
        from_address: str,
        to_address: str,
        *,
        value_wei: int = 0,
        data: Optional[str] = None,
    ) -> GasEstimate:
        """Estimate gas and cost at the current gas price.

        Raises:
            InvalidInputError: For a malformed address, negative value or non-hex data.
            UpstreamError: If eth_estimateGas or eth_gasPrice fails (e.g. the call reverts).
        """
        sender = require_address(from_address, field="from")
        recipient = require_address(to_address, field="to")
        calldata = require_hex_data(data)
        if value_wei < 0:
            raise InvalidInputError(f"value must be >= 0, got {value_wei}", field="value", value=value_wei)
        call: CallRequestSchema = {"from": sender, "to": recipient, "value": hex(value_wei), "data": calldata}

        with bound_contextvars(from_masked=mask_address(sender), to_masked=mask_address(recipient)):
            gas_limit, gas_price, priority, access_list = await asyncio.gather(
                self._rpc.estimate_gas(call),
                self._rpc.gas_price(),
                self._optional("max_priority_fee", self._rpc.max_priority_fee_per_gas()),
                self._optional("access_list", self._rpc.create_access_list(call)),
            )
            estimate = GasEstimate(
                from_address=sender,
                to_address=recipient,
                value_wei=value_wei,
                data=calldata,
                gas_limit=gas_limit,
                gas=GasPrices(gas_price, priority),
                access_list=access_list,
            )
            self._logger.debug("gas_estimated", gas_limit=gas_limit, cost_wei=estimate.cost_wei)
            return estimate
