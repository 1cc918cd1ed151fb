"""Single transaction summary: value, fee and status."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog

from wallet_inspector.exceptions import TransactionNotFoundError
from wallet_inspector.utils.units import format_ether, hex_to_int
from wallet_inspector.utils.validation import normalize_address, require_tx_hash

if TYPE_CHECKING:
    from wallet_inspector.clients.rpc_client import RpcClient


@dataclass(frozen=True, slots=True)
class TransactionSummary:
    hash: str
    block_number: Optional[int]
    """None while pending."""
    from_address: str
    to_address: Optional[str]
    """None for contract deployments."""
    value_wei: int
    gas_price_wei: int
    gas_used: Optional[int]
    fee_wei: Optional[int]
    status: str
    """One of success, failed, pending."""
    contract_address: Optional[str] = None

    @property
    def value_ether(self) -> Decimal:
        return format_ether(self.value_wei)

    @property
    def fee_ether(self) -> Optional[Decimal]:
        return None if self.fee_wei is None else format_ether(self.fee_wei)


class TransactionLookupService:
    def __init__(
        self,
        rpc_client: "RpcClient",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._rpc = rpc_client
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def get_transaction_summary(self, tx_hash: str) -> TransactionSummary:
        """Look up tx_hash.

        Raises:
            InvalidInputError: If tx_hash is not 0x + 64 hex characters.
            TransactionNotFoundError: If the provider does not know the transaction.
            UpstreamError: If either lookup fails.
        """
        h = require_tx_hash(tx_hash)
        tx, receipt = await asyncio.gather(
            self._rpc.get_transaction(h),
            self._rpc.get_transaction_receipt(h),
        )
        if tx is None:
            self._logger.info("transaction_not_found", tx_hash=h)
            raise TransactionNotFoundError(h)

        gas_price = hex_to_int(tx.get("gasPrice"))
        gas_used: Optional[int] = None
        fee: Optional[int] = None
        status = "pending"
        contract_address: Optional[str] = None
        if receipt is not None:
            gas_used = hex_to_int(receipt.get("gasUsed"))
            fee = gas_used * hex_to_int(receipt.get("effectiveGasPrice") or tx.get("gasPrice"))
            status = "success" if hex_to_int(receipt.get("status"), default=1) == 1 else "failed"
            if receipt.get("contractAddress"):
                contract_address = normalize_address(receipt.get("contractAddress"))

        block = tx.get("blockNumber")
        to = tx.get("to")
        return TransactionSummary(
            hash=h,
            block_number=hex_to_int(block) if block else None,
            from_address=normalize_address(tx.get("from")),
            to_address=normalize_address(to) if to else None,
            value_wei=hex_to_int(tx.get("value")),
            gas_price_wei=gas_price,
            gas_used=gas_used,
            fee_wei=fee,
            status=status,
            contract_address=contract_address,
        )
