"""Fungible (ERC-20) balances via the provider's token-balance extension."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.contextvars import bound_contextvars

from wallet_inspector.exceptions import UpstreamError
from wallet_inspector.utils.units import format_units, hex_to_int
from wallet_inspector.utils.validation import mask_address, normalize_address, require_address

if TYPE_CHECKING:
    from wallet_inspector.clients.rpc_client import RpcClient
    from wallet_inspector.clients.rpc_client.schema import TokenMetadataSchema


def _decimals(meta: Optional["TokenMetadataSchema"]) -> Optional[int]:
    """Token decimals, or None when missing or not a non-negative integer."""
    if not meta or meta.get("decimals") is None:
        return None
    try:
        decimals = int(meta["decimals"])  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return decimals if decimals >= 0 else None


@dataclass(frozen=True, slots=True)
class TokenBalance:
    contract_address: str
    name: str
    symbol: str
    decimals: int
    raw_balance: int
    """Integer base units as reported by the provider."""
    logo: Optional[str] = None

    @property
    def balance(self) -> Decimal:
        return format_units(self.raw_balance, self.decimals)


@dataclass(slots=True)
class TokenBalancesResult:
    address: str
    balances: list[TokenBalance] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    """Contracts with a non-zero balance whose metadata could not be read."""


class TokenBalanceService:
    """Lists non-zero ERC-20 holdings with their metadata."""

    def __init__(
        self,
        rpc_client: "RpcClient",
        *,
        max_concurrency: int = 8,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._rpc = rpc_client
        self._max_concurrency = max(1, max_concurrency)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _balance(
        self,
        contract: str,
        raw: int,
        semaphore: asyncio.Semaphore,
    ) -> Optional[TokenBalance]:
        async with semaphore:
            try:
                meta = await self._rpc.get_token_metadata(contract)
            except UpstreamError as e:
                self._logger.warning(
                    "token_metadata_skipped",
                    contract=contract,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return None
        decimals = _decimals(meta)
        if meta is None or decimals is None:
            self._logger.warning("token_metadata_skipped", contract=contract, reason="no_decimals")
            return None
        return TokenBalance(
            contract_address=contract,
            name=meta.get("name") or "Unknown Token",
            symbol=meta.get("symbol") or "UNKNOWN",
            decimals=decimals,
            raw_balance=raw,
            logo=meta.get("logo"),
        )

    async def get_token_balances(self, address: str) -> TokenBalancesResult:
        """Non-zero ERC-20 balances of address.

        Raises:
            InvalidInputError: If address is malformed.
            UpstreamError: If the balance listing itself fails.
        """
        addr = require_address(address)
        with bound_contextvars(wallet_masked=mask_address(addr)):
            entries = await self._rpc.get_token_balances(addr)
            held: list[tuple[str, int]] = []
            for entry in entries:
                if entry.get("error"):
                    continue
                raw = hex_to_int(entry.get("tokenBalance"))
                if raw > 0:
                    held.append((normalize_address(entry.get("contractAddress")), raw))

            sem = asyncio.Semaphore(self._max_concurrency)
            balances = await asyncio.gather(*(self._balance(c, raw, sem) for c, raw in held))
            result = TokenBalancesResult(address=addr)
            for (contract, _raw), balance in zip(held, balances):
                if balance is None:
                    result.skipped.append(contract)
                else:
                    result.balances.append(balance)
            self._logger.info(
                "token_balances_listed",
                tokens=len(result.balances),
                skipped=len(result.skipped),
            )
            return result
