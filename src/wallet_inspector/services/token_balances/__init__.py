# -*- coding: utf-8 -*-
"""ERC-20 token balances."""

from wallet_inspector.services.token_balances.token_balance_service import (
    TokenBalance,
    TokenBalanceService,
    TokenBalancesResult,
)

__all__ = ["TokenBalance", "TokenBalanceService", "TokenBalancesResult"]
