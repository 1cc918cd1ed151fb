# -*- coding: utf-8 -*-
"""Wallet overview."""

from wallet_inspector.services.overview.wallet_overview import WalletOverview, WalletOverviewService

__all__ = ["WalletOverview", "WalletOverviewService"]
