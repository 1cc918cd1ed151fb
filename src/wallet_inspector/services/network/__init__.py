# -*- coding: utf-8 -*-
"""Network status and gas estimation."""

from wallet_inspector.services.network.network_info import (
    FeeHistory,
    GasEstimate,
    GasPrices,
    NetworkInfo,
    NetworkInfoService,
)

__all__ = ["FeeHistory", "GasEstimate", "GasPrices", "NetworkInfo", "NetworkInfoService"]
