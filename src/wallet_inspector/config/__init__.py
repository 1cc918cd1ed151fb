"""Configuration subpackage."""

from wallet_inspector.config.config import (
    AppSettings,
    LoggingSettings,
    NftIndexSettings,
    RpcSettings,
    ScanSettings,
    Settings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "NftIndexSettings",
    "RpcSettings",
    "ScanSettings",
    "Settings",
    "get_settings",
]
