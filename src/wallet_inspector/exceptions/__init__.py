"""Exceptions subpackage."""

from wallet_inspector.exceptions.exceptions import (
    InvalidInputError,
    MissingRequiredConfigError,
    RateLimitError,
    TransactionNotFoundError,
    UpstreamError,
    UpstreamUnavailableError,
    WalletInspectorError,
)

__all__ = [
    "InvalidInputError",
    "MissingRequiredConfigError",
    "RateLimitError",
    "TransactionNotFoundError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "WalletInspectorError",
]
