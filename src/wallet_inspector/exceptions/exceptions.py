"""Custom exceptions for wallet inspection (input validation and upstream provider failures)."""

from __future__ import annotations


class WalletInspectorError(Exception):
    """Base exception for wallet-inspector errors."""

    pass


class MissingRequiredConfigError(WalletInspectorError):
    """Raised when a required configuration value is missing."""

    pass


class InvalidInputError(WalletInspectorError, ValueError):
    """Raised when a caller supplies a malformed address, hash, timeframe or block window.

    Surfaced before any network call is made.
    """

    def __init__(self, message: str, *, field: str | None = None, value: object = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class UpstreamError(WalletInspectorError):
    """Raised when a single request to the RPC provider or NFT index fails.

    Callers scanning many units (block ranges, blocks, transactions, tokens)
    catch this per unit, record the skip and keep going.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        method: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.method = method
        self.status_code = status_code
        self.cause = cause


class RateLimitError(UpstreamError):
    """Raised when the provider returns HTTP 429 (Too Many Requests)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded (429)",
        *,
        url: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, url=url, status_code=429)
        self.retry_after = retry_after


class UpstreamUnavailableError(WalletInspectorError):
    """Raised when the provider cannot be reached at all; fatal for the whole request."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class TransactionNotFoundError(WalletInspectorError):
    """Raised when a transaction hash is well-formed but unknown to the provider."""

    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"Transaction not found: {tx_hash}")
        self.tx_hash = tx_hash
