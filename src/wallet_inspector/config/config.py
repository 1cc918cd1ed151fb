# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, RPC__URL, SCAN__MAX_SPAN.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "wallet-inspector"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Console handler writes to stderr; stdout carries CLI output only
    log_to_console: bool = True
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class RpcSettings(BaseSettings):
    """JSON-RPC provider configuration (env RPC__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    url: str = Field(
        default="",
        description="JSON-RPC endpoint. May contain an {api_key} placeholder.",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="Provider API key substituted into {api_key} in url.",
    )
    timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )

    def resolved_url(self) -> str:
        """Return url with the {api_key} placeholder filled in (if present)."""
        url = self.url.strip()
        if self.api_key and "{api_key}" in url:
            url = url.replace("{api_key}", self.api_key)
        return url


class ScanSettings(BaseSettings):
    """Block scanning bounds and concurrency (env SCAN__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    window_blocks: int = Field(
        default=2000,
        ge=1,
        description="Blocks behind the chain head scanned for ownership reconciliation.",
    )
    max_span: int = Field(
        default=500,
        ge=1,
        le=100_000,
        description="Largest block range the provider accepts in one eth_getLogs call.",
    )
    max_owned_results: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Cap on reconciled tokens passed to enrichment.",
    )
    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=128,
        description="Maximum in-flight provider calls per computation.",
    )
    max_scan_blocks: int = Field(
        default=50_000,
        ge=1,
        description="Upper bound on blocks scanned by the activity aggregator.",
    )
    blocks_per_second: float = Field(
        default=1.0,
        gt=0.0,
        description="Assumed block production rate for timeframe-to-block estimates.",
    )
    block_budget_safety_factor: float = Field(
        default=1.2,
        ge=1.0,
        le=10.0,
    )
    average_blocks_per_tx: int = Field(
        default=5,
        ge=1,
        description="Heuristic used by the wallet age estimate.",
    )
    ownership_policy: Literal["latest_transfer_wins", "any_send_removes"] = "latest_transfer_wins"


class NftIndexSettings(BaseSettings):
    """Optional third-party NFT activity index (env NFT_INDEX__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    host: str = Field(
        default="https://api.blockvision.org/v2/monad",
        description="Index API base URL.",
    )
    api_key: Optional[str] = Field(default=None, description="Index API key (X-API-KEY).")
    page_limit: int = Field(default=50, ge=1, le=50)


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. RPC__URL, SCAN__MAX_CONCURRENCY.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    rpc: RpcSettings = Field(default_factory=RpcSettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)
    nft_index: NftIndexSettings = Field(default_factory=NftIndexSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.
        from_env(scan={"max_span": 100}).
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from wallet_inspector.config import get_settings

        settings = get_settings()
        span = settings.scan.max_span
    """
    return Settings()
