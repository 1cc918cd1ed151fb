# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from wallet_inspector.clients.http import AsyncHttpClient
from wallet_inspector.clients.nft_index import NftIndexClient
from wallet_inspector.clients.rpc_client import RpcClient
from wallet_inspector.config import Settings, get_settings
from wallet_inspector.services.activity import ActivityAggregator
from wallet_inspector.services.enrichment import MetadataEnricher
from wallet_inspector.services.log_fetch import LogBatchFetcher
from wallet_inspector.services.network import NetworkInfoService
from wallet_inspector.services.overview import WalletOverviewService
from wallet_inspector.services.ownership import OwnershipService
from wallet_inspector.services.token_balances import TokenBalanceService
from wallet_inspector.services.transactions import TransactionLookupService


def _build_log_batch_fetcher(settings: Settings, rpc_client: RpcClient) -> LogBatchFetcher:
    return LogBatchFetcher(
        rpc_client,
        max_span=settings.scan.max_span,
        max_concurrency=settings.scan.max_concurrency,
    )


def _build_metadata_enricher(
    settings: Settings,
    rpc_client: RpcClient,
    nft_index_client: NftIndexClient,
) -> MetadataEnricher:
    return MetadataEnricher(
        rpc_client,
        nft_index=nft_index_client if nft_index_client.enabled else None,
        max_concurrency=settings.scan.max_concurrency,
    )


def _build_ownership_service(
    settings: Settings,
    fetcher: LogBatchFetcher,
    enricher: MetadataEnricher,
) -> OwnershipService:
    return OwnershipService(
        fetcher,
        enricher,
        window_blocks=settings.scan.window_blocks,
        max_results=settings.scan.max_owned_results,
        policy=settings.scan.ownership_policy,
    )


def _build_activity_aggregator(
    settings: Settings,
    rpc_client: RpcClient,
    fetcher: LogBatchFetcher,
) -> ActivityAggregator:
    scan = settings.scan
    return ActivityAggregator(
        rpc_client,
        fetcher,
        max_scan_blocks=scan.max_scan_blocks,
        blocks_per_second=scan.blocks_per_second,
        safety_factor=scan.block_budget_safety_factor,
        average_blocks_per_tx=scan.average_blocks_per_tx,
        max_concurrency=scan.max_concurrency,
    )


def _build_token_balance_service(settings: Settings, rpc_client: RpcClient) -> TokenBalanceService:
    return TokenBalanceService(rpc_client, max_concurrency=settings.scan.max_concurrency)


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, HTTP client, RPC/index clients and services."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    rpc_client = providers.Singleton(
        RpcClient,
        http_client=http_client,
        settings=config,
    )

    nft_index_client = providers.Singleton(
        NftIndexClient,
        http_client=http_client,
        settings=config,
    )

    log_batch_fetcher = providers.Singleton(_build_log_batch_fetcher, config, rpc_client)

    metadata_enricher = providers.Singleton(
        _build_metadata_enricher, config, rpc_client, nft_index_client
    )

    ownership_service = providers.Singleton(
        _build_ownership_service, config, log_batch_fetcher, metadata_enricher
    )

    activity_aggregator = providers.Singleton(
        _build_activity_aggregator, config, rpc_client, log_batch_fetcher
    )

    token_balance_service = providers.Singleton(_build_token_balance_service, config, rpc_client)

    transaction_lookup_service = providers.Singleton(
        TransactionLookupService,
        rpc_client=rpc_client,
    )

    wallet_overview_service = providers.Singleton(
        WalletOverviewService,
        rpc_client=rpc_client,
    )

    network_info_service = providers.Singleton(
        NetworkInfoService,
        rpc_client=rpc_client,
    )
