"""Per-token verification and metadata for reconciled holdings.

Each step is independently fault tolerant and reported, not swallowed:

- supportsInterface(ERC-721) failing or answering false excludes the token.
- ownerOf() is authoritative when it answers; a different owner excludes the
  token, a failed call falls back to the log inference.
- name()/symbol()/tokenURI() failures substitute placeholders.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager, nullcontext
from typing import TYPE_CHECKING, Any, Optional

import structlog
from eth_abi.exceptions import DecodingError

from wallet_inspector.clients.nft_index.schema import NftSchema
from wallet_inspector.exceptions import UpstreamError, WalletInspectorError
from wallet_inspector.models.held_token import (
    EnrichmentOutcome,
    EnrichmentStatus,
    HeldToken,
    TokenMetadata,
)
from wallet_inspector.models.transfer_fact import OwnershipKey
from wallet_inspector.services.enrichment.token_uri import parse_token_uri
from wallet_inspector.utils import abi
from wallet_inspector.utils.validation import mask_address, normalize_address

if TYPE_CHECKING:
    from wallet_inspector.clients.nft_index import NftIndexClient
    from wallet_inspector.clients.rpc_client import RpcClient

PLACEHOLDER_COLLECTION = "Unknown Collection"
PLACEHOLDER_SYMBOL = "UNKNOWN"

_CALL_ERRORS = (UpstreamError, DecodingError, ValueError)


class MetadataEnricher:
    """Verifies reconciled NFTs against their contracts and attaches display metadata."""

    def __init__(
        self,
        rpc_client: "RpcClient",
        *,
        nft_index: Optional["NftIndexClient"] = None,
        max_concurrency: int = 8,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the enricher.

        Args:
            rpc_client: For eth_call probes.
            nft_index: Optional index used for collection name, image and verified flag.
            max_concurrency: Max eth_call requests in flight.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._rpc = rpc_client
        self._nft_index = nft_index
        self._max_concurrency = max(1, max_concurrency)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def enrich(self, address: str, tokens: Sequence[HeldToken]) -> list[EnrichmentOutcome]:
        """Enrich every token; outcomes keep input order."""
        if not tokens:
            return []
        owner = normalize_address(address)
        sem = asyncio.Semaphore(self._max_concurrency)
        index = await self._index_metadata(owner)
        outcomes = await asyncio.gather(
            *(self.enrich_token(owner, t, index_entry=index.get(t.key), semaphore=sem) for t in tokens)
        )
        excluded = sum(1 for o in outcomes if not o.included)
        self._logger.info(
            "enrichment_completed",
            wallet_masked=mask_address(owner),
            tokens=len(tokens),
            excluded=excluded,
            with_fallbacks=sum(1 for o in outcomes if o.fallbacks),
        )
        return list(outcomes)

    async def _index_metadata(self, address: str) -> dict[OwnershipKey, NftSchema]:
        if self._nft_index is None or not self._nft_index.enabled:
            return {}
        try:
            activities, _cursor = await self._nft_index.get_activities(address)
        except WalletInspectorError as e:
            self._logger.warning(
                "nft_index_unavailable",
                wallet_masked=mask_address(address),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return {}
        index: dict[OwnershipKey, NftSchema] = {}
        for activity in activities:
            nft = activity.get("nft") or {}
            contract = nft.get("contractAddress")
            token_id = nft.get("tokenId")
            if not contract or token_id is None:
                continue
            # newest first: keep the first record per key
            index.setdefault(OwnershipKey.of(contract, token_id), nft)
        return index

    async def _call(
        self,
        contract: str,
        data: str,
        semaphore: AbstractAsyncContextManager[Any],
    ) -> str:
        async with semaphore:
            return await self._rpc.eth_call(contract, data)

    async def _optional_string(
        self,
        contract: str,
        data: str,
        semaphore: AbstractAsyncContextManager[Any],
    ) -> Optional[str]:
        try:
            return abi.decode_string(await self._call(contract, data, semaphore))
        except _CALL_ERRORS:
            return None

    async def enrich_token(
        self,
        address: str,
        token: HeldToken,
        *,
        index_entry: Optional[NftSchema] = None,
        semaphore: Optional[AbstractAsyncContextManager[Any]] = None,
    ) -> EnrichmentOutcome:
        """Run probe, ownership check and metadata fetch for one token."""
        sem: AbstractAsyncContextManager[Any] = semaphore or nullcontext()
        owner = normalize_address(address)
        contract = token.key.contract_address
        token_id = int(token.key.token_id)
        fallbacks: list[str] = []

        try:
            is_erc721 = abi.decode_bool(
                await self._call(contract, abi.encode_supports_interface(), sem)
            )
        except _CALL_ERRORS as e:
            self._logger.debug(
                "enrichment_probe_failed",
                token=str(token.key),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return EnrichmentOutcome(
                key=token.key,
                status=EnrichmentStatus.EXCLUDED_PROBE_FAILED,
                error=str(e),
            )
        if not is_erc721:
            return EnrichmentOutcome(key=token.key, status=EnrichmentStatus.EXCLUDED_NOT_ERC721)

        confirmed = False
        try:
            actual_owner = abi.decode_address(
                await self._call(contract, abi.encode_owner_of(token_id), sem)
            )
        except _CALL_ERRORS as e:
            fallbacks.append("owner_of")
            self._logger.debug(
                "enrichment_owner_of_fallback",
                token=str(token.key),
                error_type=type(e).__name__,
                error_message=str(e),
            )
        else:
            if actual_owner != owner:
                self._logger.info(
                    "enrichment_owner_mismatch",
                    token=str(token.key),
                    wallet_masked=mask_address(owner),
                    actual_owner_masked=mask_address(actual_owner),
                )
                return EnrichmentOutcome(key=token.key, status=EnrichmentStatus.EXCLUDED_NOT_OWNED)
            confirmed = True

        name, symbol, token_uri = await asyncio.gather(
            self._optional_string(contract, abi.SELECTOR_NAME, sem),
            self._optional_string(contract, abi.SELECTOR_SYMBOL, sem),
            self._optional_string(contract, abi.encode_token_uri(token_id), sem),
        )
        if name is None:
            fallbacks.append("name")
        if symbol is None:
            fallbacks.append("symbol")
        if token_uri is None:
            fallbacks.append("token_uri")

        collection = name or PLACEHOLDER_COLLECTION
        title = f"{collection} #{token.key.token_id}"
        image: Optional[str] = None
        try:
            parsed = parse_token_uri(token_uri)
        except ValueError:
            fallbacks.append("token_uri_parse")
            self._logger.debug("enrichment_token_uri_unparsable", token=str(token.key))
        else:
            title = parsed.name or title
            image = parsed.image

        verified: Optional[bool] = None
        if index_entry:
            collection = index_entry.get("collectionName") or collection
            image = image or index_entry.get("image") or None
            verified = index_entry.get("verified")

        metadata = TokenMetadata(
            name=title,
            collection_name=collection,
            symbol=symbol or PLACEHOLDER_SYMBOL,
            image_url=image,
            token_uri=token_uri or None,
            verified=verified,
        )
        return EnrichmentOutcome(
            key=token.key,
            status=EnrichmentStatus.ENRICHED,
            token=token.with_enrichment(metadata, ownership_confirmed=confirmed),
            fallbacks=tuple(fallbacks),
        )
