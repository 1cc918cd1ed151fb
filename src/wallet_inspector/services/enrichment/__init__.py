# -*- coding: utf-8 -*-
"""NFT verification and metadata enrichment."""

from wallet_inspector.services.enrichment.metadata_enricher import (
    PLACEHOLDER_COLLECTION,
    PLACEHOLDER_SYMBOL,
    MetadataEnricher,
)
from wallet_inspector.services.enrichment.token_uri import ParsedTokenUri, parse_token_uri

__all__ = [
    "PLACEHOLDER_COLLECTION",
    "PLACEHOLDER_SYMBOL",
    "MetadataEnricher",
    "ParsedTokenUri",
    "parse_token_uri",
]
