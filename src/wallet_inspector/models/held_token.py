"""HeldToken and the per-token enrichment outcome record.

Enrichment is best effort: each step reports how it ended instead of raising,
and OwnershipReport collects those outcomes next to the tokens that survived.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from wallet_inspector.models.scan import FetchReport
from wallet_inspector.models.transfer_fact import OwnershipKey, TransferFact


@dataclass(frozen=True, slots=True)
class TokenMetadata:
    """Human-readable descriptors; every field may be a placeholder."""

    name: str
    """Display title, e.g. "Collection #7"."""
    collection_name: str
    symbol: str
    image_url: str | None = None
    token_uri: str | None = None
    verified: bool | None = None
    """Only known when an NFT index supplied it."""


@dataclass(frozen=True, slots=True)
class HeldToken:
    """A token inferred as currently held, with its latest transfer and optional metadata."""

    key: OwnershipKey
    last_transfer: TransferFact
    metadata: TokenMetadata | None = None
    ownership_confirmed: bool = False
    """True only when the contract's ownerOf() agreed with the log inference."""

    def with_enrichment(self, metadata: TokenMetadata, *, ownership_confirmed: bool) -> HeldToken:
        return HeldToken(
            key=self.key,
            last_transfer=self.last_transfer,
            metadata=metadata,
            ownership_confirmed=ownership_confirmed,
        )


class EnrichmentStatus(str, Enum):
    ENRICHED = "enriched"
    EXCLUDED_NOT_ERC721 = "excluded_not_erc721"
    EXCLUDED_PROBE_FAILED = "excluded_probe_failed"
    EXCLUDED_NOT_OWNED = "excluded_not_owned"


@dataclass(frozen=True, slots=True)
class EnrichmentOutcome:
    """Tagged result of enriching one token."""

    key: OwnershipKey
    status: EnrichmentStatus
    token: HeldToken | None = None
    fallbacks: tuple[str, ...] = ()
    """Steps that failed and were substituted, e.g. ("owner_of", "token_uri")."""
    error: str | None = None

    @property
    def included(self) -> bool:
        return self.status is EnrichmentStatus.ENRICHED


@dataclass(slots=True)
class OwnershipReport:
    """Result of reconcile_ownership for one address and window.

    Tokens acquired before the window start are not visible (window-boundary
    blind spot), and skipped sub-ranges in fetch_report make this a lower bound.
    """

    address: str
    held_tokens: list[HeldToken]
    fetch_report: FetchReport
    outcomes: list[EnrichmentOutcome] = field(default_factory=list)
    truncated: int = 0
    """Reconciled tokens dropped by the max-results cap."""

    @property
    def excluded(self) -> list[EnrichmentOutcome]:
        return [o for o in self.outcomes if not o.included]
