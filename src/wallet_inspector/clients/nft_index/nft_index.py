# -*- coding: utf-8 -*-
"""Third-party NFT activity index client (Blockvision-style /collection/activities)."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional, cast

import structlog
from structlog.contextvars import bound_contextvars

from wallet_inspector.clients.nft_index.schema import NftActivityPage, NftActivitySchema
from wallet_inspector.exceptions import MissingRequiredConfigError, UpstreamError
from wallet_inspector.utils.validation import mask_address

if TYPE_CHECKING:
    from wallet_inspector.clients.http import AsyncHttpClient
    from wallet_inspector.config import Settings


class NftIndexClient:
    """Client for an NFT activity index. Used only as a metadata source."""

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: "Settings",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def enabled(self) -> bool:
        cfg = self._settings.nft_index
        return cfg.enabled and bool(cfg.api_key)

    def _base_url(self) -> str:
        return self._settings.nft_index.host.rstrip("/")

    async def get_activities(
        self,
        address: str,
        *,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> tuple[list[NftActivitySchema], Optional[str]]:
        """Fetch one page of NFT activities for an address, newest first.

        Returns:
            (activities, next_page_cursor). The cursor is None on the last page.

        Raises:
            MissingRequiredConfigError: If no API key is configured.
            UpstreamError: If the request fails or the index reports an error code.
        """
        cfg = self._settings.nft_index
        if not cfg.api_key:
            raise MissingRequiredConfigError("NFT_INDEX__API_KEY")
        params: dict[str, Any] = {
            "address": address,
            "limit": limit or cfg.page_limit,
            "ascendingOrder": "false",
        }
        if cursor:
            params["cursor"] = cursor
        url = f"{self._base_url()}/collection/activities"
        with bound_contextvars(nft_index_address_masked=mask_address(address)):
            data = await self._http.get(
                url,
                params=params,
                headers={"Accept": "application/json", "X-API-KEY": cfg.api_key},
            )
            if not isinstance(data, dict):
                raise UpstreamError(
                    f"Unexpected index response type: {type(data).__name__}", url=url
                )
            body = cast(dict[str, Any], data)
            if body.get("code") != 0:
                reason = body.get("reason") or body.get("message") or "unknown error"
                raise UpstreamError(f"NFT index error: {reason}", url=url)
            page = cast(NftActivityPage, body.get("result") or {})
            items = [a for a in page.get("data") or [] if isinstance(a, dict)]
            self._logger.debug("nft_index_page_fetched", activities=len(items))
            return items, page.get("nextPageCursor") or None
