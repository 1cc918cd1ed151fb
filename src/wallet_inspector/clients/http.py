# -*- coding: utf-8 -*-
"""Async HTTP client (aiohttp) mapping transport failures onto UpstreamError."""

from __future__ import annotations

import asyncio
import uuid
from typing import Any, Callable, Dict, Optional

import aiohttp
import structlog
from structlog.contextvars import bound_contextvars

from wallet_inspector.config import Settings
from wallet_inspector.exceptions import RateLimitError, UpstreamError


class AsyncHttpClient:
    """Async JSON-over-HTTP client shared by the RPC and NFT index clients.

    One attempt per call: failures surface as UpstreamError (or RateLimitError
    on 429) and the caller decides whether to skip the unit. If no session is
    provided, one is created and must be closed via aclose() or used as an
    async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (uses settings.rpc.timeout_seconds).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.rpc.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @staticmethod
    def _retry_after(response: aiohttp.ClientResponse) -> Optional[float]:
        header = response.headers.get("Retry-After")
        if not header:
            return None
        try:
            return float(header)
        except ValueError:
            return None

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        request_id = uuid.uuid4().hex[:12]
        event_prefix = f"http_{method.lower()}"
        with bound_contextvars(http_url=url, http_request_id=request_id):
            try:
                session = await self._get_session()
                async with session.request(
                    method, url, params=params, json=json, headers=headers
                ) as response:
                    if response.status == 429:
                        retry_after = self._retry_after(response)
                        self._logger.warning(
                            f"{event_prefix}_rate_limited",
                            http_status_code=429,
                            http_retry_after_seconds=retry_after,
                        )
                        raise RateLimitError(url=url, retry_after=retry_after)
                    response.raise_for_status()
                    return await response.json(content_type=None)
            except aiohttp.ClientResponseError as e:
                self._logger.debug(
                    f"{event_prefix}_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                    http_status_code=e.status,
                )
                raise UpstreamError(
                    f"{method} failed: {url}",
                    url=url,
                    status_code=e.status,
                    cause=e,
                ) from e
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                # ValueError covers undecodable JSON bodies
                self._logger.debug(
                    f"{event_prefix}_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise UpstreamError(f"{method} failed: {url}", url=url, cause=e) from e

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform a GET request and return parsed JSON.

        Raises:
            RateLimitError: If 429 is returned.
            UpstreamError: On transport failure, non-2xx status or invalid JSON.
        """
        return await self._request("GET", url, params=params or {}, headers=headers)

    async def post(
        self,
        url: str,
        *,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform a POST request with a JSON body and return parsed JSON.

        Raises:
            RateLimitError: If 429 is returned.
            UpstreamError: On transport failure, non-2xx status or invalid JSON.
        """
        return await self._request("POST", url, json=json or {}, headers=headers)
