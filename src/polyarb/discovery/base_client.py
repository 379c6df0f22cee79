"""Shared async HTTP plumbing for venue clients (aiohttp + retry)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from polyarb.config import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

ERROR_BODY_LIMIT = 200


class VenueClient:
    """Async JSON client with retry/backoff. Subclasses set ``VENUE``.

    Usage:
        async with PolymarketClient() as client:
            positions, error = await client.fetch_positions(wallet)
    """

    VENUE = "Venue"

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base: float = 0.1,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self._session: Optional[aiohttp.ClientSession] = None

    async def open(self) -> None:
        """Open aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)

    async def close(self) -> None:
        """Close aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> VenueClient:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # HTTP helpers with retry
    # ------------------------------------------------------------------

    async def _get_json(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> tuple[Any, Optional[str]]:
        """GET → (json, None) 또는 (None, 경고 문자열). 예외는 밖으로 안 나감.

        429는 지수 백오프 후 재시도, 그 외 실패도 max_retries까지 재시도.
        """
        await self.open()
        error: Optional[str] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                async with self._session.get(url, params=params, headers=headers) as resp:
                    if resp.status == 200:
                        return await resp.json(content_type=None), None
                    body = await resp.text()
                    error = f"{self.VENUE} API error ({resp.status}): {body[:ERROR_BODY_LIMIT]}"
                    if resp.status == 429:
                        wait = self.backoff_base * 10 * (2 ** (attempt - 1))
                        logger.warning(
                            "%s API 429 rate limit %s (attempt %d/%d), backing off %.1fs",
                            self.VENUE, url, attempt, self.max_retries, wait,
                        )
                        await asyncio.sleep(wait)
                        continue
                    logger.warning(
                        "%s API %s returned %d (attempt %d/%d)",
                        self.VENUE, url, resp.status, attempt, self.max_retries,
                    )
            except Exception as exc:
                error = f"{self.VENUE} fetch failed: {str(exc) or type(exc).__name__}"
                logger.warning(
                    "%s API %s error (attempt %d/%d): %s",
                    self.VENUE, url, attempt, self.max_retries, exc,
                )

            if attempt < self.max_retries:
                await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))

        return None, error
