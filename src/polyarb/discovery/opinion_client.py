"""Opinion openapi client — wallet positions + latest traded price per token."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional
from urllib.parse import quote

from polyarb.config import OPINION_API_URL
from polyarb.discovery.base_client import VenueClient
from polyarb.models.position import OpinionPosition, parse_float

logger = logging.getLogger(__name__)

MISSING_API_KEY = "OPINION_API_KEY not configured"


class OpinionClient(VenueClient):
    """Async client for https://openapi.opinion.trade (``apikey`` header)."""

    VENUE = "Opinion"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = OPINION_API_URL,
        **kwargs,
    ):
        super().__init__(base_url, **kwargs)
        self.api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict:
        return {"apikey": self.api_key or ""}

    async def fetch_raw_positions(self, wallet: str) -> tuple[list[dict], Optional[str]]:
        """GET /positions/user/{wallet} → result.list 또는 result."""
        url = f"{self.base_url}/positions/user/{quote(wallet, safe='')}"
        data, error = await self._get_json(url, headers=self._headers())
        if error:
            return [], error

        result = data.get("result") if isinstance(data, dict) else None
        if isinstance(result, dict):
            result = result.get("list")
        return (result if isinstance(result, list) else []), None

    async def fetch_latest_price(self, token_id: str) -> float:
        """GET /token/latest-price → result.price. 실패 시 0."""
        data, error = await self._get_json(
            f"{self.base_url}/token/latest-price",
            params={"token_id": token_id},
            headers=self._headers(),
        )
        if error or not isinstance(data, dict):
            logger.warning("Failed to fetch latest price for %s: %s", token_id, error)
            return 0.0
        result = data.get("result")
        if not isinstance(result, dict):
            return 0.0
        return parse_float(result.get("price"))

    async def _with_latest_price(self, pos: OpinionPosition) -> OpinionPosition:
        if not pos.token_id:
            return pos
        price = await self.fetch_latest_price(pos.token_id)
        if price > 0:
            logger.debug("Set latest_price=%s for %s", price, pos.market_title)
            return pos.with_latest_price(price)
        return pos

    async def fetch_positions(
        self, wallet: str,
    ) -> tuple[list[OpinionPosition], Optional[str]]:
        """포지션 조회 후 토큰별 최신가를 병렬 조회해서 반영.

        Returns:
            (positions, error). API 키가 없으면 ([], MISSING_API_KEY).
        """
        if not self.enabled:
            return [], MISSING_API_KEY

        raw, error = await self.fetch_raw_positions(wallet)
        if error:
            return [], error

        positions = [OpinionPosition.from_api_response(r) for r in raw if isinstance(r, dict)]
        logger.info("Found %d Opinion positions", len(positions))

        positions = list(await asyncio.gather(
            *(self._with_latest_price(p) for p in positions)
        ))
        return positions, None
