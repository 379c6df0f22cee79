"""Polymarket data-api client — wallet positions + first-buy timestamps."""

from __future__ import annotations

import logging
from typing import Optional

from polyarb.config import ACTIVITY_LIMIT, POLYMARKET_DATA_API_URL
from polyarb.discovery.base_client import VenueClient
from polyarb.models.position import PolyPosition

logger = logging.getLogger(__name__)


class PolymarketClient(VenueClient):
    """Async client for https://data-api.polymarket.com."""

    VENUE = "Polymarket"

    def __init__(self, base_url: str = POLYMARKET_DATA_API_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    async def fetch_raw_positions(self, wallet: str) -> tuple[list[dict], Optional[str]]:
        """GET /positions?user= — raw dict 목록. 리스트가 아니면 빈 리스트."""
        data, error = await self._get_json(
            f"{self.base_url}/positions", params={"user": wallet},
        )
        if error:
            return [], error
        return (data if isinstance(data, list) else []), None

    async def fetch_entry_timestamps(self, wallet: str) -> dict[str, int]:
        """GET /activity (BUY 체결, 오래된 순) → conditionId별 최초 매수 시각.

        실패해도 빈 dict (보유 기간만 없어짐).
        """
        params = {
            "user": wallet,
            "type": "TRADE",
            "side": "BUY",
            "sortBy": "TIMESTAMP",
            "sortDirection": "ASC",
            "limit": str(ACTIVITY_LIMIT),
        }
        data, error = await self._get_json(f"{self.base_url}/activity", params=params)
        if error:
            logger.warning("Failed to fetch activity data: %s", error)
            return {}

        entry_dates: dict[str, int] = {}
        if isinstance(data, list):
            for trade in data:
                if not isinstance(trade, dict):
                    continue
                cid = trade.get("conditionId")
                ts = trade.get("timestamp")
                if not cid or not ts:
                    continue
                try:
                    ts = int(ts)
                except (TypeError, ValueError):
                    continue
                if cid not in entry_dates or ts < entry_dates[cid]:
                    entry_dates[cid] = ts

        logger.info("Mapped entry dates for %d conditions", len(entry_dates))
        return entry_dates

    async def fetch_positions(self, wallet: str) -> tuple[list[PolyPosition], Optional[str]]:
        """포지션 조회 + 최초 매수 시각 매핑.

        Returns:
            (positions, error). error는 경고 문자열 또는 None.
        """
        raw, error = await self.fetch_raw_positions(wallet)
        if error:
            return [], error

        positions = [PolyPosition.from_api_response(r) for r in raw if isinstance(r, dict)]
        logger.info("Found %d Polymarket positions", len(positions))

        if positions:
            entry_dates = await self.fetch_entry_timestamps(wallet)
            positions = [
                p.with_entry_timestamp(entry_dates[p.condition_id])
                if p.condition_id in entry_dates else p
                for p in positions
            ]
        return positions, None
