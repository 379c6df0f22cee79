"""Scan pipeline — fetch both venues → match → economics.

지갑별 포지션 수집 실패는 경고로만 기록하고, 받아온 데이터로 매칭은 계속한다.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from polyarb.config import ScannerConfig
from polyarb.discovery.opinion_client import OpinionClient
from polyarb.discovery.polymarket_client import PolymarketClient
from polyarb.economics.calculator import ArbEconomics, compute_economics
from polyarb.economics.portfolio import PortfolioSummary, summarize_portfolio
from polyarb.matching.lookup import LookupIndex
from polyarb.matching.matcher import match_positions
from polyarb.models.match import MatchResult
from polyarb.models.position import OpinionPosition, PolyPosition

logger = logging.getLogger(__name__)

NO_WALLET_ERROR = "Please enter at least one wallet address"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class ScanResult:
    """한 번의 스캔 결과: 매칭 결과 + 수집 경고."""

    match_result: MatchResult = field(default_factory=MatchResult)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def economics(self, now: Optional[datetime] = None) -> list[ArbEconomics]:
        """매칭 쌍별 경제성 (매칭 순서 유지)."""
        return [compute_economics(m, now=now) for m in self.match_result.matched]

    def sell_signals(self, now: Optional[datetime] = None) -> list[ArbEconomics]:
        """청산 신호가 뜬 쌍만."""
        return [e for e in self.economics(now=now) if e.is_sell_signal]

    def portfolio(self) -> PortfolioSummary:
        return summarize_portfolio(self.match_result.matched)


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------


async def _fetch_poly(
    client: PolymarketClient, wallet: str,
) -> tuple[list[PolyPosition], Optional[str]]:
    if not wallet:
        return [], None
    async with client:
        return await client.fetch_positions(wallet)


async def _fetch_opinion(
    client: OpinionClient, wallet: str,
) -> tuple[list[OpinionPosition], Optional[str]]:
    if not wallet:
        return [], None
    async with client:
        return await client.fetch_positions(wallet)


async def run_scan(
    config: ScannerConfig,
    index: LookupIndex,
    poly_client: Optional[PolymarketClient] = None,
    opinion_client: Optional[OpinionClient] = None,
) -> ScanResult:
    """단일 스캔: 두 거래소 병렬 수집 → match_positions.

    Args:
        config: 지갑 주소, API 키, fuzzy 사용 여부.
        index: 큐레이션 lookup index.
        poly_client: 테스트용 주입. None이면 기본 클라이언트.
        opinion_client: 테스트용 주입. None이면 config.opinion_api_key로 생성.

    Returns:
        ScanResult. 지갑이 하나도 없으면 errors에 안내 문구만.
    """
    if not config.has_wallet:
        return ScanResult(errors=[NO_WALLET_ERROR])

    poly_client = poly_client or PolymarketClient()
    opinion_client = opinion_client or OpinionClient(api_key=config.opinion_api_key)

    (poly_positions, poly_error), (opinion_positions, opinion_error) = await asyncio.gather(
        _fetch_poly(poly_client, config.poly_wallet),
        _fetch_opinion(opinion_client, config.opinion_wallet),
    )

    errors = [e for e in (poly_error, opinion_error) if e]
    for error in errors:
        logger.warning("Position fetch warning: %s", error)

    match_result = match_positions(
        poly_positions,
        opinion_positions,
        index,
        use_fuzzy=config.use_fuzzy,
    )
    return ScanResult(match_result=match_result, errors=errors)
