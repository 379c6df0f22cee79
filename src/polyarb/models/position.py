"""Venue position models — Polymarket (venue A) and Opinion (venue B).

두 거래소 API의 raw dict를 수집 시점에 한 번만 파싱해서 타입 있는 값으로 보관.
숫자 필드가 비었거나 파싱 불가면 0.0.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Optional

logger = logging.getLogger(__name__)


def parse_float(value: Any) -> float:
    """문자열/숫자 → float. None, 빈 문자열, 파싱 실패, NaN/inf는 0.0."""
    if value is None or value == "":
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(result):
        return 0.0
    return result


def _parse_optional_float(value: Any) -> Optional[float]:
    """필드가 아예 없으면 None, 있으면 parse_float."""
    if value is None:
        return None
    return parse_float(value)


@dataclass(frozen=True)
class PolyPosition:
    """A Polymarket position snapshot (data-api /positions row)."""

    asset: str
    condition_id: str
    title: str
    question: str
    market: str
    outcome: str
    outcome_index: int
    cur_price: float       # 0-1 확률
    size: float            # shares
    initial_value: float   # cost basis (USD)
    entry_timestamp: Optional[int] = None  # 첫 BUY 체결 unix seconds
    current_value: Optional[float] = None
    cash_pnl: Optional[float] = None
    percent_pnl: Optional[float] = None
    end_date: str = ""
    slug: str = ""

    @property
    def avg_price(self) -> float:
        """평균 매수 단가 (0-1). size 0이면 0."""
        if self.size <= 0:
            return 0.0
        return self.initial_value / self.size

    def with_entry_timestamp(self, timestamp: Optional[int]) -> PolyPosition:
        """entry_timestamp만 바꾼 새 객체 (원본 불변)."""
        return replace(self, entry_timestamp=timestamp)

    @staticmethod
    def from_api_response(raw: dict) -> PolyPosition:
        """data-api raw dict → PolyPosition. 숫자 파싱 실패는 0."""
        ts = raw.get("entryTimestamp")
        entry_ts = int(parse_float(ts)) if ts else None
        if entry_ts is not None and entry_ts <= 0:
            entry_ts = None

        return PolyPosition(
            asset=str(raw.get("asset") or ""),
            condition_id=str(raw.get("conditionId") or ""),
            title=raw.get("title") or "",
            question=raw.get("question") or "",
            market=raw.get("market") or "",
            outcome=raw.get("outcome") or "",
            outcome_index=int(parse_float(raw.get("outcomeIndex"))),
            cur_price=parse_float(raw.get("curPrice")),
            size=parse_float(raw.get("size")),
            initial_value=parse_float(raw.get("initialValue")),
            entry_timestamp=entry_ts,
            current_value=_parse_optional_float(raw.get("currentValue")),
            cash_pnl=_parse_optional_float(raw.get("cashPnl")),
            percent_pnl=_parse_optional_float(raw.get("percentPnl")),
            end_date=raw.get("endDate") or "",
            slug=raw.get("slug") or raw.get("marketSlug") or "",
        )


@dataclass(frozen=True)
class OpinionPosition:
    """An Opinion position snapshot. All numerics parsed from API strings."""

    market_id: str
    token_id: str
    root_market_title: str
    market_title: str
    outcome_side: str      # outcomeSideEnum ("Yes" / "No")
    market_status: str     # marketStatusEnum ("Activated", ...)
    shares_owned: float = 0.0
    avg_entry_price: float = 0.0
    current_value: float = 0.0       # currentValueInQuoteToken
    total_cost: float = 0.0          # totalCostInQuoteToken
    unrealized_pnl: float = 0.0
    unrealized_pnl_percent: float = 0.0
    latest_price: float = 0.0        # /token/latest-price 결과, 없으면 0
    fee_rate: float = 0.0            # feeRate, 없으면 tradeFeeRate

    @property
    def current_price(self) -> float:
        """현재가 (0-1). latest_price 우선, 없으면 value / shares, 그것도 없으면 0."""
        if self.latest_price > 0:
            return self.latest_price
        if self.shares_owned > 0:
            return self.current_value / self.shares_owned
        return 0.0

    @property
    def cost_basis(self) -> float:
        """totalCost, 0이면 shares × avgEntryPrice."""
        return self.total_cost or (self.shares_owned * self.avg_entry_price)

    def with_latest_price(self, price: float) -> OpinionPosition:
        """latest_price만 바꾼 새 객체 (원본 불변)."""
        return replace(self, latest_price=parse_float(price))

    @staticmethod
    def from_api_response(raw: dict) -> OpinionPosition:
        """Opinion openapi raw dict → OpinionPosition.

        숫자는 전부 문자열로 옴. feeRate가 없거나 빈 문자열일 때만 tradeFeeRate 폴백
        ("0"은 값이 있는 것으로 보고 수수료 0).
        """
        raw_fee = raw.get("feeRate")
        if raw_fee is None or raw_fee == "":
            raw_fee = raw.get("tradeFeeRate")
        fee_rate = parse_float(raw_fee)

        return OpinionPosition(
            market_id=str(raw.get("marketId") or ""),
            token_id=str(raw.get("tokenId") or ""),
            root_market_title=raw.get("rootMarketTitle") or "",
            market_title=raw.get("marketTitle") or "",
            outcome_side=raw.get("outcomeSideEnum") or "",
            market_status=raw.get("marketStatusEnum") or "",
            shares_owned=parse_float(raw.get("sharesOwned")),
            avg_entry_price=parse_float(raw.get("avgEntryPrice")),
            current_value=parse_float(raw.get("currentValueInQuoteToken")),
            total_cost=parse_float(raw.get("totalCostInQuoteToken")),
            unrealized_pnl=parse_float(raw.get("unrealizedPnl")),
            unrealized_pnl_percent=parse_float(raw.get("unrealizedPnlPercent")),
            latest_price=parse_float(raw.get("latestPrice")),
            fee_rate=fee_rate,
        )
