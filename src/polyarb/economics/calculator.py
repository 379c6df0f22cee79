"""Arbitrage economics for a matched cross-venue pair.

가격은 cents (확률 × 100). 내부 계산은 전부 float 그대로, 반올림은 표시할 때만.
수수료는 Opinion 쪽만 모델링: fee = fee_rate × Opinion 현재가치.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from polyarb.config import MS_PER_DAY, SELL_SIGNAL_THRESHOLD_CENTS
from polyarb.models.match import MatchedPosition

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Formula helpers
# ---------------------------------------------------------------------------


def is_sell_signal(
    poly_price_cents: float,
    opinion_price_cents: float,
    threshold: float = SELL_SIGNAL_THRESHOLD_CENTS,
) -> bool:
    """YES+NO 현재가 합이 threshold 초과면 청산 신호 (strict >)."""
    # 반올림 없이 float 그대로 비교 (price × 100 오차로 98.9 경계가 넘어갈 수 있음)
    return poly_price_cents + opinion_price_cents > threshold


def yield_pct(net_pnl: float, total_cost: float) -> float:
    """net_pnl / total_cost × 100. 비용 0 이하면 0."""
    if total_cost <= 0:
        return 0.0
    return net_pnl / total_cost * 100.0


def holding_days(entry_timestamp: Optional[int], now: datetime) -> int:
    """첫 매수 이후 경과 일수 (최소 1). 타임스탬프 없으면 0.

    Args:
        entry_timestamp: unix seconds.
        now: 기준 시각 (aware datetime).
    """
    if not entry_timestamp:
        return 0
    now_ms = now.timestamp() * 1000
    elapsed_ms = now_ms - entry_timestamp * 1000
    return max(1, math.floor(elapsed_ms / MS_PER_DAY))


def holding_label(days: int) -> str:
    """보유 기간 표시: ``12d`` / ``2mo 5d`` / ``1y 3mo``. 0이면 빈 문자열."""
    if days <= 0:
        return ""
    if days < 30:
        return f"{days}d"
    if days < 365:
        return f"{days // 30}mo {days % 30}d"
    return f"{days // 365}y {(days % 365) // 30}mo"


def annualized_yield(yield_percent: float, days: int) -> float:
    """APY = ((1 + yield/100)^(365/days) - 1) × 100. days 0이면 0.

    실현 수익률을 보유 기간 기준으로 복리 연환산한 표시용 값.
    원금 전액 손실 이하(base <= 0)는 -100, 오버플로는 inf.
    """
    if days <= 0:
        return 0.0
    base = 1.0 + yield_percent / 100.0
    if base <= 0:
        return -100.0
    try:
        return (math.pow(base, 365.0 / days) - 1.0) * 100.0
    except OverflowError:
        return math.inf


def clamp_side(side: str) -> str:
    """대소문자 무관하게 yes면 "Yes", 나머지는 전부 "No"."""
    return "Yes" if (side or "").strip().lower() == "yes" else "No"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShareSummary:
    """이미지/메시지 공유용 평탄화 요약."""

    title: str
    net_profit: float
    yield_pct: float
    poly_side: str
    poly_price: float       # cents
    opinion_side: str
    opinion_price: float    # cents
    total_cost: float
    is_sell_signal: bool
    holding_label: str
    holding_days: int

    @property
    def apy(self) -> float:
        """공유 카드 APY. days는 최소 1로 보정."""
        if self.holding_days <= 0:
            return 0.0
        return annualized_yield(self.yield_pct, max(1, self.holding_days))


@dataclass(frozen=True)
class ArbEconomics:
    """Derived economics of one matched pair."""

    title: str
    match_score: float

    # cents
    entry_price_poly: float
    entry_price_opinion: float
    cur_price_poly: float
    cur_price_opinion: float

    # USD
    cost_poly: float
    cost_opinion: float
    value_poly: float
    value_opinion: float
    pnl_poly: float
    pnl_opinion: float
    total_cost: float
    total_value: float
    total_pnl: float
    fee_rate_opinion: float
    fee_opinion: float
    net_value: float
    net_pnl: float

    yield_pct: float
    holding_days: int
    holding_label: str
    apy: float
    is_sell_signal: bool

    poly_side: str = ""
    opinion_side: str = ""

    @property
    def entry_yes_no(self) -> float:
        """진입가 YES+NO 합 (cents)."""
        return self.entry_price_poly + self.entry_price_opinion

    @property
    def current_yes_no(self) -> float:
        """현재가 YES+NO 합 (cents)."""
        return self.cur_price_poly + self.cur_price_opinion

    @property
    def entry_spread(self) -> float:
        return abs(self.entry_price_poly - self.entry_price_opinion)

    @property
    def current_spread(self) -> float:
        return abs(self.cur_price_poly - self.cur_price_opinion)

    def to_share_summary(self) -> ShareSummary:
        return ShareSummary(
            title=self.title,
            net_profit=self.net_pnl,
            yield_pct=self.yield_pct,
            poly_side=clamp_side(self.poly_side),
            poly_price=self.cur_price_poly,
            opinion_side=clamp_side(self.opinion_side),
            opinion_price=self.cur_price_opinion,
            total_cost=self.total_cost,
            is_sell_signal=self.is_sell_signal,
            holding_label=self.holding_label,
            holding_days=self.holding_days,
        )


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------


def compute_economics(
    match: MatchedPosition,
    now: Optional[datetime] = None,
) -> ArbEconomics:
    """매칭 쌍의 진입/현재가, 손익, 수수료, 수익률, APY, 청산 신호 계산.

    Args:
        match: 매칭된 포지션 쌍.
        now: holding days 기준 시각. None이면 현재 UTC (테스트는 고정값 주입).

    Returns:
        ArbEconomics. 어떤 입력에도 예외 없음 (0 나눗셈은 0으로 처리).
    """
    if now is None:
        now = datetime.now(tz=timezone.utc)

    poly = match.poly
    opinion = match.opinion

    # Polymarket leg
    entry_poly = poly.initial_value / poly.size * 100 if poly.size > 0 else 0.0
    cur_poly = poly.cur_price * 100
    value_poly = poly.size * poly.cur_price
    cost_poly = poly.initial_value
    pnl_poly = value_poly - cost_poly

    # Opinion leg
    entry_opinion = opinion.avg_entry_price * 100
    cur_opinion = opinion.current_price * 100
    value_opinion = opinion.current_value
    cost_opinion = opinion.cost_basis
    pnl_opinion = opinion.unrealized_pnl

    total_value = value_poly + value_opinion
    total_cost = cost_poly + cost_opinion
    total_pnl = pnl_poly + pnl_opinion

    fee_rate = opinion.fee_rate
    fee_opinion = fee_rate * value_opinion if fee_rate > 0 else 0.0
    net_value = total_value - fee_opinion
    net_pnl = net_value - total_cost
    yld = yield_pct(net_pnl, total_cost)

    days = holding_days(poly.entry_timestamp, now)

    return ArbEconomics(
        title=match.matched_title,
        match_score=match.match_score,
        entry_price_poly=entry_poly,
        entry_price_opinion=entry_opinion,
        cur_price_poly=cur_poly,
        cur_price_opinion=cur_opinion,
        cost_poly=cost_poly,
        cost_opinion=cost_opinion,
        value_poly=value_poly,
        value_opinion=value_opinion,
        pnl_poly=pnl_poly,
        pnl_opinion=pnl_opinion,
        total_cost=total_cost,
        total_value=total_value,
        total_pnl=total_pnl,
        fee_rate_opinion=fee_rate,
        fee_opinion=fee_opinion,
        net_value=net_value,
        net_pnl=net_pnl,
        yield_pct=yld,
        holding_days=days,
        holding_label=holding_label(days),
        apy=annualized_yield(yld, days),
        is_sell_signal=is_sell_signal(cur_poly, cur_opinion),
        poly_side=poly.outcome,
        opinion_side=opinion.outcome_side,
    )
