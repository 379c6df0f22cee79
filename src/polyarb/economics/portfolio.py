"""Portfolio-level summary over matched pairs + single-position row helpers."""

from __future__ import annotations

from dataclasses import dataclass

from polyarb.models.match import MatchedPosition
from polyarb.models.position import OpinionPosition, PolyPosition


@dataclass(frozen=True)
class PortfolioSummary:
    """매칭 쌍 전체 요약."""

    matched_count: int
    total_cost: float
    total_value: float
    total_spread: float  # Σ max(0, YES+NO − 100) cents

    @property
    def total_profit(self) -> float:
        return self.total_value - self.total_cost

    @property
    def return_pct(self) -> float:
        """총 수익률 %. 비용 0이면 0."""
        if self.total_cost <= 0:
            return 0.0
        return self.total_profit / self.total_cost * 100.0


def summarize_portfolio(matches: list[MatchedPosition]) -> PortfolioSummary:
    """매칭 쌍 합계.

    요약 패널의 Opinion 현재가는 latest_price가 아니라 value / shares 기준.
    """
    total_cost = 0.0
    total_value = 0.0
    total_spread = 0.0

    for m in matches:
        poly, opinion = m.poly, m.opinion
        total_cost += poly.initial_value + opinion.cost_basis
        total_value += poly.size * poly.cur_price + opinion.current_value

        opinion_cur = (
            opinion.current_value / opinion.shares_owned * 100
            if opinion.shares_owned > 0 else 0.0
        )
        yes_no = poly.cur_price * 100 + opinion_cur
        total_spread += max(0.0, yes_no - 100)

    return PortfolioSummary(
        matched_count=len(matches),
        total_cost=total_cost,
        total_value=total_value,
        total_spread=total_spread,
    )


def poly_row_pnl(pos: PolyPosition) -> tuple[float, float]:
    """단일 Polymarket 포지션 (pnl, pnl%). API 값 우선, 없으면 계산."""
    cur_value = pos.current_value if pos.current_value is not None else pos.size * pos.cur_price
    pnl = pos.cash_pnl if pos.cash_pnl is not None else cur_value - pos.initial_value
    if pos.percent_pnl is not None:
        pct = pos.percent_pnl
    else:
        pct = pnl / pos.initial_value * 100 if pos.initial_value > 0 else 0.0
    return pnl, pct


def opinion_row_pnl(pos: OpinionPosition) -> tuple[float, float]:
    """단일 Opinion 포지션 (pnl, pnl%). percent는 비율(0.05) → %."""
    return pos.unrealized_pnl, pos.unrealized_pnl_percent * 100
