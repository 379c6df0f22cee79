"""Console dashboard renderer.

박스 그리기 문자 (═║╔╗╚╝)로 매칭 카드, 포트폴리오 요약, 미매칭 포지션 표시.
금액은 소수 둘째 자리, cents는 첫째 자리에서만 반올림.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from polyarb.config import SELL_SIGNAL_THRESHOLD_CENTS, ScannerConfig
from polyarb.economics.calculator import ArbEconomics
from polyarb.economics.portfolio import PortfolioSummary, opinion_row_pnl, poly_row_pnl
from polyarb.models.position import OpinionPosition, PolyPosition


def _signed_usd(value: float) -> str:
    return f"{'+' if value >= 0 else '-'}${abs(value):.2f}"


class DashboardRenderer:
    """콘솔 대시보드 렌더링."""

    WIDTH = 64

    def _row(self, text: str) -> str:
        w = self.WIDTH
        if len(text) > w - 2:
            text = text[: w - 5] + "..."
        return f"║ {text:<{w - 2}} ║"

    def _top(self) -> str:
        return f"╔{'═' * self.WIDTH}╗"

    def _mid(self) -> str:
        return f"╠{'═' * self.WIDTH}╣"

    def _bottom(self) -> str:
        return f"╚{'═' * self.WIDTH}╝"

    def render_startup(self, config: ScannerConfig, groups: int) -> str:
        """시작 배너 — 지갑, 매칭 모드, 테이블 크기."""
        w = self.WIDTH
        lines = [
            self._top(),
            f"║{'polyarb — Cross-Venue Arbitrage Positions':^{w}}║",
            self._mid(),
            self._row(f"Polymarket wallet: {config.poly_wallet or '-'}"),
            self._row(f"Opinion wallet:    {config.opinion_wallet or '-'}"),
            self._row(f"Match table:       {groups} groups"),
            self._row(f"Fuzzy fallback:    {'ON' if config.use_fuzzy else 'OFF'}"),
            self._bottom(),
        ]
        return "\n".join(lines)

    def render_pair(self, econ: ArbEconomics) -> str:
        """매칭 쌍 카드: 진입가 → 현재가, 손익, 수수료, 청산 신호.

        Args:
            econ: compute_economics 결과.

        Returns:
            렌더링된 카드 문자열.
        """
        holding = f"{econ.holding_days}d" if econ.holding_days > 0 else "—"
        badges = [f"{econ.match_score * 100:.0f}% match"]
        if econ.total_cost > 0:
            badges.append(f"{'+' if econ.total_pnl >= 0 else ''}{econ.yield_pct:.2f}% in {holding}")
        if econ.holding_days > 0 and econ.total_cost > 0:
            badges.append(f"APY {econ.apy:.1f}%")

        lines = [
            self._top(),
            self._row(econ.title),
            self._row(f"P&L {_signed_usd(econ.total_pnl)}  value ${econ.total_value:.2f}"),
            self._row(" | ".join(badges)),
            self._mid(),
            self._row("ENTRY"),
            self._row(
                f"  Polymarket  {econ.poly_side:<4} avg {econ.entry_price_poly:5.1f}¢  "
                f"cost ${econ.cost_poly:.2f}"
            ),
            self._row(
                f"  Opinion     {econ.opinion_side:<4} avg {econ.entry_price_opinion:5.1f}¢  "
                f"cost ${econ.cost_opinion:.2f}"
            ),
            self._row(
                f"  YES+NO = {econ.entry_yes_no:.1f}¢   Total Cost ${econ.total_cost:.2f}"
            ),
            self._row("CURRENT"),
            self._row(
                f"  Polymarket  {econ.cur_price_poly:5.1f}¢  value ${econ.value_poly:.2f}  "
                f"P&L {_signed_usd(econ.pnl_poly)}"
            ),
            self._row(
                f"  Opinion     {econ.cur_price_opinion:5.1f}¢  value ${econ.value_opinion:.2f}  "
                f"P&L {_signed_usd(econ.pnl_opinion)}"
            ),
            self._row(
                f"  YES+NO = {econ.current_yes_no:.1f}¢   Total Value ${econ.total_value:.2f}"
            ),
        ]
        if econ.fee_opinion > 0:
            lines.append(self._row(
                f"  Opinion Fee ({econ.fee_rate_opinion * 100:.1f}%)  -${econ.fee_opinion:.2f}"
            ))
        lines.append(self._row(
            f"  Net ${econ.net_value:.2f} ({_signed_usd(econ.net_pnl)})"
        ))
        if econ.is_sell_signal:
            lines.append(self._row(
                f"  🔔 SELL — YES+NO > {SELL_SIGNAL_THRESHOLD_CENTS}¢"
            ))
        lines.append(self._bottom())
        return "\n".join(lines)

    def render_portfolio(self, summary: PortfolioSummary) -> str:
        """포트폴리오 요약 박스."""
        lines = [
            self._top(),
            self._row("📊 PORTFOLIO SUMMARY"),
            self._mid(),
            self._row(f"Matched Positions:  {summary.matched_count}"),
            self._row(f"Total Buy-in Cost:  ${summary.total_cost:.2f}"),
            self._row(f"Current Portfolio:  ${summary.total_value:.2f}"),
            self._row(
                f"Total Profit:       {_signed_usd(summary.total_profit)} "
                f"({summary.return_pct:.1f}% return)"
            ),
            self._bottom(),
        ]
        return "\n".join(lines)

    def render_unmatched(
        self,
        poly_positions: list[PolyPosition],
        opinion_positions: list[OpinionPosition],
    ) -> str:
        """미매칭 포지션 목록 (거래소별)."""
        lines = [
            f"{len(poly_positions)} unmatched Polymarket · "
            f"{len(opinion_positions)} unmatched Opinion"
        ]
        for pos in poly_positions:
            pnl, pct = poly_row_pnl(pos)
            lines.append(
                f"  [POLY] {(pos.title or pos.question)[:40]:<40} {pos.outcome:<4} "
                f"{pos.cur_price * 100:5.1f}¢  {_signed_usd(pnl)} ({pct:+.1f}%)"
            )
        for pos in opinion_positions:
            pnl, pct = opinion_row_pnl(pos)
            title = pos.market_title or pos.root_market_title
            lines.append(
                f"  [OPIN] {title[:40]:<40} {pos.outcome_side:<4} "
                f"{pos.avg_entry_price * 100:5.1f}¢  {_signed_usd(pnl)} ({pct:+.1f}%) "
                f"{pos.market_status}"
            )
        return "\n".join(lines)

    def render_scan(
        self,
        economics: list[ArbEconomics],
        summary: PortfolioSummary,
        poly_unmatched: list[PolyPosition],
        opinion_unmatched: list[OpinionPosition],
        errors: Optional[list[str]] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """스캔 한 번의 전체 출력."""
        now = now or datetime.now(tz=timezone.utc)
        parts = [f"Scan @ {now.strftime('%Y-%m-%d %H:%M:%S UTC')}"]
        for error in errors or []:
            parts.append(f"⚠️  {error}")
        parts.append(self.render_portfolio(summary))
        if economics:
            parts.append(f"MATCHED POSITIONS — {len(economics)} PAIRS")
            parts.extend(self.render_pair(e) for e in economics)
        if poly_unmatched or opinion_unmatched:
            parts.append(self.render_unmatched(poly_unmatched, opinion_unmatched))
        return "\n".join(parts)
