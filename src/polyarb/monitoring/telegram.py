"""Telegram alerts for sell signals, share cards, scan errors and portfolio reports.

TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID 중 하나라도 없으면 전송 안 함.
"""

from __future__ import annotations

import logging
from typing import Optional

import aiohttp

from polyarb.economics.calculator import ShareSummary
from polyarb.economics.portfolio import PortfolioSummary

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"
SEND_TIMEOUT = 10  # seconds
RULE = "━" * 24


class TelegramAlerter:
    """Sends HTML-formatted messages through the Bot API ``sendMessage`` call.

    Args:
        bot_token: 봇 토큰. 없으면 비활성.
        chat_id: 수신 채팅. 없으면 비활성.
    """

    def __init__(
        self,
        bot_token: Optional[str] = None,
        chat_id: Optional[str] = None,
        api_url: str = TELEGRAM_API_URL,
    ):
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._api_url = api_url.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self._bot_token) and bool(self._chat_id)

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    async def alert_share(self, summary: ShareSummary) -> None:
        """매칭 쌍 하나를 공유 카드 형태로 전송."""
        await self._deliver(self._format_share(summary), "share alert")

    async def alert_sell_signals(self, summaries: list[ShareSummary]) -> int:
        """청산 신호가 뜬 쌍만 전송. 보낸 개수 반환."""
        signals = [s for s in summaries if s.is_sell_signal]
        for summary in signals:
            await self.alert_share(summary)
        return len(signals)

    async def alert_error(self, message: str, level: str = "error") -> None:
        icon = "🚨" if level == "error" else "⚠️"
        await self._deliver(f"{icon} <b>{level.upper()}</b>\n{message}", "error alert")

    async def send_portfolio_report(self, summary: PortfolioSummary) -> None:
        await self._deliver(self._format_portfolio(summary), "portfolio report")

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _deliver(self, text: str, what: str) -> None:
        if not self.enabled:
            return
        try:
            await self._send_message(text)
        except Exception as exc:
            logger.error("Failed to send %s: %s", what, exc)

    async def _send_message(self, text: str, parse_mode: str = "HTML") -> None:
        """POST /bot<token>/sendMessage. 200이 아니면 경고 로그만."""
        endpoint = f"{self._api_url}/bot{self._bot_token}/sendMessage"
        body = {"chat_id": self._chat_id, "text": text, "parse_mode": parse_mode}
        timeout = aiohttp.ClientTimeout(total=SEND_TIMEOUT)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(endpoint, json=body) as resp:
                if resp.status != 200:
                    detail = await resp.text()
                    logger.warning("Telegram sendMessage %d: %s", resp.status, detail[:200])

    # ------------------------------------------------------------------
    # Message bodies
    # ------------------------------------------------------------------

    def _format_share(self, s: ShareSummary) -> str:
        header = "🔔 <b>SELL Signal</b>" if s.is_sell_signal else "📈 <b>Arbitrage Signal</b>"
        sign = "+" if s.net_profit >= 0 else "-"
        lines = [
            header,
            RULE,
            s.title[:80],
            f"Net Profit: <b>{sign}${abs(s.net_profit):.2f}</b> ({s.yield_pct:+.2f}%)",
        ]
        if s.holding_days > 0:
            lines.append(f"APY: {s.apy:.1f}%")
        lines += [
            f"Polymarket: {s.poly_side} @ {s.poly_price:.1f}¢",
            f"Opinion: {s.opinion_side} @ {s.opinion_price:.1f}¢",
            f"Total Cost: ${s.total_cost:.2f}",
            f"Held: {s.holding_label or '—'}",
        ]
        return "\n".join(lines)

    def _format_portfolio(self, summary: PortfolioSummary) -> str:
        if summary.matched_count == 0:
            return "📊 <b>Portfolio</b>\nNo matched positions."
        sign = "+" if summary.total_profit >= 0 else "-"
        return "\n".join([
            "📊 <b>Portfolio</b>",
            RULE,
            f"Matched Pairs: {summary.matched_count}",
            f"Buy-in Cost: ${summary.total_cost:.2f}",
            f"Current Value: ${summary.total_value:.2f}",
            f"Profit: {sign}${abs(summary.total_profit):.2f} ({summary.return_pct:.1f}%)",
        ])
