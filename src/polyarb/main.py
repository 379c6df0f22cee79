"""CLI — scan wallets on both venues, match positions, print the dashboard.

Usage:
    python -m polyarb --poly-wallet 0xabc --opinion-wallet 0xdef
    python -m polyarb --watch --interval 120 --alert
    python -m polyarb --matches ./market_matches.json --no-fuzzy
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal

from polyarb.config import MIN_SCAN_INTERVAL, ScannerConfig
from polyarb.matching.lookup import LookupIndex, load_lookup_index
from polyarb.monitoring.dashboard import DashboardRenderer
from polyarb.monitoring.telegram import TelegramAlerter
from polyarb.scanner import ScanResult, run_scan

logger = logging.getLogger(__name__)

NO_POSITIONS = "No open positions on either venue."


# ---------------------------------------------------------------------------
# Core functions
# ---------------------------------------------------------------------------


def render_result(result: ScanResult, renderer: DashboardRenderer) -> str:
    """ScanResult → 대시보드 문자열."""
    mr = result.match_result
    output = renderer.render_scan(
        economics=result.economics(),
        summary=result.portfolio(),
        poly_unmatched=mr.unmatched_poly,
        opinion_unmatched=mr.unmatched_opinion,
        errors=result.errors,
    )
    if mr.is_empty:
        output += f"\n{NO_POSITIONS}"
    return output


async def run_cycle(
    config: ScannerConfig,
    index: LookupIndex,
    renderer: DashboardRenderer,
    alerter: TelegramAlerter | None = None,
) -> ScanResult:
    """단일 사이클: scan → render → (옵션) 청산 신호 알림 + 포트폴리오 요약."""
    result = await run_scan(config, index)
    print(render_result(result, renderer))

    if alerter is not None and alerter.enabled:
        summaries = [e.to_share_summary() for e in result.sell_signals()]
        sent = await alerter.alert_sell_signals(summaries)
        if sent:
            logger.info("Sent %d sell-signal alerts", sent)
        if result.match_result.matched:
            await alerter.send_portfolio_report(result.portfolio())
    return result


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """커맨드라인 인자 파싱."""
    parser = argparse.ArgumentParser(
        prog="polyarb",
        description="Cross-venue (Polymarket ↔ Opinion) arbitrage position tracker",
    )
    parser.add_argument(
        "--poly-wallet", type=str, default=None,
        help="Polymarket wallet address (env: POLYARB_POLY_WALLET)",
    )
    parser.add_argument(
        "--opinion-wallet", type=str, default=None,
        help="Opinion wallet address (env: POLYARB_OPINION_WALLET)",
    )
    parser.add_argument(
        "--matches", type=str, default=None,
        help="Curated match table JSON (default: packaged table)",
    )
    parser.add_argument(
        "--no-fuzzy", action="store_true", default=False,
        help="Disable keyword-similarity fallback matching",
    )
    parser.add_argument(
        "--watch", action="store_true", default=False,
        help="Keep scanning every --interval seconds",
    )
    parser.add_argument(
        "--interval", type=int, default=None,
        help=f"Scan interval in seconds for --watch (min: {MIN_SCAN_INTERVAL})",
    )
    parser.add_argument(
        "--alert", action="store_true", default=False,
        help="Send Telegram alerts for sell signals",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ScannerConfig:
    """환경변수 설정 위에 CLI 인자 덮어쓰기."""
    config = ScannerConfig.from_env()
    if args.poly_wallet is not None:
        config.poly_wallet = args.poly_wallet
    if args.opinion_wallet is not None:
        config.opinion_wallet = args.opinion_wallet
    if args.matches is not None:
        config.match_table_path = args.matches
    if args.no_fuzzy:
        config.use_fuzzy = False
    if args.interval is not None:
        config.scan_interval = max(args.interval, MIN_SCAN_INTERVAL)
    return config


# ---------------------------------------------------------------------------
# Main loop
# ---------------------------------------------------------------------------


async def watch_loop(
    config: ScannerConfig,
    index: LookupIndex,
    alerter: TelegramAlerter | None = None,
) -> None:
    """주기적 스캔 루프. SIGINT/SIGTERM으로 종료."""
    renderer = DashboardRenderer()
    stop_event = asyncio.Event()

    def _handle_signal():
        print("\n⚡ Shutting down gracefully...")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _handle_signal)
        except NotImplementedError:
            pass  # Windows

    cycle = 0
    while not stop_event.is_set():
        cycle += 1
        logger.info("=== Cycle %d ===", cycle)
        try:
            await run_cycle(config, index, renderer, alerter)
        except Exception:
            logger.exception("Error in cycle %d", cycle)
            if alerter is not None:
                await alerter.alert_error(f"Cycle {cycle} error — check logs")

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=config.scan_interval)
        except asyncio.TimeoutError:
            pass  # 다음 스캔

    print("Goodbye! 🤙")


def cli_main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    args = parse_args(argv)
    config = build_config(args)
    index = load_lookup_index(config.match_table_path)

    renderer = DashboardRenderer()
    print(renderer.render_startup(config, groups=len(index)))

    alerter = None
    if args.alert:
        alerter = TelegramAlerter(
            bot_token=config.telegram_bot_token,
            chat_id=config.telegram_chat_id,
        )
        print(f"Telegram alerts: {'ON' if alerter.enabled else 'OFF'}")

    if args.watch:
        asyncio.run(watch_loop(config, index, alerter))
        return

    asyncio.run(run_cycle(config, index, renderer, alerter))


if __name__ == "__main__":
    cli_main()
