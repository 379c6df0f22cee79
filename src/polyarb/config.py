"""Scanner configuration — matching constants, API endpoints, env-based config."""

from __future__ import annotations

import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# 매칭 상수
# ---------------------------------------------------------------------------

MATCH_THRESHOLD: float = 0.35  # Jaccard 하한 (튜닝값)
MIN_KEYWORD_LENGTH: int = 3
SUFFIX_SEPARATOR: str = " - "

STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "is", "it", "its", "are", "was", "were", "be",
    "been", "will", "would", "could", "should", "has", "have", "had",
    "this", "that", "these", "those", "from", "than", "before", "after",
})

# ---------------------------------------------------------------------------
# 아비트라지 경제성 상수
# ---------------------------------------------------------------------------

SELL_SIGNAL_THRESHOLD_CENTS: float = 98.9  # YES+NO 현재가 합 > 98.9¢ → SELL
MS_PER_DAY: int = 86_400_000

# ---------------------------------------------------------------------------
# API endpoints
# ---------------------------------------------------------------------------

POLYMARKET_DATA_API_URL = "https://data-api.polymarket.com"
OPINION_API_URL = "https://openapi.opinion.trade/openapi"
DEFAULT_TIMEOUT = 15  # seconds
DEFAULT_MAX_RETRIES = 3
ACTIVITY_LIMIT = 500

MIN_SCAN_INTERVAL = 10  # seconds


# ---------------------------------------------------------------------------
# ScannerConfig — 환경변수 기반 설정
# ---------------------------------------------------------------------------


@dataclass
class ScannerConfig:
    """스캐너 전체 설정. 환경변수 또는 기본값."""

    poly_wallet: str = ""
    opinion_wallet: str = ""
    opinion_api_key: str | None = None
    match_table_path: str | None = None  # None → 패키지 기본 테이블
    use_fuzzy: bool = True
    scan_interval: int = 60  # seconds
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None

    def __post_init__(self):
        # 최소 스캔 간격 강제 (10초)
        if self.scan_interval < MIN_SCAN_INTERVAL:
            self.scan_interval = MIN_SCAN_INTERVAL

    @classmethod
    def from_env(cls) -> ScannerConfig:
        """환경변수에서 설정 로드. 없으면 안전한 기본값."""
        fuzzy_str = os.environ.get("POLYARB_FUZZY", "true").lower()
        use_fuzzy = fuzzy_str not in ("false", "0", "no")

        scan_interval = int(os.environ.get("POLYARB_SCAN_INTERVAL", "60"))

        return cls(
            poly_wallet=os.environ.get("POLYARB_POLY_WALLET", ""),
            opinion_wallet=os.environ.get("POLYARB_OPINION_WALLET", ""),
            opinion_api_key=os.environ.get("OPINION_API_KEY") or None,
            match_table_path=os.environ.get("POLYARB_MATCH_TABLE") or None,
            use_fuzzy=use_fuzzy,
            scan_interval=scan_interval,
            telegram_bot_token=os.environ.get("TELEGRAM_BOT_TOKEN") or None,
            telegram_chat_id=os.environ.get("TELEGRAM_CHAT_ID") or None,
        )

    @property
    def has_wallet(self) -> bool:
        """지갑 주소가 하나라도 설정됐는지."""
        return bool(self.poly_wallet or self.opinion_wallet)
