"""Match models — curated MatchGroup, MatchedPosition, MatchResult."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from polyarb.models.position import OpinionPosition, PolyPosition


class MatchMethod(Enum):
    """매칭 방식."""

    EXACT = "exact"   # 큐레이션 테이블 lookup (score 1.0)
    FUZZY = "fuzzy"   # 키워드 Jaccard 유사도


@dataclass(frozen=True)
class MatchGroup:
    """큐레이션 테이블 항목: 같은 이벤트로 확인된 두 거래소 마켓 타이틀.

    group id는 테이블 내 인덱스.
    """

    market_a_title: str        # Polymarket
    market_b_from_title: str   # Opinion


@dataclass(frozen=True)
class MatchedPosition:
    """Polymarket 포지션 + Opinion 포지션 한 쌍."""

    id: str
    poly: PolyPosition
    opinion: OpinionPosition
    match_score: float
    matched_title: str
    method: MatchMethod = MatchMethod.EXACT

    @property
    def price_spread(self) -> float:
        """현재가 차이 (cents)."""
        return abs(self.poly.cur_price * 100 - self.opinion.current_price * 100)


@dataclass
class MatchResult:
    """입력 포지션 전체의 분할: matched 쌍 + 양쪽 unmatched."""

    matched: list[MatchedPosition] = field(default_factory=list)
    unmatched_poly: list[PolyPosition] = field(default_factory=list)
    unmatched_opinion: list[OpinionPosition] = field(default_factory=list)

    @property
    def total_positions(self) -> int:
        """matched×2 + unmatched 양쪽."""
        return (
            len(self.matched) * 2
            + len(self.unmatched_poly)
            + len(self.unmatched_opinion)
        )

    @property
    def is_empty(self) -> bool:
        return self.total_positions == 0

    def is_partition_of(
        self,
        poly_positions: list[PolyPosition],
        opinion_positions: list[OpinionPosition],
    ) -> bool:
        """모든 입력 포지션이 정확히 한 번씩 결과에 들어갔는지 확인 (객체 identity 기준).

        거래소별로 matched + unmatched 쪽 id() 멀티셋이 입력과 같아야 함.
        """
        poly_seen = Counter(id(m.poly) for m in self.matched)
        poly_seen.update(id(p) for p in self.unmatched_poly)
        opinion_seen = Counter(id(m.opinion) for m in self.matched)
        opinion_seen.update(id(o) for o in self.unmatched_opinion)
        return (
            poly_seen == Counter(id(p) for p in poly_positions)
            and opinion_seen == Counter(id(o) for o in opinion_positions)
        )
