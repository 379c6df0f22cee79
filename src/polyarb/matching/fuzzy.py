"""Fuzzy matcher — keyword Jaccard similarity + greedy disjoint assignment.

큐레이션 테이블에 없는 포지션용 폴백. 모든 교차 쌍의 유사도를 구해서
임계값 이상만 남기고, 점수 내림차순으로 훑으며 양쪽 다 미사용인 쌍만 채택.
전역 최적(최대 가중 이분 매칭)이 아니라 greedy 근사.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from polyarb.config import MATCH_THRESHOLD
from polyarb.matching.text import extract_keywords, jaccard_similarity
from polyarb.models.match import MatchedPosition, MatchMethod, MatchResult
from polyarb.models.position import OpinionPosition, PolyPosition

logger = logging.getLogger(__name__)


def poly_keywords(pos: PolyPosition) -> set[str]:
    """title + question + market 키워드."""
    return extract_keywords(f"{pos.title} {pos.question} {pos.market}")


def opinion_keywords(pos: OpinionPosition) -> set[str]:
    """rootMarketTitle + marketTitle 키워드."""
    return extract_keywords(f"{pos.root_market_title} {pos.market_title}")


def score_pairs(
    poly_positions: Sequence[PolyPosition],
    opinion_positions: Sequence[OpinionPosition],
    threshold: float = MATCH_THRESHOLD,
) -> list[tuple[float, int, int]]:
    """(score, poly_idx, opinion_idx) 후보 목록, score 내림차순.

    score >= threshold 인 쌍만 포함. 동점 순서는 입력 순서 (stable sort).
    """
    poly_kw = [poly_keywords(p) for p in poly_positions]
    opinion_kw = [opinion_keywords(o) for o in opinion_positions]

    pairs: list[tuple[float, int, int]] = []
    for pi, pk in enumerate(poly_kw):
        for oi, ok in enumerate(opinion_kw):
            score = jaccard_similarity(pk, ok)
            if score >= threshold:
                pairs.append((score, pi, oi))

    pairs.sort(key=lambda p: p[0], reverse=True)
    return pairs


def greedy_assign(pairs: list[tuple[float, int, int]]) -> list[tuple[float, int, int]]:
    """점수 순으로 훑으며 양쪽 미사용 쌍만 채택."""
    used_poly: set[int] = set()
    used_opinion: set[int] = set()
    accepted: list[tuple[float, int, int]] = []
    for score, pi, oi in pairs:
        if pi in used_poly or oi in used_opinion:
            continue
        used_poly.add(pi)
        used_opinion.add(oi)
        accepted.append((score, pi, oi))
    return accepted


def match_fuzzy(
    poly_positions: list[PolyPosition],
    opinion_positions: list[OpinionPosition],
    threshold: float = MATCH_THRESHOLD,
    poly_ids: Optional[Sequence[int]] = None,
    opinion_ids: Optional[Sequence[int]] = None,
) -> MatchResult:
    """Fuzzy-match two position lists.

    Args:
        poly_positions: Polymarket 포지션.
        opinion_positions: Opinion 포지션.
        threshold: Jaccard 하한 (이상이면 포함).
        poly_ids: 매칭 id에 쓸 원래 인덱스. None이면 리스트 인덱스.
        opinion_ids: 위와 동일 (Opinion 쪽).

    Returns:
        MatchResult. 빈 리스트 입력에도 예외 없이 나머지를 unmatched로.
    """
    poly_ids = list(poly_ids) if poly_ids is not None else list(range(len(poly_positions)))
    opinion_ids = (
        list(opinion_ids) if opinion_ids is not None else list(range(len(opinion_positions)))
    )

    accepted = greedy_assign(score_pairs(poly_positions, opinion_positions, threshold))

    matched: list[MatchedPosition] = []
    for score, pi, oi in accepted:
        poly = poly_positions[pi]
        opinion = opinion_positions[oi]
        matched.append(MatchedPosition(
            id=f"match-{poly_ids[pi]}-{opinion_ids[oi]}",
            poly=poly,
            opinion=opinion,
            match_score=score,
            matched_title=poly.title or poly.question or opinion.root_market_title,
            method=MatchMethod.FUZZY,
        ))
        logger.debug("Fuzzy match %.3f: %r ↔ %r", score, poly.title, opinion.root_market_title)

    used_poly = {pi for _, pi, _ in accepted}
    used_opinion = {oi for _, _, oi in accepted}
    return MatchResult(
        matched=matched,
        unmatched_poly=[p for i, p in enumerate(poly_positions) if i not in used_poly],
        unmatched_opinion=[o for i, o in enumerate(opinion_positions) if i not in used_opinion],
    )
