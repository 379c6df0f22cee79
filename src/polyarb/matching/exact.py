"""Exact matcher — curated lookup table, group-then-pair.

후보 타이틀 순서가 곧 매칭 우선순위. outcome 접미사 후보가 뒤에 있으므로
접미사 없는 타이틀이 base 항목과 겹치면 그쪽이 먼저 잡힌다 (현행 동작 유지).
"""

from __future__ import annotations

import logging
from typing import Optional

from polyarb.config import SUFFIX_SEPARATOR
from polyarb.matching.lookup import LookupIndex
from polyarb.models.match import MatchedPosition, MatchMethod, MatchResult
from polyarb.models.position import OpinionPosition, PolyPosition

logger = logging.getLogger(__name__)

EXACT_MATCH_SCORE = 1.0


def poly_candidates(pos: PolyPosition) -> list[str]:
    """Polymarket 포지션의 조회 후보 (우선순위 순)."""
    candidates = [
        pos.title,
        pos.question,
        pos.market,
        f"{pos.title}{SUFFIX_SEPARATOR}{pos.outcome}" if pos.title and pos.outcome else "",
        f"{pos.question}{SUFFIX_SEPARATOR}{pos.outcome}" if pos.question and pos.outcome else "",
        f"{pos.market}{SUFFIX_SEPARATOR}{pos.outcome}" if pos.market and pos.outcome else "",
    ]
    return [c for c in candidates if c]


def opinion_candidates(pos: OpinionPosition) -> list[str]:
    """Opinion 포지션의 조회 후보 (우선순위 순)."""
    root, title = pos.root_market_title, pos.market_title
    candidates = [
        f"{root}{SUFFIX_SEPARATOR}{title}" if root and title else "",
        root,
        title,
    ]
    return [c for c in candidates if c]


def find_poly_group(pos: PolyPosition, index: LookupIndex) -> Optional[int]:
    """첫 번째로 걸리는 후보의 group id. 없으면 None."""
    for candidate in poly_candidates(pos):
        group_id = index.lookup_poly(candidate)
        if group_id is not None:
            return group_id
    return None


def find_opinion_group(pos: OpinionPosition, index: LookupIndex) -> Optional[int]:
    """첫 번째로 걸리는 후보의 group id. 없으면 None."""
    for candidate in opinion_candidates(pos):
        group_id = index.lookup_opinion(candidate)
        if group_id is not None:
            return group_id
    return None


def exact_pairs(
    poly_positions: list[PolyPosition],
    opinion_positions: list[OpinionPosition],
    index: LookupIndex,
) -> list[tuple[int, int, int]]:
    """Group both venues by curated group id, then pair 1:1 within a group.

    그룹 안에서는 first-fit: 각 Polymarket 포지션이 아직 안 쓰인 첫 Opinion
    포지션과 짝지어진다. 유사도 최적 배정은 아님.

    Returns:
        (group_id, poly_idx, opinion_idx) 목록.
    """
    poly_by_group: dict[int, list[int]] = {}
    for pi, pos in enumerate(poly_positions):
        group_id = find_poly_group(pos, index)
        if group_id is not None:
            poly_by_group.setdefault(group_id, []).append(pi)

    opinion_by_group: dict[int, list[int]] = {}
    for oi, pos in enumerate(opinion_positions):
        group_id = find_opinion_group(pos, index)
        if group_id is not None:
            opinion_by_group.setdefault(group_id, []).append(oi)

    pairs: list[tuple[int, int, int]] = []
    used_opinion: set[int] = set()

    for group_id, poly_idxs in poly_by_group.items():
        opinion_idxs = opinion_by_group.get(group_id)
        if not opinion_idxs:
            continue
        for pi in poly_idxs:
            oi = next((o for o in opinion_idxs if o not in used_opinion), None)
            if oi is None:
                break
            used_opinion.add(oi)
            pairs.append((group_id, pi, oi))
            logger.debug("Exact match group %d: poly[%d] ↔ opinion[%d]", group_id, pi, oi)

    return pairs


def build_exact_match(
    poly: PolyPosition,
    opinion: OpinionPosition,
    poly_idx: int,
    opinion_idx: int,
    group_id: int,
    index: LookupIndex,
) -> MatchedPosition:
    """큐레이션 매칭 결과 (score 1.0)."""
    return MatchedPosition(
        id=f"match-{poly_idx}-{opinion_idx}",
        poly=poly,
        opinion=opinion,
        match_score=EXACT_MATCH_SCORE,
        matched_title=poly.title or poly.question or index.group(group_id).market_a_title,
        method=MatchMethod.EXACT,
    )


def match_exact(
    poly_positions: list[PolyPosition],
    opinion_positions: list[OpinionPosition],
    index: LookupIndex,
) -> MatchResult:
    """Curated-table matching only. 테이블에 없는 포지션은 unmatched."""
    pairs = exact_pairs(poly_positions, opinion_positions, index)
    used_poly = {pi for _, pi, _ in pairs}
    used_opinion = {oi for _, _, oi in pairs}

    return MatchResult(
        matched=[
            build_exact_match(
                poly_positions[pi], opinion_positions[oi], pi, oi, group_id, index,
            )
            for group_id, pi, oi in pairs
        ],
        unmatched_poly=[p for i, p in enumerate(poly_positions) if i not in used_poly],
        unmatched_opinion=[o for i, o in enumerate(opinion_positions) if i not in used_opinion],
    )
