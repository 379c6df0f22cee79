"""Combined match flow — curated lookup first, fuzzy fallback on the rest."""

from __future__ import annotations

import logging

from polyarb.config import MATCH_THRESHOLD
from polyarb.matching.exact import build_exact_match, exact_pairs
from polyarb.matching.fuzzy import match_fuzzy
from polyarb.matching.lookup import LookupIndex
from polyarb.models.match import MatchResult
from polyarb.models.position import OpinionPosition, PolyPosition

logger = logging.getLogger(__name__)


def match_positions(
    poly_positions: list[PolyPosition],
    opinion_positions: list[OpinionPosition],
    index: LookupIndex,
    use_fuzzy: bool = True,
    threshold: float = MATCH_THRESHOLD,
) -> MatchResult:
    """Match positions across venues.

    1. 큐레이션 테이블 exact 매칭 (score 1.0)
    2. use_fuzzy면 남은 포지션끼리 Jaccard 매칭

    한쪽이 비었으면 매칭 없이 전부 unmatched. 입력은 변경하지 않음.
    """
    if not poly_positions or not opinion_positions:
        return MatchResult(
            matched=[],
            unmatched_poly=list(poly_positions),
            unmatched_opinion=list(opinion_positions),
        )

    pairs = exact_pairs(poly_positions, opinion_positions, index)
    result = MatchResult(matched=[
        build_exact_match(
            poly_positions[pi], opinion_positions[oi], pi, oi, group_id, index,
        )
        for group_id, pi, oi in pairs
    ])

    used_poly = {pi for _, pi, _ in pairs}
    used_opinion = {oi for _, _, oi in pairs}
    rest_poly_ids = [i for i in range(len(poly_positions)) if i not in used_poly]
    rest_opinion_ids = [i for i in range(len(opinion_positions)) if i not in used_opinion]
    rest_poly = [poly_positions[i] for i in rest_poly_ids]
    rest_opinion = [opinion_positions[i] for i in rest_opinion_ids]

    if use_fuzzy and rest_poly and rest_opinion:
        fuzzy = match_fuzzy(
            rest_poly,
            rest_opinion,
            threshold=threshold,
            poly_ids=rest_poly_ids,
            opinion_ids=rest_opinion_ids,
        )
        result.matched.extend(fuzzy.matched)
        result.unmatched_poly = fuzzy.unmatched_poly
        result.unmatched_opinion = fuzzy.unmatched_opinion
    else:
        result.unmatched_poly = rest_poly
        result.unmatched_opinion = rest_opinion

    logger.info(
        "Matched %d pairs (%d exact, %d fuzzy), %d unmatched poly, %d unmatched opinion",
        len(result.matched),
        len(pairs),
        len(result.matched) - len(pairs),
        len(result.unmatched_poly),
        len(result.unmatched_opinion),
    )
    return result
