"""Curated lookup index — normalized title → match group id, per venue.

큐레이션 테이블(MatchGroup 목록)에서 거래소별 정규화 타이틀 → 그룹 인덱스 맵을 만든다.
타이틀 끝의 `` - <suffix>`` 를 하나씩 잘라낸 base 타이틀도 등록해서
포지션이 상위(부모) 마켓 타이틀만 갖고 있어도 찾을 수 있게 한다.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from polyarb.config import SUFFIX_SEPARATOR
from polyarb.matching.text import normalize
from polyarb.models.match import MatchGroup

logger = logging.getLogger(__name__)

DEFAULT_TABLE_RESOURCE = "market_matches.json"


def truncated_titles(title: str) -> list[str]:
    """``"A - B - C"`` → ``["A - B", "A"]``. 구분자가 맨 앞이면 중단."""
    parts: list[str] = []
    remain = title
    while True:
        idx = remain.rfind(SUFFIX_SEPARATOR)
        if idx <= 0:
            break
        remain = remain[:idx]
        parts.append(remain)
    return parts


def _register(
    mapping: dict[str, int], title: str, group_id: int,
) -> None:
    # 전체 타이틀은 항상 등록 (같은 타이틀이면 뒤 그룹이 덮어씀)
    mapping[normalize(title)] = group_id
    # 잘라낸 base 타이틀은 비어 있을 때만 등록 (먼저 등록된 매핑 우선)
    for base in truncated_titles(title):
        mapping.setdefault(normalize(base), group_id)


@dataclass(frozen=True)
class LookupIndex:
    """Immutable per-venue title → group id maps built from a curated table."""

    groups: tuple[MatchGroup, ...]
    poly_to_group: Mapping[str, int]
    opinion_to_group: Mapping[str, int]

    @classmethod
    def build(cls, groups: Iterable[MatchGroup]) -> LookupIndex:
        """테이블 순서대로 인덱스 생성. 인덱스 = group id."""
        groups = tuple(groups)
        poly_map: dict[str, int] = {}
        opinion_map: dict[str, int] = {}

        for group_id, group in enumerate(groups):
            _register(poly_map, group.market_a_title, group_id)
            _register(opinion_map, group.market_b_from_title, group_id)

        logger.debug(
            "Lookup index built: %d groups, %d poly keys, %d opinion keys",
            len(groups), len(poly_map), len(opinion_map),
        )
        return cls(
            groups=groups,
            poly_to_group=MappingProxyType(poly_map),
            opinion_to_group=MappingProxyType(opinion_map),
        )

    @classmethod
    def empty(cls) -> LookupIndex:
        return cls.build(())

    def __len__(self) -> int:
        return len(self.groups)

    def lookup_poly(self, title: str) -> Optional[int]:
        """정규화한 Polymarket 타이틀로 group id 조회."""
        return self.poly_to_group.get(normalize(title))

    def lookup_opinion(self, title: str) -> Optional[int]:
        """정규화한 Opinion 타이틀로 group id 조회."""
        return self.opinion_to_group.get(normalize(title))

    def group(self, group_id: int) -> MatchGroup:
        return self.groups[group_id]


# ---------------------------------------------------------------------------
# Table loading
# ---------------------------------------------------------------------------


def parse_match_table(raw: list) -> list[MatchGroup]:
    """JSON list → MatchGroup 목록. 타이틀이 빠진 항목은 경고 후 스킵."""
    groups: list[MatchGroup] = []
    if not isinstance(raw, list):
        logger.warning("Match table is not a list (%s), ignoring", type(raw).__name__)
        return groups

    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            logger.warning("Match table entry %d is not an object, skipped", i)
            continue
        title_a = entry.get("market_a_title")
        title_b = entry.get("market_b_from_title")
        if not title_a or not title_b:
            logger.warning("Match table entry %d missing a title, skipped", i)
            continue
        groups.append(MatchGroup(market_a_title=str(title_a), market_b_from_title=str(title_b)))
    return groups


def load_match_table(path: str | Path | None = None) -> list[MatchGroup]:
    """큐레이션 테이블 로드. path가 None이면 패키지 기본 테이블.

    Raises:
        FileNotFoundError: 지정한 path가 없음.
        json.JSONDecodeError: JSON 형식 오류.
    """
    if path is None:
        text = (
            resources.files("polyarb.data")
            .joinpath(DEFAULT_TABLE_RESOURCE)
            .read_text(encoding="utf-8")
        )
        source = f"polyarb.data/{DEFAULT_TABLE_RESOURCE}"
    else:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)

    groups = parse_match_table(json.loads(text))
    logger.info("Loaded %d match groups from %s", len(groups), source)
    return groups


def load_lookup_index(path: str | Path | None = None) -> LookupIndex:
    """load_match_table + LookupIndex.build."""
    return LookupIndex.build(load_match_table(path))
