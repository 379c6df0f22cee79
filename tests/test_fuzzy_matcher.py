"""Tests for keyword-Jaccard fuzzy matching."""

from __future__ import annotations

import pytest

from polyarb.config import MATCH_THRESHOLD
from polyarb.matching.fuzzy import (
    greedy_assign,
    match_fuzzy,
    opinion_keywords,
    poly_keywords,
    score_pairs,
)
from polyarb.models.match import MatchMethod

SHARED = "alpha bravo charlie delta echo foxtrot golf"
POLY_EXTRA = "hotel india juliet kilo lima mike"
OPINION_EXTRA = "november oscar papa quebec romeo sierra tango"


class TestKeywords:
    def test_poly_uses_title_question_market(self, make_poly):
        pos = make_poly(title="Bitcoin rally", question="December outlook", market="crypto")
        assert poly_keywords(pos) == {"bitcoin", "rally", "december", "outlook", "crypto"}

    def test_opinion_uses_root_and_market(self, make_opinion):
        pos = make_opinion(root_market_title="Super Bowl Winner", market_title="Chiefs")
        assert opinion_keywords(pos) == {"super", "bowl", "winner", "chiefs"}


class TestThreshold:
    def test_score_exactly_at_threshold_included(self, make_poly, make_opinion):
        # 7 / (13 + 14 - 7) = 7/20 = 0.35
        poly = make_poly(title=f"{SHARED} {POLY_EXTRA}")
        opinion = make_opinion(root_market_title=f"{SHARED} {OPINION_EXTRA}")
        result = match_fuzzy([poly], [opinion])
        assert len(result.matched) == 1
        assert result.matched[0].match_score == MATCH_THRESHOLD

    def test_score_just_below_threshold_excluded(self, make_poly, make_opinion):
        # 7/21
        poly = make_poly(title=f"{SHARED} {POLY_EXTRA}")
        opinion = make_opinion(root_market_title=f"{SHARED} {OPINION_EXTRA} uniform")
        result = match_fuzzy([poly], [opinion])
        assert result.matched == []
        assert result.unmatched_poly == [poly]
        assert result.unmatched_opinion == [opinion]

    def test_custom_threshold(self, make_poly, make_opinion):
        poly = make_poly(title="Bitcoin rally December")
        opinion = make_opinion(root_market_title="Bitcoin crash December")
        # 2/4 = 0.5
        assert match_fuzzy([poly], [opinion], threshold=0.5).matched
        assert not match_fuzzy([poly], [opinion], threshold=0.51).matched


class TestScorePairs:
    def test_sorted_descending(self, make_poly, make_opinion):
        poly = [make_poly(title="Bitcoin rally continues"), make_poly(title="Bitcoin rally")]
        opinion = [make_opinion(root_market_title="Bitcoin rally")]
        pairs = score_pairs(poly, opinion)
        assert [(pi, oi) for _, pi, oi in pairs] == [(1, 0), (0, 0)]
        assert pairs[0][0] == 1.0
        assert pairs[1][0] == pytest.approx(2 / 3)

    def test_ties_keep_input_order(self, make_poly, make_opinion):
        poly = [make_poly(asset=f"a{i}", title="Lakers win title") for i in range(3)]
        opinion = [make_opinion(root_market_title="Lakers win title")]
        pairs = score_pairs(poly, opinion)
        assert [pi for _, pi, _ in pairs] == [0, 1, 2]

    def test_empty_keywords_never_pair(self, make_poly, make_opinion):
        assert score_pairs([make_poly(title="to be or")], [make_opinion(root_market_title="")]) == []


class TestGreedyAssign:
    def test_disjoint(self):
        pairs = [(1.0, 0, 0), (0.9, 0, 1), (0.8, 1, 0), (0.5, 1, 1)]
        assert greedy_assign(pairs) == [(1.0, 0, 0), (0.5, 1, 1)]

    def test_greedy_not_optimal(self, make_poly, make_opinion):
        poly = [make_poly(title="Bitcoin rally"), make_poly(title="Bitcoin rally continues")]
        opinion = [
            make_opinion(root_market_title="Bitcoin rally"),
            make_opinion(root_market_title="Bitcoin crash"),
        ]
        result = match_fuzzy(poly, opinion)
        assert [m.id for m in result.matched] == ["match-0-0"]
        assert result.unmatched_poly == [poly[1]]
        assert result.unmatched_opinion == [opinion[1]]

    def test_empty(self):
        assert greedy_assign([]) == []


class TestMatchFuzzy:
    def test_match_fields(self, make_poly, make_opinion):
        poly = make_poly(title="Will Lakers win the NBA title?")
        opinion = make_opinion(root_market_title="Lakers NBA title winner")
        match = match_fuzzy([poly], [opinion]).matched[0]
        assert match.method is MatchMethod.FUZZY
        assert match.id == "match-0-0"
        assert match.matched_title == "Will Lakers win the NBA title?"
        # {lakers, win, nba, title} vs {lakers, nba, title, winner}
        assert match.match_score == pytest.approx(3 / 5)

    def test_matched_title_falls_back_to_opinion_root(self, make_poly, make_opinion):
        poly = make_poly(market="Lakers NBA title")
        opinion = make_opinion(root_market_title="Lakers NBA title winner")
        match = match_fuzzy([poly], [opinion]).matched[0]
        assert match.matched_title == "Lakers NBA title winner"

    def test_original_ids(self, make_poly, make_opinion):
        poly = [make_poly(title="Unrelated thing"), make_poly(title="Lakers NBA title")]
        opinion = [make_opinion(root_market_title="Lakers NBA title")]
        result = match_fuzzy(poly, opinion, poly_ids=[4, 9], opinion_ids=[6])
        assert [m.id for m in result.matched] == ["match-9-6"]

    def test_empty_inputs(self, make_poly, make_opinion):
        opinion = [make_opinion(root_market_title="x")]
        result = match_fuzzy([], opinion)
        assert result.matched == []
        assert result.unmatched_opinion == opinion

        poly = [make_poly(title="x")]
        result = match_fuzzy(poly, [])
        assert result.unmatched_poly == poly

    def test_partition(self, make_poly, make_opinion):
        poly = [
            make_poly(asset="p0", title="Bitcoin above 100k December"),
            make_poly(asset="p1", title="Ethereum all time high"),
            make_poly(asset="p2", title="Super Bowl Chiefs champion"),
            make_poly(asset="p3", title="Completely unique market"),
        ]
        opinion = [
            make_opinion(market_id="o0", root_market_title="Super Bowl champion Chiefs"),
            make_opinion(market_id="o1", root_market_title="Bitcoin above 100k in December"),
            make_opinion(market_id="o2", root_market_title="Gold price record"),
        ]
        result = match_fuzzy(poly, opinion)
        assert result.is_partition_of(poly, opinion)
        assert sorted(m.id for m in result.matched) == ["match-0-1", "match-2-0"]

        used_poly = [m.poly.asset for m in result.matched]
        used_opinion = [m.opinion.market_id for m in result.matched]
        assert len(set(used_poly)) == len(used_poly)
        assert len(set(used_opinion)) == len(used_opinion)

    def test_deterministic(self, make_poly, make_opinion):
        poly = [make_poly(asset=f"a{i}", title="Lakers win title") for i in range(2)]
        opinion = [
            make_opinion(market_id=f"m{i}", root_market_title="Lakers win title")
            for i in range(2)
        ]
        first = [m.id for m in match_fuzzy(poly, opinion).matched]
        second = [m.id for m in match_fuzzy(poly, opinion).matched]
        assert first == second == ["match-0-0", "match-1-1"]

    def test_inputs_not_mutated(self, make_poly, make_opinion):
        poly = [make_poly(title="Lakers win title")]
        opinion = [make_opinion(root_market_title="Lakers win title")]
        match_fuzzy(poly, opinion)
        assert len(poly) == 1 and len(opinion) == 1
