"""Tests for position models and defensive numeric parsing."""

from __future__ import annotations

import pytest

from polyarb.models.match import MatchedPosition, MatchMethod, MatchResult
from polyarb.models.position import OpinionPosition, PolyPosition, parse_float

# ---------------------------------------------------------------------------
# parse_float
# ---------------------------------------------------------------------------


class TestParseFloat:
    @pytest.mark.parametrize("value,expected", [
        ("30.75", 30.75),
        ("0", 0.0),
        (12, 12.0),
        (0.993, 0.993),
        ("-21.13", -21.13),
        (" 1.5 ", 1.5),
    ])
    def test_valid(self, value, expected):
        assert parse_float(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, "", "abc", "12abc", [], {}, "nan", "inf"])
    def test_invalid_is_zero(self, value):
        assert parse_float(value) == 0.0


# ---------------------------------------------------------------------------
# PolyPosition
# ---------------------------------------------------------------------------


class TestPolyPosition:
    def test_from_api_response(self, sample_poly_raw):
        pos = PolyPosition.from_api_response(sample_poly_raw)
        assert pos.asset == "1234567890"
        assert pos.condition_id == "0xcond"
        assert pos.title == "Bitcoin above $100,000 on December 31?"
        assert pos.outcome == "Yes"
        assert pos.size == 760.0
        assert pos.initial_value == pytest.approx(728.61)
        assert pos.cur_price == pytest.approx(0.993)
        assert pos.cash_pnl == pytest.approx(26.07)
        assert pos.entry_timestamp is None

    def test_missing_fields_default(self):
        pos = PolyPosition.from_api_response({})
        assert pos.title == ""
        assert pos.size == 0.0
        assert pos.current_value is None
        assert pos.cash_pnl is None

    def test_entry_timestamp_parsed(self, sample_poly_raw):
        sample_poly_raw["entryTimestamp"] = 1735689600
        pos = PolyPosition.from_api_response(sample_poly_raw)
        assert pos.entry_timestamp == 1735689600

    def test_with_entry_timestamp_is_copy(self, make_poly):
        pos = make_poly()
        stamped = pos.with_entry_timestamp(1700000000)
        assert stamped.entry_timestamp == 1700000000
        assert pos.entry_timestamp is None

    def test_avg_price(self, make_poly):
        assert make_poly(size=200, initial_value=90).avg_price == pytest.approx(0.45)
        assert make_poly(size=0, initial_value=90).avg_price == 0.0

    def test_frozen(self, make_poly):
        pos = make_poly()
        with pytest.raises(Exception):
            pos.size = 1.0


# ---------------------------------------------------------------------------
# OpinionPosition
# ---------------------------------------------------------------------------


class TestOpinionPosition:
    def test_from_api_response_parses_strings(self, sample_opinion_raw):
        pos = OpinionPosition.from_api_response(sample_opinion_raw)
        assert pos.market_id == "4821"
        assert pos.shares_owned == pytest.approx(880.5)
        assert pos.avg_entry_price == pytest.approx(0.04)
        assert pos.current_value == pytest.approx(14.09)
        assert pos.total_cost == pytest.approx(35.22)
        assert pos.unrealized_pnl == pytest.approx(-21.13)
        assert pos.outcome_side == "No"

    def test_fee_rate_falls_back_to_trade_fee_rate(self, sample_opinion_raw):
        pos = OpinionPosition.from_api_response(sample_opinion_raw)
        assert pos.fee_rate == pytest.approx(0.02)

    def test_fee_rate_preferred(self, sample_opinion_raw):
        sample_opinion_raw["feeRate"] = "0.01"
        pos = OpinionPosition.from_api_response(sample_opinion_raw)
        assert pos.fee_rate == pytest.approx(0.01)

    def test_explicit_zero_fee_rate_not_replaced(self):
        pos = OpinionPosition.from_api_response({
            "feeRate": "0",
            "tradeFeeRate": "0.02",
            "currentValueInQuoteToken": "100",
        })
        assert pos.fee_rate == 0.0

    def test_missing_fee_rate_uses_trade_fee_rate(self):
        pos = OpinionPosition.from_api_response({"tradeFeeRate": "0.03"})
        assert pos.fee_rate == pytest.approx(0.03)

    def test_garbage_numbers_are_zero(self):
        pos = OpinionPosition.from_api_response({
            "sharesOwned": "n/a",
            "avgEntryPrice": None,
            "unrealizedPnl": "",
        })
        assert pos.shares_owned == 0.0
        assert pos.avg_entry_price == 0.0
        assert pos.unrealized_pnl == 0.0
        assert pos.fee_rate == 0.0

    def test_current_price_prefers_latest(self, make_opinion):
        pos = make_opinion(latest_price=0.61, current_value=50.0, shares_owned=100.0)
        assert pos.current_price == pytest.approx(0.61)

    def test_current_price_from_value(self, make_opinion):
        pos = make_opinion(latest_price=0.0, current_value=42.0, shares_owned=100.0)
        assert pos.current_price == pytest.approx(0.42)

    def test_current_price_zero_without_shares(self, make_opinion):
        pos = make_opinion(latest_price=0.0, current_value=42.0, shares_owned=0.0)
        assert pos.current_price == 0.0

    def test_cost_basis_fallback(self, make_opinion):
        pos = make_opinion(total_cost=0.0, shares_owned=200.0, avg_entry_price=0.3)
        assert pos.cost_basis == pytest.approx(60.0)

    def test_with_latest_price_parses(self, make_opinion):
        pos = make_opinion().with_latest_price("0.836")
        assert pos.latest_price == pytest.approx(0.836)


# ---------------------------------------------------------------------------
# MatchResult / MatchedPosition
# ---------------------------------------------------------------------------


class TestMatchResult:
    def test_empty(self):
        result = MatchResult()
        assert result.is_empty
        assert result.total_positions == 0

    def test_partition_count(self, make_poly, make_opinion):
        poly = [make_poly(), make_poly(asset="a2")]
        opinion = [make_opinion()]
        match = MatchedPosition(
            id="match-0-0", poly=poly[0], opinion=opinion[0],
            match_score=1.0, matched_title="t",
        )
        result = MatchResult(matched=[match], unmatched_poly=[poly[1]])
        assert result.total_positions == 3
        assert result.is_partition_of(poly, opinion)

    def test_duplicate_position_is_not_partition(self, make_poly, make_opinion):
        a, b = make_poly(asset="a"), make_poly(asset="b")
        o = make_opinion()
        result = MatchResult(unmatched_poly=[a, a], unmatched_opinion=[o])
        assert result.total_positions == 3
        assert result.is_partition_of([a, b], [o]) is False

    def test_position_in_both_buckets_is_not_partition(self, make_poly, make_opinion):
        a, b = make_poly(asset="a"), make_poly(asset="b")
        o1, o2 = make_opinion(market_id="1"), make_opinion(market_id="2")
        match = MatchedPosition(
            id="match-0-0", poly=a, opinion=o1, match_score=1.0, matched_title="t",
        )
        result = MatchResult(matched=[match], unmatched_poly=[a], unmatched_opinion=[o2])
        assert result.is_partition_of([a, b], [o1, o2]) is False

    def test_equal_but_distinct_objects_counted_separately(self, make_poly, make_opinion):
        a1, a2 = make_poly(), make_poly()
        assert a1 == a2
        result = MatchResult(unmatched_poly=[a1, a2])
        assert result.is_partition_of([a1, a2], [])
        assert not MatchResult(unmatched_poly=[a1, a1]).is_partition_of([a1, a2], [])

    def test_price_spread(self, make_poly, make_opinion):
        match = MatchedPosition(
            id="m", poly=make_poly(cur_price=0.60),
            opinion=make_opinion(latest_price=0.38),
            match_score=0.5, matched_title="t", method=MatchMethod.FUZZY,
        )
        assert match.price_spread == pytest.approx(22.0)
