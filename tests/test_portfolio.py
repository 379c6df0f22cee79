"""Tests for the portfolio summary and single-row P&L helpers."""

from __future__ import annotations

import pytest

from polyarb.economics.portfolio import (
    opinion_row_pnl,
    poly_row_pnl,
    summarize_portfolio,
)
from polyarb.models.match import MatchedPosition
from polyarb.models.position import OpinionPosition, PolyPosition


def _pair(poly, opinion) -> MatchedPosition:
    return MatchedPosition(
        id="m", poly=poly, opinion=opinion, match_score=1.0, matched_title="t",
    )


class TestSummarizePortfolio:
    def test_empty(self):
        summary = summarize_portfolio([])
        assert summary.matched_count == 0
        assert summary.total_cost == 0.0
        assert summary.total_profit == 0.0
        assert summary.return_pct == 0.0

    def test_totals(self, make_poly, make_opinion):
        matches = [
            _pair(
                make_poly(size=100, cur_price=0.6, initial_value=45),
                make_opinion(shares_owned=100, current_value=45, total_cost=50),
            ),
            _pair(
                make_poly(size=100, cur_price=0.5, initial_value=45),
                make_opinion(shares_owned=100, current_value=40, total_cost=50),
            ),
        ]
        summary = summarize_portfolio(matches)
        assert summary.matched_count == 2
        assert summary.total_cost == pytest.approx(190.0)
        assert summary.total_value == pytest.approx(195.0)
        assert summary.total_profit == pytest.approx(5.0)
        assert summary.return_pct == pytest.approx(5.0 / 190.0 * 100)
        # 60 + 45 = 105 → 5, 50 + 40 = 90 → 0
        assert summary.total_spread == pytest.approx(5.0)

    def test_spread_uses_value_derived_price(self, make_poly, make_opinion):
        # latest_price 0.9는 무시, value/shares = 0.45
        match = _pair(
            make_poly(size=100, cur_price=0.6, initial_value=45),
            make_opinion(shares_owned=100, current_value=45, latest_price=0.9),
        )
        assert summarize_portfolio([match]).total_spread == pytest.approx(5.0)

    def test_zero_shares(self, make_poly, make_opinion):
        match = _pair(
            make_poly(size=100, cur_price=0.7, initial_value=45),
            make_opinion(shares_owned=0, current_value=0, total_cost=0),
        )
        assert summarize_portfolio([match]).total_spread == 0.0


class TestRowPnl:
    def test_poly_uses_api_values(self, sample_poly_raw):
        pnl, pct = poly_row_pnl(PolyPosition.from_api_response(sample_poly_raw))
        assert pnl == pytest.approx(26.07)
        assert pct == pytest.approx(3.578)

    def test_poly_computed_when_missing(self, make_poly):
        pnl, pct = poly_row_pnl(make_poly(size=100, cur_price=0.5, initial_value=40))
        assert pnl == pytest.approx(10.0)
        assert pct == pytest.approx(25.0)

    def test_poly_zero_cost(self, make_poly):
        _, pct = poly_row_pnl(make_poly(initial_value=0))
        assert pct == 0.0

    def test_opinion_percent_scaled(self, sample_opinion_raw):
        pnl, pct = opinion_row_pnl(OpinionPosition.from_api_response(sample_opinion_raw))
        assert pnl == pytest.approx(-21.13)
        assert pct == pytest.approx(-60.0)
