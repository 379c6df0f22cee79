"""Shared test fixtures for polyarb."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from polyarb.matching.lookup import LookupIndex
from polyarb.models.match import MatchGroup
from polyarb.models.position import OpinionPosition, PolyPosition

FIXED_NOW = datetime(2025, 6, 30, 12, 0, 0, tzinfo=timezone.utc)


def build_poly(**overrides) -> PolyPosition:
    fields = dict(
        asset="asset_1",
        condition_id="cond_1",
        title="",
        question="",
        market="",
        outcome="Yes",
        outcome_index=0,
        cur_price=0.5,
        size=100.0,
        initial_value=45.0,
    )
    fields.update(overrides)
    return PolyPosition(**fields)


def build_opinion(**overrides) -> OpinionPosition:
    fields = dict(
        market_id="mkt_1",
        token_id="tok_1",
        root_market_title="",
        market_title="",
        outcome_side="No",
        market_status="Activated",
        shares_owned=100.0,
        avg_entry_price=0.5,
        current_value=50.0,
        total_cost=50.0,
    )
    fields.update(overrides)
    return OpinionPosition(**fields)


@pytest.fixture
def now() -> datetime:
    """Fixed wall clock for holding-day math."""
    return FIXED_NOW


@pytest.fixture
def make_poly():
    return build_poly


@pytest.fixture
def make_opinion():
    return build_opinion


@pytest.fixture
def fed_groups() -> list[MatchGroup]:
    """Small curated table: two Fed outcomes + one BTC market."""
    return [
        MatchGroup(
            market_a_title="Fed decision in December? - 25 bps decrease",
            market_b_from_title="Fed Rate Decision December - 25bps cut",
        ),
        MatchGroup(
            market_a_title="Fed decision in December? - No change",
            market_b_from_title="Fed Rate Decision December - No change",
        ),
        MatchGroup(
            market_a_title="Bitcoin above $100,000 on December 31?",
            market_b_from_title="BTC above 100K on Dec 31?",
        ),
    ]


@pytest.fixture
def fed_index(fed_groups) -> LookupIndex:
    return LookupIndex.build(fed_groups)


@pytest.fixture
def sample_poly_raw() -> dict:
    """Raw position dict as returned by data-api /positions."""
    return {
        "proxyWallet": "0xabc",
        "asset": "1234567890",
        "conditionId": "0xcond",
        "size": 760,
        "avgPrice": 0.9587,
        "initialValue": 728.61,
        "currentValue": 754.68,
        "cashPnl": 26.07,
        "percentPnl": 3.578,
        "curPrice": 0.993,
        "title": "Bitcoin above $100,000 on December 31?",
        "slug": "bitcoin-above-100k-dec-31",
        "outcome": "Yes",
        "outcomeIndex": 0,
        "endDate": "2025-12-31",
    }


@pytest.fixture
def sample_opinion_raw() -> dict:
    """Raw position dict as returned by Opinion openapi (numbers as strings)."""
    return {
        "marketId": 4821,
        "tokenId": "tok_btc_no",
        "rootMarketTitle": "BTC above 100K on Dec 31?",
        "marketTitle": "",
        "outcomeSideEnum": "No",
        "marketStatusEnum": "Activated",
        "sharesOwned": "880.5",
        "avgEntryPrice": "0.04",
        "currentValueInQuoteToken": "14.09",
        "totalCostInQuoteToken": "35.22",
        "unrealizedPnl": "-21.13",
        "unrealizedPnlPercent": "-0.6",
        "feeRate": "",
        "tradeFeeRate": "0.02",
    }
