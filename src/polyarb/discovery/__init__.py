"""Venue position fetchers."""

from polyarb.discovery.opinion_client import OpinionClient
from polyarb.discovery.polymarket_client import PolymarketClient

__all__ = ["OpinionClient", "PolymarketClient"]
