"""Data models for polyarb."""

from polyarb.models.match import MatchedPosition, MatchGroup, MatchMethod, MatchResult
from polyarb.models.position import OpinionPosition, PolyPosition, parse_float

__all__ = [
    "PolyPosition",
    "OpinionPosition",
    "parse_float",
    "MatchGroup",
    "MatchMethod",
    "MatchedPosition",
    "MatchResult",
]
