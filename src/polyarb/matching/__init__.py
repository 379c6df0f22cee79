"""Title-matching engine: normalization, curated lookup, exact + fuzzy matching."""

from polyarb.matching.exact import find_opinion_group, find_poly_group, match_exact
from polyarb.matching.fuzzy import match_fuzzy
from polyarb.matching.lookup import LookupIndex, load_lookup_index, load_match_table
from polyarb.matching.matcher import match_positions
from polyarb.matching.text import extract_keywords, jaccard_similarity, normalize

__all__ = [
    "normalize",
    "extract_keywords",
    "jaccard_similarity",
    "LookupIndex",
    "load_match_table",
    "load_lookup_index",
    "find_poly_group",
    "find_opinion_group",
    "match_exact",
    "match_fuzzy",
    "match_positions",
]
