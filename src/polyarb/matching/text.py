"""Title normalization and keyword extraction.

두 거래소의 마켓 타이틀을 비교 가능한 형태로 정규화.
"""

from __future__ import annotations

import re

from polyarb.config import MIN_KEYWORD_LENGTH, STOP_WORDS

# 곧은/굽은 작은따옴표·큰따옴표 → '
_QUOTE_RE = re.compile("[‘’'“”\"]")
_NON_WORD_RE = re.compile(r"[^a-z0-9\s']")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Canonicalize a market title for comparison.

    lowercase → quotes unified to ``'`` → anything but ``[a-z0-9\\s']``
    becomes a space → whitespace collapsed and trimmed.

    Examples:
        >>> normalize("Will Trump win the 2028 U.S. Election?")
        'will trump win the 2028 u s election'
        >>> normalize("  Fed ’cuts’ -  March ")
        "fed 'cuts' march"
    """
    if not text:
        return ""
    text = text.lower()
    text = _QUOTE_RE.sub("'", text)
    text = _NON_WORD_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def extract_keywords(text: str) -> set[str]:
    """정규화 후 3글자 이상, 불용어 제외 토큰 집합."""
    return {
        word
        for word in normalize(text).split(" ")
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    }


def jaccard_similarity(a: set[str], b: set[str]) -> float:
    """|A ∩ B| / |A ∪ B|. 둘 다 비었으면 0."""
    if not a and not b:
        return 0.0
    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    return intersection / union if union else 0.0
