"""Heuristic string similarity used by the alias resolver and match engine.

Scores are substring and word-overlap based, not edit distance:

* identical after normalization -> 1.0
* one string contains the other -> 0.8
* at least one word pair where one word contains the other -> overlap score
* otherwise -> 0.0

The overlap score depends on :class:`OverlapMode`.
"""

from __future__ import annotations

from enum import Enum

from .text_utils import normalize_text, tokenize

EXACT_SCORE = 1.0
SUBSTRING_SCORE = 0.8
BINARY_OVERLAP_SCORE = 0.6
PROPORTIONAL_OVERLAP_CAP = 0.7


class OverlapMode(str, Enum):
    BINARY = "binary"
    PROPORTIONAL = "proportional"


def _overlap_count(words_a: list[str], words_b: list[str]) -> int:
    return sum(
        1
        for left in words_a
        for right in words_b
        if left in right or right in left
    )


class SimilarityScorer:
    def __init__(self, overlap_mode: OverlapMode | str = OverlapMode.PROPORTIONAL):
        self.overlap_mode = OverlapMode(overlap_mode)

    def similarity(self, left: str, right: str) -> float:
        norm_left = normalize_text(left)
        norm_right = normalize_text(right)
        if norm_left == norm_right:
            return EXACT_SCORE
        if norm_left in norm_right or norm_right in norm_left:
            return SUBSTRING_SCORE
        words_left = tokenize(norm_left)
        words_right = tokenize(norm_right)
        matches = _overlap_count(words_left, words_right)
        if not matches:
            return 0.0
        if self.overlap_mode is OverlapMode.BINARY:
            return BINARY_OVERLAP_SCORE
        return min(matches / max(len(words_left), len(words_right)), PROPORTIONAL_OVERLAP_CAP)

    __call__ = similarity


_DEFAULT_SCORER = SimilarityScorer()


def similarity(left: str, right: str) -> float:
    return _DEFAULT_SCORER.similarity(left, right)
