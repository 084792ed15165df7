import pytest

from craftmatch.items import is_valid_input, parse_items
from craftmatch.similarity import OverlapMode, SimilarityScorer, similarity

PAIRS = [
    ("glue", "hot glue"),
    ("red paint", "paint brush"),
    ("blue red paint", "paint red blue"),
    ("ab", "a b"),
    ("glue", "scissors"),
    ("Cardboard Box!", "box"),
    ("", "glue"),
]


@pytest.mark.parametrize("value", ["glue", "Hot Glue", "t-shirt", "egg carton box", "!!!"])
def test_similarity_is_reflexive(value):
    assert similarity(value, value) == 1.0


@pytest.mark.parametrize("mode", list(OverlapMode))
def test_similarity_is_symmetric(mode):
    scorer = SimilarityScorer(mode)
    for left, right in PAIRS:
        assert scorer.similarity(left, right) == scorer.similarity(right, left)


def test_substring_and_exact_scores():
    assert similarity("GLUE", "glue!") == 1.0
    assert similarity("glue", "hot glue") == 0.8
    assert similarity("Cardboard Box!", "box") == 0.8


def test_proportional_overlap():
    assert similarity("red paint", "paint brush") == 0.5
    assert similarity("blue red paint", "paint red blue") == 0.7
    assert similarity("ab", "a b") == 0.7


def test_binary_overlap():
    scorer = SimilarityScorer("binary")
    assert scorer.overlap_mode is OverlapMode.BINARY
    assert scorer.similarity("red paint", "paint brush") == 0.6
    assert scorer.similarity("blue red paint", "paint red blue") == 0.6
    assert scorer("glue", "hot glue") == 0.8


def test_no_overlap_scores_zero():
    assert similarity("glue", "scissors") == 0.0
    assert similarity("", "") == 1.0


def test_empty_operand_is_a_substring():
    assert similarity("", "glue") == 0.8
    assert similarity("glue", "") == 0.8
    # punctuation-only items survive parsing and normalize to ""
    assert parse_items("!!") == ["!!"]
    assert is_valid_input(["!!"])
    assert similarity("!!", "glue") == 0.8


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        SimilarityScorer("levenshtein")
